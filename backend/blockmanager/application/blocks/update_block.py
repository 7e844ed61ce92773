from typing import Any, Dict
from sqlalchemy.exc import IntegrityError
from blockmanager.extensions import db
from blockmanager.models.block import Block, block_columns
from blockmanager.domain.reconciliation import reconcile
from blockmanager.domain.lifecycle.block import CUSTOM_HANDLER
from blockmanager.domain.invariants.block import assert_single_region_per_theme, assert_settings_disjoint
from blockmanager.validators.block import validate_block
from blockmanager.utils.order import compact_order, region_query
from blockmanager.utils.audit import log_action
from blockmanager.utils.transaction import transactional
from .assignments import apply_fields, apply_regions, apply_roles
from .exceptions import BlockPersistenceError, BlockValidationError


def update_block(
    *,
    block: Block,
    actor_id: str | None,
    data: Dict[str, Any],
) -> Block:
    """
    Patch an existing block with submitted form data.

    Design rules:
    - id and handler are never changed from a form
    - region assignments for a theme already in use keep their identity
    - plugin blocks are validated with the default ruleset plus their
      handler's own rules; custom blocks with the custom ruleset
    - partial edits are accepted; title and body are only checked when sent
    """
    columns = block_columns()
    reconciled = reconcile(data, columns, existing_block=block)

    record = reconciled.to_record()
    record["handler"] = block.handler

    ruleset = "custom" if block.handler == CUSTOM_HANDLER else "default"
    errors = validate_block(record, ruleset=ruleset, handler=block.handler, new_record=False)
    if errors:
        raise BlockValidationError(errors)

    try:
        with transactional():
            changed_fields = apply_fields(block, reconciled)

            if apply_roles(block, reconciled):
                changed_fields.append("roles")

            regions_changed, vacated = apply_regions(block, reconciled.regions)
            if regions_changed:
                changed_fields.append("region")

            assert_single_region_per_theme(block)
            assert_settings_disjoint(block, columns)

            db.session.flush()

            for theme, region in vacated:
                compact_order(region_query(theme, region))

            if changed_fields:
                log_action(
                    action="block.update",
                    entity_type="block",
                    entity_id=block.id,
                    actor_id=actor_id,
                    payload={"fields": changed_fields},
                )

        return block

    except IntegrityError as exc:
        db.session.rollback()
        raise BlockPersistenceError("Your information could not be saved, please try again.") from exc
