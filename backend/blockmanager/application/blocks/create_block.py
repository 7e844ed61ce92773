from typing import Any, Dict
from flask import current_app
from sqlalchemy.exc import IntegrityError
from blockmanager.extensions import db
from blockmanager.models.block import Block, block_columns
from blockmanager.domain.reconciliation import reconcile
from blockmanager.domain.lifecycle.block import CUSTOM_HANDLER
from blockmanager.domain.invariants.block import assert_single_region_per_theme, assert_settings_disjoint
from blockmanager.validators.block import validate_block
from blockmanager.utils.delta import next_delta
from blockmanager.utils.audit import log_action
from blockmanager.utils.transaction import transactional
from .assignments import apply_fields, apply_regions, apply_roles
from .exceptions import BlockPersistenceError, BlockValidationError


def create_block(
    *,
    actor_id: str | None,
    data: Dict[str, Any],
) -> Block:
    """
    Create a new custom block from submitted form data.

    Edge cases handled:
    - Unknown fields are stored in settings
    - Handler is always forced to "Block"
    - Validation errors are reported before anything is written
    - Constraint violations on save
    """
    columns = block_columns()
    reconciled = reconcile(data, columns)

    record = reconciled.to_record()
    record["handler"] = CUSTOM_HANDLER

    errors = validate_block(record, ruleset="custom")
    if errors:
        raise BlockValidationError(errors)

    block = Block()
    block.settings = {}
    block.locale = []
    apply_fields(block, reconciled)
    block.handler = CUSTOM_HANDLER
    apply_roles(block, reconciled)
    apply_regions(block, reconciled.regions)

    assert_single_region_per_theme(block)
    assert_settings_disjoint(block, columns)

    try:
        with transactional():
            block.delta = next_delta(CUSTOM_HANDLER)

            db.session.add(block)
            db.session.flush()  # ensures block.id is available

            log_action(
                action="block.create",
                entity_type="block",
                entity_id=block.id,
                actor_id=actor_id,
                payload={
                    "title": block.title,
                    "delta": block.delta,
                    "regions": [f"{r.theme}/{r.region}" for r in block.regions],
                },
            )

        current_app.logger.info("Block %s created (delta %s)", block.id, block.delta)
        return block

    except IntegrityError as exc:
        db.session.rollback()
        raise BlockPersistenceError("Block could not be created, please check your information.") from exc
