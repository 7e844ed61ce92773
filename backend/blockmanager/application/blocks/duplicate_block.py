from sqlalchemy.exc import IntegrityError
from blockmanager.extensions import db
from blockmanager.models.block import Block
from blockmanager.domain.lifecycle.block import duplicate
from blockmanager.utils.delta import next_delta
from blockmanager.utils.audit import log_action
from blockmanager.utils.transaction import transactional
from .exceptions import BlockPersistenceError


def duplicate_block(
    *,
    original: Block,
    actor_id: str | None,
) -> Block:
    """
    Copy a block into a new, unassigned block.

    The copy gets a fresh identity and delta, keeps the settings, and does
    not inherit region assignments or roles.
    """
    draft = duplicate(original)

    copy = Block()
    for field, value in draft.items():
        setattr(copy, field, value)

    try:
        with transactional():
            copy.delta = next_delta(copy.handler)

            db.session.add(copy)
            db.session.flush()

            log_action(
                action="block.duplicate",
                entity_type="block",
                entity_id=copy.id,
                actor_id=actor_id,
                payload={"copy_id": original.id, "delta": copy.delta},
            )

        return copy

    except IntegrityError as exc:
        db.session.rollback()
        raise BlockPersistenceError("Block could not be duplicated, please try again.") from exc
