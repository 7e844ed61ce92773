from flask import current_app
from blockmanager.extensions import db
from blockmanager.models.block import Block
from blockmanager.domain.lifecycle.block import assert_block_deletable
from blockmanager.utils.order import compact_order, region_query
from blockmanager.utils.audit import log_action
from blockmanager.utils.transaction import transactional


def delete_block(
    *,
    block: Block,
    actor_id: str | None,
) -> None:
    """
    Hard-delete a custom block together with its region assignments.

    Notes:
    - Plugin blocks are refused before anything touches the session
    - Regions the block occupied are re-compacted afterwards
    """
    assert_block_deletable(block)

    block_id = block.id
    vacated = [(r.theme, r.region) for r in block.regions]

    with transactional():
        db.session.delete(block)
        db.session.flush()

        for theme, region in vacated:
            compact_order(region_query(theme, region))

        log_action(
            action="block.delete",
            entity_type="block",
            entity_id=block_id,
            actor_id=actor_id,
            payload={"regions": [f"{theme}/{region}" for theme, region in vacated]},
        )

    current_app.logger.info("Block %s deleted", block_id)
