from typing import Any, Mapping
from flask import current_app
from blockmanager.extensions import db
from blockmanager.models.block import Block
from blockmanager.models.block_region import BlockRegion
from blockmanager.domain.reconciliation import compute_reordering
from blockmanager.domain.invariants.block import assert_region_ordering
from blockmanager.utils.order import compact_order, region_query
from blockmanager.utils.audit import log_action
from blockmanager.utils.transaction import transactional


def reorder_blocks(
    *,
    actor_id: str | None,
    regions: Mapping[str, Any] | None,
) -> int:
    """
    Apply a drag-and-drop ordering to region assignments.

    Responsibilities:
    - One atomic batch for the whole payload
    - Upsert keyed by (block, theme); unknown block ids are skipped
    - Re-compact and check every touched (theme, region)

    Returns the number of assignments written; 0 means the payload held
    nothing to reorder.
    """
    updates = compute_reordering(regions)
    if not updates:
        return 0

    block_ids = {u.block_id for u in updates}
    known = {
        block_id
        for (block_id,) in Block.query.with_entities(Block.id).filter(Block.id.in_(block_ids))
    }
    existing = {
        (r.block_id, r.theme): r
        for r in BlockRegion.query.filter(BlockRegion.block_id.in_(known)).all()
    }

    touched = set()
    written = 0

    with transactional():
        for update in updates:
            if update.block_id not in known:
                current_app.logger.warning("Skipping unknown block %s in reorder", update.block_id)
                continue

            assignment = existing.get((update.block_id, update.theme))
            if assignment is None:
                assignment = BlockRegion()
                assignment.block_id = update.block_id
                assignment.theme = update.theme
                db.session.add(assignment)
                existing[(update.block_id, update.theme)] = assignment
            else:
                touched.add((assignment.theme, assignment.region))

            assignment.region = update.region
            assignment.ordering = update.ordering
            touched.add((update.theme, update.region))
            written += 1

        db.session.flush()

        for theme, region in sorted(touched):
            assert_region_ordering(compact_order(region_query(theme, region)))

        log_action(
            action="block.reorder",
            entity_type="block",
            entity_id="*",
            actor_id=actor_id,
            payload={"count": written, "regions": [f"{t}/{r}" for t, r in sorted(touched)]},
        )

    return written
