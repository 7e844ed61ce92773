from typing import Any, Dict, List
from blockmanager.models.block import Block
from blockmanager.models.block_region import BlockRegion
from blockmanager.normalizers.block import normalize_block
from blockmanager.utils.themes import back_theme, front_theme


def blocks_in_theme(theme: str) -> Dict[str, List[Dict[str, Any]]]:
    """
    Blocks placed in a theme, grouped by region and ordered top to bottom.
    """
    assignments = (
        BlockRegion.query
        .filter_by(theme=theme)
        .order_by(BlockRegion.region.asc(), BlockRegion.ordering.asc())
        .all()
    )

    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for assignment in assignments:
        item = normalize_block(assignment.block, admin=True)
        item["ordering"] = assignment.ordering
        grouped.setdefault(assignment.region, []).append(item)
    return grouped


def unused_blocks() -> List[Block]:
    """Blocks not placed in any region of the front or back theme."""
    themes = [t for t in (front_theme(), back_theme()) if t]
    return (
        Block.query
        .filter(~Block.regions.any(BlockRegion.theme.in_(themes)))
        .order_by(Block.created_at.asc())
        .all()
    )


def list_blocks() -> Dict[str, Any]:
    return {
        "front": {"theme": front_theme(), "regions": blocks_in_theme(front_theme())},
        "back": {"theme": back_theme(), "regions": blocks_in_theme(back_theme())},
        "unused": [normalize_block(b, admin=True) for b in unused_blocks()],
    }
