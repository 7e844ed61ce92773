# blockmanager/application/blocks/assignments.py
from typing import Any, Dict, Iterable, List, Tuple

from blockmanager.domain.reconciliation import ReconciledData, RegionAssignment
from blockmanager.models.block import Block
from blockmanager.models.block_region import BlockRegion
from blockmanager.models.role import Role
from blockmanager.utils.order import next_ordering

# Columns never written from a submitted form
PROTECTED_FIELDS = {"id", "handler", "copy_id", "delta", "created_at", "updated_at"}


def apply_fields(block: Block, data: ReconciledData) -> List[str]:
    """
    Copy reconciled columns and settings onto a block.

    Returns the names of the fields that actually changed.
    """
    changed_fields: List[str] = []

    for field, value in data.fields.items():
        if field in PROTECTED_FIELDS or field in ("roles", "settings"):
            continue
        if getattr(block, field) != value:
            setattr(block, field, value)
            changed_fields.append(field)

    if data.settings_submitted and (block.settings or {}) != data.settings:
        block.settings = dict(data.settings)
        changed_fields.append("settings")

    return changed_fields


def apply_roles(block: Block, data: ReconciledData) -> bool:
    if "roles" not in data.fields:
        return False

    role_ids = list(data.fields["roles"] or [])
    roles = Role.query.filter(Role.id.in_(role_ids)).all() if role_ids else []

    if {r.id for r in roles} == {r.id for r in block.roles}:
        return False

    block.roles = roles
    return True


def apply_regions(block: Block, assignments: Iterable[RegionAssignment]) -> Tuple[bool, List[Tuple[str, str]]]:
    """
    Persist reconciled region assignments onto a block.

    - assignment with identity: updated in place, moved to the bottom of its
      new region when the region changes
    - assignment without identity: inserted at the bottom of its region
    - blank region: the block leaves that theme

    Returns (changed, vacated) where vacated lists the (theme, region) pairs
    the block left and that need compacting.
    """
    current: Dict[Any, BlockRegion] = {r.id: r for r in block.regions if r.id}
    vacated: List[Tuple[str, str]] = []
    changed = False

    for assignment in assignments:
        existing = None if assignment.is_new else current.get(assignment.id)

        if not assignment.region:
            if existing is not None:
                vacated.append((existing.theme, existing.region))
                block.regions.remove(existing)
                changed = True
            continue

        if existing is None:
            ordering = next_ordering(assignment.theme, assignment.region)
            region = BlockRegion()
            region.theme = assignment.theme
            region.region = assignment.region
            region.ordering = ordering
            block.regions.append(region)
            changed = True
        elif existing.region != assignment.region:
            ordering = next_ordering(assignment.theme, assignment.region)
            vacated.append((existing.theme, existing.region))
            existing.region = assignment.region
            existing.ordering = ordering
            changed = True

    return changed, vacated
