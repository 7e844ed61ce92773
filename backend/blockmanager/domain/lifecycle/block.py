from typing import Any, Dict

from blockmanager.domain.invariants.exceptions import InvariantViolation

# Handler of blocks created through the admin; every other handler is a plugin
CUSTOM_HANDLER = "Block"

# Columns a duplicate never inherits
NOT_COPIED = ("id", "created_at", "updated_at")


def can_delete(block) -> bool:
    return block.handler == CUSTOM_HANDLER


def assert_block_deletable(block) -> None:
    """
    Guards deletion. Plugin blocks are managed by their plugin and can
    never be removed through the admin.
    """
    if not can_delete(block):
        raise InvariantViolation(
            f"Only custom blocks can be deleted; block is handled by {block.handler}."
        )


def duplicate(original) -> Dict[str, Any]:
    """
    Build the data for a copy of `original`.

    The copy keeps columns and settings, points back to its source through
    copy_id and starts unassigned: no identity, no delta, no regions, no roles.
    """
    draft = {
        name: value
        for name, value in original.to_dict().items()
        if name not in NOT_COPIED
    }
    draft["settings"] = dict(original.settings or {})
    draft["locale"] = list(original.locale or [])
    draft["copy_id"] = original.id
    draft["delta"] = None
    return draft
