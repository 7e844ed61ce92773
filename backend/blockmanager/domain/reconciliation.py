# blockmanager/domain/reconciliation.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional


@dataclass(frozen=True)
class RegionAssignment:
    """
    Placement of a block inside one theme.

    `id` is set when the assignment already exists and must be updated in
    place; `None` means insert. `block_id` and `ordering` are only filled in
    by reorder updates.
    """
    theme: str
    region: str
    id: Optional[str] = None
    block_id: Optional[str] = None
    ordering: Optional[int] = None

    @property
    def is_new(self) -> bool:
        return self.id is None


@dataclass
class ReconciledData:
    fields: Dict[str, Any] = field(default_factory=dict)
    settings: Dict[str, Any] = field(default_factory=dict)
    regions: List[RegionAssignment] = field(default_factory=list)
    # True once the submission carried settings, even an empty mapping
    settings_submitted: bool = False

    def to_record(self) -> Dict[str, Any]:
        """Flat record handed to validators and persisted onto a Block."""
        record = dict(self.fields)
        record.setdefault("settings", dict(self.settings))
        record["region"] = [
            {"theme": a.theme, "region": a.region, "id": a.id}
            for a in self.regions
        ]
        return record


def index_regions_by_theme(block: Any) -> Dict[str, Any]:
    """
    theme -> assignment for an existing block.

    When a block somehow holds several assignments for one theme the first
    one in iteration order wins.
    """
    index: Dict[str, Any] = {}
    for assignment in getattr(block, "regions", None) or ():
        index.setdefault(assignment.theme, assignment)
    return index


def reconcile(
    submitted: Mapping[str, Any],
    known_columns: Iterable[str],
    existing_block: Any = None,
) -> ReconciledData:
    """
    Split a submitted block form into columns, settings and region assignments.

    Rules:
    - "region" is a theme -> region mapping; one assignment per pair, reusing
      the identity of the existing block's assignment for that theme
    - "settings" given as a mapping replaces the settings collected so far
    - known columns are copied as-is
    - everything else is folded into settings under the same key

    Submission order is preserved, so a later key overwrites an earlier one.
    """
    columns = set(known_columns)
    existing = index_regions_by_theme(existing_block) if existing_block is not None else {}
    data = ReconciledData()

    for name, value in submitted.items():
        if name == "region":
            for theme, region in (value or {}).items():
                current = existing.get(theme)
                data.regions.append(
                    RegionAssignment(
                        theme=theme,
                        region=region,
                        id=current.id if current is not None else None,
                    )
                )
        elif name == "settings" and name in columns and isinstance(value, Mapping):
            data.settings = dict(value)
            data.settings_submitted = True
        elif name in columns:
            data.fields[name] = value
        else:
            data.settings[name] = value
            data.settings_submitted = True

    return data


def compute_reordering(payload: Optional[Mapping[str, Mapping[str, Iterable[str]]]]) -> List[RegionAssignment]:
    """
    Turn a drag-and-drop payload (theme -> region -> ordered block ids) into
    ordering updates, numbered 0..N-1 per (theme, region).

    An empty list means there is nothing to reorder.
    """
    if not payload:
        return []

    updates: List[RegionAssignment] = []
    for theme, regions in payload.items():
        for region, block_ids in (regions or {}).items():
            for ordering, block_id in enumerate(block_ids or ()):
                updates.append(
                    RegionAssignment(
                        theme=theme,
                        region=region,
                        block_id=block_id,
                        ordering=ordering,
                    )
                )
    return updates
