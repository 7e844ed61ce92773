from collections import defaultdict
from .exceptions import InvariantViolation

def assert_region_ordering(assignments):
    """
    Orderings inside every (theme, region) must run 0..N-1 without gaps.
    """
    grouped = defaultdict(list)
    for assignment in assignments:
        grouped[(assignment.theme, assignment.region)].append(assignment.ordering)

    for (theme, region), orders in grouped.items():
        expected = list(range(len(orders)))
        if sorted(orders) != expected:
            raise InvariantViolation(
                f"Block orderings in {theme}/{region} are not consecutive starting from 0: {orders}"
            )

def assert_single_region_per_theme(block):
    seen = set()
    for assignment in block.regions:
        if assignment.theme in seen:
            raise InvariantViolation(
                f"Block is assigned more than once to theme {assignment.theme}."
            )
        seen.add(assignment.theme)

def assert_settings_disjoint(block, columns):
    clashing = sorted(set(block.settings or {}) & set(columns))
    if clashing:
        raise InvariantViolation(
            f"Block settings must not shadow columns: {', '.join(clashing)}"
        )
