def normalize_region(assignment):
    return {
        "id": assignment.id,
        "theme": assignment.theme,
        "region": assignment.region,
        "ordering": assignment.ordering
    }
