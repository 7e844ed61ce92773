def normalize_role(role):
    return {
        "id": role.id,
        "name": role.name,
        "slug": role.slug
    }
