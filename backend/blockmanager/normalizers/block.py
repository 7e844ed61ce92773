from .region import normalize_region

def normalize_block(block, admin=False):
    base = {
        "id": block.id,
        "handler": block.handler,
        "delta": block.delta,
        "title": block.title,
        "description": block.description,
        "status": bool(block.status),
        "regions": [normalize_region(r) for r in block.regions]
    }

    if admin:
        base["copy_id"] = block.copy_id
        base["created_at"] = block.created_at.isoformat() if block.created_at else None
        base["updated_at"] = block.updated_at.isoformat() if block.updated_at else None

    return base

def normalize_block_form(block):
    """
    Block values as shown in the edit form.

    Settings are exposed as top-level values next to the columns; a setting
    never hides a column of the same name.
    """
    data = {
        "id": block.id,
        "copy_id": block.copy_id,
        "handler": block.handler,
        "delta": block.delta,
        "title": block.title,
        "description": block.description,
        "body": block.body,
        "visibility": block.visibility,
        "pages": block.pages,
        "locale": list(block.locale or []),
        "status": bool(block.status),
        "settings": dict(block.settings or {}),
        "roles": [role.id for role in block.roles],
        "region": {r.theme: r.region for r in reversed(block.regions)},
        "updated_at": block.updated_at.isoformat() if block.updated_at else None,
    }

    for key, value in (block.settings or {}).items():
        data.setdefault(key, value)

    return data
