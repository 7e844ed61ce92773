from blockmanager.extensions import db
from blockmanager.models.block_region import BlockRegion

def compact_order(query, order_field="ordering", start=0):
    """
    Re-assigns sequential order values (start..N) for a scoped query.
    """
    model = query.column_descriptions[0]['entity']
    items = query.order_by(getattr(model, order_field).asc(), model.updated_at.desc()).all()

    for index, item in enumerate(items, start=start):
        setattr(item, order_field, index)

    db.session.flush()
    return items

def region_query(theme, region):
    return BlockRegion.query.filter_by(theme=theme, region=region)

def next_ordering(theme, region):
    """
    Ordering that appends a block at the bottom of a (theme, region).
    """
    max_ordering = db.session.query(db.func.max(BlockRegion.ordering))\
        .filter_by(theme=theme, region=region)\
        .scalar()
    return 0 if max_ordering is None else max_ordering + 1
