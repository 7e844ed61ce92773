from blockmanager.models.block import Block

def next_delta(handler):
    """
    Next free delta for blocks sharing a handler.

    Only numeric deltas take part; plugins may use named deltas
    ("main-menu") which are left alone.
    """
    deltas = [
        int(delta)
        for (delta,) in Block.query.with_entities(Block.delta).filter_by(handler=handler)
        if delta is not None and str(delta).isdigit()
    ]
    return str(max(deltas) + 1) if deltas else "1"
