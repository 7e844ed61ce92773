from flask import request, abort
from datetime import timezone
from dateutil.parser import parse


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def enforce_optimistic_lock(entity):
    """
    Enforces optimistic locking using the If-Unmodified-Since header.
    Raises 409 Conflict if the block has been modified since.

    HTTP dates carry whole seconds only, so sub-second precision of the
    stored timestamp is ignored.
    """
    client_ts = request.headers.get("If-Unmodified-Since")
    if not client_ts:
        return  # No optimistic lock requested

    try:
        client_ts = normalize_ts(parse(client_ts))
    except (ValueError, OverflowError):
        abort(400, description="Invalid If-Unmodified-Since header")

    if entity.updated_at is None:
        return

    server_ts = normalize_ts(entity.updated_at).replace(microsecond=0)

    if server_ts > client_ts:
        abort(
            409,
            description="Conflict detected. Block has been modified."
        )
