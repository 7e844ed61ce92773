class InvariantViolation(Exception):
    """Raised when a block or its placements break a domain rule."""
