class DuplicateInsertError(Exception):
    """Raised when an insert violates a unique index."""
