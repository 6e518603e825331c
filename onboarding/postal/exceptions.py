class PostalLookupError(Exception):
    """Raised when the postal-code service cannot be reached or answers garbage."""
