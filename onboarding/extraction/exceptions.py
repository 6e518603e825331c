class ExtractionError(Exception):
    """Raised when document data extraction fails."""


class ExtractionValidationError(ExtractionError):
    """Raised when the extracted payload does not match the expected shape."""


class ExtractionNetworkError(ExtractionError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
