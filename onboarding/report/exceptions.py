class ReportError(Exception):
    """Base exception for all report-related errors."""


class ReportSettingsError(ReportError):
    """Raised when report settings leave no usable room on the page."""


class DocumentRenderError(ReportError):
    """Raised when a single uploaded file cannot be decoded for the report."""


class ContractRenderError(ReportError):
    """Raised when the contract layout cannot be rasterized."""


class ReportGenerationError(ReportError):
    """Raised once by the assembler when the whole report has to be abandoned."""
