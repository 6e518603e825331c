from abc import ABC, abstractmethod

from onboarding.extraction.models import ExtractionResult
from onboarding.forms.models import UploadedDocument


class BaseExtractor(ABC):
    """Contract for all document extraction adapters."""

    @abstractmethod
    def extract(self, documents: list[UploadedDocument]) -> ExtractionResult:
        """Read questionnaire fields from uploaded identity/license documents.

        Args:
            documents: Uploads in slot order; images and PDFs are supported.

        Returns:
            ExtractionResult holding only the non-empty values found.

        Raises:
            ExtractionError: on any failure.
        """
