from onboarding.extraction.base import BaseExtractor
from onboarding.extraction.extractor import DocumentExtractor
from onboarding.extraction.factory import ExtractorFactory
from onboarding.extraction.merge import apply_extraction

__all__ = ["BaseExtractor", "DocumentExtractor", "ExtractorFactory", "apply_extraction"]
