from onboarding.config.settings import Settings
from onboarding.pdf.base import BasePdfRasterizer
from onboarding.pdf.pdfplumber_adapter import PdfPlumberAdapter
from onboarding.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfRasterizerFactory:
    """Picks the page rasterizer named by ``settings.pdf_engine``."""

    ADAPTERS: dict[str, type[BasePdfRasterizer]] = {
        "pymupdf": PyMuPdfAdapter,
        "fitz": PyMuPdfAdapter,
        "pdfplumber": PdfPlumberAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfRasterizer:
        engine = settings.pdf_engine.strip().lower()
        try:
            return cls.ADAPTERS[engine]()
        except KeyError:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {sorted(cls.ADAPTERS)}"
            ) from None
