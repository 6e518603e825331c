import pymupdf
from PIL import Image

from onboarding.pdf.base import BasePdfRasterizer
from onboarding.pdf.exceptions import PdfRasterizationError


class PyMuPdfAdapter(BasePdfRasterizer):
    """Rasterizes PDF pages using PyMuPDF."""

    def rasterize(self, pdf_bytes: bytes, zoom: float = 1.5) -> list[Image.Image]:
        try:
            matrix = pymupdf.Matrix(zoom, zoom)
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages: list[Image.Image] = []
                for page in doc:
                    pix = page.get_pixmap(matrix=matrix, alpha=False)
                    pages.append(Image.frombytes("RGB", (pix.width, pix.height), pix.samples))
            return pages
        except PdfRasterizationError:
            raise
        except Exception as exc:
            raise PdfRasterizationError(f"pymupdf rasterization failed: {exc}") from exc
