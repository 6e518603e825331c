import io

import pdfplumber
from PIL import Image

from onboarding.pdf.base import BasePdfRasterizer
from onboarding.pdf.exceptions import PdfRasterizationError


class PdfPlumberAdapter(BasePdfRasterizer):
    """Rasterizes PDF pages using pdfplumber's page renderer."""

    def rasterize(self, pdf_bytes: bytes, zoom: float = 1.5) -> list[Image.Image]:
        resolution = round(72 * zoom)
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                return [
                    page.to_image(resolution=resolution).original.convert("RGB")
                    for page in pdf.pages
                ]
        except PdfRasterizationError:
            raise
        except Exception as exc:
            raise PdfRasterizationError(f"pdfplumber rasterization failed: {exc}") from exc
