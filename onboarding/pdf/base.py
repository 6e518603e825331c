from abc import ABC, abstractmethod

from PIL import Image


class BasePdfRasterizer(ABC):
    """Contract for all PDF page rasterization adapters."""

    @abstractmethod
    def rasterize(self, pdf_bytes: bytes, zoom: float = 1.5) -> list[Image.Image]:
        """Render every page of a PDF into an RGB image, in page order.

        Args:
            pdf_bytes: Raw PDF file content.
            zoom: Scale relative to 72 dpi (1.5 renders at 108 dpi).

        Returns:
            One image per page; empty for a PDF without pages.

        Raises:
            PdfRasterizationError: if rendering fails for any reason.
        """
