from PIL import Image

from onboarding.forms.models import UploadedDocument
from onboarding.logging.logger import Log
from onboarding.pdf.base import BasePdfRasterizer
from onboarding.pdf.exceptions import PdfRasterizationError
from onboarding.report.document import ReportDocument
from onboarding.report.exceptions import DocumentRenderError
from onboarding.report.images import decode_image
from onboarding.report.layout import ReportLayout
from onboarding.report.models import RenderCursor
from onboarding.report.painters import BLACK, PageDecorator

CAPTION_GREY = (120, 120, 120)

LABEL_ADVANCE = 10.0
PLACEHOLDER_ADVANCE = 6.0

EMPTY_PDF_PLACEHOLDER = "[PDF vazio ou ilegível]"
IMAGE_ERROR_PLACEHOLDER = "[Erro ao processar imagem]"
PDF_ERROR_PLACEHOLDER = "[Erro ao renderizar arquivo PDF]"


def unsupported_placeholder(name: str) -> str:
    return f"[Arquivo: {name} - Formato não suportado para visualização]"


class DocumentCompositor:
    """Appends one or more pages per uploaded file.

    Files are deduplicated by their identity tuple for the lifetime of the
    compositor, which is one report assembly.
    """

    def __init__(
        self,
        document: ReportDocument,
        layout: ReportLayout,
        decorator: PageDecorator,
        cursor: RenderCursor,
        rasterizer: BasePdfRasterizer,
        zoom: float = 1.5,
    ) -> None:
        self._document = document
        self._layout = layout
        self._decorator = decorator
        self._cursor = cursor
        self._rasterizer = rasterizer
        self._zoom = zoom
        self._seen: set[tuple[str, int, int]] = set()

    @property
    def processed(self) -> frozenset[tuple[str, int, int]]:
        return frozenset(self._seen)

    def process(self, upload: UploadedDocument | None, label: str) -> None:
        if upload is None:
            return
        if upload.identity in self._seen:
            Log.debug("Skipping duplicate upload", name=upload.name, label=label)
            return
        self._seen.add(upload.identity)

        self._start_labelled_page(label)

        if upload.is_image:
            self._draw_image_upload(upload)
        elif upload.is_pdf:
            self._draw_pdf_upload(upload, label)
        else:
            self._placeholder(unsupported_placeholder(upload.name), style="italic")

    def _draw_image_upload(self, upload: UploadedDocument) -> None:
        try:
            image = decode_image(upload.content)
        except DocumentRenderError as exc:
            Log.warning(f"Could not decode uploaded image: {exc}", name=upload.name)
            self._placeholder(IMAGE_ERROR_PLACEHOLDER)
            return
        self._draw_fitted(image)

    def _draw_pdf_upload(self, upload: UploadedDocument, label: str) -> None:
        try:
            pages = self._rasterizer.rasterize(upload.content, zoom=self._zoom)
        except PdfRasterizationError as exc:
            Log.warning(f"Could not rasterize uploaded PDF: {exc}", name=upload.name)
            self._placeholder(PDF_ERROR_PLACEHOLDER, style="italic")
            return

        if not pages:
            self._placeholder(EMPTY_PDF_PLACEHOLDER)
            return

        for index, page in enumerate(pages):
            if index > 0:
                self._start_labelled_page(f"{label} (Página {index + 1})")
            self._draw_fitted(page)

    def _start_labelled_page(self, label: str) -> None:
        self._decorator.start_page(self._cursor)
        doc = self._document
        doc.set_font("bold", 12)
        doc.set_text_color(BLACK)
        doc.text(label, self._layout.settings.margin_left, self._cursor.y)
        self._cursor.y += LABEL_ADVANCE

    def _draw_fitted(self, image: Image.Image) -> None:
        width, height = fit_within(
            image.width,
            image.height,
            self._layout.content_width,
            self._layout.max_content_y - self._cursor.y,
        )
        x = self._layout.settings.margin_left + (self._layout.content_width - width) / 2
        self._document.image(image, x, self._cursor.y, width, height)
        self._cursor.y += height

    def _placeholder(self, text: str, style: str = "normal") -> None:
        doc = self._document
        doc.set_font(style, 10)
        doc.text(text, self._layout.settings.margin_left, self._cursor.y)
        self._cursor.y += PLACEHOLDER_ADVANCE
        doc.set_font("normal", 10)


def fit_within(
    pixel_width: int,
    pixel_height: int,
    max_width: float,
    max_height: float,
) -> tuple[float, float]:
    """Scale to max_width, then shrink both axes if the height overflows."""
    width = max_width
    height = pixel_height * width / pixel_width
    if height > max_height:
        height = max(max_height, 0.0)
        width = pixel_width * height / pixel_height
    return (width, height)


class SignatureCompositor:
    """Stamps the signature above the footer band of an earlier page."""

    WIDTH = 35.0
    CAPTION = "Assinatura Digital"

    def __init__(self, document: ReportDocument, layout: ReportLayout) -> None:
        self._document = document
        self._layout = layout

    def place(self, signature: Image.Image, page_number: int = 1) -> tuple[float, float, float, float]:
        """Draw the signature on ``page_number`` and return its (x, y, w, h) box.

        The document's current page is restored afterwards.
        """
        doc = self._document
        previous_page = doc.current_page
        doc.set_page(page_number)

        width = self.WIDTH
        height = signature.height * width / signature.width
        x = self._layout.right_edge - width
        y = self._layout.max_content_y - height - 2

        doc.image(signature, x, y, width, height)
        doc.set_font("normal", 6)
        doc.set_text_color(CAPTION_GREY)
        doc.text(self.CAPTION, x + width / 2, y + height + 2, align="center")
        doc.set_text_color(BLACK)
        doc.set_font("normal", 10)

        doc.set_page(previous_page)
        return (x, y, width, height)
