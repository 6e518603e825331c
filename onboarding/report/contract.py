"""Contract pages: HTML body + signature block, rasterised and sliced.

The contract is laid out once as a single tall page (the way a browser
would lay out a fixed-width container), rasterised, and the resulting image
is then spread over as many report pages as its height needs.
"""

import io
import math
import re
from dataclasses import dataclass
from datetime import date
from html.parser import HTMLParser
from xml.sax.saxutils import escape as xml_escape

from babel.dates import format_date
from PIL import Image
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle
from reportlab.pdfgen import canvas
from reportlab.platypus import Flowable, HRFlowable, Paragraph, Spacer
from reportlab.platypus import Image as FlowableImage

from onboarding.logging.logger import Log
from onboarding.pdf.base import BasePdfRasterizer
from onboarding.pdf.exceptions import PdfRasterizationError
from onboarding.report.document import ReportDocument
from onboarding.report.exceptions import ContractRenderError
from onboarding.report.layout import ReportLayout
from onboarding.report.painters import PageDecorator

CONTRACT_WIDTH = 700.0
CONTRACT_PADDING = 40.0
CONTRACT_ZOOM = 2.0
SIGNATURE_HEIGHT = 60.0
SIGNATURE_LINE_WIDTH = 300.0

WHITE = (255, 255, 255)
# Masks stop short of the content band so they never cover the first/last row of text.
MASK_INSET = 0.5

_ALIGNMENTS = {"left": TA_LEFT, "center": TA_CENTER, "right": TA_RIGHT, "justify": TA_JUSTIFY}
_WHITESPACE = re.compile(r"\s+")


def _build_styles() -> dict[str, ParagraphStyle]:
    body = ParagraphStyle(
        name="ContractBody",
        fontName="Times-Roman",
        fontSize=12,
        leading=18,
        spaceAfter=8,
    )
    return {
        "body": body,
        "h1": ParagraphStyle(name="ContractH1", parent=body, fontName="Times-Bold", fontSize=20, leading=30, spaceBefore=12),
        "h2": ParagraphStyle(name="ContractH2", parent=body, fontName="Times-Bold", fontSize=16, leading=24, spaceBefore=12),
        "h3": ParagraphStyle(name="ContractH3", parent=body, fontName="Times-Bold", fontSize=14, leading=21, spaceBefore=12),
        "h4": ParagraphStyle(name="ContractH4", parent=body, fontName="Times-Bold", fontSize=12, leading=18, spaceBefore=15),
        "li": ParagraphStyle(name="ContractItem", parent=body, leftIndent=20, spaceAfter=4),
        "date": ParagraphStyle(name="ContractDate", parent=body, alignment=TA_CENTER, fontName="Times-Bold"),
        "signer": ParagraphStyle(
            name="ContractSigner",
            parent=body,
            alignment=TA_CENTER,
            fontName="Helvetica-Bold",
            fontSize=14,
            leading=18,
            spaceAfter=2,
        ),
        "signer_detail": ParagraphStyle(
            name="ContractSignerDetail",
            parent=body,
            alignment=TA_CENTER,
            fontName="Helvetica",
            fontSize=12,
            leading=16,
        ),
    }


def _parse_inline_style(value: str) -> dict[str, str]:
    declarations: dict[str, str] = {}
    for chunk in value.split(";"):
        if ":" not in chunk:
            continue
        key, _, val = chunk.partition(":")
        declarations[key.strip().lower()] = val.strip().lower()
    return declarations


class _ContractHtmlParser(HTMLParser):
    """Small HTML -> reportlab flowables converter for contract templates.

    Supports p, div, h1-h4, b/strong, i/em, u, br, hr, ul/ol/li and the
    ``text-align`` / ``font-weight`` inline styles.
    """

    BLOCK_TAGS = ("p", "div", "h1", "h2", "h3", "h4", "li")
    INLINE_TAGS = {"b": "b", "strong": "b", "i": "i", "em": "i", "u": "u"}

    def __init__(self, styles: dict[str, ParagraphStyle]) -> None:
        super().__init__(convert_charrefs=True)
        self.flowables: list[Flowable] = []
        self._styles = styles
        self._buf: list[str] = []
        self._closers: list[str] = []
        self._blocks: list[tuple[ParagraphStyle, bool]] = [(styles["body"], False)]
        self._lists: list[int | None] = []
        self._item_prefix = ""

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        tag = tag.lower()
        attr_map = {k.lower(): (v or "") for k, v in attrs}

        if tag in self.INLINE_TAGS:
            self._buf.append(f"<{self.INLINE_TAGS[tag]}>")
            self._closers.append(f"</{self.INLINE_TAGS[tag]}>")
            return
        if tag == "br":
            self._buf.append("<br/>")
            return
        if tag == "hr":
            self._flush()
            self.flowables.append(HRFlowable(width="100%", thickness=0.5, color=colors.grey))
            return
        if tag == "ul":
            self._flush()
            self._lists.append(None)
            return
        if tag == "ol":
            self._flush()
            self._lists.append(0)
            return
        if tag in self.BLOCK_TAGS:
            self._flush()
            self._blocks.append(self._block_style(tag, attr_map.get("style", "")))
            if tag == "li":
                self._item_prefix = self._bullet()

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        if tag in self.INLINE_TAGS:
            if self._closers:
                self._buf.append(self._closers.pop())
            return
        if tag in ("ul", "ol"):
            self._flush()
            if self._lists:
                self._lists.pop()
            return
        if tag in self.BLOCK_TAGS:
            self._flush()
            if len(self._blocks) > 1:
                self._blocks.pop()
            if tag == "li":
                self._item_prefix = ""

    def handle_data(self, data: str) -> None:
        self._buf.append(xml_escape(_WHITESPACE.sub(" ", data)))

    def close(self) -> None:
        super().close()
        self._flush()

    def _block_style(self, tag: str, inline_style: str) -> tuple[ParagraphStyle, bool]:
        parent, parent_bold = self._blocks[-1]
        base = self._styles.get(tag, parent) if tag != "div" else parent
        declarations = _parse_inline_style(inline_style)
        bold = parent_bold or declarations.get("font-weight") in ("bold", "700", "bolder")
        alignment = _ALIGNMENTS.get(declarations.get("text-align", ""))
        if alignment is None:
            return (base, bold)
        return (ParagraphStyle(name=f"{base.name}-{alignment}", parent=base, alignment=alignment), bold)

    def _bullet(self) -> str:
        if not self._lists or self._lists[-1] is None:
            return "• "
        self._lists[-1] += 1
        return f"{self._lists[-1]}. "

    def _flush(self) -> None:
        while self._closers:
            self._buf.append(self._closers.pop())
        text = "".join(self._buf).strip()
        self._buf = []
        if not text or text == "<br/>":
            return
        # A list item's bullet goes on its first non-empty paragraph.
        if self._item_prefix:
            text = self._item_prefix + text
            self._item_prefix = ""
        style, bold = self._blocks[-1]
        if bold:
            text = f"<b>{text}</b>"
        self.flowables.append(Paragraph(text, style))


def html_to_flowables(html: str, styles: dict[str, ParagraphStyle] | None = None) -> list[Flowable]:
    parser = _ContractHtmlParser(styles or _build_styles())
    parser.feed(html or "")
    parser.close()
    return parser.flowables


@dataclass(frozen=True, eq=False)
class SignatureBlock:
    """Closing block printed under the contract body."""

    city: str
    signed_on: date
    signer_name: str
    signer_role: str
    signer_document: str
    counterparty: str
    signature: Image.Image | None = None

    @property
    def dated_line(self) -> str:
        return f"{self.city}, {format_date(self.signed_on, format='long', locale='pt_BR')}"


def signature_flowables(block: SignatureBlock, styles: dict[str, ParagraphStyle]) -> list[Flowable]:
    flowables: list[Flowable] = [
        Spacer(1, 40),
        Paragraph(xml_escape(block.dated_line), styles["date"]),
        Spacer(1, 40),
    ]

    if block.signature is not None:
        png = io.BytesIO()
        block.signature.save(png, format="PNG")
        png.seek(0)
        width = block.signature.width * SIGNATURE_HEIGHT / block.signature.height
        flowables.append(FlowableImage(png, width=width, height=SIGNATURE_HEIGHT))
        flowables.append(Spacer(1, 5))
    else:
        flowables.append(Spacer(1, SIGNATURE_HEIGHT + 5))

    flowables.extend([
        HRFlowable(width=SIGNATURE_LINE_WIDTH, thickness=1, color=colors.black, spaceAfter=5),
        Paragraph(xml_escape(block.signer_name or "Nome do Responsável"), styles["signer"]),
        Paragraph(
            xml_escape(f"{block.signer_role} - Documento: {block.signer_document or '-'}"),
            styles["signer_detail"],
        ),
        Spacer(1, 50),
        Spacer(1, 40),
        HRFlowable(width=SIGNATURE_LINE_WIDTH, thickness=1, color=colors.black, spaceAfter=5),
        Paragraph(xml_escape(block.counterparty), styles["signer"]),
    ])
    return flowables


class ContractRasterizer:
    """Lays the contract out on one tall page and rasterises it to an image."""

    def __init__(self, rasterizer: BasePdfRasterizer, zoom: float = CONTRACT_ZOOM) -> None:
        self._rasterizer = rasterizer
        self._zoom = zoom

    def render_pdf(self, html: str, block: SignatureBlock) -> bytes:
        styles = _build_styles()
        flowables = html_to_flowables(html, styles) + signature_flowables(block, styles)
        page_width = CONTRACT_WIDTH + 2 * CONTRACT_PADDING

        measured: list[tuple[Flowable, float, float, float, float]] = []
        total = 2 * CONTRACT_PADDING
        for flowable in flowables:
            width, height = flowable.wrap(CONTRACT_WIDTH, 1_000_000)
            before, after = flowable.getSpaceBefore(), flowable.getSpaceAfter()
            measured.append((flowable, width, height, before, after))
            total += before + height + after

        buf = io.BytesIO()
        pdf = canvas.Canvas(buf, pagesize=(page_width, total))
        y = total - CONTRACT_PADDING
        for flowable, width, height, before, after in measured:
            y -= before + height
            flowable.drawOn(pdf, CONTRACT_PADDING, y, _sW=CONTRACT_WIDTH - width)
            y -= after
        pdf.showPage()
        pdf.save()
        return buf.getvalue()

    def rasterize(self, html: str, block: SignatureBlock) -> Image.Image:
        """Raises ContractRenderError when the layout or rasterisation fails."""
        try:
            pdf_bytes = self.render_pdf(html, block)
            pages = self._rasterizer.rasterize(pdf_bytes, zoom=self._zoom)
        except PdfRasterizationError as exc:
            raise ContractRenderError(f"Contract rasterization failed: {exc}") from exc
        except (ValueError, OSError) as exc:
            raise ContractRenderError(f"Contract layout failed: {exc}") from exc

        if len(pages) != 1:
            raise ContractRenderError(f"Expected one contract raster, got {len(pages)}")
        Log.debug("Contract rasterized", width=pages[0].width, height=pages[0].height)
        return pages[0]


def contract_page_count(total_height: float, usable_height: float) -> int:
    """``ceil(total / usable)``, tolerant of float noise on exact multiples."""
    if usable_height <= 0:
        raise ValueError("usable_height must be positive")
    if total_height <= 0:
        return 0
    return math.ceil(round(total_height / usable_height, 9))


class ContractPainter:
    """Slices the contract raster across pages, confined to the content band."""

    def __init__(
        self,
        document: ReportDocument,
        layout: ReportLayout,
        decorator: PageDecorator,
        clipping: bool = True,
    ) -> None:
        self._document = document
        self._layout = layout
        self._decorator = decorator
        self._clipping = clipping

    def scaled_height(self, image: Image.Image) -> float:
        return image.height * self._layout.content_width / image.width

    def paint(self, image: Image.Image) -> int:
        """Append the contract pages and return how many were added."""
        layout = self._layout
        total_height = self.scaled_height(image)
        usable = layout.usable_height
        page_count = contract_page_count(total_height, usable)

        for index in range(page_count):
            self._document.add_page()
            page_number = self._document.page_count
            y = layout.content_top - index * usable

            self._decorator.draw_header()
            self._decorator.draw_footer(page_number)
            if self._clipping:
                band = (0.0, layout.content_top, layout.page_width, usable)
                self._document.image(
                    image, layout.settings.margin_left, y, layout.content_width, total_height, clip=band
                )
            else:
                self._document.image(
                    image, layout.settings.margin_left, y, layout.content_width, total_height
                )
                self._mask_and_redraw(page_number)

        Log.info("Contract painted", pages=page_count, height_mm=round(total_height, 2))
        return page_count

    def _mask_and_redraw(self, page_number: int) -> None:
        layout = self._layout
        settings = layout.settings
        doc = self._document
        doc.set_fill_color(WHITE)
        doc.fill_rect(0, 0, layout.page_width, layout.content_top - MASK_INSET)
        self._decorator.draw_header()
        doc.fill_rect(
            0,
            layout.max_content_y + MASK_INSET,
            layout.page_width,
            settings.margin_bottom + settings.footer_height,
        )
        self._decorator.draw_footer(page_number)
