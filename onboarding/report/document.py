"""Recorded drawing surface for the report.

Pages keep their drawing operations until ``render`` replays them onto a
reportlab canvas. Recording first lets the assembler go back to an earlier
page (the cover signature) after later pages exist, which a streaming
canvas cannot do.
"""

import io
from collections.abc import Sequence
from dataclasses import dataclass

from PIL import Image
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

Color = tuple[int, int, int]

FONTS: dict[str, str] = {
    "normal": "Helvetica",
    "bold": "Helvetica-Bold",
    "italic": "Helvetica-Oblique",
}

LINE_HEIGHT_FACTOR = 1.15
_PT_TO_MM = 25.4 / 72.0


@dataclass(frozen=True)
class TextOp:
    text: str
    x: float
    y: float
    font: str
    size: float
    color: Color
    align: str = "left"


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Color
    width: float


@dataclass(frozen=True)
class RectOp:
    x: float
    y: float
    width: float
    height: float
    color: Color


@dataclass(frozen=True, eq=False)
class ImageOp:
    image: Image.Image
    x: float
    y: float
    width: float
    height: float
    clip: tuple[float, float, float, float] | None = None


DrawOp = TextOp | LineOp | RectOp | ImageOp


class ReportDocument:
    """Multi-page surface measured in millimetres from the top-left corner."""

    def __init__(self, page_width: float, page_height: float) -> None:
        self.page_width = page_width
        self.page_height = page_height
        self._pages: list[list[DrawOp]] = [[]]
        self._current = 0
        self._font = FONTS["normal"]
        self._font_size = 10.0
        self._text_color: Color = (0, 0, 0)
        self._draw_color: Color = (0, 0, 0)
        self._fill_color: Color = (255, 255, 255)
        self._line_width = 0.2

    @property
    def page_count(self) -> int:
        return len(self._pages)

    @property
    def current_page(self) -> int:
        """1-based number of the page drawing calls go to."""
        return self._current + 1

    def ops(self, page_number: int) -> list[DrawOp]:
        return list(self._pages[page_number - 1])

    def texts(self, page_number: int) -> list[TextOp]:
        return [op for op in self._pages[page_number - 1] if isinstance(op, TextOp)]

    def images(self, page_number: int) -> list[ImageOp]:
        return [op for op in self._pages[page_number - 1] if isinstance(op, ImageOp)]

    def add_page(self) -> None:
        self._pages.append([])
        self._current = len(self._pages) - 1

    def set_page(self, page_number: int) -> None:
        if not 1 <= page_number <= len(self._pages):
            raise IndexError(f"Page {page_number} does not exist ({len(self._pages)} pages)")
        self._current = page_number - 1

    def set_font(self, style: str = "normal", size: float | None = None) -> None:
        self._font = FONTS[style]
        if size is not None:
            self._font_size = size

    def set_text_color(self, color: Color) -> None:
        self._text_color = color

    def set_draw_color(self, color: Color) -> None:
        self._draw_color = color

    def set_fill_color(self, color: Color) -> None:
        self._fill_color = color

    def set_line_width(self, width: float) -> None:
        self._line_width = width

    def split_text(self, text: str, max_width: float) -> list[str]:
        """Word-wrap text to max_width (mm) in the current font."""
        lines: list[str] = []
        for paragraph in text.split("\n"):
            lines.extend(simpleSplit(paragraph, self._font, self._font_size, max_width * mm) or [""])
        return lines

    def text_width(self, text: str) -> float:
        return stringWidth(text, self._font, self._font_size) / mm

    def text(self, text: str | Sequence[str], x: float, y: float, align: str = "left") -> None:
        """Draw one line, or several lines spaced by the font's line height.

        ``y`` is the baseline of the first line.
        """
        lines = [text] if isinstance(text, str) else list(text)
        line_gap = self._font_size * LINE_HEIGHT_FACTOR * _PT_TO_MM
        for index, line in enumerate(lines):
            self._pages[self._current].append(
                TextOp(
                    text=line,
                    x=x,
                    y=y + index * line_gap,
                    font=self._font,
                    size=self._font_size,
                    color=self._text_color,
                    align=align,
                )
            )

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._pages[self._current].append(
            LineOp(x1, y1, x2, y2, color=self._draw_color, width=self._line_width)
        )

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._pages[self._current].append(RectOp(x, y, width, height, color=self._fill_color))

    def image(
        self,
        image: Image.Image,
        x: float,
        y: float,
        width: float,
        height: float,
        clip: tuple[float, float, float, float] | None = None,
    ) -> None:
        """Place an image; ``clip`` is an (x, y, width, height) box that bounds what shows."""
        self._pages[self._current].append(ImageOp(image, x, y, width, height, clip))

    def render(self, title: str = "") -> bytes:
        buf = io.BytesIO()
        pdf = canvas.Canvas(
            buf,
            pagesize=(self.page_width * mm, self.page_height * mm),
            pageCompression=1,
        )
        if title:
            pdf.setTitle(title)
        for page in self._pages:
            for op in page:
                self._replay(pdf, op)
            pdf.showPage()
        pdf.save()
        return buf.getvalue()

    def _bottom(self, y: float, height: float = 0.0) -> float:
        return (self.page_height - y - height) * mm

    def _replay(self, pdf: canvas.Canvas, op: DrawOp) -> None:
        if isinstance(op, TextOp):
            pdf.setFont(op.font, op.size)
            pdf.setFillColorRGB(*_unit_rgb(op.color))
            x, y = op.x * mm, self._bottom(op.y)
            if op.align == "right":
                pdf.drawRightString(x, y, op.text)
            elif op.align == "center":
                pdf.drawCentredString(x, y, op.text)
            else:
                pdf.drawString(x, y, op.text)
        elif isinstance(op, LineOp):
            pdf.setStrokeColorRGB(*_unit_rgb(op.color))
            pdf.setLineWidth(op.width * mm)
            pdf.line(op.x1 * mm, self._bottom(op.y1), op.x2 * mm, self._bottom(op.y2))
        elif isinstance(op, RectOp):
            pdf.setFillColorRGB(*_unit_rgb(op.color))
            pdf.rect(
                op.x * mm,
                self._bottom(op.y, op.height),
                op.width * mm,
                op.height * mm,
                stroke=0,
                fill=1,
            )
        else:
            self._replay_image(pdf, op)

    def _replay_image(self, pdf: canvas.Canvas, op: ImageOp) -> None:
        pdf.saveState()
        if op.clip is not None:
            clip_x, clip_y, clip_w, clip_h = op.clip
            path = pdf.beginPath()
            path.rect(clip_x * mm, self._bottom(clip_y, clip_h), clip_w * mm, clip_h * mm)
            pdf.clipPath(path, stroke=0, fill=0)
        pdf.drawImage(
            ImageReader(op.image),
            op.x * mm,
            self._bottom(op.y, op.height),
            width=op.width * mm,
            height=op.height * mm,
            mask="auto",
        )
        pdf.restoreState()


def _unit_rgb(color: Color) -> tuple[float, float, float]:
    red, green, blue = color
    return (red / 255.0, green / 255.0, blue / 255.0)
