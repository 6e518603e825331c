from PIL import Image

from onboarding.report.document import ReportDocument
from onboarding.report.layout import ReportLayout
from onboarding.report.models import RenderCursor

DIVIDER_GREY = (200, 200, 200)
FOOTER_RED = (220, 38, 38)
PAGE_NUMBER_GREY = (150, 150, 150)
BLACK = (0, 0, 0)


class PageDecorator:
    """Draws the header (logo, title, divider) and footer (text, page number).

    Every call is a full redraw with no state of its own, so calling it twice
    on one page paints the same marks over themselves.
    """

    LOGO_MAX_WIDTH = 60.0
    LOGO_PADDING = 2.0

    def __init__(
        self,
        document: ReportDocument,
        layout: ReportLayout,
        logo: Image.Image | None = None,
    ) -> None:
        self._document = document
        self._layout = layout
        self._logo = logo

    def draw_header(self) -> None:
        settings = self._layout.settings
        doc = self._document

        if self._logo is not None:
            width, height = self.logo_size()
            doc.image(
                self._logo,
                settings.margin_left,
                settings.margin_top + self.LOGO_PADDING,
                width,
                height,
            )

        doc.set_font("bold", 14)
        doc.set_text_color(self._layout.brand_rgb)
        doc.text(
            settings.title,
            self._layout.right_edge,
            settings.margin_top + settings.header_height / 2 + 2,
            align="right",
        )

        doc.set_draw_color(DIVIDER_GREY)
        doc.set_line_width(0.5)
        divider_y = self._layout.content_top
        doc.line(settings.margin_left, divider_y, self._layout.right_edge, divider_y)

        self._reset_body_style()

    def draw_footer(self, page_number: int) -> None:
        settings = self._layout.settings
        doc = self._document
        footer_y = self._layout.max_content_y + settings.footer_height / 2

        doc.set_draw_color(DIVIDER_GREY)
        doc.set_line_width(0.5)
        divider_y = self._layout.max_content_y + 2
        doc.line(settings.margin_left, divider_y, self._layout.right_edge, divider_y)

        doc.set_font("normal", 12)
        doc.set_text_color(FOOTER_RED)
        doc.text(settings.footer_text, settings.margin_left, footer_y)

        doc.set_font("normal", 8)
        doc.set_text_color(PAGE_NUMBER_GREY)
        doc.text(f"Página {page_number}", self._layout.right_edge, footer_y, align="right")

        self._reset_body_style()

    def logo_size(self) -> tuple[float, float]:
        """Fit the logo to the header height, then shrink it if still too wide."""
        if self._logo is None:
            return (0.0, 0.0)
        max_height = self._layout.settings.header_height - 2 * self.LOGO_PADDING
        width = self._logo.width * max_height / self._logo.height
        height = max_height
        if width > self.LOGO_MAX_WIDTH:
            height = height * self.LOGO_MAX_WIDTH / width
            width = self.LOGO_MAX_WIDTH
        return (width, height)

    def start_page(self, cursor: RenderCursor) -> None:
        """Open a new decorated page and move the cursor to its body top."""
        self._document.add_page()
        self.draw_header()
        self.draw_footer(self._document.page_count)
        cursor.page_number = self._document.current_page
        cursor.y = self._layout.body_top

    def _reset_body_style(self) -> None:
        self._document.set_text_color(BLACK)
        self._document.set_font("normal", 10)


class FieldRenderer:
    """Lays out section titles and label/value pairs, breaking pages as needed."""

    SECTION_BREAK_THRESHOLD = 15.0
    FIELD_BREAK_THRESHOLD = 8.0
    FIELD_LINE_HEIGHT = 6.0
    LABEL_GUTTER = 50.0

    def __init__(
        self,
        document: ReportDocument,
        layout: ReportLayout,
        decorator: PageDecorator,
        cursor: RenderCursor,
    ) -> None:
        self._document = document
        self._layout = layout
        self._decorator = decorator
        self._cursor = cursor

    def ensure_space(self, height: float) -> bool:
        """Start a new page when ``height`` no longer fits. Returns True on a break."""
        if self._cursor.y + height > self._layout.max_content_y:
            self._decorator.start_page(self._cursor)
            return True
        return False

    def add_section_title(self, title: str) -> None:
        self.ensure_space(self.SECTION_BREAK_THRESHOLD)
        self._cursor.y += 2
        doc = self._document
        doc.set_font("bold", 12)
        doc.set_text_color(self._layout.brand_rgb)
        doc.text(title, self._layout.settings.margin_left, self._cursor.y)
        self._cursor.y += 8
        doc.set_text_color(BLACK)
        doc.set_font("normal", 10)

    def add_field(self, label: str, value: str) -> int:
        """Draw ``label:`` and its wrapped value. Returns the number of value lines."""
        self.ensure_space(self.FIELD_BREAK_THRESHOLD)
        doc = self._document
        left = self._layout.settings.margin_left

        doc.set_font("bold")
        doc.text(f"{label}:", left, self._cursor.y)

        doc.set_font("normal")
        lines = doc.split_text(value or "-", self._layout.content_width - self.LABEL_GUTTER)
        doc.text(lines, left + self.LABEL_GUTTER, self._cursor.y)

        line_count = max(1, len(lines))
        self._cursor.y += self.FIELD_LINE_HEIGHT * line_count
        return line_count

    def add_line(
        self,
        text: str,
        advance: float,
        style: str = "normal",
        align: str = "left",
    ) -> None:
        """Draw a free-standing line of body text and advance the cursor."""
        doc = self._document
        doc.set_font(style, 10)
        x = self._layout.right_edge if align == "right" else self._layout.settings.margin_left
        doc.text(text, x, self._cursor.y, align=align)
        self._cursor.y += advance
        doc.set_font("normal", 10)
