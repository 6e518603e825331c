"""Page geometry and brand style derived from ReportSettings."""

import math
import re
from dataclasses import dataclass

from onboarding.report.exceptions import ReportSettingsError
from onboarding.report.models import ReportSettings

A4_MM: tuple[float, float] = (210.0, 297.0)

# Gap between the header divider and the first line of body text.
BODY_OFFSET = 10.0

_HEX_COLOR = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    """Parse ``#RRGGBB`` (hash optional). Anything else yields black."""
    match = _HEX_COLOR.match(value.strip())
    if match is None:
        return (0, 0, 0)
    red, green, blue = (int(part, 16) for part in match.groups())
    return (red, green, blue)


@dataclass(frozen=True)
class ReportLayout:
    """Drawing coordinates in millimetres, y growing downwards from the page top."""

    settings: ReportSettings
    page_width: float
    page_height: float
    brand_rgb: tuple[int, int, int]

    @property
    def content_width(self) -> float:
        return self.page_width - self.settings.margin_left - self.settings.margin_right

    @property
    def content_top(self) -> float:
        return self.settings.margin_top + self.settings.header_height

    @property
    def max_content_y(self) -> float:
        return self.page_height - self.settings.margin_bottom - self.settings.footer_height

    @property
    def usable_height(self) -> float:
        return self.max_content_y - self.content_top

    @property
    def body_top(self) -> float:
        return self.content_top + BODY_OFFSET

    @property
    def right_edge(self) -> float:
        return self.page_width - self.settings.margin_right


def resolve_layout(
    settings: ReportSettings,
    page_size: tuple[float, float] = A4_MM,
) -> ReportLayout:
    """Validate settings against the page size and derive the layout.

    Raises:
        ReportSettingsError: if a length is negative or not finite, or the header, footer
            and margins leave no usable width or height.
    """
    page_width, page_height = page_size
    _validate(settings, page_width, page_height)
    return ReportLayout(
        settings=settings,
        page_width=page_width,
        page_height=page_height,
        brand_rgb=hex_to_rgb(settings.primary_color),
    )


def _validate(settings: ReportSettings, page_width: float, page_height: float) -> None:
    lengths = {
        "header_height": settings.header_height,
        "footer_height": settings.footer_height,
        "margin_top": settings.margin_top,
        "margin_bottom": settings.margin_bottom,
        "margin_left": settings.margin_left,
        "margin_right": settings.margin_right,
    }
    for name, value in lengths.items():
        if not math.isfinite(value):
            raise ReportSettingsError(f"'{name}' must be a finite number, got {value}")
        if value < 0:
            raise ReportSettingsError(f"'{name}' must be non-negative, got {value}")

    if settings.margin_left + settings.margin_right >= page_width:
        raise ReportSettingsError("Left and right margins leave no content width")

    vertical = (
        settings.margin_top
        + settings.header_height
        + settings.margin_bottom
        + settings.footer_height
    )
    if vertical >= page_height:
        raise ReportSettingsError(
            f"Header, footer and margins ({vertical}mm) leave no usable page height"
        )
