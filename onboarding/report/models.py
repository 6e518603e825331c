from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

_NUMERIC_FIELDS = frozenset({
    "header_height",
    "footer_height",
    "margin_top",
    "margin_bottom",
    "margin_left",
    "margin_right",
})


@dataclass(frozen=True)
class ReportSettings:
    """Configurable report look. Lengths are millimetres."""

    title: str = "Cadastro de Corretor"
    primary_color: str = "#dc2626"
    logo_url: str = (
        "https://www.vemplan.com.br/wp-content/uploads/2025/11/"
        "logotrans-f5188c99d4790c00b8fbdb45b07d2575a2ed53e8.gif"
    )
    footer_text: str = "Vemplan - Creci 21294J"
    header_height: float = 25.0
    footer_height: float = 15.0
    margin_top: float = 10.0
    margin_bottom: float = 10.0
    margin_left: float = 15.0
    margin_right: float = 15.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ReportSettings":
        """Build settings from a (possibly partial) stored record.

        Unknown keys and null values are ignored so the defaults apply.
        Numeric fields are coerced to float; non-numeric values raise ValueError.
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known or value is None:
                continue
            values[key] = float(value) if key in _NUMERIC_FIELDS else str(value)
        return cls(**values)


@dataclass
class RenderCursor:
    """Where the next drawing call lands: page number and y (mm from the top)."""

    page_number: int = 1
    y: float = 0.0


@dataclass(frozen=True)
class GeneratedReport:
    """Output of one report assembly."""

    content: bytes
    filename: str
    page_count: int
    content_type: str = "application/pdf"
