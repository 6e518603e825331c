from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class ManagerRecord:
    """Represents a row from the managers table."""

    id: int
    name: str
    phone: str


@dataclass
class SettingsRecord:
    """Represents a row from the app_settings table (one JSONB payload per key)."""

    key: str
    payload: dict[str, Any] = field(default_factory=dict)
    updated_at: datetime | None = None
