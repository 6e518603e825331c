from typing import Any

from psycopg.rows import dict_row

from onboarding.database.connection import get_connection
from onboarding.database.models import SettingsRecord
from onboarding.logging.logger import Log
from onboarding.report.defaults import DEFAULT_CONTRACT_HTML
from onboarding.report.exceptions import ReportSettingsError
from onboarding.report.models import ReportSettings

CONTRACT_KEY = "contract"
REPORT_KEY = "report"


class SettingsRepository:
    """Read access to the app_settings table (contract template and report layout)."""

    def find(self, key: str) -> SettingsRecord | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT key, payload, updated_at
                    FROM app_settings
                    WHERE key = %s
                    """,
                    (key,),
                )
                row = cur.fetchone()
        if row is None:
            return None
        payload: Any = row["payload"]
        return SettingsRecord(
            key=row["key"],
            payload=payload if isinstance(payload, dict) else {},
            updated_at=row["updated_at"],
        )

    def get_report_settings(self) -> ReportSettings:
        """Stored report settings merged over the defaults.

        The stored record may be partial; absent keys keep their default.

        Raises:
            ReportSettingsError: if a stored length is not a number.
        """
        record = self.find(REPORT_KEY)
        if record is None:
            Log.info("No stored report settings, using defaults")
            return ReportSettings()
        try:
            return ReportSettings.from_mapping(record.payload)
        except (TypeError, ValueError) as exc:
            raise ReportSettingsError(f"Stored report settings are invalid: {exc}") from exc

    def get_contract_html(self) -> str:
        record = self.find(CONTRACT_KEY)
        html = record.payload.get("html") if record is not None else None
        if not isinstance(html, str) or not html.strip():
            Log.info("No stored contract template, using default")
            return DEFAULT_CONTRACT_HTML
        return html
