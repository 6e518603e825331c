from psycopg.rows import dict_row

from onboarding.database.connection import get_connection
from onboarding.database.models import ManagerRecord


class ManagerRepository:
    """Read access to the managers table."""

    def list_all(self) -> list[ManagerRecord]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute("SELECT id, name, phone FROM managers ORDER BY name")
                rows = cur.fetchall()
        return [self._to_record(row) for row in rows]

    @staticmethod
    def _to_record(row: dict[str, object]) -> ManagerRecord:
        return ManagerRecord(
            id=int(row["id"]),  # type: ignore[call-overload]
            name=str(row["name"]),
            phone=str(row["phone"] or ""),
        )
