from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import pyodbc

from oca_web.config.ini_config import SqlServerSettings
from oca_web.ports.storage import ReportRepository


def _utcnow() -> datetime:
    # pyodbc binds naive datetimes; store UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SqlServerReportRepository(ReportRepository):
    """
    Shared reports in SQL Server.

    Expected table:
        report_id      NVARCHAR(32) PRIMARY KEY
        report_content NVARCHAR(MAX)
        created_at     DATETIME2
    """

    def __init__(
        self,
        settings: SqlServerSettings,
        ttl_hours: int = 24,
        connect: Optional[Callable[[str], object]] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not settings.database:
            raise ValueError("sqlserver.database is empty in INI")
        self._settings = settings
        self.table_name = settings.table
        self._ttl = timedelta(hours=ttl_hours)
        self._connect_fn = connect or pyodbc.connect
        self._clock = clock

    def connection_string(self) -> str:
        s = self._settings
        parts = [
            f"DRIVER={{{s.driver}}}",
            f"SERVER={s.server}",
            f"DATABASE={s.database}",
        ]

        if s.username:
            parts.append(f"UID={s.username}")
            parts.append(f"PWD={s.password}")
        else:
            parts.append("Trusted_Connection=yes")

        if s.trust_cert:
            parts.append("TrustServerCertificate=yes")

        return ";".join(parts) + ";"

    def _connect(self):
        return self._connect_fn(self.connection_string())

    def save(self, report_text: str) -> str:
        report_id = secrets.token_hex(8)
        q = f"""
        INSERT INTO {self.table_name} (report_id, report_content, created_at)
        VALUES (?, ?, ?)
        """
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(q, report_id, report_text, self._clock())
            conn.commit()
        return report_id

    def get(self, report_id: str) -> Optional[str]:
        q = f"""
        SELECT report_content
        FROM {self.table_name}
        WHERE report_id = ?
          AND created_at >= ?
        """
        with self._connect() as conn:
            cur = conn.cursor()
            r = cur.execute(q, report_id, self._clock() - self._ttl).fetchone()

        if not r:
            return None
        return str(r[0])
