from __future__ import annotations

from datetime import datetime, timedelta

import pytest

pytest.importorskip("pyodbc")

from oca_web.adapters.sqlserver_reports import SqlServerReportRepository  # noqa: E402
from oca_web.config.ini_config import SqlServerSettings  # noqa: E402


class FakeCursor:
    def __init__(self, db):
        self._db = db
        self._row = None

    def execute(self, query, *params):
        self._db.executed.append((" ".join(query.split()), params))
        if query.strip().startswith("SELECT"):
            report_id, cutoff = params
            entry = self._db.rows.get(report_id)
            self._row = (entry[0],) if entry and entry[1] >= cutoff else None
        else:
            report_id, content, created = params
            self._db.rows[report_id] = (content, created)
        return self

    def fetchone(self):
        return self._row


class FakeConnection:
    def __init__(self, db):
        self._db = db

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def cursor(self):
        return FakeCursor(self._db)

    def commit(self):
        self._db.commits += 1


class FakeDb:
    def __init__(self):
        self.rows = {}
        self.executed = []
        self.commits = 0
        self.conn_strs = []

    def connect(self, conn_str):
        self.conn_strs.append(conn_str)
        return FakeConnection(self)


def make_settings(**overrides) -> SqlServerSettings:
    values = dict(
        driver="ODBC Driver 17 for SQL Server",
        server="db.local",
        database="Reports",
        username="",
        password="",
        trust_cert=True,
        table="dbo.SharedReports",
    )
    values.update(overrides)
    return SqlServerSettings(**values)


def test_connection_string_trusted():
    repo = SqlServerReportRepository(make_settings(), connect=FakeDb().connect)
    assert repo.connection_string() == (
        "DRIVER={ODBC Driver 17 for SQL Server};SERVER=db.local;DATABASE=Reports;"
        "Trusted_Connection=yes;TrustServerCertificate=yes;"
    )


def test_connection_string_with_credentials():
    repo = SqlServerReportRepository(
        make_settings(username="sa", password="pw", trust_cert=False), connect=FakeDb().connect
    )
    assert "UID=sa;PWD=pw;" in repo.connection_string()
    assert "TrustServerCertificate" not in repo.connection_string()


def test_save_then_get_within_ttl():
    db = FakeDb()
    now = [datetime(2024, 5, 1, 12, 0, 0)]
    repo = SqlServerReportRepository(make_settings(), ttl_hours=24, connect=db.connect, clock=lambda: now[0])

    report_id = repo.save("report body")
    assert db.commits == 1
    assert db.executed[0][0].startswith("INSERT INTO dbo.SharedReports")
    assert repo.get(report_id) == "report body"

    now[0] += timedelta(hours=25)
    assert repo.get(report_id) is None
    assert repo.get("unknown") is None


def test_empty_database_is_rejected():
    with pytest.raises(ValueError):
        SqlServerReportRepository(make_settings(database=""), connect=FakeDb().connect)
