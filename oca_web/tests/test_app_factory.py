from __future__ import annotations

import logging
from pathlib import Path

from oca_web.app_factory import create_app


class FakeReportGenerator:
    def generate_report(self, request):
        return "🔍 Cloud Cost Anomaly Summary\nok"


def test_create_app_from_app_ini(tmp_path: Path, monkeypatch, caplog):
    ini = tmp_path / "app.ini"
    ini.write_text("[flow]\nmax_upload_mb = 3\n[flask]\nport = 5055\nsecret_key = s\n", encoding="utf-8")
    monkeypatch.setenv("APP_INI", str(ini))
    monkeypatch.delenv("FLASK_SECRET_KEY", raising=False)
    caplog.set_level(logging.INFO, logger="oca_web.app_factory")

    app = create_app(report_generator=FakeReportGenerator())

    assert app.config["PORT"] == 5055
    assert app.config["MAX_CONTENT_LENGTH"] == 3 * 1024 * 1024
    assert app.config["SECRET_KEY"] == "s"
    assert f"Settings loaded from {ini}" in caplog.text
