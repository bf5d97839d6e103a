from __future__ import annotations

import logging
import secrets

from flask import Flask

from oca_web.adapters.email_smtp import SmtpNotifier
from oca_web.adapters.session_preferences import SessionPreferenceStore
from oca_web.adapters.threading_scheduler import ThreadingScheduler
from oca_web.config.ini_config import AppSettings, IniConfig
from oca_web.log_setup import setup_logging
from oca_web.ports.notifier import NullNotifier
from oca_web.repositories.flow_registry import FlowRegistry
from oca_web.repositories.report_repository import InMemoryReportRepository
from oca_web.services.analysis_service import AnalysisService
from oca_web.services.prompt_builder import load_master_prompt
from oca_web.state.controller import FlowController
from oca_web.web.routes import create_blueprint

logger = logging.getLogger(__name__)


def _build_report_repo(settings: AppSettings):
    if settings.storage_backend == "sqlserver":
        # pyodbc needs the ODBC driver manager; only load it when asked for
        from oca_web.adapters.sqlserver_reports import SqlServerReportRepository

        return SqlServerReportRepository(settings.sqlserver, ttl_hours=settings.share_ttl_hours)
    return InMemoryReportRepository(ttl_seconds=settings.share_ttl_hours * 3600)


def _build_report_generator(settings: AppSettings):
    from oca_web.adapters.llm_gemini import GeminiReportGenerator

    return GeminiReportGenerator(
        api_key=settings.gemini_api_key,
        model_name=settings.gemini_model,
        system_prompt=load_master_prompt(),
        timeout_seconds=settings.gemini_timeout_seconds,
    )


def create_app(
    settings: AppSettings | None = None,
    *,
    report_generator=None,
    notifier=None,
    scheduler=None,
    report_repo=None,
    preferences=None,
) -> Flask:
    """Composition root. Keyword overrides exist for tests."""
    ini = None
    if settings is None:
        ini = IniConfig.from_env_or_default()
        settings = ini.load_settings()

    setup_logging(settings.log_level)
    if ini is not None:
        logger.info("Settings loaded from %s", ini.ini_path)

    if report_generator is None:
        report_generator = _build_report_generator(settings)
    if notifier is None:
        notifier = SmtpNotifier(settings.email) if settings.email.is_configured else NullNotifier()
    if scheduler is None:
        scheduler = ThreadingScheduler()
    if report_repo is None:
        report_repo = _build_report_repo(settings)
    if preferences is None:
        preferences = SessionPreferenceStore()

    analysis_service = AnalysisService(report_generator=report_generator)

    flows = FlowRegistry(
        lambda: FlowController(
            analysis_service,
            scheduler,
            payment_delay_seconds=settings.payment_delay_seconds,
            notifier=notifier,
        )
    )

    app = Flask(__name__)
    app.register_blueprint(
        create_blueprint(
            flows,
            analysis_service,
            report_repo,
            notifier,
            preferences,
            settings.default_theme,
        )
    )

    secret_key = settings.flask_secret_key
    if not secret_key:
        logger.warning("No secret key configured; sessions will not survive a restart")
        secret_key = secrets.token_hex(32)

    app.config["SECRET_KEY"] = secret_key
    app.config["MAX_CONTENT_LENGTH"] = settings.max_upload_mb * 1024 * 1024
    app.config["HOST"] = settings.flask_host
    app.config["PORT"] = settings.flask_port
    app.config["DEBUG"] = settings.flask_debug

    logger.info(
        "App ready: model=%s storage=%s email=%s",
        settings.gemini_model,
        settings.storage_backend,
        "on" if notifier.enabled else "off",
    )
    return app
