########## ini_config.py

from __future__ import annotations

import os
from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path

INI_DEFAULT_NAME = "OptimaCloudAnomaly.ini"

THEMES = ("dark", "light")
STORAGE_BACKENDS = ("memory", "sqlserver")


@dataclass(frozen=True)
class SqlServerSettings:
    driver: str
    server: str
    database: str
    username: str
    password: str
    trust_cert: bool
    table: str


@dataclass(frozen=True)
class EmailSettings:
    smtp_host: str
    smtp_port: int
    username: str
    password: str
    sender: str
    admin_recipient: str
    use_tls: bool

    @property
    def is_configured(self) -> bool:
        required = (self.smtp_host, self.sender)
        if not all(required):
            return False
        # template INI ships with YOUR_... placeholders
        values = (self.smtp_host, self.sender, self.username, self.password, self.admin_recipient)
        return not any("YOUR_" in v for v in values)


@dataclass(frozen=True)
class AppSettings:
    gemini_api_key: str
    gemini_model: str
    gemini_timeout_seconds: int

    payment_delay_seconds: float
    max_upload_mb: int
    share_ttl_hours: int

    storage_backend: str
    sqlserver: SqlServerSettings
    email: EmailSettings

    default_theme: str

    flask_host: str
    flask_port: int
    flask_debug: bool
    flask_secret_key: str

    log_level: str


class IniConfig:
    """
    Adapter around ConfigParser.
    Keeps INI handling out of your app/service code.
    """

    def __init__(self, ini_path: Path):
        self._ini_path = ini_path
        self._cfg = ConfigParser()
        read_ok = self._cfg.read(str(ini_path), encoding="utf-8-sig")
        if not read_ok:
            raise FileNotFoundError(f"INI file not found or unreadable: {ini_path}")

    @property
    def ini_path(self) -> Path:
        return self._ini_path

    @staticmethod
    def from_env_or_default() -> "IniConfig":
        ini_raw = (os.getenv("APP_INI") or "").strip()
        # If APP_INI is not set, default to repo-root-relative ini location
        ini_path = Path(ini_raw) if ini_raw else (Path(__file__).resolve().parents[2] / INI_DEFAULT_NAME)
        return IniConfig(ini_path)

    def _str(self, section: str, key: str, fallback: str = "") -> str:
        return (self._cfg.get(section, key, fallback=fallback) or "").strip()

    def _choice(self, section: str, key: str, fallback: str, allowed: tuple[str, ...]) -> str:
        value = self._str(section, key, fallback).lower() or fallback
        if value not in allowed:
            raise ValueError(f"[{section}] {key} must be one of {allowed}, got {value!r}")
        return value

    def load_settings(self) -> AppSettings:
        # Gemini (env wins over INI so keys stay out of the file)
        api_key = (os.getenv("API_KEY") or "").strip() or self._str("gemini", "api_key")
        model = self._str("gemini", "model", "gemini-2.5-pro") or "gemini-2.5-pro"
        timeout_seconds = self._cfg.getint("gemini", "timeout_seconds", fallback=120)

        # Flow
        payment_delay = self._cfg.getfloat("flow", "payment_confirmation_delay_seconds", fallback=9.5)
        max_upload_mb = self._cfg.getint("flow", "max_upload_mb", fallback=25)

        share_ttl_hours = self._cfg.getint("share", "ttl_hours", fallback=24)

        # Storage
        storage_backend = self._choice("storage", "backend", "memory", STORAGE_BACKENDS)
        sqlserver = SqlServerSettings(
            driver=self._str("sqlserver", "driver", "ODBC Driver 17 for SQL Server"),
            server=self._str("sqlserver", "server", "localhost"),
            database=self._str("sqlserver", "database"),
            username=self._str("sqlserver", "username"),
            password=self._str("sqlserver", "password"),
            trust_cert=self._str("sqlserver", "trust_cert", "yes").lower() in ("yes", "true", "1"),
            table=self._str("sqlserver", "table", "dbo.SharedReports") or "dbo.SharedReports",
        )

        # Email
        email = EmailSettings(
            smtp_host=self._str("email", "smtp_host"),
            smtp_port=self._cfg.getint("email", "smtp_port", fallback=587),
            username=self._str("email", "username"),
            password=self._str("email", "password"),
            sender=self._str("email", "sender"),
            admin_recipient=self._str("email", "admin_recipient"),
            use_tls=self._cfg.getboolean("email", "use_tls", fallback=True),
        )

        default_theme = self._choice("ui", "default_theme", "dark", THEMES)

        # Flask
        flask_host = self._str("flask", "host", "127.0.0.1") or "127.0.0.1"
        flask_port = self._cfg.getint("flask", "port", fallback=5000)
        flask_debug = self._cfg.getboolean("flask", "debug", fallback=False)
        flask_secret_key = (os.getenv("FLASK_SECRET_KEY") or "").strip() or self._str("flask", "secret_key")

        log_level = (self._str("logging", "level", "INFO") or "INFO").upper()

        # Validate
        if storage_backend == "sqlserver" and not sqlserver.database:
            raise ValueError("sqlserver.database is empty in INI")

        return AppSettings(
            gemini_api_key=api_key,
            gemini_model=model,
            gemini_timeout_seconds=timeout_seconds,
            payment_delay_seconds=payment_delay,
            max_upload_mb=max_upload_mb,
            share_ttl_hours=share_ttl_hours,
            storage_backend=storage_backend,
            sqlserver=sqlserver,
            email=email,
            default_theme=default_theme,
            flask_host=flask_host,
            flask_port=flask_port,
            flask_debug=flask_debug,
            flask_secret_key=flask_secret_key,
            log_level=log_level,
        )
