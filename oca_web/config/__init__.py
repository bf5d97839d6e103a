from .ini_config import AppSettings, EmailSettings, IniConfig, SqlServerSettings

__all__ = ["AppSettings", "EmailSettings", "IniConfig", "SqlServerSettings"]
