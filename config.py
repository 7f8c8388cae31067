"""
config.py — Konfiguracja aplikacji przez zmienne środowiskowe.
Wszystkie zmienne mają prefiks STATIC_REFLECTION_.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict

from adapters.context.builtins import DEFAULT_PHP_VERSION


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"

    # Wersja interpretera widoczna jako PHP_VERSION / PHP_MAJOR_VERSION / ...
    php_version: str = DEFAULT_PHP_VERSION

    # App
    app_title: str = "StaticReflection"
    app_version: str = "0.1.0"

    model_config = SettingsConfigDict(env_prefix="STATIC_REFLECTION_", env_file=".env", extra="ignore")
