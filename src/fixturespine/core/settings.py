"""
Centralized settings for fixture-spine.

Manifesto:
    Migration tasks consult a handful of read-only flags (privacy toggles)
    and the owner bootstrap needs a name and email. One validated, cached
    settings object replaces ad-hoc ``os.environ`` reads in each task.

All fields can be set via ``FIXTURES_*`` environment variables or a ``.env``
file. Nested privacy toggles use ``__`` as delimiter, e.g.
``FIXTURES_PRIVACY__DISABLE_GOOGLE_FONTS=true``.

Tags:
    fixture-spine, configuration, settings, pydantic, caching

Doc-Types:
    api-reference
"""

from __future__ import annotations

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fixturespine.core.errors import ConfigError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class PrivacySettings(BaseModel):
    """Privacy toggles. ``True`` means the privacy restriction is on."""

    use_tinfoil: bool = False
    disable_update_check: bool = False
    disable_google_fonts: bool = False
    disable_gravatar: bool = False
    disable_rpc_ping: bool = False
    disable_structured_data: bool = False

    @property
    def any_enabled(self) -> bool:
        return any(self.model_dump().values())


class FixtureSettings(BaseSettings):
    """fixture-spine configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FIXTURES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    # ── Owner bootstrap ──────────────────────────────────────────
    owner_name: str = Field(default="Site Owner")
    owner_email: str = Field(default="owner@example.com")

    # ── Feature flags ────────────────────────────────────────────
    privacy: PrivacySettings = Field(default_factory=PrivacySettings)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return value


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, FixtureSettings] = {}


def get_settings(*, _force_reload: bool = False) -> FixtureSettings:
    """Load, validate, and cache a :class:`FixtureSettings` instance.

    Raises:
        ConfigError: If the environment holds invalid values.
    """
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    try:
        settings = FixtureSettings()
    except ValidationError as exc:
        raise ConfigError("Invalid fixture-spine configuration", cause=exc) from exc

    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = [
    "FixtureSettings",
    "PrivacySettings",
    "get_settings",
    "clear_settings_cache",
]
