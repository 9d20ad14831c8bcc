"""
Centralized settings for ssm-document.

Every field can be set through an ``SSM_DOCUMENT_*`` environment variable
(e.g. ``SSM_DOCUMENT_PARALLELS=10``).  Env files are exported into the
process environment by :func:`ssm_document.core.envfiles.load_dotenv` before
settings are read, so ``.env`` values land here too.

Precedence: CLI flag > real env var > ``.env`` file > field default.

Fields
──────
config_file          : Glob matched against file names when walking a directory
config_parser        : ``yml``, ``yaml`` or ``json``
path                 : Search path used when no path argument is given
parallels            : Documents reconciled concurrently per chunk
chunk_pause_seconds  : Pause between chunks
log_level            : structlog level
json_logs            : Force JSON (true) / console (false) logs; auto when unset
env                  : Selects ``.env.<env>`` instead of ``.env``
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocumentToolSettings(BaseSettings):
    """Settings shared by the CLI and the batch entry points."""

    model_config = SettingsConfigDict(
        env_prefix="SSM_DOCUMENT_",
        extra="ignore",
    )

    # ── Configuration discovery ──────────────────────────────────
    config_file: str = "document.yml"
    config_parser: str = "yml"
    path: str | None = None

    # ── Batching ─────────────────────────────────────────────────
    parallels: int = Field(default=5, gt=0, description="Documents per chunk")
    chunk_pause_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Pause between chunks to smooth load on the registry",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    env: str = ""


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, DocumentToolSettings] = {}


def get_settings(*, _force_reload: bool = False) -> DocumentToolSettings:
    """Load, validate, and cache a :class:`DocumentToolSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = DocumentToolSettings()
    _settings_cache["default"] = settings
    return settings


def reset_settings() -> None:
    """Drop the cached settings (tests, or after the environment changed)."""
    _settings_cache.clear()
