"""
Environment-driven settings.

All configuration comes from environment variables; ``load_settings`` reads
them once and validates values so misconfiguration fails at startup.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_LLM_API_BASE_URL = "https://api.openai.com/v1"
DEFAULT_LLM_API_MODEL = "gpt-4o-mini"
DEFAULT_LLM_TIMEOUT_MS = 20000


@dataclass(frozen=True)
class LLMSettings:
    """OpenAI-compatible suggestion provider settings."""

    api_base_url: str = DEFAULT_LLM_API_BASE_URL
    api_key: Optional[str] = None
    model: str = DEFAULT_LLM_API_MODEL
    timeout_ms: int = DEFAULT_LLM_TIMEOUT_MS

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


@dataclass(frozen=True)
class Settings:
    """Process-wide settings."""

    db_path: str
    actor_user_id: Optional[str] = None
    debug: bool = False
    llm: LLMSettings = LLMSettings()


def get_default_db_path(env: Optional[Mapping[str, str]] = None) -> str:
    """Get the default database path.

    Checks TRILLO_DB_PATH environment variable first, then falls back
    to ~/.trillo/database.db, creating directory if needed.
    """
    env = os.environ if env is None else env

    env_db_path = env.get("TRILLO_DB_PATH")
    if env_db_path:
        db_path = Path(env_db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        return str(db_path)

    trillo_dir = Path.home() / ".trillo"
    trillo_dir.mkdir(parents=True, exist_ok=True)
    return str(trillo_dir / "database.db")


def parse_bool_env(raw_value: Optional[str], fallback: bool, variable_name: str) -> bool:
    if raw_value is None or not raw_value.strip():
        return fallback

    normalized = raw_value.strip().lower()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    raise ValueError(f"{variable_name} must be one of: true/false, 1/0, yes/no.")


def parse_positive_int_env(raw_value: Optional[str], fallback: int, variable_name: str) -> int:
    if raw_value is None or not raw_value.strip():
        return fallback

    try:
        parsed = int(raw_value.strip())
    except ValueError as e:
        raise ValueError(f"{variable_name} must be a positive integer.") from e

    if parsed <= 0:
        raise ValueError(f"{variable_name} must be a positive integer.")
    return parsed


def _optional(env: Mapping[str, str], name: str) -> Optional[str]:
    value = env.get(name, "").strip()
    return value or None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Load settings from the environment (``os.environ`` by default)."""
    env = os.environ if env is None else env

    llm = LLMSettings(
        api_base_url=(_optional(env, "LLM_API_BASE_URL") or DEFAULT_LLM_API_BASE_URL).rstrip("/"),
        api_key=_optional(env, "LLM_API_KEY"),
        model=_optional(env, "LLM_API_MODEL") or DEFAULT_LLM_API_MODEL,
        timeout_ms=parse_positive_int_env(
            env.get("LLM_TIMEOUT_MS"), DEFAULT_LLM_TIMEOUT_MS, "LLM_TIMEOUT_MS"
        ),
    )

    return Settings(
        db_path=get_default_db_path(env),
        actor_user_id=_optional(env, "TRILLO_ACTOR_USER_ID"),
        debug=parse_bool_env(env.get("TRILLO_DEBUG"), False, "TRILLO_DEBUG"),
        llm=llm,
    )


def require_actor_user_id(settings: Settings) -> str:
    """Return the acting user for tool calls or fail loudly."""
    if not settings.actor_user_id:
        raise ValueError("TRILLO_ACTOR_USER_ID is required for the MCP runtime.")
    return settings.actor_user_id
