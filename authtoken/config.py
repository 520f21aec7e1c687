import os
import re
from datetime import timedelta
from functools import lru_cache
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env early so env vars are available for YAML interpolation
load_dotenv(Path.cwd() / ".env")

# Pattern to match $VAR_NAME environment variable references
ENV_VAR_PATTERN = re.compile(r"\$([A-Z_][A-Z0-9_]*)")

CONFIG_ENV_VAR = "AUTHTOKEN_CONFIG"
DEFAULT_CONFIG_FILE = "authtoken.yaml"

_config_path_override: Path | None = None


def interpolate_env_vars(value):
    """Recursively replace $VAR_NAME with os.environ values."""
    if isinstance(value, str):

        def replace(match):
            var = match.group(1)
            val = os.environ.get(var)
            if val is None:
                raise ValueError(f"Environment variable ${var} not set")
            return val

        return ENV_VAR_PATTERN.sub(replace, value)
    elif isinstance(value, dict):
        return {k: interpolate_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [interpolate_env_vars(item) for item in value]
    return value


def set_config_path(path: Path | str | None) -> None:
    """Override the YAML config location. ``None`` restores the default."""
    global _config_path_override
    _config_path_override = Path(path) if path is not None else None
    clear_settings_cache()


def get_config_path() -> Path:
    """Resolve the YAML config path: override, then $AUTHTOKEN_CONFIG, then cwd."""
    if _config_path_override is not None:
        return _config_path_override
    if env_path := os.environ.get(CONFIG_ENV_VAR):
        return Path(env_path)
    return Path.cwd() / DEFAULT_CONFIG_FILE


def _config_path_is_explicit() -> bool:
    return _config_path_override is not None or bool(os.environ.get(CONFIG_ENV_VAR))


def load_token_config() -> dict:
    """Load the ``authtoken`` section of the YAML config with env interpolation."""
    config_path = get_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"{config_path.name} not found at {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f) or {}

    return interpolate_env_vars(config.get("authtoken") or {})


class TokenSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="AUTHTOKEN_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    secret_key: str
    ttl_seconds: int = 3600

    @field_validator("secret_key")
    @classmethod
    def _secret_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("secret_key must not be empty")
        return value

    @field_validator("ttl_seconds")
    @classmethod
    def _ttl_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("ttl_seconds must be positive")
        return value

    @property
    def secret_bytes(self) -> bytes:
        return self.secret_key.encode("utf-8")

    @property
    def ttl(self) -> timedelta:
        return timedelta(seconds=self.ttl_seconds)


@lru_cache
def get_settings() -> TokenSettings:
    """Load settings from the environment, .env and the YAML config."""
    try:
        overrides = load_token_config()
    except FileNotFoundError:
        if _config_path_is_explicit():
            raise
        overrides = {}

    # Values passed in explicitly take priority over env vars
    return TokenSettings(**overrides)


def clear_settings_cache() -> None:
    get_settings.cache_clear()
