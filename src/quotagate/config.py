"""
Configuration management.

Uses Pydantic Settings for environment variable handling and validation.
Values may come from the environment, a `.env` file or an optional
`config.yaml`; environment variables always win.
"""

import json
import os
import yaml
from functools import lru_cache
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


def load_config_file(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML file."""
    if config_path is None:
        # Look for config.yaml in common locations
        possible_paths = [
            "config.yaml",  # Current directory
            "../../config.yaml",  # Project root from src/quotagate
        ]

        for path in possible_paths:
            if os.path.exists(path):
                config_path = path
                break
        else:
            return {}

    if os.path.exists(config_path):
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f) or {}
            return config_data
    return {}


class UnkeySettings(BaseSettings):
    """Unkey key-management backend and key issuance policy."""

    root_key: str = Field(default="", description="Unkey root key used to create keys")
    api_id: str = Field(default="", description="Unkey API id keys are created under")
    base_url: str = Field(default="https://api.unkey.dev", description="Unkey API base URL")
    timeout_seconds: float = Field(default=10.0, gt=0, description="Request timeout")

    owner_id: str = Field(default="superuser", description="Owner id attached to issued keys")
    initial_quota: int = Field(default=10, ge=1, description="Uses granted on issuance")
    refill_amount: int = Field(default=10, ge=1, description="Uses restored on each refill")
    refill_interval: Literal["daily", "monthly"] = Field(default="daily", description="Refill interval")

    @property
    def create_key_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/v1/keys.createKey"

    @property
    def verify_key_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/v1/keys.verifyKey"

    class Config:
        env_prefix = "UNKEY_"
        env_file = ".env"
        extra = "ignore"


class OpenAISettings(BaseSettings):
    """OpenAI image generation backend."""

    api_key: str = Field(default="", description="OpenAI API key")
    base_url: str = Field(default="https://api.openai.com", description="OpenAI API base URL")
    timeout_seconds: float = Field(default=30.0, gt=0, description="Request timeout")
    image_size: str = Field(default="1024x1024", description="Fixed output resolution")
    model: Optional[str] = Field(default=None, description="Image model, backend default when unset")

    @property
    def generations_url(self) -> str:
        """Full image generations URL."""
        return f"{self.base_url.rstrip('/')}/v1/images/generations"

    class Config:
        env_prefix = "OPENAI_"
        env_file = ".env"
        extra = "ignore"


class SessionSettings(BaseSettings):
    """Session cookie configuration."""

    cookie_name: str = Field(default="unkey", description="Name of the session cookie")
    secret_key: str = Field(
        default="",
        description="Secret the cookie encryption key is derived from; random per process when empty",
    )
    max_age_seconds: Optional[int] = Field(default=None, ge=1, description="Cookie and token lifetime")
    secure: bool = Field(default=False, description="Only send the cookie over HTTPS")

    class Config:
        env_prefix = "QUOTAGATE_SESSION_"
        env_file = ".env"
        extra = "ignore"


class Settings(BaseSettings):
    """Main application settings."""

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Log level")
    cors_origins: List[str] = Field(default_factory=list, description="Origins allowed to call the API")

    # Component settings
    unkey: UnkeySettings = Field(default_factory=UnkeySettings)
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    session: SessionSettings = Field(default_factory=SessionSettings)

    @field_validator("cors_origins", mode="before")
    def parse_cors_origins(cls, v: Any) -> List[str]:
        """Accept a comma separated string as well as a list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    def missing_backend_settings(self) -> List[str]:
        """Names of backend settings that must be set before serving traffic."""
        missing = []
        if not self.unkey.root_key:
            missing.append("UNKEY_ROOT_KEY")
        if not self.unkey.api_id:
            missing.append("UNKEY_API_ID")
        if not self.openai.api_key:
            missing.append("OPENAI_API_KEY")
        return missing

    class Config:
        env_prefix = "QUOTAGATE_"
        env_file = ".env"
        extra = "ignore"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance with config file and env support."""

    # Load config file data
    config_data = load_config_file()

    # Config file provides defaults, env vars override
    if config_data:
        _set_env_from_config(config_data)

    return Settings()


def _set_env_from_config(config_data: Dict[str, Any]) -> None:
    """Set environment variables from config file if not already set."""
    mappings = {
        ("server", "host"): "QUOTAGATE_HOST",
        ("server", "port"): "QUOTAGATE_PORT",
        ("server", "debug"): "QUOTAGATE_DEBUG",
        ("server", "log_level"): "QUOTAGATE_LOG_LEVEL",
        ("unkey", "root_key"): "UNKEY_ROOT_KEY",
        ("unkey", "api_id"): "UNKEY_API_ID",
        ("unkey", "base_url"): "UNKEY_BASE_URL",
        ("unkey", "timeout_seconds"): "UNKEY_TIMEOUT_SECONDS",
        ("unkey", "owner_id"): "UNKEY_OWNER_ID",
        ("unkey", "initial_quota"): "UNKEY_INITIAL_QUOTA",
        ("unkey", "refill_amount"): "UNKEY_REFILL_AMOUNT",
        ("unkey", "refill_interval"): "UNKEY_REFILL_INTERVAL",
        ("openai", "api_key"): "OPENAI_API_KEY",
        ("openai", "base_url"): "OPENAI_BASE_URL",
        ("openai", "timeout_seconds"): "OPENAI_TIMEOUT_SECONDS",
        ("openai", "image_size"): "OPENAI_IMAGE_SIZE",
        ("openai", "model"): "OPENAI_MODEL",
        ("session", "cookie_name"): "QUOTAGATE_SESSION_COOKIE_NAME",
        ("session", "secret_key"): "QUOTAGATE_SESSION_SECRET_KEY",
        ("session", "max_age_seconds"): "QUOTAGATE_SESSION_MAX_AGE_SECONDS",
        ("session", "secure"): "QUOTAGATE_SESSION_SECURE",
    }

    for (section, key), env_var in mappings.items():
        if env_var not in os.environ:
            value = config_data.get(section, {}).get(key)
            if value is not None:
                os.environ[env_var] = str(value)

    # Lists are passed as JSON so pydantic-settings can decode them
    if "QUOTAGATE_CORS_ORIGINS" not in os.environ:
        cors_origins = config_data.get("server", {}).get("cors_origins")
        if cors_origins:
            os.environ["QUOTAGATE_CORS_ORIGINS"] = json.dumps(cors_origins)
