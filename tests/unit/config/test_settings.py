"""
Tests for settings loading from environment and config file.
"""

import pytest

from src.quotagate.config import (
    OpenAISettings,
    Settings,
    UnkeySettings,
    _set_env_from_config,
)

ENV_VARS = [
    "UNKEY_ROOT_KEY",
    "UNKEY_API_ID",
    "UNKEY_INITIAL_QUOTA",
    "UNKEY_BASE_URL",
    "OPENAI_API_KEY",
    "QUOTAGATE_PORT",
    "QUOTAGATE_SESSION_SECRET_KEY",
    "QUOTAGATE_CORS_ORIGINS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Isolate tests from the developer's environment and .env file."""
    for name in ENV_VARS:
        # setenv first so anything written during the test is removed afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


class TestSettings:

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.unkey.base_url == "https://api.unkey.dev"
        assert settings.unkey.owner_id == "superuser"
        assert settings.unkey.initial_quota == 10
        assert settings.unkey.refill_amount == 10
        assert settings.unkey.refill_interval == "daily"
        assert settings.openai.image_size == "1024x1024"
        assert settings.session.cookie_name == "unkey"
        assert settings.missing_backend_settings() == [
            "UNKEY_ROOT_KEY",
            "UNKEY_API_ID",
            "OPENAI_API_KEY",
        ]

    def test_backend_credentials_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("UNKEY_ROOT_KEY", "root")
        monkeypatch.setenv("UNKEY_API_ID", "api_123")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")

        settings = Settings()

        assert settings.unkey.root_key == "root"
        assert settings.unkey.api_id == "api_123"
        assert settings.openai.api_key == "sk-openai"
        assert settings.missing_backend_settings() == []

    def test_dotenv_file(self, tmp_path) -> None:
        (tmp_path / ".env").write_text("UNKEY_API_ID=api_from_dotenv\nOPENAI_API_KEY=sk-dotenv\n")

        settings = Settings()

        assert settings.unkey.api_id == "api_from_dotenv"
        assert settings.openai.api_key == "sk-dotenv"

    def test_cors_origins_accepts_comma_separated_string(self) -> None:
        settings = Settings(cors_origins="https://a.example, https://b.example")

        assert settings.cors_origins == ["https://a.example", "https://b.example"]

    def test_urls(self) -> None:
        unkey = UnkeySettings(base_url="http://unkey.local/")
        openai = OpenAISettings(base_url="http://openai.local")

        assert unkey.create_key_url == "http://unkey.local/v1/keys.createKey"
        assert unkey.verify_key_url == "http://unkey.local/v1/keys.verifyKey"
        assert openai.generations_url == "http://openai.local/v1/images/generations"


class TestConfigFile:

    def test_config_file_values_become_env_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("UNKEY_API_ID", "api_from_env")

        _set_env_from_config({
            "server": {"port": 9000, "cors_origins": ["https://app.example"]},
            "unkey": {"root_key": "root_from_file", "api_id": "api_from_file", "initial_quota": 3},
        })
        settings = Settings()

        assert settings.port == 9000
        assert settings.cors_origins == ["https://app.example"]
        assert settings.unkey.root_key == "root_from_file"
        assert settings.unkey.api_id == "api_from_env"
        assert settings.unkey.initial_quota == 3