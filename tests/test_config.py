"""Tests for settings loading."""

from pathlib import Path

import pytest

from medusa_mcp.config import ConfigError, Settings, load_settings

_ENV_VARS = (
    "MCP_AUTH_TOKEN",
    "MEDUSA_BASE_URL",
    "MEDUSA_API_KEY",
    "HOST",
    "PORT",
    "MCP_TOOL_CACHE_TTL",
    "MCP_TOOL_TIMEOUT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.mcp_auth_token is None
        assert settings.medusa_base_url == "http://localhost:9000"
        assert settings.port == 3000
        assert settings.mcp_protocol_version == "2025-03-26"
        assert settings.mcp_tool_cache_ttl == 300
        assert settings.mcp_session_ttl == 1800
        assert settings.missing_backend_settings() == ["MEDUSA_API_KEY"]

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MCP_AUTH_TOKEN", "secret")
        monkeypatch.setenv("MEDUSA_BASE_URL", "https://shop.example.com/")
        monkeypatch.setenv("MEDUSA_API_KEY", "sk_live")
        monkeypatch.setenv("PORT", "8080")
        settings = Settings()
        assert settings.mcp_auth_token == "secret"
        assert settings.medusa_base_url == "https://shop.example.com"
        assert settings.port == 8080
        assert settings.missing_backend_settings() == []

    def test_blank_token_is_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MCP_AUTH_TOKEN", "   ")
        assert Settings().mcp_auth_token is None

    def test_reads_dotenv(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("MEDUSA_API_KEY=from_dotenv\n")
        assert Settings().medusa_api_key == "from_dotenv"


class TestLoadSettings:
    def test_yaml_overlay_with_env_expansion(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SHOP_KEY", "sk_yaml")
        config = tmp_path / "medusa-mcp.yaml"
        config.write_text("medusa_api_key: ${SHOP_KEY}\nport: 4000\n")
        settings = load_settings(config)
        assert settings.medusa_api_key == "sk_yaml"
        assert settings.port == 4000

    def test_overrides_win_and_none_is_ignored(self, tmp_path: Path) -> None:
        config = tmp_path / "c.yaml"
        config.write_text("port: 4000\nhost: 0.0.0.0\n")
        settings = load_settings(config, port=5000, host=None)
        assert settings.port == 5000
        assert settings.host == "0.0.0.0"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            load_settings(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "bad.yaml"
        config.write_text("port: [unclosed\n")
        with pytest.raises(ConfigError, match="YAML parse error"):
            load_settings(config)

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "list.yaml"
        config.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(config)

    def test_invalid_value(self) -> None:
        with pytest.raises(ConfigError):
            load_settings(port="not-a-port")

    def test_negative_timeout_rejected(self) -> None:
        with pytest.raises(ConfigError):
            load_settings(mcp_tool_timeout=-1)
