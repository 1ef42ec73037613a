"""Tests for configuration loading."""

import tempfile
from pathlib import Path

import pytest
import toml

from tokenwatch.config import Settings, load_settings, validate_settings, write_template_config
from tokenwatch.errors import ConfigError


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestLoadSettings:

    def test_missing_token_is_fatal(self, temp_dir):
        with pytest.raises(ConfigError, match="bot_token"):
            load_settings(temp_dir / "missing.toml", env={})

    def test_token_not_required_for_lookups(self, temp_dir):
        settings = load_settings(temp_dir / "missing.toml", env={}, require_token=False)
        assert settings.telegram.bot_token == ""

    def test_token_from_env(self, temp_dir):
        settings = load_settings(temp_dir / "missing.toml", env={"BOT_TOKEN": "123:abc"})

        assert settings.telegram.bot_token == "123:abc"
        assert settings.monitor.check_interval == 60
        assert settings.monitor.price_cache_ttl == 120
        assert settings.fx.cache_ttl == 1800
        assert settings.fx.fallback_rate == 83.0
        assert settings.server.port == 3000

    def test_file_values_and_env_override(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text(toml.dumps({
            "telegram": {"bot_token": "from-file", "authorized_chat_id": 5},
            "token": {"name": "Foo", "symbol": "FOO", "search_terms": ["foo"]},
            "server": {"port": 8000},
        }))

        settings = load_settings(path, env={"BOT_TOKEN": "from-env", "PORT": "9000"})

        assert settings.telegram.bot_token == "from-env"
        assert settings.telegram.authorized_chat_id == 5
        assert settings.token.symbol == "FOO"
        assert settings.token.search_terms == ["foo"]
        assert settings.server.port == 9000

    def test_authorized_chat_from_env(self, temp_dir):
        settings = load_settings(
            temp_dir / "missing.toml",
            env={"BOT_TOKEN": "t", "AUTHORIZED_CHAT_ID": "-1001234"},
        )
        assert settings.telegram.authorized_chat_id == -1001234

    def test_invalid_value(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text(toml.dumps({"monitor": {"check_interval": -5}}))

        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings(path, env={"BOT_TOKEN": "t"})

    def test_unparseable_file(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text("key = \"unterminated\n")

        with pytest.raises(ConfigError, match="Could not read"):
            load_settings(path, env={"BOT_TOKEN": "t"})

    def test_no_price_source(self):
        settings = Settings.model_validate({
            "telegram": {"bot_token": "t"},
            "token": {"search_terms": []},
        })
        assert validate_settings(settings) == ["token.search_terms or token.coingecko_id"]


class TestTemplateConfig:

    def test_template_round_trip(self, temp_dir):
        path = write_template_config(temp_dir / "nested" / "config.toml")

        assert path.exists()
        settings = load_settings(path, env={"BOT_TOKEN": "t"})
        assert settings.token.name == "DeepNode"
        assert settings.fx.currency == "INR"

    def test_template_alone_lacks_token(self, temp_dir):
        path = write_template_config(temp_dir / "config.toml")
        with pytest.raises(ConfigError):
            load_settings(path, env={})
