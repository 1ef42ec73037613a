"""Configuration loading for tokenwatch.

Settings come from a TOML file (``~/.config/tokenwatch/config.toml`` by
default) with a handful of environment variables applied on top, so the
bot can be deployed with nothing but ``BOT_TOKEN`` set.
"""

import os
from pathlib import Path
from typing import Mapping, Optional

import toml
from pydantic import BaseModel, Field, ValidationError

from tokenwatch.errors import ConfigError


CONFIG_DIR = Path.home() / ".config" / "tokenwatch"
DEFAULT_CONFIG_PATH = CONFIG_DIR / "config.toml"


class TelegramSettings(BaseModel):
    """Bot credentials and chat restrictions."""

    bot_token: str = Field(default="", description="Telegram bot token")
    authorized_chat_id: Optional[int] = Field(
        default=None, description="Only serve this chat when set"
    )
    api_url: str = Field(default="https://api.telegram.org", description="Bot API base URL")


class TokenSettings(BaseModel):
    """The token being watched and how to find it."""

    name: str = Field(default="DeepNode", description="Display name, also used to match pairs")
    symbol: Optional[str] = Field(default=None, description="Base token symbol to match pairs")
    search_terms: list[str] = Field(
        default_factory=lambda: ["deepnode", "deep node", "deep-book", "deep book"],
        description="DexScreener search queries, tried in order",
    )
    match_pairs: bool = Field(
        default=True, description="Only accept pairs whose base token matches name or symbol"
    )
    coingecko_id: Optional[str] = Field(
        default=None, description="CoinGecko coin id used as a last resort"
    )


class MonitorSettings(BaseModel):
    """Polling and caching behaviour."""

    check_interval: float = Field(default=60.0, gt=0, description="Seconds between ticks")
    price_cache_ttl: float = Field(default=120.0, ge=0, description="Price cache lifetime (s)")
    request_timeout: float = Field(default=8.0, gt=0, description="Outbound HTTP timeout (s)")


class FxSettings(BaseModel):
    """USD to local currency conversion."""

    enabled: bool = True
    currency: str = Field(default="INR", min_length=3, max_length=3)
    cache_ttl: float = Field(default=1800.0, ge=0, description="Rate cache lifetime (s)")
    fallback_rate: float = Field(default=83.0, gt=0, description="Used when every FX API fails")


class ServerSettings(BaseModel):
    """Webhook server binding."""

    host: str = "0.0.0.0"
    port: int = Field(default=3000, gt=0, lt=65536)
    webhook_path: str = "/telegram"


class Settings(BaseModel):
    """Complete tokenwatch configuration."""

    telegram: TelegramSettings = Field(default_factory=TelegramSettings)
    token: TokenSettings = Field(default_factory=TokenSettings)
    monitor: MonitorSettings = Field(default_factory=MonitorSettings)
    fx: FxSettings = Field(default_factory=FxSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)


# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "BOT_TOKEN": ("telegram", "bot_token"),
    "AUTHORIZED_CHAT_ID": ("telegram", "authorized_chat_id"),
    "HOST": ("server", "host"),
    "PORT": ("server", "port"),
}


def _read_config_file(config_path: Path) -> dict:
    """Read the TOML config file, returning an empty dict if it does not exist."""
    if not config_path.exists():
        return {}

    try:
        return toml.load(config_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Could not read {config_path}: {e}") from e


def _apply_env(raw: dict, env: Mapping[str, str]) -> dict:
    for var, (section, key) in ENV_OVERRIDES.items():
        value = env.get(var)
        if value:
            raw.setdefault(section, {})[key] = value
    return raw


def validate_settings(settings: Settings) -> list[str]:
    """Return the list of missing required keys.

    Args:
        settings: Parsed settings.

    Returns:
        Names of required settings that are empty.
    """
    missing = []
    if not settings.telegram.bot_token.strip():
        missing.append("telegram.bot_token (or set BOT_TOKEN env var)")
    if not settings.token.search_terms and not settings.token.coingecko_id:
        missing.append("token.search_terms or token.coingecko_id")
    return missing


def load_settings(
    config_path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    require_token: bool = True,
) -> Settings:
    """Load settings from the config file and the environment.

    Args:
        config_path: TOML file to read. Defaults to DEFAULT_CONFIG_PATH.
        env: Environment mapping. Defaults to os.environ.
        require_token: Raise if no bot token is configured.

    Returns:
        Validated Settings.

    Raises:
        ConfigError: If the file is unreadable, a value is invalid, or a
            required setting is missing.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    raw = _apply_env(_read_config_file(path), os.environ if env is None else env)

    try:
        settings = Settings.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    missing = validate_settings(settings)
    if not require_token:
        missing = [m for m in missing if not m.startswith("telegram.bot_token")]
    if missing:
        raise ConfigError("Missing required configuration: " + ", ".join(missing))

    return settings


def write_template_config(config_path: Optional[Path] = None) -> Path:
    """Create a template configuration file.

    Args:
        config_path: Where to write. Defaults to DEFAULT_CONFIG_PATH.

    Returns:
        Path of the written file.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    template = {
        "telegram": {
            "bot_token": "",  # Leave empty to use BOT_TOKEN env var
        },
        "token": {
            "name": "DeepNode",
            "search_terms": ["deepnode", "deep node", "deep-book", "deep book"],
        },
        "monitor": {
            "check_interval": 60,
            "price_cache_ttl": 120,
            "request_timeout": 8,
        },
        "fx": {
            "enabled": True,
            "currency": "INR",
            "cache_ttl": 1800,
            "fallback_rate": 83.0,
        },
        "server": {
            "host": "0.0.0.0",
            "port": 3000,
            "webhook_path": "/telegram",
        },
    }

    with open(path, "w") as f:
        toml.dump(template, f)

    return path
