"""
Configuration Management for cs2brief

Provides configuration loading from multiple sources:
- Default values
- Configuration files (YAML, TOML, JSON)
- Environment variables

Configuration precedence (highest to lowest):
1. Environment variables (CS2BRIEF_*, TRACKER_GG_API_KEY)
2. Configuration file
3. Default values
"""

import json
import logging
import logging.handlers
import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from cs2brief.core.constants import (
    DEFAULT_MATCH_LIMIT,
    DEFAULT_PLATFORM,
    DEFAULT_QUEUE,
    DEFAULT_RATE_PER_MINUTE,
    DEFAULT_TIMEOUT_SECONDS,
    MAX_CONFIDENCE,
    PROFILE_CACHE_TTL_SECONDS,
    TRACKER_BASE_URL,
    TRACKER_PROVIDER,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Dataclasses
# ============================================================================


@dataclass
class ProviderConfig:
    """Configuration for the remote stats provider."""

    name: str = TRACKER_PROVIDER
    base_url: str = TRACKER_BASE_URL
    platform: str = DEFAULT_PLATFORM
    api_key: str = ""

    # Minimum spacing between requests is 60 / rate_per_minute seconds
    rate_per_minute: int = DEFAULT_RATE_PER_MINUTE
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    match_limit: int = DEFAULT_MATCH_LIMIT
    queue: str = DEFAULT_QUEUE


@dataclass
class CacheConfig:
    """Configuration for the in-memory profile cache."""

    ttl_seconds: float = PROFILE_CACHE_TTL_SECONDS


@dataclass
class BriefingConfig:
    """Configuration for briefing orchestration."""

    # Substitute placeholder profiles when a player's fetch fails
    synthetic_fallback: bool = True
    max_confidence: int = MAX_CONFIDENCE


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = None
    file_max_bytes: int = 10 * 1024 * 1024  # 10MB
    file_backup_count: int = 5


@dataclass
class Cs2BriefConfig:
    """Main configuration container."""

    provider: ProviderConfig = field(default_factory=ProviderConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    briefing: BriefingConfig = field(default_factory=BriefingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Version of the config format
    config_version: str = "1.0"


# ============================================================================
# Configuration Loading
# ============================================================================


def get_default_config_paths() -> list[Path]:
    """Get the default paths to search for configuration files."""
    paths = []

    # Current directory
    paths.append(Path.cwd() / "cs2brief.yaml")
    paths.append(Path.cwd() / "cs2brief.toml")
    paths.append(Path.cwd() / "cs2brief.json")

    # User home directory
    home = Path.home()
    xdg_config = os.environ.get("XDG_CONFIG_HOME", str(home / ".config"))
    paths.append(Path(xdg_config) / "cs2brief" / "config.yaml")
    paths.append(Path(xdg_config) / "cs2brief" / "config.toml")

    return paths


def load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a file, detecting format from extension."""
    if not path.exists():
        return {}

    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        with open(path) as f:
            return yaml.safe_load(f) or {}
    elif suffix == ".toml":
        with open(path, "rb") as f:
            return tomllib.load(f)
    elif suffix == ".json":
        with open(path) as f:
            return json.load(f)
    else:
        logger.warning(f"Unknown config file format: {suffix}")
        return {}


def _coerce_env_value(value: str) -> Any:
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit():
        return int(value)
    try:
        return float(value)
    except ValueError:
        return value


def load_env_config() -> dict[str, Any]:
    """Load configuration from environment variables."""
    config: dict[str, Any] = {}

    env_mappings = {
        "CS2BRIEF_LOG_LEVEL": ("logging", "level"),
        "CS2BRIEF_LOG_FILE": ("logging", "file"),
        "CS2BRIEF_PROVIDER_URL": ("provider", "base_url"),
        "CS2BRIEF_PLATFORM": ("provider", "platform"),
        "CS2BRIEF_RATE_PER_MINUTE": ("provider", "rate_per_minute"),
        "CS2BRIEF_TIMEOUT_SECONDS": ("provider", "timeout_seconds"),
        "CS2BRIEF_CACHE_TTL": ("cache", "ttl_seconds"),
        "CS2BRIEF_SYNTHETIC_FALLBACK": ("briefing", "synthetic_fallback"),
    }

    for env_var, (section, key) in env_mappings.items():
        value = os.environ.get(env_var)
        if value is not None:
            config.setdefault(section, {})[key] = _coerce_env_value(value)

    # API keys stay strings even when they look numeric
    api_key = os.environ.get("CS2BRIEF_API_KEY") or os.environ.get("TRACKER_GG_API_KEY")
    if api_key:
        config.setdefault("provider", {})["api_key"] = api_key

    return config


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two configuration dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def dict_to_config(data: dict[str, Any]) -> Cs2BriefConfig:
    """Convert a dictionary to Cs2BriefConfig, ignoring unknown keys."""
    config = Cs2BriefConfig()

    for section_name in ("provider", "cache", "briefing", "logging"):
        section = getattr(config, section_name)
        for key, value in (data.get(section_name) or {}).items():
            if hasattr(section, key):
                setattr(section, key, value)
            else:
                logger.debug(f"Ignoring unknown config key: {section_name}.{key}")

    return config


def load_config(config_file: Path | None = None, include_env: bool = True) -> Cs2BriefConfig:
    """
    Load configuration from all sources.

    Args:
        config_file: Explicit path to a config file (optional)
        include_env: Whether to include environment variables

    Returns:
        Merged Cs2BriefConfig
    """
    config_data: dict[str, Any] = {}

    if config_file:
        config_data = load_config_file(config_file)
        logger.info(f"Loaded config from: {config_file}")
    else:
        for path in get_default_config_paths():
            if path.exists():
                config_data = load_config_file(path)
                logger.info(f"Loaded config from: {path}")
                break

    if include_env:
        config_data = merge_configs(config_data, load_env_config())

    return dict_to_config(config_data)


# ============================================================================
# Configuration Saving
# ============================================================================


def config_to_dict(config: Cs2BriefConfig) -> dict[str, Any]:
    """Convert Cs2BriefConfig to a dictionary."""
    return asdict(config)


def save_config(config: Cs2BriefConfig, path: Path) -> None:
    """
    Save configuration to a file.

    The API key is never written out; supply it through the environment.

    Args:
        config: Configuration to save
        path: Path to save to (.yaml, .yml or .json)
    """
    data = config_to_dict(config)
    data["provider"]["api_key"] = ""
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        with open(path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    elif suffix == ".json":
        with open(path, "w") as f:
            json.dump(data, f, indent=2)
    else:
        raise ValueError(f"Unsupported config format for saving: {suffix}")

    logger.info(f"Saved config to: {path}")


# ============================================================================
# Logging
# ============================================================================


def setup_logging(config: LoggingConfig) -> None:
    """Configure the root logger from a LoggingConfig."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.file:
        handlers.append(
            logging.handlers.RotatingFileHandler(
                config.file,
                maxBytes=config.file_max_bytes,
                backupCount=config.file_backup_count,
            )
        )

    logging.basicConfig(
        level=getattr(logging, str(config.level).upper(), logging.INFO),
        format=config.format,
        handlers=handlers,
        force=True,
    )


# ============================================================================
# Global Configuration
# ============================================================================

_global_config: Cs2BriefConfig | None = None


def get_config() -> Cs2BriefConfig:
    """Get the global configuration, loading it if necessary."""
    global _global_config

    if _global_config is None:
        _global_config = load_config()

    return _global_config


def set_config(config: Cs2BriefConfig) -> None:
    """Set the global configuration."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _global_config
    _global_config = None
