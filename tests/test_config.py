"""Tests for configuration loading and saving."""

import json

import pytest
import yaml

from cs2brief.core.config import (
    Cs2BriefConfig,
    dict_to_config,
    get_config,
    load_config,
    load_config_file,
    load_env_config,
    merge_configs,
    reset_config,
    save_config,
    set_config,
)

ENV_VARS = [
    "CS2BRIEF_LOG_LEVEL",
    "CS2BRIEF_LOG_FILE",
    "CS2BRIEF_PROVIDER_URL",
    "CS2BRIEF_PLATFORM",
    "CS2BRIEF_RATE_PER_MINUTE",
    "CS2BRIEF_TIMEOUT_SECONDS",
    "CS2BRIEF_CACHE_TTL",
    "CS2BRIEF_SYNTHETIC_FALLBACK",
    "CS2BRIEF_API_KEY",
    "TRACKER_GG_API_KEY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


class TestDefaults:
    def test_default_values(self):
        config = Cs2BriefConfig()
        assert config.provider.name == "trackergg"
        assert config.provider.base_url == "https://public-api.tracker.gg/v2/csgo"
        assert config.provider.rate_per_minute == 30
        assert config.provider.timeout_seconds == 10.0
        assert config.cache.ttl_seconds == 3600
        assert config.briefing.synthetic_fallback is True
        assert config.briefing.max_confidence == 95


class TestEnvConfig:
    def test_typed_values(self, monkeypatch):
        monkeypatch.setenv("CS2BRIEF_RATE_PER_MINUTE", "60")
        monkeypatch.setenv("CS2BRIEF_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("CS2BRIEF_SYNTHETIC_FALLBACK", "false")
        monkeypatch.setenv("CS2BRIEF_PLATFORM", "xbl")

        env = load_env_config()
        assert env["provider"] == {"rate_per_minute": 60, "timeout_seconds": 2.5, "platform": "xbl"}
        assert env["briefing"] == {"synthetic_fallback": False}

    def test_tracker_api_key(self, monkeypatch):
        """Numeric-looking keys stay strings."""
        monkeypatch.setenv("TRACKER_GG_API_KEY", "12345")
        assert load_env_config()["provider"]["api_key"] == "12345"

    def test_prefixed_key_wins(self, monkeypatch):
        monkeypatch.setenv("TRACKER_GG_API_KEY", "fallback")
        monkeypatch.setenv("CS2BRIEF_API_KEY", "primary")
        assert load_env_config()["provider"]["api_key"] == "primary"

    def test_empty_environment(self):
        assert load_env_config() == {}


class TestFileConfig:
    def test_yaml(self, tmp_path):
        path = tmp_path / "cs2brief.yaml"
        path.write_text("provider:\n  platform: psn\ncache:\n  ttl_seconds: 60\n")
        assert load_config_file(path) == {"provider": {"platform": "psn"}, "cache": {"ttl_seconds": 60}}

    def test_toml(self, tmp_path):
        path = tmp_path / "cs2brief.toml"
        path.write_text('[briefing]\nmax_confidence = 80\n')
        assert load_config_file(path) == {"briefing": {"max_confidence": 80}}

    def test_missing_file(self, tmp_path):
        assert load_config_file(tmp_path / "nope.yaml") == {}

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "cs2brief.json"
        path.write_text(json.dumps({"provider": {"platform": "psn", "rate_per_minute": 10}}))
        monkeypatch.setenv("CS2BRIEF_RATE_PER_MINUTE", "20")

        config = load_config(path)
        assert config.provider.platform == "psn"
        assert config.provider.rate_per_minute == 20

    def test_include_env_false(self, tmp_path, monkeypatch):
        path = tmp_path / "cs2brief.json"
        path.write_text("{}")
        monkeypatch.setenv("CS2BRIEF_RATE_PER_MINUTE", "20")
        assert load_config(path, include_env=False).provider.rate_per_minute == 30


class TestMerging:
    def test_nested_merge(self):
        base = {"provider": {"platform": "steam", "rate_per_minute": 30}}
        override = {"provider": {"rate_per_minute": 60}, "cache": {"ttl_seconds": 5}}
        assert merge_configs(base, override) == {
            "provider": {"platform": "steam", "rate_per_minute": 60},
            "cache": {"ttl_seconds": 5},
        }

    def test_unknown_keys_ignored(self):
        config = dict_to_config({"provider": {"bogus": 1, "platform": "psn"}, "extra": {}})
        assert config.provider.platform == "psn"
        assert not hasattr(config.provider, "bogus")


class TestSaveConfig:
    def test_round_trip_yaml(self, tmp_path):
        config = Cs2BriefConfig()
        config.provider.platform = "psn"
        config.cache.ttl_seconds = 120
        path = tmp_path / "out.yaml"

        save_config(config, path)
        loaded = load_config(path, include_env=False)
        assert loaded.provider.platform == "psn"
        assert loaded.cache.ttl_seconds == 120

    def test_api_key_not_written(self, tmp_path):
        config = Cs2BriefConfig()
        config.provider.api_key = "secret"
        path = tmp_path / "out.yaml"

        save_config(config, path)
        assert "secret" not in path.read_text()
        assert yaml.safe_load(path.read_text())["provider"]["api_key"] == ""
        assert config.provider.api_key == "secret"

    def test_unsupported_format(self, tmp_path):
        with pytest.raises(ValueError):
            save_config(Cs2BriefConfig(), tmp_path / "out.ini")


class TestGlobalConfig:
    def test_set_and_reset(self):
        custom = Cs2BriefConfig()
        set_config(custom)
        assert get_config() is custom
        reset_config()
        assert get_config() is not custom
