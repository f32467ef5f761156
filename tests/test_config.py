"""Tests for configuration module."""

import json

import pytest

from storefront_e2e.config import DEFAULT_CONFIG, ConfigManager, deep_merge, get_config


@pytest.fixture
def config_dir(tmp_path):
    directory = tmp_path / "test-data"
    directory.mkdir()
    return directory


def write_overlay(directory, environment, payload):
    path = directory / f"test-config.{environment}.json"
    path.write_text(json.dumps(payload) if not isinstance(payload, str) else payload)
    return path


class TestDeepMerge:
    """Tests for deep_merge."""

    def test_recursive_merge_preserves_siblings(self):
        assert deep_merge({"a": {"x": 0, "y": 2}}, {"a": {"x": 1}}) == {"a": {"x": 1, "y": 2}}

    def test_lists_replaced_wholesale(self):
        merged = deep_merge({"types": ["top", "short"]}, {"types": ["dress"]})
        assert merged == {"types": ["dress"]}

    def test_scalar_overrides_mapping(self):
        assert deep_merge({"a": {"x": 1}}, {"a": 5}) == {"a": 5}

    def test_mapping_onto_scalar(self):
        assert deep_merge({"a": 5}, {"a": {"x": 1}}) == {"a": {"x": 1}}

    def test_inputs_not_mutated(self):
        base = {"a": {"x": 0}}
        override = {"a": {"y": [1, 2]}}
        merged = deep_merge(base, override)
        merged["a"]["y"].append(3)

        assert base == {"a": {"x": 0}}
        assert override == {"a": {"y": [1, 2]}}


class TestConfigManager:
    """Tests for ConfigManager."""

    def test_defaults(self, config):
        assert config.environment == "production"
        assert config.get("base_url") == "https://www.automationexercise.com"
        assert config.get("timeouts.default_timeout") == 30000
        assert config.get("product_criteria.product_types") == ["top", "short"]

    def test_get_missing_returns_default(self, config):
        assert config.get("timeouts.default_timeout", 9999) == 30000
        assert config.get("timeouts.missing_timeout", 9999) == 9999
        assert config.get("nothing.here.at.all", 9999) == 9999
        assert config.get("base_url.too_deep", "fallback") == "fallback"
        assert config.get("missing") is None

    def test_get_returns_sections(self, config):
        assert config.get("retries") == DEFAULT_CONFIG["retries"]

    def test_get_all_is_a_copy(self, config):
        snapshot = config.get_all()
        snapshot["timeouts"]["default_timeout"] = 1

        assert config.get("timeouts.default_timeout") == 30000

    def test_default_config_not_mutated(self, clean_env, config_dir):
        clean_env.setenv("TEST_TIMEOUT", "1234")
        ConfigManager(config_dir=config_dir, env_file=None)

        assert DEFAULT_CONFIG["timeouts"]["default_timeout"] == 30000

    def test_environment_overlay(self, clean_env, config_dir):
        write_overlay(config_dir, "ci", {"timeouts": {"default_timeout": 45000}, "retries": {"element_retries": 5}})
        clean_env.setenv("TEST_ENV", "ci")

        config = ConfigManager(config_dir=config_dir, env_file=None)

        assert config.environment == "ci"
        assert config.get("timeouts.default_timeout") == 45000
        assert config.get("timeouts.navigation_timeout") == 45000
        assert config.get("retries.element_retries") == 5
        assert config.get("retries.test_retries") == 2

    def test_missing_overlay_is_skipped(self, clean_env, config_dir):
        clean_env.setenv("TEST_ENV", "staging")

        config = ConfigManager(config_dir=config_dir, env_file=None)

        assert config.get("timeouts.default_timeout") == 30000

    def test_invalid_overlay_is_skipped(self, clean_env, config_dir):
        write_overlay(config_dir, "ci", "{not json")
        clean_env.setenv("TEST_ENV", "ci")

        config = ConfigManager(config_dir=config_dir, env_file=None)

        assert config.get("timeouts.default_timeout") == 30000

    def test_config_dir_from_environment(self, clean_env, config_dir):
        write_overlay(config_dir, "ci", {"base_url": "https://ci.example.com"})
        clean_env.setenv("TEST_ENV", "ci")
        clean_env.setenv("TEST_CONFIG_DIR", str(config_dir))

        config = ConfigManager(env_file=None)

        assert config.get("base_url") == "https://ci.example.com"

    def test_env_vars_override_overlay(self, clean_env, config_dir):
        write_overlay(config_dir, "ci", {"base_url": "https://ci.example.com", "timeouts": {"default_timeout": 45000}})
        clean_env.setenv("TEST_ENV", "ci")
        clean_env.setenv("TEST_BASEURL", "https://local.example.com")
        clean_env.setenv("TEST_TIMEOUT", "5000")

        config = ConfigManager(config_dir=config_dir, env_file=None)

        assert config.get("base_url") == "https://local.example.com"
        assert config.get("timeouts.default_timeout") == 5000

    def test_unrecognized_env_vars_ignored(self, clean_env, config_dir):
        clean_env.setenv("TEST_RETRIES", "10")
        clean_env.setenv("TEST_NAVIGATION_TIMEOUT", "1")

        config = ConfigManager(config_dir=config_dir, env_file=None)

        assert config.get("retries.element_retries") == 3
        assert config.get("timeouts.navigation_timeout") == 45000

    def test_dotenv_file(self, clean_env, config_dir, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("TEST_BASEURL=https://dotenv.example.com\nOTHER=value\n")

        config = ConfigManager(config_dir=config_dir, env_file=env_file)

        assert config.get("base_url") == "https://dotenv.example.com"

    def test_later_env_mutation_has_no_effect(self, clean_env, config_dir):
        config = ConfigManager(config_dir=config_dir, env_file=None)
        clean_env.setenv("TEST_BASEURL", "https://late.example.com")

        assert config.get("base_url") == "https://www.automationexercise.com"

    def test_timeout_override_replaces_scalar_section(self, clean_env, config_dir):
        write_overlay(config_dir, "ci", {"timeouts": 45000})
        clean_env.setenv("TEST_ENV", "ci")
        clean_env.setenv("TEST_TIMEOUT", "5000")

        config = ConfigManager(config_dir=config_dir, env_file=None)

        assert config.get("timeouts") == {"default_timeout": 5000}

    def test_custom_base(self, clean_env, config_dir):
        config = ConfigManager(base={"a": {"x": 0, "y": 2}}, config_dir=config_dir, env_file=None)
        assert config.get("a.y") == 2


class TestGetConfig:
    """Tests for the process-wide accessor."""

    def test_cached(self, clean_env):
        get_config.cache_clear()
        try:
            assert get_config() is get_config()
        finally:
            get_config.cache_clear()
