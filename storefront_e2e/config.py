"""Configuration management for the storefront E2E harness.

Run parameters are merged from three layers, lowest precedence first:

1. ``DEFAULT_CONFIG`` compiled into this module
2. ``test-config.<environment>.json`` in the config directory, if present
3. an allow-listed set of ``TEST_*`` environment variables (and ``.env``)
"""

import copy
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Optional

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()

DEFAULT_CONFIG: dict[str, Any] = {
    "base_url": "https://www.automationexercise.com",
    "timeouts": {
        "default_timeout": 30000,
        "navigation_timeout": 45000,
        "element_timeout": 15000,
        "api_timeout": 20000,
    },
    "retries": {
        "test_retries": 2,
        "element_retries": 3,
        "interval_ms": 1000,
        "backoff_multiplier": 1.5,
    },
    "product_criteria": {
        "search_query": "Sleeves Top and Short",
        "product_types": ["top", "short"],
        "min_price": 0,
        "max_price": 1000,
    },
    "cleanup": {
        "delete_test_accounts": True,
        "preserve_order_data": True,
    },
    "screenshots": {
        "take_on_step": True,
        "take_on_failure": True,
        "full_page": True,
    },
    "reporting": {
        "generate_html": True,
        "include_screenshots": True,
        "include_network_logs": True,
        "include_performance_metrics": True,
        "generate_on_teardown": True,
    },
    "browser": {
        "type": "chromium",
        "headless": True,
        "slow_mo": 0,
        "viewport_width": 1280,
        "viewport_height": 720,
    },
    "paths": {
        "results_dir": "test-results",
        "screenshot_dir": "screenshots",
    },
    "logging": {
        "level": "INFO",
        "json": False,
    },
}

DEFAULT_CONFIG_DIR = "test-data"


class EnvironmentOverrides(BaseSettings):
    """Recognized ``TEST_*`` environment variables.

    Only these names are read; every other variable is ignored.
    """

    model_config = SettingsConfigDict(
        env_prefix="TEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field("production", description="Environment name selecting the overlay file")
    baseurl: Optional[str] = Field(None, description="Overrides base_url")
    timeout: Optional[int] = Field(None, description="Overrides timeouts.default_timeout (ms)")
    config_dir: Optional[str] = Field(None, description="Directory holding test-config.<env>.json")


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``override`` onto ``base`` and return a new dict.

    Nested mappings merge recursively; every other value, lists included,
    replaces the base value wholesale.
    """
    result = copy.deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(value, Mapping):
            existing = result.get(key)
            result[key] = deep_merge(existing if isinstance(existing, Mapping) else {}, value)
        else:
            result[key] = copy.deepcopy(value)
    return result


class ConfigManager:
    """Single source of truth for run parameters.

    Example:
        config = ConfigManager()
        config.get("timeouts.default_timeout", 30000)
        config.get("browser.headless")
    """

    def __init__(
        self,
        base: Optional[Mapping[str, Any]] = None,
        config_dir: Optional[str | Path] = None,
        env_file: Optional[str | Path] = ".env",
    ):
        """Build the merged configuration.

        Args:
            base: Base configuration, defaults to ``DEFAULT_CONFIG``
            config_dir: Directory searched for the environment overlay. Falls back
                to ``TEST_CONFIG_DIR`` and then ``./test-data``
            env_file: dotenv file read alongside the process environment, ``None`` to skip
        """
        self.log = logger.bind(component="config")
        self._overrides = EnvironmentOverrides(_env_file=env_file)
        self._environment = self._overrides.env

        directory = config_dir or self._overrides.config_dir or DEFAULT_CONFIG_DIR
        self._config_dir = Path(directory)

        merged = deep_merge(base if base is not None else DEFAULT_CONFIG, {})
        overlay = self._load_overlay()
        if overlay:
            merged = deep_merge(merged, overlay)

        self._config = self._apply_env_overrides(merged)

    @property
    def environment(self) -> str:
        """Name of the active environment (``TEST_ENV``)."""
        return self._environment

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    def overlay_path(self) -> Path:
        return self._config_dir / f"test-config.{self._environment}.json"

    def _load_overlay(self) -> dict[str, Any]:
        path = self.overlay_path()
        if not path.is_file():
            self.log.debug("No environment overlay found", path=str(path), environment=self._environment)
            return {}

        try:
            overlay = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            self.log.warning("Could not load environment config", path=str(path), error=str(e))
            return {}

        if not isinstance(overlay, dict):
            self.log.warning("Environment config is not a JSON object", path=str(path))
            return {}

        self.log.info("Loaded environment overlay", path=str(path), environment=self._environment)
        return overlay

    def _apply_env_overrides(self, config: dict[str, Any]) -> dict[str, Any]:
        # Allow-listed mapping; new variables need an explicit entry here
        if self._overrides.baseurl:
            config["base_url"] = self._overrides.baseurl
        if self._overrides.timeout is not None:
            timeouts = config.get("timeouts")
            if not isinstance(timeouts, dict):
                timeouts = config["timeouts"] = {}
            timeouts["default_timeout"] = self._overrides.timeout
        return config

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a dotted key such as ``"timeouts.default_timeout"``.

        Returns ``default`` when any segment is missing. Never raises.
        """
        value: Any = self._config
        for part in key.split("."):
            if not isinstance(value, Mapping) or part not in value:
                return default
            value = value[part]
        return value

    def get_all(self) -> dict[str, Any]:
        """Deep copy of the complete merged configuration."""
        return copy.deepcopy(self._config)

    def __repr__(self) -> str:
        return f"ConfigManager(environment={self._environment!r}, config_dir={str(self._config_dir)!r})"


@lru_cache(maxsize=1)
def get_config() -> ConfigManager:
    """Process-wide configuration, built on first use."""
    return ConfigManager()
