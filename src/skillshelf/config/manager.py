"""
Configuration Manager - application settings.

Handles the YAML configuration file, defaults and environment overrides.
Skill preferences (storage roots, enabled set, routing model) live in the
key/value store pointed to by `storage.path`, not here.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger

from skillshelf.config.store import JsonFileStore

STATE_DIR = Path.home() / ".skillshelf"


class ConfigManager:
    """
    Configuration manager for SkillShelf.

    Features:
    - YAML/JSON configuration files
    - Environment variable overrides
    - Default values
    """

    DEFAULT_CONFIG = {
        "app": {
            "name": "SkillShelf",
            "version": "0.1.0",
            "debug": False,
        },
        "logging": {
            "level": "INFO",
            "file": str(STATE_DIR / "logs" / "skillshelf.log"),
        },
        "storage": {
            "path": str(STATE_DIR / "storage.json"),
        },
        "llm": {
            "openai_api_key": None,
            "anthropic_api_key": None,
            "openai_base_url": None,
        },
    }

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to configuration file
        """
        self._config_path = Path(config_path) if config_path else STATE_DIR / "config.yaml"
        self._config: Dict[str, Any] = {}
        self._loaded = False

    @property
    def path(self) -> Path:
        return self._config_path

    async def load(self) -> None:
        """Load configuration from file."""
        self._config = self._deep_copy(self.DEFAULT_CONFIG)

        if self._config_path.exists():
            try:
                content = self._config_path.read_text(encoding="utf-8")

                if self._config_path.suffix in [".yaml", ".yml"]:
                    file_config = yaml.safe_load(content) or {}
                else:
                    file_config = json.loads(content)

                if not isinstance(file_config, dict):
                    raise ValueError("configuration must be a mapping")

                self._deep_merge(self._config, file_config)
                logger.info(f"Configuration loaded from {self._config_path}")

            except Exception as e:
                logger.warning(f"Failed to load config: {e}, using defaults")
        else:
            await self.save()
            logger.info("Created default configuration file")

        self._apply_env_overrides()

        self._loaded = True

    async def save(self) -> None:
        """Save configuration to file."""
        try:
            self._config_path.parent.mkdir(parents=True, exist_ok=True)

            if self._config_path.suffix in [".yaml", ".yml"]:
                content = yaml.safe_dump(self._config, default_flow_style=False, sort_keys=False)
            else:
                content = json.dumps(self._config, indent=2)

            self._config_path.write_text(content, encoding="utf-8")
            logger.debug(f"Configuration saved to {self._config_path}")

        except Exception as e:
            logger.error(f"Failed to save config: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Dot-notation key (e.g., "storage.path")
            default: Default value if not found

        Returns:
            Configuration value
        """
        parts = key.split(".")
        value = self._config

        for part in parts:
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-notation key."""
        parts = key.split(".")
        config = self._config

        for part in parts[:-1]:
            if part not in config or not isinstance(config[part], dict):
                config[part] = {}
            config = config[part]

        config[parts[-1]] = value

    def open_store(self) -> JsonFileStore:
        """The persisted key/value store holding skill preferences."""
        return JsonFileStore(Path(self.get("storage.path") or STATE_DIR / "storage.json"))

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        env_mappings = {
            "SKILLSHELF_DEBUG": ("app.debug", lambda x: x.lower() == "true"),
            "SKILLSHELF_STORE": ("storage.path", str),
            "OPENAI_API_KEY": ("llm.openai_api_key", str),
            "OPENAI_BASE_URL": ("llm.openai_base_url", str),
            "ANTHROPIC_API_KEY": ("llm.anthropic_api_key", str),
        }

        for env_var, (config_key, converter) in env_mappings.items():
            value = os.getenv(env_var)
            if value:
                try:
                    self.set(config_key, converter(value))
                    logger.debug(f"Applied env override: {env_var}")
                except Exception as e:
                    logger.warning(f"Failed to apply {env_var}: {e}")

    def _deep_merge(self, base: dict, override: dict) -> None:
        """Deep merge override into base dict."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def _deep_copy(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            return {k: self._deep_copy(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._deep_copy(item) for item in obj]
        return obj
