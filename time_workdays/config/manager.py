"""
Configuration manager for loading and validating settings.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from time_workdays.data.schemas import Config

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages configuration loading from YAML files and environment variables."""

    # Mapping of environment variables to config fields
    ENV_MAPPINGS = {
        "WORKDAYS_USER_AGENT": "user_agent",
        "WORKDAYS_TIMEOUT": ("default_timeout", float),
        "WORKDAYS_DEFAULT_PROVIDER": "default_provider",
        "WORKDAYS_DEFAULT_TZ": "default_timezone",
        "WORKDAYS_TIMOR_URL": "timor_url",
        "WORKDAYS_NATE_URL": "nate_url",
        "WORKDAYS_NATE_MIRROR_URL": "nate_mirror_url",
        "WORKDAYS_OUTPUT_FORMAT": "output_format",
        "WORKDAYS_OUTPUT_DIRECTORY": "output_directory",
        "WORKDAYS_API_HOST": "api_host",
        "WORKDAYS_API_PORT": ("api_port", int),
    }

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the config manager.

        Args:
            config_path: Optional path to config file. If not provided, uses default.
        """
        self.config_path = config_path or self._get_default_config_path()

    def _get_default_config_path(self) -> str:
        """Get the default configuration file path."""
        return str(Path(__file__).parent / "settings.yaml")

    def load_config(self) -> Config:
        """
        Load configuration from YAML file with environment variable overrides.

        Returns:
            Config: Validated configuration object.

        Raises:
            ValueError: If config is invalid.
        """
        config_dict = self._load_yaml()
        config_dict = self._apply_env_overrides(config_dict)

        try:
            return Config(**config_dict)
        except Exception as e:
            raise ValueError(f"Invalid configuration: {e}")

    def _load_yaml(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        config_path = Path(self.config_path)

        if not config_path.exists():
            logger.debug(f"Config file not found: {config_path}, using defaults")
            return {}

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing YAML config file: {e}")

        logger.debug(f"Loaded config from: {config_path}")
        return self._flatten_config(config) if config else {}

    def _flatten_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Flatten nested YAML config to match Config model fields.

        Args:
            config: Nested configuration dictionary.

        Returns:
            Flattened configuration dictionary.
        """
        result = {}

        if "http" in config:
            http = config["http"]
            if "user_agent" in http:
                result["user_agent"] = http["user_agent"]
            if "timeout" in http:
                result["default_timeout"] = http["timeout"]

        if "providers" in config:
            providers = config["providers"]
            if "timor_url" in providers:
                result["timor_url"] = providers["timor_url"]
            if "nate_url" in providers:
                result["nate_url"] = providers["nate_url"]
            if "nate_mirror_url" in providers:
                result["nate_mirror_url"] = providers["nate_mirror_url"]

        if "defaults" in config:
            defaults = config["defaults"]
            if "provider" in defaults:
                result["default_provider"] = defaults["provider"]
            if "timezone" in defaults:
                result["default_timezone"] = defaults["timezone"]

        if "output" in config:
            out = config["output"]
            if "format" in out:
                result["output_format"] = out["format"]
            if "directory" in out:
                result["output_directory"] = out["directory"]

        if "api" in config:
            api = config["api"]
            if "host" in api:
                result["api_host"] = api["host"]
            if "port" in api:
                result["api_port"] = api["port"]

        return result

    def _apply_env_overrides(self, config_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply WORKDAYS_* environment variable overrides to configuration.

        Args:
            config_dict: Configuration dictionary from YAML.

        Returns:
            Updated configuration dictionary.
        """
        for env_var, mapping in self.ENV_MAPPINGS.items():
            env_value = os.environ.get(env_var)
            if env_value is None:
                continue

            if isinstance(mapping, tuple):
                config_key, type_converter = mapping
                try:
                    config_dict[config_key] = type_converter(env_value)
                except ValueError:
                    logger.warning(f"Ignoring invalid value for {env_var}: {env_value!r}")
                    continue
            else:
                config_key = mapping
                config_dict[config_key] = env_value
            logger.debug(f"Override from env: {env_var} -> {config_key}")

        return config_dict

    def save_config(self, config: Config, output_path: Optional[str] = None) -> None:
        """
        Save configuration to YAML file.

        Args:
            config: Configuration object to save.
            output_path: Optional output path. If not provided, uses default.
        """
        output_path = output_path or self.config_path

        config_dict = {
            "http": {
                "user_agent": config.user_agent,
                "timeout": config.default_timeout,
            },
            "providers": {
                "timor_url": config.timor_url,
                "nate_url": config.nate_url,
                "nate_mirror_url": config.nate_mirror_url,
            },
            "defaults": {
                "provider": config.default_provider.value,
                "timezone": config.default_timezone,
            },
            "output": {
                "format": config.output_format,
                "directory": config.output_directory,
            },
            "api": {
                "host": config.api_host,
                "port": config.api_port,
            },
        }

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
        logger.info(f"Saved configuration to: {output_path}")
