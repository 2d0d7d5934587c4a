"""Configuration manager for loading and validating config files."""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, TypeVar, Union

import yaml

from wifi_status.wireless.models import AuthorizationStatus
from wifi_status.wireless.monitor import MonitorSettings

T = TypeVar("T")


logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "debug": False,
    "monitor": {
        "poll_interval": 2.0,
        "reconcile_delay": 0.5,
    },
    "adapter": {
        "backend": "nmcli",
        "command_timeout": 10.0,
        "connect_timeout": 30.0,
    },
    "permission": {
        "status": AuthorizationStatus.GRANTED.value,
    },
    "web": {
        "enabled": False,
        "host": "127.0.0.1",
        "port": 7475,
    },
}

BACKENDS = ("nmcli", "memory")


class ConfigError(Exception):
    """Raised when configuration is invalid."""


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into a copy of ``base``, recursing into dictionaries."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Manages loading and accessing configuration from YAML files."""

    def __init__(self, user_config_path: Optional[str] = None) -> None:
        """Initialize the configuration manager.

        Args:
            user_config_path: Path to user config file. When None, built-in
                defaults are used.

        Raises:
            ConfigError: If the given config file doesn't exist or is invalid
        """
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self._user_config_path = user_config_path
        self._load_config()

    def _load_yaml_file(self, path: Path) -> Dict[str, Any]:
        """Load a YAML file and return its contents.

        Args:
            path: Path to YAML file

        Returns:
            Dictionary containing the YAML contents

        Raises:
            ConfigError: If file cannot be read or parsed
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Config file not found: {path}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load config file {path}: {e}") from e

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return content

    @staticmethod
    def _require_section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = config.get(name)
        if not isinstance(section, dict):
            raise ConfigError(f"'{name}' section must be a dictionary")
        return section

    @staticmethod
    def _require_positive(section: Dict[str, Any], section_name: str, key: str) -> None:
        value = section.get(key)
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"'{section_name}.{key}' must be a number")
        if value <= 0:
            raise ConfigError(f"'{section_name}.{key}' must be positive")

    def _validate_config(self) -> None:
        """Validate the loaded configuration.

        Raises:
            ConfigError: If configuration is invalid
        """
        if not isinstance(self._config.get("debug"), bool):
            raise ConfigError("'debug' must be true or false")

        monitor = self._require_section(self._config, "monitor")
        for key in ("poll_interval", "reconcile_delay"):
            self._require_positive(monitor, "monitor", key)

        adapter = self._require_section(self._config, "adapter")
        if adapter.get("backend") not in BACKENDS:
            raise ConfigError(f"'adapter.backend' must be one of: {', '.join(BACKENDS)}")
        for key in ("command_timeout", "connect_timeout"):
            self._require_positive(adapter, "adapter", key)

        permission = self._require_section(self._config, "permission")
        valid_statuses = [s.value for s in AuthorizationStatus]
        if permission.get("status") not in valid_statuses:
            raise ConfigError(
                f"'permission.status' must be one of: {', '.join(valid_statuses)}"
            )

        web = self._require_section(self._config, "web")
        if not isinstance(web.get("enabled"), bool):
            raise ConfigError("'web.enabled' must be true or false")
        port = web.get("port")
        if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
            raise ConfigError("'web.port' must be an integer between 1 and 65535")

    def _load_config(self) -> None:
        """Load configuration from the user config file, if any.

        Raises:
            ConfigError: If config file doesn't exist or is invalid
        """
        if self._user_config_path is None:
            logger.info("No configuration file given, using defaults")
            self._validate_config()
            return

        config_path = Path(self._user_config_path)

        # Check if file exists first
        if not config_path.exists():
            raise ConfigError(
                f"Configuration file not found: {config_path}\n"
                f"Please create a config file. See config.yml.example for reference."
            )

        logger.info("Loading configuration from: %s", config_path)
        self._config = _deep_merge(DEFAULT_CONFIG, self._load_yaml_file(config_path))

        # Validate the configuration
        self._validate_config()
        logger.info("Configuration loaded and validated successfully")

    def get(self, key: str, default: Optional[T] = None) -> Union[Any, T]:
        """Get a configuration value by key.

        Supports dot notation for nested values (e.g., 'monitor.poll_interval')

        Args:
            key: Configuration key (supports dot notation)
            default: Default value if key not found

        Returns:
            Configuration value or default (type matches default when provided)
        """
        keys = key.split(".")
        value: Any = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default  # type: ignore[return-value]

        return value

    def is_debug(self) -> bool:
        """Check whether debug logging is requested by the config file."""
        return bool(self._config["debug"])

    def get_monitor_settings(self) -> MonitorSettings:
        """Build monitor timing settings.

        Returns:
            MonitorSettings from the 'monitor' section
        """
        monitor = self._config["monitor"]
        return MonitorSettings(
            poll_interval=float(monitor["poll_interval"]),
            reconcile_delay=float(monitor["reconcile_delay"]),
        )

    def get_adapter_config(self) -> Dict[str, Any]:
        """Get interface adapter configuration.

        Returns:
            Adapter configuration dictionary
        """
        return dict(self._config["adapter"])

    def get_authorization_status(self) -> AuthorizationStatus:
        """Get the configured SSID authorization status."""
        return AuthorizationStatus(self._config["permission"]["status"])

    def to_dict(self) -> Dict[str, Any]:
        """Get the entire configuration as a dictionary.

        Returns:
            Complete configuration dictionary
        """
        return copy.deepcopy(self._config)
