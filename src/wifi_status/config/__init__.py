"""Configuration loading."""

from wifi_status.config.config_manager import ConfigError, ConfigManager

__all__ = ["ConfigError", "ConfigManager"]
