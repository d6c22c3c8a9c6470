"""Configuration: config manager and the bundled JSON defaults."""

from debloater.config.config_manager import load_config

__all__ = ["load_config"]
