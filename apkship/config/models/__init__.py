"""Configuration models."""

from .user import PublishSettings, UserConfigData, default_config_dir


__all__ = ["PublishSettings", "UserConfigData", "default_config_dir"]
