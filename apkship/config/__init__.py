"""Configuration package for apkship."""

from .models import PublishSettings, UserConfigData
from .user_config import UserConfig, create_user_config


__all__ = [
    "PublishSettings",
    "UserConfig",
    "UserConfigData",
    "create_user_config",
]
