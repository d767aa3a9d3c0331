"""User configuration for layerkit."""

from .models import IconMode, UserConfigData
from .user_config import UserConfig, create_user_config


__all__ = ["IconMode", "UserConfig", "UserConfigData", "create_user_config"]
