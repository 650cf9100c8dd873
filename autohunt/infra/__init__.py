"""基础设施层 — 日志、配置、异常体系、文件工具。"""

from .config import (
    CharacterConfig,
    CombatConfig,
    ConfigManager,
    DeviceConfig,
    LogConfig,
    UserConfig,
)
from .exceptions import (
    AutoHuntError,
    CharacterError,
    ConfigError,
    DeviceConnectionError,
    DeviceError,
    DeviceNotConnectedError,
    UnsupportedCharacterError,
)
from .file_utils import load_yaml, merge_dicts
from .logger import setup_logger

__all__ = [
    # config
    "CharacterConfig",
    "CombatConfig",
    "ConfigManager",
    "DeviceConfig",
    "LogConfig",
    "UserConfig",
    # exceptions
    "AutoHuntError",
    "CharacterError",
    "ConfigError",
    "DeviceConnectionError",
    "DeviceError",
    "DeviceNotConnectedError",
    "UnsupportedCharacterError",
    # file_utils
    "load_yaml",
    "merge_dicts",
    # logger
    "setup_logger",
]
