"""输入设备层 — 鼠标 / 键盘注入。

所有指针坐标为游戏画面像素坐标。
"""

from autohunt.device.controller import (
    AirtestInputDevice,
    DeviceInfo,
    InputDevice,
)

__all__ = [
    "AirtestInputDevice",
    "DeviceInfo",
    "InputDevice",
]
