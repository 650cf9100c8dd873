"""AutoHunt 异常层级体系。

只有外层接缝（配置加载、设备连接、角色构建）会抛出异常；
战斗决策中的「无目标 / 放弃 / 缺少按键」均以返回值表达，不走异常。

层级树::

    AutoHuntError
    ├── ConfigError
    ├── DeviceError
    │   ├── DeviceConnectionError
    │   └── DeviceNotConnectedError
    └── CharacterError
        └── UnsupportedCharacterError
"""

from __future__ import annotations


# ── 基类 ──


class AutoHuntError(Exception):
    """所有 AutoHunt 异常的基类。"""


# ── 基础设施异常 ──


class ConfigError(AutoHuntError):
    """配置错误（文件缺失、字段非法等）。"""


# ── 输入设备异常 ──


class DeviceError(AutoHuntError):
    """输入设备操作失败。"""


class DeviceConnectionError(DeviceError):
    """连接游戏窗口失败。"""

    def __init__(self, uri: str, reason: str = "") -> None:
        self.uri = uri
        msg = f"连接设备失败: {uri}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class DeviceNotConnectedError(DeviceError):
    """设备尚未连接就发送了输入。"""

    def __init__(self) -> None:
        super().__init__("设备未连接，请先调用 connect()")


# ── 角色异常 ──


class CharacterError(AutoHuntError):
    """角色构建错误。"""


class UnsupportedCharacterError(CharacterError):
    """配置的职业没有对应的战斗控制器。"""

    def __init__(self, class_name: str) -> None:
        self.class_name = class_name
        super().__init__(f"不支持的职业: {class_name}")

