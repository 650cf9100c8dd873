"""输入设备控制器 — 鼠标 / 键盘注入。

提供纯粹的输入能力（移动指针、点击、按键），
**不做**任何状态读取、目标判定或战斗逻辑。

指针坐标使用游戏画面内的 **像素坐标**，左上角为 ``(0, 0)``。

使用方式::

    from autohunt.device.controller import AirtestInputDevice

    dev = AirtestInputDevice(uri="Windows:///?title_re=Diablo II.*")
    dev.connect()
    dev.move_pointer(640, 360)
    dev.click(MouseButton.right)
    dev.disconnect()
"""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from dataclasses import dataclass

from loguru import logger
from airtest.core.api import connect_device
from airtest.core.error import AirtestError, DeviceConnectionError as AirtestConnectionError

from autohunt.infra import DeviceConfig, DeviceConnectionError, DeviceNotConnectedError
from autohunt.types import MouseButton

# ── 日志开关（由 infra.logger.setup_logger 写入）──────────────────────────────
_show_input_detail: bool = False


def _caller_info(depth: int = 2) -> str:
    """返回调用栈中指定深度的调用者信息（文件名:行号 in 函数名）。"""
    try:
        frame = inspect.stack()[depth]
        filename = frame.filename.replace("\\", "/").rsplit("/", 1)[-1]
        return f"{filename}:{frame.lineno} in {frame.function}"
    except (IndexError, AttributeError):
        return "<unknown>"


def configure(*, show_input_detail: bool = False) -> None:
    """配置 controller 模块的日志行为。

    Parameters
    ----------
    show_input_detail:
        ``True`` 时输出每次输入操作的 DEBUG 日志；
        ``False``（默认）时静默，避免刷屏。
    """
    global _show_input_detail
    _show_input_detail = show_input_detail


@dataclass(frozen=True, slots=True)
class DeviceInfo:
    """已连接设备的基本信息。

    Attributes
    ----------
    uri:
        airtest 设备 URI。
    resolution:
        游戏画面分辨率 ``(width, height)``。
    """

    uri: str
    resolution: tuple[int, int]


class InputDevice(ABC):
    """输入设备抽象基类。

    仅负责把输入送达游戏窗口。子类实现具体注入方式。
    """

    # ── 连接管理 ──

    @abstractmethod
    def connect(self) -> DeviceInfo:
        """连接游戏窗口，返回设备信息。

        Raises
        ------
        DeviceConnectionError
            连接失败时抛出。
        """
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """断开连接。"""
        ...

    # ── 指针 ──

    @abstractmethod
    def move_pointer(self, x: int, y: int) -> None:
        """把指针移动到画面像素坐标 ``(x, y)``。"""
        ...

    @abstractmethod
    def click(self, button: MouseButton = MouseButton.left) -> None:
        """在当前指针位置点击。"""
        ...

    # ── 按键 ──

    @abstractmethod
    def key_press(self, key: str) -> None:
        """按下并松开一个键。

        Parameters
        ----------
        key:
            按键名（与游戏内按键绑定表中的写法一致，如 ``"F1"``）。
        """
        ...


# ── airtest 实现 ──


class AirtestInputDevice(InputDevice):
    """基于 airtest Windows 设备的输入控制器。

    Parameters
    ----------
    uri:
        airtest 设备 URI。为 None 时由 *config* 推导。
    config:
        :class:`~autohunt.infra.config.DeviceConfig` 实例。
    """

    def __init__(
        self,
        uri: str | None = None,
        config: DeviceConfig | None = None,
    ) -> None:
        self._config = config or DeviceConfig()
        self._uri = uri or self._config.resolved_uri
        self._device = None  # airtest.core.win.Windows
        self._pointer: tuple[int, int] = (0, 0)

    # ── 连接 ──

    def connect(self) -> DeviceInfo:
        try:
            self._device = connect_device(self._uri)
        except (AirtestError, AirtestConnectionError) as exc:
            raise DeviceConnectionError(self._uri, str(exc)) from exc

        if self._device is None:
            raise DeviceConnectionError(self._uri, "连接后设备对象为 None")

        resolution = (self._config.screen_width, self._config.screen_height)
        logger.info("[Device] 已连接游戏窗口: {} ({}x{})", self._uri, *resolution)
        return DeviceInfo(uri=self._uri, resolution=resolution)

    def disconnect(self) -> None:
        self._device = None
        logger.info("[Device] 已断开: {}", self._uri)

    def _require_device(self):
        """返回已连接的设备实例，未连接时抛出异常。"""
        if self._device is None:
            raise DeviceNotConnectedError()
        return self._device

    # ── 指针 ──

    def move_pointer(self, x: int, y: int) -> None:
        dev = self._require_device()
        if _show_input_detail:
            logger.debug(
                "[Device] move {} → ({}, {})  caller={}", self._pointer, x, y, _caller_info()
            )
        dev.mouse_move((x, y))
        self._pointer = (x, y)

    def click(self, button: MouseButton = MouseButton.left) -> None:
        dev = self._require_device()
        if _show_input_detail:
            logger.debug(
                "[Device] click {} @ {}  caller={}", button.value, self._pointer, _caller_info()
            )
        dev.mouse_down(button.value)
        dev.mouse_up(button.value)

    # ── 按键 ──

    def key_press(self, key: str) -> None:
        dev = self._require_device()
        if _show_input_detail:
            logger.debug("[Device] key_press({})  caller={}", key, _caller_info())
        dev.key_press(key)
        dev.key_release(key)
