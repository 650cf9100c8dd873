"""输入操作执行器。

把一组原子输入操作（移动指针、点击、按键）按顺序同步执行，
每个操作完成后阻塞等待「基础延迟 + 1%–30% 随机附加」，
避免固定节奏的机械化输入。

使用方式::

    from autohunt.action import hid

    hid.run(
        device,
        hid.MouseDisplacement(640, 360, delay=0.05),
        hid.KeyPress("F1", delay=0.05),
        hid.MouseClick(MouseButton.right, delay=0.1),
    )
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

import numpy as np

from autohunt.device.controller import InputDevice
from autohunt.types import MouseButton

MIN_JITTER = 0.01
"""随机附加延迟下限（相对基础延迟）。"""
MAX_JITTER = 0.30
"""随机附加延迟上限（不含）。"""

# 进程级随机源，只在导入时播种一次
_rng = np.random.default_rng()


def reseed(seed: int | None = None) -> None:
    """重新播种随机源（测试 / 回放用）。"""
    global _rng
    _rng = np.random.default_rng(seed)


@dataclass(frozen=True, slots=True)
class DelayPolicy:
    """操作后延迟策略。

    每次调用 :meth:`effective` 都重新抽样，不缓存。
    结果满足 ``base <= effective() < base * 1.3``。

    Attributes
    ----------
    base:
        基础延迟（秒）。
    """

    base: float

    def effective(self) -> float:
        surcharge = _rng.uniform(MIN_JITTER, MAX_JITTER)
        return self.base * (1.0 + surcharge)


class HIDOperation(ABC):
    """原子输入操作：一个输入效果 + 一条延迟规则。"""

    @abstractmethod
    def execute(self, device: InputDevice) -> None:
        """在 *device* 上产生输入效果。"""
        ...

    @abstractmethod
    def delay(self) -> float:
        """操作完成后需要等待的时间（秒）。"""
        ...


class DelayedOperation(HIDOperation):
    """带随机延迟的操作基类。"""

    def __init__(self, delay: float) -> None:
        self._policy = DelayPolicy(delay)

    @property
    def base_delay(self) -> float:
        return self._policy.base

    def delay(self) -> float:
        return self._policy.effective()


class MouseDisplacement(DelayedOperation):
    """把指针移动到画面坐标 ``(x, y)``。"""

    def __init__(self, x: int, y: int, delay: float) -> None:
        super().__init__(delay)
        self.x = x
        self.y = y

    def execute(self, device: InputDevice) -> None:
        device.move_pointer(self.x, self.y)

    def __repr__(self) -> str:
        return f"MouseDisplacement({self.x}, {self.y}, delay={self.base_delay})"


class MouseClick(DelayedOperation):
    """在当前指针位置点击。"""

    def __init__(self, button: MouseButton, delay: float) -> None:
        super().__init__(delay)
        self.button = button

    def execute(self, device: InputDevice) -> None:
        device.click(self.button)

    def __repr__(self) -> str:
        return f"MouseClick({self.button.value}, delay={self.base_delay})"


class KeyPress(DelayedOperation):
    """按下并松开一个键。"""

    def __init__(self, key: str, delay: float) -> None:
        super().__init__(delay)
        self.key = key

    def execute(self, device: InputDevice) -> None:
        device.key_press(self.key)

    def __repr__(self) -> str:
        return f"KeyPress({self.key!r}, delay={self.base_delay})"


def run(
    device: InputDevice,
    *sequence: HIDOperation,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """依次执行 *sequence*，每个操作后阻塞其延迟时间。

    操作本身的异常不在此处理，直接向上传播。

    Parameters
    ----------
    device:
        输入设备。
    sequence:
        待执行的操作，严格按给定顺序。
    sleep:
        阻塞函数，默认 :func:`time.sleep`。
    """
    for op in sequence:
        op.execute(device)
        sleep(op.delay())
