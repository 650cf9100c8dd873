"""世界快照读取接口。

实际的内存 / 画面读取由外部实现；动作层只依赖 :class:`SnapshotProvider`。
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from autohunt.game.data import GameData


class SnapshotProvider(ABC):
    """快照提供者。

    每次调用 :meth:`get_data` 都应返回调用时刻的最新状态，
    且可以被频繁、廉价地重复调用。
    """

    @abstractmethod
    def get_data(self) -> GameData:
        """读取当前世界快照。"""
        ...


class StaticSnapshotProvider(SnapshotProvider):
    """返回固定快照的提供者，可随时替换内容。

    用于离线调试和回放。
    """

    def __init__(self, data: GameData | None = None) -> None:
        self._data = data or GameData()

    def set_data(self, data: GameData) -> None:
        self._data = data

    def get_data(self) -> GameData:
        return self._data
