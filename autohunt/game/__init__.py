"""游戏世界层 — 快照数据模型、读取接口、距离计算。"""

from autohunt.game.data import (
    GameData,
    KeyBindings,
    Monster,
    Monsters,
    PlayerUnit,
    Position,
    UnitID,
)
from autohunt.game.reader import SnapshotProvider, StaticSnapshotProvider

__all__ = [
    "GameData",
    "KeyBindings",
    "Monster",
    "Monsters",
    "PlayerUnit",
    "Position",
    "UnitID",
    "SnapshotProvider",
    "StaticSnapshotProvider",
]
