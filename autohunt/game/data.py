"""游戏世界快照。

一次 ``GameData`` 是某一时刻的只读视图：玩家状态、存活怪物、按键绑定。
快照由外部读取层 (:mod:`autohunt.game.reader`) 生成，
战斗控制器只读取、从不修改。
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field

from autohunt.types import MonsterType, NpcID, PlayerState, Resist, SkillID

UnitID = int
"""游戏内单位唯一标识。"""


@dataclass(frozen=True, slots=True)
class Position:
    """游戏坐标。"""

    x: int
    y: int


@dataclass(frozen=True, slots=True)
class Monster:
    """单个怪物单位。

    Attributes
    ----------
    unit_id:
        单位标识，同一只怪在多次快照中保持不变。
    name:
        怪物名称。
    type:
        怪物分类（普通 / 精英 / 超级精英 ...）。
    position:
        当前坐标。
    life:
        剩余生命值，``<= 0`` 表示已死亡。
    immunities:
        免疫的元素。
    """

    unit_id: UnitID
    name: NpcID
    type: MonsterType = MonsterType.none
    position: Position = Position(0, 0)
    life: int = 1
    immunities: frozenset[Resist] = frozenset()

    @property
    def is_alive(self) -> bool:
        return self.life > 0

    def is_immune(self, resist: Resist) -> bool:
        """是否免疫 *resist*。"""
        return resist in self.immunities


class Monsters(Sequence[Monster]):
    """快照中的怪物集合。"""

    def __init__(self, monsters: Sequence[Monster] = ()) -> None:
        self._items: tuple[Monster, ...] = tuple(monsters)

    def __getitem__(self, index):  # type: ignore[override]
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Monster]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"Monsters({list(self._items)!r})"

    def enemies(self) -> list[Monster]:
        """存活的敌对单位。"""
        return [m for m in self._items if m.is_alive]

    def find_one(
        self, npc: NpcID, monster_type: MonsterType, alive_only: bool = False
    ) -> Monster | None:
        """按名称和分类查找第一只怪物。

        默认包括已死亡的；*alive_only* 为 True 时跳过尸体
        （多阶段 Boss 的前一阶段尸体可能仍在列表中）。
        """
        for m in self._items:
            if alive_only and not m.is_alive:
                continue
            if m.name == npc and m.type == monster_type:
                return m
        return None

    def find_by_id(self, unit_id: UnitID) -> Monster | None:
        """按单位标识查找。"""
        for m in self._items:
            if m.unit_id == unit_id:
                return m
        return None


@dataclass(frozen=True, slots=True)
class PlayerUnit:
    """玩家角色。"""

    position: Position = Position(0, 0)
    states: frozenset[PlayerState] = frozenset()

    def has_state(self, state: PlayerState) -> bool:
        return state in self.states


@dataclass(frozen=True)
class KeyBindings:
    """技能 → 按键 的绑定表。"""

    bindings: Mapping[SkillID, str] = field(default_factory=dict)

    def key_binding_for_skill(self, skill: SkillID) -> tuple[str, bool]:
        """查询技能绑定的按键。

        Returns
        -------
        tuple[str, bool]
            ``(按键, 是否找到)``，未绑定时按键为空串。
        """
        key = self.bindings.get(skill)
        if not key:
            return "", False
        return key, True


@dataclass(frozen=True)
class GameData:
    """某一时刻的世界快照。"""

    player_unit: PlayerUnit = field(default_factory=PlayerUnit)
    monsters: Monsters = field(default_factory=Monsters)
    key_bindings: KeyBindings = field(default_factory=KeyBindings)
