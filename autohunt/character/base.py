"""角色战斗控制器接口与公共实现。

每个职业（战斗原型）实现一个 :class:`Character`：
按键检查、增益技能列表，以及各类击杀序列的构造方法。
击杀序列本身是 :class:`~autohunt.action.action.Action`，交由动作层执行。
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Callable

from loguru import logger

from autohunt.action.action import Action
from autohunt.action.step import AttackOption
from autohunt.game.data import GameData, UnitID
from autohunt.infra import CombatConfig, UnsupportedCharacterError, UserConfig
from autohunt.types import CharacterClass, Resist, SkillID

MonsterSelector = Callable[[GameData], UnitID | None]
"""目标选择函数: ``(快照) → 目标单位 | None``。"""

Clock = Callable[[], float]
"""单调时钟，返回秒。"""


class Character(ABC):
    """职业战斗控制器契约。"""

    # ── 配置检查 ──

    @abstractmethod
    def check_key_bindings(self, data: GameData) -> list[SkillID]:
        """返回必需但未绑定按键的技能。"""
        ...

    @abstractmethod
    def buff_skills(self, data: GameData) -> list[SkillID]:
        """返回需要施放的增益技能（按已绑定的按键推导）。"""
        ...

    @abstractmethod
    def pre_cta_buff_skills(self, data: GameData) -> list[SkillID]:
        """切换战斗指令武器前需要施放的增益技能。"""
        ...

    # ── 击杀序列 ──

    @abstractmethod
    def kill_monster_sequence(
        self,
        selector: MonsterSelector,
        skip_on_immunities: Sequence[Resist] | None = None,
        options: Sequence[AttackOption] = (),
    ) -> Action:
        """构造「持续攻击 *selector* 选中的目标直到无目标」的 Action。"""
        ...

    @abstractmethod
    def kill_countess(self) -> Action: ...

    @abstractmethod
    def kill_andariel(self) -> Action: ...

    @abstractmethod
    def kill_summoner(self) -> Action: ...

    @abstractmethod
    def kill_duriel(self) -> Action: ...

    @abstractmethod
    def kill_pindle(self, skip_on_immunities: Sequence[Resist] | None = None) -> Action: ...

    @abstractmethod
    def kill_mephisto(self) -> Action: ...

    @abstractmethod
    def kill_nihlathak(self) -> Action: ...

    @abstractmethod
    def kill_council(self) -> Action: ...

    @abstractmethod
    def kill_izual(self) -> Action: ...

    @abstractmethod
    def kill_diablo(self) -> Action: ...

    @abstractmethod
    def kill_baal(self) -> Action: ...


class BaseCharacter(Character):
    """各职业共用的状态与检查。

    Parameters
    ----------
    config:
        战斗参数。
    clock:
        单调时钟，默认 :func:`time.monotonic`；测试中可替换为假时钟。
    """

    def __init__(
        self,
        config: CombatConfig | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self.config = config or CombatConfig()
        self._clock = clock

    def pre_battle_checks(
        self,
        data: GameData,
        unit_id: UnitID,
        skip_on_immunities: Sequence[Resist] | None,
    ) -> bool:
        """攻击前检查：目标仍然存活，且不带有需要跳过的免疫。"""
        monster = data.monsters.find_by_id(unit_id)
        if monster is None or not monster.is_alive:
            return False
        for resist in skip_on_immunities or ():
            if monster.is_immune(resist):
                logger.info("怪物 {} 免疫 {}，跳过", monster.name.value, resist.value)
                return False
        return True


# ── 职业注册表 ──

_REGISTRY: dict[CharacterClass, type[BaseCharacter]] = {}


def register(class_name: CharacterClass) -> Callable[[type[BaseCharacter]], type[BaseCharacter]]:
    """类装饰器：把实现登记到 *class_name* 下。"""

    def _decorator(cls: type[BaseCharacter]) -> type[BaseCharacter]:
        _REGISTRY[class_name] = cls
        return cls

    return _decorator


def build_character(config: UserConfig, clock: Clock = time.monotonic) -> Character:
    """根据用户配置构造战斗控制器。

    Raises
    ------
    UnsupportedCharacterError
        配置的职业没有已登记的实现。
    """
    class_name = config.character.class_name
    cls = _REGISTRY.get(class_name)
    if cls is None:
        raise UnsupportedCharacterError(class_name.value)
    logger.info("使用战斗控制器: {}", cls.__name__)
    return cls(config.combat, clock=clock)
