"""全局枚举类型定义。

技能、怪物、抗性、玩家状态等与游戏语义相关的枚举集中于此，供各层引用。
"""

from __future__ import annotations

from enum import Enum


# ── 枚举基类 ──


class BaseEnum(Enum):
    """提供更友好的中文报错信息。"""

    @classmethod
    def _missing_(cls, value: object) -> None:
        supported = ", ".join(str(m.value) for m in cls)
        raise ValueError(f'"{value}" 不是合法的 {cls.__name__} 取值。 支持: [{supported}]')


class StrEnum(str, BaseEnum):
    """字符串枚举基类。"""


# ── 角色 ──


class CharacterClass(StrEnum):
    """角色职业（战斗原型）。"""

    blizzard_sorceress = "sorceress"
    """冰封法师"""


# ── 技能 ──


class SkillID(StrEnum):
    """技能标识。

    仅列出战斗控制器会引用的技能；取值与按键绑定表中的键名一致。
    """

    blizzard = "blizzard"
    """暴风雪"""
    static_field = "static_field"
    """静电力场"""
    teleport = "teleport"
    """瞬间移动"""
    tome_of_town_portal = "tome_of_town_portal"
    """回城卷轴书"""
    frozen_armor = "frozen_armor"
    """冰封装甲"""
    shiver_armor = "shiver_armor"
    """碎冰甲"""
    chilling_armor = "chilling_armor"
    """寒冰装甲"""
    energy_shield = "energy_shield"
    """能量护盾"""

    @property
    def is_armor(self) -> bool:
        """是否属于可互相替代的护甲技能族。"""
        return self in ARMOR_SKILLS


ARMOR_SKILLS: tuple[SkillID, ...] = (
    SkillID.frozen_armor,
    SkillID.shiver_armor,
    SkillID.chilling_armor,
)
"""护甲技能族，绑定其中任意一个即视为满足。"""


# ── 怪物 ──


class NpcID(StrEnum):
    """怪物 / Boss 名称。"""

    dark_stalker = "DarkStalker"
    """女伯爵"""
    andariel = "Andariel"
    summoner = "Summoner"
    duriel = "Duriel"
    defiled_warrior = "DefiledWarrior"
    """Pindleskin"""
    mephisto = "Mephisto"
    council_member = "CouncilMember"
    council_member2 = "CouncilMember2"
    council_member3 = "CouncilMember3"
    izual = "Izual"
    diablo = "Diablo"
    nihlathak = "Nihlathak"
    baal_crab = "BaalCrab"
    zombie = "Zombie"
    """普通小怪"""
    fallen = "Fallen"
    """普通小怪"""


COUNCIL_MEMBERS: frozenset[NpcID] = frozenset(
    {NpcID.council_member, NpcID.council_member2, NpcID.council_member3}
)
"""崔凡克议会成员。"""


class MonsterType(StrEnum):
    """怪物分类。"""

    none = "none"
    """普通分类（Boss 本体也属于此类）"""
    champion = "champion"
    unique = "unique"
    super_unique = "super_unique"
    minion = "minion"


class Resist(StrEnum):
    """抗性 / 免疫类型。"""

    cold_immune = "cold_immune"
    fire_immune = "fire_immune"
    lightning_immune = "lightning_immune"
    poison_immune = "poison_immune"
    physical_immune = "physical_immune"
    magic_immune = "magic_immune"


# ── 玩家 ──


class PlayerState(StrEnum):
    """玩家身上的状态标记。"""

    cooldown = "cooldown"
    """技能冷却中（施放了有冷却的技能）"""


# ── 输入设备 ──


class MouseButton(StrEnum):
    """鼠标按键。"""

    left = "left"
    right = "right"
