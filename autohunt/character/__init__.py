"""角色战斗控制器。

模块组成::

    character/
    ├── base.py                # Character 契约、公共检查、职业注册表
    └── blizzard_sorceress.py  # 冰封法师

典型使用::

    from autohunt.character import build_character

    char = build_character(config)
    missing = char.check_key_bindings(reader.get_data())
    run_action(char.kill_andariel(), ActionContext(reader, executor))
"""

from .base import BaseCharacter, Character, MonsterSelector, build_character, register
from .blizzard_sorceress import AttackLoopState, BlizzardSorceress, BossWaitState

__all__ = [
    "AttackLoopState",
    "BaseCharacter",
    "BlizzardSorceress",
    "BossWaitState",
    "Character",
    "MonsterSelector",
    "build_character",
    "register",
]
