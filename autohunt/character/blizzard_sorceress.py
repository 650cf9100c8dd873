"""冰封法师 (Blizzard Sorceress) 战斗控制器。

每一轮（一次生成器调用）的决策::

    选目标 → 目标变化则重置轮数 → 攻击前检查 → 轮数上限
        → 身边有怪且暴风雪可用: 先对身边的怪放暴风雪
        → 轮数过多: 改为近距离攻击
        → 冷却中: 普通攻击 / 否则: 暴风雪

所有「不再攻击」的情况都表达为返回空列表，由动作层结束 Action。
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from loguru import logger

from autohunt.action.action import ActionPolicy, ChainAction, StepChainAction
from autohunt.action.step import (
    AttackOption,
    Distance,
    PrimaryAttack,
    SecondaryAttack,
    Step,
    Wait,
)
from autohunt.character.base import BaseCharacter, MonsterSelector, register
from autohunt.game import pather
from autohunt.game.data import GameData, UnitID
from autohunt.types import (
    COUNCIL_MEMBERS,
    CharacterClass,
    MonsterType,
    NpcID,
    PlayerState,
    Resist,
    SkillID,
)

# 护甲族的查找顺序（buff 时优先寒冰装甲）
_ARMOR_PRIORITY: tuple[SkillID, ...] = (
    SkillID.chilling_armor,
    SkillID.shiver_armor,
    SkillID.frozen_armor,
)


@dataclass
class AttackLoopState:
    """一个击杀序列 Action 的私有进度。

    Attributes
    ----------
    completed_attack_loops:
        对当前目标已完成的攻击轮数，目标变化时清零。
    previous_unit_id:
        上一轮攻击的目标。
    previous_self_blizzard:
        上次对身边小怪施放暴风雪的时刻，``None`` 表示从未施放。
    """

    completed_attack_loops: int = 0
    previous_unit_id: UnitID | None = None
    previous_self_blizzard: float | None = None


@dataclass
class BossWaitState:
    """等待 Boss 出现的进度。"""

    started_at: float | None = None
    found: bool = False


@register(CharacterClass.blizzard_sorceress)
class BlizzardSorceress(BaseCharacter):
    """冰封法师。"""

    REQUIRED_SKILLS: tuple[SkillID, ...] = (
        SkillID.blizzard,
        SkillID.teleport,
        SkillID.tome_of_town_portal,
        SkillID.shiver_armor,
        SkillID.static_field,
    )

    # ── 按键 / 增益 ──

    def check_key_bindings(self, data: GameData) -> list[SkillID]:
        missing: list[SkillID] = []
        for skill in self.REQUIRED_SKILLS:
            if data.key_bindings.key_binding_for_skill(skill)[1]:
                continue
            if skill.is_armor:
                # 护甲族任意一个绑定即可
                if self._find_armor_skill(data) is None:
                    missing.append(skill)
            else:
                missing.append(skill)

        if missing:
            logger.debug("缺少必需的技能按键: {}", [s.value for s in missing])
        return missing

    def buff_skills(self, data: GameData) -> list[SkillID]:
        skills: list[SkillID] = []
        if data.key_bindings.key_binding_for_skill(SkillID.energy_shield)[1]:
            skills.append(SkillID.energy_shield)
        armor = self._find_armor_skill(data)
        if armor is not None:
            skills.append(armor)
        return skills

    def pre_cta_buff_skills(self, data: GameData) -> list[SkillID]:
        return []

    @staticmethod
    def _find_armor_skill(data: GameData) -> SkillID | None:
        for armor in _ARMOR_PRIORITY:
            if data.key_bindings.key_binding_for_skill(armor)[1]:
                return armor
        return None

    # ── 击杀序列 ──

    def kill_monster_sequence(
        self,
        selector: MonsterSelector,
        skip_on_immunities: Sequence[Resist] | None = None,
        options: Sequence[AttackOption] = (),
    ) -> StepChainAction:
        cfg = self.config
        state = AttackLoopState()
        default_opts = tuple(options) or (Distance(cfg.min_distance, cfg.max_distance),)
        close_opts = (Distance(cfg.close_min_distance, cfg.close_max_distance),)

        def _attack_tick(d: GameData) -> list[Step]:
            unit_id = selector(d)
            if unit_id is None:
                return []
            if state.previous_unit_id != unit_id:
                state.completed_attack_loops = 0

            if not self.pre_battle_checks(d, unit_id, skip_on_immunities):
                logger.debug("目标 {} 未通过攻击前检查，本轮不攻击", unit_id)
                return []

            loops = state.completed_attack_loops
            if loops >= cfg.max_attack_loops:
                logger.warning("目标 {} 已攻击 {} 轮仍未击杀，放弃", unit_id, loops)
                return []

            opts = close_opts if loops > cfg.reduce_distance_after else default_opts

            # 身边有小怪时先放一发暴风雪清场
            nearby = self._nearby_enemy(d, state)
            if nearby is not None:
                logger.debug("对身边的怪物施放暴风雪: {}", nearby)
                state.previous_self_blizzard = self._clock()
                return [SecondaryAttack(SkillID.blizzard, nearby, 1, opts)]

            if loops == cfg.reduce_distance_after + 1:
                logger.debug("目标 {} 可能无法到达，缩短攻击距离", unit_id)

            state.completed_attack_loops += 1
            state.previous_unit_id = unit_id

            if d.player_unit.has_state(PlayerState.cooldown):
                return [PrimaryAttack(unit_id, 2, True, opts)]
            return [SecondaryAttack(SkillID.blizzard, unit_id, 1, opts)]

        return StepChainAction(
            _attack_tick, ActionPolicy.REPEAT_UNTIL_NO_STEPS, name="kill_monster_sequence"
        )

    def _nearby_enemy(self, d: GameData, state: AttackLoopState) -> UnitID | None:
        """暴风雪清场可用时，返回距离玩家足够近的第一个敌人。"""
        cfg = self.config
        last = state.previous_self_blizzard
        if last is not None and self._clock() - last <= cfg.blizzard_cooldown:
            return None
        if d.player_unit.has_state(PlayerState.cooldown):
            return None

        enemies = d.monsters.enemies()
        dists = pather.distances_from_me(d, [m.position for m in enemies])
        close = np.flatnonzero(dists < cfg.nearby_radius)
        if close.size == 0:
            return None
        return enemies[int(close[0])].unit_id

    def kill_monster_by_name(
        self,
        npc: NpcID,
        monster_type: MonsterType,
        max_distance: int,
        skip_on_immunities: Sequence[Resist] | None = None,
    ) -> StepChainAction:
        """按名称击杀单个怪物。"""
        return self.kill_monster_sequence(
            self._select_by_name(npc, monster_type),
            skip_on_immunities,
            (Distance(self.config.min_distance, max_distance),),
        )

    def _kill_monster(self, npc: NpcID, monster_type: MonsterType = MonsterType.none) -> StepChainAction:
        return self.kill_monster_sequence(self._select_by_name(npc, monster_type))

    @staticmethod
    def _select_by_name(npc: NpcID, monster_type: MonsterType) -> MonsterSelector:
        def _selector(d: GameData) -> UnitID | None:
            m = d.monsters.find_one(npc, monster_type, alive_only=True)
            return None if m is None else m.unit_id

        return _selector

    def _static_field(self, npc: NpcID, repeat: int, band: Distance) -> StepChainAction:
        """对 *npc* 施放若干次静电力场，目标不在时什么都不做。"""

        def _cast(d: GameData) -> list[Step]:
            m = d.monsters.find_one(npc, MonsterType.none, alive_only=True)
            if m is None:
                return []
            return [SecondaryAttack(SkillID.static_field, m.unit_id, repeat, (band,))]

        return StepChainAction(_cast, name=f"static_field_{npc.value}")

    # ── 单个 Boss ──

    def kill_countess(self) -> StepChainAction:
        return self.kill_monster_by_name(
            NpcID.dark_stalker, MonsterType.super_unique, self.config.max_distance
        )

    def kill_andariel(self) -> StepChainAction:
        return self.kill_monster_by_name(NpcID.andariel, MonsterType.none, self.config.max_distance)

    def kill_summoner(self) -> StepChainAction:
        return self.kill_monster_by_name(NpcID.summoner, MonsterType.none, self.config.max_distance)

    def kill_duriel(self) -> StepChainAction:
        return self.kill_monster_by_name(NpcID.duriel, MonsterType.none, self.config.max_distance)

    def kill_pindle(self, skip_on_immunities: Sequence[Resist] | None = None) -> StepChainAction:
        return self.kill_monster_by_name(
            NpcID.defiled_warrior,
            MonsterType.super_unique,
            self.config.max_distance,
            skip_on_immunities,
        )

    def kill_mephisto(self) -> StepChainAction:
        return self.kill_monster_by_name(NpcID.mephisto, MonsterType.none, self.config.max_distance)

    def kill_nihlathak(self) -> StepChainAction:
        return self.kill_monster_by_name(
            NpcID.nihlathak, MonsterType.super_unique, self.config.max_distance
        )

    # ── 议会成员：非冰免优先 ──

    def kill_council(self) -> StepChainAction:
        def _select_council(d: GameData) -> UnitID | None:
            vulnerable = []
            cold_immunes = []
            for m in d.monsters.enemies():
                if m.name not in COUNCIL_MEMBERS:
                    continue
                if m.is_immune(Resist.cold_immune):
                    cold_immunes.append(m)
                else:
                    vulnerable.append(m)
            candidates = vulnerable + cold_immunes
            return candidates[0].unit_id if candidates else None

        return self.kill_monster_sequence(
            _select_council, None, (Distance(8, self.config.max_distance),)
        )

    # ── 多阶段 Boss ──

    def kill_izual(self) -> ChainAction:
        return self.kill_repeatedly(NpcID.izual, 7)

    def kill_baal(self) -> ChainAction:
        return self.kill_repeatedly(NpcID.baal_crab, 5)

    def kill_repeatedly(self, npc: NpcID, static_field_repeat: int, kills: int = 4) -> ChainAction:
        """先放静电力场，再连续执行 *kills* 次击杀（应对多次复活 / 多阶段）。"""

        def _phases(d: GameData) -> list:
            actions = [self._static_field(npc, static_field_repeat, Distance(5, 8))]
            actions.extend(self._kill_monster(npc) for _ in range(kills))
            return actions

        return ChainAction(_phases, name=f"kill_repeatedly_{npc.value}")

    # ── 等待出现的 Boss ──

    def kill_diablo(self) -> ChainAction:
        """等待 Diablo 出现后击杀。

        超时前从未出现 → 记录错误并结束；出现过之后消失 / 死亡 → 视为成功。
        """
        cfg = self.config
        state = BossWaitState()

        def _hunt(d: GameData) -> list:
            now = self._clock()
            if state.started_at is None:
                state.started_at = now
            if not state.found and now - state.started_at > cfg.boss_timeout:
                logger.error("等待 {:.0f}s 仍未发现 Diablo，放弃", cfg.boss_timeout)
                return []

            diablo = d.monsters.find_one(NpcID.diablo, MonsterType.none, alive_only=True)
            alive = diablo is not None
            if state.found:
                # 已交战过一次：消失或死亡即成功，仍存活说明击杀序列已放弃
                if alive:
                    logger.warning("Diablo 仍然存活，击杀序列已放弃，不再重新交战")
                return []
            if not alive:
                return [
                    StepChainAction(
                        lambda _: [Wait(cfg.boss_poll_interval)], name="wait_for_diablo"
                    )
                ]

            state.found = True
            logger.info("发现 Diablo，开始攻击")
            return [
                self._static_field(NpcID.diablo, 5, Distance(3, 8)),
                self._kill_monster(NpcID.diablo),
            ]

        return ChainAction(_hunt, ActionPolicy.REPEAT_UNTIL_NO_STEPS, name="kill_diablo")
