"""冰封法师战斗控制器测试。"""

from __future__ import annotations

import dataclasses

import pytest
from loguru import logger

from autohunt.action.action import ActionContext, ActionPolicy, ChainAction, StepChainAction
from autohunt.action.step import Distance, PrimaryAttack, SecondaryAttack, Wait
from autohunt.character import base
from autohunt.character import BlizzardSorceress, build_character
from autohunt.game.data import GameData, Monster
from autohunt.game.reader import StaticSnapshotProvider
from autohunt.infra import CombatConfig, UnsupportedCharacterError, UserConfig
from autohunt.types import MonsterType, NpcID, Resist, SkillID
from testing._fakes import CallableReader, FakeClock, RecordingExecutor, game_data, monster

DEFAULT_BAND = Distance(25, 30)
CLOSE_BAND = Distance(1, 5)


class World:
    """可变的世界，每次读取生成新快照。"""

    def __init__(self, *monsters: Monster, cooldown: bool = False) -> None:
        self.monsters: dict[int, Monster] = {m.unit_id: m for m in monsters}
        self.cooldown = cooldown

    def data(self) -> GameData:
        return game_data(*self.monsters.values(), cooldown=self.cooldown)

    def kill(self, unit_id: int) -> None:
        self.monsters[unit_id] = dataclasses.replace(self.monsters[unit_id], life=0)

    def kill_on_blizzard(self, step) -> None:
        """执行到暴风雪时，被打中的怪物死亡。"""
        if isinstance(step, SecondaryAttack) and step.skill == SkillID.blizzard:
            self.kill(step.target)


@pytest.fixture
def sorc(clock: FakeClock) -> BlizzardSorceress:
    return BlizzardSorceress(CombatConfig(), clock=clock)


def _fixed(unit_id: int | None):
    return lambda d: unit_id


def _run(action, world: World, clock: FakeClock | None = None, on_step=None):
    executor = RecordingExecutor(clock, on_step)
    result = action.run(ActionContext(CallableReader(world.data), executor))
    return result, executor.steps


# ═══════════════════════════════════════════════════════════════════════════════
# 单轮决策
# ═══════════════════════════════════════════════════════════════════════════════


class TestAttackTick:
    def test_no_target_yields_nothing(self, sorc):
        action = sorc.kill_monster_sequence(_fixed(None))
        assert action._generator(game_data(monster(1))) == []

    def test_blizzard_with_default_band(self, sorc):
        action = sorc.kill_monster_sequence(_fixed(1))
        steps = action._generator(game_data(monster(1, x=30, y=0)))
        assert steps == [SecondaryAttack(SkillID.blizzard, 1, 1, (DEFAULT_BAND,))]

    def test_caller_band_respected(self, sorc):
        action = sorc.kill_monster_sequence(_fixed(1), None, (Distance(10, 20),))
        steps = action._generator(game_data(monster(1, x=30, y=0)))
        assert steps[0].distance == Distance(10, 20)

    def test_cooldown_uses_primary_attack(self, sorc):
        action = sorc.kill_monster_sequence(_fixed(1))
        steps = action._generator(game_data(monster(1, x=30, y=0), cooldown=True))
        assert steps == [PrimaryAttack(1, 2, True, (DEFAULT_BAND,))]

    def test_dead_target_fails_checks(self, sorc):
        action = sorc.kill_monster_sequence(_fixed(1))
        assert action._generator(game_data(monster(1, life=0))) == []

    def test_immune_target_skipped(self, sorc):
        action = sorc.kill_monster_sequence(_fixed(1), [Resist.cold_immune])
        data = game_data(monster(1, x=30, y=0, immunities=(Resist.cold_immune,)))
        assert action._generator(data) == []

    def test_immunity_not_in_skip_list_attacked(self, sorc):
        action = sorc.kill_monster_sequence(_fixed(1), [Resist.fire_immune])
        data = game_data(monster(1, x=30, y=0, immunities=(Resist.cold_immune,)))
        assert len(action._generator(data)) == 1

    def test_policy_is_repeat_until_empty(self, sorc):
        action = sorc.kill_monster_sequence(_fixed(1))
        assert isinstance(action, StepChainAction)
        assert action.policy is ActionPolicy.REPEAT_UNTIL_NO_STEPS


# ═══════════════════════════════════════════════════════════════════════════════
# 轮数上限 / 目标切换 / 距离退化
# ═══════════════════════════════════════════════════════════════════════════════


class TestAttackLoops:
    def test_gives_up_after_cap(self, sorc):
        world = World(monster(1, x=30, y=0))
        result, steps = _run(sorc.kill_monster_sequence(_fixed(1)), world)
        assert result.steps == 40
        assert result.ticks == 41
        assert all(s.target == 1 for s in steps)

    def test_custom_cap(self, clock):
        sorc = BlizzardSorceress(CombatConfig(max_attack_loops=5), clock=clock)
        world = World(monster(1, x=30, y=0))
        result, _ = _run(sorc.kill_monster_sequence(_fixed(1)), world)
        assert result.ticks <= 5 + 1
        assert result.steps == 5

    def test_terminates_when_target_dies(self, sorc):
        world = World(monster(1, x=30, y=0))
        selector = lambda d: 1 if d.monsters.find_by_id(1).is_alive else None  # noqa: E731
        result, steps = _run(
            sorc.kill_monster_sequence(selector), world, on_step=world.kill_on_blizzard
        )
        assert result.steps == 1
        assert result.ticks == 2

    def test_target_switch_resets_counter(self, sorc):
        world = World(monster(1, x=30, y=0), monster(2, x=0, y=30))
        calls = {"n": 0}

        def selector(d):
            calls["n"] += 1
            return 1 if calls["n"] <= 5 else 2

        result, steps = _run(sorc.kill_monster_sequence(selector), world)

        assert [s.target for s in steps[:5]] == [1] * 5
        # B 拥有完整的 40 轮预算
        assert [s.target for s in steps[5:]] == [2] * 40
        assert result.steps == 45

    def test_distance_degrades_after_twelve_loops(self, sorc):
        world = World(monster(1, x=30, y=0))
        _, steps = _run(sorc.kill_monster_sequence(_fixed(1)), world)

        bands = [s.distance for s in steps]
        assert all(b == DEFAULT_BAND for b in bands[:13])
        assert all(b == CLOSE_BAND for b in bands[13:])
        assert all(1 <= b.min and b.max <= 5 for b in bands[13:])

    def test_degradation_does_not_leak_to_new_target(self, sorc):
        action = sorc.kill_monster_sequence(lambda d: d.monsters[0].unit_id)
        tick = action._generator

        a = game_data(monster(1, x=30, y=0))
        for _ in range(14):
            last = tick(a)
        assert last[0].distance == CLOSE_BAND

        b = game_data(monster(2, x=30, y=0))
        assert tick(b)[0].distance == DEFAULT_BAND


# ═══════════════════════════════════════════════════════════════════════════════
# 身边清场暴风雪
# ═══════════════════════════════════════════════════════════════════════════════


class TestNearbyBlizzard:
    def test_override_targets_nearby_unit(self, sorc):
        action = sorc.kill_monster_sequence(_fixed(1))
        data = game_data(monster(1, x=100, y=100), monster(9, x=1, y=2))
        steps = action._generator(data)
        assert steps == [SecondaryAttack(SkillID.blizzard, 9, 1, (DEFAULT_BAND,))]

    def test_override_respects_cooldown_window(self, sorc, clock):
        action = sorc.kill_monster_sequence(_fixed(1))
        tick = action._generator
        data = game_data(monster(1, x=100, y=100), monster(9, x=1, y=2))

        assert tick(data)[0].target == 9
        clock.advance(2.0)
        assert tick(data)[0].target == 1
        clock.advance(2.0)  # 恰好 4s，不算超过
        assert tick(data)[0].target == 1
        clock.advance(0.5)
        assert tick(data)[0].target == 9

    def test_no_override_during_player_cooldown(self, sorc):
        action = sorc.kill_monster_sequence(_fixed(1))
        data = game_data(monster(1, x=100, y=100), monster(9, x=1, y=2), cooldown=True)
        steps = action._generator(data)
        assert steps == [PrimaryAttack(1, 2, True, (DEFAULT_BAND,))]

    def test_radius_is_exclusive(self, sorc):
        action = sorc.kill_monster_sequence(_fixed(1))
        data = game_data(monster(1, x=100, y=100), monster(9, x=4, y=0))
        assert action._generator(data)[0].target == 1

    def test_dead_nearby_monster_ignored(self, sorc):
        action = sorc.kill_monster_sequence(_fixed(1))
        data = game_data(monster(1, x=100, y=100), monster(9, x=1, y=1, life=0))
        assert action._generator(data)[0].target == 1

    def test_override_does_not_consume_attack_loop(self, clock):
        sorc = BlizzardSorceress(CombatConfig(max_attack_loops=3), clock=clock)
        action = sorc.kill_monster_sequence(_fixed(1))
        tick = action._generator
        data = game_data(monster(1, x=100, y=100), monster(9, x=1, y=2))

        targets = []
        for _ in range(5):
            targets.extend(s.target for s in tick(data))
        # 第一轮清场，之后 3 轮主目标，然后放弃
        assert targets == [9, 1, 1, 1]

    def test_nearby_target_is_primary(self, sorc):
        """主目标本身就在身边时，清场暴风雪也落在它身上。"""
        action = sorc.kill_monster_sequence(_fixed(1))
        steps = action._generator(game_data(monster(1, x=1, y=1)))
        assert steps[0].target == 1


# ═══════════════════════════════════════════════════════════════════════════════
# 单个 Boss
# ═══════════════════════════════════════════════════════════════════════════════


class TestSingleBoss:
    def test_kill_andariel(self, sorc):
        world = World(monster(5, NpcID.andariel, x=28, y=0), monster(6, x=60, y=0))
        result, steps = _run(sorc.kill_andariel(), world, on_step=world.kill_on_blizzard)
        assert steps == [SecondaryAttack(SkillID.blizzard, 5, 1, (DEFAULT_BAND,))]
        assert result.ticks == 2

    def test_kill_countess_requires_super_unique(self, sorc):
        world = World(monster(5, NpcID.dark_stalker, x=28, y=0))
        result, _ = _run(sorc.kill_countess(), world)
        assert not result.progressed

        world = World(monster(5, NpcID.dark_stalker, x=28, y=0, type=MonsterType.super_unique))
        result, _ = _run(sorc.kill_countess(), world, on_step=world.kill_on_blizzard)
        assert result.steps == 1

    def test_kill_pindle_skips_immune(self, sorc):
        pindle = monster(
            5, NpcID.defiled_warrior, x=28, y=0,
            type=MonsterType.super_unique, immunities=(Resist.cold_immune,),
        )
        result, steps = _run(sorc.kill_pindle([Resist.cold_immune]), World(pindle))
        assert steps == []
        assert not result.progressed

    @pytest.mark.parametrize(
        ("method", "npc", "monster_type"),
        [
            ("kill_summoner", NpcID.summoner, MonsterType.none),
            ("kill_duriel", NpcID.duriel, MonsterType.none),
            ("kill_mephisto", NpcID.mephisto, MonsterType.none),
            ("kill_nihlathak", NpcID.nihlathak, MonsterType.super_unique),
        ],
    )
    def test_named_bosses(self, sorc, method, npc, monster_type):
        world = World(monster(5, npc, x=28, y=0, type=monster_type))
        _, steps = _run(getattr(sorc, method)(), world, on_step=world.kill_on_blizzard)
        assert [s.target for s in steps] == [5]


# ═══════════════════════════════════════════════════════════════════════════════
# 议会成员：优先级分组
# ═══════════════════════════════════════════════════════════════════════════════


class TestKillCouncil:
    def _council(self) -> World:
        ci = (Resist.cold_immune,)
        return World(
            monster(1, NpcID.council_member, x=20, y=0, immunities=ci),
            monster(2, NpcID.council_member2, x=20, y=1),
            monster(3, NpcID.council_member3, x=20, y=2, immunities=ci),
            monster(4, NpcID.council_member, x=20, y=3),
            monster(5, NpcID.council_member2, x=20, y=4, immunities=ci),
            monster(6, NpcID.zombie, x=20, y=5),
        )

    def test_vulnerable_first(self, sorc):
        world = self._council()
        _, steps = _run(sorc.kill_council(), world, on_step=world.kill_on_blizzard)
        assert [s.target for s in steps] == [2, 4, 1, 3, 5]

    def test_band(self, sorc):
        action = sorc.kill_council()
        steps = action._generator(self._council().data())
        assert steps[0].distance == Distance(8, 30)

    def test_selection_always_vulnerable_while_one_remains(self, sorc):
        world = self._council()
        action = sorc.kill_council()
        for _ in range(10):
            steps = action._generator(world.data())
            assert steps[0].target in (2, 4)
        world.kill(2)
        assert action._generator(world.data())[0].target == 4


# ═══════════════════════════════════════════════════════════════════════════════
# 多阶段 Boss
# ═══════════════════════════════════════════════════════════════════════════════


class TestKillRepeatedly:
    def test_yields_static_field_then_kills(self, sorc):
        action = sorc.kill_repeatedly(NpcID.izual, 7)
        assert isinstance(action, ChainAction)
        assert action.policy is ActionPolicy.RUN_ONCE
        subs = action._generator(game_data())
        assert len(subs) == 5

    def test_custom_kill_count(self, sorc):
        subs = sorc.kill_repeatedly(NpcID.baal_crab, 5, kills=2)._generator(game_data())
        assert len(subs) == 3

    def test_kill_izual_sequence(self, sorc):
        world = World(monster(8, NpcID.izual, x=6, y=0))
        result, steps = _run(sorc.kill_izual(), world, on_step=world.kill_on_blizzard)
        assert steps == [
            SecondaryAttack(SkillID.static_field, 8, 7, (Distance(5, 8),)),
            SecondaryAttack(SkillID.blizzard, 8, 1, (DEFAULT_BAND,)),
        ]
        assert result.ticks == 1

    def test_kill_baal_static_field_repeat(self, sorc):
        world = World(monster(8, NpcID.baal_crab, x=6, y=0))
        _, steps = _run(sorc.kill_baal(), world, on_step=world.kill_on_blizzard)
        assert steps[0] == SecondaryAttack(SkillID.static_field, 8, 5, (Distance(5, 8),))

    def test_corpse_of_previous_phase_does_not_hide_living_unit(self, sorc):
        world = World(
            monster(1, NpcID.baal_crab, x=6, y=0, life=0),
            monster(2, NpcID.baal_crab, x=6, y=0),
        )
        result, steps = _run(sorc.kill_baal(), world, on_step=world.kill_on_blizzard)
        assert steps == [
            SecondaryAttack(SkillID.static_field, 2, 5, (Distance(5, 8),)),
            SecondaryAttack(SkillID.blizzard, 2, 1, (DEFAULT_BAND,)),
        ]
        assert result.progressed

    def test_kill_skips_corpse(self, sorc):
        world = World(monster(1, NpcID.baal_crab, life=0), monster(2, NpcID.baal_crab))
        result, steps = _run(sorc._kill_monster(NpcID.baal_crab), world)
        assert steps[0].target == 2
        assert result.steps == 40

    def test_absent_boss_does_nothing(self, sorc):
        result, steps = _run(sorc.kill_baal(), World())
        assert steps == []
        assert not result.progressed


# ═══════════════════════════════════════════════════════════════════════════════
# 等待出现的 Boss
# ═══════════════════════════════════════════════════════════════════════════════


class TestKillDiablo:
    def test_timeout_without_diablo(self, sorc, clock):
        start = clock.now
        result, steps = _run(sorc.kill_diablo(), World(), clock=clock)

        assert steps
        assert all(isinstance(s, Wait) for s in steps)
        assert 20.0 < clock.now - start < 20.3

    def test_appears_at_nineteen_seconds(self, sorc, clock):
        start = clock.now
        world = World()

        def data() -> GameData:
            if clock.now - start >= 19.0 and 66 not in world.monsters:
                world.monsters[66] = monster(66, NpcID.diablo, x=20, y=0)
            return world.data()

        executor = RecordingExecutor(clock, world.kill_on_blizzard)
        sorc.kill_diablo().run(ActionContext(CallableReader(data), executor))

        attacks = [s for s in executor.steps if not isinstance(s, Wait)]
        assert attacks == [
            SecondaryAttack(SkillID.static_field, 66, 5, (Distance(3, 8),)),
            SecondaryAttack(SkillID.blizzard, 66, 1, (DEFAULT_BAND,)),
        ]
        assert clock.now - start < 20.0

    def test_disappearance_after_found_is_success(self, sorc, clock):
        world = World(monster(66, NpcID.diablo, x=20, y=0))
        result, steps = _run(sorc.kill_diablo(), world, clock=clock, on_step=world.kill_on_blizzard)
        assert not any(isinstance(s, Wait) for s in steps)
        assert result.ticks == 2

    def test_living_diablo_found_behind_corpse(self, sorc, clock):
        world = World(
            monster(65, NpcID.diablo, x=20, y=0, life=0),
            monster(66, NpcID.diablo, x=20, y=0),
        )
        _, steps = _run(sorc.kill_diablo(), world, clock=clock, on_step=world.kill_on_blizzard)
        assert not any(isinstance(s, Wait) for s in steps)
        assert [s.target for s in steps] == [66, 66]

    def test_gives_up_when_diablo_survives(self, clock):
        sorc = BlizzardSorceress(CombatConfig(max_attack_loops=3), clock=clock)
        world = World(monster(66, NpcID.diablo, x=20, y=0))
        messages: list[str] = []
        sink_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
        try:
            result, steps = _run(sorc.kill_diablo(), world, clock=clock)
        finally:
            logger.remove(sink_id)
        assert any("不再重新交战" in m for m in messages)
        # 静电 1 次 + 暴风雪 3 轮，然后整体结束
        assert len(steps) == 4
        assert result.ticks == 2

    def test_wait_uses_poll_interval(self, clock):
        sorc = BlizzardSorceress(CombatConfig(boss_timeout=1.0, boss_poll_interval=0.25), clock=clock)
        _, steps = _run(sorc.kill_diablo(), World(), clock=clock)
        assert {s.duration for s in steps} == {0.25}
        assert len(steps) == 5


# ═══════════════════════════════════════════════════════════════════════════════
# 按键检查 / 增益
# ═══════════════════════════════════════════════════════════════════════════════


class TestKeyBindings:
    def test_all_bound(self, sorc):
        data = game_data(bindings={
            SkillID.blizzard: "F1",
            SkillID.teleport: "F2",
            SkillID.tome_of_town_portal: "F3",
            SkillID.static_field: "F4",
            SkillID.shiver_armor: "F5",
        })
        assert sorc.check_key_bindings(data) == []

    def test_armor_family_satisfied_by_any(self, sorc):
        data = game_data(bindings={SkillID.blizzard: "F1", SkillID.chilling_armor: "F9"})
        assert sorc.check_key_bindings(data) == [
            SkillID.teleport,
            SkillID.tome_of_town_portal,
            SkillID.static_field,
        ]

    def test_missing_all_armors_reported_once(self, sorc):
        missing = sorc.check_key_bindings(game_data(bindings={}))
        assert missing == list(BlizzardSorceress.REQUIRED_SKILLS)
        assert missing.count(SkillID.shiver_armor) == 1

    def test_buff_skills(self, sorc):
        data = game_data(bindings={
            SkillID.energy_shield: "F6",
            SkillID.frozen_armor: "F7",
            SkillID.chilling_armor: "F8",
        })
        assert sorc.buff_skills(data) == [SkillID.energy_shield, SkillID.chilling_armor]

    def test_buff_skills_without_energy_shield(self, sorc):
        data = game_data(bindings={SkillID.frozen_armor: "F7"})
        assert sorc.buff_skills(data) == [SkillID.frozen_armor]

    def test_buff_skills_nothing_bound(self, sorc):
        assert sorc.buff_skills(game_data()) == []

    def test_pre_cta_buff_skills(self, sorc):
        assert sorc.pre_cta_buff_skills(game_data()) == []


# ═══════════════════════════════════════════════════════════════════════════════
# 职业构建
# ═══════════════════════════════════════════════════════════════════════════════


class TestBuildCharacter:
    def test_default_is_sorceress(self):
        char = build_character(UserConfig())
        assert isinstance(char, BlizzardSorceress)

    def test_uses_combat_config(self, clock):
        cfg = UserConfig.model_validate({"combat": {"max_attack_loops": 7}})
        char = build_character(cfg, clock=clock)
        assert char.config.max_attack_loops == 7

    def test_unsupported(self, monkeypatch):
        monkeypatch.setattr(base, "_REGISTRY", {})
        with pytest.raises(UnsupportedCharacterError, match="sorceress"):
            build_character(UserConfig())


def test_static_reader_runs_sequence(sorc):
    """端到端：静态快照下的击杀序列按上限结束。"""
    reader = StaticSnapshotProvider(game_data(monster(1, x=30, y=0)))
    executor = RecordingExecutor()
    result = sorc.kill_monster_sequence(_fixed(1)).run(ActionContext(reader, executor))
    assert result.steps == 40
