"""Step — 高层游戏指令。

Step 描述「做什么」（普通攻击某个单位、对某个单位施放技能、原地等待），
由 :class:`StepExecutor` 负责「怎么做」并阻塞直到完成。
战斗控制器只构造 Step，不关心其底层输入细节。

包含:
  - 攻击距离选项 (Distance)
  - Step 描述 (PrimaryAttack / SecondaryAttack / Wait)
  - 执行接口 (StepExecutor)
  - 基于输入设备的参考实现 (HIDStepExecutor)
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from loguru import logger

from autohunt.action import hid
from autohunt.device.controller import InputDevice
from autohunt.game import pather
from autohunt.game.data import GameData, Monster, Position, UnitID
from autohunt.game.reader import SnapshotProvider
from autohunt.infra import DeviceConfig
from autohunt.types import MouseButton, SkillID

# ── 日志开关（由 infra.logger.setup_logger 写入）──────────────────────────────
_show_step_detail: bool = True


def configure(*, show_step_detail: bool = True) -> None:
    """配置 step 模块的日志行为。"""
    global _show_step_detail
    _show_step_detail = show_step_detail


# ═══════════════════════════════════════════════════════════════════════════════
# 攻击选项
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Distance:
    """攻击距离区间 ``[min, max]``（游戏坐标格）。"""

    min: int
    max: int

    def __post_init__(self) -> None:
        if self.min < 0 or self.min > self.max:
            raise ValueError(f"非法的攻击距离区间: [{self.min}, {self.max}]")

    def __contains__(self, value: float) -> bool:
        return self.min <= value <= self.max


AttackOption = Distance
"""攻击选项。目前只有距离一种。"""


def _pick_distance(options: tuple[AttackOption, ...]) -> Distance | None:
    """多个距离选项时以最后一个为准。"""
    for opt in reversed(options):
        if isinstance(opt, Distance):
            return opt
    return None


# ═══════════════════════════════════════════════════════════════════════════════
# Step 描述
# ═══════════════════════════════════════════════════════════════════════════════


class Step:
    """所有 Step 的基类。"""


@dataclass(frozen=True)
class PrimaryAttack(Step):
    """普通攻击（左键）。

    Attributes
    ----------
    target:
        目标单位。
    repeat:
        攻击次数。
    interruptible:
        ``True`` 时每次攻击前重新读取目标，目标消失即提前结束；
        ``False`` 时按开始时的位置打满 *repeat* 次。
    options:
        攻击选项。
    """

    target: UnitID
    repeat: int = 1
    interruptible: bool = False
    options: tuple[AttackOption, ...] = ()

    @property
    def distance(self) -> Distance | None:
        return _pick_distance(self.options)


@dataclass(frozen=True)
class SecondaryAttack(Step):
    """施放技能（按技能键后右键目标）。"""

    skill: SkillID
    target: UnitID
    repeat: int = 1
    options: tuple[AttackOption, ...] = ()

    @property
    def distance(self) -> Distance | None:
        return _pick_distance(self.options)


@dataclass(frozen=True)
class Wait(Step):
    """原地等待 *duration* 秒。"""

    duration: float


# ═══════════════════════════════════════════════════════════════════════════════
# 执行接口
# ═══════════════════════════════════════════════════════════════════════════════


class StepExecutor(ABC):
    """Step 执行层。

    :meth:`execute` 阻塞直到 Step 完成（包括其内部的全部输入和等待），
    不向调用方返回失败信号。
    """

    @abstractmethod
    def execute(self, step: Step) -> None:
        ...


class HIDStepExecutor(StepExecutor):
    """把 Step 翻译为输入操作的执行器。

    每次攻击前都从 *reader* 重新读取快照，用最新的目标位置换算画面坐标。

    Parameters
    ----------
    device:
        输入设备。
    reader:
        快照提供者。
    config:
        设备配置（画面分辨率）。
    sleep:
        阻塞函数，默认 :func:`time.sleep`。
    """

    # 各类输入的基础延迟（秒）
    KEY_DELAY = 0.04
    MOVE_DELAY = 0.05
    CLICK_DELAY = 0.1
    TRAVEL_DELAY = 0.3

    def __init__(
        self,
        device: InputDevice,
        reader: SnapshotProvider,
        config: DeviceConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._device = device
        self._reader = reader
        self._config = config or DeviceConfig()
        self._sleep = sleep

    @property
    def _screen_size(self) -> tuple[int, int]:
        return self._config.screen_width, self._config.screen_height

    def execute(self, step: Step) -> None:
        if _show_step_detail:
            logger.debug("[Step] 执行: {}", step)
        if isinstance(step, Wait):
            self._sleep(step.duration)
        elif isinstance(step, SecondaryAttack):
            self._secondary_attack(step)
        elif isinstance(step, PrimaryAttack):
            self._primary_attack(step)
        else:
            logger.warning("[Step] 未知的 Step 类型，已忽略: {}", type(step).__name__)

    # ── 普通攻击 ──

    def _primary_attack(self, step: PrimaryAttack) -> None:
        target = self._locate(step.target)
        if target is None:
            return
        for _ in range(step.repeat):
            if step.interruptible:
                target = self._locate(step.target)
                if target is None:
                    return
            self._approach(target, step.distance)
            self._run(
                self._point_at(target.position),
                hid.MouseClick(MouseButton.left, self.CLICK_DELAY),
            )

    # ── 技能攻击 ──

    def _secondary_attack(self, step: SecondaryAttack) -> None:
        data = self._reader.get_data()
        key, found = data.key_bindings.key_binding_for_skill(step.skill)
        if not found:
            logger.warning("[Step] 技能 {} 未绑定按键，跳过施放", step.skill.value)
            return
        for _ in range(step.repeat):
            target = self._locate(step.target)
            if target is None:
                return
            self._approach(target, step.distance)
            self._run(
                hid.KeyPress(key, self.KEY_DELAY),
                self._point_at(target.position),
                hid.MouseClick(MouseButton.right, self.CLICK_DELAY),
            )

    # ── 内部方法 ──

    def _locate(self, unit_id: UnitID) -> Monster | None:
        """在最新快照中查找存活的目标。"""
        target = self._reader.get_data().monsters.find_by_id(unit_id)
        if target is None or not target.is_alive:
            if _show_step_detail:
                logger.debug("[Step] 目标 {} 已不存在", unit_id)
            return None
        return target

    def _approach(self, target: Monster, band: Distance | None) -> None:
        """目标超出距离上限时向其移动，直到距离约等于上限。

        优先使用瞬间移动，未绑定时改为左键走位。
        """
        if band is None:
            return
        data = self._reader.get_data()
        dist = pather.distance_from_me(data, target.position)
        if dist <= band.max:
            return

        me = data.player_unit.position
        ratio = (dist - band.max) / dist
        waypoint = Position(
            me.x + round((target.position.x - me.x) * ratio),
            me.y + round((target.position.y - me.y) * ratio),
        )
        key, found = data.key_bindings.key_binding_for_skill(SkillID.teleport)
        if found:
            self._run(
                hid.KeyPress(key, self.KEY_DELAY),
                self._point_at(waypoint, data),
                hid.MouseClick(MouseButton.right, self.TRAVEL_DELAY),
            )
        else:
            self._run(
                self._point_at(waypoint, data),
                hid.MouseClick(MouseButton.left, self.TRAVEL_DELAY),
            )

    def _point_at(self, position: Position, data: GameData | None = None) -> hid.MouseDisplacement:
        data = data or self._reader.get_data()
        x, y = pather.game_coords_to_screen(
            data.player_unit.position, position, self._screen_size
        )
        return hid.MouseDisplacement(x, y, self.MOVE_DELAY)

    def _run(self, *ops: hid.HIDOperation) -> None:
        hid.run(self._device, *ops, sleep=self._sleep)
