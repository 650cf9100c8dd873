"""Action — 行为组合单元。

一个 Action 由 *生成器* 和 *执行策略* 组成：

- :class:`StepChainAction`：生成器 ``(GameData) → [Step]``，依次执行产出的 Step。
- :class:`ChainAction`：生成器 ``(GameData) → [Action]``，依次把产出的子 Action
  完整执行（子 Action 按自己的策略运行）。

执行策略::

    RUN_ONCE               — 生成器只调用一次
    REPEAT_UNTIL_NO_STEPS  — 反复调用，直到生成器返回空序列

每一轮都会在上一轮的全部操作完成 **之后** 重新读取快照，再调用生成器。
引擎本身从不根据世界状态判断「完成」——返回空序列是唯一的结束信号，
「没有目标 / 已达成 / 放弃」都由生成器自行判断并表达为「什么都不产出」。

使用方式::

    action = StepChainAction(
        lambda d: [Wait(0.1)] if d.monsters.enemies() else [],
        ActionPolicy.REPEAT_UNTIL_NO_STEPS,
    )
    result = run_action(action, ActionContext(reader, executor))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Generic, TypeVar

from loguru import logger

from autohunt.action.step import Step, StepExecutor
from autohunt.game.data import GameData
from autohunt.game.reader import SnapshotProvider

T = TypeVar("T")


class ActionPolicy(Enum):
    """生成器的调用策略。"""

    RUN_ONCE = auto()
    """只调用一次。"""

    REPEAT_UNTIL_NO_STEPS = auto()
    """反复调用，直到返回空序列。"""


@dataclass(frozen=True, slots=True)
class ActionContext:
    """执行 Action 所需的外部协作者。

    Attributes
    ----------
    reader:
        快照提供者，每一轮调用一次。
    executor:
        Step 执行层。
    """

    reader: SnapshotProvider
    executor: StepExecutor


@dataclass
class ActionResult:
    """一次 Action 执行的统计。

    Attributes
    ----------
    ticks:
        本 Action 生成器被调用的次数（不含子 Action）。
    steps:
        实际执行的 Step 数（含子 Action）。
    """

    ticks: int = 0
    steps: int = 0

    @property
    def progressed(self) -> bool:
        """是否执行过任何 Step。

        只运行一次且首轮即返回空序列的 Action 会得到 ``False``，
        上层可据此区分「无进展」与「正常完成」。
        """
        return self.steps > 0


class Action(ABC, Generic[T]):
    """Action 基类。

    Parameters
    ----------
    generator:
        根据快照产出本轮工作项的函数。
    policy:
        调用策略。
    name:
        调试日志中显示的名称。
    """

    def __init__(
        self,
        generator: Callable[[GameData], Sequence[T] | None],
        policy: ActionPolicy = ActionPolicy.RUN_ONCE,
        name: str = "",
    ) -> None:
        self._generator = generator
        self.policy = policy
        self.name = name or getattr(generator, "__name__", type(self).__name__)

    def run(self, ctx: ActionContext) -> ActionResult:
        """按策略执行到结束。"""
        result = ActionResult()
        while True:
            data = ctx.reader.get_data()
            items = self._generator(data) or ()
            result.ticks += 1
            if not items:
                break
            self._execute(items, ctx, result)
            if self.policy is ActionPolicy.RUN_ONCE:
                break

        logger.debug(
            "[Action] {} 结束 (ticks={}, steps={})",
            self.name, result.ticks, result.steps,
        )
        return result

    @abstractmethod
    def _execute(self, items: Sequence[T], ctx: ActionContext, result: ActionResult) -> None:
        """执行一轮产出的工作项。"""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.policy.name})"


class StepChainAction(Action[Step]):
    """产出 Step 的 Action。"""

    def _execute(self, items: Sequence[Step], ctx: ActionContext, result: ActionResult) -> None:
        for step in items:
            ctx.executor.execute(step)
            result.steps += 1


class ChainAction(Action[Action]):
    """产出子 Action 的 Action。

    每个子 Action 完整执行后才执行下一个，全部完成后才再次调用生成器。
    """

    def _execute(self, items: Sequence[Action], ctx: ActionContext, result: ActionResult) -> None:
        for action in items:
            sub = action.run(ctx)
            result.steps += sub.steps


def run_action(action: Action, ctx: ActionContext) -> ActionResult:
    """执行 *action* 直到其按策略结束。"""
    return action.run(ctx)
