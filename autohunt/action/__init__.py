"""动作层 — 输入操作执行器、Step、Action 组合。

模块组成::

    action/
    ├── hid.py      # 原子输入操作 + 带随机延迟的顺序执行器
    ├── step.py     # Step 描述与执行层
    └── action.py   # Action 组合（StepChain / Chain）与执行入口
"""

from autohunt.action.hid import (
    DelayPolicy,
    HIDOperation,
    KeyPress,
    MouseClick,
    MouseDisplacement,
)
from autohunt.action.step import (
    AttackOption,
    Distance,
    HIDStepExecutor,
    PrimaryAttack,
    SecondaryAttack,
    Step,
    StepExecutor,
    Wait,
)
from autohunt.action.action import (
    Action,
    ActionContext,
    ActionPolicy,
    ActionResult,
    ChainAction,
    StepChainAction,
    run_action,
)

__all__ = [
    # hid
    "DelayPolicy",
    "HIDOperation",
    "KeyPress",
    "MouseClick",
    "MouseDisplacement",
    # step
    "AttackOption",
    "Distance",
    "HIDStepExecutor",
    "PrimaryAttack",
    "SecondaryAttack",
    "Step",
    "StepExecutor",
    "Wait",
    # action
    "Action",
    "ActionContext",
    "ActionPolicy",
    "ActionResult",
    "ChainAction",
    "StepChainAction",
    "run_action",
]
