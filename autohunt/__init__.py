"""AutoHunt — 基于世界快照的自动战斗代理。

分层::

    infra      日志 / 配置 / 异常
    device     鼠标键盘注入
    game       世界快照模型与距离计算
    action     输入操作执行器、Step、Action 组合
    character  各职业的战斗决策控制器
"""

__version__ = "0.1.0"
