"""全局日志配置。

使用方式::

    # 应用启动时调用一次
    from autohunt.infra.logger import setup_logger
    setup_logger(log_dir=Path("log/2026-01-01"))

    # 各模块直接使用 loguru
    from loguru import logger
    logger.info("开始击杀 目标={} 距离={}", npc, distance)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from loguru import logger

# 项目根目录，用于将绝对路径转换为相对路径（Ctrl+点击用）
_PROJECT_ROOT = Path(__file__).parent.parent


def _src_patcher(record: dict) -> None:
    """把 record["file"].path 转为相对项目根目录的路径，存入 extra["src"]。

    格式示例：``autohunt/action/action.py:88``
    """
    try:
        rel = Path(record["file"].path).relative_to(_PROJECT_ROOT)
        record["extra"]["src"] = f"{rel.as_posix()}:{record['line']}"
    except ValueError:
        record["extra"]["src"] = f"{record['file'].name}:{record['line']}"


def setup_logger(
    log_dir: Path | None = None,
    level: str = "INFO",
    rotation: str = "10 MB",
    retention: str = "7 days",
    show_input_detail: bool = False,
    show_step_detail: bool = True,
) -> None:
    """配置全局 loguru logger。

    日志策略：
    - 控制台：按 *level* 过滤输出。
    - 文件（全量）：始终以 DEBUG 级别记录，文件名含 ``.debug`` 后缀。
    - 文件（过滤）：与控制台 *level* 一致，文件名不含后缀。

    Parameters
    ----------
    log_dir:
        日志文件存放目录。为 *None* 时仅输出到控制台。
    level:
        控制台及过滤文件的最低日志级别。
    rotation:
        单个日志文件最大体积或时间周期。
    retention:
        日志文件保留时长。
    show_input_detail:
        是否输出每一次鼠标移动 / 点击 / 按键的 DEBUG 日志。
        默认 ``False``，一轮攻击会产生大量输入，避免刷屏。
    show_step_detail:
        是否输出每个 Step 执行的 DEBUG 日志。
    """
    from autohunt.device.controller import configure as _configure_device
    _configure_device(show_input_detail=show_input_detail)

    from autohunt.action.step import configure as _configure_step
    _configure_step(show_step_detail=show_step_detail)

    # 移除默认 handler，避免重复输出
    logger.remove()

    # 注册 patcher：为每条记录附加可点击的相对路径
    logger.configure(patcher=_src_patcher)

    _FMT = (
        "<green>{time:HH:mm:ss.SSS}</green> | "
        "<level>{level:8}</level> | "
        "<cyan>{extra[src]}</cyan> | "
        "{message}"
    )

    logger.add(sys.stderr, level=level, format=_FMT)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)

        # 全量文件：固定 DEBUG 级别
        logger.add(
            log_dir / "autohunt_{time:YYYY-MM-DD}.debug.log",
            level="DEBUG",
            rotation=rotation,
            retention=retention,
            encoding="utf-8",
            format=_FMT,
        )

        if level.upper() != "DEBUG":
            logger.add(
                log_dir / "autohunt_{time:YYYY-MM-DD}.log",
                level=level,
                rotation=rotation,
                retention=retention,
                encoding="utf-8",
                format=_FMT,
            )

    # airtest 使用标准 logging 模块，默认输出大量 DEBUG 行；统一压到 WARNING
    for _noisy in ("airtest", "airtest.core.win", "airtest.utils.nbsp"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)
