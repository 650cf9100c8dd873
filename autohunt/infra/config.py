"""配置管理 — 基于 Pydantic v2。

配置从 YAML 文件加载，经过 Pydantic 校验后生成不可变的配置对象。

使用方式::

    from autohunt.infra.config import ConfigManager

    config = ConfigManager.load("user_settings.yaml")
    print(config.combat.max_attack_loops)
"""

from __future__ import annotations

import datetime
from pathlib import Path
from typing import Any, Literal

from loguru import logger
from pydantic import BaseModel, Field, model_validator

from .file_utils import load_yaml, merge_dicts
from autohunt.types import CharacterClass


# ── 子配置模型 ──


class DeviceConfig(BaseModel):
    """输入设备（游戏窗口）配置。"""

    model_config = {"frozen": True}

    uri: str | None = None
    """airtest 设备 URI。None = 根据 window_title 拼接"""
    window_title: str = "Diablo II"
    """游戏窗口标题（正则）"""
    screen_width: int = 1280
    """游戏画面宽度（像素）"""
    screen_height: int = 720
    """游戏画面高度（像素）"""

    @property
    def resolved_uri(self) -> str:
        """最终用于 ``connect_device`` 的 URI。"""
        if self.uri:
            return self.uri
        return f"Windows:///?title_re={self.window_title}.*"


class LogConfig(BaseModel):
    """日志配置。"""

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"
    """日志级别"""
    root: Path = Path("log")
    """日志保存根目录"""
    dir: Path | None = None
    """日志保存路径。自动按日期生成"""

    # 细粒度显示开关
    show_input_detail: bool = False
    """输出每一次鼠标 / 键盘操作"""
    show_step_detail: bool = True
    """输出每一个 Step 的执行"""

    @model_validator(mode="after")
    def _set_log_dir(self) -> LogConfig:
        if self.dir is None:
            ts = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            object.__setattr__(self, "dir", self.root / ts)
        return self


class CombatConfig(BaseModel):
    """战斗控制器参数。

    距离单位为游戏坐标格，时间单位为秒。
    """

    model_config = {"frozen": True}

    max_attack_loops: int = Field(default=40, ge=1)
    """同一目标的最大攻击轮数，达到后放弃该目标"""
    min_distance: int = Field(default=25, ge=0)
    """默认攻击距离下限"""
    max_distance: int = Field(default=30, ge=0)
    """默认攻击距离上限"""
    reduce_distance_after: int = Field(default=12, ge=0)
    """攻击轮数超过此值后改为近距离攻击"""
    close_min_distance: int = Field(default=1, ge=0)
    """近距离攻击下限"""
    close_max_distance: int = Field(default=5, ge=0)
    """近距离攻击上限"""
    blizzard_cooldown: float = Field(default=4.0, ge=0)
    """清理身边小怪的暴风雪最短间隔"""
    nearby_radius: float = Field(default=4.0, gt=0)
    """判定「身边」的距离"""
    boss_timeout: float = Field(default=20.0, gt=0)
    """等待 Boss 出现的超时"""
    boss_poll_interval: float = Field(default=0.1, gt=0)
    """等待 Boss 时每次轮询的间隔"""

    @model_validator(mode="after")
    def _validate_bands(self) -> CombatConfig:
        if self.min_distance > self.max_distance:
            raise ValueError(
                f"min_distance ({self.min_distance}) 不能大于 max_distance ({self.max_distance})"
            )
        if self.close_min_distance > self.close_max_distance:
            raise ValueError(
                f"close_min_distance ({self.close_min_distance}) "
                f"不能大于 close_max_distance ({self.close_max_distance})"
            )
        return self


class CharacterConfig(BaseModel):
    """角色配置。"""

    model_config = {"frozen": True}

    class_name: CharacterClass = CharacterClass.blizzard_sorceress
    """职业"""


# ── 顶层配置 ──


class UserConfig(BaseModel):
    """用户配置（顶层聚合）。"""

    model_config = {"frozen": True}

    device: DeviceConfig = Field(default_factory=DeviceConfig)
    log: LogConfig = Field(default_factory=LogConfig)
    combat: CombatConfig = Field(default_factory=CombatConfig)
    character: CharacterConfig = Field(default_factory=CharacterConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> UserConfig:
        """从 YAML 文件加载配置。"""
        data = load_yaml(path)
        return cls.model_validate(data)


# ── ConfigManager ──


class ConfigManager:
    """配置管理器 — 提供加载入口。"""

    @staticmethod
    def load(path: str | Path, overrides: dict[str, Any] | None = None) -> UserConfig:
        """从文件加载用户配置。

        文件不存在时使用默认配置；*overrides* 会深度合并到文件内容之上
        （常用于命令行临时覆盖某几个字段）。
        """
        path = Path(path)
        if path.exists():
            data = load_yaml(path)
            logger.info("已加载配置: {}", path)
        else:
            logger.warning("配置文件 {} 不存在，使用默认配置", path)
            data = {}
        if overrides:
            data = merge_dicts(data, overrides)
        return UserConfig.model_validate(data)
