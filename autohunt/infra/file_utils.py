"""YAML 读取与字典合并工具。"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError


def load_yaml(path: str | Path) -> dict[str, Any]:
    """读取 YAML 文件。

    Parameters
    ----------
    path:
        YAML 文件路径。

    Returns
    -------
    dict[str, Any]
        解析结果，空文件返回 ``{}``。

    Raises
    ------
    FileNotFoundError
        文件不存在。
    ConfigError
        顶层不是映射（例如整个文件是一个列表）。
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML 文件不存在: {path}")
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"YAML 顶层必须是映射: {path} (实际为 {type(data).__name__})")
    return data


def merge_dicts(base: dict, override: dict) -> dict:
    """递归合并，*override* 优先，返回新字典。"""
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = merge_dicts(result[key], value)
        else:
            result[key] = value
    return result
