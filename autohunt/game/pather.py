"""距离计算与坐标换算。

游戏使用 2:1 等距投影：游戏坐标中 x 增大指向屏幕右下，y 增大指向屏幕左下。
玩家角色始终位于画面中心。
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from autohunt.game.data import GameData, Position

# 单个游戏坐标格在屏幕上的半宽 / 半高（像素）
_TILE_HALF_WIDTH = 19.8
_TILE_HALF_HEIGHT = 9.9


def distance(a: Position, b: Position) -> int:
    """两点间欧氏距离（取整）。"""
    return int(np.hypot(a.x - b.x, a.y - b.y))


def distance_from_me(data: GameData, position: Position) -> int:
    """玩家到 *position* 的距离。"""
    return distance(data.player_unit.position, position)


def distances_from_me(data: GameData, positions: Sequence[Position]) -> np.ndarray:
    """批量计算玩家到多个坐标的距离，返回 float 数组。"""
    if not positions:
        return np.empty(0, dtype=float)
    me = data.player_unit.position
    pts = np.array([(p.x, p.y) for p in positions], dtype=float)
    return np.hypot(pts[:, 0] - me.x, pts[:, 1] - me.y)


def game_coords_to_screen(
    player: Position,
    target: Position,
    screen_size: tuple[int, int],
) -> tuple[int, int]:
    """把游戏坐标换算为画面像素坐标。

    Parameters
    ----------
    player:
        玩家坐标（对应画面中心）。
    target:
        目标坐标。
    screen_size:
        画面分辨率 ``(width, height)``。

    Returns
    -------
    tuple[int, int]
        像素坐标，已裁剪到画面范围内。
    """
    width, height = screen_size
    dx = target.x - player.x
    dy = target.y - player.y

    sx = width / 2 + (dx - dy) * _TILE_HALF_WIDTH
    sy = height / 2 + (dx + dy) * _TILE_HALF_HEIGHT

    px = int(np.clip(sx, 0, width - 1))
    py = int(np.clip(sy, 0, height - 1))
    return px, py
