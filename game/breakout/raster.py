"""
Numpy rasteriser for arena snapshots (rgb_array rendering)
"""

from __future__ import annotations
import colorsys
import math
from typing import Tuple

import numpy as np

from .arena import ArenaSnapshot

Color = Tuple[int, int, int]

BG_TOP: Color = (8, 16, 41)
BG_BOTTOM: Color = (11, 20, 54)
PADDLE_C: Color = (39, 211, 162)
BALL_C: Color = (63, 130, 255)
HUD_C: Color = (220, 220, 220)


def brick_color(row: int, col: int, hp: int) -> Color:
    """Hue walks across the grid; reinforced bricks are drawn darker"""
    hue = ((col * 32 + row * 14) % 360) / 360.0
    lightness = 0.55 if hp <= 1 else 0.38
    r, g, b = colorsys.hls_to_rgb(hue, lightness, 0.7)
    return int(r * 255), int(g * 255), int(b * 255)


def _fill_rect(frame: np.ndarray, x: float, y: float, w: float, h: float, color: Color, scale: float):
    H, W = frame.shape[:2]
    x0 = max(0, int(math.floor(x * scale)))
    y0 = max(0, int(math.floor(y * scale)))
    x1 = min(W, int(math.ceil((x + w) * scale)))
    y1 = min(H, int(math.ceil((y + h) * scale)))
    if x1 <= x0 or y1 <= y0:
        return
    frame[y0:y1, x0:x1] = color


def _fill_circle(frame: np.ndarray, cx: float, cy: float, r: float, color: Color, scale: float):
    H, W = frame.shape[:2]
    cx, cy, r = cx * scale, cy * scale, r * scale
    x0 = max(0, int(math.floor(cx - r)))
    y0 = max(0, int(math.floor(cy - r)))
    x1 = min(W, int(math.ceil(cx + r)) + 1)
    y1 = min(H, int(math.ceil(cy + r)) + 1)
    if x1 <= x0 or y1 <= y0:
        return
    yy, xx = np.ogrid[y0:y1, x0:x1]
    mask = (xx + 0.5 - cx) ** 2 + (yy + 0.5 - cy) ** 2 <= r * r
    frame[y0:y1, x0:x1][mask] = color


def render_frame(snap: ArenaSnapshot, scale: float = 1.0) -> np.ndarray:
    """Draw a snapshot into an (H, W, 3) uint8 array, row 0 at the top"""
    H = int(round(snap.height * scale))
    W = int(round(snap.width * scale))

    # Background gradient
    t = np.linspace(0.0, 1.0, H, dtype=np.float32)[:, None]
    top = np.array(BG_TOP, dtype=np.float32)
    bottom = np.array(BG_BOTTOM, dtype=np.float32)
    column = (top * (1 - t) + bottom * t).astype(np.uint8)
    frame = np.repeat(column[:, None, :], W, axis=1)

    for brick in snap.bricks:
        _fill_rect(frame, brick.x, brick.y, brick.width, brick.height,
                   brick_color(brick.row, brick.col, brick.hp), scale)

    px, py, pw, ph = snap.paddle
    _fill_rect(frame, px, py, pw, ph, PADDLE_C, scale)

    bx, by, br = snap.ball
    _fill_circle(frame, bx, by, br, BALL_C, scale)

    return frame
