"""
Utility functions for game mechanics
"""

from __future__ import annotations
import math
import random
from typing import Tuple, Optional
import numpy as np


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def normalize(x: float, y: float, eps: float = 1e-8) -> Tuple[float, float]:
    """Normalize a vector to unit length"""
    l = math.hypot(x, y)
    if l < eps:
        return 0.0, 0.0
    return x / l, y / l


def rect_circle_collide(rx, ry, rw, rh, cx, cy, r) -> bool:
    """Check if a circle overlaps an axis-aligned rectangle.

    Uses the nearest point of the rectangle to the circle centre, so
    corner contacts are only reported when the circle really touches.
    """
    nx = clamp(cx, rx, rx + rw)
    ny = clamp(cy, ry, ry + rh)
    dx = cx - nx
    dy = cy - ny
    return (dx * dx + dy * dy) <= (r * r)


def direction_from_vertical(angle: float) -> Tuple[float, float]:
    """Unit vector pointing up (screen coordinates), tilted by angle radians"""
    return math.sin(angle), -math.cos(angle)


def enforce_angle(vx: float, vy: float, speed: float, min_angle: float) -> Tuple[float, float]:
    """Keep a velocity away from the horizontal and rescale it to speed.

    If the vertical part of the unit direction is smaller than
    sin(min_angle), it is raised to that floor (sign kept) and the
    horizontal part is recomputed so the direction stays unit length.
    A zero vector falls back to straight up.
    """
    ux, uy = normalize(vx, vy)
    if ux == 0.0 and uy == 0.0:
        return 0.0, -speed

    floor = math.sin(min_angle)
    if abs(uy) < floor:
        uy = math.copysign(floor, uy)
        ux = math.copysign(math.sqrt(max(0.0, 1.0 - uy * uy)), ux)

    return ux * speed, uy * speed


def seed_everything(py_seed: Optional[int]):
    """Seed all random number generators"""
    if py_seed is None:
        return
    random.seed(py_seed)
    np.random.seed(py_seed)
