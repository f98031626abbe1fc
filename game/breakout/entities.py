"""
Game entity dataclasses
"""

from dataclasses import dataclass


@dataclass
class Paddle:
    """Player paddle; x is the left edge, y the top edge"""
    x: float
    y: float
    width: float = 80.0
    height: float = 12.0
    speed: float = 480.0  # px/s in key mode

    @property
    def center_x(self) -> float:
        return self.x + self.width * 0.5


@dataclass
class Ball:
    """Ball entity; x, y is the centre"""
    x: float
    y: float
    radius: float = 7.0
    speed: float = 260.0  # px/s, magnitude of (vx, vy) while in flight
    vx: float = 0.0
    vy: float = 0.0
    stuck: bool = True  # resting on the paddle, waiting for launch
    last_speed_increase: float = 0.0  # simulation time, seconds


@dataclass
class Brick:
    """Brick entity; hp 1 = normal, 2 = reinforced"""
    x: float
    y: float
    width: float
    height: float
    hp: int = 1
    row: int = 0
    col: int = 0

    @property
    def alive(self) -> bool:
        return self.hp > 0


@dataclass
class RunState:
    """Score / lives / stage of the current run"""
    score: int = 0
    lives: int = 3
    stage: int = 1
    over: bool = False
