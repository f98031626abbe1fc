"""
ArenaSimulator - paddle / ball / brick-grid physics for Breakout
----------------------------------------------------------------
- Screen coordinates: origin top-left, y grows downward
- advance(dt) is the only writer of simulation state
- Input handlers only record intent (pointer target, key direction, launch)
- Every step reports what happened through a dict of event counters

Typical frame driver:

    sim = ArenaSimulator()
    sim.move_paddle_by(Direction.RIGHT)
    sim.launch_ball()
    events = sim.advance(min(frame_dt, MAX_FRAME_DT))
    draw(sim.snapshot())
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Sequence, Tuple

from .entities import Ball, Brick, Paddle, RunState
from .stages import (
    STAGE_PATTERNS,
    Pattern,
    ball_speed_for_stage,
    build_bricks,
    paddle_width_for_stage,
    pattern_for_stage,
    validate_pattern,
)
from .utils import clamp, direction_from_vertical, enforce_angle, normalize, rect_circle_collide

# Largest frame delta a driver should pass to advance()
MAX_FRAME_DT = 0.033

EVENT_KEYS = (
    "score",
    "wall_hit",
    "paddle_hit",
    "brick_hit",
    "brick_destroyed",
    "life_lost",
    "stage_clear",
    "run_over",
)


class Direction(IntEnum):
    """Discrete paddle intent"""
    LEFT = -1
    NONE = 0
    RIGHT = 1


@dataclass
class ArenaConfig:
    """Initialization-time constants for one arena"""
    width: float = 480.0
    height: float = 640.0

    # Paddle
    paddle_width: float = 80.0
    paddle_min_width: float = 56.0
    paddle_shrink_per_stage: float = 4.0
    paddle_height: float = 12.0
    paddle_speed: float = 480.0  # px/s, key mode
    paddle_bottom_offset: float = 40.0  # distance from paddle top to arena bottom
    pointer_smoothing: Optional[float] = 12.0  # 1/s; None snaps straight to the pointer

    # Ball
    ball_radius: float = 7.0
    ball_speed: float = 260.0  # px/s at stage 1
    ball_speed_per_stage: float = 28.0
    ball_max_speed: float = 560.0
    ball_rest_gap: float = 1.0  # gap between resting ball and paddle
    speed_ramp_interval: float = 3.0  # seconds
    speed_ramp_step: float = 15.0  # px/s

    # Angles, degrees
    min_angle_deg: float = 15.0  # floor between velocity and the horizontal
    bounce_angle_deg: float = 60.0  # max paddle deflection from vertical
    launch_angle_deg: float = 30.0
    launch_jitter_deg: float = 0.0

    # Bricks
    stage_patterns: Sequence[Pattern] = field(default_factory=lambda: list(STAGE_PATTERNS))
    columns: int = 8  # procedural stages
    max_rows: int = 10
    brick_margin: float = 8.0
    brick_top: float = 70.0
    brick_height: float = 20.0

    # Run / scoring
    lives: int = 3
    score_destroyed: int = 10
    score_damaged: int = 5
    stage_clear_bonus: int = 100


@dataclass(frozen=True)
class BrickView:
    x: float
    y: float
    width: float
    height: float
    hp: int
    row: int
    col: int


@dataclass(frozen=True)
class ArenaSnapshot:
    """Read-only view of one frame for renderers and HUDs"""
    width: float
    height: float
    paddle: Tuple[float, float, float, float]  # x, y, width, height
    ball: Tuple[float, float, float]  # x, y, radius
    bricks: Tuple[BrickView, ...]
    score: int
    lives: int
    stage: int
    stuck: bool
    paused: bool
    over: bool


class ArenaSimulator:
    """Breakout arena: paddle, ball, bricks and the run they belong to"""

    def __init__(self, config: Optional[ArenaConfig] = None, seed: Optional[int] = None):
        self.config = config if config is not None else ArenaConfig()
        self._validate_config()

        self._rng = random.Random(seed)
        self._min_angle = math.radians(self.config.min_angle_deg)

        # Simulation clock (seconds), only advanced by advance()
        self.time = 0.0
        self.paused = False

        # Input intent, consumed by advance()
        self._pointer_x: Optional[float] = None
        self._direction = Direction.NONE

        # World state
        self.run = RunState(lives=self.config.lives)
        self.paddle: Paddle = None  # type: ignore
        self.ball: Ball = None  # type: ignore
        self.bricks: List[Brick] = []

        self.events: Dict[str, float] = self._fresh_events()

        self.reset_run()

    def _validate_config(self):
        cfg = self.config
        assert cfg.width > 0 and cfg.height > 0, "Arena dimensions must be positive."
        assert 0 < cfg.paddle_min_width <= cfg.paddle_width <= cfg.width, \
            "Paddle width must fit the arena and stay above its floor."
        assert cfg.paddle_height > 0 and cfg.paddle_bottom_offset > cfg.paddle_height
        assert cfg.ball_radius > 0, "Ball radius must be positive."
        assert 0 < cfg.ball_speed <= cfg.ball_max_speed, "Ball speed must be in (0, max]."
        assert 0 < cfg.min_angle_deg < 90, "min_angle_deg must be in (0, 90)."
        assert 0 < cfg.bounce_angle_deg < 90, "bounce_angle_deg must be in (0, 90)."
        assert 0 <= cfg.launch_angle_deg < 90, "launch_angle_deg must be in [0, 90)."
        assert cfg.speed_ramp_interval > 0, "speed_ramp_interval must be positive."
        assert cfg.columns > 0 and cfg.max_rows > 0, "Procedural grid needs rows and columns."
        assert cfg.lives > 0, "A run needs at least one life."
        for pattern in cfg.stage_patterns:
            validate_pattern(pattern)

    # ----------------------------
    # Intent API (between steps)
    # ----------------------------

    def set_paddle_target(self, x: Optional[float]):
        """Track a pointer; the paddle centre eases toward x. None releases it."""
        self._pointer_x = x

    def move_paddle_by(self, direction: int):
        """Key-hold intent: -1 left, 0 none, 1 right"""
        self._direction = Direction(int(math.copysign(1, direction)) if direction else 0)

    def launch_ball(self) -> bool:
        """Release a stuck ball. Returns False when there was nothing to launch."""
        b, p = self.ball, self.paddle
        if not b.stuck or self.run.over or self.paused:
            return False

        limit = math.radians(self.config.launch_angle_deg)
        rel = clamp((b.x - p.center_x) / (p.width * 0.5), -1.0, 1.0)
        angle = rel * limit
        if self.config.launch_jitter_deg > 0:
            jitter = self.config.launch_jitter_deg
            angle += math.radians(self._rng.uniform(-jitter, jitter))
        angle = clamp(angle, -limit, limit)

        ux, uy = direction_from_vertical(angle)
        b.vx, b.vy = ux * b.speed, uy * b.speed
        b.stuck = False
        b.last_speed_increase = self.time
        self._correct_angle()
        return True

    def toggle_pause(self, paused: Optional[bool] = None) -> bool:
        if self.run.over:
            return self.paused
        self.paused = (not self.paused) if paused is None else bool(paused)
        return self.paused

    def reset_run(self):
        """Start over: default score/lives/stage, stage 1 bricks, ball on paddle"""
        self.run = RunState(lives=self.config.lives)
        self.paused = False
        self._pointer_x = None
        self._direction = Direction.NONE
        self.events = self._fresh_events()
        self._build_stage()

    # ----------------------------
    # Simulation step
    # ----------------------------

    def advance(self, dt: float) -> Dict[str, float]:
        """Move the world forward by dt seconds and return this step's events"""
        self.events = self._fresh_events()
        if self.run.over or self.paused:
            return self.events

        self.time += dt
        self._move_paddle(dt)

        b = self.ball
        if b.stuck:
            self._rest_ball_on_paddle()
            return self.events

        self._ramp_speed()

        prev_x, prev_y = b.x, b.y
        b.x += b.vx * dt
        b.y += b.vy * dt

        self._collide_walls()
        self._collide_paddle()
        self._collide_bricks(prev_x, prev_y)

        if b.y + b.radius > self.config.height:
            self._lose_life()
        elif self.bricks_left == 0:
            self._clear_stage()

        return self.events

    def _move_paddle(self, dt: float):
        p = self.paddle
        max_x = self.config.width - p.width

        # Pointer wins over keys while it is on the surface
        if self._pointer_x is not None:
            target = clamp(self._pointer_x - p.width * 0.5, 0.0, max_x)
            k = self.config.pointer_smoothing
            if k is None:
                p.x = target
            else:
                p.x += (target - p.x) * min(1.0, dt * k)
        elif self._direction != Direction.NONE:
            p.x += int(self._direction) * p.speed * dt

        p.x = clamp(p.x, 0.0, max_x)

    def _ramp_speed(self):
        b = self.ball
        if self.time - b.last_speed_increase < self.config.speed_ramp_interval:
            return
        b.last_speed_increase = self.time

        new_speed = min(self.config.ball_max_speed, b.speed + self.config.speed_ramp_step)
        if new_speed == b.speed:
            return
        ux, uy = normalize(b.vx, b.vy)
        b.speed = new_speed
        b.vx, b.vy = ux * new_speed, uy * new_speed

    def _collide_walls(self):
        b = self.ball
        bounced = False

        if b.x - b.radius < 0:
            b.x = b.radius
            b.vx = abs(b.vx)
            bounced = True
        elif b.x + b.radius > self.config.width:
            b.x = self.config.width - b.radius
            b.vx = -abs(b.vx)
            bounced = True

        if b.y - b.radius < 0:
            b.y = b.radius
            b.vy = abs(b.vy)
            bounced = True

        if bounced:
            self._correct_angle()
            self.events["wall_hit"] += 1

    def _collide_paddle(self):
        b, p = self.ball, self.paddle
        if b.vy <= 0:
            return
        if b.y + b.radius < p.y or b.y - b.radius > p.y + p.height:
            return
        if b.x < p.x or b.x > p.x + p.width:
            return

        # Offset from centre picks the outgoing angle, always upward
        rel = clamp((b.x - p.center_x) / (p.width * 0.5), -1.0, 1.0)
        ux, uy = direction_from_vertical(rel * math.radians(self.config.bounce_angle_deg))
        b.vx, b.vy = ux * b.speed, uy * b.speed
        b.y = p.y - b.radius - 0.1

        self._correct_angle()
        self.events["paddle_hit"] += 1

    def _collide_bricks(self, prev_x: float, prev_y: float):
        """Resolve at most one brick per step, first live brick in creation order.

        The struck face is guessed from where the ball was before the
        step: a side hit needs the ball to start outside the brick's
        horizontal span and to have moved toward that side. Diagonal
        corner hits can land on either axis.
        """
        b = self.ball
        for brick in self.bricks:
            if not brick.alive:
                continue
            if not rect_circle_collide(brick.x, brick.y, brick.width, brick.height, b.x, b.y, b.radius):
                continue

            # Net x motion, after any wall clamp this step
            moved_x = b.x - prev_x
            if (moved_x > 0 and prev_x < brick.x) or (moved_x < 0 and prev_x > brick.x + brick.width):
                b.vx = -b.vx
                b.x = prev_x
            else:
                b.vy = -b.vy
                b.y = prev_y
            self._correct_angle()

            brick.hp -= 1
            self.events["brick_hit"] += 1
            if brick.alive:
                self._award(self.config.score_damaged)
            else:
                self._award(self.config.score_destroyed)
                self.events["brick_destroyed"] += 1
            break

    def _lose_life(self):
        self.run.lives -= 1
        self.events["life_lost"] += 1
        if self.run.lives <= 0:
            self.run.lives = 0
            self.run.over = True
            self.events["run_over"] += 1
            return
        self._spawn_ball()

    def _clear_stage(self):
        self.run.stage += 1
        self._award(self.config.stage_clear_bonus)
        self.events["stage_clear"] += 1
        self._build_stage()

    # ----------------------------
    # Helpers
    # ----------------------------

    def _build_stage(self):
        cfg = self.config
        pattern = pattern_for_stage(self.run.stage, cfg.stage_patterns, cfg.columns, cfg.max_rows)
        self.bricks = build_bricks(
            pattern, cfg.width,
            margin=cfg.brick_margin, top=cfg.brick_top, brick_height=cfg.brick_height,
        )

        width = paddle_width_for_stage(
            self.run.stage, cfg.paddle_width, cfg.paddle_shrink_per_stage, cfg.paddle_min_width
        )
        self.paddle = Paddle(
            x=(cfg.width - width) * 0.5,
            y=cfg.height - cfg.paddle_bottom_offset,
            width=width,
            height=cfg.paddle_height,
            speed=cfg.paddle_speed,
        )
        self._spawn_ball()

    def _spawn_ball(self):
        cfg = self.config
        speed = ball_speed_for_stage(self.run.stage, cfg.ball_speed, cfg.ball_speed_per_stage, cfg.ball_max_speed)
        self.ball = Ball(
            x=self.paddle.center_x,
            y=0.0,
            radius=cfg.ball_radius,
            speed=speed,
            stuck=True,
            last_speed_increase=self.time,
        )
        self._rest_ball_on_paddle()

    def _rest_ball_on_paddle(self):
        b, p = self.ball, self.paddle
        b.x = p.center_x
        b.y = p.y - b.radius - self.config.ball_rest_gap
        b.vx = b.vy = 0.0

    def _correct_angle(self):
        b = self.ball
        b.vx, b.vy = enforce_angle(b.vx, b.vy, b.speed, self._min_angle)

    def _award(self, points: int):
        self.run.score += points
        self.events["score"] += points

    @staticmethod
    def _fresh_events() -> Dict[str, float]:
        return {k: 0 for k in EVENT_KEYS}

    # ----------------------------
    # Read side
    # ----------------------------

    @property
    def bricks_left(self) -> int:
        return sum(1 for brick in self.bricks if brick.alive)

    def snapshot(self) -> ArenaSnapshot:
        p, b = self.paddle, self.ball
        return ArenaSnapshot(
            width=self.config.width,
            height=self.config.height,
            paddle=(p.x, p.y, p.width, p.height),
            ball=(b.x, b.y, b.radius),
            bricks=tuple(
                BrickView(k.x, k.y, k.width, k.height, k.hp, k.row, k.col)
                for k in self.bricks if k.alive
            ),
            score=self.run.score,
            lives=self.run.lives,
            stage=self.run.stage,
            stuck=b.stuck,
            paused=self.paused,
            over=self.run.over,
        )
