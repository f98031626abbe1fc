"""
Arcade windows for Breakout

BreakoutWindow draws a BreakoutEnv for render_mode="human".
PlayWindow lets a person play: keys / mouse only record intent on the
simulator, on_update steps it once per frame.
"""

from __future__ import annotations

from typing import Optional

import arcade

from .arena import ArenaConfig, ArenaSimulator, ArenaSnapshot, Direction, MAX_FRAME_DT
from .raster import BALL_C, BG_TOP, HUD_C, PADDLE_C, brick_color


def draw_snapshot(snap: ArenaSnapshot, window_height: float):
    """Draw one frame; the simulator is y-down, Arcade is y-up"""
    H = window_height

    for b in snap.bricks:
        arcade.draw_lrbt_rectangle_filled(
            b.x, b.x + b.width, H - (b.y + b.height), H - b.y,
            brick_color(b.row, b.col, b.hp),
        )
        # Top highlight
        arcade.draw_lrbt_rectangle_filled(
            b.x, b.x + b.width, H - b.y - 4, H - b.y, (255, 255, 255, 46)
        )

    px, py, pw, ph = snap.paddle
    arcade.draw_lrbt_rectangle_filled(px, px + pw, H - (py + ph), H - py, PADDLE_C)

    bx, by, br = snap.ball
    # Soft glow under the ball
    arcade.draw_circle_filled(bx, H - by, br * 5, (*BALL_C, 20))
    arcade.draw_circle_filled(bx, H - by, br, BALL_C)

    hud = f"Score: {snap.score}   Lives: {snap.lives}   Stage: {snap.stage}"
    arcade.draw_text(hud, 12, H - 28, HUD_C, 14)


class BreakoutWindow(arcade.Window):
    """Arcade window for rendering the Breakout environment"""

    def __init__(self, env, width: int, height: int):
        super().__init__(width, height, "BreakoutEnv - Arcade")
        self.env = env
        arcade.set_background_color(BG_TOP)

    def on_draw(self):
        self.clear()
        draw_snapshot(self.env.sim.snapshot(), self.height)


class PlayWindow(arcade.Window):
    """Interactive game: arrows / A-D or mouse, space to launch, P pause, R restart"""

    def __init__(self, config: Optional[ArenaConfig] = None, seed: Optional[int] = None):
        self.sim = ArenaSimulator(config, seed=seed)
        cfg = self.sim.config
        super().__init__(int(cfg.width), int(cfg.height), "Breakout")
        arcade.set_background_color(BG_TOP)

        self._left = False
        self._right = False

    # ----------------------------
    # Frame loop
    # ----------------------------

    def on_update(self, delta_time: float):
        events = self.sim.advance(min(delta_time, MAX_FRAME_DT))
        if events["stage_clear"]:
            print(f"Stage cleared! Now on stage {self.sim.run.stage}, score {self.sim.run.score}")
        if events["run_over"]:
            print(f"Game over. Final score {self.sim.run.score}, stage {self.sim.run.stage}")

    def on_draw(self):
        self.clear()
        snap = self.sim.snapshot()
        draw_snapshot(snap, self.height)

        message = None
        if snap.over:
            message = "GAME OVER - press R or click to restart"
        elif snap.paused:
            message = f"Paused - score {snap.score} / stage {snap.stage}"
        elif snap.stuck:
            message = "Space / click to launch"
        if message:
            arcade.draw_text(message, self.width / 2, self.height / 2, HUD_C, 16, anchor_x="center")

    # ----------------------------
    # Input -> intent
    # ----------------------------

    def _sync_direction(self):
        if self._left == self._right:
            self.sim.move_paddle_by(Direction.NONE)
        elif self._left:
            self.sim.move_paddle_by(Direction.LEFT)
        else:
            self.sim.move_paddle_by(Direction.RIGHT)

    def on_key_press(self, key, modifiers):
        if key in (arcade.key.LEFT, arcade.key.A):
            self._left = True
        elif key in (arcade.key.RIGHT, arcade.key.D):
            self._right = True
        elif key in (arcade.key.SPACE, arcade.key.UP):
            self.sim.launch_ball()
        elif key == arcade.key.P:
            self.sim.toggle_pause()
        elif key == arcade.key.R:
            self.sim.reset_run()
            self._left = self._right = False
        elif key == arcade.key.ESCAPE:
            self.close()
            return
        self._sync_direction()

    def on_key_release(self, key, modifiers):
        if key in (arcade.key.LEFT, arcade.key.A):
            self._left = False
        elif key in (arcade.key.RIGHT, arcade.key.D):
            self._right = False
        self._sync_direction()

    def on_mouse_motion(self, x, y, dx, dy):
        self.sim.set_paddle_target(x)

    def on_mouse_leave(self, x, y):
        self.sim.set_paddle_target(None)

    def on_mouse_press(self, x, y, button, modifiers):
        if self.sim.run.over:
            self.sim.reset_run()
        else:
            self.sim.launch_ball()
