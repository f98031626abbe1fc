"""
BreakoutEnv - Breakout arena as a Gymnasium RL environment
----------------------------------------------------------
- ArenaSimulator for physics (paddle, ball, bricks, lives, stages)
- Gymnasium API
- Discrete key-style control: MultiDiscrete action [move(3), launch(2)]
- Vector observation: paddle + ball state, run state, brick hp grid
- Reward shaped from simulator events (bricks, paddle returns, lives)
- rgb_array rendering with numpy, human rendering with an Arcade window

Install:
    pip install gymnasium arcade numpy

Quick test:
    python -m game.breakout.breakout_env
"""

from __future__ import annotations

import time
from typing import Optional, Dict, Any

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .arena import ArenaConfig, ArenaSimulator, Direction
from .raster import render_frame
from .utils import clamp, seed_everything

# Baseline reward shaping, overridable with reward_config
DEFAULT_REWARDS = {
    "R_BRICK_HIT": 0.5,
    "R_BRICK_DESTROY": 1.0,
    "R_PADDLE": 0.1,
    "R_STAGE": 5.0,
    "R_LIFE": 2.0,
    "R_TIME": 0.001,
    "R_GAME_OVER": 5.0,
}

# move: 0 stay, 1 left, 2 right
_MOVES = (Direction.NONE, Direction.LEFT, Direction.RIGHT)


class BreakoutEnv(gym.Env):
    """Breakout environment driven by ArenaSimulator"""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        width: int = 480,
        height: int = 640,
        dt: float = 1 / 60,
        frame_skip: int = 2,
        max_steps: int = 5400,  # 3 min of play at 60 FPS / frame_skip 2
        lives: int = 3,
        launch_jitter_deg: float = 10.0,
        arena_config: Optional[ArenaConfig] = None,
        reward_config: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        assert render_mode is None or render_mode in self.metadata["render_modes"]
        assert frame_skip >= 1, "frame_skip must be at least 1."
        self.render_mode = render_mode

        if arena_config is None:
            arena_config = ArenaConfig(
                width=float(width),
                height=float(height),
                lives=lives,
                launch_jitter_deg=launch_jitter_deg,
            )
        self.arena_config = arena_config

        self.dt = dt
        self.frame_skip = frame_skip
        self.max_steps = max_steps

        self.rewards = dict(DEFAULT_REWARDS)
        if reward_config:
            self.rewards.update({k: v for k, v in reward_config.items() if k.startswith("R_")})

        # Action space:
        # move: 0 stay, 1 left, 2 right
        # launch: 0/1
        self.action_space = spaces.MultiDiscrete([3, 2])

        # Observation space (vector)
        # Paddle: centre x, width(2)  Ball: pos(2) vel(2) stuck(1)
        # Run: lives(1) bricks remaining(1)  Grid: max_rows * columns hp
        self.grid_rows = arena_config.max_rows
        assert all(len(p) <= self.grid_rows for p in arena_config.stage_patterns), \
            "Every stage pattern must fit within max_rows."
        self.grid_cols = max(
            [arena_config.columns] + [len(p[0]) for p in arena_config.stage_patterns]
        )
        obs_dim = 2 + 2 + 2 + 1 + 1 + 1 + self.grid_rows * self.grid_cols
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        # Arcade window, created on first human render
        self._window = None

        self.sim: ArenaSimulator = None  # type: ignore
        self._bricks_at_stage_start = 1

        # Step state
        self._step_count = 0
        self._events: Dict[str, float] = {}
        self._episode: Dict[str, float] = {}

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        self.sim = ArenaSimulator(
            self.arena_config, seed=int(self.np_random.integers(0, 2**31 - 1))
        )
        self._bricks_at_stage_start = len(self.sim.bricks)
        self._step_count = 0
        self._events = {}
        self._episode = {"bricks_destroyed": 0, "stages_cleared": 0, "lives_lost": 0}

        obs = self._get_obs()
        info = self._get_info()
        return obs, info

    def step(self, action):
        move, launch = int(action[0]), int(action[1])

        # Intent first, then the physics steps consume it
        self.sim.move_paddle_by(_MOVES[move % 3])
        if launch:
            self.sim.launch_ball()

        self._events = {}
        for _ in range(self.frame_skip):
            events = self.sim.advance(self.dt)
            for k, v in events.items():
                self._events[k] = self._events.get(k, 0) + v
            if events["stage_clear"]:
                self._bricks_at_stage_start = len(self.sim.bricks)
            if self.sim.run.over:
                break

        self._episode["bricks_destroyed"] += self._events.get("brick_destroyed", 0)
        self._episode["stages_cleared"] += self._events.get("stage_clear", 0)
        self._episode["lives_lost"] += self._events.get("life_lost", 0)

        reward = self._compute_reward()

        terminated = self.sim.run.over
        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        obs = self._get_obs()
        info = self._get_info()

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        cfg = self.arena_config
        p, b = self.sim.paddle, self.sim.ball
        max_speed = max(1e-6, cfg.ball_max_speed)

        obs_parts = [
            (p.center_x / cfg.width) * 2 - 1,
            (p.width / cfg.width) * 2 - 1,
            clamp((b.x / cfg.width) * 2 - 1, -1, 1),
            clamp((b.y / cfg.height) * 2 - 1, -1, 1),
            clamp(b.vx / max_speed, -1, 1),
            clamp(b.vy / max_speed, -1, 1),
            1.0 if b.stuck else -1.0,
            (self.sim.run.lives / cfg.lives) * 2 - 1,
            (self.sim.bricks_left / max(1, self._bricks_at_stage_start)) * 2 - 1,
        ]

        grid = np.zeros((self.grid_rows, self.grid_cols), dtype=np.float32)
        for brick in self.sim.bricks:
            if brick.alive and brick.row < self.grid_rows and brick.col < self.grid_cols:
                grid[brick.row, brick.col] = brick.hp / 2.0

        obs = np.concatenate([np.array(obs_parts, dtype=np.float32), grid.ravel()])
        return obs

    def _compute_reward(self) -> float:
        r = self.rewards
        ev = self._events

        reward = 0.0
        reward += r["R_BRICK_HIT"] * ev.get("brick_hit", 0)
        reward += r["R_BRICK_DESTROY"] * ev.get("brick_destroyed", 0)
        reward += r["R_PADDLE"] * ev.get("paddle_hit", 0)
        reward += r["R_STAGE"] * ev.get("stage_clear", 0)

        reward -= r["R_LIFE"] * ev.get("life_lost", 0)
        reward -= r["R_TIME"]

        if ev.get("run_over", 0):
            reward -= r["R_GAME_OVER"]

        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.sim.run.score,
            "lives": self.sim.run.lives,
            "stage": self.sim.run.stage,
            "bricks_left": self.sim.bricks_left,
            "bricks_destroyed": self._episode.get("bricks_destroyed", 0),
            "stages_cleared": self._episode.get("stages_cleared", 0),
            "lives_lost": self._episode.get("lives_lost", 0),
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self.render_mode == "rgb_array":
            return render_frame(self.sim.snapshot())

        if self._window is None:
            # Arcade needs a display, so only import it for human rendering
            from .window import BreakoutWindow
            self._window = BreakoutWindow(self, int(self.arena_config.width), int(self.arena_config.height))

        self._window.dispatch_events()
        self._window.on_draw()
        self._window.flip()
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, seed: Optional[int] = 42):
    """Run a random episode for testing"""
    env = BreakoutEnv(render_mode="human" if render else None)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    print("Running episode... close the window to exit early.")

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward

        if render:
            time.sleep(env.dt * env.frame_skip)

    print(f"Random episode return: {total:.2f}  "
          f"score: {info['score']}  stage: {info['stage']}  "
          f"bricks destroyed: {info['bricks_destroyed']}")

    env.close()
    return total, info


if __name__ == "__main__":
    run_random_episode(render=True)
