"""Breakout game module - arena physics, Gymnasium environment"""

from .arena import ArenaConfig, ArenaSimulator, ArenaSnapshot, Direction, MAX_FRAME_DT
from .breakout_env import BreakoutEnv, run_random_episode

__all__ = [
    'ArenaConfig',
    'ArenaSimulator',
    'ArenaSnapshot',
    'Direction',
    'MAX_FRAME_DT',
    'BreakoutEnv',
    'run_random_episode',
]
