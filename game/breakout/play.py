"""
Play Breakout in an Arcade window

Usage:
    python -m game.breakout.play
    python -m game.breakout.play --lives 5 --pointer-snap
"""

import argparse

import arcade

from .arena import ArenaConfig
from .window import PlayWindow


def main():
    parser = argparse.ArgumentParser(description="Play Breakout")
    parser.add_argument("--width", type=int, default=480, help="Arena width (default: 480)")
    parser.add_argument("--height", type=int, default=640, help="Arena height (default: 640)")
    parser.add_argument("--lives", type=int, default=3, help="Starting lives (default: 3)")
    parser.add_argument(
        "--pointer-snap",
        action="store_true",
        help="Paddle jumps to the mouse instead of easing toward it",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for launch jitter")

    args = parser.parse_args()

    config = ArenaConfig(
        width=float(args.width),
        height=float(args.height),
        lives=args.lives,
        pointer_smoothing=None if args.pointer_snap else 12.0,
        launch_jitter_deg=10.0,
    )
    PlayWindow(config, seed=args.seed)
    print("Arrows / A-D or mouse to move, Space to launch, P to pause, R to restart, Esc to quit.")
    arcade.run()


if __name__ == "__main__":
    main()
