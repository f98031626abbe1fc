"""
Stage layouts and difficulty curves

A stage pattern is a grid of cell codes: 0 = empty, 1 = normal brick,
2 = reinforced brick. The first stages come from STAGE_PATTERNS, later
ones are generated procedurally and get taller and tougher.
"""

from __future__ import annotations
from typing import List, Sequence

from .entities import Brick

Pattern = Sequence[Sequence[int]]

EMPTY, NORMAL, REINFORCED = 0, 1, 2
CELL_CODES = (EMPTY, NORMAL, REINFORCED)

STAGE_PATTERNS: List[Pattern] = [
    # 1: full wall
    [
        [1, 1, 1, 1, 1, 1, 1, 1],
        [1, 1, 1, 1, 1, 1, 1, 1],
        [1, 1, 1, 1, 1, 1, 1, 1],
        [1, 1, 1, 1, 1, 1, 1, 1],
        [1, 1, 1, 1, 1, 1, 1, 1],
    ],
    # 2: reinforced crown
    [
        [2, 2, 2, 2, 2, 2, 2, 2],
        [1, 1, 1, 1, 1, 1, 1, 1],
        [1, 1, 0, 1, 1, 0, 1, 1],
        [1, 1, 1, 1, 1, 1, 1, 1],
        [0, 1, 1, 1, 1, 1, 1, 0],
        [0, 0, 1, 1, 1, 1, 0, 0],
    ],
    # 3: checkerboard
    [
        [2, 0, 2, 0, 2, 0, 2, 0],
        [0, 1, 0, 1, 0, 1, 0, 1],
        [1, 0, 1, 0, 1, 0, 1, 0],
        [0, 2, 0, 2, 0, 2, 0, 2],
        [1, 0, 1, 0, 1, 0, 1, 0],
        [0, 1, 0, 1, 0, 1, 0, 1],
        [1, 0, 1, 0, 1, 0, 1, 0],
    ],
]


def validate_pattern(pattern: Pattern):
    """Fail fast on malformed layouts (programmer error)"""
    assert len(pattern) > 0, "Stage pattern needs at least one row."
    cols = len(pattern[0])
    assert cols > 0, "Stage pattern needs at least one column."
    assert all(len(row) == cols for row in pattern), "Stage pattern rows must have equal length."
    assert all(cell in CELL_CODES for row in pattern for cell in row), \
        f"Stage pattern cells must be one of {CELL_CODES}."
    assert any(cell != EMPTY for row in pattern for cell in row), "Stage pattern has no bricks."


def generate_pattern(stage: int, columns: int = 8, max_rows: int = 10) -> List[List[int]]:
    """Procedural layout: one more row per stage, top stage//2 rows reinforced"""
    rows = min(4 + stage, max_rows)
    reinforced_rows = min(rows, stage // 2)
    return [
        [REINFORCED if r < reinforced_rows else NORMAL for _ in range(columns)]
        for r in range(rows)
    ]


def pattern_for_stage(
    stage: int,
    patterns: Sequence[Pattern] = STAGE_PATTERNS,
    columns: int = 8,
    max_rows: int = 10,
) -> Pattern:
    """Pick the layout for a 1-based stage index"""
    if 1 <= stage <= len(patterns):
        return patterns[stage - 1]
    return generate_pattern(stage, columns, max_rows)


def build_bricks(
    pattern: Pattern,
    arena_width: float,
    margin: float = 8.0,
    top: float = 70.0,
    brick_height: float = 20.0,
) -> List[Brick]:
    """Lay out a pattern across the arena width, in row-major creation order"""
    validate_pattern(pattern)
    cols = len(pattern[0])
    brick_w = (arena_width - margin * (cols + 1)) / cols
    assert brick_w > 0, "Arena too narrow for this pattern."

    bricks = []
    for r, row in enumerate(pattern):
        for c, cell in enumerate(row):
            if cell == EMPTY:
                continue
            bricks.append(Brick(
                x=margin + c * (brick_w + margin),
                y=top + r * (brick_height + margin),
                width=brick_w,
                height=brick_height,
                hp=int(cell),
                row=r,
                col=c,
            ))
    return bricks


def paddle_width_for_stage(stage: int, base: float = 80.0, shrink: float = 4.0, floor: float = 56.0) -> float:
    return max(floor, base - (stage - 1) * shrink)


def ball_speed_for_stage(stage: int, base: float = 260.0, step: float = 28.0, cap: float = 560.0) -> float:
    return min(cap, base + (stage - 1) * step)
