import math

import pytest

from game.breakout.arena import ArenaConfig, ArenaSimulator, Direction

MIN_FLOOR = math.sin(math.radians(15))

# 8 columns in a 480 arena: brick width 51, column c starts at 8 + 59 * c,
# row 0 spans y 70..90


def COL(c):
    return 8 + 59 * c


BRICK_W = 51.0
ROW0_BOTTOM = 90.0


def make_sim(pattern=None, **overrides):
    if pattern is not None:
        overrides["stage_patterns"] = [pattern]
    return ArenaSimulator(ArenaConfig(**overrides), seed=0)


def fly(sim, x, y, vx, vy):
    """Put the ball in flight at a known position and velocity"""
    b = sim.ball
    b.stuck = False
    b.x, b.y = x, y
    b.vx, b.vy = vx, vy
    b.speed = math.hypot(vx, vy)
    b.last_speed_increase = sim.time
    return b


FAR_BRICK = [[0, 0, 0, 0, 0, 0, 0, 1]]


# ----------------------------
# Initial state
# ----------------------------

def test_new_simulator_starts_a_run():
    sim = make_sim()
    assert sim.run.score == 0
    assert sim.run.lives == 3
    assert sim.run.stage == 1
    assert not sim.run.over
    assert sim.ball.stuck
    assert sim.ball.x == pytest.approx(sim.paddle.center_x)
    assert sim.ball.y + sim.ball.radius < sim.paddle.y
    assert sim.paddle.x == pytest.approx((480 - 80) / 2)
    assert sim.bricks_left == 40


@pytest.mark.parametrize("overrides", [
    {"stage_patterns": [[]]},
    {"stage_patterns": [[[1, 4]]]},
    {"min_angle_deg": 0},
    {"lives": 0},
    {"paddle_width": 1000},
    {"ball_speed": 900},
])
def test_malformed_config_fails_fast(overrides):
    with pytest.raises(AssertionError):
        ArenaSimulator(ArenaConfig(**overrides))


# ----------------------------
# Walls
# ----------------------------

def test_left_wall_bounce_clamps_and_reflects():
    sim = make_sim(FAR_BRICK)
    b = fly(sim, 7.0, 300.0, -50.0, -200.0)
    events = sim.advance(0.01)
    assert b.x == pytest.approx(b.radius)
    assert b.vx > 0
    assert b.vx == pytest.approx(50.0)
    assert events["wall_hit"] == 1


def test_left_wall_bounce_beside_first_column_keeps_reflection():
    # Default stage: the ball pressed against the wall also touches column 0
    sim = make_sim()
    b = fly(sim, 7.0, 100.0, -50.0, -200.0)
    events = sim.advance(0.01)
    assert events["wall_hit"] == 1
    assert b.x == pytest.approx(b.radius)
    assert b.vx == pytest.approx(50.0)
    assert math.hypot(b.vx, b.vy) == pytest.approx(b.speed)


def test_right_and_top_walls():
    sim = make_sim(FAR_BRICK)
    b = fly(sim, 480.0 - 7.0, 300.0, 50.0, -200.0)
    sim.advance(0.01)
    assert b.x == pytest.approx(480.0 - b.radius)
    assert b.vx < 0

    b = fly(sim, 240.0, 7.0, 50.0, -200.0)
    sim.advance(0.01)
    assert b.y == pytest.approx(b.radius)
    assert b.vy > 0


def test_no_bottom_wall():
    sim = make_sim(FAR_BRICK)
    fly(sim, 100.0, 635.0, 0.0, 200.0)
    events = sim.advance(0.01)
    assert events["wall_hit"] == 0
    assert events["life_lost"] == 1


def test_shallow_wall_bounce_gets_angle_floor():
    sim = make_sim(FAR_BRICK)
    b = fly(sim, 7.0, 300.0, -300.0, -5.0)
    sim.advance(0.01)
    assert b.vx > 0 and b.vy < 0
    assert abs(b.vy) / b.speed == pytest.approx(MIN_FLOOR)
    assert math.hypot(b.vx, b.vy) == pytest.approx(b.speed)


# ----------------------------
# Paddle
# ----------------------------

def test_paddle_centre_hit_goes_straight_up():
    sim = make_sim(FAR_BRICK)
    p = sim.paddle
    b = fly(sim, p.center_x, p.y - 8.0, 0.0, 200.0)
    events = sim.advance(0.01)

    assert events["paddle_hit"] == 1
    assert b.vx == pytest.approx(0.0, abs=1e-9)
    assert b.vy < 0
    assert math.hypot(b.vx, b.vy) == pytest.approx(200.0)
    assert b.y == pytest.approx(p.y - b.radius - 0.1)


def test_paddle_edge_hit_deflects_sixty_degrees():
    sim = make_sim(FAR_BRICK)
    p = sim.paddle
    b = fly(sim, p.x + p.width, p.y - 8.0, 0.0, 200.0)
    sim.advance(0.01)

    angle = math.degrees(math.atan2(b.vx, -b.vy))
    assert angle == pytest.approx(60.0)


def test_paddle_left_half_sends_ball_left():
    sim = make_sim(FAR_BRICK)
    p = sim.paddle
    b = fly(sim, p.center_x - p.width / 4, p.y - 8.0, 30.0, 200.0)
    sim.advance(0.01)
    assert b.vx < 0 and b.vy < 0


def test_paddle_ignores_rising_ball_and_misses_outside_span():
    sim = make_sim(FAR_BRICK)
    p = sim.paddle
    b = fly(sim, p.center_x, p.y + 2.0, 0.0, -200.0)
    events = sim.advance(0.01)
    assert events["paddle_hit"] == 0
    assert b.vy < 0

    fly(sim, p.x - 20.0, p.y - 8.0, 0.0, 200.0)
    events = sim.advance(0.01)
    assert events["paddle_hit"] == 0


# ----------------------------
# Bricks
# ----------------------------

def test_normal_brick_destroyed_once():
    sim = make_sim([[1, 0, 0, 0, 0, 0, 0, 1]])
    cx = COL(0) + BRICK_W / 2
    b = fly(sim, cx, ROW0_BOTTOM + 9.0, 0.0, -200.0)

    events = sim.advance(0.02)
    assert events["brick_hit"] == 1
    assert events["brick_destroyed"] == 1
    assert events["score"] == sim.config.score_destroyed
    assert sim.run.score == 10
    assert not sim.bricks[0].alive
    assert b.vy > 0

    # Dead brick is ignored even when the ball overlaps it again
    fly(sim, cx, ROW0_BOTTOM - 5.0, 0.0, -200.0)
    events = sim.advance(0.01)
    assert events["brick_hit"] == 0
    assert sim.run.score == 10
    assert sim.bricks[0].hp == 0


def test_reinforced_brick_takes_two_hits():
    sim = make_sim([[2, 0, 0, 0, 0, 0, 0, 1]])
    cx = COL(0) + BRICK_W / 2

    fly(sim, cx, ROW0_BOTTOM + 9.0, 0.0, -200.0)
    events = sim.advance(0.02)
    assert sim.bricks[0].hp == 1
    assert sim.bricks[0].alive
    assert events["brick_destroyed"] == 0
    assert sim.run.score == sim.config.score_damaged

    fly(sim, cx, ROW0_BOTTOM + 9.0, 0.0, -200.0)
    events = sim.advance(0.02)
    assert not sim.bricks[0].alive
    assert events["brick_destroyed"] == 1
    assert sim.run.score == sim.config.score_damaged + sim.config.score_destroyed


def test_side_hit_flips_horizontal_velocity():
    sim = make_sim([[0, 1, 0, 0, 0, 0, 0, 1]])
    left = COL(1)
    b = fly(sim, left - 9.0, 80.0, 200.0, -60.0)
    events = sim.advance(0.02)
    assert events["brick_hit"] == 1
    assert b.vx < 0
    assert b.x == pytest.approx(left - 9.0)


def test_only_one_brick_resolved_per_step():
    sim = make_sim([[1, 1, 0, 0, 0, 0, 0, 1]])
    # Gap between column 0 and 1; the ball overlaps both after moving
    gap_x = (COL(0) + BRICK_W + COL(1)) / 2
    fly(sim, gap_x, ROW0_BOTTOM + 9.0, 0.0, -200.0)
    events = sim.advance(0.02)

    assert events["brick_hit"] == 1
    assert not sim.bricks[0].alive
    assert sim.bricks[1].alive


def test_corner_hit_flips_one_axis():
    sim = make_sim([[0, 1, 0, 0, 0, 0, 0, 1]])
    b = fly(sim, COL(1) - 5.0, ROW0_BOTTOM + 5.0, 100.0, -100.0)
    before = (b.vx, b.vy)
    events = sim.advance(0.02)
    assert events["brick_hit"] == 1
    flipped_x = (b.vx > 0) != (before[0] > 0)
    flipped_y = (b.vy > 0) != (before[1] > 0)
    assert flipped_x or flipped_y
    assert math.hypot(b.vx, b.vy) == pytest.approx(b.speed)


# ----------------------------
# Stage clear / lives
# ----------------------------

def test_stage_clear_builds_next_stage():
    sim = make_sim([[1, 0, 0, 0, 0, 0, 0, 0]])
    fly(sim, COL(0) + BRICK_W / 2, ROW0_BOTTOM + 9.0, 0.0, -200.0)
    events = sim.advance(0.02)

    assert events["stage_clear"] == 1
    assert sim.run.stage == 2
    assert sim.run.score == 10 + sim.config.stage_clear_bonus
    # Stage 2 is generated: 6 rows of 8, top row reinforced
    assert len(sim.bricks) == 48
    assert all(b.alive for b in sim.bricks)
    assert sum(1 for b in sim.bricks if b.hp == 2) == 8
    assert sim.ball.stuck
    assert sim.paddle.width == 76
    assert sim.ball.speed == 288


def test_life_loss_resets_ball_and_keeps_progress():
    sim = make_sim(FAR_BRICK)
    sim.run.score = 40
    fly(sim, 100.0, 635.0, 0.0, 200.0)
    events = sim.advance(0.01)

    assert events["life_lost"] == 1
    assert sim.run.lives == 2
    assert sim.run.score == 40
    assert sim.run.stage == 1
    assert not sim.run.over
    assert sim.ball.stuck
    assert sim.ball.x == pytest.approx(sim.paddle.center_x)


def test_last_life_ends_run_and_freezes_world():
    sim = make_sim(FAR_BRICK, lives=1)
    b = fly(sim, 100.0, 635.0, 0.0, 200.0)
    events = sim.advance(0.01)

    assert events["run_over"] == 1
    assert sim.run.lives == 0
    assert sim.run.over

    paddle_x, ball_pos = sim.paddle.x, (b.x, b.y)
    sim.move_paddle_by(Direction.RIGHT)
    sim.set_paddle_target(0.0)
    for _ in range(10):
        events = sim.advance(0.016)
    assert sim.paddle.x == paddle_x
    assert (sim.ball.x, sim.ball.y) == ball_pos
    assert not any(events.values())
    assert not sim.launch_ball()

    sim.reset_run()
    assert not sim.run.over
    assert sim.run.lives == 1
    assert sim.run.score == 0
    assert sim.run.stage == 1
    assert sim.ball.stuck


# ----------------------------
# Speed ramp
# ----------------------------

def test_speed_ramp_keeps_direction():
    sim = make_sim(FAR_BRICK)
    b = fly(sim, 240.0, 300.0, 100.0, -200.0)
    sim.advance(0.01)
    assert b.speed == pytest.approx(math.hypot(100.0, 200.0))

    b.last_speed_increase = sim.time - 3.0
    sim.advance(0.001)
    assert b.speed == pytest.approx(math.hypot(100.0, 200.0) + 15.0)
    assert b.vx / b.vy == pytest.approx(-0.5)
    assert math.hypot(b.vx, b.vy) == pytest.approx(b.speed)
    assert b.last_speed_increase == pytest.approx(sim.time)


def test_speed_ramp_is_capped():
    sim = make_sim(FAR_BRICK)
    b = fly(sim, 240.0, 300.0, 0.0, -555.0)
    b.last_speed_increase = sim.time - 10.0
    sim.advance(0.001)
    assert b.speed == pytest.approx(560.0)


def test_no_ramp_while_stuck():
    sim = make_sim(FAR_BRICK)
    speed = sim.ball.speed
    for _ in range(400):
        sim.advance(0.02)
    assert sim.ball.speed == speed
    assert sim.ball.stuck


# ----------------------------
# Input intent
# ----------------------------

def test_key_intent_moves_paddle_and_stuck_ball_follows():
    sim = make_sim(FAR_BRICK)
    x0 = sim.paddle.x
    sim.move_paddle_by(Direction.RIGHT)
    assert sim.paddle.x == x0  # intent only
    sim.advance(0.1)
    assert sim.paddle.x == pytest.approx(x0 + 48.0)
    assert sim.ball.x == pytest.approx(sim.paddle.center_x)
    assert sim.ball.vx == 0.0 and sim.ball.vy == 0.0


def test_paddle_is_clamped_to_arena():
    sim = make_sim(FAR_BRICK)
    sim.move_paddle_by(Direction.RIGHT)
    for _ in range(100):
        sim.advance(0.033)
    assert sim.paddle.x == pytest.approx(480 - sim.paddle.width)

    sim.move_paddle_by(Direction.LEFT)
    for _ in range(100):
        sim.advance(0.033)
    assert sim.paddle.x == 0.0


def test_pointer_eases_toward_target_and_overrides_keys():
    sim = make_sim(FAR_BRICK)
    sim.move_paddle_by(Direction.LEFT)
    sim.set_paddle_target(400.0)
    sim.advance(0.01)
    # target left edge 360, paddle at 200, factor 0.12
    assert sim.paddle.x == pytest.approx(200.0 + 160.0 * 0.12)

    sim.set_paddle_target(None)
    x = sim.paddle.x
    sim.advance(0.01)
    assert sim.paddle.x == pytest.approx(x - 4.8)


def test_pointer_snap_mode():
    sim = make_sim(FAR_BRICK, pointer_smoothing=None)
    sim.set_paddle_target(10_000.0)
    sim.advance(0.01)
    assert sim.paddle.x == pytest.approx(400.0)


# ----------------------------
# Launch / pause / snapshot
# ----------------------------

def test_launch_from_stuck_only():
    sim = make_sim(FAR_BRICK)
    assert sim.launch_ball()
    b = sim.ball
    assert not b.stuck
    assert b.vy < 0
    assert math.hypot(b.vx, b.vy) == pytest.approx(b.speed)
    assert not sim.launch_ball()


@pytest.mark.parametrize("seed", range(10))
def test_launch_jitter_stays_within_bound(seed):
    sim = ArenaSimulator(ArenaConfig(launch_jitter_deg=45.0, launch_angle_deg=30.0), seed=seed)
    sim.launch_ball()
    b = sim.ball
    angle = math.degrees(math.atan2(b.vx, -b.vy))
    assert abs(angle) <= 30.0 + 1e-9


def test_pause_freezes_simulation():
    sim = make_sim(FAR_BRICK)
    b = fly(sim, 240.0, 300.0, 100.0, -200.0)
    assert sim.toggle_pause()
    t = sim.time
    sim.advance(0.5)
    assert (b.x, b.y) == (240.0, 300.0)
    assert sim.time == t
    assert not sim.launch_ball()
    assert not sim.toggle_pause()
    sim.advance(0.01)
    assert b.y < 300.0


def test_snapshot_lists_live_bricks_only():
    sim = make_sim([[1, 0, 0, 0, 0, 0, 0, 1]])
    sim.bricks[0].hp = 0
    snap = sim.snapshot()
    assert len(snap.bricks) == 1
    assert snap.bricks[0].col == 7
    assert snap.paddle == (sim.paddle.x, sim.paddle.y, sim.paddle.width, sim.paddle.height)
    assert snap.ball == (sim.ball.x, sim.ball.y, sim.ball.radius)
    assert snap.stuck and not snap.over and not snap.paused
    assert (snap.score, snap.lives, snap.stage) == (0, 3, 1)


def test_independent_instances():
    a, b = make_sim(FAR_BRICK), make_sim(FAR_BRICK)
    a.move_paddle_by(Direction.LEFT)
    a.advance(0.1)
    assert a.paddle.x != b.paddle.x
    a.bricks[0].hp = 0
    assert b.bricks[0].alive


# ----------------------------
# Invariants over a long run
# ----------------------------

@pytest.mark.parametrize("seed", [0, 1, 2])
def test_invariants_hold_over_long_run(seed):
    sim = ArenaSimulator(ArenaConfig(launch_jitter_deg=20.0), seed=seed)
    dt = 1 / 60
    last_score = 0
    last_hp = {}
    stage = sim.run.stage

    for step in range(6000):
        b, p = sim.ball, sim.paddle
        if b.stuck:
            sim.launch_ball()
        # Track the ball, switching input modes halfway
        if step < 3000:
            if b.x < p.center_x - 5:
                sim.move_paddle_by(Direction.LEFT)
            elif b.x > p.center_x + 5:
                sim.move_paddle_by(Direction.RIGHT)
            else:
                sim.move_paddle_by(Direction.NONE)
        else:
            sim.set_paddle_target(b.x + (step % 7) - 3)

        sim.advance(dt)
        if sim.run.over:
            break

        b, p = sim.ball, sim.paddle
        assert 0.0 <= p.x <= sim.config.width - p.width
        assert sim.run.score >= last_score
        last_score = sim.run.score

        if sim.run.stage != stage:
            stage = sim.run.stage
            last_hp = {}
        for i, brick in enumerate(sim.bricks):
            assert brick.hp <= last_hp.get(i, brick.hp)
            last_hp[i] = brick.hp

        if not b.stuck:
            assert math.hypot(b.vx, b.vy) == pytest.approx(b.speed, rel=1e-9)
            assert abs(b.vy) / b.speed >= MIN_FLOOR - 1e-9
