"""Tests for keyframe encoding of simulated frames."""

from __future__ import annotations

import math

import pytest

from configs.loader import GameConfig
from core.bricks import Brick, ContributionDay, build_bricks, compute_layout
from core.palette import GITHUB_LIGHT
from core.render_state import BrickStatus, FrameState
from engine.keyframes import (
    AnimationColors,
    KeyframeEncodingError,
    Timeline,
    encode,
    first_hidden_frames,
    frame_fraction,
)
from engine.simulator import simulate

V = BrickStatus.VISIBLE
H = BrickStatus.HIDDEN


def _frames(statuses: list[tuple[BrickStatus, ...]], hits: list[int | None] | None = None) -> list[FrameState]:
    hits = hits or [None] * len(statuses)
    return [
        FrameState(
            tick=index,
            ball_x=100.0 + index,
            ball_y=200.0 - index,
            paddle_x=50.0,
            brick_statuses=status,
            hit_index=hit,
        )
        for index, (status, hit) in enumerate(zip(statuses, hits))
    ]


def _bricks(count: int) -> list[Brick]:
    return [Brick(index=i, x=15 + 15 * i, y=15, color_bucket=(i % 4) + 1, active=True) for i in range(count)]


def test_frame_fraction_special_cases_short_loops() -> None:
    assert frame_fraction(0, 0) == 0.0
    assert frame_fraction(0, 1) == 0.0
    assert frame_fraction(1, 3) == 0.5
    assert frame_fraction(2, 3) == 1.0


def test_empty_frame_list_encodes_to_zero_duration() -> None:
    timelines = encode([], [], GITHUB_LIGHT)

    assert timelines.total_duration == 0.0
    assert timelines.frame_count == 0
    assert timelines.ball_x.values == ()
    assert timelines.paddle_x.keyframes() == []
    assert timelines.bricks == {}
    assert timelines.particles == ()


def test_empty_frames_leave_all_bricks_static() -> None:
    timelines = encode([], _bricks(3), GITHUB_LIGHT)

    assert timelines.bricks == {}


def test_position_timelines_align_with_frames() -> None:
    frames = _frames([(V,), (V,), (V,)])

    timelines = encode(frames, _bricks(1), GITHUB_LIGHT)

    assert timelines.ball_x.values == (100.0, 101.0, 102.0)
    assert timelines.ball_y.values == (200.0, 199.0, 198.0)
    assert timelines.paddle_x.values == (50.0, 50.0, 50.0)
    assert timelines.ball_x.key_times is None
    assert timelines.ball_x.keyframes() == [(0.0, 100.0), (0.5, 101.0), (1.0, 102.0)]
    assert timelines.total_duration == pytest.approx(3 / 30)


def test_destroyed_brick_gets_step_recolor_timeline() -> None:
    frames = _frames([(V, V), (H, V), (H, V)], hits=[None, 0, None])
    bricks = _bricks(2)

    timelines = encode(frames, bricks, GITHUB_LIGHT)

    assert set(timelines.bricks) == {0}
    animation = timelines.bricks[0]
    assert animation.hit_frame == 1
    assert animation.hit_fraction == 0.5
    assert animation.timeline.attribute == "fill"
    assert animation.timeline.key_times == (0.0, 0.5, 0.5, 1.0)
    color = GITHUB_LIGHT[bricks[0].color_bucket]
    assert animation.timeline.values == (color, color, GITHUB_LIGHT[0], GITHUB_LIGHT[0])


def test_fade_mode_uses_opacity_steps() -> None:
    frames = _frames([(V,), (H,)])

    timelines = encode(frames, _bricks(1), GITHUB_LIGHT, config=GameConfig(brick_hide_mode="fade"))

    timeline = timelines.bricks[0].timeline
    assert timeline.attribute == "opacity"
    assert timeline.values == (1, 1, 0, 0)
    assert timeline.key_times == (0.0, 1.0, 1.0, 1.0)


def test_particle_burst_is_radial_and_windowed() -> None:
    config = GameConfig(particle_count=4, particle_distance=10.0, particle_duration=0.5)
    frames = _frames([(V,)] * 30 + [(H,)] * 31)
    brick = _bricks(1)[0]

    timelines = encode(frames, [brick], GITHUB_LIGHT, config=config)

    particles = timelines.particles
    assert len(particles) == 4
    assert [p.angle for p in particles] == pytest.approx([0.0, math.pi / 2, math.pi, 3 * math.pi / 2])

    t_start = 30 / 60
    t_end = t_start + 0.5 / (61 / 30)
    assert timelines.bricks[0].burst_end_fraction == pytest.approx(t_end)

    center_x, center_y = brick.center(config.brick_size)
    first = particles[0]
    assert first.cx.key_times == pytest.approx((0.0, t_start, t_end, 1.0))
    assert first.cx.values == pytest.approx((center_x, center_x, center_x + 10.0, center_x + 10.0))
    assert first.cy.values == pytest.approx((center_y, center_y, center_y, center_y))
    assert first.opacity.values == (0, 0, 1, 0, 0)
    assert first.opacity.key_times == pytest.approx((0.0, t_start, t_start, t_end, 1.0))
    assert particles[1].cy.values[-1] == pytest.approx(center_y + 10.0)


def test_burst_window_truncates_at_loop_end() -> None:
    frames = _frames([(V,), (V,), (H,)])

    timelines = encode(frames, _bricks(1), GITHUB_LIGHT)

    animation = timelines.bricks[0]
    assert animation.hit_fraction == 1.0
    assert animation.burst_end_fraction == 1.0
    for particle in timelines.particles:
        assert max(particle.opacity.key_times) == 1.0
        assert particle.cx.key_times[-2] == 1.0


def test_brick_destroyed_on_last_simulated_tick_clamps_burst_end() -> None:
    config = GameConfig()
    days = [[ContributionDay(level=3, count=5) for _ in range(7)]]
    layout = compute_layout(1, config)
    bricks = build_bricks(days, config)
    result = simulate(bricks, layout.canvas_width, layout.canvas_height, layout.paddle_y, False, config)

    timelines = encode(result.frames, bricks, GITHUB_LIGHT, config=config)

    last_hit = result.frames[-1].hit_index
    assert last_hit is not None
    animation = timelines.bricks[last_hit]
    assert animation.hit_frame == len(result.frames) - 1
    assert animation.hit_fraction == 1.0
    assert animation.burst_end_fraction == 1.0
    assert len(timelines.bricks) == 7
    assert len(timelines.particles) == 7 * config.particle_count


def test_ball_fill_overlay_marks_hit_frames() -> None:
    frames = _frames([(V,), (H,), (H,)], hits=[None, 0, None])
    colors = AnimationColors(ball="#00f", hit="#f00")

    timelines = encode(frames, _bricks(1), GITHUB_LIGHT, colors)

    assert timelines.ball_fill is not None
    assert timelines.ball_fill.values == ("#00f", "#f00", "#00f")

    no_overlay = encode(frames, _bricks(1), GITHUB_LIGHT, AnimationColors(ball_hit_overlay=False))
    assert no_overlay.ball_fill is None


def test_non_monotonic_ticks_rejected() -> None:
    frames = _frames([(V,), (V,)])
    frames = [frames[1], frames[0]]

    with pytest.raises(KeyframeEncodingError, match="ticks must increase"):
        encode(frames, _bricks(1), GITHUB_LIGHT)


def test_reappearing_brick_rejected() -> None:
    with pytest.raises(KeyframeEncodingError, match="reappears"):
        first_hidden_frames(_frames([(V,), (H,), (V,)]), 1)


def test_status_vector_length_must_match_bricks() -> None:
    with pytest.raises(KeyframeEncodingError, match="brick statuses"):
        encode(_frames([(V, V)]), _bricks(1), GITHUB_LIGHT)


def test_timeline_rejects_malformed_key_times() -> None:
    with pytest.raises(KeyframeEncodingError, match="not monotonic"):
        Timeline("x", (1, 2, 3, 4), (0.0, 0.8, 0.5, 1.0))
    with pytest.raises(KeyframeEncodingError, match="span"):
        Timeline("x", (1, 2), (0.1, 1.0))
    with pytest.raises(KeyframeEncodingError, match="values"):
        Timeline("x", (1, 2, 3), (0.0, 1.0))
