"""Encode simulated frames into loopable keyframe timelines.

Every timeline spans one loop iteration of ``total_duration`` seconds and is
indexed by time fractions in ``[0, 1]``. Position timelines carry one value
per frame with implicit even spacing; brick and particle timelines carry
explicit key times.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from configs.loader import GameConfig
from core.bricks import Brick
from core.render_state import BrickStatus, FrameState


class KeyframeEncodingError(ValueError):
    """Raised when the frame list violates simulator output invariants."""


@dataclass(frozen=True)
class AnimationColors:
    """Fill colours for the moving entities."""

    paddle: str = "#1F6FEB"
    ball: str = "#1F6FEB"
    hit: str = "#ff0000"
    ball_hit_overlay: bool = True


@dataclass(frozen=True)
class Timeline:
    """Values of one animated attribute over a single loop.

    ``key_times`` of ``None`` means the values are evenly spaced.
    """

    attribute: str
    values: tuple[Any, ...]
    key_times: tuple[float, ...] | None = None

    def __post_init__(self) -> None:
        if self.key_times is None:
            return
        if len(self.key_times) != len(self.values):
            raise KeyframeEncodingError(
                f"Timeline '{self.attribute}' has {len(self.values)} values but {len(self.key_times)} key times."
            )
        if not self.key_times:
            return
        if self.key_times[0] != 0.0 or self.key_times[-1] != 1.0:
            raise KeyframeEncodingError(f"Timeline '{self.attribute}' must span key times 0 to 1.")
        for previous, current in zip(self.key_times, self.key_times[1:]):
            if current < previous:
                raise KeyframeEncodingError(
                    f"Timeline '{self.attribute}' key times are not monotonic: {self.key_times}."
                )

    def keyframes(self) -> list[tuple[float, Any]]:
        """Return ``(time_fraction, value)`` pairs."""
        if self.key_times is not None:
            return list(zip(self.key_times, self.values))
        count = len(self.values)
        return [(frame_fraction(index, count), value) for index, value in enumerate(self.values)]


@dataclass(frozen=True)
class BrickAnimation:
    """Step timeline of a brick destroyed during the run."""

    brick: Brick
    hit_frame: int
    hit_fraction: float
    burst_end_fraction: float
    timeline: Timeline


@dataclass(frozen=True)
class ParticleAnimation:
    """One fragment of the burst emitted by a destroyed brick."""

    brick_index: int
    angle: float
    color: str
    cx: Timeline
    cy: Timeline
    opacity: Timeline


@dataclass(frozen=True)
class AnimationTimelines:
    """All timelines for one animation loop."""

    ball_x: Timeline
    ball_y: Timeline
    ball_fill: Timeline | None
    paddle_x: Timeline
    bricks: Mapping[int, BrickAnimation]
    particles: tuple[ParticleAnimation, ...]
    total_duration: float
    frame_count: int


def frame_fraction(frame_index: int, frame_count: int) -> float:
    """Time fraction of ``frame_index``; 0 when the loop has fewer than two frames."""
    if frame_count <= 1:
        return 0.0
    return frame_index / (frame_count - 1)


def first_hidden_frames(frames: Sequence[FrameState], brick_count: int) -> list[int | None]:
    """Return, per brick, the first frame index where it is hidden.

    Also checks frame ordering, status vector length and that no brick ever
    reappears.
    """
    first_hidden: list[int | None] = [None] * brick_count
    previous_tick: int | None = None
    for frame_index, frame in enumerate(frames):
        if previous_tick is not None and frame.tick <= previous_tick:
            raise KeyframeEncodingError(
                f"Frame ticks must increase: tick {frame.tick} follows {previous_tick}."
            )
        previous_tick = frame.tick

        if len(frame.brick_statuses) != brick_count:
            raise KeyframeEncodingError(
                f"Frame {frame_index} has {len(frame.brick_statuses)} brick statuses, expected {brick_count}."
            )
        for brick_index, status in enumerate(frame.brick_statuses):
            seen = first_hidden[brick_index]
            if status is BrickStatus.HIDDEN:
                if seen is None:
                    first_hidden[brick_index] = frame_index
            elif seen is not None:
                raise KeyframeEncodingError(
                    f"Brick {brick_index} reappears at frame {frame_index} after being hidden."
                )
    return first_hidden


def encode(
    frames: Sequence[FrameState],
    bricks: Sequence[Brick],
    palette: Sequence[str],
    colors: AnimationColors | None = None,
    config: GameConfig | None = None,
) -> AnimationTimelines:
    """Derive per-entity timelines from the simulated frame list."""
    cfg = config or GameConfig()
    colors = colors or AnimationColors()
    frame_count = len(frames)
    total_duration = frame_count * cfg.seconds_per_frame

    first_hidden = first_hidden_frames(frames, len(bricks))

    ball_fill: Timeline | None = None
    if colors.ball_hit_overlay:
        ball_fill = Timeline(
            "fill",
            tuple(colors.hit if frame.hit_index is not None else colors.ball for frame in frames),
        )

    brick_animations: dict[int, BrickAnimation] = {}
    particles: list[ParticleAnimation] = []
    for brick, hit_frame in zip(bricks, first_hidden):
        if hit_frame is None:
            continue
        t_start = frame_fraction(hit_frame, frame_count)
        t_end = min(1.0, t_start + cfg.particle_duration / total_duration)
        brick_color = _bucket_color(palette, brick.color_bucket)

        brick_animations[brick.index] = BrickAnimation(
            brick=brick,
            hit_frame=hit_frame,
            hit_fraction=t_start,
            burst_end_fraction=t_end,
            timeline=_brick_timeline(cfg, palette, brick_color, t_start),
        )
        particles.extend(_particle_burst(cfg, brick, brick_color, t_start, t_end))

    return AnimationTimelines(
        ball_x=Timeline("cx", tuple(frame.ball_x for frame in frames)),
        ball_y=Timeline("cy", tuple(frame.ball_y for frame in frames)),
        ball_fill=ball_fill,
        paddle_x=Timeline("x", tuple(frame.paddle_x for frame in frames)),
        bricks=brick_animations,
        particles=tuple(particles),
        total_duration=total_duration,
        frame_count=frame_count,
    )


def _bucket_color(palette: Sequence[str], bucket: int) -> str:
    if 0 <= bucket < len(palette):
        return palette[bucket]
    return palette[0]


def _brick_timeline(cfg: GameConfig, palette: Sequence[str], color: str, t_start: float) -> Timeline:
    key_times = (0.0, t_start, t_start, 1.0)
    if cfg.brick_hide_mode == "fade":
        return Timeline("opacity", (1, 1, 0, 0), key_times)
    background = palette[0]
    return Timeline("fill", (color, color, background, background), key_times)


def _particle_burst(
    cfg: GameConfig,
    brick: Brick,
    color: str,
    t_start: float,
    t_end: float,
) -> list[ParticleAnimation]:
    center_x, center_y = brick.center(cfg.brick_size)
    motion_times = (0.0, t_start, t_end, 1.0)
    opacity = Timeline("opacity", (0, 0, 1, 0, 0), (0.0, t_start, t_start, t_end, 1.0))

    burst: list[ParticleAnimation] = []
    for fragment in range(cfg.particle_count):
        angle = 2.0 * math.pi * fragment / cfg.particle_count
        end_x = center_x + math.cos(angle) * cfg.particle_distance
        end_y = center_y + math.sin(angle) * cfg.particle_distance
        burst.append(
            ParticleAnimation(
                brick_index=brick.index,
                angle=angle,
                color=color,
                cx=Timeline("cx", (center_x, center_x, end_x, end_x), motion_times),
                cy=Timeline("cy", (center_y, center_y, end_y, end_y), motion_times),
                opacity=opacity,
            )
        )
    return burst
