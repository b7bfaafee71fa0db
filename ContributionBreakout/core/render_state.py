"""Immutable frame contracts emitted by the breakout simulator."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class BrickStatus(str, enum.Enum):
    """Visibility of one brick within a frame."""

    VISIBLE = "visible"
    HIDDEN = "hidden"


@dataclass(frozen=True)
class FrameState:
    """One simulated tick's full visible state.

    ``brick_statuses`` is aligned with the mapper's brick order and
    ``hit_index`` names the brick destroyed on this tick, or on an unrecorded
    tick since the previous recorded frame, if any.
    """

    tick: int
    ball_x: float
    ball_y: float
    paddle_x: float
    brick_statuses: tuple[BrickStatus, ...]
    hit_index: int | None = None

    def is_visible(self, brick_index: int) -> bool:
        return self.brick_statuses[brick_index] is BrickStatus.VISIBLE


@dataclass(frozen=True)
class SimulationResult:
    """Ordered frames of one run plus how the run ended."""

    frames: tuple[FrameState, ...]
    ticks: int
    hit_frame_cap: bool = False
    hit_order: tuple[int, ...] = ()

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    @property
    def destruction_order(self) -> list[int]:
        """Brick indices in the order the ball destroyed them.

        Covers every simulated tick, including ticks that were not recorded.
        """
        return list(self.hit_order)
