"""Map a contribution calendar onto brick obstacles and canvas geometry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from configs.loader import GameConfig

MAX_LEVEL = 4


@dataclass(frozen=True)
class ContributionDay:
    """One calendar cell: intensity bucket and raw activity count."""

    level: int
    count: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.level <= MAX_LEVEL:
            raise ValueError(f"level must be in [0, {MAX_LEVEL}], got {self.level}")
        if self.count < 0:
            raise ValueError(f"count must be >= 0, got {self.count}")


DayGrid = Sequence[Sequence[Optional[ContributionDay]]]


@dataclass(frozen=True)
class Brick:
    """Static rectangular collider for one non-empty day cell."""

    index: int
    x: float
    y: float
    color_bucket: int
    active: bool

    @property
    def color_class(self) -> str:
        return f"c{self.color_bucket}"

    def center(self, size: float) -> tuple[float, float]:
        return (self.x + size / 2.0, self.y + size / 2.0)


@dataclass(frozen=True)
class Layout:
    """Canvas dimensions and paddle line derived from the grid width."""

    column_count: int
    canvas_width: float
    canvas_height: float
    paddle_y: float
    bricks_height: float


def compute_layout(column_count: int, config: GameConfig) -> Layout:
    """Size the canvas so ``column_count`` brick columns fit inside the padding."""
    if column_count < 0:
        raise ValueError("column_count must be >= 0")
    pitch = config.brick_size + config.brick_gap
    canvas_width = column_count * pitch + config.padding * 2 - config.brick_gap
    bricks_height = config.grid_rows * pitch - config.brick_gap
    paddle_y = config.padding + bricks_height + config.paddle_brick_gap
    canvas_height = paddle_y + config.paddle_height + config.padding
    return Layout(
        column_count=column_count,
        canvas_width=canvas_width,
        canvas_height=canvas_height,
        paddle_y=paddle_y,
        bricks_height=bricks_height,
    )


def build_bricks(days: DayGrid, config: GameConfig) -> list[Brick]:
    """Create one brick per non-empty cell, column-major then row-major.

    Rows beyond ``config.grid_rows`` are ignored and short columns simply
    contribute fewer bricks. The resulting order is the collision tie-break
    order used by the simulator.
    """
    pitch = config.brick_size + config.brick_gap
    bricks: list[Brick] = []
    for column_index, column in enumerate(days):
        for row_index in range(config.grid_rows):
            if column is None or row_index >= len(column):
                continue
            day = column[row_index]
            if day is None:
                continue
            bricks.append(
                Brick(
                    index=len(bricks),
                    x=column_index * pitch + config.padding,
                    y=row_index * pitch + config.padding,
                    color_bucket=int(day.level),
                    active=day.count > 0,
                )
            )
    return bricks
