"""Pipeline entry point: contribution grid to animation timelines."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Sequence

from configs.loader import GameConfig, RenderOptions
from core.bricks import Brick, DayGrid, Layout, build_bricks, compute_layout
from core.palette import resolve_palette
from core.render_state import SimulationResult
from data.contributions import ContributionGrid
from engine.keyframes import AnimationColors, AnimationTimelines, encode
from engine.simulator import simulate

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnimationResult:
    """Everything a renderer needs to draw one looping animation."""

    layout: Layout
    bricks: tuple[Brick, ...]
    palette: tuple[str, ...]
    simulation: SimulationResult
    timelines: AnimationTimelines
    options: RenderOptions
    config: GameConfig

    @property
    def duration_seconds(self) -> float:
        return self.timelines.total_duration


def run(
    grid: ContributionGrid | DayGrid,
    config: GameConfig | None = None,
    options: RenderOptions | None = None,
    canvas: tuple[float, float] | None = None,
    paddle_y: float | None = None,
) -> AnimationResult:
    """Map, simulate and encode one animation.

    ``canvas`` and ``paddle_y`` override the geometry derived from the grid
    width. Identical inputs always produce identical results.
    """
    cfg = config or GameConfig()
    opts = options or RenderOptions()

    if isinstance(grid, ContributionGrid):
        days: DayGrid = grid.days
        data_palette: Sequence[str] | None = grid.default_palette
    else:
        days = grid
        data_palette = None

    layout = compute_layout(len(days), cfg)
    if canvas is not None:
        layout = replace(layout, canvas_width=canvas[0], canvas_height=canvas[1])
    if paddle_y is not None:
        layout = replace(layout, paddle_y=paddle_y)

    palette = resolve_palette(opts.palette, data_palette)
    bricks = tuple(build_bricks(days, cfg))
    LOGGER.info(
        "Built %d bricks from %d week columns (%d active)",
        len(bricks),
        layout.column_count,
        sum(1 for brick in bricks if brick.active),
    )

    simulation = simulate(
        bricks,
        layout.canvas_width,
        layout.canvas_height,
        layout.paddle_y,
        ghost_mode=opts.ghost_mode,
        config=cfg,
    )
    colors = AnimationColors(
        paddle=opts.paddle_color,
        ball=opts.ball_color,
        hit=opts.hit_color,
        ball_hit_overlay=opts.ball_hit_overlay,
    )
    timelines = encode(simulation.frames, bricks, palette, colors, cfg)

    return AnimationResult(
        layout=layout,
        bricks=bricks,
        palette=palette,
        simulation=simulation,
        timelines=timelines,
        options=opts,
        config=cfg,
    )
