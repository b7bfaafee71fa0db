"""Assemble animation timelines into a self-playing SVG document."""

from __future__ import annotations

import math
import re
from pathlib import Path
from typing import Any, Iterable

from engine.keyframes import Timeline
from main import AnimationResult

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return _round_half_up(value)
    return str(value)


def _round_half_up(value: float) -> str:
    """Whole-pixel value with halves rounded away from zero."""
    magnitude = math.floor(abs(value) + 0.5)
    if value < 0 and magnitude:
        return f"-{magnitude}"
    return str(magnitude)


def _format_number(value: float) -> str:
    """Attribute number without a trailing ``.0`` for whole values."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def _format_key_times(key_times: Iterable[float]) -> str:
    return ";".join(f"{t:.4f}" for t in key_times)


def animate_element(timeline: Timeline, duration: float, exact: bool = False) -> str:
    """Render ``timeline`` as an indefinitely repeating ``<animate>``.

    ``exact`` keeps full precision for values (particle coordinates).
    """
    if exact:
        values = ";".join(_format_number(v) if isinstance(v, (int, float)) else str(v) for v in timeline.values)
    else:
        values = ";".join(_format_value(v) for v in timeline.values)
    key_times = ""
    if timeline.key_times is not None:
        key_times = f' keyTimes="{_format_key_times(timeline.key_times)}"'
    return (
        f'<animate attributeName="{timeline.attribute}" values="{values}"{key_times} '
        f'dur="{duration}s" repeatCount="indefinite"/>'
    )


def render_svg(result: AnimationResult) -> str:
    """Build the SVG markup for a computed animation."""
    cfg = result.config
    opts = result.options
    layout = result.layout
    timelines = result.timelines
    duration = timelines.total_duration
    palette = result.palette

    style = "<style>" + "".join(f".c{i}{{fill:{color}}}" for i, color in enumerate(palette)) + "</style>"
    brick_symbol = (
        f'<defs><symbol id="brick"><rect width="{cfg.brick_size}" height="{cfg.brick_size}" '
        f'rx="{cfg.brick_radius}"/></symbol></defs>'
    )

    brick_uses: list[str] = []
    for brick in result.bricks:
        position = f'x="{_format_number(brick.x)}" y="{_format_number(brick.y)}"'
        animation = timelines.bricks.get(brick.index)
        if animation is None:
            brick_uses.append(f'<use href="#brick" {position} class="{brick.color_class}"/>')
            continue
        fill = palette[brick.color_bucket]
        brick_uses.append(
            f'<use href="#brick" {position} fill="{fill}">'
            f"{animate_element(animation.timeline, duration)}</use>"
        )

    particles: list[str] = []
    for particle in timelines.particles:
        particles.append(
            f'<circle r="{cfg.particle_radius}" fill="{particle.color}" opacity="0">'
            f"{animate_element(particle.cx, duration, exact=True)}"
            f"{animate_element(particle.cy, duration, exact=True)}"
            f"{animate_element(particle.opacity, duration)}"
            "</circle>"
        )

    paddle_animation = animate_element(timelines.paddle_x, duration) if timelines.frame_count else ""
    paddle = (
        f'<g transform="translate(0,{_format_number(layout.paddle_y)})">'
        f'<rect width="{cfg.paddle_width}" height="{cfg.paddle_height}" rx="{cfg.paddle_radius}" '
        f'fill="{opts.paddle_color}">{paddle_animation}</rect></g>'
    )

    frames = result.simulation.frames
    start_x = frames[0].ball_x if frames else layout.canvas_width / 2.0
    start_y = frames[0].ball_y if frames else layout.canvas_height - cfg.ball_start_offset
    ball_animations = ""
    if timelines.frame_count:
        if timelines.ball_fill is not None:
            ball_animations += animate_element(timelines.ball_fill, duration)
        ball_animations += animate_element(timelines.ball_x, duration)
        ball_animations += animate_element(timelines.ball_y, duration)
    ball = (
        f'<circle r="{cfg.ball_radius}" cx="{_format_value(start_x)}" cy="{_format_value(start_y)}" '
        f'fill="{opts.ball_color}">{ball_animations}</circle>'
    )

    width = _format_number(layout.canvas_width)
    height = _format_number(layout.canvas_height)
    svg = (
        f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" xmlns="{SVG_NAMESPACE}">'
        f"{style}{brick_symbol}{''.join(brick_uses)}{''.join(particles)}{paddle}{ball}</svg>"
    )
    return minify_svg(svg)


def minify_svg(svg: str) -> str:
    """Collapse whitespace runs and inter-tag gaps."""
    svg = re.sub(r"\s{2,}", " ", svg)
    svg = re.sub(r">\s+<", "><", svg)
    return svg.replace("\n", "")


def write_svg(path: str | Path, svg: str) -> Path:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(svg, encoding="utf-8")
    return output
