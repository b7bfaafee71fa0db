"""Command-line entry points for rendering, dumping and plotting animations."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

# Allow `python cli/main.py ...` execution from IDEs by adding repo root to sys.path.
if __package__ in {None, ""}:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from configs.loader import ConfigLoader, GameConfig, build_render_options
from data.contributions import load_contribution_grid
from main import AnimationResult, run
from render.svg_writer import render_svg, write_svg
from streaming.state_serializer import serialize_frames
from visualization.plotting import plot_trajectory

LOGGER = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--grid", required=True, help="Contribution calendar JSON file.")
    parser.add_argument("--config", default=None, help="Game config YAML/JSON file.")
    parser.add_argument(
        "--palette",
        default="data",
        help="'data', 'github_light', 'github_dark' or five comma-separated colours.",
    )
    parser.add_argument("--no-ghost", action="store_true", help="Let inactive days block the ball.")


def _compute(args: argparse.Namespace) -> AnimationResult:
    config = ConfigLoader.load(args.config) if args.config else GameConfig()
    palette: str | list[str] = args.palette
    if "," in args.palette:
        palette = [color.strip() for color in args.palette.split(",")]
    options = build_render_options(ghost_mode=not args.no_ghost, palette=palette)
    grid = load_contribution_grid(args.grid)
    return run(grid, config=config, options=options)


def run_cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="breakout")
    parser.add_argument("--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    render_cmd = sub.add_parser("render")
    _add_common_arguments(render_cmd)
    render_cmd.add_argument("--out", default="artifacts/breakout.svg")

    frames_cmd = sub.add_parser("frames")
    _add_common_arguments(frames_cmd)
    frames_cmd.add_argument("--out", default="artifacts/frames.json")

    plot_cmd = sub.add_parser("plot")
    _add_common_arguments(plot_cmd)
    plot_cmd.add_argument("--out", default="artifacts/trajectory.png")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    result = _compute(args)
    if result.simulation.hit_frame_cap:
        LOGGER.warning("Animation was truncated at %d frames", result.simulation.frame_count)

    if args.command == "render":
        path = write_svg(args.out, render_svg(result))
        print(path)
        return 0

    if args.command == "frames":
        output = Path(args.out)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(serialize_frames(result.simulation))
        print(output)
        return 0

    if args.command == "plot":
        path = plot_trajectory(result, args.out)
        print(path)
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(run_cli())
