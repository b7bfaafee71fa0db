"""Plot utilities for simulated ball trajectories."""

from __future__ import annotations

from pathlib import Path

from main import AnimationResult


def plot_trajectory(result: AnimationResult, output_path: str | Path) -> Path:
    """Render the ball path, paddle track and brick hits to an image file.

    The y axis is inverted so the picture matches SVG coordinates.
    """
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    frames = result.simulation.frames
    layout = result.layout
    cfg = result.config

    ball_x = [frame.ball_x for frame in frames]
    ball_y = [frame.ball_y for frame in frames]
    paddle_center = [frame.paddle_x + cfg.paddle_width / 2.0 for frame in frames]
    hits = [frame for frame in frames if frame.hit_index is not None]

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(10, 7), gridspec_kw={"height_ratios": [3, 1]})
    ax1.plot(ball_x, ball_y, linewidth=0.5, label="ball")
    ax1.scatter(
        [frame.ball_x for frame in hits],
        [frame.ball_y for frame in hits],
        s=6,
        color="tab:red",
        label="brick hit",
    )
    ax1.axhline(layout.paddle_y, color="tab:gray", linestyle="--", linewidth=0.8, label="paddle line")
    ax1.set_xlim(0, layout.canvas_width)
    ax1.set_ylim(layout.canvas_height, 0)
    ax1.set_aspect("equal")
    ax1.legend(loc="lower right")

    ticks = [frame.tick for frame in frames]
    ax2.plot(ticks, paddle_center, color="tab:green", label="paddle centre")
    ax2.set_xlabel("tick")
    ax2.set_ylabel("x")
    ax2.legend()

    title = f"{len(hits)} bricks destroyed in {result.simulation.ticks} ticks"
    if result.simulation.hit_frame_cap:
        title += " (frame cap)"
    fig.suptitle(title)

    fig.tight_layout()
    fig.savefig(output)
    plt.close(fig)
    return output
