"""Deterministic ball-and-paddle simulation over a fixed brick set."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Sequence

from configs.loader import ConfigValidationError, GameConfig
from core.bricks import Brick
from core.collision import circle_rect_collision, clamp
from core.render_state import BrickStatus, FrameState, SimulationResult

LOGGER = logging.getLogger(__name__)


class SimulatorExecutionError(RuntimeError):
    """Raised when the simulator is stepped past its frame cap."""


@dataclass
class Ball:
    """Mutable ball state; only the velocity signs ever change."""

    x: float
    y: float
    vx: float
    vy: float


@dataclass
class Paddle:
    """Paddle position; the paddle line is fixed so only x is tracked."""

    x: float


class BreakoutSimulator:
    """Advances one ball and a ball-tracking paddle against a brick list.

    Each run owns a private status list, so independent simulators can run in
    parallel over the same bricks. Ordering inside one tick:

      1) paddle follows the pre-move ball x,
      2) ball moves by its velocity,
      3) side/top walls reflect using the projected next position,
      4) paddle bounce (downward ball crossing the paddle line),
      5) first eligible brick hit in mapper order is destroyed,
      6) ball position is clamped into the playfield,
      7) a frame snapshot is taken.
    """

    def __init__(
        self,
        bricks: Sequence[Brick],
        canvas_width: float,
        canvas_height: float,
        paddle_y: float,
        ghost_mode: bool = True,
        config: GameConfig | None = None,
    ) -> None:
        self.config = config or GameConfig()
        _validate_geometry(canvas_width, canvas_height, paddle_y, self.config)

        self.bricks: tuple[Brick, ...] = tuple(bricks)
        self.canvas_width = float(canvas_width)
        self.canvas_height = float(canvas_height)
        self.paddle_y = float(paddle_y)
        self.ghost_mode = bool(ghost_mode)

        self.tick = 0
        self.ball = Ball(0.0, 0.0, 0.0, 0.0)
        self.paddle = Paddle(0.0)
        self.statuses: list[BrickStatus] = []
        self._remaining_targets = 0
        self._clearable = False
        self.reset()

    def reset(self) -> None:
        """Place ball and paddle at launch position and restore all bricks."""
        cfg = self.config
        self.tick = 0
        angle = cfg.launch_angle
        self.ball = Ball(
            x=self.canvas_width / 2.0,
            y=self.canvas_height - cfg.ball_start_offset,
            vx=cfg.ball_speed * math.cos(angle),
            vy=cfg.ball_speed * math.sin(angle),
        )
        self.paddle = Paddle(x=(self.canvas_width - cfg.paddle_width) / 2.0)
        self.statuses = [BrickStatus.VISIBLE for _ in self.bricks]
        self._remaining_targets = sum(1 for index in range(len(self.bricks)) if self._is_target(index))
        # With nothing to clear the ball bounces until the frame cap.
        self._clearable = self._remaining_targets > 0

    def _is_target(self, index: int) -> bool:
        if self.statuses[index] is not BrickStatus.VISIBLE:
            return False
        return not self.ghost_mode or self.bricks[index].active

    def is_cleared(self) -> bool:
        """True once every brick the ball can hit has been destroyed."""
        return self._clearable and self._remaining_targets == 0

    def frame_cap_reached(self) -> bool:
        return self.tick >= self.config.max_frames

    def is_finished(self) -> bool:
        return not self.bricks or self.is_cleared() or self.frame_cap_reached()

    def paddle_position_for(self, ball_x: float) -> float:
        """Pure tracking function: centre the paddle under ``ball_x`` inside the walls."""
        cfg = self.config
        return clamp(
            ball_x - cfg.paddle_width / 2.0,
            cfg.padding,
            self.canvas_width - cfg.padding - cfg.paddle_width,
        )

    def step(self) -> FrameState:
        """Advance the simulation by one tick and return its snapshot."""
        if self.frame_cap_reached():
            raise SimulatorExecutionError(
                f"Simulator already ran {self.tick} ticks (max_frames={self.config.max_frames})."
            )

        cfg = self.config
        ball = self.ball
        radius = cfg.ball_radius

        self.paddle.x = self.paddle_position_for(ball.x)

        ball.x += ball.vx
        ball.y += ball.vy

        if (
            ball.x + ball.vx > self.canvas_width - cfg.padding - radius
            or ball.x + ball.vx < cfg.padding + radius
        ):
            ball.vx = -ball.vx
        if ball.y + ball.vy < cfg.padding + radius:
            ball.vy = -ball.vy

        if (
            ball.vy > 0
            and ball.y + ball.vy + radius >= self.paddle_y
            and ball.y + radius <= self.paddle_y
        ):
            ball.vy = -abs(ball.vy)
            ball.y = self.paddle_y - radius

        hit_index = self._resolve_brick_hit()

        ball.x = clamp(ball.x, cfg.padding + radius, self.canvas_width - cfg.padding - radius)
        ball.y = clamp(ball.y, cfg.padding + radius, self.canvas_height - cfg.padding - radius)

        frame = FrameState(
            tick=self.tick,
            ball_x=ball.x,
            ball_y=ball.y,
            paddle_x=self.paddle.x,
            brick_statuses=tuple(self.statuses),
            hit_index=hit_index,
        )
        self.tick += 1
        return frame

    def _resolve_brick_hit(self) -> int | None:
        """Destroy the first eligible brick touching the ball, in brick order."""
        cfg = self.config
        ball = self.ball
        for index, brick in enumerate(self.bricks):
            if not self._is_target(index):
                continue
            if circle_rect_collision(
                ball.x,
                ball.y,
                cfg.ball_radius,
                brick.x,
                brick.y,
                cfg.brick_size,
                cfg.brick_size,
            ):
                ball.vy = -ball.vy
                self.statuses[index] = BrickStatus.HIDDEN
                self._remaining_targets -= 1
                return index
        return None

    def run(self) -> SimulationResult:
        """Run from the current state until cleared or the frame cap."""
        record_every = self.config.animate_step
        frames: list[FrameState] = []
        LOGGER.debug(
            "Simulating %d bricks on %.0fx%.0f canvas (ghost_mode=%s)",
            len(self.bricks),
            self.canvas_width,
            self.canvas_height,
            self.ghost_mode,
        )

        hit_order: list[int] = []
        pending_hit: int | None = None
        while not self.is_finished():
            frame = self.step()
            if frame.hit_index is not None:
                hit_order.append(frame.hit_index)
                if pending_hit is None:
                    pending_hit = frame.hit_index
            # The terminating tick is always kept so the last frame shows the final board.
            if frame.tick % record_every == 0 or self.is_finished():
                frames.append(replace(frame, hit_index=pending_hit))
                pending_hit = None

        hit_cap = bool(self.bricks) and not self.is_cleared()
        if hit_cap:
            LOGGER.warning(
                "Simulation truncated at frame cap (%d ticks, %d bricks still standing)",
                self.tick,
                self._remaining_targets,
            )
        else:
            destroyed = sum(1 for status in self.statuses if status is BrickStatus.HIDDEN)
            LOGGER.info("Simulation destroyed %d bricks in %d ticks", destroyed, self.tick)

        return SimulationResult(
            frames=tuple(frames),
            ticks=self.tick,
            hit_frame_cap=hit_cap,
            hit_order=tuple(hit_order),
        )


def simulate(
    bricks: Sequence[Brick],
    canvas_width: float,
    canvas_height: float,
    paddle_y: float,
    ghost_mode: bool = True,
    config: GameConfig | None = None,
) -> SimulationResult:
    """Run a fresh simulation and return its frames."""
    simulator = BreakoutSimulator(
        bricks=bricks,
        canvas_width=canvas_width,
        canvas_height=canvas_height,
        paddle_y=paddle_y,
        ghost_mode=ghost_mode,
        config=config,
    )
    return simulator.run()


def _validate_geometry(
    canvas_width: float,
    canvas_height: float,
    paddle_y: float,
    config: GameConfig,
) -> None:
    for name, value in (
        ("canvas_width", canvas_width),
        ("canvas_height", canvas_height),
        ("paddle_y", paddle_y),
    ):
        if not math.isfinite(float(value)):
            raise ConfigValidationError(f"{name} must be finite, got {value}.")
    if canvas_width <= 0:
        raise ConfigValidationError(f"canvas_width must be > 0, got {canvas_width}.")
    if canvas_height <= 0:
        raise ConfigValidationError(f"canvas_height must be > 0, got {canvas_height}.")
    if paddle_y <= 0:
        raise ConfigValidationError(f"paddle_y must be > 0, got {paddle_y}.")
    # The ball is clamped above the bottom padding, so a lower paddle line is unreachable.
    lowest_paddle_y = canvas_height - config.padding
    if paddle_y > lowest_paddle_y:
        raise ConfigValidationError(
            f"paddle_y must be <= canvas_height - padding ({lowest_paddle_y}), got {paddle_y}."
        )
    if paddle_y + config.paddle_height > canvas_height:
        raise ConfigValidationError(
            f"Paddle at y={paddle_y} with height {config.paddle_height} does not fit "
            f"a canvas of height {canvas_height}."
        )
