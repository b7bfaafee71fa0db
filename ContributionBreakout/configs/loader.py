"""Configuration loading and validation for breakout animation runs."""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml


class ConfigValidationError(ValueError):
    """Raised when game geometry or render options fail validation."""


BRICK_HIDE_MODES: tuple[str, ...] = ("recolor", "fade")


@dataclass(frozen=True)
class GameConfig:
    """Immutable geometry, physics and timing constants for one run.

    Passed explicitly into the mapper, simulator and encoder so independent
    runs never share module-level state.
    """

    padding: int = 15
    paddle_width: int = 75
    paddle_height: int = 10
    paddle_radius: int = 5
    paddle_brick_gap: int = 100
    ball_radius: int = 8
    ball_speed: float = 10.0
    ball_start_offset: int = 30
    launch_angle_degrees: float = -45.0
    brick_size: int = 12
    brick_gap: int = 3
    brick_radius: int = 3
    grid_rows: int = 7
    seconds_per_frame: float = 1.0 / 30.0
    max_frames: int = 30000
    animate_step: int = 1
    particle_count: int = 8
    particle_radius: int = 2
    particle_distance: float = 25.0
    particle_duration: float = 1.0
    brick_hide_mode: str = "recolor"

    def __post_init__(self) -> None:
        _validate_game_config(self)

    @property
    def launch_angle(self) -> float:
        """Launch angle in radians."""
        return math.radians(self.launch_angle_degrees)

    def replace(self, **changes: Any) -> "GameConfig":
        """Return a validated copy with ``changes`` applied."""
        payload = self.to_dict()
        payload.update(changes)
        return ConfigLoader.from_mapping(payload)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RenderOptions:
    """Caller-facing options for one animation.

    ``palette`` is ``"data"``, a preset name, or an explicit five-colour list.
    """

    ghost_mode: bool = True
    palette: str | tuple[str, ...] = "data"
    paddle_color: str = "#1F6FEB"
    ball_color: str = "#1F6FEB"
    hit_color: str = "#ff0000"
    ball_hit_overlay: bool = True


_INT_FIELDS = {f.name for f in fields(GameConfig) if f.type in ("int", int)}
_FLOAT_FIELDS = {f.name for f in fields(GameConfig) if f.type in ("float", float)}
_STR_FIELDS = {f.name for f in fields(GameConfig) if f.type in ("str", str)}


def _validate_game_config(config: GameConfig) -> None:
    positive = (
        "paddle_width",
        "paddle_height",
        "ball_radius",
        "brick_size",
        "grid_rows",
        "max_frames",
        "animate_step",
    )
    for name in positive:
        if getattr(config, name) <= 0:
            raise ConfigValidationError(f"{name} must be > 0, got {getattr(config, name)}.")

    non_negative = (
        "padding",
        "paddle_radius",
        "paddle_brick_gap",
        "brick_gap",
        "brick_radius",
        "particle_count",
        "particle_radius",
        "particle_distance",
        "particle_duration",
    )
    for name in non_negative:
        if getattr(config, name) < 0:
            raise ConfigValidationError(f"{name} must be >= 0, got {getattr(config, name)}.")

    if not config.ball_speed > 0.0 or not math.isfinite(config.ball_speed):
        raise ConfigValidationError(f"ball_speed must be a finite value > 0, got {config.ball_speed}.")
    if not config.seconds_per_frame > 0.0:
        raise ConfigValidationError(
            f"seconds_per_frame must be > 0, got {config.seconds_per_frame}."
        )
    if config.brick_hide_mode not in BRICK_HIDE_MODES:
        raise ConfigValidationError(
            f"brick_hide_mode must be one of {list(BRICK_HIDE_MODES)}, got '{config.brick_hide_mode}'."
        )


class ConfigLoader:
    """Load and validate game configuration files (YAML or JSON)."""

    @staticmethod
    def load(path: str | Path) -> GameConfig:
        """Load a single game config from ``path``.

        Missing keys keep their defaults; unknown keys are rejected.
        """
        payload = _read_config_payload(path)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ConfigValidationError("Config file must contain a mapping object.")
        return ConfigLoader.from_mapping(payload)

    @staticmethod
    def from_mapping(payload: Mapping[str, Any]) -> GameConfig:
        """Coerce and validate a raw mapping into ``GameConfig``."""
        known = {f.name for f in fields(GameConfig)}
        extras = [key for key in payload if key not in known]
        if extras:
            raise ConfigValidationError(f"Unknown config field(s): {sorted(extras)}.")

        values: dict[str, Any] = {}
        for key, raw in payload.items():
            values[key] = _coerce_field(key, raw)
        return GameConfig(**values)


def build_render_options(
    ghost_mode: bool = True,
    palette: str | Sequence[str] = "data",
    **overrides: Any,
) -> RenderOptions:
    """Build ``RenderOptions`` normalizing list palettes into tuples."""
    normalized_palette: str | tuple[str, ...]
    if isinstance(palette, str):
        normalized_palette = palette
    else:
        normalized_palette = tuple(str(color) for color in palette)

    known = {f.name for f in fields(RenderOptions)}
    unknown = [key for key in overrides if key not in known]
    if unknown:
        raise ConfigValidationError(f"Unknown render option(s): {sorted(unknown)}.")
    return RenderOptions(ghost_mode=bool(ghost_mode), palette=normalized_palette, **overrides)


def _coerce_field(key: str, raw: Any) -> Any:
    if isinstance(raw, bool):
        raise ConfigValidationError(f"Field '{key}' expected a number or string, got bool.")
    if key in _INT_FIELDS:
        if isinstance(raw, float) and not raw.is_integer():
            raise ConfigValidationError(f"Field '{key}' expected int, got {raw}.")
        return _convert(key, raw, int)
    if key in _FLOAT_FIELDS:
        return _convert(key, raw, float)
    if key in _STR_FIELDS:
        return str(raw)
    return raw


def _convert(key: str, raw: Any, target: type[Any]) -> Any:
    try:
        return target(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigValidationError(
            f"Field '{key}' expected {target.__name__}, got {raw!r}."
        ) from exc


def _read_config_payload(path: str | Path) -> Any:
    """Read raw config payload from JSON or YAML file."""
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigValidationError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()
    content = config_path.read_text(encoding="utf-8")

    try:
        if suffix == ".json":
            return json.loads(content)
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigValidationError(f"Failed to parse config '{config_path}': {exc}") from exc

    raise ConfigValidationError(f"Unsupported config extension: {suffix}")
