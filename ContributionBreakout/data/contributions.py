"""Parse saved contribution-calendar payloads into day grids."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from core.bricks import ContributionDay

QUARTILE_LEVELS: dict[str, int] = {
    "NONE": 0,
    "FIRST_QUARTILE": 1,
    "SECOND_QUARTILE": 2,
    "THIRD_QUARTILE": 3,
    "FOURTH_QUARTILE": 4,
}


class ContributionDataError(ValueError):
    """Raised when a contribution payload cannot be interpreted."""


@dataclass(frozen=True)
class ContributionGrid:
    """Week columns of optional days plus the palette the payload used."""

    days: tuple[tuple[Optional[ContributionDay], ...], ...]
    default_palette: tuple[str, ...] | None = None

    @property
    def column_count(self) -> int:
        return len(self.days)


def load_contribution_grid(path: str | Path) -> ContributionGrid:
    """Load a contribution grid from a JSON file."""
    grid_path = Path(path)
    if not grid_path.exists():
        raise ContributionDataError(f"Contribution file not found: {grid_path}")
    try:
        payload = json.loads(grid_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ContributionDataError(f"Failed to parse contribution file '{grid_path}': {exc}") from exc
    return parse_contribution_payload(payload)


def parse_contribution_payload(payload: Any) -> ContributionGrid:
    """Accept either the plain ``days`` form or a saved GraphQL calendar response."""
    if not isinstance(payload, Mapping):
        raise ContributionDataError("Contribution payload must be a mapping.")
    if "days" in payload:
        return _parse_days_payload(payload)
    if "data" in payload:
        return _parse_calendar_response(payload)
    raise ContributionDataError("Contribution payload needs a 'days' list or a GraphQL 'data' object.")


def _parse_days_payload(payload: Mapping[str, Any]) -> ContributionGrid:
    columns = payload["days"]
    if not isinstance(columns, list):
        raise ContributionDataError("'days' must be a list of week columns.")

    days: list[tuple[Optional[ContributionDay], ...]] = []
    for column_index, column in enumerate(columns):
        if column is None:
            days.append(())
            continue
        if not isinstance(column, list):
            raise ContributionDataError(f"Week column {column_index} must be a list.")
        days.append(tuple(_parse_day(cell, column_index, row) for row, cell in enumerate(column)))

    palette = payload.get("palette")
    if palette is not None:
        if not isinstance(palette, list) or not all(isinstance(color, str) for color in palette):
            raise ContributionDataError("'palette' must be a list of colour strings.")
        palette = tuple(palette)
    return ContributionGrid(days=tuple(days), default_palette=palette)


def _parse_day(cell: Any, column: int, row: int) -> Optional[ContributionDay]:
    if cell is None:
        return None
    if not isinstance(cell, Mapping):
        raise ContributionDataError(f"Day ({column}, {row}) must be a mapping or null.")
    try:
        return ContributionDay(level=int(cell["level"]), count=int(cell.get("count", 0)))
    except (KeyError, TypeError, ValueError) as exc:
        raise ContributionDataError(f"Invalid day ({column}, {row}): {exc}") from exc


def _parse_calendar_response(payload: Mapping[str, Any]) -> ContributionGrid:
    try:
        weeks = payload["data"]["user"]["contributionsCollection"]["contributionCalendar"]["weeks"]
    except (KeyError, TypeError) as exc:
        raise ContributionDataError(f"GraphQL payload is missing the contribution calendar: {exc}") from exc

    palette: dict[int, str] = {}
    days: list[tuple[Optional[ContributionDay], ...]] = []
    if not isinstance(weeks, list):
        raise ContributionDataError("GraphQL 'weeks' must be a list.")
    for week_index, week in enumerate(weeks):
        try:
            week_days = week.get("contributionDays", [])
        except AttributeError as exc:
            raise ContributionDataError(f"Week {week_index} must be a mapping.") from exc
        if not isinstance(week_days, list):
            raise ContributionDataError(f"Week {week_index} 'contributionDays' must be a list.")
        column: list[Optional[ContributionDay]] = []
        for row, day in enumerate(week_days):
            try:
                level_name = str(day.get("contributionLevel", "NONE"))
                count = int(day.get("contributionCount", 0))
                color = day.get("color")
            except (AttributeError, TypeError, ValueError) as exc:
                raise ContributionDataError(f"Invalid day ({week_index}, {row}): {exc}") from exc
            if level_name not in QUARTILE_LEVELS:
                raise ContributionDataError(
                    f"Unknown contribution level '{level_name}' at ({week_index}, {row})."
                )
            level = QUARTILE_LEVELS[level_name]
            try:
                column.append(ContributionDay(level=level, count=count))
            except ValueError as exc:
                raise ContributionDataError(f"Invalid day ({week_index}, {row}): {exc}") from exc
            if color:
                palette[level] = str(color)
        days.append(tuple(column))

    default_palette = None
    if len(palette) == len(QUARTILE_LEVELS):
        default_palette = tuple(palette[level] for level in sorted(palette))
    return ContributionGrid(days=tuple(days), default_palette=default_palette)
