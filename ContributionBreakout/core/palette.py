"""Brick colour palettes and palette selection."""

from __future__ import annotations

from typing import Sequence

from configs.loader import ConfigValidationError

PALETTE_SIZE = 5

GITHUB_LIGHT: tuple[str, ...] = ("#ebedf0", "#fbc2eb", "#fa71cd", "#d83395", "#a61265")
GITHUB_DARK: tuple[str, ...] = ("#151B23", "#1a4a1a", "#2d7a2d", "#39b039", "#39ff14")

PRESETS: dict[str, tuple[str, ...]] = {
    "github_light": GITHUB_LIGHT,
    "github_dark": GITHUB_DARK,
}

DATA_PALETTE = "data"


def resolve_palette(
    choice: str | Sequence[str],
    data_palette: Sequence[str] | None = None,
) -> tuple[str, ...]:
    """Return the five bucket colours for ``choice``.

    ``"data"`` uses the palette carried by the contribution payload and falls
    back to the light preset when the payload has none.
    """
    if isinstance(choice, str):
        if choice == DATA_PALETTE:
            if data_palette is None:
                return GITHUB_LIGHT
            return _validated(data_palette, source="data palette")
        if choice in PRESETS:
            return PRESETS[choice]
        available = ", ".join([DATA_PALETTE, *sorted(PRESETS)])
        raise ConfigValidationError(f"Unknown palette '{choice}'. Available palettes: {available}")
    return _validated(choice, source="custom palette")


def _validated(colors: Sequence[str], source: str) -> tuple[str, ...]:
    palette = tuple(str(color) for color in colors)
    if len(palette) != PALETTE_SIZE:
        raise ConfigValidationError(
            f"{source} must have exactly {PALETTE_SIZE} colours, got {len(palette)}."
        )
    if any(not color for color in palette):
        raise ConfigValidationError(f"{source} contains an empty colour.")
    return palette
