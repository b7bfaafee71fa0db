"""Tests for palette lookup and contribution payload parsing."""

from __future__ import annotations

import json

import pytest

from configs.loader import ConfigValidationError
from core.palette import GITHUB_DARK, GITHUB_LIGHT, resolve_palette
from data.contributions import ContributionDataError, load_contribution_grid, parse_contribution_payload

CUSTOM = ("#000000", "#111111", "#222222", "#333333", "#444444")


def test_resolve_named_presets_and_custom_palette() -> None:
    assert resolve_palette("github_light") == GITHUB_LIGHT
    assert resolve_palette("github_dark") == GITHUB_DARK
    assert resolve_palette(list(CUSTOM)) == CUSTOM


def test_data_palette_prefers_payload_colours() -> None:
    assert resolve_palette("data", CUSTOM) == CUSTOM
    assert resolve_palette("data", None) == GITHUB_LIGHT


def test_invalid_palettes_rejected() -> None:
    with pytest.raises(ConfigValidationError, match="Unknown palette"):
        resolve_palette("neon")
    with pytest.raises(ConfigValidationError, match="exactly 5"):
        resolve_palette(["#fff", "#000"])


def test_parse_simple_days_payload() -> None:
    grid = parse_contribution_payload(
        {
            "days": [
                [{"level": 1, "count": 3}, None, {"level": 0, "count": 0}],
                None,
                [{"level": 4, "count": 12}],
            ],
            "palette": list(CUSTOM),
        }
    )

    assert grid.column_count == 3
    assert grid.days[0][0].level == 1
    assert grid.days[0][0].count == 3
    assert grid.days[0][1] is None
    assert grid.days[1] == ()
    assert grid.default_palette == CUSTOM


def test_parse_graphql_calendar_response_collects_palette() -> None:
    levels = ["NONE", "FIRST_QUARTILE", "SECOND_QUARTILE", "THIRD_QUARTILE", "FOURTH_QUARTILE"]
    week = {
        "contributionDays": [
            {"contributionLevel": level, "contributionCount": index * 2, "color": CUSTOM[index]}
            for index, level in enumerate(levels)
        ]
    }
    payload = {
        "data": {
            "user": {
                "contributionsCollection": {"contributionCalendar": {"weeks": [week, week]}}
            }
        }
    }

    grid = parse_contribution_payload(payload)

    assert grid.column_count == 2
    assert [day.level for day in grid.days[0]] == [0, 1, 2, 3, 4]
    assert [day.count for day in grid.days[1]] == [0, 2, 4, 6, 8]
    assert grid.default_palette == CUSTOM


def test_graphql_response_without_all_levels_has_no_palette() -> None:
    payload = {
        "data": {
            "user": {
                "contributionsCollection": {
                    "contributionCalendar": {
                        "weeks": [{"contributionDays": [{"contributionLevel": "NONE", "contributionCount": 0, "color": "#eee"}]}]
                    }
                }
            }
        }
    }

    assert parse_contribution_payload(payload).default_palette is None


@pytest.mark.parametrize(
    "payload, message",
    [
        ([], "must be a mapping"),
        ({"weeks": []}, "needs a 'days' list"),
        ({"days": "nope"}, "must be a list"),
        ({"days": [[{"count": 1}]]}, "Invalid day"),
        ({"days": [[{"level": 9, "count": 1}]]}, "Invalid day"),
        ({"data": {"user": None}}, "missing the contribution calendar"),
    ],
)
def test_malformed_payloads_rejected(payload, message) -> None:
    with pytest.raises(ContributionDataError, match=message):
        parse_contribution_payload(payload)


def test_load_contribution_grid_from_file(tmp_path) -> None:
    path = tmp_path / "calendar.json"
    path.write_text(json.dumps({"days": [[{"level": 2, "count": 1}]]}), encoding="utf-8")

    grid = load_contribution_grid(path)

    assert grid.days[0][0].level == 2

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ContributionDataError, match="Failed to parse"):
        load_contribution_grid(broken)


def _calendar(weeks) -> dict:
    return {"data": {"user": {"contributionsCollection": {"contributionCalendar": {"weeks": weeks}}}}}


@pytest.mark.parametrize(
    "weeks, message",
    [
        ("nope", "'weeks' must be a list"),
        (["week"], "Week 0 must be a mapping"),
        ([{"contributionDays": 3}], "must be a list"),
        ([{"contributionDays": ["day"]}], r"Invalid day \(0, 0\)"),
        ([{"contributionDays": [{"contributionCount": "many"}]}], "Invalid day"),
        ([{"contributionDays": [{"contributionLevel": "NONE", "contributionCount": -2}]}], "count must be >= 0"),
        ([{"contributionDays": [{"contributionLevel": "FIFTH_QUARTILE"}]}], "Unknown contribution level"),
    ],
)
def test_malformed_calendar_weeks_rejected(weeks, message) -> None:
    with pytest.raises(ContributionDataError, match=message):
        parse_contribution_payload(_calendar(weeks))
