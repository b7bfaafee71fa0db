"""Frame serialization utilities."""

from __future__ import annotations

import dataclasses
import enum
import json
from typing import Any

from core.render_state import SimulationResult


MAX_PAYLOAD_BYTES = 64 * 1024 * 1024


def _to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value


def serialize_frames(result: SimulationResult) -> bytes:
    """Serialize a simulation result into deterministic JSON bytes."""
    payload = _to_jsonable(result)
    data = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    if len(data) > MAX_PAYLOAD_BYTES:
        raise ValueError(
            f"Serialized frames exceed max size ({len(data)} bytes > {MAX_PAYLOAD_BYTES})."
        )
    return data
