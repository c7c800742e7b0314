from __future__ import annotations

import json
import math
from datetime import datetime
from pathlib import Path
from typing import Any

from .model import Datum, Result, ResultSet, RunTimes


def load_result_set(path: Path | str) -> ResultSet:
    source = Path(path)
    payload = json.loads(source.read_text(encoding="utf-8"))
    return parse_result_set(payload, source=str(source))


def parse_result_set(payload: Any, source: str = "<results>") -> ResultSet:
    if not isinstance(payload, dict):
        raise ValueError(f"{source}: results document must be an object")
    times = payload.get("times")
    if not isinstance(times, dict):
        raise ValueError(f"{source}: times must be an object")
    results = payload.get("results")
    if not isinstance(results, list):
        raise ValueError(f"{source}: results must be an array")

    return ResultSet(
        results=tuple(
            _parse_result(entry, f"{source}: results[{idx}]") for idx, entry in enumerate(results)
        ),
        times=RunTimes(
            begin=_parse_timestamp(times.get("begin"), f"{source}: times.begin"),
            end=_parse_timestamp(times.get("end"), f"{source}: times.end"),
        ),
    )


def _parse_timestamp(value: Any, source: str) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"{source} must be an ISO-8601 string")
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"{source} must be an ISO-8601 string") from exc


def _parse_result(entry: Any, source: str) -> Result:
    if not isinstance(entry, dict):
        raise ValueError(f"{source}: each result entry must be an object")
    name = entry.get("name")
    if not isinstance(name, str):
        raise ValueError(f"{source}: name must be a string")
    result_type = entry.get("type", "")
    if not isinstance(result_type, str):
        raise ValueError(f"{source}: type must be a string")
    return Result(
        name=name,
        type=result_type,
        first_view=_parse_view(entry.get("firstView"), f"{source}.firstView", required=True),
        repeat_view=_parse_view(entry.get("repeatView"), f"{source}.repeatView", required=False),
    )


def _parse_view(view: Any, source: str, *, required: bool) -> dict[str, Datum]:
    if view is None and not required:
        return {}
    if not isinstance(view, dict):
        raise ValueError(f"{source} must be an object")
    parsed: dict[str, Datum] = {}
    for key, datum in view.items():
        if not isinstance(datum, dict):
            raise ValueError(f"{source}.{key} must be an object")
        value = datum.get("value")
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise ValueError(f"{source}.{key}.value must be a finite number")
        parsed[key] = Datum(
            value=value,
            fields={name: item for name, item in datum.items() if name != "value"},
        )
    return parsed
