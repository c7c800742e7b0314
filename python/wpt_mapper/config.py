from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from .model import ChartDefinition, MetricPair, SingleMetric, SingleView, ViewPair

APPLICATION = "wpt-mapper"
VERSION = "0.1.0"

COUNT_WORDS = (
    "zero",
    "one",
    "two",
    "three",
    "four",
    "five",
    "six",
    "seven",
    "eight",
    "nine",
    "ten",
    "eleven",
    "twelve",
    "thirteen",
    "fourteen",
    "fifteen",
)

DEFAULT_CHARTS = (
    ChartDefinition(
        view=SingleView("first"),
        key=SingleMetric("speedIndex"),
        title="Speed index, first view",
        label="First-view speed index (lower is better)",
    ),
    ChartDefinition(
        view=SingleView("repeat"),
        key=SingleMetric("speedIndex"),
        title="Speed index, repeat view",
        label="Repeat-view speed index (lower is better)",
    ),
    ChartDefinition(
        view=ViewPair("repeat", "first"),
        key=SingleMetric("speedIndex"),
        derivative="percentage",
        title="Speed index, repeat-view improvement",
        label="Repeat-view speed index as a percentage of first-view (lower is better)",
    ),
    ChartDefinition(
        view=SingleView("first"),
        key=SingleMetric("firstByte"),
        title="First byte",
        label="Time to first byte (milliseconds)",
    ),
    ChartDefinition(
        view=SingleView("first"),
        key=MetricPair("startRender", "firstByte"),
        derivative="difference",
        title="Start render, difference from first byte",
        label="Time from first byte until start render (milliseconds)",
    ),
    ChartDefinition(
        view=SingleView("first"),
        key=MetricPair("load", "firstByte"),
        derivative="difference",
        title="Load, difference from first byte",
        label="Time from first byte until load event (milliseconds)",
    ),
)


@dataclass(frozen=True)
class Layout:
    chart_width: int = 832
    chart_margin: int = 140
    chart_padding: int = 29
    bar_height: int = 32
    bar_padding: int = 2
    label_offset: int = 16
    label_threshold: int = 40

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{item.name} must be an integer")
        if self.chart_width <= 0 or self.bar_height <= 0:
            raise ValueError("chart_width and bar_height must be > 0")
        if self.chart_margin < 0 or self.chart_padding < 0 or self.bar_padding < 0:
            raise ValueError("chart_margin, chart_padding and bar_padding must be >= 0")
        if self.chart_margin >= self.chart_width:
            raise ValueError("chart_margin must be < chart_width")

    @property
    def bar_step(self) -> int:
        return self.bar_height + self.bar_padding

    @property
    def plot_width(self) -> int:
        return self.chart_width - self.chart_margin


@dataclass(frozen=True)
class ReportConfig:
    layout: Layout = Layout()
    charts: tuple[ChartDefinition, ...] = DEFAULT_CHARTS
    count_words: tuple[str, ...] = COUNT_WORDS
    application: str = APPLICATION
    version: str = VERSION


DEFAULT_CONFIG = ReportConfig()


def load_config(path: Path | str) -> ReportConfig:
    source = Path(path)
    payload = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"{source}: config must be an object")
    return parse_config(payload, source=str(source))


def parse_config(payload: dict[str, Any], source: str = "<config>") -> ReportConfig:
    config = DEFAULT_CONFIG

    layout = payload.get("layout")
    if layout is not None:
        if not isinstance(layout, dict):
            raise ValueError(f"{source}: layout must be an object")
        known = {item.name for item in fields(Layout)}
        unknown = sorted(set(layout) - known)
        if unknown:
            raise ValueError(f"{source}: unknown layout fields: {', '.join(unknown)}")
        try:
            config = replace(config, layout=replace(config.layout, **layout))
        except ValueError as exc:
            raise ValueError(f"{source}: {exc}") from exc

    charts = payload.get("charts")
    if charts is not None:
        if not isinstance(charts, list) or not charts:
            raise ValueError(f"{source}: charts must be a non-empty array")
        config = replace(
            config,
            charts=tuple(
                parse_chart_definition(entry, source=f"{source}: charts[{idx}]")
                for idx, entry in enumerate(charts)
            ),
        )
    return config


def parse_chart_definition(entry: Any, source: str = "<chart>") -> ChartDefinition:
    if not isinstance(entry, dict):
        raise ValueError(f"{source}: chart must be an object")
    for name in ("view", "key", "title", "label"):
        if name not in entry:
            raise ValueError(f"{source}: missing required field '{name}'")
    title = entry["title"]
    label = entry["label"]
    if not isinstance(title, str) or not isinstance(label, str):
        raise ValueError(f"{source}: title and label must be strings")
    derivative = entry.get("derivative")
    if derivative is not None and not isinstance(derivative, str):
        raise ValueError(f"{source}: derivative must be a string")

    view = _pair_or_single(entry["view"], "view", source)
    key = _pair_or_single(entry["key"], "key", source)
    try:
        view_spec = ViewPair(*view) if isinstance(view, tuple) else SingleView(view)
    except ValueError as exc:
        raise ValueError(f"{source}: {exc}") from exc
    key_spec = MetricPair(*key) if isinstance(key, tuple) else SingleMetric(key)
    return ChartDefinition(
        view=view_spec,
        key=key_spec,
        title=title,
        label=label,
        derivative=derivative,
    )


def _pair_or_single(value: Any, name: str, source: str) -> str | tuple[str, str]:
    if isinstance(value, str):
        return value
    if isinstance(value, list) and len(value) == 2 and all(isinstance(v, str) for v in value):
        return (value[0], value[1])
    raise ValueError(f"{source}: {name} must be a string or a two-element array of strings")
