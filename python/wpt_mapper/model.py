from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterator, Mapping, Union

VIEWS = ("first", "repeat")
DERIVATIVES = ("difference", "percentage")


@dataclass(frozen=True)
class Datum:
    value: float
    fields: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Result:
    name: str
    type: str
    first_view: Mapping[str, Datum]
    repeat_view: Mapping[str, Datum] = field(default_factory=dict)

    def view(self, name: str) -> Mapping[str, Datum]:
        if name == "first":
            return self.first_view
        if name == "repeat":
            return self.repeat_view
        raise ValueError(f"unknown view '{name}'; expected one of: first, repeat")


@dataclass(frozen=True)
class RunTimes:
    begin: datetime
    end: datetime


@dataclass(frozen=True)
class ResultSet:
    results: tuple[Result, ...]
    times: RunTimes

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[Result]:
        return iter(self.results)


@dataclass(frozen=True)
class RunOptions:
    location: str
    connection: str
    count: int


@dataclass(frozen=True)
class SingleView:
    view: str

    def __post_init__(self) -> None:
        if self.view not in VIEWS:
            raise ValueError(f"unknown view '{self.view}'; expected one of: first, repeat")


@dataclass(frozen=True)
class ViewPair:
    lhs: str
    rhs: str

    def __post_init__(self) -> None:
        for view in (self.lhs, self.rhs):
            if view not in VIEWS:
                raise ValueError(f"unknown view '{view}'; expected one of: first, repeat")


@dataclass(frozen=True)
class SingleMetric:
    key: str


@dataclass(frozen=True)
class MetricPair:
    lhs: str
    rhs: str


ViewSpec = Union[SingleView, ViewPair]
MetricSpec = Union[SingleMetric, MetricPair]


@dataclass(frozen=True)
class ChartDefinition:
    view: ViewSpec
    key: MetricSpec
    title: str
    label: str
    derivative: str | None = None


@dataclass(frozen=True)
class Bar:
    offset: int
    name: str
    type: str
    bar_width: float
    value: str
    text_orientation: str
    text_class: str
    text_anchor: str


@dataclass(frozen=True)
class Chart:
    title: str
    height: int
    y_axis_height: int
    bars: tuple[Bar, ...]
    label: str


@dataclass(frozen=True)
class FormattedDatum:
    value: str
    fields: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FormattedResult:
    name: str
    type: str
    first_view: Mapping[str, FormattedDatum]
    repeat_view: Mapping[str, FormattedDatum]


@dataclass(frozen=True)
class ReportTimes:
    begin: str
    end: str


@dataclass(frozen=True)
class XAxis:
    offset: int
    width: int
    label_position: int


@dataclass(frozen=True)
class ReportDocument:
    application: str
    version: str
    date: str
    count: str
    location: str
    connection: str
    user_agent: str | None
    times: ReportTimes
    results: tuple[FormattedResult, ...]
    charts: tuple[Chart, ...]
    chart_width: int
    chart_margin: int
    bar_height: int
    label_offset: int
    x_axis: XAxis
