from __future__ import annotations

import math
from typing import Iterable

from .config import Layout
from .errors import ChartDefinitionError, UnknownDerivativeError
from .model import (
    DERIVATIVES,
    ChartDefinition,
    Datum,
    MetricPair,
    MetricSpec,
    Result,
    SingleMetric,
    SingleView,
    ViewPair,
    ViewSpec,
)


def divide(lhs: float, rhs: float) -> float:
    """IEEE-754 division: zero divisors give inf or nan instead of raising."""
    if rhs == 0:
        if lhs == 0 or math.isnan(lhs):
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)
    return lhs / rhs


def round_half_up(value: float) -> float:
    if not math.isfinite(value):
        return value
    return math.floor(value + 0.5)


def validate_definition(definition: ChartDefinition) -> None:
    _check_specs(definition.view, definition.key, definition.derivative, definition.title)
    if definition.derivative is not None and definition.derivative not in DERIVATIVES:
        raise UnknownDerivativeError(definition.derivative)


def _check_specs(view: ViewSpec, key: MetricSpec, derivative: str | None, title: str) -> None:
    if isinstance(view, ViewPair) and isinstance(key, MetricPair):
        raise ChartDefinitionError(title, "view and key cannot both be pairs")
    if derivative is None and (isinstance(view, ViewPair) or isinstance(key, MetricPair)):
        raise ChartDefinitionError(title, "view and key pairs require a derivative")


def _datum(result: Result, view: str, key: str) -> Datum:
    try:
        return result.view(view)[key]
    except KeyError:
        raise ValueError(f"result '{result.name}' has no {view}-view metric '{key}'") from None


def _operands(
    view: ViewSpec, key: MetricSpec, result: Result, title: str | None
) -> tuple[Datum, Datum]:
    if isinstance(view, ViewPair):
        if not isinstance(key, SingleMetric):
            raise ChartDefinitionError(title, "view and key cannot both be pairs")
        return _datum(result, view.lhs, key.key), _datum(result, view.rhs, key.key)
    if isinstance(key, MetricPair):
        return _datum(result, view.view, key.lhs), _datum(result, view.view, key.rhs)
    datum = _datum(result, view.view, key.key)
    return datum, datum


def get_value(
    view: ViewSpec,
    key: MetricSpec,
    derivative: str | None,
    result: Result,
    *,
    title: str | None = None,
) -> float:
    if derivative is None:
        if not isinstance(view, SingleView) or not isinstance(key, SingleMetric):
            raise ChartDefinitionError(title, "view and key pairs require a derivative")
        return _datum(result, view.view, key.key).value

    lhs, rhs = _operands(view, key, result, title)
    if derivative == "difference":
        return lhs.value - rhs.value
    if derivative == "percentage":
        return round_half_up(divide(lhs.value, rhs.value) * 100)
    raise UnknownDerivativeError(derivative)


def chart_value(definition: ChartDefinition, result: Result) -> float:
    return get_value(
        definition.view, definition.key, definition.derivative, result, title=definition.title
    )


def get_maximum_value(
    view: ViewSpec,
    key: MetricSpec,
    derivative: str | None,
    results: Iterable[Result],
) -> float:
    maximum: float = 0
    for result in results:
        current = get_value(view, key, derivative, result)
        if current > maximum:
            maximum = current
    return maximum


def scale_factor(maximum: float, layout: Layout) -> float:
    """Units (milliseconds or percentage points) per horizontal pixel."""
    return divide(maximum, layout.plot_width)
