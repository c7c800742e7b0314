from __future__ import annotations

import math

import pytest

from wpt_mapper.charts import bar_width, build_chart, build_charts, label_placement
from wpt_mapper.config import Layout, ReportConfig
from wpt_mapper.errors import ChartDefinitionError, UnknownDerivativeError
from wpt_mapper.model import (
    ChartDefinition,
    Datum,
    MetricPair,
    Result,
    SingleMetric,
    SingleView,
    ViewPair,
)

FIRST_SPEED_INDEX = ChartDefinition(
    view=SingleView("first"),
    key=SingleMetric("speedIndex"),
    title="Speed index, first view",
    label="First-view speed index",
)
FIRST_BYTE = ChartDefinition(
    view=SingleView("first"),
    key=SingleMetric("firstByte"),
    title="First byte",
    label="Time to first byte",
)
REPEAT_PERCENTAGE = ChartDefinition(
    view=ViewPair("repeat", "first"),
    key=SingleMetric("speedIndex"),
    derivative="percentage",
    title="Repeat-view improvement",
    label="Repeat as a percentage of first",
)


def _result(name: str, *, first: dict[str, float], repeat: dict[str, float] | None = None) -> Result:
    return Result(
        name=name,
        type="desktop",
        first_view={key: Datum(value) for key, value in first.items()},
        repeat_view={key: Datum(value) for key, value in (repeat or {}).items()},
    )


def test_bar_width_rounds_only_fractional_widths() -> None:
    assert bar_width(692, 1200 / 692) == 399.05
    assert bar_width(100, 0.5) == 200
    assert bar_width(1, 3) == 0.33


def test_label_placement_threshold_is_strict() -> None:
    layout = Layout()
    assert label_placement(40, layout) == ("-", "chart-label chart-bar-label", "end")
    assert label_placement(39.99, layout) == ("", "chart-label", "start")
    assert label_placement(0, layout) == ("", "chart-label", "start")


def test_build_chart_sorts_scales_and_offsets_bars() -> None:
    results = [
        _result("slow", first={"speedIndex": 3000}),
        _result("fast", first={"speedIndex": 1000}),
        _result("middle", first={"speedIndex": 2000}),
    ]

    chart = build_chart(FIRST_SPEED_INDEX, results, Layout())

    assert chart.title == "Speed index, first view"
    assert chart.label == "First-view speed index"
    assert chart.height == 3 * 34 + 29
    assert chart.y_axis_height == 3 * 34 + 2
    assert [bar.name for bar in chart.bars] == ["fast", "middle", "slow"]
    assert [bar.offset for bar in chart.bars] == [0, 34, 68]
    assert [bar.value for bar in chart.bars] == ["1,000", "2,000", "3,000"]
    assert chart.bars[0].bar_width == 230.67
    assert chart.bars[1].bar_width == 461.33
    assert chart.bars[2].bar_width == pytest.approx(692)
    assert all(bar.text_anchor == "end" for bar in chart.bars)
    assert all(bar.type == "desktop" for bar in chart.bars)


def test_short_bars_get_outside_labels() -> None:
    results = [
        _result("tiny", first={"speedIndex": 10}),
        _result("large", first={"speedIndex": 1000}),
    ]

    chart = build_chart(FIRST_SPEED_INDEX, results, Layout())

    tiny, large = chart.bars
    assert tiny.bar_width == 6.92
    assert (tiny.text_orientation, tiny.text_class, tiny.text_anchor) == ("", "chart-label", "start")
    assert (large.text_orientation, large.text_class, large.text_anchor) == (
        "-",
        "chart-label chart-bar-label",
        "end",
    )


def test_percentage_chart_values_carry_percent_suffix() -> None:
    results = [
        _result("a", first={"speedIndex": 1000}, repeat={"speedIndex": 500}),
        _result("b", first={"speedIndex": 1200}, repeat={"speedIndex": 300}),
    ]

    chart = build_chart(REPEAT_PERCENTAGE, results, Layout())

    assert [bar.name for bar in chart.bars] == ["b", "a"]
    assert [bar.value for bar in chart.bars] == ["25%", "50%"]


def test_build_charts_does_not_leak_order_between_charts() -> None:
    results = [
        _result("a", first={"speedIndex": 3000, "firstByte": 100}),
        _result("b", first={"speedIndex": 1000, "firstByte": 300}),
        _result("c", first={"speedIndex": 2000, "firstByte": 200}),
    ]
    config = ReportConfig(charts=(FIRST_SPEED_INDEX, FIRST_BYTE))

    speed_index, first_byte = build_charts(results, config)

    assert [bar.name for bar in speed_index.bars] == ["b", "c", "a"]
    assert [bar.name for bar in first_byte.bars] == ["a", "c", "b"]
    assert [result.name for result in results] == ["a", "b", "c"]


def test_zero_maximum_gives_non_finite_widths() -> None:
    results = [_result("a", first={"speedIndex": 0}), _result("b", first={"speedIndex": 0})]

    chart = build_chart(FIRST_SPEED_INDEX, results, Layout())

    for bar in chart.bars:
        assert math.isnan(bar.bar_width)
        assert bar.value == "0"
        assert bar.text_anchor == "end"


def test_percentage_division_by_zero_reaches_display_text() -> None:
    results = [
        _result("ok", first={"speedIndex": 1200}, repeat={"speedIndex": 300}),
        _result("empty", first={"speedIndex": 0}, repeat={"speedIndex": 0}),
        _result("cold", first={"speedIndex": 0}, repeat={"speedIndex": 300}),
    ]

    chart = build_chart(REPEAT_PERCENTAGE, results, Layout())

    by_name = {bar.name: bar for bar in chart.bars}
    assert by_name["ok"].value == "25%"
    assert by_name["empty"].value == "NaN%"
    assert by_name["cold"].value == "Infinity%"


def test_unknown_derivative_fails_chart_build() -> None:
    definition = ChartDefinition(
        view=SingleView("first"),
        key=MetricPair("load", "firstByte"),
        derivative="ratio",
        title="Load ratio",
        label="Load ratio",
    )
    with pytest.raises(UnknownDerivativeError) as excinfo:
        build_chart(definition, [], Layout())
    assert excinfo.value.name == "ratio"


def test_pair_view_and_pair_key_fails_chart_build() -> None:
    definition = ChartDefinition(
        view=ViewPair("repeat", "first"),
        key=MetricPair("load", "firstByte"),
        derivative="difference",
        title="Broken",
        label="Broken",
    )
    with pytest.raises(ChartDefinitionError) as excinfo:
        build_chart(definition, [], Layout())
    assert excinfo.value.title == "Broken"


def test_empty_result_set_builds_empty_chart() -> None:
    chart = build_chart(FIRST_SPEED_INDEX, [], Layout())
    assert chart.bars == ()
    assert chart.height == 29
    assert chart.y_axis_height == 2


def test_nan_values_sort_after_finite_bars() -> None:
    results = [
        _result("fifty", first={"speedIndex": 1000}, repeat={"speedIndex": 500}),
        _result("empty", first={"speedIndex": 0}, repeat={"speedIndex": 0}),
        _result("twentyfive", first={"speedIndex": 1200}, repeat={"speedIndex": 300}),
    ]

    chart = build_chart(REPEAT_PERCENTAGE, results, Layout())

    assert [(bar.name, bar.value) for bar in chart.bars] == [
        ("twentyfive", "25%"),
        ("fifty", "50%"),
        ("empty", "NaN%"),
    ]
    assert [bar.offset for bar in chart.bars] == [0, 34, 68]
