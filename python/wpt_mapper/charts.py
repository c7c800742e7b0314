from __future__ import annotations

import logging
import math
from typing import Sequence

from .config import DEFAULT_CONFIG, Layout, ReportConfig
from .formatting import format_integer
from .metrics import chart_value, divide, get_maximum_value, scale_factor, validate_definition
from .model import Bar, Chart, ChartDefinition, Result

logger = logging.getLogger(__name__)

LABEL_CLASS = "chart-label"
BAR_LABEL_CLASS = "chart-bar-label"


def bar_width(value: float, units_per_pixel: float) -> float:
    width = divide(value, units_per_pixel)
    if math.isfinite(width) and not float(width).is_integer():
        return round(width, 2)
    return width


def label_placement(width: float, layout: Layout) -> tuple[str, str, str]:
    """Return (orientation, class, anchor) for a bar's value label."""
    if width < layout.label_threshold:
        return "", LABEL_CLASS, "start"
    return "-", f"{LABEL_CLASS} {BAR_LABEL_CLASS}", "end"


def _bar(
    definition: ChartDefinition,
    layout: Layout,
    units_per_pixel: float,
    index: int,
    result: Result,
    value: float,
) -> Bar:
    width = bar_width(value, units_per_pixel)
    orientation, text_class, anchor = label_placement(width, layout)
    suffix = "%" if definition.derivative == "percentage" else ""
    return Bar(
        offset=index * layout.bar_step,
        name=result.name,
        type=result.type,
        bar_width=width,
        value=format_integer(value) + suffix,
        text_orientation=orientation,
        text_class=text_class,
        text_anchor=anchor,
    )


def build_chart(definition: ChartDefinition, results: Sequence[Result], layout: Layout) -> Chart:
    validate_definition(definition)

    # Sorting a keyed copy leaves the caller's sequence in its original order;
    # NaN values sort last.
    keyed = [(chart_value(definition, result), result) for result in results]
    keyed.sort(key=lambda item: (math.isnan(item[0]), item[0]))

    maximum = get_maximum_value(definition.view, definition.key, definition.derivative, results)
    units_per_pixel = scale_factor(maximum, layout)
    logger.debug(
        "chart %r: %d bars, maximum=%s, units_per_pixel=%s",
        definition.title,
        len(keyed),
        maximum,
        units_per_pixel,
    )

    count = len(keyed)
    return Chart(
        title=definition.title,
        height=count * layout.bar_step + layout.chart_padding,
        y_axis_height=count * layout.bar_step + layout.bar_padding,
        bars=tuple(
            _bar(definition, layout, units_per_pixel, index, result, value)
            for index, (value, result) in enumerate(keyed)
        ),
        label=definition.label,
    )


def build_charts(results: Sequence[Result], config: ReportConfig = DEFAULT_CONFIG) -> tuple[Chart, ...]:
    return tuple(build_chart(definition, results, config.layout) for definition in config.charts)
