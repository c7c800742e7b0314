from __future__ import annotations

import logging
import math
from dataclasses import asdict
from datetime import date
from typing import Any, Callable

from .charts import build_charts
from .config import DEFAULT_CONFIG, ReportConfig
from .formatting import count_word, format_date, format_result, format_time, split_location
from .metrics import round_half_up
from .model import FormattedResult, ReportDocument, ReportTimes, ResultSet, RunOptions, XAxis
from .rendering import render_html

logger = logging.getLogger(__name__)

Renderer = Callable[[ReportDocument], str]


def assemble_report(
    result_set: ResultSet,
    options: RunOptions,
    *,
    generated_at: date,
    config: ReportConfig = DEFAULT_CONFIG,
) -> ReportDocument:
    layout = config.layout
    results = result_set.results
    location, user_agent = split_location(options.location)
    axis_width = layout.plot_width + 2

    document = ReportDocument(
        application=config.application,
        version=config.version,
        date=format_date(generated_at),
        count=count_word(options.count, config.count_words),
        location=location,
        connection=options.connection,
        user_agent=user_agent,
        times=ReportTimes(
            begin=format_time(result_set.times.begin),
            end=f"{format_time(result_set.times.end)} on {format_date(result_set.times.end)}",
        ),
        results=tuple(format_result(result) for result in results),
        charts=build_charts(results, config),
        chart_width=layout.chart_width,
        chart_margin=layout.chart_margin,
        bar_height=layout.bar_height,
        label_offset=layout.label_offset,
        x_axis=XAxis(
            offset=len(results) * layout.bar_step + 1,
            width=axis_width,
            label_position=round_half_up(axis_width / 2),
        ),
    )
    logger.debug("assembled report: %d results, %d charts", len(results), len(document.charts))
    return document


def map_report(
    result_set: ResultSet,
    options: RunOptions,
    *,
    generated_at: date,
    config: ReportConfig = DEFAULT_CONFIG,
    renderer: Renderer | None = None,
) -> str:
    chosen_renderer = renderer or render_html
    return chosen_renderer(assemble_report(result_set, options, generated_at=generated_at, config=config))


_RENAMES = {
    "user_agent": "userAgent",
    "chart_width": "chartWidth",
    "chart_margin": "chartMargin",
    "bar_height": "barHeight",
    "label_offset": "labelOffset",
    "x_axis": "xAxis",
    "label_position": "labelPosition",
    "y_axis_height": "yAxisHeight",
    "bar_width": "barWidth",
    "text_orientation": "textOrientation",
    "text_class": "textClass",
    "text_anchor": "textAnchor",
    "bars": "tests",
}


def _camel(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {
            _RENAMES.get(key, key) if isinstance(key, str) else key: _camel(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_camel(item) for item in value]
    return value


def _result_row(row: FormattedResult) -> dict[str, Any]:
    return {
        "name": row.name,
        "type": row.type,
        "firstView": {key: {**datum.fields, "value": datum.value} for key, datum in row.first_view.items()},
        "repeatView": {key: {**datum.fields, "value": datum.value} for key, datum in row.repeat_view.items()},
    }


def document_as_dict(document: ReportDocument) -> dict[str, Any]:
    payload = _camel(asdict(document))
    payload["results"] = [_result_row(row) for row in document.results]
    return payload
