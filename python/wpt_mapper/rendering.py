from __future__ import annotations

import html
import math

from .model import Bar, Chart, FormattedResult, ReportDocument

LABEL_GAP = 4


def render_html(document: ReportDocument) -> str:
    summary = (
        f"{html.escape(document.count)} runs per page from {html.escape(document.location)}"
        f" over {html.escape(document.connection)}"
    )
    if document.user_agent:
        summary += f" using {html.escape(document.user_agent)}"
    charts = "".join(_chart_section(document, chart) for chart in document.charts)

    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <title>WebPageTest Results</title>
  <style>
    :root {{
      --bg: #f5f7fb;
      --surface: #ffffff;
      --ink: #1b2432;
      --muted: #5f6b7a;
      --accent: #145a8d;
    }}
    body {{ background: var(--bg); color: var(--ink); font-family: "Iowan Old Style", "Palatino Linotype", serif; margin: 0; padding: 24px; }}
    h1 {{ margin-top: 0; }}
    .meta {{ color: var(--muted); }}
    .card {{ background: var(--surface); border-radius: 12px; padding: 16px; margin-bottom: 16px; box-shadow: 0 4px 18px rgba(20, 90, 141, 0.08); }}
    table {{ border-collapse: collapse; width: 100%; }}
    th, td {{ padding: 4px 8px; text-align: right; border-bottom: 1px solid #e2e6ee; }}
    th:first-child, td:first-child {{ text-align: left; }}
    .chart-bar {{ fill: var(--accent); }}
    .chart-axis {{ stroke: var(--ink); stroke-width: 1; }}
    .chart-label {{ font-size: 13px; fill: var(--ink); dominant-baseline: middle; }}
    .chart-bar-label {{ fill: var(--surface); }}
    .chart-axis-label {{ font-size: 13px; fill: var(--muted); }}
  </style>
</head>
<body>
  <h1>WebPageTest Results</h1>
  <p class="meta">{summary}</p>
  <p class="meta">Tests ran from {html.escape(document.times.begin)} until {html.escape(document.times.end)}.</p>
  <section class="card">
    {_results_table(document.results)}
  </section>
  {charts}
  <p class="meta">Generated by {html.escape(document.application)} {html.escape(document.version)} on {html.escape(document.date)}.</p>
</body>
</html>
"""


def _results_table(results: tuple[FormattedResult, ...]) -> str:
    keys: list[str] = []
    for result in results:
        for key in result.first_view:
            if key not in keys:
                keys.append(key)

    header = "".join(f"<th>{html.escape(key)} (first / repeat)</th>" for key in keys)
    rows: list[str] = []
    for result in results:
        cells: list[str] = []
        for key in keys:
            first = result.first_view.get(key)
            repeat = result.repeat_view.get(key)
            cells.append(
                "<td>{first} / {repeat}</td>".format(
                    first=html.escape(first.value) if first else "-",
                    repeat=html.escape(repeat.value) if repeat else "-",
                )
            )
        rows.append(
            f"<tr><td>{html.escape(result.name)} <small>({html.escape(result.type)})</small></td>"
            f"{''.join(cells)}</tr>"
        )
    return f"<table><thead><tr><th>Test</th>{header}</tr></thead><tbody>{''.join(rows)}</tbody></table>"


def _chart_section(document: ReportDocument, chart: Chart) -> str:
    margin = document.chart_margin
    axis = document.x_axis
    bars = "".join(_bar_svg(document, bar) for bar in chart.bars)
    return (
        "<section class='card'>"
        f"<h2>{html.escape(chart.title)}</h2>"
        f"<svg width='{document.chart_width}' height='{chart.height}' role='img' aria-label='{html.escape(chart.label)}'>"
        f"{bars}"
        f"<line class='chart-axis' x1='{margin}' y1='0' x2='{margin}' y2='{chart.y_axis_height}' />"
        f"<line class='chart-axis' x1='{margin}' y1='{axis.offset}' x2='{margin + axis.width}' y2='{axis.offset}' />"
        f"<text class='chart-axis-label' x='{margin + axis.label_position}' y='{axis.offset + document.label_offset + LABEL_GAP}'"
        f" text-anchor='middle'>{html.escape(chart.label)}</text>"
        "</svg>"
        "</section>"
    )


def _bar_svg(document: ReportDocument, bar: Bar) -> str:
    margin = document.chart_margin
    width = max(bar.bar_width, 0) if math.isfinite(bar.bar_width) else 0
    direction = -1 if bar.text_orientation == "-" else 1
    label_x = margin + width + direction * LABEL_GAP
    label_y = bar.offset + document.label_offset
    return (
        f"<text class='chart-label' x='{margin - LABEL_GAP}' y='{label_y}' text-anchor='end'>"
        f"{html.escape(bar.name)}</text>"
        f"<rect class='chart-bar' x='{margin}' y='{bar.offset}' width='{_svg_number(width)}'"
        f" height='{document.bar_height}' />"
        f"<text class='{bar.text_class}' x='{_svg_number(label_x)}' y='{label_y}'"
        f" text-anchor='{bar.text_anchor}'>{html.escape(bar.value)}</text>"
    )


def _svg_number(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")
