from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Mapping, Sequence

from .errors import UnsupportedCountError
from .model import Datum, FormattedDatum, FormattedResult, Result

_DIGIT_GROUPS = re.compile(r"\B(?=(\d{3})+(?!\d))")


def _number_text(number: float) -> str:
    if isinstance(number, float):
        if math.isnan(number):
            return "NaN"
        if math.isinf(number):
            return "Infinity" if number > 0 else "-Infinity"
        if number.is_integer():
            return str(int(number))
    return str(number)


def format_integer(number: float) -> str:
    # Groups every digit run, so fractional digits are grouped too; callers
    # pass integral values.
    return _DIGIT_GROUPS.sub(",", _number_text(number))


def _format_view(view: Mapping[str, Datum]) -> dict[str, FormattedDatum]:
    return {
        key: FormattedDatum(value=format_integer(datum.value), fields=dict(datum.fields))
        for key, datum in view.items()
    }


def format_result(result: Result) -> FormattedResult:
    return FormattedResult(
        name=result.name,
        type=result.type,
        first_view=_format_view(result.first_view),
        repeat_view=_format_view(result.repeat_view),
    )


def count_word(count: int, words: Sequence[str]) -> str:
    if isinstance(count, bool) or not isinstance(count, int) or not 0 <= count < len(words):
        raise UnsupportedCountError(count, len(words) - 1)
    return words[count]


def split_location(location: str) -> tuple[str, str | None]:
    name, separator, user_agent = location.partition(":")
    return name, (user_agent if separator else None)


def format_time(value: datetime) -> str:
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{value.hour % 12 or 12}:{value:%M:%S} {meridiem}"


def format_date(value: date) -> str:
    return f"{value.month}/{value.day}/{value.year}"
