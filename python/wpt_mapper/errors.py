from __future__ import annotations

from typing import Any


class ReportError(ValueError):
    pass


class UnknownDerivativeError(ReportError):
    def __init__(self, name: Any) -> None:
        self.name = name
        super().__init__(f"unrecognised derivative '{name}'; expected one of: difference, percentage")


class UnsupportedCountError(ReportError):
    def __init__(self, count: Any, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(f"unsupported count {count!r}; expected an integer between 0 and {limit}")


class ChartDefinitionError(ReportError):
    def __init__(self, title: str | None, reason: str) -> None:
        self.title = title
        self.reason = reason
        super().__init__(f"chart '{title}': {reason}" if title else reason)
