"""Non-fatal range warnings collected alongside computations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator

__all__ = ["RangeWarning", "WarningLog", "emit_range_warning"]

LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RangeWarning:
    """A model evaluated outside its validated time window.

    Attributes
    ----------
    source:
        Dotted name of the routine that produced the warning.
    message:
        Human readable description.
    value:
        The offending argument, usually Julian centuries from J2000.
    """

    source: str
    message: str
    value: float


@dataclass
class WarningLog:
    """Collector passed explicitly through calls that may warn."""

    records: list[RangeWarning] = field(default_factory=list)

    def add(self, warning: RangeWarning) -> None:
        self.records.append(warning)

    def clear(self) -> None:
        self.records.clear()

    def __iter__(self) -> Iterator[RangeWarning]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def messages(self) -> list[str]:
        return [record.message for record in self.records]


def emit_range_warning(
    source: str, message: str, value: float, warnings: WarningLog | None = None
) -> RangeWarning:
    """Log a range warning and append it to ``warnings`` when supplied."""

    record = RangeWarning(source=source, message=message, value=float(value))
    LOG.warning(
        "range_warning: %s (%s=%.3f)",
        message,
        source,
        record.value,
        extra={"event": "range_warning", "source": source, "value": record.value},
    )
    if warnings is not None:
        warnings.add(record)
    return record
