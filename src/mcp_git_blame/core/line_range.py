"""Restrict parsed blame records to an inclusive line window."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .models import AttributionLine, LineRange


@dataclass(frozen=True)
class LineWindow:
    """Result of applying a line window to blame records.

    Attributes:
        effective_from: Lower bound actually applied (1 when not requested)
        effective_to: Upper bound actually applied (highest line number when not
            requested, 0 for empty input)
        lines: Records inside the window, in input order
        total: Number of input records
    """

    effective_from: int
    effective_to: int
    lines: list[AttributionLine] = field(default_factory=list)
    total: int = 0

    @property
    def requested(self) -> int:
        return len(self.lines)

    def as_line_range(self) -> LineRange:
        return LineRange(start=self.effective_from, end=self.effective_to)


def filter_line_range(
    lines: Sequence[AttributionLine],
    line_from: int | None = None,
    line_to: int | None = None,
) -> LineWindow:
    """Keep records with ``line_from <= line_number <= line_to``.

    A window entirely outside the data yields an empty list, not an error.

    Args:
        lines: Parsed blame records
        line_from: Inclusive lower bound, defaults to 1
        line_to: Inclusive upper bound, defaults to the highest line number present

    Returns:
        LineWindow with the effective bounds and the matching records
    """
    effective_from = line_from if line_from is not None else 1
    if line_to is not None:
        effective_to = line_to
    else:
        effective_to = max((line.line_number for line in lines), default=0)

    selected = [
        line for line in lines if effective_from <= line.line_number <= effective_to
    ]

    return LineWindow(
        effective_from=effective_from,
        effective_to=effective_to,
        lines=selected,
        total=len(lines),
    )
