"""Unit tests for filter_line_range()."""

from mcp_git_blame.core.line_range import filter_line_range
from mcp_git_blame.core.models import AttributionLine


def _lines(*numbers: int) -> list[AttributionLine]:
    return [
        AttributionLine(line_number=n, revision_hash="a" * 40, content=f"line {n}")
        for n in numbers
    ]


class TestFilterLineRange:
    """Tests for inclusive line window filtering."""

    def test_no_bounds_returns_everything(self):
        lines = _lines(1, 2, 3)

        window = filter_line_range(lines)

        assert window.lines == lines
        assert window.effective_from == 1
        assert window.effective_to == 3
        assert window.total == 3
        assert window.requested == 3

    def test_bounds_are_inclusive(self):
        window = filter_line_range(_lines(1, 2, 3, 4, 5), 2, 4)

        assert [line.line_number for line in window.lines] == [2, 3, 4]
        assert window.requested == 3
        assert window.total == 5

    def test_only_lower_bound_defaults_upper_to_max_line(self):
        window = filter_line_range(_lines(1, 2, 3), line_from=2)

        assert window.effective_to == 3
        assert [line.line_number for line in window.lines] == [2, 3]

    def test_only_upper_bound_defaults_lower_to_one(self):
        window = filter_line_range(_lines(1, 2, 3), line_to=1)

        assert window.effective_from == 1
        assert [line.line_number for line in window.lines] == [1]

    def test_range_beyond_data_is_empty_not_error(self):
        window = filter_line_range(_lines(1, 2, 3), 10, 20)

        assert window.lines == []
        assert window.requested == 0
        assert window.total == 3
        assert (window.effective_from, window.effective_to) == (10, 20)

    def test_inverted_range_is_empty(self):
        window = filter_line_range(_lines(1, 2, 3), 3, 1)

        assert window.lines == []

    def test_empty_input_defaults_upper_to_zero(self):
        window = filter_line_range([])

        assert window.effective_from == 1
        assert window.effective_to == 0
        assert window.lines == []

    def test_input_order_is_preserved(self):
        lines = _lines(3, 1, 2)

        window = filter_line_range(lines, 1, 3)

        assert [line.line_number for line in window.lines] == [3, 1, 2]

    def test_as_line_range_serialises_from_and_to(self):
        window = filter_line_range(_lines(1, 2), 1, 2)

        assert window.as_line_range().to_dict() == {"from": 1, "to": 2}
