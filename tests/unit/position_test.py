"""Tests for position ordering helpers."""

import pytest

from omt_analysis.core.position import compare_positions, position_in_range
from omt_analysis.models import Position, Range


@pytest.mark.parametrize(
    ("first", "second", "expected"),
    [
        (Position(line=1, character=10), Position(line=1, character=20), -1),
        (Position(line=1, character=10), Position(line=1, character=10), 0),
        (Position(line=1, character=10), Position(line=1, character=5), 1),
        (Position(line=0, character=5), Position(line=1, character=5), -1),
        (Position(line=1, character=5), Position(line=0, character=5), 1),
    ],
)
def test_compare_positions(first: Position, second: Position, expected: int) -> None:
    assert compare_positions(first, second) == expected


class TestPositionInRange:
    range_ = Range(start=Position(line=1, character=4), end=Position(line=3, character=2))

    def test_start_is_inside(self) -> None:
        assert position_in_range(Position(line=1, character=4), self.range_) is True

    def test_end_is_inside(self) -> None:
        assert position_in_range(Position(line=3, character=2), self.range_) is True

    def test_middle_line_any_character(self) -> None:
        assert position_in_range(Position(line=2, character=100), self.range_) is True

    def test_before_start(self) -> None:
        assert position_in_range(Position(line=1, character=3), self.range_) is False

    def test_after_end(self) -> None:
        assert position_in_range(Position(line=3, character=3), self.range_) is False
