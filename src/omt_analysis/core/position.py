from omt_analysis.models import Position, Range


def compare_positions(first: Position, second: Position) -> int:
    """Return 1 if ``first`` is after ``second``, -1 if before and 0 if equal."""
    if first.line != second.line:
        return 1 if first.line > second.line else -1
    if first.character != second.character:
        return 1 if first.character > second.character else -1
    return 0


def position_in_range(position: Position, range_: Range) -> bool:
    """Inclusive on both ends."""
    return compare_positions(range_.start, position) <= 0 and compare_positions(position, range_.end) <= 0
