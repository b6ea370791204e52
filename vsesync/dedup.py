"""Removal of lines repeated between overlapping slices of a log."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from vsesync.lines import LineSlice, ProcessedLine, make_slice_from_lines

logger = logging.getLogger(__name__)

Lines = Sequence[ProcessedLine]


class _OverlapError(Exception):
    """The overlap between two runs of lines could not be reconciled."""

    def __init__(self, x: list[ProcessedLine], y: list[ProcessedLine]) -> None:
        super().__init__("failed to resolve overlap")
        self.x = x
        self.y = y


def _find_line_index(needle: ProcessedLine, lines: Lines) -> int:
    return next((i for i, line in enumerate(lines) if line.full == needle.full), -1)


def _find_first_issue_index(x: Lines, y: Lines) -> int:
    """Index of the first position where x and y hold different lines, or -1."""
    return next((i for i, (a, b) in enumerate(zip(x, y)) if a.full != b.full), -1)


def _find_next_matching(a: Lines, b: Lines) -> tuple[int, int]:
    """Offset of the first line of ``a`` present in ``b`` and its index in ``b``."""
    for offset, line in enumerate(a):
        index = _find_line_index(line, b)
        if index != -1:
            return offset, index
    return len(a), -1


def _tail(lines: Lines, start: int) -> list[ProcessedLine]:
    if start < 0:
        raise IndexError("slice bounds out of range")
    return list(lines[start:])


def _fix_lines(
    x: list[ProcessedLine], y: list[ProcessedLine], issue: int
) -> tuple[list[ProcessedLine], list[ProcessedLine], bool]:
    """Stitch the lines missing at ``issue`` from one side into the other."""
    if x[issue].full == y[issue].full:
        return x, y, False
    if _find_line_index(y[issue], x[issue:]) == -1:
        y_offset, x_index = _find_next_matching(y[issue:], x[issue:])
        new_x = [*x[:issue], *y[issue : issue + y_offset], *_tail(x, issue + x_index)]
        return new_x, y, True
    if _find_line_index(x[issue], y[issue:]) == -1:
        x_offset, y_index = _find_next_matching(x[issue:], y[issue:])
        new_y = [*y[:issue], *x[issue : issue + x_offset], *_tail(y, issue + y_index)]
        return x, new_y, True
    return x, y, False


def _process_overlap(
    x: list[ProcessedLine], y: list[ProcessedLine]
) -> tuple[list[ProcessedLine], list[ProcessedLine]]:
    issue = _find_first_issue_index(x, y)
    if issue == -1:
        return x, y
    while issue != -1:
        x, y, changed = _fix_lines(x, y, issue)
        issue = _find_first_issue_index(x, y)
        if not changed and issue != -1:
            raise _OverlapError(x, y)
    return dedup_ab(x, y)


def _handle_incomplete_overlap(
    a: list[ProcessedLine], b: list[ProcessedLine]
) -> tuple[list[ProcessedLine], list[ProcessedLine]]:
    try:
        return _process_overlap(a, b)
    except _OverlapError as err:
        issue = _find_first_issue_index(err.x, err.y)
        logger.warning(
            "Failed to fix issues gonna just split at the issue and retry this might lose some data"
        )
        return dedup_ab(err.x[:issue], err.y[issue:])


def dedup_ab(a: Lines, b: Lines) -> tuple[list[ProcessedLine], list[ProcessedLine]]:
    """Drop from ``a`` the lines that ``b`` also holds, returning both runs."""
    a, b = list(a), list(b)
    if not a or not b:
        return a, b
    first_of_b = _find_line_index(b[0], a)
    logger.debug("line index: %d", first_of_b)
    if first_of_b == -1:
        if _find_line_index(a[-1], b) == -1:
            logger.debug("didn't find last line of a; assuming no overlap")
            return a, b
        return _handle_incomplete_overlap(a, b)
    if _find_first_issue_index(a[first_of_b:], b) >= 0:
        return _handle_incomplete_overlap(a, b)
    return a[:first_of_b], b


def make_new_combined_slice(x: Lines, y: Lines) -> list[ProcessedLine]:
    """Concatenate two runs of lines."""
    return [*x, *y]


def dedup_line_slices(line_slices: Sequence[LineSlice]) -> tuple[LineSlice, LineSlice]:
    """Dedup slices ordered by time; return the earlier lines and the last slice."""
    if not line_slices:
        raise ValueError("no line slices to dedup")
    ordered = sorted(line_slices, key=lambda ls: (ls.start, ls.end))
    if len(ordered) == 1:
        return LineSlice(), ordered[0]

    last = ordered[-1]
    last_but_one = ordered[-2]
    deduped, last_lines = dedup_ab(last_but_one.lines, last.lines)

    result_lines = deduped
    reference = make_new_combined_slice(deduped, last_lines)
    for earlier in reversed(ordered[:-2]):
        a_lines, b_lines = dedup_ab(earlier.lines, reference)
        result_lines = make_new_combined_slice(a_lines, result_lines)
        reference = make_new_combined_slice(a_lines, b_lines)
    return (
        make_slice_from_lines(result_lines, last_but_one.generation),
        make_slice_from_lines(last_lines, last.generation),
    )


def dedup_generation(line_slices: Sequence[LineSlice]) -> LineSlice:
    """Merge the slices of one generation into a single slice without repeats."""
    first, second = dedup_line_slices(line_slices)
    return make_slice_from_lines(make_new_combined_slice(first.lines, second.lines), second.generation)


def write_overlap(lines: Lines, path: str) -> None:
    """Write the full text of each line to ``path``, one per line."""
    with open(path, "w", encoding="utf-8") as log_file:
        for line in lines:
            try:
                log_file.write(line.full + "\n")
            except OSError as err:
                logger.error("%s", err)