"""Timestamped log lines and time-ordered slices of them."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})"
)


@dataclass
class ProcessedLine:
    """A log line split into its leading timestamp and the rest of the text."""

    timestamp: datetime
    full: str
    content: str
    generation: int = 0


@dataclass
class LineSlice:
    """A run of lines together with the timestamps of its first and last line."""

    lines: list[ProcessedLine] = field(default_factory=list)
    generation: int = 0
    start: datetime = ZERO_TIME
    end: datetime = ZERO_TIME


def _parse_rfc3339(text: str) -> datetime:
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise ValueError(f"not an RFC 3339 timestamp: {text!r}")
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    if zone == "Z":
        tzinfo = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        if hours > 23 or minutes > 59:
            raise ValueError(f"bad time zone offset in {text!r}")
        tzinfo = timezone(sign * timedelta(hours=hours, minutes=minutes))
    microsecond = int(fraction[:6].ljust(6, "0")) if fraction else 0
    return datetime(
        int(year), int(month), int(day), int(hour), int(minute), int(second), microsecond, tzinfo
    )


def process_line(line: str) -> ProcessedLine:
    """Split a line of the form ``<RFC 3339 timestamp> <content>``."""
    parts = line.split(" ", 1)
    if len(parts) < 2:
        raise ValueError(f"failed to split line {line}")
    timestamp_part, content = parts
    try:
        timestamp = _parse_rfc3339(timestamp_part)
    except ValueError:
        raise ValueError(f"failed to process timestamp from line: '{line}'") from None
    return ProcessedLine(timestamp=timestamp, full=line.rstrip(), content=content.rstrip())


def make_slice_from_lines(lines: Sequence[ProcessedLine], generation: int) -> LineSlice:
    """Build a slice whose start and end come from the first and last line."""
    if not lines:
        return LineSlice(generation=generation)
    return LineSlice(
        lines=list(lines),
        generation=generation,
        start=lines[0].timestamp,
        end=lines[-1].timestamp,
    )