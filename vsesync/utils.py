"""Small helpers: exiting on errors, a countable wait group, timestamps and temp files."""

from __future__ import annotations

import logging
import os
import re
import sys
import threading
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from vsesync.errors import ExitCode, exit_code_for

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")
_MAX_DURATION_NS = 2**63 - 1
_MIN_DURATION_NS = -(2**63)


def exit_or_raise(error: BaseException | None) -> None:
    """Exit with a matching exit code for known errors, re-raise any other."""
    if error is None:
        return
    code = exit_code_for(error)
    if code != ExitCode.NOT_HANDLED:
        logger.error("%s", error)
        sys.exit(int(code))
    raise error


class WaitGroupCount:
    """A wait group that also exposes how many members are outstanding."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._count = 0

    @property
    def count(self) -> int:
        with self._cond:
            return self._count

    def add(self, delta: int = 1) -> None:
        with self._cond:
            new_count = self._count + delta
            if new_count < 0:
                raise ValueError("negative wait group counter")
            self._count = new_count
            if new_count == 0:
                self._cond.notify_all()

    def done(self) -> None:
        self.add(-1)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the count reaches zero; False if the timeout ran out first."""
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout)


def parse_timestamp(timestamp: str) -> datetime:
    """Turn a number of seconds since the epoch (with optional fraction) into a UTC datetime."""
    if not _NUMBER.fullmatch(timestamp):
        raise ValueError(f"failed to parse timestamp as a duration: invalid duration {timestamp!r}")
    nanoseconds = int(Decimal(timestamp) * 1_000_000_000)
    if not _MIN_DURATION_NS <= nanoseconds <= _MAX_DURATION_NS:
        raise ValueError(f"failed to parse timestamp as a duration: invalid duration {timestamp!r}")
    return EPOCH + timedelta(microseconds=nanoseconds // 1000)


def remove_temp_files(directory: str, filenames: Iterable[str]) -> None:
    """Remove the given files, then the directory if it is left empty."""
    directory = os.path.normpath(directory)
    for name in filenames:
        path = name if name.startswith(directory) else os.path.join(directory, name)
        try:
            os.remove(path)
        except FileNotFoundError as err:
            logger.error("Failed to remove temp file %s: %s", path, err)
        except OSError:
            pass
    try:
        os.rmdir(directory)
    except OSError:
        pass