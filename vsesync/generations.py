"""Generations of log slices, flushed into deduplicated output as they age."""

from __future__ import annotations

import logging
import os
import queue
import threading
from dataclasses import dataclass
from datetime import datetime

from vsesync.dedup import (
    dedup_generation,
    dedup_line_slices,
    make_new_combined_slice,
    write_overlap,
)
from vsesync.lines import LineSlice, make_slice_from_lines
from vsesync.utils import remove_temp_files

logger = logging.getLogger(__name__)

KEEP_GENERATIONS = 5
DUMP_QUEUE_SIZE = 100
_UINT32 = 0xFFFFFFFF


class GenerationalLockedTime:
    """A thread-safe time that counts how many times it moved forward."""

    def __init__(self, initial_time: datetime) -> None:
        self._lock = threading.Lock()
        self._time = initial_time
        self._generation = 0

    @property
    def time(self) -> datetime:
        with self._lock:
            return self._time

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def update(self, update: datetime) -> None:
        """Move to ``update`` if it is later, starting a new generation."""
        with self._lock:
            if update > self._time:
                self._time = update
                self._generation = (self._generation + 1) & _UINT32


@dataclass
class _Dump:
    line_slice: LineSlice
    number_in_gen: int


_STOP = object()


class GenerationDumper:
    """Writes each added slice to its own file in a background thread."""

    def __init__(self, directory: str | os.PathLike[str], keep_logs: bool) -> None:
        self.directory = os.path.normpath(os.fspath(directory))
        self.keep_logs = keep_logs
        self._queue: queue.Queue[object] = queue.Queue(maxsize=DUMP_QUEUE_SIZE)
        self._filenames: list[str] = []
        self._thread: threading.Thread | None = None

    @property
    def filenames(self) -> list[str]:
        return list(self._filenames)

    def start(self) -> None:
        self._thread = threading.Thread(target=self._process, daemon=True)
        self._thread.start()

    def dump_lines(self, line_slice: LineSlice, number_in_gen: int) -> None:
        self._queue.put(_Dump(line_slice, number_in_gen))

    def _write_to_file(self, dump: _Dump) -> None:
        name = os.path.join(
            self.directory,
            f"generation-{dump.line_slice.generation}-{dump.number_in_gen}.log",
        )
        self._filenames.append(name)
        try:
            write_overlap(dump.line_slice.lines, name)
        except OSError as err:
            logger.error("failed to write generation dump file: %s", err)

    def _process(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            self._write_to_file(item)

    def stop(self) -> None:
        """Write out everything queued, then remove the files unless they are kept."""
        if self._thread is not None:
            self._queue.put(_STOP)
            logger.debug("waiting for generation dumping to complete")
            self._thread.join()
            self._thread = None
        if not self.keep_logs:
            logger.debug("removing generation dump files")
            remove_temp_files(self.directory, self._filenames)


class Generations:
    """Slices of log lines grouped by generation."""

    def __init__(self, dumper: GenerationDumper | None = None) -> None:
        self.store: dict[int, list[LineSlice]] = {}
        self.dumper = dumper
        self.latest = 0
        self.oldest = 0

    def add(self, line_slice: LineSlice) -> None:
        gen_slices = self.store.setdefault(line_slice.generation, [])
        number_in_gen = len(gen_slices)
        gen_slices.append(line_slice)
        if self.dumper is not None:
            self.dumper.dump_lines(line_slice, number_in_gen)
        if self.latest < line_slice.generation:
            self.latest = line_slice.generation
            logger.debug("Logs: latest updated %d, should flush %s", self.latest, self.should_flush())

    def _remove_older_than(self, keep_gen: int) -> None:
        for gen in [g for g in self.store if g < keep_gen]:
            del self.store[gen]
        self.oldest = keep_gen

    def should_flush(self) -> bool:
        return (
            (self.latest - self.oldest) & _UINT32 > KEEP_GENERATIONS
            and len(self.store) > KEEP_GENERATIONS
        )

    def flush(self) -> LineSlice:
        """Merge the oldest generations, keeping the newest slice of them in store."""
        last_gen = self.oldest + KEEP_GENERATIONS
        logger.debug("Flushing generations <= %d", last_gen)
        to_flush = [slices for gen, slices in self.store.items() if gen <= last_gen]
        result, last_slice = self._flush(to_flush)
        self._remove_older_than(last_slice.generation)
        self.store[last_slice.generation] = [last_slice]
        return result

    def flush_all(self) -> LineSlice:
        """Merge every stored generation into one slice."""
        to_flush = list(self.store.values())
        if not to_flush:
            return LineSlice()
        result, last_slice = self._flush(to_flush)
        return make_slice_from_lines(
            make_new_combined_slice(result.lines, last_slice.lines), last_slice.generation
        )

    @staticmethod
    def _flush(generations: list[list[LineSlice]]) -> tuple[LineSlice, LineSlice]:
        ordered = sorted(generations, key=lambda slices: slices[0].generation)
        return dedup_line_slices([dedup_generation(slices) for slices in ordered])