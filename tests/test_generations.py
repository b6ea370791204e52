from datetime import datetime, timedelta, timezone

import pytest

from vsesync.generations import GenerationDumper, GenerationalLockedTime, Generations
from vsesync.lines import LineSlice, make_slice_from_lines, process_line


@pytest.fixture
def lines():
    base = datetime(2023, 6, 1, tzinfo=timezone.utc)
    return [
        process_line(f"{(base + timedelta(seconds=i)).strftime('%Y-%m-%dT%H:%M:%SZ')} gpsd line {i}")
        for i in range(200)
    ]


def _generation_slice(lines, gen):
    return make_slice_from_lines(lines[gen * 10 : gen * 10 + 20], gen)


def test_locked_time_moves_forward_only():
    start = datetime(2023, 6, 1, tzinfo=timezone.utc)
    locked = GenerationalLockedTime(start)
    locked.update(start - timedelta(seconds=1))
    assert locked.time == start
    assert locked.generation == 0
    later = start + timedelta(seconds=1)
    locked.update(later)
    assert locked.time == later
    assert locked.generation == 1
    locked.update(later)
    assert locked.generation == 1


def test_should_flush_after_enough_generations(lines):
    gens = Generations()
    for gen in range(6):
        gens.add(_generation_slice(lines, gen))
    assert not gens.should_flush()
    gens.add(_generation_slice(lines, 6))
    assert gens.latest == 6
    assert gens.should_flush()


def test_flush_then_flush_all_reconstructs_all_lines(lines):
    gens = Generations()
    for gen in range(7):
        gens.add(_generation_slice(lines, gen))
    flushed = gens.flush()
    assert gens.oldest == 5
    assert sorted(gens.store) == [5, 6]
    assert not gens.should_flush()
    rest = gens.flush_all()
    assert flushed.lines + rest.lines == lines[:80]
    assert rest.generation == 6


def test_flush_all_on_empty_store():
    assert Generations().flush_all() == LineSlice()


def test_dumper_writes_each_slice(lines, tmp_path):
    dumper = GenerationDumper(tmp_path, keep_logs=True)
    dumper.start()
    gens = Generations(dumper)
    gens.add(make_slice_from_lines(lines[:5], 3))
    gens.add(make_slice_from_lines(lines[5:10], 3))
    dumper.stop()
    first = tmp_path / "generation-3-0.log"
    second = tmp_path / "generation-3-1.log"
    assert first.read_text(encoding="utf-8") == "".join(line.full + "\n" for line in lines[:5])
    assert second.read_text(encoding="utf-8") == "".join(line.full + "\n" for line in lines[5:10])
    assert len(dumper.filenames) == 2


def test_dumper_removes_files_unless_kept(lines, tmp_path):
    directory = tmp_path / "dumps"
    directory.mkdir()
    dumper = GenerationDumper(directory, keep_logs=False)
    dumper.start()
    dumper.dump_lines(make_slice_from_lines(lines[:5], 0), 0)
    dumper.stop()
    assert not directory.exists()