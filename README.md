# vsesync

Checks and helpers for a PTP grand master synchronisation environment.
The package has no runtime dependencies.

## What it provides

### Environment validations

Each validation has an `id`, a `description`, an `order`, a `verify()`
method that raises when the check fails, and a `to_dict()` method giving
the checked data ready for JSON.

- `vsesync.device_checks`: `DeviceDetails(vendor_id, device_id)` (the card
  must be an Intel E810), `device_driver_check(driver_version)` and
  `device_firmware_check(firmware_version)`.
- `vsesync.gnss_checks`: `GNSSAntStatus(blocks)`, `GNSSDevices(paths)`,
  `GNSSModule(module)` (expects `ZED-F9T`), `GNSSNavStatus(status)`,
  `gnss_firmware_check`, `gnss_protocol_check` and `gpsd_version_check`.
- `vsesync.grand_master`: `grand_master_check(data)` takes the JSON text of
  a PTP config list (or the exception raised while fetching it) and checks
  that some profile sets `ts2phc.master 1`.
- `vsesync.platform_versions`: `cluster_version_check(items)` and
  `operator_version_check(items)` take already listed objects (or the fetch
  exception) and check the versions are at least `4.14.0-0`.
- `vsesync.versioncheck`: the shared `VersionCheck` and
  `VersionWithErrorCheck`, the `Validation` protocol, the `Ordering` enum,
  and `is_valid_semver` / `compare_semver`.

A failed check raises `vsesync.errors.InvalidEnvError`; any other exception
from `verify()` means the check could not be decided.

### Reporting

`vsesync.report.verify(checks, use_analyser_json, stream)` runs every check
as a `vsesync.result.ValidationResult` and reports:

- as text: prints `No issues found.` when all pass, or a note that some
  checks did not complete when only undecided ones remain. Undecided checks
  are logged as errors. If any check failed, the failures are logged and the
  process exits with exit code 1 (`ExitCode.INVALID_ENV`).
- as analyser JSON: one JSON line per result, sorted by `order`, written to
  `stream`; exits with code 1 if any check failed.

### Log de-duplication

- `vsesync.lines.process_line` splits `<RFC 3339 timestamp> <text>` lines
  into `ProcessedLine`s; `make_slice_from_lines` builds a `LineSlice`.
- `vsesync.dedup.dedup_ab(a, b)` drops from `a` the lines `b` repeats,
  repairing gaps where either side is missing lines;
  `dedup_line_slices` and `dedup_generation` merge many slices;
  `write_overlap` writes lines to a file.
- `vsesync.generations.Generations` stores slices by generation, with
  `should_flush()`, `flush()` and `flush_all()`; `GenerationDumper` writes
  each added slice to `generation-<gen>-<n>.log` in a background thread and
  removes the files on `stop()` unless asked to keep them.
  `GenerationalLockedTime` is a thread-safe time that counts its advances.

### Collection helpers

- `vsesync.unmarshal.unmarshal(result, target)` fills the dataclass fields
  declared with `fetcher_field(key)`, raising `TypeError` on a type mismatch.
- `vsesync.selector.collectors_to_run(selected, required, optional)`
  resolves a collector selection (`all` and `defaults` pick every optional
  one; unknown names are logged and ignored).
- `vsesync.utils`: `WaitGroupCount`, `parse_timestamp`, `remove_temp_files`
  and `exit_or_raise`.
- `vsesync.log_setup.setup_logging(level, stream)` sends the package's log
  output to a stream.

## What it does not do

There is no command-line program, and nothing here talks to a cluster or a
device: the checks work on data you have already fetched and pass in, and
no collectors are started or polled.

## Installing

```
pip install .
```

## Example

```python
import sys

from vsesync.device_checks import DeviceDetails, device_firmware_check
from vsesync.report import verify

checks = [
    DeviceDetails(vendor_id="0x8086", device_id="0x1593"),
    device_firmware_check("4.20 0x00000000 1.0.0"),
]
verify(checks, False, sys.stdout)
```

With every check passing this prints `No issues found.`.

## Running the tests

```
pip install .[test]
pytest
```