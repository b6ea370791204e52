"""Running validations and reporting their results."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterable, Sequence
from typing import Optional, TextIO

from vsesync.errors import ExitCode, make_composite_error, make_composite_invalid_env_error
from vsesync.result import ResultType, ValidationResult
from vsesync.utils import exit_or_raise
from vsesync.versioncheck import Validation

logger = logging.getLogger(__name__)

UNKNOWN_MSG_PREFIX = (
    "The following error occurred when trying to gather environment data "
    "for the following validations"
)
UNKNOWN_ONLY_MESSAGE = (
    "Some checks did not complete, it is likely something is not correct in the environment"
)
NO_ISSUES_MESSAGE = "No issues found."


def report_analyser_json(
    results: Sequence[ValidationResult], stream: Optional[TextIO] = None
) -> None:
    """Write each result as a JSON line in report order; exit if any failed."""
    out = stream if stream is not None else sys.stdout
    any_failed = False
    for res in sorted(results, key=lambda r: r.validation.order):
        if res.result_type is ResultType.FAILURE:
            any_failed = True
        for entry in res.analyser_format():
            try:
                out.write(json.dumps(entry, default=str) + "\n")
            except (TypeError, ValueError, OSError) as err:
                logger.error("callback failed during validation %s", err)
    if any_failed:
        sys.exit(int(ExitCode.INVALID_ENV))


def report(
    results: Sequence[ValidationResult],
    use_analyser_json: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Report failures and undecided checks; exit with INVALID_ENV on failures."""
    if use_analyser_json:
        report_analyser_json(results, stream)
        return
    out = stream if stream is not None else sys.stdout

    failures = [res for res in results if res.result_type is ResultType.FAILURE]
    unknown = [res for res in results if res.result_type is ResultType.UNKNOWN]

    if unknown:
        logger.error(
            "%s", make_composite_error(UNKNOWN_MSG_PREFIX, [res.prefixed_error() for res in unknown])
        )

    if failures:
        exit_or_raise(make_composite_invalid_env_error([res.prefixed_error() for res in failures]))
    elif unknown:
        print(UNKNOWN_ONLY_MESSAGE, file=out)
    else:
        print(NO_ISSUES_MESSAGE, file=out)


def verify(
    checks: Iterable[Validation],
    use_analyser_json: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Run every check and report the results."""
    report([ValidationResult(check) for check in checks], use_analyser_json, stream)