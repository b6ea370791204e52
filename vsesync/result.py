"""The outcome of running one validation."""

from __future__ import annotations

import enum
from typing import Any, Optional

from vsesync.errors import InvalidEnvError
from vsesync.versioncheck import Validation

ANALYSER_ID = "environment-check"


class ResultType(enum.Enum):
    """Whether a validation passed, failed, or could not be decided."""

    UNKNOWN = 0
    SUCCESS = 1
    FAILURE = 2


def is_invalid_env(error: Optional[BaseException]) -> bool:
    """Whether the error, or one it was caused by, is an InvalidEnvError."""
    seen: set[int] = set()
    while error is not None and id(error) not in seen:
        if isinstance(error, InvalidEnvError):
            return True
        seen.add(id(error))
        error = error.__cause__
    return False


class ValidationResult:
    """Runs a validation and records how it went."""

    def __init__(self, validation: Validation) -> None:
        self.validation = validation
        self.error: Optional[Exception] = None
        try:
            validation.verify()
        except Exception as err:  # any failure of a check is reported, not raised
            self.error = err
            self.result_type = ResultType.FAILURE if is_invalid_env(err) else ResultType.UNKNOWN
        else:
            self.result_type = ResultType.SUCCESS

    def analyser_format(self) -> list[dict[str, Any]]:
        """The result as entries for the analyser's JSON output."""
        result: Any
        if self.result_type is ResultType.SUCCESS:
            result, reason = True, ""
        elif self.result_type is ResultType.FAILURE:
            result, reason = False, str(self.error)
        else:
            result, reason = "error", str(self.error)
        return [
            {
                "id": ANALYSER_ID,
                "data": {
                    "id": self.validation.id,
                    "result": result,
                    "reason": reason,
                    "analysis": self.validation.to_dict(),
                },
            }
        ]

    def prefixed_error(self) -> Exception:
        """The error, prefixed with the validation's description."""
        error = Exception(f"{self.validation.description}: {self.error}")
        error.__cause__ = self.error
        return error