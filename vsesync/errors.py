"""Exit codes and the error types that map onto them."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Iterator


class ExitCode(enum.IntEnum):
    """Process exit codes used by the command line tools."""

    SUCCESS = 0
    INVALID_ENV = 1
    MISSING_INPUT = 2
    NOT_HANDLED = 3


class _WrappingError(Exception):
    """An error that carries another error and takes over its message."""

    def __init__(self, error: BaseException | str) -> None:
        super().__init__(str(error))
        self.error = error
        if isinstance(error, BaseException):
            self.__cause__ = error


class InvalidEnvError(_WrappingError):
    """The environment being checked is not valid."""


class MissingInputError(_WrappingError):
    """Input required to run is missing."""


class RequirementsNotMetError(_WrappingError):
    """A collector cannot run because its requirements are not met."""


def _chain(error: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def exit_code_for(error: BaseException) -> ExitCode:
    """Return the exit code for an error, or NOT_HANDLED if none applies."""
    if any(isinstance(err, InvalidEnvError) for err in _chain(error)):
        return ExitCode.INVALID_ENV
    if any(isinstance(err, MissingInputError) for err in _chain(error)):
        return ExitCode.MISSING_INPUT
    return ExitCode.NOT_HANDLED


def make_composite_error(prefix: str, errors: Iterable[BaseException]) -> Exception:
    """Combine several errors into one, one tab-indented line per error."""
    body = "".join(f"\t{err}\n" for err in errors)
    if prefix:
        return Exception(f"{prefix}:\n{body}")
    return Exception(body)


def make_composite_invalid_env_error(errors: Iterable[BaseException]) -> InvalidEnvError:
    """Combine several errors into a single InvalidEnvError."""
    return InvalidEnvError(make_composite_error("The following issues where found", errors))