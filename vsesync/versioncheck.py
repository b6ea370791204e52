"""The validation interface and the version checks shared by many validations."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable

from vsesync.errors import InvalidEnvError

TGM_TEST_ID_BASE = "tests"
TGM_ENV_MODEL_PATH = TGM_TEST_ID_BASE + "/environment/model"
TGM_ENV_VER_PATH = TGM_TEST_ID_BASE + "/environment/version"
TGM_SYNC_ENV_PATH = TGM_TEST_ID_BASE + "/sync/G.8272/environment/status"


class Ordering(enum.IntEnum):
    """Position of each validation in reports."""

    CLUSTER_VERSION = 0
    PTP_OPERATOR_VERSION = 1
    GPSD_VERSION = 2
    DEVICE_DETAILS = 3
    DEVICE_DRIVER_VERSION = 4
    DEVICE_FIRMWARE = 5
    GNSS_MODULE = 6
    GNSS_VERSION = 7
    GNSS_PROTOCOL = 8
    HAS_GNSS_DEVICES = 9
    GNSS_CONNECTED_TO_ANTENNA = 10
    GNSS_RECEIVING_DATA = 11
    CONFIGURED_FOR_GRAND_MASTER = 12


@runtime_checkable
class Validation(Protocol):
    """A single check of the environment.

    ``verify`` raises when the check fails; ``to_dict`` gives the data the
    check was made on, in a form ready for JSON.
    """

    id: str
    description: str
    order: int

    def verify(self) -> None:
        ...

    def to_dict(self) -> dict[str, Any]:
        ...


_NUM = r"0|[1-9][0-9]*"
_PRE_IDENT = r"(?:0|[1-9][0-9]*|[0-9]*[A-Za-z-][0-9A-Za-z-]*)"
_BUILD_IDENT = r"[0-9A-Za-z-]+"
_SEMVER = re.compile(
    rf"v({_NUM})"
    rf"(?:\.({_NUM})"
    rf"(?:\.({_NUM})"
    rf"(?:-({_PRE_IDENT}(?:\.{_PRE_IDENT})*))?"
    rf"(?:\+{_BUILD_IDENT}(?:\.{_BUILD_IDENT})*)?"
    r")?)?"
)


def _parse(version: str) -> Optional[tuple[tuple[int, int, int], tuple[str, ...]]]:
    match = _SEMVER.fullmatch(version)
    if match is None:
        return None
    major, minor, patch, pre = match.groups()
    numbers = (int(major), int(minor or 0), int(patch or 0))
    return numbers, tuple(pre.split(".")) if pre else ()


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def _compare_prerelease(x: tuple[str, ...], y: tuple[str, ...]) -> int:
    if x == y:
        return 0
    if not x:
        return 1
    if not y:
        return -1
    for a, b in zip(x, y):
        if a == b:
            continue
        a_num, b_num = a.isdigit(), b.isdigit()
        if a_num and b_num:
            return _cmp(int(a), int(b))
        if a_num:
            return -1
        if b_num:
            return 1
        return _cmp(a, b)
    return _cmp(len(x), len(y))


def is_valid_semver(version: str) -> bool:
    """Whether ``version`` is a semantic version with a leading ``v``.

    The shorthands ``vMAJOR`` and ``vMAJOR.MINOR`` are accepted.
    """
    return _parse(version) is not None


def compare_semver(a: str, b: str) -> int:
    """Compare two versions: -1, 0 or 1.

    An invalid version sorts before every valid one, and invalid versions
    are equal to each other. Build metadata is ignored.
    """
    pa, pb = _parse(a), _parse(b)
    if pa is None or pb is None:
        return _cmp(pa is not None, pb is not None)
    numbers = _cmp(pa[0], pb[0])
    if numbers:
        return numbers
    return _compare_prerelease(pa[1], pb[1])


@dataclass
class VersionCheck:
    """Checks that a version is at least a minimum version."""

    id: str
    version: str
    check_version: str
    min_version: str
    order: int
    description: str = ""

    def verify(self) -> None:
        ver = "v" + self.check_version.replace("_", "-")
        if not is_valid_semver(ver):
            raise ValueError(f"could not parse version {ver}")
        if compare_semver(ver, "v" + self.min_version) < 0:
            raise InvalidEnvError(
                f"unexpected version: {self.check_version} < {self.min_version}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {"version": self.version, "expected": self.min_version}


@dataclass
class VersionWithErrorCheck(VersionCheck):
    """A version check whose version may have failed to be fetched."""

    error: Optional[BaseException] = None

    def verify(self) -> None:
        if self.error is not None:
            raise self.error
        super().verify()

    def to_dict(self) -> dict[str, Any]:
        return {
            "fetchError": str(self.error) if self.error is not None else None,
            "version": self.version,
        }