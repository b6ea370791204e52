"""Validations of the cluster version and the PTP operator version."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Union

from vsesync.versioncheck import TGM_ENV_VER_PATH, Ordering, VersionWithErrorCheck

CLUSTER_VERSION_ID = TGM_ENV_VER_PATH + "/RHOCP/"
# the trailing -0 lets pre-GA versions through
MIN_CLUSTER_VERSION = "4.14.0-0"

PTP_OPERATOR_VERSION_ID = TGM_ENV_VER_PATH + "/openshift/ptp-operator/"
PTP_OPERATOR_VERSION_DESCRIPTION = "PTP Operator Version is valid"
MIN_OPERATOR_VERSION = "4.14.0-0"
PTP_OPERATOR_DISPLAY_NAME = "PTP Operator"

Items = Iterable[Mapping[str, Any]]


def _object(value: Any) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError("not an object")
    return value


def _string(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError("not a string")
    return value


def version_from_cluster_items(items: Items) -> str:
    """Return the desired version from the status of the first readable item."""
    for item in items:
        try:
            desired = _object(_object(item.get("status")).get("desired"))
            return _string(desired.get("version"))
        except ValueError:
            continue
    raise LookupError("failed to find PTP Operator CSV")


def version_from_operator_items(items: Items) -> str:
    """Return the version of the PTP operator's cluster service version."""
    for item in items:
        try:
            spec = _object(item.get("spec"))
            display_name = _string(spec.get("displayName"))
            version = _string(spec.get("version"))
        except ValueError:
            continue
        if display_name == PTP_OPERATOR_DISPLAY_NAME:
            return version
    raise LookupError("failed to find PTP Operator CSV")


def _fetch_version(
    items: Union[Items, BaseException], find: Callable[[Items], str], what: str
) -> tuple[str, BaseException | None]:
    if isinstance(items, BaseException):
        error = RuntimeError(f"failed to fetch {what} {items}")
        error.__cause__ = items
        return "", error
    try:
        return find(items), None
    except LookupError as err:
        return "", err


def cluster_version_check(items: Union[Items, BaseException]) -> VersionWithErrorCheck:
    """Check the cluster version given the listed cluster version objects."""
    version, error = _fetch_version(items, version_from_cluster_items, "cluster version")
    return VersionWithErrorCheck(
        id=CLUSTER_VERSION_ID,
        version=version,
        check_version=version,
        min_version=MIN_CLUSTER_VERSION,
        order=Ordering.CLUSTER_VERSION,
        error=error,
    )


def operator_version_check(items: Union[Items, BaseException]) -> VersionWithErrorCheck:
    """Check the PTP operator version given the listed cluster service versions."""
    version, error = _fetch_version(items, version_from_operator_items, "operator version")
    return VersionWithErrorCheck(
        id=PTP_OPERATOR_VERSION_ID,
        version=version,
        check_version=version,
        min_version=MIN_OPERATOR_VERSION,
        order=Ordering.PTP_OPERATOR_VERSION,
        description=PTP_OPERATOR_VERSION_DESCRIPTION,
        error=error,
    )