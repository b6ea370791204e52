"""Validation that the PTP operator is configured for a grand master clock."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union

from vsesync.errors import InvalidEnvError
from vsesync.versioncheck import TGM_SYNC_ENV_PATH, Ordering

CONFIGURED_FOR_GRAND_MASTER_ID = TGM_SYNC_ENV_PATH + "/ptp-operator/"
CONFIGURED_FOR_GRAND_MASTER_DESCRIPTION = "Configured for grand master"
GM_FLAG = "ts2phc.master 1"
TS2PHC_CONF_KEY = "ts2phcConf"


def _as_object(value: Any, what: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{what} is not an object")
    return value


def _as_list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{what} is not a list")
    return value


def _as_string(value: Any, what: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{what} is not a string")
    return value


def _profiles_of(document: Any) -> list[dict[str, str]]:
    profiles: list[dict[str, str]] = []
    for item in _as_list(_as_object(document, "ptpconfig list").get("items"), "items"):
        spec = _as_object(_as_object(item, "item").get("spec"), "spec")
        for profile in _as_list(spec.get("profile"), "profile"):
            conf = _as_string(_as_object(profile, "profile").get(TS2PHC_CONF_KEY), TS2PHC_CONF_KEY)
            profiles.append({TS2PHC_CONF_KEY: conf})
    return profiles


def parse_ptp_configs(data: Union[str, bytes]) -> list[dict[str, str]]:
    """Return the profiles of every item in a JSON list of PTP configs."""
    try:
        return _profiles_of(json.loads(data))
    except (ValueError, TypeError) as err:
        raise ValueError(f"failed to unmarshal ptpconfigs {err}") from err


@dataclass
class GMProfiles:
    """Checks that some PTP profile configures ts2phc as grand master."""

    profiles: list[dict[str, str]] = field(default_factory=list)
    error: Optional[BaseException] = None

    id: ClassVar[str] = CONFIGURED_FOR_GRAND_MASTER_ID
    description: ClassVar[str] = CONFIGURED_FOR_GRAND_MASTER_DESCRIPTION
    order: ClassVar[int] = Ordering.CONFIGURED_FOR_GRAND_MASTER

    def verify(self) -> None:
        if self.error is not None:
            raise self.error
        if any(GM_FLAG in profile.get(TS2PHC_CONF_KEY, "") for profile in self.profiles):
            return
        raise InvalidEnvError("no configuration for Grand Master clock")

    def to_dict(self) -> dict[str, Any]:
        return {
            "fetchError": str(self.error) if self.error is not None else None,
            "profiles": [dict(profile) for profile in self.profiles],
        }


def grand_master_check(data: Union[str, bytes, BaseException]) -> GMProfiles:
    """Build the grand master check from fetched PTP configs or the fetch failure."""
    if isinstance(data, BaseException):
        error = RuntimeError(f"failed to fetch ptpconfigs {data}")
        error.__cause__ = data
        return GMProfiles(error=error)
    try:
        return GMProfiles(profiles=parse_ptp_configs(data))
    except ValueError as err:
        return GMProfiles(error=err)