"""Validations of the GNSS receiver, its firmware and the gpsd daemon."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar

from vsesync.errors import InvalidEnvError
from vsesync.versioncheck import TGM_ENV_MODEL_PATH, TGM_ENV_VER_PATH, TGM_SYNC_ENV_PATH, Ordering, VersionCheck

EXPECTED_ANT_STATUS = 2
ANTENNA_STATUS_KEY = "status"
GNSS_ANT_STATUS_ID = TGM_SYNC_ENV_PATH + "/gnss/antenna-connected/wpc/"
GNSS_ANT_STATUS_DESCRIPTION = "GNSS Module is connected to an antenna"

HAS_GNSS_DEVICES_ID = TGM_SYNC_ENV_PATH + "/gnss/device-detected/wpc/"
HAS_GNSS_DEVICES_DESCRIPTION = "Has GNSS Devices"

EXPECTED_MODULE_NAME = "ZED-F9T"
GNSS_MODULE_ID = TGM_ENV_MODEL_PATH + "/gnss/"
GNSS_MODULE_DESCRIPTION = "GNSS module is valid"

GPS_FIX_KEY = "gpsFix"
GNSS_STATUS_ID = TGM_SYNC_ENV_PATH + "/gnss/gpsfix-valid/wpc/"
GNSS_STATUS_DESCRIPTION = "GNSS Module receiving data"

GNSS_ID = TGM_ENV_VER_PATH + "/gnss-firmware/"
GNSS_DESCRIPTION = "GNSS Version is valid"
MIN_GNSS_VERSION = "2.20"

GNSS_PROTOCOL_ID = TGM_ENV_VER_PATH + "/gnss-protocol/"
GNSS_PROTOCOL_DESCRIPTION = "GNSS protocol version is valid"
MIN_PROTO_VERSION = "29.20"

GPSD_ID = TGM_ENV_VER_PATH + "/gpsd/"
GPSD_DESCRIPTION = "GPSD Version is valid"
MIN_GPSD_VERSION = "3.25"


@dataclass
class GNSSAntStatus:
    """Checks that at least one antenna block reports a connected antenna."""

    blocks: Sequence[Mapping[str, Any]] = field(default_factory=list)

    id: ClassVar[str] = GNSS_ANT_STATUS_ID
    description: ClassVar[str] = GNSS_ANT_STATUS_DESCRIPTION
    order: ClassVar[int] = Ordering.GNSS_CONNECTED_TO_ANTENNA

    def verify(self) -> None:
        if any(block.get(ANTENNA_STATUS_KEY) == EXPECTED_ANT_STATUS for block in self.blocks):
            return
        raise InvalidEnvError("no GNSS antenna connected")

    def to_dict(self) -> dict[str, Any]:
        return {"blocks": [dict(block) for block in self.blocks]}


@dataclass
class GNSSDevices:
    """Checks that GNSS devices were found."""

    paths: Sequence[str] = field(default_factory=list)

    id: ClassVar[str] = HAS_GNSS_DEVICES_ID
    description: ClassVar[str] = HAS_GNSS_DEVICES_DESCRIPTION
    order: ClassVar[int] = Ordering.HAS_GNSS_DEVICES

    def verify(self) -> None:
        if not self.paths:
            raise InvalidEnvError("no gnss devices found")

    def to_dict(self) -> dict[str, Any]:
        return {"paths": list(self.paths)}


@dataclass
class GNSSModule:
    """Checks that the GNSS module is the expected model."""

    module: str

    id: ClassVar[str] = GNSS_MODULE_ID
    description: ClassVar[str] = GNSS_MODULE_DESCRIPTION
    order: ClassVar[int] = Ordering.GNSS_MODULE

    def verify(self) -> None:
        if self.module != EXPECTED_MODULE_NAME:
            raise InvalidEnvError(f"reported gnss module is not {EXPECTED_MODULE_NAME}")

    def to_dict(self) -> dict[str, Any]:
        return {"module": self.module}


@dataclass
class GNSSNavStatus:
    """Checks that the GNSS module reports a fix, that is, it receives data."""

    status: Mapping[str, Any] = field(default_factory=dict)

    id: ClassVar[str] = GNSS_STATUS_ID
    description: ClassVar[str] = GNSS_STATUS_DESCRIPTION
    order: ClassVar[int] = Ordering.GNSS_RECEIVING_DATA

    def verify(self) -> None:
        if self.status.get(GPS_FIX_KEY, 0) <= 0:
            raise InvalidEnvError("GNSS module is not receiving data")

    def to_dict(self) -> dict[str, Any]:
        return {"status": dict(self.status)}


def gnss_firmware_check(firmware_version: str) -> VersionCheck:
    """Check of the GNSS firmware; the version is the second word of the string."""
    parts = firmware_version.split(" ")
    if len(parts) < 2:
        raise ValueError(f"unexpected GNSS firmware version format: {firmware_version!r}")
    return VersionCheck(
        id=GNSS_ID,
        version=firmware_version,
        check_version=parts[1],
        min_version=MIN_GNSS_VERSION,
        order=Ordering.GNSS_VERSION,
        description=GNSS_DESCRIPTION,
    )


def gnss_protocol_check(proto_version: str) -> VersionCheck:
    """Check of the GNSS protocol version."""
    return VersionCheck(
        id=GNSS_PROTOCOL_ID,
        version=proto_version,
        check_version=proto_version,
        min_version=MIN_PROTO_VERSION,
        order=Ordering.GNSS_PROTOCOL,
        description=GNSS_PROTOCOL_DESCRIPTION,
    )


def gpsd_version_check(gpsd_version: str) -> VersionCheck:
    """Check of the gpsd version; the first word, with ``~`` read as ``-``."""
    return VersionCheck(
        id=GPSD_ID,
        version=gpsd_version,
        check_version=gpsd_version.split(" ")[0].replace("~", "-"),
        min_version=MIN_GPSD_VERSION,
        order=Ordering.GPSD_VERSION,
        description=GPSD_DESCRIPTION,
    )