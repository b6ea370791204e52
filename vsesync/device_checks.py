"""Validations of the network card: model, driver and firmware."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from vsesync.errors import InvalidEnvError
from vsesync.versioncheck import (
    TGM_ENV_MODEL_PATH,
    TGM_ENV_VER_PATH,
    Ordering,
    VersionCheck,
    VersionWithErrorCheck,
    compare_semver,
    is_valid_semver,
)

DEVICE_DETAILS_ID = TGM_ENV_MODEL_PATH + "/nic/"
DEVICE_DETAILS_DESCRIPTION = "Card is valid NIC"

DEVICE_DRIVER_VERSION_ID = TGM_ENV_VER_PATH + "/ice-driver/"
DEVICE_DRIVER_VERSION_DESCRIPTION = "Card driver is valid"

DEVICE_FIRMWARE_ID = TGM_ENV_VER_PATH + "/nic-firmware/"
DEVICE_FIRMWARE_DESCRIPTION = "Card firmware is valid"

VENDOR_INTEL = "0x8086"
E810_WESTPORT_CHANNEL = "0x1593"
E810_LOGAN_BEACH = "0x1592"

MIN_DRIVER_VERSION = "1.11.0"
MIN_IN_TREE_DRIVER_VERSION = "5.14.0-0"
OUT_OF_TREE_ICE_DRIVER_SEGMENTS = 3
MIN_FIRMWARE_VERSION = "4.20"


@dataclass
class DeviceDetails:
    """Checks that the card is an E810 based NIC."""

    vendor_id: str
    device_id: str

    id: ClassVar[str] = DEVICE_DETAILS_ID
    description: ClassVar[str] = DEVICE_DETAILS_DESCRIPTION
    order: ClassVar[int] = Ordering.DEVICE_DETAILS

    def verify(self) -> None:
        if self.vendor_id != VENDOR_INTEL or self.device_id not in (
            E810_WESTPORT_CHANNEL,
            E810_LOGAN_BEACH,
        ):
            raise InvalidEnvError("NIC device is not based on E810")

    def to_dict(self) -> dict[str, Any]:
        return {"vendorId": self.vendor_id, "deviceId": self.device_id}


def device_driver_check(driver_version: str) -> VersionWithErrorCheck:
    """Check of the card driver version; out of tree drivers are flagged as errors."""
    check_version = driver_version[:-1] if driver_version.endswith(".") else driver_version
    ver = "v" + check_version.replace("_", "-")
    error: Exception | None = None
    if is_valid_semver(ver):
        if compare_semver(ver, "v" + MIN_IN_TREE_DRIVER_VERSION) < 0:
            error = ValueError(
                f"found device driver version {driver_version}. This is below minimum "
                f"version {MIN_IN_TREE_DRIVER_VERSION} so likely an out of tree driver"
            )
    elif driver_version.count(".") == OUT_OF_TREE_ICE_DRIVER_SEGMENTS:
        error = ValueError(
            f"unable to parse device driver version ({driver_version}), "
            "likely an out of tree driver"
        )
    return VersionWithErrorCheck(
        id=DEVICE_DRIVER_VERSION_ID,
        version=driver_version,
        check_version=check_version,
        min_version=MIN_DRIVER_VERSION,
        order=Ordering.DEVICE_DRIVER_VERSION,
        description=DEVICE_DRIVER_VERSION_DESCRIPTION,
        error=error,
    )


def device_firmware_check(firmware_version: str) -> VersionCheck:
    """Check of the card firmware; the version is the first word of the string."""
    return VersionCheck(
        id=DEVICE_FIRMWARE_ID,
        version=firmware_version,
        check_version=firmware_version.split(" ")[0],
        min_version=MIN_FIRMWARE_VERSION,
        order=Ordering.DEVICE_FIRMWARE,
        description=DEVICE_FIRMWARE_DESCRIPTION,
    )