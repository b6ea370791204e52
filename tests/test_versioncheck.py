import pytest

from vsesync.errors import InvalidEnvError
from vsesync.versioncheck import (
    Ordering,
    Validation,
    VersionCheck,
    VersionWithErrorCheck,
    compare_semver,
    is_valid_semver,
)


@pytest.mark.parametrize(
    "version",
    ["v1.11.0", "v4.20", "v1", "v4.14.0-0", "v5.14.0-284.el9", "v1.0.0+build.1", "v1.0.0-rc.1+b"],
)
def test_valid_versions(version):
    assert is_valid_semver(version) is True


@pytest.mark.parametrize(
    "version",
    ["1.0.0", "v01.0.0", "v4.20-rc", "v1.0.0-01", "v1.0.0-", "v1.0.0.0", "", "v", "v1.0.0+"],
)
def test_invalid_versions(version):
    assert is_valid_semver(version) is False


def test_shorthand_equals_full_form():
    assert compare_semver("v4.20", "v4.20.0") == 0
    assert compare_semver("v1", "v1.0.0") == 0


def test_prerelease_before_release():
    assert compare_semver("v4.14.0-0", "v4.14.0") < 0
    assert compare_semver("v4.14.0", "v4.14.0-0") > 0


def test_numeric_identifier_before_alphanumeric():
    assert compare_semver("v4.14.0-0", "v4.14.0-rc.1") < 0
    assert compare_semver("v1.0.0-2", "v1.0.0-10") < 0
    assert compare_semver("v1.0.0-alpha", "v1.0.0-alpha.1") < 0


def test_numbers_compare_numerically():
    assert compare_semver("v1.9.0", "v1.11.0") < 0
    assert compare_semver("v10.0.0", "v9.99.99") > 0


def test_invalid_sorts_first_and_invalids_are_equal():
    assert compare_semver("garbage", "v0.0.0") < 0
    assert compare_semver("v0.0.0", "garbage") > 0
    assert compare_semver("garbage", "v01") == 0


def test_build_metadata_ignored():
    assert compare_semver("v1.0.0+one", "v1.0.0+two") == 0


def _check(check_version, min_version="4.14.0-0"):
    return VersionCheck(
        id="some/id/",
        version=check_version,
        check_version=check_version,
        min_version=min_version,
        order=Ordering.CLUSTER_VERSION,
    )


def test_verify_accepts_minimum_and_above():
    assert _check("4.14.0-0").verify() is None
    assert _check("4.14.5").verify() is None


def test_verify_converts_underscores():
    check = _check("4.14.0_1")
    assert check.verify() is None
    assert check.check_version == "4.14.0_1"


def test_verify_below_minimum_is_invalid_env():
    with pytest.raises(InvalidEnvError) as info:
        _check("4.13.9").verify()
    assert str(info.value) == "unexpected version: 4.13.9 < 4.14.0-0"


def test_verify_unparsable_version():
    with pytest.raises(ValueError, match="could not parse version vnot-a-version"):
        _check("not-a-version").verify()


def test_version_check_to_dict():
    assert _check("4.14.5").to_dict() == {"version": "4.14.5", "expected": "4.14.0-0"}


def test_version_check_is_validation():
    check = _check("4.14.5")
    assert isinstance(check, Validation)
    assert check.description == ""


def test_with_error_raises_stored_error():
    err = RuntimeError("failed to fetch")
    check = VersionWithErrorCheck(
        id="x/", version="", check_version="", min_version="4.14.0-0",
        order=Ordering.PTP_OPERATOR_VERSION, error=err,
    )
    with pytest.raises(RuntimeError) as info:
        check.verify()
    assert info.value is err
    assert check.to_dict() == {"fetchError": "failed to fetch", "version": ""}


def test_with_error_falls_back_to_version_check():
    check = VersionWithErrorCheck(
        id="x/", version="4.13.0", check_version="4.13.0", min_version="4.14.0-0",
        order=Ordering.PTP_OPERATOR_VERSION,
    )
    with pytest.raises(InvalidEnvError):
        check.verify()
    assert check.to_dict() == {"fetchError": None, "version": "4.13.0"}