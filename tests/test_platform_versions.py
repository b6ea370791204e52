import pytest

from vsesync.errors import InvalidEnvError
from vsesync.platform_versions import (
    MIN_CLUSTER_VERSION,
    PTP_OPERATOR_DISPLAY_NAME,
    cluster_version_check,
    operator_version_check,
    version_from_cluster_items,
    version_from_operator_items,
)
from vsesync.versioncheck import Ordering


def _cluster(version):
    return {"status": {"desired": {"version": version}}}


def _csv(name, version):
    return {"spec": {"displayName": name, "version": version}}


def test_cluster_version_from_first_item():
    assert version_from_cluster_items([_cluster("4.14.3"), _cluster("4.15.0")]) == "4.14.3"


def test_cluster_version_skips_unreadable_status():
    assert version_from_cluster_items([{"status": "broken"}, _cluster("4.14.3")]) == "4.14.3"


def test_cluster_version_no_items():
    with pytest.raises(LookupError):
        version_from_cluster_items([])


def test_operator_version_picks_ptp_operator():
    items = [_csv("Other", "1.0.0"), {"spec": 5}, _csv(PTP_OPERATOR_DISPLAY_NAME, "4.14.0")]
    assert version_from_operator_items(items) == "4.14.0"


def test_operator_version_missing():
    with pytest.raises(LookupError):
        version_from_operator_items([_csv("Other", "1.0.0")])


@pytest.mark.parametrize("version", ["4.14.0", "4.14.0-rc.1", "4.15.2"])
def test_cluster_check_accepts_recent_versions(version):
    check = cluster_version_check([_cluster(version)])
    assert check.error is None
    assert check.version == version
    assert check.verify() is None


def test_cluster_check_rejects_old_version():
    check = cluster_version_check([_cluster("4.13.9")])
    with pytest.raises(InvalidEnvError, match=MIN_CLUSTER_VERSION):
        check.verify()


def test_cluster_check_keeps_lookup_error():
    check = cluster_version_check([])
    assert check.version == ""
    with pytest.raises(LookupError):
        check.verify()
    assert check.to_dict()["fetchError"] == str(check.error)


def test_operator_check_with_fetch_failure():
    original = TimeoutError("slow")
    check = operator_version_check(original)
    with pytest.raises(RuntimeError) as excinfo:
        check.verify()
    assert excinfo.value.__cause__ is original


def test_operator_check_metadata_and_verify():
    check = operator_version_check([_csv(PTP_OPERATOR_DISPLAY_NAME, "4.13.0")])
    assert check.order == Ordering.PTP_OPERATOR_VERSION
    with pytest.raises(InvalidEnvError):
        check.verify()