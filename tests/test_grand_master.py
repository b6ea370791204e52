import json

import pytest

from vsesync.errors import InvalidEnvError
from vsesync.grand_master import (
    GM_FLAG,
    GMProfiles,
    grand_master_check,
    parse_ptp_configs,
)
from vsesync.versioncheck import Ordering


def _document(*confs_per_item):
    return json.dumps(
        {
            "apiVersion": "v1",
            "items": [
                {"spec": {"profile": [{"ts2phcConf": conf} for conf in confs]}}
                for confs in confs_per_item
            ],
        }
    )


def test_parse_collects_profiles_from_all_items_in_order():
    data = _document(["a", "b"], ["c"])
    assert parse_ptp_configs(data) == [
        {"ts2phcConf": "a"},
        {"ts2phcConf": "b"},
        {"ts2phcConf": "c"},
    ]


def test_parse_accepts_bytes_and_null_items():
    assert parse_ptp_configs(b'{"items": null}') == []


def test_parse_missing_conf_is_empty_string():
    data = json.dumps({"items": [{"spec": {"profile": [{}]}}]})
    assert parse_ptp_configs(data) == [{"ts2phcConf": ""}]


def test_parse_rejects_invalid_json():
    with pytest.raises(ValueError, match="failed to unmarshal ptpconfigs"):
        parse_ptp_configs("not json")


def test_parse_rejects_wrong_types():
    with pytest.raises(ValueError, match="failed to unmarshal ptpconfigs"):
        parse_ptp_configs(json.dumps({"items": "nope"}))


def test_check_with_grand_master_profile_verifies():
    check = grand_master_check(_document(["other"], [f"[global]\n{GM_FLAG}\n"]))
    assert check.error is None
    assert len(check.profiles) == 2
    assert check.verify() is None


def test_check_without_grand_master_profile_fails():
    check = grand_master_check(_document(["ts2phc.master 0"]))
    with pytest.raises(InvalidEnvError, match="no configuration for Grand Master clock"):
        check.verify()


def test_check_with_bad_data_keeps_error():
    check = grand_master_check("{")
    assert check.profiles == []
    with pytest.raises(ValueError, match="failed to unmarshal ptpconfigs"):
        check.verify()


def test_check_with_fetch_failure_wraps_it():
    original = ConnectionError("refused")
    check = grand_master_check(original)
    with pytest.raises(RuntimeError) as excinfo:
        check.verify()
    assert excinfo.value.__cause__ is original
    assert check.to_dict()["fetchError"] == str(check.error)


def test_to_dict_and_metadata():
    check = GMProfiles(profiles=[{"ts2phcConf": GM_FLAG}])
    assert check.to_dict() == {"fetchError": None, "profiles": [{"ts2phcConf": GM_FLAG}]}
    assert check.order == Ordering.CONFIGURED_FOR_GRAND_MASTER
    assert check.id.endswith("/ptp-operator/")