"""Tests for VRM payload records, credentials and the error model."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pydantic import ValidationError  # noqa: E402

from vrm.errors import Failure  # noqa: E402
from vrm.models import (  # noqa: E402
    AddSiteSuccess,
    Data,
    Installation,
    LoginRequest,
    Summary,
    User,
    UserSuccess,
)
from vrm.token import Token, TokenKind  # noqa: E402

MINIMAL_SITE = {
    "idSite": 10001,
    "accessLevel": 1,
    "owner": True,
    "is_admin": False,
    "name": "Boat",
    "identifier": "c0619ab1f2d3",
    "idUser": 22,
    "pvMax": 3000,
    "timezone": "Europe/Amsterdam",
    "geofenceEnabled": False,
    "realtimeUpdates": True,
    "hasMains": 1,
    "hasGenerator": 0,
    "alarmMonitoring": 1,
    "invalidVRMAuthTokenUsedInLogRequest": 0,
    "syscreated": 1700000000,
    "shared": False,
    "device_icon": "boat",
}

OPTIONAL_FIELDS = (
    "phone_number", "notes", "geofence", "no_data_alarm_timeout", "alarm",
    "last_timestamp", "current_time", "timezone_offset", "demo_mode",
    "mqtt_webhost", "mqtt_host", "high_workload", "current_alarms",
    "num_alarms", "avatar_url", "tags", "images", "view_permissions", "extended",
)

DATA_ENTRY = {
    "idDataAttribute": 51,
    "code": "bs",
    "description": "Battery SOC",
    "formatWithUnit": "%.1F %%",
    "dataType": "float",
    "textValue": "",
    "instance": "0",
    "timestamp": "1700000600",
    "dbusServiceType": "battery",
    "dbusPath": "/Soc",
    "rawValue": "87.5",
    "formattedValue": "87.5",
    "formattedValueWithUnit": "87.5 %",
    "dataAttributeEnumValues": [{"nameEnum": "Off", "valueEnum": 0}],
}

SUMMARY_ENTRY = {
    "idDataAttribute": 94,
    "description": "Solar yield today",
    "rawValue": 12,
    "formattedValue": "12 kWh",
    "formatWithUnit": "%.1F kWh",
    "dataAttributes": [
        {"instance": 0, "dbusServiceType": "solarcharger", "dbusPath": "/Yield"},
        {"instance": 1, "dbusServiceType": "solarcharger", "dbusPath": "/Yield"},
    ],
}


# -- Token --


def test_token_headers():
    assert Token.bearer("abc").render_header() == "Bearer abc"
    assert Token.access("xyz").render_header() == "Token xyz"
    assert Token.access("xyz").kind is TokenKind.ACCESS


def test_token_repr_hides_value():
    assert "secret" not in repr(Token.bearer("secret"))


# -- Login --


def test_login_request_omits_defaults():
    assert LoginRequest(username="a", password="b").to_dict() == {"username": "a", "password": "b"}
    body = LoginRequest(username="a", password="b", sms_token="123", remember_me=True).to_dict()
    assert body["sms_token"] == "123"
    assert body["remember_me"] is True


# -- User --


def test_user_numeric_and_textual_ids():
    numeric = User.model_validate({"id": 42, "name": "n", "email": "e", "country": "c"})
    textual = User.model_validate({"id": "42", "name": "n", "email": "e", "country": "c"})
    assert numeric.id == textual.id == "42"


def test_user_rejects_boolean_id():
    with pytest.raises(ValidationError):
        User.model_validate({"id": True, "name": "n", "email": "e", "country": "c"})


def test_user_success_missing_user():
    with pytest.raises(ValidationError):
        UserSuccess.model_validate({"success": True})


# -- Installation --


def test_installation_minimal_payload_defaults():
    site = Installation.model_validate(MINIMAL_SITE)
    assert site.site_id == 10001
    assert site.user_id == 22
    assert site.pv_max == 3000
    assert site.sys_created == 1700000000
    for name in OPTIONAL_FIELDS:
        assert getattr(site, name) is None, name


def test_installation_full_payload():
    payload = dict(
        MINIMAL_SITE,
        phonenumber="+31 20 000",
        noDataAlarmTimeout=3600,
        alarm=True,
        current_alarms=["Low battery"],
        num_alarms=1,
        tags=[{"idTag": 3, "name": "boats", "automatic": False}],
        images=[{"idSiteImage": 9, "imageName": "deck.jpg", "url": "https://img/deck.jpg"}],
        view_permissions={
            "update_settings": True, "settings": True, "diagnostics": True,
            "share": False, "vnc": False, "mqtt_rpc": False, "vebus": True,
            "twoway": True, "exact_location": True, "nodered": False,
            "nodered_dash": False, "signalk": False,
        },
        extended=[DATA_ENTRY, SUMMARY_ENTRY],
    )
    site = Installation.model_validate(payload)
    assert site.phone_number == "+31 20 000"
    assert site.no_data_alarm_timeout == 3600
    assert site.current_alarms == ["Low battery"]
    assert site.tags[0].tag_id == 3
    assert site.images[0].name == "deck.jpg"
    assert site.view_permissions.twoway is True
    assert site.view_permissions.share is False
    assert [type(e) for e in site.extended] == [Data, Summary]


def test_installation_accepts_numeric_flags():
    site = Installation.model_validate(dict(MINIMAL_SITE, owner=1, shared=0))
    assert site.owner is True
    assert site.shared is False


def test_installation_rejects_other_flag_values():
    with pytest.raises(ValidationError):
        Installation.model_validate(dict(MINIMAL_SITE, owner="yes"))
    with pytest.raises(ValidationError):
        Installation.model_validate(dict(MINIMAL_SITE, owner=2))


def test_installation_missing_required_field():
    payload = {k: v for k, v in MINIMAL_SITE.items() if k != "idSite"}
    with pytest.raises(ValidationError) as exc_info:
        Installation.model_validate(payload)
    assert "idSite" in str(exc_info.value)


def test_installation_wrong_type():
    with pytest.raises(ValidationError):
        Installation.model_validate(dict(MINIMAL_SITE, pvMax="lots"))
    with pytest.raises(ValidationError):
        Installation.model_validate(dict(MINIMAL_SITE, pvMax=True))


# -- Extended telemetry --


def _extended(entries):
    return Installation.model_validate(dict(MINIMAL_SITE, extended=entries)).extended


def test_extended_classified_by_code_key():
    entries = _extended([DATA_ENTRY, SUMMARY_ENTRY, dict(DATA_ENTRY, idDataAttribute=52)])
    assert [e.is_data for e in entries] == [True, False, True]
    assert [e.is_summary for e in entries] == [False, True, False]

    data = entries[0]
    assert data.code == "bs"
    assert data.formatted_value_with_unit == "87.5 %"
    assert data.data_attribute_enum_values[0].name_enum == "Off"

    summary = entries[1]
    assert summary.code is None
    assert summary.raw_value == 12.0
    assert [a.instance for a in summary.data_attributes] == [0, 1]


def test_extended_accessors():
    data, summary = _extended([DATA_ENTRY, SUMMARY_ENTRY])
    assert data.as_data() is data
    assert data.as_summary() is None
    assert summary.as_summary() is summary
    assert summary.as_data() is None


def test_extended_not_a_list():
    assert _extended(None) is None
    assert _extended({"code": "bs"}) is None


def test_extended_malformed_entry():
    with pytest.raises(ValidationError):
        _extended([{"code": "bs"}])


def test_extended_data_raw_value_must_be_scalar():
    assert _extended([dict(DATA_ENTRY, rawValue=87.5)])[0].raw_value == 87.5
    assert _extended([dict(DATA_ENTRY, rawValue=None)])[0].raw_value is None
    with pytest.raises(ValidationError):
        _extended([dict(DATA_ENTRY, rawValue={"value": 1})])
    with pytest.raises(ValidationError):
        _extended([dict(DATA_ENTRY, rawValue=[1, 2])])


def test_extended_null_lists_are_empty():
    data, summary = _extended([
        dict(DATA_ENTRY, dataAttributeEnumValues=None),
        dict(SUMMARY_ENTRY, dataAttributes=None),
    ])
    assert data.data_attribute_enum_values == []
    assert summary.data_attributes == []


# -- Failure / addSite --


def test_failure_from_dict():
    failure = Failure.from_dict({"success": False, "errors": {"a": 1}, "error_code": "x"})
    assert failure == Failure(success=False, errors={"a": 1}, error_code="x")
    assert Failure.from_dict({"success": False, "errors": "e"}).error_code is None
    assert Failure.from_dict({"success": False}) is None
    assert Failure.from_dict(["not", "a", "failure"]) is None


def test_add_site_success():
    assert AddSiteSuccess.model_validate({"success": True, "records": {"idSite": 7}}).records.site_id == 7
    with pytest.raises(ValidationError):
        AddSiteSuccess.model_validate({"success": True, "records": []})
