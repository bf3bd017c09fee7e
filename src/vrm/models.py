"""Pydantic models for VRM API payloads.

Field aliases carry the remote's camelCase wire names. Integers and strings
are strict; boolean flags also accept 0/1, which the API sends for some of
them. Optional fields default to None.
"""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Discriminator,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    field_validator,
)
from pydantic import Tag as Variant


def _int_flag(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool) and value in (0, 1):
        return bool(value)
    return value


def _number(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a number, got {value!r}")
    return float(value)


def _scalar_text(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def _json_scalar(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        raise ValueError("expected a JSON scalar")
    return value


Flag = Annotated[StrictBool, BeforeValidator(_int_flag)]
Number = Annotated[float, BeforeValidator(_number)]
Text = Annotated[StrictStr, BeforeValidator(_scalar_text)]
JsonScalar = Annotated[Any, AfterValidator(_json_scalar)]


class VRMModel(BaseModel):
    """Base for every VRM payload model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# -- Authentication --


class LoginRequest(VRMModel):
    username: str
    password: str
    sms_token: str | None = None
    remember_me: bool = False

    def to_dict(self) -> dict:
        """Request body; sms_token is omitted when absent, remember_me when false."""
        body = self.model_dump(exclude_none=True)
        if not self.remember_me:
            body.pop("remember_me")
        return body


class LoginSuccess(VRMModel):
    token: StrictStr | None = None
    user_id: StrictInt = Field(alias="idUser")
    verification_mode: StrictStr
    verification_sent: Flag


class DemoLoginSuccess(VRMModel):
    token: StrictStr | None = None


# -- Users --


class User(VRMModel):
    """The authenticated user.

    The id is kept as text; the API has been seen sending it both as a
    number and as a string.
    """

    id: Text
    name: StrictStr
    email: StrictStr
    country: StrictStr


class UserSuccess(VRMModel):
    success: Flag
    user: User


# -- Installations --


class Tag(VRMModel):
    tag_id: StrictInt = Field(alias="idTag")
    name: StrictStr
    automatic: Flag


class Image(VRMModel):
    image_id: StrictInt = Field(alias="idSiteImage")
    name: StrictStr = Field(alias="imageName")
    url: StrictStr


class ViewPermissions(VRMModel):
    """What the requesting user may see or change on an installation."""

    update_settings: Flag
    settings: Flag
    diagnostics: Flag
    share: Flag
    vnc: Flag
    mqtt_rpc: Flag
    vebus: Flag
    twoway: Flag  # installation supports two-way communication
    exact_location: Flag
    nodered: Flag
    nodered_dash: Flag
    signalk: Flag


class DataAttributeEnumValue(VRMModel):
    name_enum: StrictStr = Field(alias="nameEnum")
    value_enum: StrictInt = Field(alias="valueEnum")


class DataAttribute(VRMModel):
    instance: StrictInt
    dbus_service_type: StrictStr = Field(alias="dbusServiceType")
    dbus_path: StrictStr = Field(alias="dbusPath")


class Extended(VRMModel):
    """An entry of an installation's extended telemetry list."""

    @property
    def is_data(self) -> bool:
        return isinstance(self, Data)

    @property
    def is_summary(self) -> bool:
        return isinstance(self, Summary)

    def as_data(self) -> Data | None:
        return self if isinstance(self, Data) else None

    def as_summary(self) -> Summary | None:
        return self if isinstance(self, Summary) else None


class Data(Extended):
    """Live reading of a single data attribute."""

    data_id: StrictInt = Field(alias="idDataAttribute")
    code: StrictStr
    description: StrictStr | None = None
    format_with_unit: StrictStr | None = Field(default=None, alias="formatWithUnit")
    data_type: StrictStr | None = Field(default=None, alias="dataType")
    text_value: StrictStr | None = Field(default=None, alias="textValue")
    instance: Text | None = None
    timestamp: Text | None = None
    dbus_service_type: StrictStr | None = Field(default=None, alias="dbusServiceType")
    dbus_path: StrictStr | None = Field(default=None, alias="dbusPath")
    raw_value: JsonScalar = Field(default=None, alias="rawValue")
    formatted_value: StrictStr | None = Field(default=None, alias="formattedValue")
    formatted_value_with_unit: StrictStr | None = Field(
        default=None, alias="formattedValueWithUnit"
    )
    data_attribute_enum_values: list[DataAttributeEnumValue] = Field(
        default_factory=list, alias="dataAttributeEnumValues"
    )

    @field_validator("data_attribute_enum_values", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class Summary(Extended):
    """Aggregated attribute with its per-instance sources."""

    data_id: StrictInt = Field(alias="idDataAttribute")
    code: StrictStr | None = None
    description: StrictStr | None = None
    raw_value: Number | None = Field(default=None, alias="rawValue")
    formatted_value: StrictStr | None = Field(default=None, alias="formattedValue")
    text_value: StrictStr | None = Field(default=None, alias="textValue")
    format_with_unit: StrictStr | None = Field(default=None, alias="formatWithUnit")
    data_attributes: list[DataAttribute] = Field(default_factory=list, alias="dataAttributes")

    @field_validator("data_attributes", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


def _extended_kind(value: Any) -> str:
    """Pick the variant of an extended entry.

    The API carries no discriminant: an entry with a "code" key is Data,
    anything else is Summary.
    """
    if isinstance(value, Extended):
        return "data" if isinstance(value, Data) else "summary"
    return "data" if isinstance(value, dict) and "code" in value else "summary"


ExtendedEntry = Annotated[
    Union[Annotated[Data, Variant("data")], Annotated[Summary, Variant("summary")]],
    Discriminator(_extended_kind),
]


class Installation(VRMModel):
    """One monitored site as returned by /users/{id}/installations."""

    site_id: StrictInt = Field(alias="idSite")
    access_level: StrictInt = Field(alias="accessLevel")
    owner: Flag
    is_admin: Flag
    name: StrictStr
    identifier: StrictStr
    user_id: StrictInt = Field(alias="idUser")  # installation owner's id
    pv_max: StrictInt = Field(alias="pvMax")
    timezone: StrictStr
    phone_number: StrictStr | None = Field(default=None, alias="phonenumber")
    notes: StrictStr | None = None
    geofence: StrictStr | None = None  # JSON-encoded
    geofence_enabled: Flag = Field(alias="geofenceEnabled")
    realtime_updates: Flag = Field(alias="realtimeUpdates")
    has_mains: StrictInt = Field(alias="hasMains")
    has_generator: StrictInt = Field(alias="hasGenerator")
    # seconds without data before alarming
    no_data_alarm_timeout: StrictInt | None = Field(default=None, alias="noDataAlarmTimeout")
    # 0 nothing, 1 alarms, 2 alarms and warnings
    alarm_monitoring: StrictInt = Field(alias="alarmMonitoring")
    invalid_vrm_auth_token_used_in_log_request: StrictInt = Field(
        alias="invalidVRMAuthTokenUsedInLogRequest"
    )
    sys_created: StrictInt = Field(alias="syscreated")  # UNIX timestamp
    shared: Flag
    device_icon: StrictStr

    # Live state, present depending on the request
    alarm: Flag | None = None
    last_timestamp: StrictInt | None = None
    current_time: StrictStr | None = None  # hh:mm, installation local time
    timezone_offset: StrictInt | None = None  # seconds from UTC
    demo_mode: Flag | None = None
    mqtt_webhost: StrictStr | None = None
    mqtt_host: StrictStr | None = None
    high_workload: Flag | None = None
    current_alarms: list[StrictStr] | None = None
    num_alarms: StrictInt | None = None
    avatar_url: StrictStr | None = None
    tags: list[Tag] | None = None
    images: list[Image] | None = None
    view_permissions: ViewPermissions | None = None
    extended: list[ExtendedEntry] | None = None

    @field_validator("extended", mode="before")
    @classmethod
    def _extended_list_only(cls, value: Any) -> Any:
        return value if isinstance(value, list) else None


class InstallationsSuccess(VRMModel):
    success: Flag = True
    records: list[Installation]


class AddedSite(VRMModel):
    site_id: StrictInt = Field(alias="idSite")


class AddSiteSuccess(VRMModel):
    success: Flag = True
    records: AddedSite
