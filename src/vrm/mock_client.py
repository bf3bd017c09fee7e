"""Mock VRM client for local development."""

from __future__ import annotations

import logging
import time

from vrm.base import BaseVRMClient
from vrm.errors import NO_INSTALLATION, VRMProtocolError
from vrm.models import Installation, User

log = logging.getLogger("victron-vrm.mock")

MOCK_USER = {"id": 22, "name": "Demo User", "email": "demo@example.com", "country": "NL"}


def _site(site_id: int, name: str, identifier: str, **extra) -> dict:
    record = {
        "idSite": site_id,
        "accessLevel": 1,
        "owner": True,
        "is_admin": True,
        "name": name,
        "identifier": identifier,
        "idUser": MOCK_USER["id"],
        "pvMax": 3000,
        "timezone": "Europe/Amsterdam",
        "phonenumber": None,
        "notes": None,
        "geofence": None,
        "geofenceEnabled": False,
        "realtimeUpdates": True,
        "hasMains": 1,
        "hasGenerator": 0,
        "noDataAlarmTimeout": None,
        "alarmMonitoring": 1,
        "invalidVRMAuthTokenUsedInLogRequest": 0,
        "syscreated": 1700000000,
        "shared": False,
        "device_icon": "boat",
        "alarm": False,
        "current_alarms": [],
        "num_alarms": 0,
    }
    record.update(extra)
    return record


_EXTENDED = [
    {
        "idDataAttribute": 51,
        "code": "bs",
        "description": "Battery SOC",
        "formatWithUnit": "%.1F %%",
        "dataType": "float",
        "rawValue": "87.5",
        "formattedValue": "87.5 %",
        "instance": "0",
        "timestamp": "1700000600",
    },
    {
        "idDataAttribute": 94,
        "description": "Solar yield today",
        "rawValue": 12.4,
        "formattedValue": "12.4 kWh",
        "formatWithUnit": "%.1F kWh",
        "dataAttributes": [
            {"instance": 0, "dbusServiceType": "solarcharger", "dbusPath": "/History/Daily/0/Yield"},
        ],
    },
]


class MockVRMClient(BaseVRMClient):
    """Serves a canned user and two installations, one with extended telemetry."""

    def __init__(self, config: dict):
        self._config = config
        self._sites = [
            _site(10001, "Home", "c0619ab1f2d3", extended=_EXTENDED, last_timestamp=1700000600),
            _site(10002, "Cabin", "b827eb2a44f0", pvMax=800, device_icon="house"),
        ]

    async def ensure_user_id(self) -> int:
        return MOCK_USER["id"]

    async def get_user_info(self) -> User:
        log.info("Mock: returning canned user")
        return User.model_validate(MOCK_USER)

    async def add_new_site(self, identifier: str) -> str:
        site_id = max(s["idSite"] for s in self._sites) + 1
        self._sites.append(
            _site(site_id, identifier, identifier, syscreated=int(time.time()))
        )
        log.info("Mock: added site %d for %s", site_id, identifier)
        return str(site_id)

    def _build(self, record: dict, extended: bool) -> Installation:
        if not extended:
            record = {k: v for k, v in record.items() if k != "extended"}
        return Installation.model_validate(record)

    async def get_all_installations_or_sites(self, extended: bool) -> list[Installation]:
        log.info("Mock: returning %d canned installations", len(self._sites))
        return [self._build(s, extended) for s in self._sites]

    async def get_installation_or_site(self, extended: bool, site_id: int) -> Installation:
        for record in self._sites:
            if record["idSite"] == site_id:
                return self._build(record, extended)
        raise VRMProtocolError(NO_INSTALLATION, f"No installation with site id {site_id}")
