"""Victron VRM API client factory."""

from __future__ import annotations

from vrm.base import BaseVRMClient


async def connect(config: dict) -> BaseVRMClient:
    """Create a logged-in VRM client based on configuration.

    Args:
        config: Application config dict. Uses 'vrm_mode' to select backend.

    Returns:
        MockVRMClient for "mock" mode, a demo session for "demo" mode, and
        for "live" mode a session logged in with the access token when one
        is configured, otherwise with username and password.
    """
    mode = config.get("vrm_mode", "mock")

    if mode == "demo":
        from vrm.client import VRMClient
        return await VRMClient.login_as_demo(config=config)

    if mode == "live":
        from vrm.client import VRMClient
        if config.get("vrm_access_token"):
            return await VRMClient.login_access_token(
                config.get("vrm_username", ""),
                config["vrm_access_token"],
                config=config,
            )
        return await VRMClient.login(
            config.get("vrm_username", ""),
            config.get("vrm_password", ""),
            config.get("vrm_sms_token") or None,
            config.get("vrm_remember_me", False),
            config=config,
        )

    from vrm.mock_client import MockVRMClient
    return MockVRMClient(config)
