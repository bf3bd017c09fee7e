"""Configuration management for the VRM client."""

import os


def load_config() -> dict:
    """Load configuration from environment variables."""
    return {
        # Backend: "mock", "demo" or "live"
        "vrm_mode": os.getenv("VRM_MODE", "mock"),
        "vrm_base_url": os.getenv("VRM_BASE_URL", "https://vrmapi.victronenergy.com/v2"),
        "vrm_timeout": float(os.getenv("VRM_TIMEOUT", "15.0")),

        # Credentials (live mode). An access token takes precedence over the password.
        "vrm_username": os.getenv("VRM_USERNAME", ""),
        "vrm_password": os.getenv("VRM_PASSWORD", ""),
        "vrm_access_token": os.getenv("VRM_ACCESS_TOKEN", ""),
        "vrm_sms_token": os.getenv("VRM_SMS_TOKEN", ""),
        "vrm_remember_me": os.getenv("VRM_REMEMBER_ME", "false").lower() == "true",

        # Include extended telemetry when listing installations
        "vrm_extended": os.getenv("VRM_EXTENDED", "false").lower() == "true",

        # Logging
        "log_level": os.getenv("VRM_LOG_LEVEL", "INFO"),
        "log_dir": os.getenv("VRM_LOG_DIR", ""),
    }
