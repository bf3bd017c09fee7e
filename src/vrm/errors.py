"""Error types for the VRM API client."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, StrictStr, ValidationError

NO_TOKEN = "no_token"
NO_INSTALLATION = "no_installation"
INVALID_RESPONSE = "invalid_response"
INVALID_FAILURE = "invalid_failure"


class Failure(BaseModel):
    """Failure payload the VRM API returns on non-2xx responses."""

    success: bool = False
    errors: Any
    error_code: StrictStr | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Failure | None:
        """Parse a `{success, errors, error_code}` body, or None if it isn't one."""
        try:
            return cls.model_validate(data)
        except ValidationError:
            return None


class VRMError(Exception):
    """Base class for every error raised by the client."""


class VRMTransportError(VRMError):
    """Connection, TLS, timeout or HTTP-level failure from the transport."""


class VRMRemoteError(VRMError):
    """The VRM API answered with a failure payload."""

    def __init__(self, failure: Failure, status_code: int | None = None):
        self.failure = failure
        self.status_code = status_code
        super().__init__(f"VRM error {failure.error_code or 'unknown'}: {failure.errors!r}")

    @property
    def error_code(self) -> str | None:
        return self.failure.error_code

    @property
    def errors(self) -> Any:
        return self.failure.errors


class VRMProtocolError(VRMRemoteError):
    """A response broke the API contract; the failure is synthesized locally.

    Subclasses VRMRemoteError so callers handling remote failures also see
    these, while `error_code` tells them apart (e.g. "no_token").
    """

    def __init__(self, error_code: str, message: str, status_code: int | None = None):
        super().__init__(
            Failure(success=False, errors=[message], error_code=error_code),
            status_code=status_code,
        )


class VRMFormatError(VRMError, ValueError):
    """A numeric field sent as text could not be parsed."""
