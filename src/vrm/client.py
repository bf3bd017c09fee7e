"""Real VRM API client over HTTPS with token auth."""

from __future__ import annotations

import logging
import re
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from vrm.base import BaseVRMClient
from vrm.errors import (
    INVALID_FAILURE,
    INVALID_RESPONSE,
    NO_INSTALLATION,
    NO_TOKEN,
    Failure,
    VRMFormatError,
    VRMProtocolError,
    VRMRemoteError,
    VRMTransportError,
)
from vrm.identity import LazyValue
from vrm.models import (
    AddSiteSuccess,
    DemoLoginSuccess,
    Installation,
    InstallationsSuccess,
    LoginRequest,
    LoginSuccess,
    User,
    UserSuccess,
)
from vrm.token import Token

log = logging.getLogger("victron-vrm.client")

BASE_URL = "https://vrmapi.victronenergy.com/v2"
DEFAULT_TIMEOUT = 15.0

_NUMERIC_ID = re.compile(r"-?[0-9]+")

M = TypeVar("M", bound=BaseModel)


def _make_http(config: dict | None) -> httpx.AsyncClient:
    cfg = config or {}
    return httpx.AsyncClient(
        base_url=cfg.get("vrm_base_url") or BASE_URL,
        timeout=float(cfg.get("vrm_timeout") or DEFAULT_TIMEOUT),
    )


async def _send(http: httpx.AsyncClient, method: str, path: str, **kwargs) -> httpx.Response:
    """Issue one request, wrapping transport failures."""
    log.debug("%s %s", method, path)
    try:
        return await http.request(method, path, **kwargs)
    except httpx.HTTPError as err:
        raise VRMTransportError(f"{method} {path} failed: {err}") from err


def _parse(resp: httpx.Response, model: type[M]) -> M:
    """Decode a 2xx body into `model`."""
    try:
        data = resp.json()
    except ValueError as err:
        raise VRMProtocolError(
            INVALID_RESPONSE,
            f"response body is not JSON: {resp.text[:100]!r}",
            status_code=resp.status_code,
        ) from err
    try:
        return model.model_validate(data)
    except ValidationError as err:
        log.warning("Unexpected %s payload: %d error(s)", model.__name__, err.error_count())
        raise VRMProtocolError(
            INVALID_RESPONSE,
            f"unexpected {model.__name__} payload: {err}",
            status_code=resp.status_code,
        ) from err


def _failure(resp: httpx.Response) -> VRMRemoteError:
    """Build the error for a non-2xx response."""
    try:
        failure = Failure.from_dict(resp.json())
    except ValueError:
        failure = None
    if failure is None:
        log.warning("Unparseable failure response (HTTP %d)", resp.status_code)
        return VRMProtocolError(
            INVALID_FAILURE,
            f"HTTP {resp.status_code}: {resp.text[:100]!r}",
            status_code=resp.status_code,
        )
    log.warning("VRM API error %s (HTTP %d)", failure.error_code, resp.status_code)
    return VRMRemoteError(failure, status_code=resp.status_code)


class VRMClient(BaseVRMClient):
    """A logged-in session against the Victron VRM API.

    Build one with `login`, `login_access_token` or `login_as_demo`. The
    credential is fixed for the session's lifetime; the user id is either
    known from login or resolved once on first use.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        token: Token,
        user_id: int | None = None,
        owns_http: bool = False,
    ):
        self._http = http
        self._token = token
        self._user_id: LazyValue[int] = LazyValue(user_id)
        self._owns_http = owns_http

    @property
    def token(self) -> Token:
        return self._token

    @property
    def user_id(self) -> int | None:
        return self._user_id.value

    # -- Authentication --

    @classmethod
    async def login(
        cls,
        username: str,
        password: str,
        sms_token: str | None = None,
        remember_me: bool = False,
        *,
        config: dict | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> VRMClient:
        """Log in with username and password.

        Raises:
            VRMTransportError: The request could not be sent.
            VRMRemoteError: Login was rejected, e.g. wrong credentials.
            VRMProtocolError: "no_token" if the API reported success without a token.
        """
        request = LoginRequest(
            username=username, password=password,
            sms_token=sms_token, remember_me=remember_me,
        )
        return await cls._password_login(request, Token.bearer, config, http)

    @classmethod
    async def login_access_token(
        cls,
        username: str,
        access_token: str,
        *,
        config: dict | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> VRMClient:
        """Log in with a long-lived access token instead of a password.

        The session authenticates with a "Token" header rather than "Bearer".
        """
        request = LoginRequest(username=username, password=access_token, remember_me=True)
        return await cls._password_login(request, Token.access, config, http)

    @classmethod
    async def _password_login(cls, request, make_token, config, http) -> VRMClient:
        owns_http = http is None
        http = http or _make_http(config)
        try:
            resp = await _send(http, "POST", "/auth/login", json=request.to_dict())
            if not resp.is_success:
                raise _failure(resp)

            success = _parse(resp, LoginSuccess)
            if success.token is None:
                raise VRMProtocolError(NO_TOKEN, "No token returned", resp.status_code)
        except BaseException:
            if owns_http:
                await http.aclose()
            raise

        log.info("Logged in as user %d", success.user_id)
        return cls(http, make_token(success.token), success.user_id, owns_http)

    @classmethod
    async def login_as_demo(
        cls,
        *,
        config: dict | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> VRMClient:
        """Log in to the public demo account."""
        owns_http = http is None
        http = http or _make_http(config)
        try:
            resp = await _send(
                http, "POST", "/auth/loginAsDemo",
                headers={"content-type": "application/json"},
            )
            if not resp.is_success:
                raise _failure(resp)

            success = _parse(resp, DemoLoginSuccess)
            if success.token is None:
                raise VRMProtocolError(NO_TOKEN, "No token returned", resp.status_code)
        except BaseException:
            if owns_http:
                await http.aclose()
            raise

        log.info("Logged in as demo user")
        return cls(http, Token.bearer(success.token), None, owns_http)

    # -- Authenticated requests --

    def _auth_headers(self) -> dict:
        return {
            "x-authorization": self._token.render_header(),
            "content-type": "application/json",
        }

    async def _request(self, method: str, path: str, model: type[M], **kwargs) -> M:
        """Send an authenticated request and return the 2xx body as `model`."""
        resp = await _send(http=self._http, method=method, path=path,
                           headers=self._auth_headers(), **kwargs)
        if not resp.is_success:
            raise _failure(resp)
        return _parse(resp, model)

    async def _fetch_user_id(self) -> int:
        user = await self.get_user_info()
        if not _NUMERIC_ID.fullmatch(user.id):
            raise VRMFormatError(f"User id {user.id!r} is not numeric")
        return int(user.id)

    async def ensure_user_id(self) -> int:
        user_id = await self._user_id.get_or_init(self._fetch_user_id)
        log.debug("Using user id %d", user_id)
        return user_id

    async def get_user_info(self) -> User:
        success = await self._request("GET", "/users/me", UserSuccess)
        return success.user

    async def add_new_site(self, identifier: str) -> str:
        user_id = await self.ensure_user_id()
        success = await self._request(
            "POST", f"/users/{user_id}/addSite", AddSiteSuccess,
            json={"installation_identifier": identifier},
        )
        site_id = str(success.records.site_id)
        log.info("Added site %s (portal id %s)", site_id, identifier)
        return site_id

    async def _installations(self, params: dict) -> list[Installation]:
        user_id = await self.ensure_user_id()
        success = await self._request(
            "GET", f"/users/{user_id}/installations", InstallationsSuccess, params=params
        )
        return success.records

    async def get_all_installations_or_sites(self, extended: bool) -> list[Installation]:
        return await self._installations({"extended": int(extended)})

    async def get_installation_or_site(self, extended: bool, site_id: int) -> Installation:
        installations = await self._installations(
            {"extended": int(extended), "siteId": site_id}
        )
        if not installations:
            raise VRMProtocolError(NO_INSTALLATION, f"No installation with site id {site_id}")
        return installations[0]

    async def close(self) -> None:
        if self._owns_http:
            await self._http.aclose()
