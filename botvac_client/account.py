"""Account sessions and robot discovery for the Botvac cloud."""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any
from urllib.parse import urlencode

import aiohttp

from .client import raise_for_status
from .const import (
    BEEHIVE_ACCEPT,
    BEEHIVE_URL,
    OAUTH_AUTHORIZE_URL,
    OAUTH_TOKEN_URL,
    REQUEST_TIMEOUT,
    TOKEN_EXPIRY_MARGIN,
)
from .exceptions import AuthError, ProtocolError, RobotNotFound, TransportError
from .models import RobotIdentity
from .protocol import decode_json, http_date

_LOGGER = logging.getLogger(__name__)


class Session(ABC):
    """Authenticated access to the account (beehive) API."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        base_url: str = BEEHIVE_URL,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self._session = session
        self.base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @abstractmethod
    async def authorization(self) -> str:
        """Return a valid Authorization header value, logging in if needed."""

    @abstractmethod
    async def reauthenticate(self) -> None:
        """Obtain a new credential after the current one was rejected."""

    async def _send(
        self,
        method: str,
        url: str,
        what: str,
        **kwargs: Any,
    ) -> dict[str, Any] | list[Any]:
        try:
            async with self._session.request(
                method, url, timeout=self._timeout, **kwargs
            ) as resp:
                status = resp.status
                reason = resp.reason
                text = await resp.text()
        except asyncio.TimeoutError as err:
            raise TransportError(f"{what} timed out") from err
        except aiohttp.ClientError as err:
            raise TransportError(f"{what} failed: {err}") from err
        except UnicodeDecodeError as err:
            raise ProtocolError(f"{what}: response is not valid text") from err

        if not 200 <= status < 300:
            _LOGGER.warning("%s returned HTTP %d %s", what, status, reason)
        raise_for_status(status, reason, what)
        if not text:
            return {}
        payload = decode_json(text)
        if not isinstance(payload, (dict, list)):
            raise ProtocolError(f"{what}: unexpected response {text[:200]!r}")
        return payload

    async def _headers(self) -> dict[str, str]:
        return {
            "Accept": BEEHIVE_ACCEPT,
            "Authorization": await self.authorization(),
            "X-Date": http_date(),
        }

    async def request(
        self, method: str, path: str, *, json: Any = None
    ) -> dict[str, Any] | list[Any]:
        """Call the account API, re-authenticating once on 401/403."""
        url = f"{self.base_url}{path}"
        what = f"{method} {path}"
        headers = await self._headers()
        try:
            return await self._send(method, url, what, headers=headers, json=json)
        except AuthError:
            _LOGGER.info("Account credential rejected, re-authenticating")
            await self.reauthenticate()
        return await self._send(method, url, what, headers=await self._headers(), json=json)


class PasswordSession(Session):
    """Legacy e-mail and password login."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        email: str,
        password: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(session, **kwargs)
        if not email or not password:
            raise ValueError("Must have an e-mail and password for a password session")
        self.email = email
        self._password = password
        self._access_token: str | None = None

    @property
    def access_token(self) -> str | None:
        return self._access_token

    async def login(self) -> None:
        """Exchange the credentials for an access token.

        Raises:
            AuthError: If the credentials are rejected.
        """
        payload = await self._send(
            "POST",
            f"{self.base_url}/sessions",
            "Login",
            headers={"Accept": BEEHIVE_ACCEPT},
            json={
                "platform": "ios",
                "email": self.email,
                "password": self._password,
                "token": secrets.token_hex(32),
            },
        )
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise AuthError("Login response did not contain an access token")
        self._access_token = str(token)
        _LOGGER.info("Logged in to the Botvac account of %s", self.email)

    async def authorization(self) -> str:
        if self._access_token is None:
            await self.login()
        return f"Token token={self._access_token}"

    async def reauthenticate(self) -> None:
        self._access_token = None
        await self.login()


class OAuthSession(Session):
    """OAuth2 bearer token session with refresh-token support."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        client_id: str,
        client_secret: str,
        *,
        token: str | None = None,
        refresh_token: str | None = None,
        expires_at: float | None = None,
        token_url: str = OAUTH_TOKEN_URL,
        clock: Callable[[], float] = time.time,
        **kwargs: Any,
    ) -> None:
        super().__init__(session, **kwargs)
        self.client_id = client_id
        self._client_secret = client_secret
        self.token = token
        self.refresh_token = refresh_token
        self.expires_at = expires_at
        self.token_url = token_url
        self._clock = clock

    def authorization_url(self, redirect_uri: str, scope: str) -> str:
        """Return the URL the user opens to grant access."""
        query = urlencode(
            {
                "response_type": "code",
                "client_id": self.client_id,
                "scope": scope,
                "redirect_uri": redirect_uri,
            }
        )
        return f"{OAUTH_AUTHORIZE_URL}?{query}"

    def set_token(
        self, token: str, expires_in: float | None, refresh_token: str | None = None
    ) -> None:
        """Store a new access token; None for expires_in means no known expiry."""
        self.token = token
        if expires_in is None:
            self.expires_at = None
        else:
            self.expires_at = self._clock() + expires_in - TOKEN_EXPIRY_MARGIN
        if refresh_token:
            self.refresh_token = refresh_token

    @property
    def token_valid(self) -> bool:
        if not self.token:
            return False
        return self.expires_at is None or self._clock() < self.expires_at

    async def _token_request(self, form: dict[str, str]) -> None:
        form = {"client_id": self.client_id, "client_secret": self._client_secret, **form}
        payload = await self._send("POST", self.token_url, "Token request", data=form)
        if not isinstance(payload, dict) or "access_token" not in payload:
            raise AuthError("Token response did not contain an access token")
        expires_in: float | None = None
        if payload.get("expires_in") is not None:
            try:
                expires_in = float(payload["expires_in"])
            except (ValueError, TypeError) as err:
                raise ProtocolError(f"Invalid expires_in: {payload['expires_in']!r}") from err
        self.set_token(
            str(payload["access_token"]),
            expires_in,
            payload.get("refresh_token"),
        )

    async def exchange_code(self, code: str, redirect_uri: str) -> None:
        """Finish the authorization-code grant."""
        await self._token_request(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": redirect_uri,
            }
        )

    async def refresh(self) -> None:
        """Get a new access token using the refresh token.

        Raises:
            AuthError: If there is no refresh token or it was rejected.
        """
        if not self.refresh_token:
            raise AuthError("No refresh token, re-authorization required")
        _LOGGER.debug("Refreshing OAuth access token")
        await self._token_request(
            {"grant_type": "refresh_token", "refresh_token": self.refresh_token}
        )

    async def authorization(self) -> str:
        if not self.token_valid:
            await self.refresh()
        return f"Bearer {self.token}"

    async def reauthenticate(self) -> None:
        await self.refresh()


class BotvacAccount:
    """The robots registered to one account."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self._robots: list[RobotIdentity] | None = None

    @property
    def robots(self) -> list[RobotIdentity]:
        """Robots found by the last get_robots() call."""
        return list(self._robots or [])

    async def get_robots(self) -> list[RobotIdentity]:
        """List the account's robots.

        Items without a serial or secret cannot be controlled and are skipped.
        """
        payload = await self.session.request("GET", "/users/me/robots")
        if not isinstance(payload, list):
            raise ProtocolError("Robot listing is not a list")

        robots: list[RobotIdentity] = []
        for item in payload:
            if not isinstance(item, dict) or not item.get("serial") or not item.get("secret_key"):
                _LOGGER.warning("Skipping robot without serial or secret: %r", item)
                continue
            robots.append(RobotIdentity.from_account(item))

        _LOGGER.debug("Found %d robot(s)", len(robots))
        self._robots = robots
        return list(robots)

    async def get_robot(self, serial: str | None = None) -> RobotIdentity:
        """Return the robot with this serial, or the first robot if None.

        Raises:
            RobotNotFound: If there is no matching robot.
        """
        robots = await self.get_robots()
        if serial is None:
            if robots:
                return robots[0]
            raise RobotNotFound("No robots registered to this account")
        for robot in robots:
            if robot.serial == serial:
                return robot
        raise RobotNotFound(f"Cannot find robot with serial {serial}")
