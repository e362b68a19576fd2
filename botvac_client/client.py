"""HTTP client for the Botvac robot command API."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Iterator, Mapping
from typing import Any

import aiohttp

from .const import (
    CMD_GET_ROBOT_STATE,
    REQUEST_TIMEOUT,
    ROBOT_MESSAGES_PATH,
)
from .exceptions import AuthError, ProtocolError, TransportError
from .models import CommandResponse, RawRobotState, RobotIdentity
from .protocol import build_headers, build_request, parse_response

_LOGGER = logging.getLogger(__name__)

AUTH_FAILURE_STATUSES = (401, 403)
TRANSIENT_STATUSES = (429, 500, 502, 503, 504)


def raise_for_status(status: int, reason: str | None, what: str) -> None:
    """Translate an HTTP status into the matching client error."""
    if 200 <= status < 300:
        return
    message = f"{what} failed: HTTP {status} {reason or ''}".rstrip()
    if status in AUTH_FAILURE_STATUSES:
        raise AuthError(message)
    if status in TRANSIENT_STATUSES or status >= 500:
        raise TransportError(message)
    raise ProtocolError(message)


class BotvacClient:
    """Async client for the signed per-robot command endpoint.

    One instance serves every robot of an account; it holds no credentials
    of its own, each request is signed with the robot's secret.

    Usage:
        async with aiohttp.ClientSession() as session:
            client = BotvacClient(session)
            state = await client.get_state(robot)
            await client.send_command(robot, "pauseCleaning")
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self._session = session
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._request_ids: dict[str, Iterator[int]] = {}

    def next_request_id(self, robot: RobotIdentity) -> int:
        """Return the next request id for a robot (strictly increasing)."""
        counter = self._request_ids.setdefault(robot.serial, itertools.count(1))
        return next(counter)

    @staticmethod
    def messages_url(robot: RobotIdentity) -> str:
        return robot.nucleo_url + ROBOT_MESSAGES_PATH.format(serial=robot.serial)

    async def _request(
        self,
        robot: RobotIdentity,
        command: str,
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Sign and POST one command, returning the decoded response.

        Raises:
            TransportError: On network failure, timeout, 429 or 5xx.
            AuthError: On 401/403, the robot secret was rejected.
            ProtocolError: On any other HTTP error or a non-JSON body.
        """
        req_id = self.next_request_id(robot)
        body = build_request(req_id, command, params)
        headers = build_headers(robot.serial, robot.secret, body)

        _LOGGER.debug("%s: sending %s (reqId=%d)", robot.name, command, req_id)
        try:
            async with self._session.post(
                self.messages_url(robot),
                data=body,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                status = resp.status
                reason = resp.reason
                text = await resp.text()
        except asyncio.TimeoutError as err:
            raise TransportError(f"{robot.name}: {command} timed out") from err
        except aiohttp.ClientError as err:
            raise TransportError(f"{robot.name}: {command} failed: {err}") from err
        except UnicodeDecodeError as err:
            raise ProtocolError(f"{robot.name}: {command} response is not valid text") from err

        if not 200 <= status < 300:
            _LOGGER.warning(
                "%s: %s (reqId=%d) returned HTTP %d %s",
                robot.name, command, req_id, status, reason,
            )
        raise_for_status(status, reason, f"{robot.name}: {command}")
        return parse_response(text)

    async def get_state(self, robot: RobotIdentity) -> RawRobotState:
        """Fetch the robot's current state snapshot."""
        payload = await self._request(robot, CMD_GET_ROBOT_STATE)
        return RawRobotState.from_response(payload)

    async def send_command(
        self,
        robot: RobotIdentity,
        command: str,
        params: Mapping[str, Any] | None = None,
    ) -> CommandResponse:
        """Send a command to the robot.

        The response only says whether the command was accepted; the robot
        changes state afterwards, so callers poll to observe the effect.
        """
        payload = await self._request(robot, command, params)
        response = CommandResponse.from_response(payload)
        if not response.success:
            _LOGGER.debug("%s: %s rejected with %r", robot.name, command, response.result)
        return response
