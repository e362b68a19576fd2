"""Shared test fixtures for Botvac client tests."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable, Mapping
from typing import Any

import pytest

from botvac_client.models import CommandResponse, RawRobotState, RobotIdentity

SERIAL = "OPS01234-0123456789AB"
SECRET = "0123456789abcdef0123456789abcdef"


def state_payload(
    *,
    state: int = 1,
    action: int = 0,
    result: str = "ok",
    error: str | None = None,
    alert: str | None = None,
    charging: bool = False,
    docked: bool = False,
    charge: Any = 80,
    start: bool = False,
    stop: bool = False,
    pause: bool = False,
    resume: bool = False,
    go_to_base: bool = False,
) -> dict[str, Any]:
    """A getRobotState response body as the cloud returns it."""
    return {
        "version": 1,
        "reqId": "1",
        "result": result,
        "error": error,
        "alert": alert,
        "state": state,
        "action": action,
        "details": {
            "isCharging": charging,
            "isDocked": docked,
            "isScheduleEnabled": False,
            "dockHasBeenSeen": docked,
            "charge": charge,
        },
        "availableCommands": {
            "start": start,
            "stop": stop,
            "pause": pause,
            "resume": resume,
            "goToBase": go_to_base,
        },
        "meta": {"modelName": "BotVacConnected", "firmware": "4.5.3-189"},
    }


class FakeClient:
    """Stands in for BotvacClient.

    ``states`` is consumed in order; the last item repeats. Exceptions in
    it are raised. Setting ``gate`` to an asyncio.Event holds get_state
    until the event is set.
    """

    def __init__(self, *states: RawRobotState | Exception) -> None:
        self.states: list[RawRobotState | Exception] = list(states)
        self.results: dict[str, str] = {}
        self.get_calls = 0
        self.commands: list[tuple[str, Mapping[str, Any] | None]] = []
        self.gate: asyncio.Event | None = None

    async def get_state(self, robot: RobotIdentity) -> RawRobotState:
        self.get_calls += 1
        if self.gate is not None:
            await self.gate.wait()
        item = self.states.pop(0) if len(self.states) > 1 else self.states[0]
        if isinstance(item, Exception):
            raise item
        return item

    async def send_command(
        self,
        robot: RobotIdentity,
        command: str,
        params: Mapping[str, Any] | None = None,
    ) -> CommandResponse:
        self.commands.append((command, params))
        return CommandResponse(result=self.results.get(command, "ok"))


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    """Minimal aiohttp response used as an async context manager."""

    def __init__(self, status: int = 200, body: Any = None, reason: str = "OK") -> None:
        self.status = status
        self.reason = reason
        if body is None:
            self._body = b""
        elif isinstance(body, bytes):
            self._body = body
        elif isinstance(body, str):
            self._body = body.encode()
        else:
            self._body = json.dumps(body).encode()

    async def text(self) -> str:
        # Decodes like aiohttp for a charset=utf-8 response.
        return self._body.decode("utf-8")

    async def __aenter__(self) -> FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


class FakeSession:
    """Records requests and replays queued responses (or raises them)."""

    def __init__(self, *responses: FakeResponse | Exception) -> None:
        self.responses: list[FakeResponse | Exception] = list(responses)
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self.request("POST", url, **kwargs)


@pytest.fixture
def robot() -> RobotIdentity:
    return RobotIdentity(name="Kitchen", serial=SERIAL, secret=SECRET)


@pytest.fixture
def make_state() -> Callable[..., RawRobotState]:
    """Factory for parsed robot states; takes the state_payload() keywords."""

    def _make(**kwargs: Any) -> RawRobotState:
        return RawRobotState.from_response(state_payload(**kwargs))

    return _make


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
