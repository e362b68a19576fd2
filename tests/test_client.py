"""Tests for botvac_client.client: the signed robot command API."""

from __future__ import annotations

import asyncio
import json

import aiohttp
import pytest

from conftest import FakeResponse, FakeSession, state_payload

from botvac_client.client import BotvacClient, raise_for_status
from botvac_client.const import RobotState
from botvac_client.exceptions import AuthError, ProtocolError, TransportError
from botvac_client.models import RobotIdentity
from botvac_client.protocol import sign_request


class TestRaiseForStatus:
    """Tests for HTTP status mapping."""

    @pytest.mark.parametrize("status", [200, 201, 204])
    def test_success(self, status: int) -> None:
        raise_for_status(status, "OK", "getRobotState")

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth(self, status: int) -> None:
        with pytest.raises(AuthError):
            raise_for_status(status, "Unauthorized", "getRobotState")

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504, 599])
    def test_transient(self, status: int) -> None:
        with pytest.raises(TransportError):
            raise_for_status(status, "Busy", "getRobotState")

    @pytest.mark.parametrize("status", [400, 404, 422])
    def test_other(self, status: int) -> None:
        with pytest.raises(ProtocolError, match=str(status)):
            raise_for_status(status, None, "getRobotState")


class TestBotvacClient:
    """Tests for BotvacClient requests."""

    def test_messages_url(self, robot: RobotIdentity) -> None:
        assert BotvacClient.messages_url(robot) == (
            f"https://nucleo.neatocloud.com:4443/vendors/neato/robots/{robot.serial}/messages"
        )

    def test_get_state(self, robot: RobotIdentity) -> None:
        session = FakeSession(FakeResponse(200, state_payload(state=2, action=1, charge=50)))
        client = BotvacClient(session)
        state = asyncio.run(client.get_state(robot))
        assert state.state == RobotState.BUSY
        assert state.details.charge == 50

        call = session.calls[0]
        assert call["method"] == "POST"
        assert call["url"] == BotvacClient.messages_url(robot)
        assert json.loads(call["data"]) == {"reqId": "1", "cmd": "getRobotState"}

    def test_request_is_signed(self, robot: RobotIdentity) -> None:
        session = FakeSession(FakeResponse(200, state_payload()))
        client = BotvacClient(session)
        asyncio.run(client.get_state(robot))
        call = session.calls[0]
        headers = call["headers"]
        expected = sign_request(robot.serial, robot.secret, headers["X-Date"], call["data"])
        assert headers["Authorization"] == f"NEATOAPP {expected}"

    def test_request_ids_increase_per_robot(self, robot: RobotIdentity) -> None:
        other = RobotIdentity(name="Upstairs", serial="OPS99999", secret="x")
        client = BotvacClient(FakeSession())
        assert [client.next_request_id(robot) for _ in range(3)] == [1, 2, 3]
        assert client.next_request_id(other) == 1
        assert client.next_request_id(robot) == 4

    def test_send_command(self, robot: RobotIdentity) -> None:
        session = FakeSession(FakeResponse(200, {"version": 1, "reqId": "1", "result": "ok"}))
        client = BotvacClient(session)
        response = asyncio.run(
            client.send_command(robot, "startCleaning", {"category": 2})
        )
        assert response.success
        body = json.loads(session.calls[0]["data"])
        assert body["cmd"] == "startCleaning"
        assert body["params"] == {"category": 2}

    def test_send_command_rejected(self, robot: RobotIdentity) -> None:
        session = FakeSession(FakeResponse(200, {"result": "not_on_charge_base"}))
        client = BotvacClient(session)
        response = asyncio.run(client.send_command(robot, "sendToBase"))
        assert not response.success
        assert response.result == "not_on_charge_base"

    def test_connection_error(self, robot: RobotIdentity) -> None:
        client = BotvacClient(FakeSession(aiohttp.ClientConnectionError("refused")))
        with pytest.raises(TransportError):
            asyncio.run(client.get_state(robot))

    def test_timeout(self, robot: RobotIdentity) -> None:
        client = BotvacClient(FakeSession(asyncio.TimeoutError()))
        with pytest.raises(TransportError, match="timed out"):
            asyncio.run(client.get_state(robot))

    def test_unauthorized(self, robot: RobotIdentity) -> None:
        client = BotvacClient(FakeSession(FakeResponse(403, "", reason="Forbidden")))
        with pytest.raises(AuthError):
            asyncio.run(client.get_state(robot))

    def test_server_error(self, robot: RobotIdentity) -> None:
        client = BotvacClient(FakeSession(FakeResponse(503, "", reason="Unavailable")))
        with pytest.raises(TransportError):
            asyncio.run(client.get_state(robot))

    def test_not_json(self, robot: RobotIdentity) -> None:
        client = BotvacClient(FakeSession(FakeResponse(200, "<html></html>")))
        with pytest.raises(ProtocolError):
            asyncio.run(client.get_state(robot))

    def test_bad_state_schema(self, robot: RobotIdentity) -> None:
        client = BotvacClient(FakeSession(FakeResponse(200, {"result": "ok"})))
        with pytest.raises(ProtocolError):
            asyncio.run(client.get_state(robot))

    def test_undecodable_body(self, robot: RobotIdentity) -> None:
        client = BotvacClient(FakeSession(FakeResponse(200, b'{"state":\xff}')))
        with pytest.raises(ProtocolError, match="not valid text"):
            asyncio.run(client.get_state(robot))
