"""Tests for botvac_client.account: sessions and robot discovery."""

from __future__ import annotations

import asyncio

import pytest

from conftest import FakeClock, FakeResponse, FakeSession

from botvac_client.account import BotvacAccount, OAuthSession, PasswordSession
from botvac_client.exceptions import AuthError, ProtocolError, RobotNotFound

ROBOTS = [
    {
        "serial": "OPS01234",
        "secret_key": "abc",
        "name": "Kitchen",
        "model": "BotVacConnected",
        "nucleo_url": "https://nucleo.neatocloud.com:4443",
    },
    {"serial": "OPS56789", "secret_key": "def", "name": "Upstairs"},
]


def login_response(token: str = "tok1") -> FakeResponse:
    return FakeResponse(200, {"access_token": token, "current_time": "2026-10-19T08:00:00Z"})


class TestPasswordSession:
    """Tests for the e-mail and password login."""

    def test_requires_credentials(self) -> None:
        with pytest.raises(ValueError):
            PasswordSession(FakeSession(), "", "secret")
        with pytest.raises(ValueError):
            PasswordSession(FakeSession(), "me@example.com", "")

    def test_logs_in_on_first_request(self) -> None:
        session = FakeSession(login_response(), FakeResponse(200, ROBOTS))
        account = BotvacAccount(PasswordSession(session, "me@example.com", "secret"))
        robots = asyncio.run(account.get_robots())
        assert [robot.serial for robot in robots] == ["OPS01234", "OPS56789"]

        login, listing = session.calls
        assert login["method"] == "POST"
        assert login["url"] == "https://beehive.neatocloud.com/sessions"
        assert login["json"]["email"] == "me@example.com"
        assert login["json"]["password"] == "secret"
        assert len(login["json"]["token"]) == 64
        assert listing["method"] == "GET"
        assert listing["url"] == "https://beehive.neatocloud.com/users/me/robots"
        assert listing["headers"]["Authorization"] == "Token token=tok1"

    def test_token_is_reused(self) -> None:
        session = FakeSession(
            login_response(), FakeResponse(200, ROBOTS), FakeResponse(200, ROBOTS)
        )
        account = BotvacAccount(PasswordSession(session, "me@example.com", "secret"))

        async def run() -> None:
            await account.get_robots()
            await account.get_robots()

        asyncio.run(run())
        assert len(session.calls) == 3

    def test_reauthenticates_once_on_401(self) -> None:
        session = FakeSession(
            login_response("tok1"),
            FakeResponse(401, "", reason="Unauthorized"),
            login_response("tok2"),
            FakeResponse(200, ROBOTS),
        )
        account = BotvacAccount(PasswordSession(session, "me@example.com", "secret"))
        robots = asyncio.run(account.get_robots())
        assert len(robots) == 2
        assert session.calls[-1]["headers"]["Authorization"] == "Token token=tok2"

    def test_second_rejection_raises(self) -> None:
        session = FakeSession(
            login_response("tok1"),
            FakeResponse(401, "", reason="Unauthorized"),
            login_response("tok2"),
            FakeResponse(401, "", reason="Unauthorized"),
        )
        account = BotvacAccount(PasswordSession(session, "me@example.com", "secret"))
        with pytest.raises(AuthError):
            asyncio.run(account.get_robots())

    def test_wrong_password(self) -> None:
        session = FakeSession(FakeResponse(403, {"message": "Forbidden"}, reason="Forbidden"))
        account = BotvacAccount(PasswordSession(session, "me@example.com", "wrong"))
        with pytest.raises(AuthError):
            asyncio.run(account.get_robots())

    def test_undecodable_body(self) -> None:
        session = FakeSession(login_response(), FakeResponse(200, b"[\xff]"))
        account = BotvacAccount(PasswordSession(session, "me@example.com", "secret"))
        with pytest.raises(ProtocolError, match="not valid text"):
            asyncio.run(account.get_robots())

    def test_login_without_token(self) -> None:
        session = FakeSession(FakeResponse(200, {"current_time": "now"}))
        with pytest.raises(AuthError):
            asyncio.run(PasswordSession(session, "me@example.com", "secret").login())


class TestOAuthSession:
    """Tests for the OAuth2 bearer session."""

    def test_authorization_url(self) -> None:
        oauth = OAuthSession(FakeSession(), "client-id", "client-secret")
        url = oauth.authorization_url("https://example.com/cb", "control_robots")
        assert url.startswith("https://apps.neatorobotics.com/oauth2/authorize?")
        assert "client_id=client-id" in url
        assert "scope=control_robots" in url

    def test_valid_token_is_used(self) -> None:
        clock = FakeClock()
        session = FakeSession(FakeResponse(200, ROBOTS))
        oauth = OAuthSession(
            session, "client-id", "client-secret",
            token="bearer1", expires_at=clock.now + 100, clock=clock,
        )
        asyncio.run(BotvacAccount(oauth).get_robots())
        assert session.calls[0]["headers"]["Authorization"] == "Bearer bearer1"

    def test_expired_token_is_refreshed(self) -> None:
        clock = FakeClock()
        session = FakeSession(
            FakeResponse(
                200,
                {"access_token": "bearer2", "expires_in": 3600, "refresh_token": "refresh2"},
            ),
            FakeResponse(200, ROBOTS),
        )
        oauth = OAuthSession(
            session, "client-id", "client-secret",
            token="bearer1", refresh_token="refresh1", expires_at=clock.now - 1, clock=clock,
        )
        asyncio.run(BotvacAccount(oauth).get_robots())

        token_call, listing = session.calls
        assert token_call["url"] == "https://apps.neatorobotics.com/oauth2/token"
        assert token_call["data"]["grant_type"] == "refresh_token"
        assert token_call["data"]["refresh_token"] == "refresh1"
        assert listing["headers"]["Authorization"] == "Bearer bearer2"
        assert oauth.refresh_token == "refresh2"
        assert oauth.expires_at == clock.now + 3600 - 1

    def test_refresh_without_refresh_token(self) -> None:
        oauth = OAuthSession(FakeSession(), "client-id", "client-secret")
        with pytest.raises(AuthError):
            asyncio.run(oauth.authorization())

    def test_exchange_code(self) -> None:
        session = FakeSession(FakeResponse(200, {"access_token": "bearer1"}))
        oauth = OAuthSession(session, "client-id", "client-secret")
        asyncio.run(oauth.exchange_code("code1", "https://example.com/cb"))
        assert oauth.token == "bearer1"
        assert oauth.expires_at is None
        assert oauth.token_valid
        assert session.calls[0]["data"]["code"] == "code1"

    def test_bad_expires_in(self) -> None:
        session = FakeSession(FakeResponse(200, {"access_token": "t", "expires_in": "later"}))
        oauth = OAuthSession(session, "client-id", "client-secret")
        with pytest.raises(ProtocolError):
            asyncio.run(oauth.exchange_code("code1", "https://example.com/cb"))


class TestBotvacAccount:
    """Tests for robot discovery."""

    def _account(self, listing: object) -> BotvacAccount:
        session = FakeSession(login_response(), FakeResponse(200, listing))
        return BotvacAccount(PasswordSession(session, "me@example.com", "secret"))

    def test_skips_robots_without_secret(self) -> None:
        account = self._account([ROBOTS[0], {"serial": "OPS00000"}, {"secret_key": "x"}, "junk"])
        robots = asyncio.run(account.get_robots())
        assert [robot.serial for robot in robots] == ["OPS01234"]
        assert account.robots == robots

    def test_listing_must_be_a_list(self) -> None:
        account = self._account({"robots": ROBOTS})
        with pytest.raises(ProtocolError):
            asyncio.run(account.get_robots())

    def test_get_robot_by_serial(self) -> None:
        robot = asyncio.run(self._account(ROBOTS).get_robot("OPS56789"))
        assert robot.name == "Upstairs"

    def test_get_first_robot(self) -> None:
        robot = asyncio.run(self._account(ROBOTS).get_robot())
        assert robot.serial == "OPS01234"

    def test_robot_not_found(self) -> None:
        with pytest.raises(RobotNotFound):
            asyncio.run(self._account(ROBOTS).get_robot("OPS00000"))

    def test_no_robots(self) -> None:
        with pytest.raises(RobotNotFound):
            asyncio.run(self._account([]).get_robot())
