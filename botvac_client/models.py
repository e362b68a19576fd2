"""Data models for Botvac robots and their state."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .const import (
    DEFAULT_POLL_INTERVAL,
    MAX_POLL_INTERVAL,
    MIN_POLL_INTERVAL,
    NAVIGATION_MODES,
    NUCLEO_URL,
    RESULT_OK,
    SETTING_ECO_MODE,
    SETTING_NAVIGATION_MODE,
    SETTING_NO_GO_LINES,
    SETTING_POLL_INTERVAL,
    NavigationMode,
    RobotAction,
    RobotState,
    VacuumStatus,
)
from .exceptions import ProtocolError


@dataclass(frozen=True)
class RobotIdentity:
    """A paired robot, as listed by the account API."""

    name: str
    serial: str
    secret: str = field(repr=False)
    model: str = ""
    nucleo_url: str = NUCLEO_URL

    @classmethod
    def from_account(cls, data: Mapping[str, Any]) -> RobotIdentity:
        """Build from one item of the /users/me/robots listing."""
        return cls(
            name=str(data.get("name") or data["serial"]),
            serial=str(data["serial"]),
            secret=str(data["secret_key"]),
            model=str(data.get("model") or ""),
            nucleo_url=str(data.get("nucleo_url") or NUCLEO_URL).rstrip("/"),
        )


@dataclass(frozen=True)
class RobotDetails:
    """The "details" block of a robot state."""

    is_charging: bool = False
    is_docked: bool = False
    charge: int = 0
    is_schedule_enabled: bool = False


@dataclass(frozen=True)
class AvailableCommands:
    """Commands the robot currently accepts."""

    start: bool = False
    stop: bool = False
    pause: bool = False
    resume: bool = False
    go_to_base: bool = False


def _to_enum(enum_cls: type, value: Any, default: Any) -> Any:
    try:
        return enum_cls(int(value))
    except (ValueError, TypeError):
        return default


@dataclass(frozen=True)
class RawRobotState:
    """A getRobotState snapshot.

    Immutable once fetched; superseded by the next fetch.
    """

    state: RobotState = RobotState.INVALID
    action: RobotAction = RobotAction.NONE
    result: str = ""
    error: str | None = None
    alert: str | None = None
    details: RobotDetails = field(default_factory=RobotDetails)
    available_commands: AvailableCommands = field(default_factory=AvailableCommands)
    firmware: str = ""
    model_name: str = ""
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, payload: Any) -> RawRobotState:
        """Parse a decoded getRobotState response.

        Raises:
            ProtocolError: If required fields are missing or of the wrong type.
        """
        if not isinstance(payload, Mapping):
            raise ProtocolError(f"Robot state is not an object: {payload!r:.200}")

        state_code = payload.get("state")
        if isinstance(state_code, bool) or not isinstance(state_code, int):
            raise ProtocolError(f"Robot state has no integer 'state': {state_code!r}")

        details = payload.get("details")
        if not isinstance(details, Mapping):
            raise ProtocolError("Robot state has no 'details' object")

        commands = payload.get("availableCommands")
        if not isinstance(commands, Mapping):
            raise ProtocolError("Robot state has no 'availableCommands' object")

        try:
            charge = int(details.get("charge") or 0)
        except (ValueError, TypeError) as err:
            raise ProtocolError(f"Invalid battery charge: {details.get('charge')!r}") from err

        meta = payload.get("meta")
        if not isinstance(meta, Mapping):
            meta = {}

        error = payload.get("error")
        alert = payload.get("alert")

        return cls(
            state=_to_enum(RobotState, state_code, RobotState.INVALID),
            action=_to_enum(RobotAction, payload.get("action", 0), RobotAction.NONE),
            result=str(payload.get("result") or ""),
            error=str(error) if error else None,
            alert=str(alert) if alert else None,
            details=RobotDetails(
                is_charging=bool(details.get("isCharging")),
                is_docked=bool(details.get("isDocked")),
                charge=max(0, min(100, charge)),
                is_schedule_enabled=bool(details.get("isScheduleEnabled")),
            ),
            available_commands=AvailableCommands(
                start=bool(commands.get("start")),
                stop=bool(commands.get("stop")),
                pause=bool(commands.get("pause")),
                resume=bool(commands.get("resume")),
                go_to_base=bool(commands.get("goToBase")),
            ),
            firmware=str(meta.get("firmware") or ""),
            model_name=str(meta.get("modelName") or ""),
            raw=payload,
        )


@dataclass(frozen=True)
class CommandResponse:
    """Response envelope of a robot command."""

    result: str = ""
    data: Mapping[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.result.lower() == RESULT_OK

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> CommandResponse:
        data = payload.get("data")
        return cls(
            result=str(payload.get("result") or ""),
            data=data if isinstance(data, Mapping) else {},
        )


@dataclass
class CachedState:
    """A snapshot together with the time it was fetched."""

    snapshot: RawRobotState
    fetched_at: float
    ttl: float

    def is_valid(self, now: float) -> bool:
        return now < self.fetched_at + self.ttl


@dataclass(frozen=True)
class DerivedState:
    """Status surfaced to the host, derived from a RawRobotState."""

    status: VacuumStatus
    battery: int = 0
    error: str | None = None

    @property
    def unavailable(self) -> bool:
        """True when the robot reported an unrecoverable error."""
        return self.error is not None


@dataclass
class PollingHealth:
    """Failure bookkeeping of a PollScheduler."""

    consecutive_errors: int = 0
    current_interval: float = DEFAULT_POLL_INTERVAL


def clamp_poll_interval(value: Any) -> int:
    """Clamp a configured poll interval to the supported range.

    Non-numeric values fall back to the default.
    """
    try:
        seconds = int(value)
    except (ValueError, TypeError):
        return DEFAULT_POLL_INTERVAL
    return max(MIN_POLL_INTERVAL, min(MAX_POLL_INTERVAL, seconds))


@dataclass(frozen=True)
class CleaningSettings:
    """User preferences for polling and new cleaning runs."""

    poll_interval: int = DEFAULT_POLL_INTERVAL
    eco_mode: bool = False
    navigation_mode: NavigationMode = NavigationMode.NORMAL
    no_go_lines: bool = False

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> CleaningSettings:
        """Build from host settings, tolerating missing or bad values."""
        navigation = options.get(SETTING_NAVIGATION_MODE, NavigationMode.NORMAL)
        if isinstance(navigation, str):
            navigation = NAVIGATION_MODES.get(navigation, NavigationMode.NORMAL)
        else:
            navigation = _to_enum(NavigationMode, navigation, NavigationMode.NORMAL)

        return cls(
            poll_interval=clamp_poll_interval(
                options.get(SETTING_POLL_INTERVAL, DEFAULT_POLL_INTERVAL)
            ),
            eco_mode=bool(options.get(SETTING_ECO_MODE, False)),
            navigation_mode=navigation,
            no_go_lines=bool(options.get(SETTING_NO_GO_LINES, False)),
        )
