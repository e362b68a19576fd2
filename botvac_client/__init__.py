"""Botvac robot vacuum client library for the cloud command and account APIs."""

from .account import BotvacAccount, OAuthSession, PasswordSession
from .cache import StateCache
from .client import BotvacClient
from .const import NavigationMode, RobotAction, RobotState, VacuumStatus
from .controller import RobotController
from .exceptions import (
    AuthError,
    BotvacError,
    CannotDock,
    DockTimeout,
    InvalidTransition,
    PollFailure,
    ProtocolError,
    RobotNotFound,
    TransportError,
)
from .mapper import map_state
from .models import (
    AvailableCommands,
    CleaningSettings,
    CommandResponse,
    DerivedState,
    RawRobotState,
    RobotDetails,
    RobotIdentity,
)
from .scheduler import PollScheduler, RobotHost

__all__ = [
    "AuthError",
    "AvailableCommands",
    "BotvacAccount",
    "BotvacClient",
    "BotvacError",
    "CannotDock",
    "CleaningSettings",
    "CommandResponse",
    "DerivedState",
    "DockTimeout",
    "InvalidTransition",
    "NavigationMode",
    "OAuthSession",
    "PasswordSession",
    "PollFailure",
    "PollScheduler",
    "ProtocolError",
    "RawRobotState",
    "RobotAction",
    "RobotController",
    "RobotDetails",
    "RobotHost",
    "RobotIdentity",
    "RobotNotFound",
    "RobotState",
    "StateCache",
    "TransportError",
    "VacuumStatus",
    "map_state",
]
