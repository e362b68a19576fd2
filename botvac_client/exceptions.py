"""Exceptions raised by the Botvac client library."""

from __future__ import annotations


class BotvacError(Exception):
    """Base class for all Botvac client errors."""


class TransportError(BotvacError):
    """Raised on network failures, timeouts and transient HTTP errors."""


class AuthError(BotvacError):
    """Raised when the credential is invalid or expired.

    The caller must re-authenticate; requests are not retried.
    """


class ProtocolError(BotvacError):
    """Raised when a response does not match the expected schema."""


class InvalidTransition(BotvacError):
    """Raised when an intent is not legal in the robot's current state."""

    def __init__(self, intent: str, reason: str) -> None:
        super().__init__(f"Cannot {intent}: {reason}")
        self.intent = intent
        self.reason = reason


class CannotDock(InvalidTransition):
    """Raised when goToBase is not currently available."""

    def __init__(self, reason: str) -> None:
        super().__init__("dock", reason)


class DockTimeout(BotvacError):
    """Raised when the robot never became dockable within the retry bound."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"Could not dock after {attempts} tries")
        self.attempts = attempts


class PollFailure(BotvacError):
    """Wraps an error raised during background polling."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(str(cause) or type(cause).__name__)
        self.cause = cause


class RobotNotFound(BotvacError):
    """Raised when the account has no robot with the requested serial."""
