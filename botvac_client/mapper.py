"""Translate raw robot state into the status surfaced to the host."""

from __future__ import annotations

from .const import ERRORS, RESULT_OK, RobotAction, RobotState, VacuumStatus
from .models import DerivedState, RawRobotState


def error_message(state: RawRobotState) -> str:
    """Return a readable message for the robot's current error."""
    if state.error:
        return ERRORS.get(state.error, state.error)
    if state.alert:
        return ERRORS.get(state.alert, state.alert)
    return "Robot reported an error"


def is_hard_error(state: RawRobotState) -> bool:
    """True when the robot is in ERROR and the request itself did not succeed.

    Some firmware reports state ERROR with a benign error text while the
    result is "ok"; that is not treated as an error.
    """
    return state.state == RobotState.ERROR and state.result.lower() != RESULT_OK


def map_state(state: RawRobotState) -> DerivedState:
    """Derive the host status from a raw snapshot.

    First match wins: hard error, charging, docked, spot cleaning, any
    other busy action, stopped. Charging beats docked, and docked beats
    stopped.
    """
    battery = state.details.charge

    if is_hard_error(state):
        return DerivedState(VacuumStatus.STOPPED, battery, error_message(state))
    if state.details.is_charging:
        return DerivedState(VacuumStatus.CHARGING, battery)
    if state.details.is_docked:
        return DerivedState(VacuumStatus.DOCKED, battery)
    if state.state == RobotState.BUSY:
        if state.action == RobotAction.SPOT_CLEANING:
            return DerivedState(VacuumStatus.SPOT_CLEANING, battery)
        return DerivedState(VacuumStatus.CLEANING, battery)
    return DerivedState(VacuumStatus.STOPPED, battery)
