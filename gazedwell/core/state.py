"""
Application screen state management.

Defines the screen sequence for GazeDwell with clear transitions.
"""

from enum import Enum, auto
from typing import Optional, Set
from dataclasses import dataclass


class ScreenState(Enum):
    """
    Application screens.

    State transitions:
        PERMISSION -> CALIBRATING -> DASHBOARD
        DASHBOARD -> CALIBRATING (recalibrate)
        CALIBRATING -> DASHBOARD (complete or skipped)
        CALIBRATING / DASHBOARD -> PERMISSION (stop tracking)
        Any -> ERROR -> PERMISSION
    """

    PERMISSION = auto()     # Tracking off, waiting for the user to enable it
    CALIBRATING = auto()    # Collecting calibration points
    DASHBOARD = auto()      # Pointer and dwell clicking active
    ERROR = auto()          # Tracker failure, requires user intervention


# Define valid state transitions
_VALID_TRANSITIONS: dict[ScreenState, Set[ScreenState]] = {
    ScreenState.PERMISSION: {
        ScreenState.CALIBRATING,
        ScreenState.ERROR,
    },
    ScreenState.CALIBRATING: {
        ScreenState.DASHBOARD,
        ScreenState.PERMISSION,
        ScreenState.ERROR,
    },
    ScreenState.DASHBOARD: {
        ScreenState.CALIBRATING,
        ScreenState.PERMISSION,
        ScreenState.ERROR,
    },
    ScreenState.ERROR: {
        ScreenState.PERMISSION,
    },
}


def is_valid_transition(from_state: ScreenState, to_state: ScreenState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Target state

    Returns:
        True if transition is allowed, False otherwise
    """
    # Same state is always valid (no-op)
    if from_state == to_state:
        return True

    return to_state in _VALID_TRANSITIONS.get(from_state, set())


@dataclass
class ErrorInfo:
    """Information about an error that occurred."""

    error_type: str
    message: str
    recoverable: bool = True
    details: Optional[str] = None


class StateMachine:
    """State machine for managing screen transitions."""

    def __init__(self, initial_state: ScreenState = ScreenState.PERMISSION):
        """
        Initialize state machine.

        Args:
            initial_state: Starting state (default: PERMISSION)
        """
        self._current_state = initial_state
        self._previous_state: Optional[ScreenState] = None
        self._error: Optional[ErrorInfo] = None

    @property
    def current_state(self) -> ScreenState:
        """Get current state."""
        return self._current_state

    @property
    def previous_state(self) -> Optional[ScreenState]:
        """Get previous state."""
        return self._previous_state

    @property
    def error(self) -> Optional[ErrorInfo]:
        """Get error information if in ERROR state."""
        return self._error

    def transition_to(self, new_state: ScreenState) -> bool:
        """
        Transition to a new state.

        Args:
            new_state: Target state

        Returns:
            True if transition succeeded, False if invalid
        """
        if not is_valid_transition(self._current_state, new_state):
            return False

        self._previous_state = self._current_state
        self._current_state = new_state

        # Clear error when leaving ERROR state
        if self._previous_state == ScreenState.ERROR and new_state != ScreenState.ERROR:
            self._error = None

        return True

    def set_error(self, error_info: ErrorInfo) -> bool:
        """
        Set error state with error information.

        Args:
            error_info: Information about the error

        Returns:
            True if transition to ERROR succeeded
        """
        self._error = error_info
        return self.transition_to(ScreenState.ERROR)

    def can_transition_to(self, new_state: ScreenState) -> bool:
        """Check if a transition would be valid without performing it."""
        return is_valid_transition(self._current_state, new_state)

    def reset(self):
        """Reset to PERMISSION, clearing error."""
        self._previous_state = self._current_state
        self._current_state = ScreenState.PERMISSION
        self._error = None
