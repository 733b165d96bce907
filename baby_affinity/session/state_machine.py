"""Selection session lifecycle state machine."""

from enum import Enum
from typing import ClassVar

import structlog


logger = structlog.get_logger()


class SessionState(str, Enum):
    """Selection session states.

    State transitions:
        IDLE -> PRESENTING: A round was loaded
        PRESENTING -> PRESENTING: The round was replaced by a fresh one
        PRESENTING -> SUBMITTING: The user submitted the round
        SUBMITTING -> PRESENTING: Ratings applied, next round loaded
        SUBMITTING -> IDLE: Ratings applied, next round could not be loaded
    """

    IDLE = "IDLE"
    PRESENTING = "PRESENTING"
    SUBMITTING = "SUBMITTING"


class SessionStateError(Exception):
    """Raised when an invalid session state transition is attempted."""

    def __init__(self, from_state: SessionState, to_state: SessionState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid session state transition: {from_state.value} -> {to_state.value}"
        )


class SessionStateMachine:
    """State machine for one selection session.

    Enforces valid state transitions and logs invariant violations when
    invalid transitions are attempted.
    """

    VALID_TRANSITIONS: ClassVar[dict[SessionState, set[SessionState]]] = {
        SessionState.IDLE: {SessionState.PRESENTING},
        SessionState.PRESENTING: {SessionState.PRESENTING, SessionState.SUBMITTING},
        SessionState.SUBMITTING: {SessionState.PRESENTING, SessionState.IDLE},
    }

    def __init__(self, session_id: str) -> None:
        """Initialize the state machine in IDLE state.

        Args:
            session_id: Unique session identifier for logging.
        """
        self._session_id = session_id
        self._state = SessionState.IDLE
        self._log = logger.bind(session_id=session_id, component="session")

    @property
    def state(self) -> SessionState:
        """Get the current state."""
        return self._state

    @property
    def session_id(self) -> str:
        """Get the session ID."""
        return self._session_id

    def can_transition(self, to_state: SessionState) -> bool:
        """Check if a transition to the given state is valid.

        Args:
            to_state: The target state.

        Returns:
            True if the transition is valid, False otherwise.
        """
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: SessionState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            SessionStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.value,
                to_state=to_state.value,
            )
            raise SessionStateError(self._state, to_state)

        old_state = self._state
        self._state = to_state
        self._log.debug(
            "session_state_transition",
            from_state=old_state.value,
            to_state=to_state.value,
        )

    def is_idle(self) -> bool:
        """Check if no round is loaded."""
        return self._state == SessionState.IDLE

    def is_presenting(self) -> bool:
        """Check if a round is loaded and awaiting selections."""
        return self._state == SessionState.PRESENTING

    def is_submitting(self) -> bool:
        """Check if a round's ratings are being applied."""
        return self._state == SessionState.SUBMITTING
