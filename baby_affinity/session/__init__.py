"""Selection session: presenting rounds and applying the user's picks."""

from baby_affinity.session.constants import DEFAULT_MAX_SELECTIONS
from baby_affinity.session.models import NameUpdateOutcome, SubmitResult
from baby_affinity.session.session import SelectionSession
from baby_affinity.session.state_machine import (
    SessionState,
    SessionStateError,
    SessionStateMachine,
)


__all__ = [
    "DEFAULT_MAX_SELECTIONS",
    "NameUpdateOutcome",
    "SelectionSession",
    "SessionState",
    "SessionStateError",
    "SessionStateMachine",
    "SubmitResult",
]
