# launchpad/core/state_machine.py

from launchpad.core.errors import InvalidShutdownTransition
from launchpad.core.models import ShutdownState


ALLOWED_TRANSITIONS = {
    ShutdownState.RUNNING: {
        ShutdownState.DRAINING,
    },
    ShutdownState.DRAINING: {
        ShutdownState.TERMINATED,
    },
}


class ShutdownStateMachine:
    """Holds the current shutdown state and enforces one-way transitions."""

    def __init__(self, initial: ShutdownState = ShutdownState.RUNNING):
        self._state = initial

    @property
    def state(self) -> ShutdownState:
        return self._state

    def can_transition(self, new_state: ShutdownState) -> bool:
        return new_state in ALLOWED_TRANSITIONS.get(self._state, set())

    def transition(self, new_state: ShutdownState) -> ShutdownState:
        current = self._state

        if not self.can_transition(new_state):
            raise InvalidShutdownTransition(
                f"Cannot transition from {current.value} to {new_state.value}"
            )

        self._state = new_state
        return current

    def __repr__(self) -> str:
        return f"<ShutdownStateMachine(state={self._state.value})>"
