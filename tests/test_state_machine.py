#tests\test_state_machine.py

"""Test shutdown state transitions."""

import pytest

from launchpad.core.errors import InvalidShutdownTransition
from launchpad.core.models import ShutdownOutcome, ShutdownPath, ShutdownState
from launchpad.core.state_machine import ShutdownStateMachine


class TestShutdownStateMachine:
    """Test one-way lifecycle transitions."""

    @pytest.fixture
    def machine(self):
        return ShutdownStateMachine()

    def test_initial_state(self, machine):
        """Test machine starts RUNNING."""
        assert machine.state == ShutdownState.RUNNING

    def test_running_to_draining(self, machine):
        previous = machine.transition(ShutdownState.DRAINING)

        assert previous == ShutdownState.RUNNING
        assert machine.state == ShutdownState.DRAINING

    def test_draining_to_terminated(self, machine):
        machine.transition(ShutdownState.DRAINING)
        machine.transition(ShutdownState.TERMINATED)

        assert machine.state == ShutdownState.TERMINATED

    def test_cannot_skip_draining(self, machine):
        """Test RUNNING -> TERMINATED is rejected."""
        with pytest.raises(InvalidShutdownTransition):
            machine.transition(ShutdownState.TERMINATED)

    def test_cannot_return_to_running(self, machine):
        machine.transition(ShutdownState.DRAINING)

        with pytest.raises(InvalidShutdownTransition):
            machine.transition(ShutdownState.RUNNING)

    def test_cannot_reenter_draining(self, machine):
        machine.transition(ShutdownState.DRAINING)

        assert not machine.can_transition(ShutdownState.DRAINING)
        with pytest.raises(InvalidShutdownTransition):
            machine.transition(ShutdownState.DRAINING)

    def test_terminated_is_final(self, machine):
        machine.transition(ShutdownState.DRAINING)
        machine.transition(ShutdownState.TERMINATED)

        for state in ShutdownState:
            assert not machine.can_transition(state)


class TestShutdownOutcome:

    def test_clean_exit_code(self):
        outcome = ShutdownOutcome(ShutdownPath.CLEAN, "SIGTERM", 0.5)
        assert outcome.exit_code == 0
        assert not outcome.forced

    def test_forced_exit_code(self):
        outcome = ShutdownOutcome(ShutdownPath.FORCED, "SIGINT", 20.0)
        assert outcome.exit_code == 1
        assert outcome.forced
