"""Unit tests for PreflightGate."""

from sfdc.capture.core import GateState
from sfdc.capture.runtime import PreflightGate


class TestPreflightGate:
    """Test the arm/consume state machine."""

    def test_initial_state_idle(self):
        """Unknown families start idle and cannot be consumed."""
        gate = PreflightGate()
        assert gate.state("tooling") == GateState.IDLE
        assert gate.consume("tooling") is False

    def test_arm_then_consume_once(self):
        """One arming admits exactly one consumption."""
        gate = PreflightGate()
        gate.arm("tooling")
        assert gate.state("tooling") == GateState.ARMED

        assert gate.consume("tooling") is True
        assert gate.state("tooling") == GateState.IDLE
        assert gate.consume("tooling") is False

    def test_rearm_is_idempotent(self):
        """Two preflights in a row still admit one data response."""
        gate = PreflightGate()
        gate.arm("tooling")
        gate.arm("tooling")

        assert gate.consume("tooling") is True
        assert gate.consume("tooling") is False

    def test_families_are_independent(self):
        """Arming one family does not admit another."""
        gate = PreflightGate()
        gate.arm("tooling")

        assert gate.consume("query") is False
        assert gate.state("tooling") == GateState.ARMED

    def test_reset(self):
        """reset() returns every family to idle."""
        gate = PreflightGate()
        gate.arm("tooling")
        gate.reset()
        assert gate.state("tooling") == GateState.IDLE
