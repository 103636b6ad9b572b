"""Preflight arm/consume gate.

Background endpoints (the tooling query API) are polled by the host for its
own purposes; only the ones the user triggered are preceded by a metadata
preflight. The preflight and the data request share no identifier, so the
correlation is purely temporal: a preflight arms the gate for its endpoint
family and the next data response from that family consumes it.

Scope is per endpoint family, not per query. Two interleaved user actions
on the same family can therefore steal each other's arming; the host issues
them sequentially in practice.
"""

from __future__ import annotations

import logging

from ..core.enums import GateState

logger = logging.getLogger(__name__)


class PreflightGate:
    """Two-state FSM per endpoint family: IDLE -> ARMED -> IDLE."""

    def __init__(self) -> None:
        self._states: dict[str, GateState] = {}

    def state(self, family: str) -> GateState:
        return self._states.get(family, GateState.IDLE)

    def arm(self, family: str) -> None:
        """Preflight seen: IDLE -> ARMED (re-arming an armed gate is a no-op)."""
        self._states[family] = GateState.ARMED
        logger.debug("Preflight gate armed", extra={"family": family})

    def consume(self, family: str) -> bool:
        """Qualifying data response seen.

        Returns:
            True if the gate was ARMED (it is now IDLE), False otherwise
        """
        if self.state(family) != GateState.ARMED:
            return False
        self._states[family] = GateState.IDLE
        logger.debug("Preflight gate consumed", extra={"family": family})
        return True

    def reset(self) -> None:
        self._states.clear()
