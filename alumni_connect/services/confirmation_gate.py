"""Two-step guard around destructive actions (select, then confirm)."""
from __future__ import annotations

import logging
from enum import Enum
from typing import Awaitable, Callable, Generic, TypeVar

from .mutation_executor import MutationResult

logger = logging.getLogger(__name__)

TargetT = TypeVar("TargetT")


class GateState(str, Enum):
    IDLE = "idle"
    PENDING_CONFIRMATION = "pending_confirmation"
    EXECUTING = "executing"


class ConfirmationGate(Generic[TargetT]):
    """Holds the selected target until the user confirms or cancels.

    Confirming while the action is already running does nothing, and the gate
    always returns to ``IDLE`` with the selection cleared once the action
    settles, whether it succeeded or not. A failed action is not retried.
    """

    def __init__(self, action: Callable[[TargetT], Awaitable[MutationResult]]) -> None:
        self._action = action
        self.state = GateState.IDLE
        self.target: TargetT | None = None
        self.last_result: MutationResult | None = None

    @property
    def is_open(self) -> bool:
        return self.state is not GateState.IDLE

    @property
    def is_executing(self) -> bool:
        return self.state is GateState.EXECUTING

    def select(self, target: TargetT) -> bool:
        if self.state is GateState.EXECUTING:
            return False
        self.target = target
        self.last_result = None
        self.state = GateState.PENDING_CONFIRMATION
        return True

    def cancel(self) -> bool:
        if self.state is not GateState.PENDING_CONFIRMATION:
            return False
        self.target = None
        self.state = GateState.IDLE
        return True

    async def confirm(self) -> MutationResult | None:
        if self.state is not GateState.PENDING_CONFIRMATION or self.target is None:
            logger.debug("Ignoring confirm in state %s", self.state.value)
            return None
        target = self.target
        self.state = GateState.EXECUTING
        try:
            result = await self._action(target)
        finally:
            self.target = None
            self.state = GateState.IDLE
        self.last_result = result
        return result


__all__ = ["ConfirmationGate", "GateState"]
