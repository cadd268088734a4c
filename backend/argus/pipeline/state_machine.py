"""Per-record analysis lifecycle."""
from __future__ import annotations

from enum import Enum
from typing import Mapping


class AnalysisState(str, Enum):
    RECEIVED = "RECEIVED"
    DETECTING = "DETECTING"
    SCORING = "SCORING"
    EXPLAINING = "EXPLAINING"
    VALIDATING = "VALIDATING"
    DONE = "DONE"
    FAILED = "FAILED"


TERMINAL_STATES = frozenset({AnalysisState.DONE, AnalysisState.FAILED})


class AnalysisStateMachine:
    """
    RECEIVED -> DETECTING -> SCORING -> EXPLAINING -> VALIDATING -> DONE,
    or FAILED from any non-terminal state. One instance tracks one record.
    """

    transitions: Mapping[AnalysisState, tuple[AnalysisState, ...]] = {
        AnalysisState.RECEIVED: (AnalysisState.DETECTING, AnalysisState.FAILED),
        AnalysisState.DETECTING: (AnalysisState.SCORING, AnalysisState.FAILED),
        AnalysisState.SCORING: (AnalysisState.EXPLAINING, AnalysisState.FAILED),
        AnalysisState.EXPLAINING: (AnalysisState.VALIDATING, AnalysisState.FAILED),
        AnalysisState.VALIDATING: (AnalysisState.DONE, AnalysisState.FAILED),
        AnalysisState.DONE: (),
        AnalysisState.FAILED: (),
    }

    def __init__(self):
        self.state = AnalysisState.RECEIVED
        self.history: list[AnalysisState] = [AnalysisState.RECEIVED]

    def can_transition(self, current: AnalysisState, target: AnalysisState) -> bool:
        allowed = self.transitions.get(current, ())
        return target in allowed

    def transition(self, target: AnalysisState) -> AnalysisState:
        if not self.can_transition(self.state, target):
            raise ValueError(f"invalid transition from {self.state.value} to {target.value}")
        self.state = target
        self.history.append(target)
        return target

    def fail(self) -> AnalysisState:
        """Move to FAILED unless already terminal."""
        if self.state not in TERMINAL_STATES:
            self.transition(AnalysisState.FAILED)
        return self.state

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES
