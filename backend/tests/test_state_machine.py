"""
Tests for the per-record analysis state machine.
"""
import pytest

from argus.pipeline import AnalysisState, AnalysisStateMachine

HAPPY_PATH = [
    AnalysisState.DETECTING,
    AnalysisState.SCORING,
    AnalysisState.EXPLAINING,
    AnalysisState.VALIDATING,
    AnalysisState.DONE,
]


class TestAnalysisStateMachine:

    def test_happy_path(self):
        machine = AnalysisStateMachine()
        for state in HAPPY_PATH:
            machine.transition(state)
        assert machine.history == [AnalysisState.RECEIVED, *HAPPY_PATH]
        assert machine.is_terminal

    def test_states_cannot_be_skipped(self):
        machine = AnalysisStateMachine()
        with pytest.raises(ValueError):
            machine.transition(AnalysisState.SCORING)
        assert machine.state == AnalysisState.RECEIVED

    @pytest.mark.parametrize("steps", range(len(HAPPY_PATH)))
    def test_can_fail_from_any_running_state(self, steps):
        machine = AnalysisStateMachine()
        for state in HAPPY_PATH[:steps]:
            machine.transition(state)
        machine.fail()
        assert machine.state == AnalysisState.FAILED
        assert machine.history[-1] == AnalysisState.FAILED

    def test_done_is_terminal(self):
        machine = AnalysisStateMachine()
        for state in HAPPY_PATH:
            machine.transition(state)
        machine.fail()
        assert machine.state == AnalysisState.DONE
        assert not machine.can_transition(AnalysisState.DONE, AnalysisState.FAILED)

    def test_failed_is_terminal(self):
        machine = AnalysisStateMachine()
        machine.fail()
        with pytest.raises(ValueError):
            machine.transition(AnalysisState.DETECTING)
