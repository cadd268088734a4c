"""Per-record orchestration and batch execution."""
from .pipeline import AnalysisRun, RiskAnalysisPipeline, TimeboxedBaselines
from .state_machine import AnalysisState, AnalysisStateMachine

__all__ = [
    "AnalysisRun",
    "AnalysisState",
    "AnalysisStateMachine",
    "RiskAnalysisPipeline",
    "TimeboxedBaselines",
]
