"""
RiskAnalysisPipeline: detectors -> scorer -> report builder -> language safety.

One pipeline instance holds immutable configuration (weights, knowledge base,
deny-list, baseline snapshot) and its own thread pools. Records are analysed
independently: nothing computed for one record is visible to another, and a
failure is reported on that record's AnalysisRun only.

    with RiskAnalysisPipeline(weights=..., baselines=...) as pipeline:
        analysis = pipeline.analyze(record)            # raises ArgusError
        runs = pipeline.analyze_batch(records)          # never raises per record
"""
from __future__ import annotations

import concurrent.futures
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Mapping, Optional

import structlog

from ..common.errors import (
    AnalysisCancelled,
    AnalysisTimeout,
    ArgusError,
    BaselineUnavailable,
    ConfigurationError,
    DetectorError,
)
from ..config.knowledge_base import KnowledgeBase
from ..config.settings import PipelineSettings
from ..config.weights import WeightConfig
from ..detectors.base import Detector
from ..detectors.registry import build_detectors
from ..explain.language_safety import LanguageSafetyValidator
from ..explain.report_builder import ExplainabilityReportBuilder
from ..models.analysis import RiskAnalysis, RiskPattern
from ..models.record import ProcurementRecord
from ..scoring.scorer import RiskScorer
from ..services.baseline_service import HistoricalBaselineProvider, SqliteBaselineProvider
from .state_machine import AnalysisState, AnalysisStateMachine

logger = structlog.get_logger("argus.pipeline")


class TimeboxedBaselines:
    """
    Wraps a provider so every lookup returns within `timeout` seconds.

    A lookup that times out or raises BaselineUnavailable yields None, which
    detectors treat as "no baseline" and fall back to threshold-only logic.
    """

    def __init__(
        self,
        provider: HistoricalBaselineProvider,
        timeout: float,
        executor: concurrent.futures.Executor,
    ):
        self.provider = provider
        self.timeout = timeout
        self._executor = executor

    def _call(self, lookup: str, fn, *args):
        future = self._executor.submit(fn, *args)
        try:
            return future.result(timeout=self.timeout)
        except concurrent.futures.TimeoutError:
            future.cancel()
            logger.warning("baseline_lookup_timeout", lookup=lookup, timeout_seconds=self.timeout)
            return None
        except BaselineUnavailable as exc:
            logger.warning("baseline_unavailable", lookup=lookup, error=exc.message)
            return None

    def get_baseline(self, category, region, start_year=None, end_year=None):
        return self._call("baseline", self.provider.get_baseline, category, region, start_year, end_year)

    def get_vendor_awards(self, vendor_id, department_id, start, end):
        return self._call("vendor_awards", self.provider.get_vendor_awards, vendor_id, department_id, start, end)


@dataclass(frozen=True)
class AnalysisRun:
    """Outcome of one record: the report on success, the error otherwise."""

    tender_id: str
    states: tuple[AnalysisState, ...]
    analysis: Optional[RiskAnalysis] = None
    error: Optional[ArgusError] = None

    @property
    def ok(self) -> bool:
        return self.analysis is not None

    @property
    def final_state(self) -> AnalysisState:
        return self.states[-1]

    def to_dict(self) -> dict:
        return {
            "tender_id": self.tender_id,
            "status": self.final_state.value,
            "states": [s.value for s in self.states],
            "analysis": self.analysis.to_payload() if self.analysis is not None else None,
            "error": self.error.to_dict() if self.error is not None else None,
        }


class RiskAnalysisPipeline:
    def __init__(
        self,
        weights: Optional[WeightConfig | Mapping] = None,
        knowledge_base: Optional[KnowledgeBase] = None,
        baselines: Optional[HistoricalBaselineProvider] = None,
        settings: Optional[PipelineSettings] = None,
        deny_list: Optional[Iterable[str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings or PipelineSettings()
        if weights is None:
            weights = WeightConfig()
        elif not isinstance(weights, WeightConfig):
            weights = WeightConfig.from_mapping(weights)
        if knowledge_base is not None and not isinstance(knowledge_base, KnowledgeBase):
            raise ConfigurationError("knowledge_base must be a KnowledgeBase instance")
        self.weights = weights
        self.knowledge_base = knowledge_base or KnowledgeBase.default()

        self.validator = LanguageSafetyValidator(deny_list)
        self.validator.audit_templates()

        if baselines is None and self.settings.history_db is not None:
            baselines = SqliteBaselineProvider(self.settings.history_db)

        self.detectors: tuple[Detector, ...] = build_detectors(self.knowledge_base, self.settings)
        self.scorer = RiskScorer(self.weights, self.detectors)
        self.report_builder = ExplainabilityReportBuilder(clock=clock)

        pool_size = self.settings.detector_workers * self.settings.batch_workers
        self._detector_executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=pool_size, thread_name_prefix="argus-detector"
        )
        self._baseline_executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=pool_size, thread_name_prefix="argus-baseline"
        )
        self._batch_executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=self.settings.batch_workers, thread_name_prefix="argus-record"
        )
        self.baselines: Optional[TimeboxedBaselines] = None
        if baselines is not None:
            self.baselines = TimeboxedBaselines(
                baselines, self.settings.baseline_timeout_seconds, self._baseline_executor
            )

        logger.info(
            "pipeline_initialized",
            weights=self.weights.as_dict(),
            brand_names=len(self.knowledge_base.brand_names),
            restrictive_patterns=len(self.knowledge_base.restrictive_patterns),
            baselines=type(baselines).__name__ if baselines is not None else None,
            record_timeout_seconds=self.settings.record_timeout_seconds,
        )

    # -- lifecycle -------------------------------------------------------

    def close(self) -> None:
        self._batch_executor.shutdown(wait=True)
        self._detector_executor.shutdown(wait=True)
        self._baseline_executor.shutdown(wait=True)

    def __enter__(self) -> "RiskAnalysisPipeline":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -- single record ---------------------------------------------------

    def _run_detector(self, detector: Detector, record: ProcurementRecord) -> Optional[RiskPattern]:
        if not detector.is_applicable(record):
            return None
        try:
            return detector.detect(record, self.baselines)
        except ArgusError:
            raise
        except Exception as exc:
            raise DetectorError(
                f"{detector.pattern_type.value} detector failed: {exc}",
                details={"pattern_type": detector.pattern_type.value},
            ) from exc

    def _detect(self, record: ProcurementRecord, deadline: float) -> list[RiskPattern]:
        futures = [
            self._detector_executor.submit(self._run_detector, detector, record)
            for detector in self.detectors
        ]
        _, pending = concurrent.futures.wait(futures, timeout=max(0.0, deadline - time.monotonic()))
        if pending:
            for future in pending:
                future.cancel()
            raise AnalysisTimeout(
                f"Record {record.tender_id} exceeded {self.settings.record_timeout_seconds}s",
                details={
                    "tender_id": record.tender_id,
                    "timeout_seconds": self.settings.record_timeout_seconds,
                    "pending_detectors": len(pending),
                },
            )
        # futures are in registration order, whatever order they completed in
        return [p for p in (f.result() for f in futures) if p is not None]

    @staticmethod
    def _advance(machine: AnalysisStateMachine, state: AnalysisState, log) -> None:
        previous = machine.state
        machine.transition(state)
        log.debug("state_transition", from_state=previous.value, to_state=state.value)

    def execute(self, record: ProcurementRecord) -> AnalysisRun:
        """Analyse one record; record-level failures are returned, not raised."""
        machine = AnalysisStateMachine()
        log = logger.bind(tender_id=record.tender_id)
        started = time.monotonic()
        deadline = started + self.settings.record_timeout_seconds

        try:
            self._advance(machine, AnalysisState.DETECTING, log)
            patterns = self._detect(record, deadline)

            self._advance(machine, AnalysisState.SCORING, log)
            scoring = self.scorer.score(patterns)

            self._advance(machine, AnalysisState.EXPLAINING, log)
            draft = self.report_builder.build(record, scoring)

            self._advance(machine, AnalysisState.VALIDATING, log)
            self.validator.validate_report(draft)

            self._advance(machine, AnalysisState.DONE, log)
        except ArgusError as exc:
            failed_in = machine.state
            machine.fail()
            log.warning(
                "analysis_failed",
                state=failed_in.value,
                error_code=exc.error_code,
                retryable=exc.retryable,
                error=exc.message,
            )
            return AnalysisRun(tender_id=record.tender_id, states=tuple(machine.history), error=exc)

        log.info(
            "analysis_completed",
            overall_risk_score=round(draft.analysis.overall_risk_score, 2),
            risk_level=draft.analysis.risk_level.value,
            patterns=[p.pattern_type.value for p in draft.analysis.risk_patterns],
            duration_ms=round((time.monotonic() - started) * 1000, 1),
        )
        return AnalysisRun(tender_id=record.tender_id, states=tuple(machine.history), analysis=draft.analysis)

    def analyze(self, record: ProcurementRecord) -> RiskAnalysis:
        """Analyse one record, raising the ArgusError if it fails."""
        run = self.execute(record)
        if run.error is not None:
            raise run.error
        return run.analysis

    # -- batch -----------------------------------------------------------

    def _execute_unless_cancelled(
        self, record: ProcurementRecord, cancel_event: threading.Event
    ) -> AnalysisRun:
        if cancel_event.is_set():
            machine = AnalysisStateMachine()
            machine.fail()
            return AnalysisRun(
                tender_id=record.tender_id,
                states=tuple(machine.history),
                error=AnalysisCancelled(
                    f"Batch cancelled before record {record.tender_id} started",
                    details={"tender_id": record.tender_id},
                ),
            )
        return self.execute(record)

    def analyze_batch(
        self,
        records: Iterable[ProcurementRecord],
        cancel_event: Optional[threading.Event] = None,
    ) -> list[AnalysisRun]:
        """
        Analyse records in parallel; results are in input order.

        Setting cancel_event stops records that have not started yet (they
        fail with AnalysisCancelled); records already running finish normally.
        """
        records = list(records)
        cancel_event = cancel_event or threading.Event()
        futures = [
            self._batch_executor.submit(self._execute_unless_cancelled, record, cancel_event)
            for record in records
        ]

        runs: list[AnalysisRun] = []
        for record, future in zip(records, futures):
            try:
                runs.append(future.result())
            except Exception as exc:
                logger.exception("analysis_crashed", tender_id=record.tender_id)
                machine = AnalysisStateMachine()
                machine.fail()
                runs.append(
                    AnalysisRun(
                        tender_id=record.tender_id,
                        states=tuple(machine.history),
                        error=ArgusError(f"Unexpected error: {exc}", details={"tender_id": record.tender_id}),
                    )
                )

        logger.info(
            "batch_completed",
            records=len(runs),
            succeeded=sum(1 for r in runs if r.ok),
            failed=sum(1 for r in runs if not r.ok),
            cancelled=sum(1 for r in runs if isinstance(r.error, AnalysisCancelled)),
        )
        return runs
