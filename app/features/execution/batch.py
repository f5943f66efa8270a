"""Sequential test-case runner.

A batch walks ``IDLE -> DISPATCHING(i) -> RECORDING(i) -> PACING ->
DISPATCHING(i+1) -> ... -> COMPLETED``. Exactly one remote call is in flight
at any time, and a failed call only marks its own test case as failed.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence

from .comparison import compare_outputs
from .errors import ExecutionError
from .languages import LanguageDescriptor
from .pacing import Pacer
from .schemas import BatchSummary, TestCaseResult, TestCaseIn
from .service import ExecutionOutcome, ExecutionRequest

FAILED_CALL_ERROR = "Execution failed"
FAILED_CALL_STATUS = 500

logger = logging.getLogger(__name__)


class ExecutionClient(Protocol):
    async def run(self, request: ExecutionRequest, timeout_s: Optional[float] = None) -> ExecutionOutcome:
        ...


class BatchState(str, enum.Enum):
    IDLE = "idle"
    DISPATCHING = "dispatching"
    RECORDING = "recording"
    PACING = "pacing"
    COMPLETED = "completed"


@dataclass(frozen=True)
class TestCase:
    __test__ = False

    index: int
    input: str = ""
    expected_output: str = ""


@dataclass
class BatchReport:
    results: List[TestCaseResult]
    summary: BatchSummary


@dataclass
class _Progress:
    state: BatchState = BatchState.IDLE
    current: int = 0
    history: List[BatchState] = field(default_factory=list)


def to_test_cases(items: Sequence[TestCaseIn]) -> List[TestCase]:
    return [
        TestCase(index=i, input=item.input or "", expected_output=item.expected_output or "")
        for i, item in enumerate(items, start=1)
    ]


def summarize(results: Sequence[TestCaseResult]) -> BatchSummary:
    total = len(results)
    passed = sum(1 for r in results if r.passed)
    rate = round(passed / total * 100, 2) if total > 0 else 0
    return BatchSummary(
        total_tests=total,
        passed_tests=passed,
        failed_tests=total - passed,
        success_rate=rate,
    )


class BatchCoordinator:
    def __init__(
        self,
        client: ExecutionClient,
        pacer: Optional[Pacer] = None,
        comparator: Callable[[str, str], bool] = compare_outputs,
    ) -> None:
        self.client = client
        self.pacer = pacer or Pacer()
        self.comparator = comparator
        self._progress = _Progress()

    @property
    def state(self) -> BatchState:
        return self._progress.state

    @property
    def transitions(self) -> List[BatchState]:
        return list(self._progress.history)

    def _enter(self, state: BatchState, index: int = 0) -> None:
        self._progress.state = state
        self._progress.current = index
        self._progress.history.append(state)

    async def run_batch(
        self,
        language: LanguageDescriptor,
        source: str,
        test_cases: Sequence[TestCase],
    ) -> BatchReport:
        self._progress = _Progress()
        self._enter(BatchState.IDLE)
        total = len(test_cases)
        results: List[TestCaseResult] = []

        for case in test_cases:
            if self.pacer.should_wait(case.index, total):
                self._enter(BatchState.PACING, case.index)
                await self.pacer.wait_between(case.index, total)

            self._enter(BatchState.DISPATCHING, case.index)
            request = ExecutionRequest(language=language, source=source, stdin=case.input)
            try:
                outcome = await self.client.run(request)
            except ExecutionError as exc:
                logger.warning(
                    "test case %d/%d failed language=%s kind=%s",
                    case.index,
                    total,
                    language.key,
                    exc.kind,
                )
                self._enter(BatchState.RECORDING, case.index)
                results.append(self._failed_result(case))
                continue

            self._enter(BatchState.RECORDING, case.index)
            results.append(self._recorded_result(case, outcome))

        self._enter(BatchState.COMPLETED)
        summary = summarize(results)
        logger.info(
            "batch completed language=%s total=%d passed=%d",
            language.key,
            summary.total_tests,
            summary.passed_tests,
        )
        return BatchReport(results=results, summary=summary)

    def _recorded_result(self, case: TestCase, outcome: ExecutionOutcome) -> TestCaseResult:
        actual = outcome.stdout.strip()
        expected = case.expected_output.strip()
        return TestCaseResult(
            index=case.index,
            input=case.input,
            expected_output=expected,
            actual_output=actual,
            passed=self.comparator(actual, expected),
            error=outcome.stderr,
            memory_used=outcome.memory_used,
            cpu_time=outcome.cpu_time,
            status_code=outcome.status_code,
        )

    @staticmethod
    def _failed_result(case: TestCase) -> TestCaseResult:
        return TestCaseResult(
            index=case.index,
            input=case.input,
            expected_output=case.expected_output,
            actual_output="",
            passed=False,
            error=FAILED_CALL_ERROR,
            memory_used="",
            cpu_time="",
            status_code=FAILED_CALL_STATUS,
        )


__all__ = [
    "BatchCoordinator",
    "BatchReport",
    "BatchState",
    "TestCase",
    "summarize",
    "to_test_cases",
    "FAILED_CALL_ERROR",
    "FAILED_CALL_STATUS",
]
