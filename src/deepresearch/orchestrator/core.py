"""
Deep research orchestrator.

The Orchestrator is the state machine that drives one research run:

    IDLE -> PLANNING -> SEARCHING -> ANALYZING -> COMPILING -> FINALIZING -> COMPLETE

with ERROR reachable from every non-terminal stage. It owns all mutable run
state (plan, accumulated sources and notes, current stage) and hands out
immutable snapshots: throttled ResearchProgress updates while running and a
single ResearchResult at the end.

Stages, areas and questions run strictly one after another. At most one run
is active per Orchestrator instance; separate instances are independent.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import uuid
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Generator, Union

from ..utils.logging import StructuredLogger
from .area import AreaResearcher
from .cancellation import CancellationToken
from .errors import (
    AlreadyRunningError,
    AreaResearchError,
    CancellationError,
    NoDataError,
    ResearchError,
)
from .models import (
    AreaResult,
    ResearchNote,
    ResearchOptions,
    ResearchPlan,
    ResearchProgress,
    ResearchResult,
    ResearchStatus,
    Source,
)
from .plan import PlanGenerator
from .progress import ProgressCallback, ProgressReporter
from .report import ReportCompiler

if TYPE_CHECKING:
    from ..providers.protocol import CompletionService, SearchService

logger = logging.getLogger(__name__)

CompleteCallback = Callable[[ResearchResult], Union[Awaitable[None], None]]
ErrorCallback = Callable[[ResearchError], Union[Awaitable[None], None]]

S = ResearchStatus

_TRANSITIONS: dict[ResearchStatus, frozenset[ResearchStatus]] = {
    S.IDLE: frozenset({S.PLANNING}),
    S.PLANNING: frozenset({S.SEARCHING, S.ERROR}),
    S.SEARCHING: frozenset({S.ANALYZING, S.ERROR}),
    S.ANALYZING: frozenset({S.COMPILING, S.ERROR}),
    S.COMPILING: frozenset({S.FINALIZING, S.ERROR}),
    S.FINALIZING: frozenset({S.COMPLETE, S.ERROR}),
    # Terminal states only leave when a new run starts
    S.COMPLETE: frozenset({S.PLANNING}),
    S.ERROR: frozenset({S.PLANNING}),
}

SEARCH_START_PERCENT = 15
SEARCH_END_PERCENT = 65


def search_percent(areas_done: int, area_count: int) -> int:
    """Progress after ``areas_done`` areas of the searching stage."""
    span = SEARCH_END_PERCENT - SEARCH_START_PERCENT
    percent = SEARCH_START_PERCENT + areas_done * span / max(area_count, 1)
    return min(SEARCH_END_PERCENT, int(percent))


class ResearchRun:
    """
    Handle for one active run.

    Await it (or ``result()``) for the ResearchResult; a failed or cancelled
    run raises its ResearchError. ``dispose()`` is the single way to stop all
    callbacks for this run.
    """

    def __init__(
        self,
        run_id: str,
        query: str,
        options: ResearchOptions,
        token: CancellationToken,
        reporter: ProgressReporter,
    ) -> None:
        self.run_id = run_id
        self.query = query
        self.options = options
        self.token = token
        self.reporter = reporter
        self.disposed = False
        self._task: asyncio.Task[ResearchResult] | None = None

    @property
    def done(self) -> bool:
        return self._task is not None and self._task.done()

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    def cancel(self, reason: str | None = None) -> None:
        """Request cooperative cancellation."""
        self.token.cancel(reason)

    def dispose(self) -> None:
        """Cancel the run and stop every further callback."""
        self.disposed = True
        self.reporter.dispose()
        self.cancel("Research run was disposed")

    async def result(self) -> ResearchResult:
        if self._task is None:
            raise RuntimeError("Run has not been started")
        return await self._task

    def __await__(self) -> Generator[Any, None, ResearchResult]:
        return self.result().__await__()


class Orchestrator:
    """
    Deep research orchestrator.

    Manages:
    - The research state machine and its progress percentages
    - Plan generation, per-area research and report compilation
    - Failure isolation for questions and areas
    - Cooperative cancellation
    - Caller callbacks (progress, completion, error)
    """

    def __init__(
        self,
        completion: CompletionService,
        search: SearchService,
        *,
        on_progress: ProgressCallback | None = None,
        on_complete: CompleteCallback | None = None,
        on_error: ErrorCallback | None = None,
        progress_interval: float = 0.3,
    ):
        """
        Initialize orchestrator.

        Args:
            completion: Chat completion collaborator
            search: Web search collaborator
            on_progress: Receives throttled ResearchProgress snapshots
            on_complete: Called once with the ResearchResult of a successful run
            on_error: Called once with the ResearchError of a failed or cancelled run
            progress_interval: Minimum seconds between progress deliveries
        """
        self.completion = completion
        self.search = search
        self.on_progress = on_progress
        self.on_complete = on_complete
        self.on_error = on_error
        self.progress_interval = progress_interval

        self._active_run: ResearchRun | None = None
        self._status = ResearchStatus.IDLE
        self._percent = 0
        self._step = ""
        self._plan: ResearchPlan | None = None
        self._sources: list[Source] = []
        self._area_results: list[AreaResult] = []

    @property
    def status(self) -> ResearchStatus:
        return self._status

    @property
    def is_running(self) -> bool:
        return self._active_run is not None

    @property
    def active_run(self) -> ResearchRun | None:
        return self._active_run

    @property
    def progress(self) -> ResearchProgress:
        """Current (unthrottled) progress snapshot."""
        return ResearchProgress(
            status=self._status,
            percent=self._percent,
            current_step=self._step,
            source_count=len(self._sources),
        )

    def start(self, query: str, options: ResearchOptions | None = None) -> ResearchRun:
        """
        Start a research run on the running event loop.

        Returns:
            Handle to await, cancel or dispose the run

        Raises:
            AlreadyRunningError: If a run is already active on this instance
            ValueError: If the query is empty
            RuntimeError: If called without a running event loop
        """
        if self._active_run is not None:
            raise AlreadyRunningError(self._active_run.query)

        query = (query or "").strip()
        if not query:
            raise ValueError("query must not be empty")

        loop = asyncio.get_running_loop()
        options = options or ResearchOptions()

        run = ResearchRun(
            run_id=uuid.uuid4().hex[:8],
            query=query,
            options=options,
            token=CancellationToken(),
            reporter=ProgressReporter(self.on_progress, self.progress_interval),
        )

        self._reset_state()
        self._active_run = run
        task = loop.create_task(self._execute(run))
        task.add_done_callback(_consume_task_exception)
        run._task = task
        return run

    async def run(self, query: str, options: ResearchOptions | None = None) -> ResearchResult:
        """Start a run and wait for its result."""
        return await self.start(query, options)

    def cancel(self, reason: str | None = None) -> None:
        """Cancel the active run, if any."""
        if self._active_run is not None:
            self._active_run.cancel(reason)

    # ------------------------------------------------------------------
    # Run execution
    # ------------------------------------------------------------------

    def _reset_state(self) -> None:
        self._status = ResearchStatus.IDLE
        self._percent = 0
        self._step = ""
        self._plan = None
        self._sources = []
        self._area_results = []

    async def _execute(self, run: ResearchRun) -> ResearchResult:
        log = StructuredLogger(__name__, run_id=run.run_id)
        log.info(f"Starting research: '{run.query[:80]}' ({run.options.depth.value})")

        error: ResearchError | None = None
        try:
            try:
                result = await self._pipeline(run, log)
            except ResearchError as e:
                error = e
            except asyncio.CancelledError:
                error = CancellationError("Research task was cancelled")
            except Exception as e:
                log.exception("Unexpected research failure")
                error = ResearchError(f"Unexpected research failure: {e}")
                error.__cause__ = e

            if error is not None:
                self._mark_failed(run, error, log)
        finally:
            # Cleared before callbacks so they may start the next run
            self._active_run = None

        if error is not None:
            await self._invoke(run, self.on_error, error, log)
            raise error

        await self._invoke(run, self.on_complete, result, log)
        return result

    async def _pipeline(self, run: ResearchRun, log: StructuredLogger) -> ResearchResult:
        token = run.token

        # Planning
        self._enter(run, S.PLANNING, 5, "Planning research approach")
        token.raise_if_cancelled()
        plan = await PlanGenerator(self.completion).generate(run.query)
        self._plan = plan
        log.info(f"Plan ready: {[a.name for a in plan.areas]}")

        # Searching
        self._enter(run, S.SEARCHING, SEARCH_START_PERCENT, "Researching plan areas")
        token.raise_if_cancelled()
        await self._research_areas(run, plan, log)

        # Error notes count as collected notes
        if sum(len(result.notes) for result in self._area_results) == 0:
            raise NoDataError()

        # Analyzing
        self._enter(run, S.ANALYZING, 70, "Analyzing research findings")
        token.raise_if_cancelled()

        # Compiling
        self._enter(run, S.COMPILING, 85, "Compiling comprehensive report")
        token.raise_if_cancelled()
        report = await ReportCompiler(self.completion).compile(
            run.query, plan, tuple(self._area_results)
        )

        # Finalizing
        self._enter(run, S.FINALIZING, 95, "Finalizing research report")
        token.raise_if_cancelled()
        result = ResearchResult(
            query=run.query,
            report=report,
            sources=tuple(self._sources[: run.options.max_sources]),
            plan=plan,
            notes=tuple(self._area_results),
        )

        self._enter(run, S.COMPLETE, 100, "Research complete")
        run.reporter.flush()
        log.info(
            f"Research complete: {len(self._area_results)} areas, "
            f"{len(self._sources)} sources collected, {len(result.sources)} kept"
        )
        return result

    async def _research_areas(
        self,
        run: ResearchRun,
        plan: ResearchPlan,
        log: StructuredLogger,
    ) -> None:
        researcher = AreaResearcher(
            completion=self.completion,
            search=self.search,
            query=run.query,
            depth=run.options.depth,
        )
        area_count = len(plan.areas)

        for i, area in enumerate(plan.areas):
            run.token.raise_if_cancelled()
            area_log = log.bind(area=area.name)
            self._update(run, step=f"Researching area: {area.name}")

            try:
                notes = await researcher.research(
                    area,
                    run.token,
                    on_step=lambda step: self._update(run, step=step),
                    on_sources=lambda sources: self._add_sources(run, sources),
                )
            except CancellationError:
                raise
            except Exception as e:
                error = AreaResearchError(area.name, str(e) or type(e).__name__)
                area_log.warning(str(error))
                notes = [
                    ResearchNote(
                        question="Error",
                        analysis=(
                            "Unable to complete research for this area due to an error: "
                            f"{error.reason}"
                        ),
                        error=error.reason,
                    )
                ]

            self._area_results.append(AreaResult(area=area.name, notes=tuple(notes)))
            failed = sum(1 for n in notes if n.failed)
            area_log.info(f"Area {i + 1}/{area_count} done: {len(notes)} notes, {failed} failed")
            self._update(run, percent=search_percent(i + 1, area_count))

    def _mark_failed(self, run: ResearchRun, error: ResearchError, log: StructuredLogger) -> None:
        if error.is_cancellation:
            log.info(f"Research cancelled: {error}")
            step = "Research cancelled"
        else:
            log.error(f"Research failed: {error}")
            step = f"Research failed: {error}"

        if not self._status.is_terminal:
            self._enter(run, S.ERROR, self._percent, step)
        run.reporter.flush()

    # ------------------------------------------------------------------
    # State and progress
    # ------------------------------------------------------------------

    def _enter(self, run: ResearchRun, status: ResearchStatus, percent: int, step: str) -> None:
        allowed = _TRANSITIONS[self._status]
        if status not in allowed:
            raise RuntimeError(f"Illegal research transition {self._status.value} -> {status.value}")
        self._status = status
        self._update(run, percent=percent, step=step)

    def _update(self, run: ResearchRun, percent: int | None = None, step: str | None = None) -> None:
        if percent is not None:
            # Percentages never go backwards within a run
            self._percent = max(self._percent, min(100, percent))
        if step is not None:
            self._step = step
        run.reporter.update(self.progress)

    def _add_sources(self, run: ResearchRun, sources: list[Source]) -> None:
        self._sources.extend(sources)
        self._update(run)

    async def _invoke(
        self,
        run: ResearchRun,
        callback: Callable[[Any], Awaitable[None] | None] | None,
        payload: Any,
        log: StructuredLogger,
    ) -> None:
        if callback is None or run.disposed:
            return
        try:
            outcome = callback(payload)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception as e:
            log.warning(f"Research callback failed: {e}")


def _consume_task_exception(task: asyncio.Task[Any]) -> None:
    """Mark a finished run's exception as retrieved; callers may rely on on_error only."""
    if not task.cancelled():
        task.exception()
