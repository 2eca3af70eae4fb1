"""
Main orchestrator for batch-blocking recommended creators.
"""

import asyncio
from typing import Iterator, List, Optional, Tuple

from loguru import logger

from .models.schemas import BatchReport, BlockerConfig, FailureKind, RunState, SessionContext
from .sources.recommendations import RecommendationExtractor
from .sources.relation import RelationBlocker
from .ui.interface import UserInterface
from .utils.rate_limiter import IntervalThrottle, Sleeper


LOGIN_REQUIRED = "Please login to Bilibili first."
CONTAINER_MISSING = "⚠️ Recommendation list not found. Please check page structure."
NO_CREATORS = "⚠️ No creators found. Please check page structure."


class BatchBlockOrchestrator:
    """Drives one extract, confirm and block cycle per trigger."""

    def __init__(
        self,
        session: SessionContext,
        extractor: RecommendationExtractor,
        blocker: RelationBlocker,
        ui: UserInterface,
        config: Optional[BlockerConfig] = None,
        sleep: Optional[Sleeper] = None
    ):
        """
        Initialize orchestrator.

        Args:
            session: Session context read once at startup
            extractor: Source of creator UIDs
            blocker: Relation API client
            ui: Dialogs and progress overlay
            config: Runtime configuration
            sleep: Delay primitive used between requests
        """
        self.session = session
        self.extractor = extractor
        self.blocker = blocker
        self.ui = ui
        self.config = config or BlockerConfig()
        self.throttle = IntervalThrottle(self.config.block_interval, 'bilibili_relation', sleep)
        self.state = RunState.IDLE
        self.history: List[RunState] = [RunState.IDLE]

        logger.info("Batch block orchestrator initialized")

    def _transition(self, state: RunState) -> None:
        logger.debug(f"State {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    @property
    def busy(self) -> bool:
        return self.state != RunState.IDLE

    async def run(self, cancel: Optional[asyncio.Event] = None) -> BatchReport:
        """
        Run one full cycle starting from Idle.

        Args:
            cancel: Optional flag checked before each block request

        Returns:
            BatchReport for this run
        """
        if self.busy:
            logger.warning(f"Run requested while {self.state.value}, ignoring")
            return BatchReport(state=self.state)

        try:
            return await self._run(cancel)
        finally:
            if self.state != RunState.IDLE:
                self._transition(RunState.IDLE)

    async def _run(self, cancel: Optional[asyncio.Event]) -> BatchReport:
        if not self.session.authenticated:
            await self.ui.alert(LOGIN_REQUIRED)
            return BatchReport(failure=FailureKind.UNAUTHENTICATED)

        self._transition(RunState.CONFIRMING)
        await self.extractor.expand_list_if_needed()
        extraction = await self.extractor.extract()

        if not extraction.container_found:
            await self.ui.alert(CONTAINER_MISSING)
            return BatchReport(failure=FailureKind.CONTAINER_NOT_FOUND)

        uids = extraction.uids
        if not uids:
            await self.ui.alert(NO_CREATORS)
            return BatchReport(failure=FailureKind.EMPTY_RESULT)

        message = f"Found {len(uids)} creators.\n\nAre you sure you want to BLOCK them all?"
        if not await self.ui.confirm(message):
            logger.info("Batch block declined")
            return BatchReport(total=len(uids))

        self._transition(RunState.RUNNING)
        try:
            report = await self._block_all(uids, cancel)
        finally:
            await self.ui.remove_progress()

        self._transition(RunState.DONE)
        await self.ui.alert(self._summary(report))
        report.state = RunState.DONE
        return report

    def _pending(self, uids: List[str], cancel: Optional[asyncio.Event]) -> Iterator[Tuple[int, str]]:
        for index, uid in enumerate(uids, start=1):
            if cancel is not None and cancel.is_set():
                logger.warning(f"Batch block cancelled before item {index}/{len(uids)}")
                return
            yield index, uid

    async def _block_all(self, uids: List[str], cancel: Optional[asyncio.Event]) -> BatchReport:
        report = BatchReport(state=RunState.RUNNING, total=len(uids))

        for index, uid in self._pending(uids, cancel):
            await self.ui.show_progress(index, len(uids), uid)
            result = await self.blocker.block_user(uid)
            report.results.append(result)
            if result.success:
                report.success_count += 1
            await self.throttle.wait()

        report.cancelled = len(report.results) < len(uids)
        logger.info(f"Batch block completed: {report.success_count}/{report.total} blocked")
        return report

    def _summary(self, report: BatchReport) -> str:
        blocked = f"Successfully blocked: {report.success_count}/{report.total}"
        if report.cancelled:
            return f"⏹ Batch block cancelled after {len(report.results)}/{report.total}.\n{blocked}"
        return f"✅ Batch block complete.\n{blocked}"
