import asyncio
import logging
from datetime import date
from typing import Optional, Tuple

from daily_forge.core.config import AUTOSAVE_DEBOUNCE_SECONDS
from daily_forge.core.errors import RepositoryError
from daily_forge.entries.orchestrator import EntryWriteOrchestrator
from daily_forge.entries.schemas import DayEntry, DayState
from daily_forge.entries.session import DaySession
from daily_forge.reading_plans.catalog import ReadingPlanDefinition
from daily_forge.reading_plans.schemas import ReadingPlanProgress

logger = logging.getLogger(__name__)

Payload = Tuple[str, date, DayState]


class AutosaveQueue:
    """
    Debounced, coalescing autosave with at most one write in flight.

    Requests arriving while a write is pending or running replace the queued
    payload instead of queueing behind it, so the last state requested before
    a flush is the one that lands. A failed write keeps its payload queued
    (unless a newer one arrived) and the next request or flush retries it.
    """

    def __init__(self, orchestrator: EntryWriteOrchestrator, debounce_seconds: float = AUTOSAVE_DEBOUNCE_SECONDS):
        self.orchestrator = orchestrator
        self.debounce_seconds = debounce_seconds
        self._pending: Optional[Payload] = None
        self._task: Optional[asyncio.Task] = None
        self.last_saved: Optional[DayEntry] = None
        self.last_error: Optional[RepositoryError] = None
        self.writes = 0

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    def request_save(self, session: DaySession) -> None:
        """Queues the session's current state; must be called from a running event loop."""
        self._pending = (session.user_id, session.entry_date, session.snapshot())
        if not self.in_flight:
            self._task = asyncio.get_running_loop().create_task(self._drain())

    async def _drain(self) -> None:
        while self._pending is not None:
            await asyncio.sleep(self.debounce_seconds)
            payload, self._pending = self._pending, None
            user_id, entry_date, state = payload
            try:
                self.last_saved = await asyncio.to_thread(self.orchestrator.save, user_id, entry_date, state)
            except RepositoryError as e:
                logger.error(f"Autosave of {entry_date} for user {user_id} failed: {e}")
                self.last_error = e
                if self._pending is None:
                    self._pending = payload
                return
            self.writes += 1
            self.last_error = None

    async def flush(self) -> Optional[DayEntry]:
        """
        Waits for the outstanding write, then writes whatever is still queued,
        retrying a previously failed payload once.

        Returns:
            Optional[DayEntry]: The last entry written successfully.

        Raises:
            RepositoryError: If the queued payload still cannot be written.
        """
        if self.in_flight:
            await self._task
        if self._pending is not None:
            self._task = asyncio.get_running_loop().create_task(self._drain())
            await self._task
        if self._pending is not None and self.last_error is not None:
            raise self.last_error
        return self.last_saved

    async def save_now(self, user_id: str, entry_date: date, state: DayState) -> DayEntry:
        """
        Queues a payload ahead of a transition and waits until it is written.
        A write already in flight finishes first; older queued payloads are
        superseded.

        Raises:
            RepositoryError: If the payload cannot be written.
        """
        self._pending = (user_id, entry_date, state)
        return await self.flush()

    # Reading plan transitions through the single writer
    async def start_plan(
        self, session: DaySession, plan: ReadingPlanDefinition, bible_id: Optional[str] = None
    ) -> ReadingPlanProgress:
        """
        Same contract as `EntryWriteOrchestrator.start_plan`, with the save of
        the outgoing plan serialized behind any autosave in flight.

        Raises:
            RepositoryError: If the outgoing plan cannot be saved; the session
                is left unchanged.
        """
        current = session.reading_plan
        if current is not None and current.plan_id == plan.id:
            return current
        if current is not None:
            await self.save_now(session.user_id, session.entry_date, session.shelved_snapshot())
        progress = await asyncio.to_thread(self.orchestrator.incoming_progress, session, plan, bible_id)
        return self.orchestrator.activate_plan(session, progress)

    async def restart_plan(self, session: DaySession) -> Optional[ReadingPlanProgress]:
        if session.reading_plan is None:
            logger.warning(f"No reading plan to restart for user {session.user_id}")
            return None
        await self.save_now(session.user_id, session.entry_date, session.snapshot())
        return self.orchestrator.apply_restart(session)

    async def close_plan(self, session: DaySession) -> None:
        if session.reading_plan is None:
            return
        await self.save_now(session.user_id, session.entry_date, session.snapshot())
        session.park_reading_plan()
