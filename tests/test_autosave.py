import asyncio
import threading
from datetime import date

import pytest

from conftest import make_progress

from daily_forge.core.errors import RepositoryError
from daily_forge.entries.autosave import AutosaveQueue
from daily_forge.entries.orchestrator import EntryWriteOrchestrator
from daily_forge.entries.repository import InMemoryEntryRepository
from daily_forge.entries.schemas import DayState
from daily_forge.entries.session import DaySession
from daily_forge.reading_plans.catalog import get_plan
from daily_forge.reading_plans.service import resolve_progress

USER = "user-1"
DAY = date(2024, 5, 15)


class RecordingRepository(InMemoryEntryRepository):
    """Tracks concurrent writes; can block or fail them on demand."""

    def __init__(self):
        super().__init__()
        self.fail_writes = False
        self.release = threading.Event()
        self.release.set()
        self.started = threading.Event()
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def upsert_entry(self, user_id, entry_date, entry):
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        self.started.set()
        try:
            self.release.wait(timeout=5)
            if self.fail_writes:
                raise RepositoryError("write failed", user_id, entry_date)
            return super().upsert_entry(user_id, entry_date, entry)
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture
def repo() -> RecordingRepository:
    return RecordingRepository()


def _queue(repo: RecordingRepository) -> AutosaveQueue:
    return AutosaveQueue(EntryWriteOrchestrator(repo), debounce_seconds=0.01)


class TestAutosaveQueue:
    def test_burst_of_requests_is_coalesced(self, repo):
        async def scenario():
            queue = _queue(repo)
            session = DaySession(USER, DAY, DAY, on_change=queue.request_save)
            session.update_reflection(daily_intention="one")
            session.update_reflection(daily_intention="two")
            session.update_reflection(daily_intention="three")
            return await queue.flush()

        saved = asyncio.run(scenario())
        assert repo.upserts == 1
        assert saved.daily_intention == "three"
        assert repo.get_entry(USER, DAY).daily_intention == "three"

    def test_requests_during_a_write_are_coalesced(self, repo):
        async def scenario():
            queue = _queue(repo)
            session = DaySession(USER, DAY, DAY, on_change=queue.request_save)
            repo.release.clear()
            session.update_reflection(daily_intention="first")
            while not repo.started.is_set():
                await asyncio.sleep(0.005)

            assert queue.in_flight
            session.update_reflection(daily_intention="second")
            session.update_reflection(daily_intention="last")
            repo.release.set()
            return await queue.flush()

        saved = asyncio.run(scenario())
        assert repo.upserts == 2
        assert repo.max_active == 1
        assert saved.daily_intention == "last"

    def test_failed_write_is_retried_with_same_payload(self, repo):
        async def scenario():
            queue = _queue(repo)
            session = DaySession(USER, DAY, DAY, on_change=queue.request_save)
            repo.fail_writes = True
            session.update_reflection(gratitude=["health"])
            with pytest.raises(RepositoryError):
                await queue.flush()
            assert queue.has_pending
            assert session.state.gratitude == ["health"]

            repo.fail_writes = False
            saved = await queue.flush()
            return queue, saved

        queue, saved = asyncio.run(scenario())
        assert saved.gratitude == ["health"]
        assert queue.writes == 1
        assert queue.last_error is None
        assert not queue.has_pending

    def test_flush_without_requests(self, repo):
        assert asyncio.run(_queue(repo).flush()) is None
        assert repo.upserts == 0


class TestPlanTransitionsThroughQueue:
    def test_switch_waits_for_the_write_in_flight(self, repo):
        outgoing = make_progress(completed_days=[1], current_day=2)

        async def scenario():
            queue = _queue(repo)
            session = DaySession(USER, DAY, DAY, state=DayState(reading_plan=outgoing), on_change=queue.request_save)
            repo.release.clear()
            session.update_reflection(daily_intention="steady")
            while not repo.started.is_set():
                await asyncio.sleep(0.005)

            switch = asyncio.get_running_loop().create_task(queue.start_plan(session, get_plan("strength-isaiah")))
            await asyncio.sleep(0.05)
            assert not switch.done()
            assert session.reading_plan == outgoing

            repo.release.set()
            progress = await switch
            await queue.flush()
            return session, progress

        session, progress = asyncio.run(scenario())
        assert progress.plan_id == "strength-isaiah"
        assert repo.max_active == 1
        assert repo.upserts == 3

        stored = repo.get_entry(USER, DAY)
        assert stored.daily_intention == "steady"
        assert stored.reading_plan.plan_id == "strength-isaiah"
        assert resolve_progress(repo.get_all_entries(USER), "warrior-psalms") == outgoing

    def test_failed_switch_leaves_session_unchanged(self, repo):
        outgoing = make_progress(completed_days=[1], current_day=2)

        async def scenario():
            queue = _queue(repo)
            session = DaySession(USER, DAY, DAY, state=DayState(reading_plan=outgoing), on_change=queue.request_save)
            repo.fail_writes = True
            with pytest.raises(RepositoryError):
                await queue.start_plan(session, get_plan("strength-isaiah"))
            return session

        session = asyncio.run(scenario())
        assert session.reading_plan == outgoing
        assert session.state.plan_progress == {}
        assert repo.upserts == 0

    def test_restart_and_close(self, repo):
        progress = make_progress(completed_days=[1, 2], current_day=3)

        async def scenario():
            queue = _queue(repo)
            session = DaySession(USER, DAY, DAY, state=DayState(reading_plan=progress), on_change=queue.request_save)
            restarted = await queue.restart_plan(session)
            saved_before_restart = repo.get_entry(USER, DAY).reading_plan
            await queue.flush()
            await queue.close_plan(session)
            await queue.flush()
            return session, restarted, saved_before_restart

        session, restarted, saved_before_restart = asyncio.run(scenario())
        assert saved_before_restart == progress
        assert (restarted.current_day, restarted.completed_days) == (1, [])
        assert session.reading_plan is None
        assert repo.get_entry(USER, DAY).reading_plan.completed_days == []
        assert repo.max_active == 1
