from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from conftest import make_entry, make_goal, make_progress

from daily_forge.core.database import Base
from daily_forge.core.errors import RepositoryError
from daily_forge.entries.db import SqlEntryRepository, entry_to_document
from daily_forge.entries.models import DayEntryRecord
from reset_db import reset_database

USER = "user-1"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def repository(db) -> SqlEntryRepository:
    return SqlEntryRepository(db)


class TestSqlEntryRepository:
    def test_upsert_and_read_back(self, repository):
        entry = make_entry(
            date(2024, 5, 15),
            weekly=[make_goal("w1", "Pray more")],
            deleted=["x"],
            reading_plan=make_progress(completed_days=[1, 2], current_day=3),
            gratitude=["family"],
        )
        saved = repository.upsert_entry(USER, entry.date, entry)
        assert saved == entry
        assert repository.get_entry(USER, date(2024, 5, 15)) == entry

    def test_upsert_replaces_whole_document(self, repository, db):
        day = date(2024, 5, 15)
        repository.upsert_entry(USER, day, make_entry(day, gratitude=["a"], daily_intention="b"))
        repository.upsert_entry(USER, day, make_entry(day, gratitude=["c"]))
        stored = repository.get_entry(USER, day)
        assert stored.gratitude == ["c"]
        assert stored.daily_intention is None
        assert db.query(DayEntryRecord).count() == 1

    def test_entries_are_sorted_newest_first(self, repository):
        for day in (date(2024, 5, 1), date(2024, 5, 20), date(2024, 5, 7)):
            repository.upsert_entry(USER, day, make_entry(day))
        dates = [entry.date for entry in repository.get_all_entries(USER)]
        assert dates == [date(2024, 5, 20), date(2024, 5, 7), date(2024, 5, 1)]

    def test_shelved_plan_progress_round_trips(self, repository):
        day = date(2024, 5, 15)
        entry = make_entry(
            day,
            reading_plan=make_progress("courage-joshua", total_days=24),
            plan_progress={"warrior-psalms": make_progress(completed_days=[1, 2, 3], current_day=4)},
        )
        repository.upsert_entry(USER, day, entry)
        stored = repository.get_entry(USER, day)
        assert stored.plan_progress["warrior-psalms"].completed_days == [1, 2, 3]
        assert entry_to_document(entry)["planProgress"]["warrior-psalms"]["currentDay"] == 4

    def test_missing_entry(self, repository):
        assert repository.get_entry(USER, date(2024, 5, 15)) is None

    def test_document_is_camel_case_without_date(self):
        document = entry_to_document(make_entry(date(2024, 5, 15), deleted=["x"]))
        assert "date" not in document
        assert document["deletedGoalIds"] == ["x"]

    def test_malformed_rows_are_skipped(self, repository, db, caplog):
        db.add(DayEntryRecord(user_id=USER, date_key="2024-13-40", data_content={}))
        db.add(DayEntryRecord(user_id=USER, date_key="2024-05-02", data_content={"goals": "not goals"}))
        db.commit()
        repository.upsert_entry(USER, date(2024, 5, 3), make_entry(date(2024, 5, 3)))

        with caplog.at_level("WARNING"):
            entries = repository.get_all_entries(USER)
        assert [entry.date for entry in entries] == [date(2024, 5, 3)]
        assert "Skipping entry" in caplog.text

    def test_unknown_fields_are_ignored(self, repository, db):
        db.add(DayEntryRecord(user_id=USER, date_key="2024-05-02", data_content={"legacyField": 1, "gratitude": ["a"]}))
        db.commit()
        assert repository.get_entry(USER, date(2024, 5, 2)).gratitude == ["a"]

    def test_read_failure_is_typed(self, repository, engine):
        Base.metadata.drop_all(bind=engine)
        with pytest.raises(RepositoryError) as exc:
            repository.get_all_entries(USER)
        assert exc.value.user_id == USER

    def test_write_failure_is_typed(self, repository, engine):
        Base.metadata.drop_all(bind=engine)
        day = date(2024, 5, 15)
        with pytest.raises(RepositoryError) as exc:
            repository.upsert_entry(USER, day, make_entry(day))
        assert exc.value.entry_date == day


class TestResetDatabase:
    def test_reset_clears_rows(self, engine, repository, db):
        repository.upsert_entry(USER, date(2024, 5, 15), make_entry(date(2024, 5, 15)))
        db.close()
        reset_database(bind=engine)
        assert repository.get_all_entries(USER) == []
