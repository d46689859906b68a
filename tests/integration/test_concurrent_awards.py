# ==============================================================================
# Concurrent Award Test Suite
# ==============================================================================
# User Story: As a student double-clicking "submit", I want to be congratulated
#             for a badge once, not twice
#
# Acceptance Criteria:
#   1. Racing evaluations crossing the same threshold report the badge once
#   2. earned_at is written by exactly one of them
#   3. Concurrent catalog initialization inserts the catalog once
# ==============================================================================

import threading
from datetime import UTC, datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from classbeyond.badges.definitions import BadgeCatalog, initialize_badges, load_definitions
from classbeyond.core.data.database import Base
from classbeyond.core.data.models import Badge, StudentBadge
from classbeyond.core.data.repositories import StudentBadgeRepository


@pytest.fixture
def file_sessionmaker(tmp_path):
    """File backed SQLite so each thread gets its own connection"""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'concurrency.db'}",
        connect_args={"check_same_thread": False, "timeout": 10},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def run_in_threads(count, target):
    barrier = threading.Barrier(count)
    results = [None] * count
    errors = []

    def worker(index):
        try:
            barrier.wait()
            results[index] = target(index)
        except Exception as e:  # pylint: disable=broad-exception-caught
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert errors == []
    return results


class TestConcurrentAwards:
    def test_double_submission_awards_once(self, file_sessionmaker):
        seed = file_sessionmaker()
        initialize_badges(seed, load_definitions())
        badge = BadgeCatalog.from_db(seed).get_by_name("Quiz Enthusiast")
        seed.close()

        def award(index):
            db = file_sessionmaker()
            try:
                now = datetime(2024, 3, 13, 12, 0, index, tzinfo=UTC)
                update = StudentBadgeRepository(db).upsert_progress(
                    "student-1", badge.id, 5, badge.requirement.value, now=now
                )
                return update.newly_earned
            finally:
                db.close()

        results = run_in_threads(4, award)

        assert results.count(True) == 1
        check = file_sessionmaker()
        rows = check.query(StudentBadge).filter_by(student_id="student-1").all()
        assert len(rows) == 1
        assert rows[0].earned_at is not None
        check.close()

    def test_concurrent_initialization_seeds_once(self, file_sessionmaker):
        definitions = load_definitions()

        def seed(_):
            db = file_sessionmaker()
            try:
                return initialize_badges(db, definitions)
            finally:
                db.close()

        results = run_in_threads(3, seed)

        check = file_sessionmaker()
        assert check.query(Badge).count() == len(definitions.badges)
        check.close()
        assert sum(results) == len(definitions.badges)
