import pytest
from sqlalchemy import text
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from searchpulse.core.enums import RecordOutcome
from searchpulse.core.exceptions import MetricsStoreError
from searchpulse.models.search_metric import SearchMetric as SearchMetricModel
from searchpulse.repositories import SearchMetricRepository
from searchpulse.repositories.search_metric_repository import upsert_increment_statement
from searchpulse.services.search_metrics_service import SearchCountRecorder


@pytest.fixture
def repo(db_session):
    return SearchMetricRepository(db_session)


def test_find_by_term_returns_none_when_missing(repo):
    assert repo.find_by_term("nothing") is None


def test_insert_and_find(repo):
    created = repo.insert("dune", 438631, "https://image.tmdb.org/t/p/w500/d.jpg")

    found = repo.find_by_term("dune")
    assert found.id == created.id
    assert found.count == 1
    assert found.movie_id == 438631
    assert found.created_at is not None


def test_find_by_term_returns_oldest_of_duplicates(repo):
    first = repo.insert("dune", 1, "a")
    repo.insert("dune", 2, "b")

    assert repo.find_by_term("dune").id == first.id


def test_increment_writes_read_count_plus_one(repo, db_session):
    metric = repo.insert("dune", 1, "a")

    updated = repo.increment(metric)

    assert updated.count == 2
    assert db_session.query(SearchMetricModel).count() == 1


def test_increment_missing_row_raises(repo):
    metric = repo.insert("dune", 1, "a")
    metric.id = 999

    with pytest.raises(MetricsStoreError):
        repo.increment(metric)


def test_top_by_count(repo):
    for term, times in (("a", 1), ("b", 3), ("c", 2)):
        metric = repo.insert(term, 1, "x")
        for _ in range(times - 1):
            metric = repo.increment(metric)

    assert [m.search_term for m in repo.top_by_count(2)] == ["b", "c"]


def test_recorder_over_sql_store(repo, db_session):
    recorder = SearchCountRecorder(repo)

    first = recorder.update_search_count("alien", {"id": 348, "poster_path": "/alien.jpg"})
    second = recorder.update_search_count("alien", {"id": 348, "poster_path": "/alien.jpg"})

    assert first.outcome == RecordOutcome.CREATED
    assert second.outcome == RecordOutcome.INCREMENTED
    row = db_session.query(SearchMetricModel).one()
    assert row.count == 2
    assert row.poster_url == "https://image.tmdb.org/t/p/w500/alien.jpg"


def test_database_errors_are_wrapped(repo, db_session, monkeypatch):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(db_session, "query", broken_query)

    with pytest.raises(MetricsStoreError) as exc_info:
        repo.find_by_term("dune")
    assert "connection lost" in exc_info.value.message


@pytest.fixture
def unique_terms(db_session):
    db_session.execute(text('CREATE UNIQUE INDEX uq_metrics_search_term ON metrics ("searchTerm")'))
    db_session.commit()


def test_upsert_statement_for_postgres():
    stmt = upsert_increment_statement(SearchMetricModel.__table__, "postgresql", "dune", 1, "a")

    sql = str(stmt.compile(dialect=postgresql.dialect()))
    assert 'ON CONFLICT ("searchTerm") DO UPDATE SET count' in sql
    assert "metrics.count +" in sql
    assert sql.endswith("RETURNING metrics.id")


def test_upsert_increment_creates_then_increments(repo, db_session, unique_terms):
    first = repo.upsert_increment("dune", 438631, "https://image.tmdb.org/t/p/w500/d.jpg")
    second = repo.upsert_increment("dune", 999, "other")

    assert first.count == 1
    assert second.count == 2
    assert second.id == first.id
    row = db_session.query(SearchMetricModel).one()
    assert row.count == 2
    # the conflict branch only touches count
    assert row.movie_id == 438631
    assert second.poster_url == row.poster_url


def test_atomic_recorder_over_sql_store(repo, db_session, unique_terms):
    recorder = SearchCountRecorder(repo, atomic=True)

    first = recorder.update_search_count("alien", {"id": 348, "poster_path": "/alien.jpg"})
    second = recorder.update_search_count("alien", {"id": 348, "poster_path": "/alien.jpg"})

    assert first.outcome == RecordOutcome.CREATED
    assert second.outcome == RecordOutcome.INCREMENTED
    assert db_session.query(SearchMetricModel).one().count == 2


def test_upsert_without_unique_index_is_wrapped(repo):
    with pytest.raises(MetricsStoreError):
        repo.upsert_increment("dune", 1, "a")
