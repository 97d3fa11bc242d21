"""Tests for the SQLAlchemy persistence collaborator against in-memory SQLite."""
import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bulk_import.db.base import Base
from bulk_import.imports.errors import PersistenceFailed
from bulk_import.imports.persistence import SqlAlchemyPersistence
from bulk_import.imports.types import ImportRecord
from bulk_import.models.make import Make


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, expire_on_commit=False)
    engine.dispose()


def _count(session_factory) -> int:
    with session_factory() as session:
        return session.execute(select(func.count()).select_from(Make)).scalar_one()


def test_bulk_insert_commits_in_order(session_factory):
    persistence = SqlAlchemyPersistence(session_factory)
    records = [ImportRecord("Honda", "desc1"), ImportRecord("Ford", "desc2")]

    inserted = persistence.run_in_transaction(lambda s: persistence.bulk_insert(s, records))

    assert inserted == 2
    with session_factory() as session:
        makes = session.execute(select(Make).order_by(Make.id)).scalars().all()
    assert [(m.name, m.description) for m in makes] == [("Honda", "desc1"), ("Ford", "desc2")]
    assert all(m.created_at is not None and m.deleted_at is None for m in makes)


def test_empty_insert_commits_nothing(session_factory):
    persistence = SqlAlchemyPersistence(session_factory)

    inserted = persistence.run_in_transaction(lambda s: persistence.bulk_insert(s, []))

    assert inserted == 0
    assert _count(session_factory) == 0


def test_failure_mid_transaction_rolls_back_everything(session_factory):
    """A NOT NULL violation on the second row leaves zero rows committed."""
    persistence = SqlAlchemyPersistence(session_factory)
    records = [ImportRecord("Honda", "desc1"), ImportRecord(None, "broken")]

    with pytest.raises(PersistenceFailed):
        persistence.run_in_transaction(lambda s: persistence.bulk_insert(s, records))

    assert _count(session_factory) == 0
