"""Persistence collaborator for the import pipeline.

The session factory is created once per process and handed in; nothing here
reaches for a global engine.
"""
import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from bulk_import.imports.errors import PersistenceFailed
from bulk_import.imports.types import ImportRecord
from bulk_import.models.make import Make

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SqlAlchemyPersistence:
    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def run_in_transaction(self, fn: Callable[[Session], T]) -> T:
        """Run `fn` inside one transaction. Commits on success, rolls back on any error."""
        try:
            with self._session_factory.begin() as session:
                return fn(session)
        except SQLAlchemyError as exc:
            logger.error("Error inserting data: %s", exc)
            raise PersistenceFailed(str(exc)) from exc

    def bulk_insert(self, session: Session, records: Sequence[ImportRecord]) -> int:
        """Add one Make per record, in order. Generated columns are not read back."""
        session.add_all([Make(**record.to_insert_dict()) for record in records])
        session.flush()
        logger.info("Inserted %d makes", len(records))
        return len(records)
