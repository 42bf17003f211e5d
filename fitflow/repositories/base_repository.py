# fitflow/repositories/base_repository.py
"""
Generic data access shared by every FitFlow repository.

Repositories flush and never commit; the service that owns the unit of work
decides when it ends. ``IntegrityError`` propagates untouched so services can
translate a unique-constraint violation into the matching domain conflict.
Every other ``SQLAlchemyError`` becomes a ``RepositoryException``.
"""

import logging
from typing import Any, Generic, NoReturn, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException

ModelT = TypeVar("ModelT")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelT]):
    """
    Primary-key and keyword lookups for one mapped class.

    Subclasses add the aggregate-specific queries and the conditional
    updates that have to run as a single statement.
    """

    def __init__(self, db: Session, model: Type[ModelT]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    def _fail(self, action: str, exc: SQLAlchemyError) -> NoReturn:
        self.logger.error("Could not %s %s: %s", action, self.model.__name__, exc)
        raise RepositoryException(f"Failed to {action} {self.model.__name__}: {exc}")

    def get_by_id(self, id: str) -> Optional[ModelT]:
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as exc:
            self._fail("load", exc)

    def create(self, **values: Any) -> ModelT:
        """
        Add a new row and flush it.

        Flushing here fills server defaults and surfaces constraint
        violations inside the caller's transaction.
        """
        entity = self.model(**values)
        try:
            self.db.add(entity)
            self.db.flush()
        except IntegrityError as exc:
            self.logger.info("Constraint rejected new %s: %s", self.model.__name__, exc.orig)
            raise
        except SQLAlchemyError as exc:
            self._fail("create", exc)
        return entity

    def delete(self, id: str) -> bool:
        """Delete by primary key. Returns False when no row matched."""
        entity = self.get_by_id(id)
        if entity is None:
            return False
        try:
            self.db.delete(entity)
            self.db.flush()
        except SQLAlchemyError as exc:
            self._fail("delete", exc)
        return True

    def exists(self, **criteria: Any) -> bool:
        stmt = select(self.model).filter_by(**criteria).limit(1)
        try:
            return self.db.scalars(stmt).first() is not None
        except SQLAlchemyError as exc:
            self._fail("query", exc)

    def count(self, **criteria: Any) -> int:
        stmt = select(func.count()).select_from(self.model).filter_by(**criteria)
        try:
            return int(self.db.scalar(stmt) or 0)
        except SQLAlchemyError as exc:
            self._fail("count", exc)
