"""Document store boundary and its SQLAlchemy implementation.

The core only needs primary-key get/put, an atomic counter update and
secondary-index queries, so the store is kept behind that narrow interface.
Records cross it as plain dicts keyed by attribute name.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from sqlalchemy import Float, cast, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from wordrill.config import settings
from wordrill.errors import ItemExists, StoreError
from wordrill.models.models import User, Word, WordStatistic
from wordrill.monitoring import store_errors

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
# ratio name -> (numerator attribute, denominator attribute)
Ratios = Mapping[str, Tuple[str, str]]


class DocumentStore(ABC):
    """Narrow document store contract used by the services."""

    @abstractmethod
    def scan_all(self, table: str) -> List[Record]:
        """Return every record of a table."""

    @abstractmethod
    def query_by_index(
        self,
        index: str,
        value: Any,
        ascending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Record]:
        """Return records whose index key equals ``value``, in index sort order."""

    @abstractmethod
    def get_item(self, table: str, key: Mapping[str, Any]) -> Optional[Record]:
        """Return the record with the given primary key, if any."""

    @abstractmethod
    def put_item(self, table: str, item: Mapping[str, Any]) -> None:
        """Insert a new record; raises ItemExists on a unique key collision."""

    @abstractmethod
    def atomic_update(
        self,
        table: str,
        key: Mapping[str, Any],
        increments: Mapping[str, int],
        create_defaults: Optional[Mapping[str, Any]] = None,
        ratios: Optional[Ratios] = None,
    ) -> None:
        """Apply ``increments`` and recompute ``ratios`` in one all-or-nothing step.

        A missing record is created from ``key`` and ``create_defaults`` before
        the increments are applied.
        """


@dataclass(frozen=True)
class IndexDefinition:
    """Secondary index: equality on ``hash_key``, optionally ordered by ``sort_key``."""
    table: str
    hash_key: str
    sort_key: Optional[str] = None


class SqlDocumentStore(DocumentStore):
    """DocumentStore over the SQLAlchemy models."""

    def __init__(
        self,
        session_factory: sessionmaker,
        tables: Optional[Mapping[str, Type]] = None,
        indexes: Optional[Mapping[str, IndexDefinition]] = None,
    ):
        self.session_factory = session_factory
        self.tables = dict(tables) if tables is not None else default_tables()
        self.indexes = dict(indexes) if indexes is not None else default_indexes()

    def _model(self, table: str) -> Type:
        try:
            return self.tables[table]
        except KeyError:
            raise StoreError(f"Unknown table: {table}") from None

    @staticmethod
    def _to_record(obj: Any) -> Record:
        return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}

    @staticmethod
    def _key_clause(model: Type, key: Mapping[str, Any]) -> list:
        primary_keys = {column.key for column in model.__table__.primary_key.columns}
        if set(key) != primary_keys:
            raise StoreError(
                f"Key {sorted(key)} does not match primary key {sorted(primary_keys)} of {model.__tablename__}"
            )
        return [getattr(model, name) == value for name, value in key.items()]

    def scan_all(self, table: str) -> List[Record]:
        model = self._model(table)
        try:
            with self.session_factory() as session:
                return [self._to_record(obj) for obj in session.scalars(select(model))]
        except SQLAlchemyError as e:
            store_errors.labels(operation="scan").inc()
            raise StoreError(f"Failed to scan {table}: {e}") from e

    def query_by_index(
        self,
        index: str,
        value: Any,
        ascending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Record]:
        try:
            definition = self.indexes[index]
        except KeyError:
            raise StoreError(f"Unknown index: {index}") from None

        model = self._model(definition.table)
        query = select(model).where(getattr(model, definition.hash_key) == value)
        if definition.sort_key is not None:
            sort_column = getattr(model, definition.sort_key)
            query = query.order_by(sort_column.asc() if ascending else sort_column.desc())
        if limit is not None:
            query = query.limit(limit)

        try:
            with self.session_factory() as session:
                return [self._to_record(obj) for obj in session.scalars(query)]
        except SQLAlchemyError as e:
            store_errors.labels(operation="query").inc()
            raise StoreError(f"Failed to query {index}: {e}") from e

    def get_item(self, table: str, key: Mapping[str, Any]) -> Optional[Record]:
        model = self._model(table)
        query = select(model).where(*self._key_clause(model, key))
        try:
            with self.session_factory() as session:
                obj = session.scalars(query).first()
                return self._to_record(obj) if obj is not None else None
        except SQLAlchemyError as e:
            store_errors.labels(operation="get").inc()
            raise StoreError(f"Failed to get item from {table}: {e}") from e

    def put_item(self, table: str, item: Mapping[str, Any]) -> None:
        model = self._model(table)
        try:
            with self.session_factory() as session:
                session.execute(insert(model).values(**item))
                session.commit()
        except IntegrityError as e:
            raise ItemExists(f"Item already exists in {table}") from e
        except SQLAlchemyError as e:
            store_errors.labels(operation="put").inc()
            raise StoreError(f"Failed to put item into {table}: {e}") from e

    def atomic_update(
        self,
        table: str,
        key: Mapping[str, Any],
        increments: Mapping[str, int],
        create_defaults: Optional[Mapping[str, Any]] = None,
        ratios: Optional[Ratios] = None,
    ) -> None:
        model = self._model(table)
        ratios = ratios or {}
        statement = (
            update(model)
            .where(*self._key_clause(model, key))
            .values(**self._update_values(model, increments, ratios))
            .execution_options(synchronize_session=False)
        )

        try:
            with self.session_factory() as session:
                if session.execute(statement).rowcount == 0:
                    try:
                        session.execute(
                            insert(model).values(**self._created_item(key, increments, create_defaults, ratios))
                        )
                    except IntegrityError:
                        # Another writer created the record first; apply on top of it
                        session.rollback()
                        logger.debug(f"Lost creation race in {table} for {dict(key)}, retrying update")
                        if session.execute(statement).rowcount == 0:
                            raise StoreError(f"Failed to create item in {table} for {dict(key)}")
                session.commit()
        except SQLAlchemyError as e:
            store_errors.labels(operation="update").inc()
            raise StoreError(f"Failed to update item in {table}: {e}") from e

    @staticmethod
    def _update_values(model: Type, increments: Mapping[str, int], ratios: Ratios) -> Dict[str, Any]:
        """SET expressions; every value derives from the pre-update row in one statement."""
        values = {name: getattr(model, name) + amount for name, amount in increments.items()}
        for name, (numerator, denominator) in ratios.items():
            values[name] = cast(getattr(model, numerator) + increments.get(numerator, 0), Float) / (
                getattr(model, denominator) + increments.get(denominator, 0)
            )
        return values

    @staticmethod
    def _created_item(
        key: Mapping[str, Any],
        increments: Mapping[str, int],
        create_defaults: Optional[Mapping[str, Any]],
        ratios: Ratios,
    ) -> Record:
        item: Record = dict(create_defaults or {})
        item.update(key)
        for name, amount in increments.items():
            item[name] = item.get(name, 0) + amount
        for name, (numerator, denominator) in ratios.items():
            item[name] = item[numerator] / item[denominator] if item[denominator] else 0.0
        return item


def default_tables() -> Dict[str, Type]:
    """Table names from settings mapped to their models."""
    return {
        settings.store.words_table: Word,
        settings.store.users_table: User,
        settings.store.word_statistics_table: WordStatistic,
    }


def default_indexes() -> Dict[str, IndexDefinition]:
    """Secondary indexes the services query."""
    return {
        settings.store.email_index: IndexDefinition(settings.store.users_table, "email"),
        settings.store.success_ratio_index: IndexDefinition(
            settings.store.word_statistics_table, "user_id", "success_ratio"
        ),
    }
