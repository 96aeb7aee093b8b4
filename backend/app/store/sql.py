import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import false, or_, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.db.base import Base, generate_document_id
from app.db.session import build_session_factory
from app.models.event_location import EventLocation
from app.models.registration import Registration
from app.models.survey_response import SurveyResponse
from app.store.base import (
    DELETE_FIELD,
    DocumentNotFoundError,
    DocumentStore,
    EVENT_LOCATIONS,
    REGISTRATIONS,
    StoreError,
    StoreUnavailableError,
    SURVEY_RESPONSES,
    UnknownCollectionError,
)

logger = logging.getLogger(__name__)

MODELS = {
    REGISTRATIONS: Registration,
    EVENT_LOCATIONS: EventLocation,
    SURVEY_RESPONSES: SurveyResponse,
}


def to_document(row) -> Dict[str, Any]:
    """Row -> document dict. NULL columns are absent fields."""
    doc: Dict[str, Any] = {}
    for column in row.__table__.columns:
        value = getattr(row, column.key)
        if value is None:
            continue
        # SQLite hands back naive datetimes
        if isinstance(value, datetime) and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        doc[column.key] = value
    return doc


class SQLDocumentStore(DocumentStore):
    """Document store backed by SQLAlchemy tables.

    Sessions are blocking, so every call runs in the Starlette threadpool.
    A deleted field is stored as NULL and read back as absent.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory = build_session_factory(engine)

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    @contextmanager
    def _session(self):
        session: Session = self.session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"❌ Store operation failed: {e}")
            raise StoreUnavailableError(str(e)) from e
        finally:
            session.close()

    @staticmethod
    def _model(collection: str):
        try:
            return MODELS[collection]
        except KeyError:
            raise UnknownCollectionError(f"Unknown collection: {collection}")

    @staticmethod
    def _column(model, field: str):
        if field not in model.__table__.columns:
            raise StoreError(f"{model.__tablename__} has no field '{field}'")
        return getattr(model, field)

    def _values(self, model, fields: Mapping[str, Any]) -> Dict[str, Any]:
        values = {}
        for field, value in fields.items():
            if field == "id":
                continue
            self._column(model, field)
            values[field] = None if value is DELETE_FIELD else value
        return values

    # ------------------------------------------------------------------
    # blocking implementations
    # ------------------------------------------------------------------
    def create_schema(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(str(e)) from e

    def _ping(self) -> bool:
        with self._session() as session:
            session.execute(text("SELECT 1"))
        return True

    def _find_by_field(self, collection, field, value):
        model = self._model(collection)
        with self._session() as session:
            rows = session.query(model).filter(self._column(model, field) == value).all()
            return [to_document(r) for r in rows]

    def _get(self, collection, doc_id):
        model = self._model(collection)
        with self._session() as session:
            row = session.get(model, doc_id)
            return to_document(row) if row is not None else None

    def _list(self, collection, order_by, descending):
        model = self._model(collection)
        with self._session() as session:
            query = session.query(model)
            if order_by:
                column = self._column(model, order_by)
                ordering = column.desc() if descending else column.asc()
                query = query.order_by(ordering.nulls_last())
            return [to_document(r) for r in query.all()]

    def _add(self, collection, data):
        model = self._model(collection)
        values = self._values(model, data)
        doc_id = str(data.get("id") or generate_document_id())
        with self._session() as session:
            session.add(model(id=doc_id, **values))
            session.commit()
        return doc_id

    def _update(self, collection, doc_id, fields, conditions):
        model = self._model(collection)
        values = self._values(model, fields)
        clauses = [model.id == doc_id]
        for field, accepted in (conditions or {}).items():
            column = self._column(model, field)
            accepted = tuple(accepted)
            options = [column.in_([v for v in accepted if v is not None])]
            if None in accepted:
                options.append(column.is_(None))
            clauses.append(or_(*options) if accepted else false())

        stmt = (
            update(model)
            .where(*clauses)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        with self._session() as session:
            result = session.execute(stmt)
            session.commit()
            return result.rowcount == 1

    def _delete(self, collection, doc_id):
        model = self._model(collection)
        with self._session() as session:
            row = session.get(model, doc_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    # ------------------------------------------------------------------
    # async interface
    # ------------------------------------------------------------------
    async def ping(self) -> bool:
        return await run_in_threadpool(self._ping)

    async def find_by_field(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        return await run_in_threadpool(self._find_by_field, collection, field, value)

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        return await run_in_threadpool(self._get, collection, doc_id)

    async def list(
        self,
        collection: str,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        return await run_in_threadpool(self._list, collection, order_by, descending)

    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        return await run_in_threadpool(self._add, collection, data)

    async def update_fields(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        updated = await run_in_threadpool(self._update, collection, doc_id, fields, None)
        if not updated:
            raise DocumentNotFoundError(f"No document {doc_id} in {collection}")

    async def update_fields_if(
        self,
        collection: str,
        doc_id: str,
        fields: Mapping[str, Any],
        conditions: Mapping[str, Iterable[Any]],
    ) -> bool:
        return await run_in_threadpool(self._update, collection, doc_id, fields, conditions)

    async def delete(self, collection: str, doc_id: str) -> bool:
        return await run_in_threadpool(self._delete, collection, doc_id)

    def close(self) -> None:
        self.engine.dispose()
