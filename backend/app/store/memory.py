import copy
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from app.store.base import (
    COLLECTIONS,
    DELETE_FIELD,
    DocumentNotFoundError,
    DocumentStore,
    UnknownCollectionError,
    matches_conditions,
)


def _apply_fields(doc: Dict[str, Any], fields: Mapping[str, Any]) -> None:
    for field, value in fields.items():
        if field == "id":
            continue
        if value is DELETE_FIELD or value is None:
            doc.pop(field, None)
        else:
            doc[field] = value


def order_documents(docs: List[Dict[str, Any]], order_by: Optional[str], descending: bool) -> List[Dict[str, Any]]:
    """Sort documents on one field; documents missing it go last."""
    if not order_by:
        return docs
    present = [d for d in docs if d.get(order_by) is not None]
    missing = [d for d in docs if d.get(order_by) is None]
    present.sort(key=lambda d: d[order_by], reverse=descending)
    return present + missing


class MemoryDocumentStore(DocumentStore):
    """Process-local store used for development and tests.

    Each public call runs without awaiting, so a conditional update is
    atomic with respect to other coroutines on the same event loop.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {name: {} for name in COLLECTIONS}
        self._clock = clock

    def now(self) -> datetime:
        if self._clock is not None:
            return self._clock()
        return super().now()

    def _collection(self, collection: str) -> Dict[str, Dict[str, Any]]:
        try:
            return self._collections[collection]
        except KeyError:
            raise UnknownCollectionError(f"Unknown collection: {collection}")

    async def find_by_field(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        docs = self._collection(collection).values()
        return [copy.deepcopy(d) for d in docs if d.get(field) == value]

    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        doc = self._collection(collection).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def list(
        self,
        collection: str,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        docs = [copy.deepcopy(d) for d in self._collection(collection).values()]
        return order_documents(docs, order_by, descending)

    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        docs = self._collection(collection)
        doc_id = str(data.get("id") or uuid.uuid4().hex)
        doc: Dict[str, Any] = {"id": doc_id}
        _apply_fields(doc, data)
        docs[doc_id] = doc
        return doc_id

    async def update_fields(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        doc = self._collection(collection).get(doc_id)
        if doc is None:
            raise DocumentNotFoundError(f"No document {doc_id} in {collection}")
        _apply_fields(doc, fields)

    async def update_fields_if(
        self,
        collection: str,
        doc_id: str,
        fields: Mapping[str, Any],
        conditions: Mapping[str, Iterable[Any]],
    ) -> bool:
        doc = self._collection(collection).get(doc_id)
        if doc is None or not matches_conditions(doc, conditions):
            return False
        _apply_fields(doc, fields)
        return True

    async def delete(self, collection: str, doc_id: str) -> bool:
        return self._collection(collection).pop(doc_id, None) is not None
