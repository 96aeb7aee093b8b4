"""Async document store facade.

Documents are plain dicts keyed by field name, with the document id under
``"id"``. A field that is not set is absent from the dict; it is never
present with a ``None`` value.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

REGISTRATIONS = "registrations"
EVENT_LOCATIONS = "event_locations"
SURVEY_RESPONSES = "survey_responses"

COLLECTIONS = (REGISTRATIONS, EVENT_LOCATIONS, SURVEY_RESPONSES)

IDENTITY_KEY_FIELD = "id_number"


class _DeleteField:
    """Marker value: remove the field from the document on update."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "DELETE_FIELD"


DELETE_FIELD = _DeleteField()


class StoreError(Exception):
    """Base exception for document store failures."""
    pass


class StoreUnavailableError(StoreError):
    """Transport, driver or auth failure talking to the store."""
    pass


class DocumentNotFoundError(StoreError):
    """Update target does not exist."""
    pass


class UnknownCollectionError(StoreError):
    """Collection name is not served by this store."""
    pass


def matches_conditions(doc: Mapping[str, Any], conditions: Mapping[str, Iterable[Any]]) -> bool:
    """True when every conditioned field holds one of its accepted values.

    ``None`` in the accepted values matches an absent field.
    """
    for field, accepted in conditions.items():
        if doc.get(field) not in tuple(accepted):
            return False
    return True


class DocumentStore(ABC):
    """Narrow async interface the services talk to."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    async def find_by_identity_key(self, key: str) -> Optional[Dict[str, Any]]:
        matches = await self.find_by_field(REGISTRATIONS, IDENTITY_KEY_FIELD, key)
        return matches[0] if matches else None

    @abstractmethod
    async def find_by_field(self, collection: str, field: str, value: Any) -> List[Dict[str, Any]]:
        """Exact-match query, results in store order."""

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    async def list(
        self,
        collection: str,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def add(self, collection: str, data: Mapping[str, Any]) -> str:
        ...

    @abstractmethod
    async def update_fields(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        """Partial update. ``DELETE_FIELD`` values remove the field."""

    @abstractmethod
    async def update_fields_if(
        self,
        collection: str,
        doc_id: str,
        fields: Mapping[str, Any],
        conditions: Mapping[str, Iterable[Any]],
    ) -> bool:
        """Atomic conditional partial update.

        Applies ``fields`` only if the stored document satisfies
        ``conditions`` at write time. Returns whether the write happened.
        """

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> bool:
        ...

    async def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass
