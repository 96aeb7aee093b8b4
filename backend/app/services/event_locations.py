import logging
from datetime import datetime, timezone
from typing import List, Optional

from app.schemas import (
    EventLocationCreate,
    EventLocationFilter,
    EventLocationRecord,
    EventLocationUpdate,
    SortConfig,
)
from app.services.exceptions import EventLocationNotFoundError, InvalidEventLocationError
from app.store.base import DocumentNotFoundError, DocumentStore, EVENT_LOCATIONS
from app.utils.sorting import contains, sort_items

logger = logging.getLogger(__name__)

# Locations without a position sink to the bottom
MISSING_POSITION = 9999


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


async def list_event_locations(store: DocumentStore) -> List[EventLocationRecord]:
    docs = await store.list(EVENT_LOCATIONS, order_by="created_at", descending=True)
    return [EventLocationRecord.model_validate(d) for d in docs]


async def create_event_locations(
    store: DocumentStore, locations: List[EventLocationCreate]
) -> List[str]:
    """Bulk upload; every location gets the same created/updated stamp"""
    if not locations:
        raise InvalidEventLocationError("No event locations to upload")

    stamp = _now_iso()
    ids = []
    for location in locations:
        data = location.model_dump(exclude_none=True)
        data.update(created_at=stamp, updated_at=stamp)
        ids.append(await store.add(EVENT_LOCATIONS, data))

    logger.info(f"✅ Uploaded {len(ids)} event locations")
    return ids


async def update_event_location(
    store: DocumentStore, location_id: str, changes: EventLocationUpdate
) -> EventLocationRecord:
    fields = changes.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise InvalidEventLocationError("Nothing to update")
    fields["updated_at"] = _now_iso()

    try:
        await store.update_fields(EVENT_LOCATIONS, location_id, fields)
    except DocumentNotFoundError:
        raise EventLocationNotFoundError(f"Event location {location_id} not found")

    doc = await store.get(EVENT_LOCATIONS, location_id)
    if doc is None:
        raise EventLocationNotFoundError(f"Event location {location_id} not found")
    return EventLocationRecord.model_validate(doc)


async def delete_event_location(store: DocumentStore, location_id: str) -> None:
    if not await store.delete(EVENT_LOCATIONS, location_id):
        raise EventLocationNotFoundError(f"Event location {location_id} not found")
    logger.info(f"🗑️ Deleted event location {location_id}")


def _sort_value(location: EventLocationRecord, key: str):
    if key == "pos":
        return location.pos if location.pos is not None else MISSING_POSITION
    return getattr(location, key, None)


def search_and_sort_event_locations(
    locations: List[EventLocationRecord],
    filter: Optional[EventLocationFilter] = None,
    sort: Optional[SortConfig] = None,
) -> List[EventLocationRecord]:
    filter = filter or EventLocationFilter()
    sort = sort or SortConfig()
    term = (filter.search or "").strip().lower()

    def keep(location: EventLocationRecord) -> bool:
        if term and not (
            contains(location.location, term)
            or contains(location.venue, term)
            or contains(location.date, term)
        ):
            return False
        if filter.status and location.status != filter.status:
            return False
        return True

    return sort_items(
        [loc for loc in locations if keep(loc)], sort.key, sort.direction, getter=_sort_value
    )
