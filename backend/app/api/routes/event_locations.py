import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_store
from app.core.deps import get_current_admin
from app.schemas import (
    EventLocationCreate,
    EventLocationFilter,
    EventLocationRecord,
    EventLocationStatus,
    EventLocationUpdate,
    EventLocationUploadResponse,
    SortConfig,
    SortDirection,
)
from app.services import event_locations as location_service
from app.services.exceptions import EventLocationNotFoundError, InvalidEventLocationError
from app.store.base import DocumentStore

router = APIRouter(dependencies=[Depends(get_current_admin)])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[EventLocationRecord])
async def get_event_locations(
    search: str = "",
    status_filter: Optional[EventLocationStatus] = Query(default=None, alias="status"),
    sort_key: Optional[str] = None,
    direction: SortDirection = "asc",
    store: DocumentStore = Depends(get_store),
):
    locations = await location_service.list_event_locations(store)
    return location_service.search_and_sort_event_locations(
        locations,
        EventLocationFilter(search=search, status=status_filter),
        SortConfig(key=sort_key, direction=direction),
    )


@router.post(
    "",
    response_model=EventLocationUploadResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_event_locations(
    locations: List[EventLocationCreate],
    store: DocumentStore = Depends(get_store),
):
    """Bulk create event locations"""
    try:
        ids = await location_service.create_event_locations(store, locations)
    except InvalidEventLocationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return EventLocationUploadResponse(
        success=True,
        message=f"Successfully uploaded {len(ids)} event locations.",
        ids=ids,
    )


@router.patch("/{location_id}", response_model=EventLocationRecord)
async def update_event_location(
    location_id: str,
    changes: EventLocationUpdate,
    store: DocumentStore = Depends(get_store),
):
    try:
        return await location_service.update_event_location(store, location_id, changes)
    except EventLocationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidEventLocationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{location_id}")
async def delete_event_location(location_id: str, store: DocumentStore = Depends(get_store)):
    try:
        await location_service.delete_event_location(store, location_id)
    except EventLocationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"status": "success", "message": f"Event location {location_id} deleted."}
