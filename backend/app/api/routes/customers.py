import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_store
from app.core.deps import get_current_admin
from app.schemas import AttendeeRecord, CustomerFilter, SortConfig, SortDirection
from app.services import customers as customer_service
from app.services.exceptions import CustomerNotFoundError
from app.store.base import DocumentStore

router = APIRouter(dependencies=[Depends(get_current_admin)])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[AttendeeRecord])
async def get_customers(
    search: str = "",
    location_id: Optional[str] = None,
    sort_key: Optional[str] = None,
    direction: SortDirection = "asc",
    store: DocumentStore = Depends(get_store),
):
    """
    All registrations, newest first.
    Optional: ?search=john&location_id=...&sort_key=full_name&direction=desc
    """
    customers = await customer_service.list_customers(store)
    return customer_service.search_and_sort_customers(
        customers,
        CustomerFilter(search=search, location_id=location_id),
        SortConfig(key=sort_key, direction=direction),
    )


@router.get("/{customer_id}", response_model=AttendeeRecord)
async def get_customer(customer_id: str, store: DocumentStore = Depends(get_store)):
    try:
        return await customer_service.get_customer(store, customer_id)
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{customer_id}")
async def delete_customer(customer_id: str, store: DocumentStore = Depends(get_store)):
    try:
        await customer_service.delete_customer(store, customer_id)
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"status": "success", "message": f"Customer {customer_id} deleted successfully."}
