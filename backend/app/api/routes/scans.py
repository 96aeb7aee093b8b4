import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_scan_processor, get_store
from app.core.deps import get_current_admin
from app.schemas import (
    AttendeeRecord,
    ClearStatusResponse,
    CustomerFilter,
    ScanRequest,
    ScanResponse,
    SortConfig,
    SortDirection,
    WorkflowStats,
)
from app.services.customers import list_customers, search_and_sort_customers, workflow_stats
from app.services.scan_processing import ScanProcessor
from app.services.transitions import get_workflow
from app.store.base import DocumentStore

logger = logging.getLogger(__name__)


def build_scan_router(workflow: str) -> APIRouter:
    """
    Same four endpoints for each scan workflow:

        POST   /scan          process a scanned QR code
        GET    ""             table of registrations with workflow state
        GET    /stats         total / applied / pending counts
        DELETE /{record_id}   clear the workflow's status
    """
    flow = get_workflow(workflow)
    router = APIRouter(dependencies=[Depends(get_current_admin)])

    @router.post("/scan", response_model=ScanResponse)
    async def scan(
        payload: ScanRequest,
        processor: ScanProcessor = Depends(get_scan_processor),
    ):
        result = await processor.process_scan(payload.qr_code, workflow)
        return ScanResponse(
            success=result.success,
            message=result.message,
            outcome=result.outcome.value,
            customer=result.record,
            status=result.status,
            timestamp=result.timestamp,
        )

    @router.get("", response_model=List[AttendeeRecord])
    async def list_registrations(
        search: str = "",
        location_id: Optional[str] = None,
        state: Optional[str] = Query(
            default=None,
            description="checked-in (check-in) or redeemed / not-redeemed (redemption)",
        ),
        sort_key: Optional[str] = None,
        direction: SortDirection = "asc",
        store: DocumentStore = Depends(get_store),
    ):
        filter = CustomerFilter(search=search, location_id=location_id)
        if state and workflow == "checkin":
            filter.status = state
        elif state in ("redeemed", "not-redeemed"):
            filter.redemption = state

        customers = await list_customers(store)
        return search_and_sort_customers(
            customers, filter, SortConfig(key=sort_key, direction=direction)
        )

    @router.get("/stats", response_model=WorkflowStats)
    async def stats(
        location_id: Optional[str] = None,
        store: DocumentStore = Depends(get_store),
    ):
        customers = await list_customers(store)
        return workflow_stats(customers, workflow, location_id)

    @router.delete("/{record_id}", response_model=ClearStatusResponse)
    async def clear(
        record_id: str,
        processor: ScanProcessor = Depends(get_scan_processor),
    ):
        if not await processor.clear_status(record_id, workflow):
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to clear {flow.name} status. Please try again.",
            )
        return ClearStatusResponse(success=True, message=f"Cleared {flow.name} status")

    return router


check_in_router = build_scan_router("checkin")
gift_redemption_router = build_scan_router("redemption")
