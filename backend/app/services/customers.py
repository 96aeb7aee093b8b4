"""
Customer (registration) directory.

Listing, the search/sort predicates behind the customer, check-in and
gift-redemption tables, and the per-workflow headline counts.
"""
import logging
from typing import List, Optional

from app.schemas import AttendeeRecord, CustomerFilter, SortConfig, WorkflowStats
from app.services.exceptions import CustomerNotFoundError
from app.services.transitions import get_workflow
from app.store.base import DocumentStore, REGISTRATIONS
from app.utils.sorting import contains, sort_items

logger = logging.getLogger(__name__)


async def list_customers(store: DocumentStore) -> List[AttendeeRecord]:
    """All registrations, newest first"""
    docs = await store.list(REGISTRATIONS, order_by="created_at", descending=True)
    return [AttendeeRecord.model_validate(d) for d in docs]


async def get_customer(store: DocumentStore, customer_id: str) -> AttendeeRecord:
    doc = await store.get(REGISTRATIONS, customer_id)
    if doc is None:
        raise CustomerNotFoundError(f"Customer {customer_id} not found")
    return AttendeeRecord.model_validate(doc)


async def delete_customer(store: DocumentStore, customer_id: str) -> None:
    deleted = await store.delete(REGISTRATIONS, customer_id)
    if not deleted:
        raise CustomerNotFoundError(f"Customer {customer_id} not found")
    logger.info(f"🗑️ Deleted customer {customer_id}")


def matches_search(customer: AttendeeRecord, term: str) -> bool:
    if not term:
        return True
    return (
        contains(customer.full_name, term)
        or contains(customer.email_address, term)
        or term in (customer.contact_number or "")
        or contains(customer.id_number, term)
        or contains(customer.customer_type, term)
        or contains(customer.dealer_company_name, term)
    )


def search_and_sort_customers(
    customers: List[AttendeeRecord],
    filter: Optional[CustomerFilter] = None,
    sort: Optional[SortConfig] = None,
) -> List[AttendeeRecord]:
    filter = filter or CustomerFilter()
    sort = sort or SortConfig()
    term = (filter.search or "").strip().lower()

    def keep(customer: AttendeeRecord) -> bool:
        if filter.location_id and customer.location_id != filter.location_id:
            return False
        if filter.status and customer.status != filter.status:
            return False
        if filter.redemption == "redeemed" and customer.redeemed_gift is not True:
            return False
        if filter.redemption == "not-redeemed" and customer.redeemed_gift is True:
            return False
        return matches_search(customer, term)

    return sort_items([c for c in customers if keep(c)], sort.key, sort.direction)


def workflow_stats(
    customers: List[AttendeeRecord],
    workflow: str,
    location_id: Optional[str] = None,
) -> WorkflowStats:
    """Headline counts shown above the check-in / redemption tables"""
    flow = get_workflow(workflow)
    scoped = [c for c in customers if not location_id or c.location_id == location_id]
    applied = sum(1 for c in scoped if flow.is_applied(c))
    return WorkflowStats(
        workflow=workflow,
        location_id=location_id,
        total=len(scoped),
        applied=applied,
        pending=len(scoped) - applied,
    )
