import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from app.schemas import AttendeeRecord
from app.services.record_resolver import resolve
from app.services.scan_codes import parse_scan_code
from app.services.transitions import (
    CHECK_IN,
    GIFT_REDEMPTION,
    OutcomeKind,
    StatusWorkflow,
    TransitionOutcome,
    get_workflow,
)
from app.store.base import DocumentStore
from app.utils.formatters import format_timestamp

logger = logging.getLogger(__name__)

INVALID_FORMAT_MESSAGE = "Invalid QR code format"

SUCCESS_MESSAGES = {
    CHECK_IN.name: "Check-in successful",
    GIFT_REDEMPTION.name: "Gift redemption successful",
}

ERROR_MESSAGES = {
    CHECK_IN.name: "An error occurred while processing the check-in",
    GIFT_REDEMPTION.name: "An error occurred while processing the gift redemption",
}


@dataclass
class ScanResult:
    success: bool
    message: str
    outcome: OutcomeKind
    record: Optional[AttendeeRecord] = None
    status: Optional[str] = None
    timestamp: Optional[datetime] = None


def already_applied_message(workflow: StatusWorkflow, timestamp: Optional[datetime]) -> str:
    when = format_timestamp(timestamp)
    if workflow is CHECK_IN:
        return f"User has already checked in at {when}"
    return f"Gift has already been redeemed at {when}"


class ScanProcessor:
    """
    Entry point for the scan screens.

    process_scan: QR text -> ID number -> registration -> one-way transition.
    clear_status: reset a workflow's fields on a registration.

    Neither lets an exception escape; failures come back as a result the
    caller can show directly.
    """

    def __init__(self, store: DocumentStore, prefix: Optional[Sequence[str]] = None):
        self.store = store
        self.prefix = prefix

    async def process_scan(self, raw: str, workflow: str) -> ScanResult:
        try:
            flow = get_workflow(workflow)
        except ValueError as e:
            logger.error(f"❌ {e}")
            return ScanResult(False, str(e), OutcomeKind.ERROR)

        try:
            return await self._process(raw, flow)
        except Exception as e:
            logger.error(f"❌ Error processing {flow.name} scan: {e}", exc_info=True)
            return ScanResult(
                success=False,
                message=ERROR_MESSAGES[flow.name],
                outcome=OutcomeKind.ERROR,
            )

    async def _process(self, raw: str, flow: StatusWorkflow) -> ScanResult:
        id_number = parse_scan_code(raw, self.prefix)
        if not id_number:
            logger.info(f"{flow.name}: rejected unreadable code {raw!r}")
            return ScanResult(False, INVALID_FORMAT_MESSAGE, OutcomeKind.INVALID_FORMAT)

        record = await resolve(self.store, id_number)
        if record is None:
            logger.info(f"{flow.name}: no registration for {id_number}")
            return ScanResult(
                False,
                f"No customer found with ID number: {id_number}",
                OutcomeKind.NOT_FOUND,
            )

        outcome = await flow.apply(self.store, record)
        return self._report(flow, record, id_number, outcome)

    def _report(
        self,
        flow: StatusWorkflow,
        record: AttendeeRecord,
        id_number: str,
        outcome: TransitionOutcome,
    ) -> ScanResult:
        kind = outcome.kind

        if kind == OutcomeKind.APPLIED:
            updated = flow.reflect(record, flow.applied_fields(outcome.timestamp))
            return ScanResult(
                True,
                SUCCESS_MESSAGES[flow.name],
                kind,
                record=updated,
                status=updated.status if flow is CHECK_IN else None,
                timestamp=outcome.timestamp,
            )

        if kind == OutcomeKind.ALREADY_APPLIED:
            return ScanResult(
                False,
                already_applied_message(flow, outcome.timestamp),
                kind,
                record=record,
                status=outcome.status,
                timestamp=outcome.timestamp,
            )

        if kind == OutcomeKind.OTHER_STATUS:
            return ScanResult(
                False,
                f"User status is {outcome.status}",
                kind,
                record=record,
                status=outcome.status,
            )

        # Registration removed between lookup and write
        return ScanResult(
            False,
            f"No customer found with ID number: {id_number}",
            OutcomeKind.NOT_FOUND,
        )

    async def clear_status(self, record_id: str, workflow: str) -> bool:
        try:
            flow = get_workflow(workflow)
        except ValueError as e:
            logger.error(f"❌ {e}")
            return False

        try:
            outcome = await flow.clear(self.store, record_id)
        except Exception as e:
            logger.error(f"❌ Error clearing {flow.name} for {record_id}: {e}", exc_info=True)
            return False
        return outcome.kind == OutcomeKind.CLEAR_APPLIED
