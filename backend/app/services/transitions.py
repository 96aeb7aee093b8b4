"""
One-way status transitions on a registration.

Two workflows share the same shape but touch disjoint fields:

    check-in      status / check_time_stamp
    redemption    redeemed_gift / redemption_time_stamp

``apply`` never does a blind write: after the local checks it issues a single
conditional update, so when two scanners race on the same badge exactly one
of them gets APPLIED and the other ALREADY_APPLIED. ``clear`` resets the
fields unconditionally.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional

from app.schemas import AttendeeRecord
from app.store.base import DELETE_FIELD, DocumentStore, REGISTRATIONS, StoreError

logger = logging.getLogger(__name__)

CHECKED_IN = "checked-in"


class OutcomeKind(str, Enum):
    APPLIED = "applied"
    ALREADY_APPLIED = "already_applied"
    NOT_FOUND = "not_found"
    INVALID_FORMAT = "invalid_format"
    OTHER_STATUS = "other_status"
    CLEAR_APPLIED = "clear_applied"
    CLEAR_FAILED = "clear_failed"
    ERROR = "error"


@dataclass(frozen=True)
class TransitionOutcome:
    kind: OutcomeKind
    timestamp: Optional[datetime] = None
    status: Optional[str] = None


class StatusWorkflow:
    name = ""

    def check(self, record: AttendeeRecord) -> Optional[TransitionOutcome]:
        """Rejection for a record that cannot transition, else None"""
        raise NotImplementedError

    def applied_fields(self, now: datetime) -> Dict[str, Any]:
        raise NotImplementedError

    def apply_conditions(self) -> Mapping[str, Iterable[Any]]:
        raise NotImplementedError

    def cleared_fields(self) -> Dict[str, Any]:
        raise NotImplementedError

    def is_applied(self, record: AttendeeRecord) -> bool:
        raise NotImplementedError

    def reflect(self, record: AttendeeRecord, fields: Mapping[str, Any]) -> AttendeeRecord:
        """Copy of the record with an update applied locally"""
        update = {}
        for field, value in fields.items():
            if value is DELETE_FIELD:
                update[field] = AttendeeRecord.model_fields[field].default
            else:
                update[field] = value
        return record.model_copy(update=update)

    async def apply(self, store: DocumentStore, record: AttendeeRecord) -> TransitionOutcome:
        rejection = self.check(record)
        if rejection is not None:
            return rejection

        now = store.now()
        written = await store.update_fields_if(
            REGISTRATIONS, record.id, self.applied_fields(now), self.apply_conditions()
        )
        if written:
            logger.info(f"✅ {self.name} applied for registration {record.id}")
            return TransitionOutcome(OutcomeKind.APPLIED, timestamp=now)

        # Lost the race, or the record vanished. Re-read only to report.
        current = await store.get(REGISTRATIONS, record.id)
        if current is None:
            return TransitionOutcome(OutcomeKind.NOT_FOUND)
        logger.info(f"{self.name} for registration {record.id} was applied concurrently")
        rejection = self.check(AttendeeRecord.model_validate(current))
        return rejection or TransitionOutcome(OutcomeKind.ALREADY_APPLIED)

    async def clear(self, store: DocumentStore, record_id: str) -> TransitionOutcome:
        try:
            await store.update_fields(REGISTRATIONS, record_id, self.cleared_fields())
        except StoreError as e:
            logger.error(f"❌ Failed to clear {self.name} for registration {record_id}: {e}")
            return TransitionOutcome(OutcomeKind.CLEAR_FAILED)
        logger.info(f"🧹 Cleared {self.name} for registration {record_id}")
        return TransitionOutcome(OutcomeKind.CLEAR_APPLIED)


class CheckInWorkflow(StatusWorkflow):
    name = "check-in"

    def check(self, record):
        if record.status == CHECKED_IN:
            return TransitionOutcome(
                OutcomeKind.ALREADY_APPLIED, timestamp=record.check_time_stamp, status=CHECKED_IN
            )
        if record.status:
            # Statuses owned by other flows are never overwritten
            return TransitionOutcome(OutcomeKind.OTHER_STATUS, status=record.status)
        return None

    def applied_fields(self, now):
        return {"status": CHECKED_IN, "check_time_stamp": now}

    def apply_conditions(self):
        return {"status": (None, "")}

    def cleared_fields(self):
        return {"status": DELETE_FIELD, "check_time_stamp": DELETE_FIELD}

    def is_applied(self, record):
        return record.status == CHECKED_IN


class GiftRedemptionWorkflow(StatusWorkflow):
    name = "gift redemption"

    def check(self, record):
        if record.redeemed_gift is True:
            return TransitionOutcome(OutcomeKind.ALREADY_APPLIED, timestamp=record.redemption_time_stamp)
        return None

    def applied_fields(self, now):
        return {"redeemed_gift": True, "redemption_time_stamp": now}

    def apply_conditions(self):
        return {"redeemed_gift": (None, False)}

    def cleared_fields(self):
        return {"redeemed_gift": False, "redemption_time_stamp": DELETE_FIELD}

    def is_applied(self, record):
        return record.redeemed_gift is True


CHECK_IN = CheckInWorkflow()
GIFT_REDEMPTION = GiftRedemptionWorkflow()

WORKFLOWS: Dict[str, StatusWorkflow] = {
    "checkin": CHECK_IN,
    "redemption": GIFT_REDEMPTION,
}


def get_workflow(name: str) -> StatusWorkflow:
    try:
        return WORKFLOWS[name]
    except KeyError:
        raise ValueError(f"Unknown workflow: {name}")
