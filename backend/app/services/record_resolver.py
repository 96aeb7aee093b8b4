import logging
from typing import Optional

from app.schemas import AttendeeRecord
from app.store.base import DocumentStore, IDENTITY_KEY_FIELD, REGISTRATIONS

logger = logging.getLogger(__name__)


async def resolve(store: DocumentStore, id_number: str) -> Optional[AttendeeRecord]:
    """Find the registration for an ID number; the first match wins."""
    matches = await store.find_by_field(REGISTRATIONS, IDENTITY_KEY_FIELD, id_number)
    if not matches:
        return None
    if len(matches) > 1:
        logger.warning(
            f"⚠️ {len(matches)} registrations share ID number {id_number}; "
            f"using {matches[0]['id']}"
        )
    return AttendeeRecord.model_validate(matches[0])
