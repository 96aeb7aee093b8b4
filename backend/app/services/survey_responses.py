import logging
from typing import Any, Dict, List, Optional

from app.schemas import SortConfig, SurveyResponseFilter, SurveyResponseRecord
from app.services.exceptions import SurveyResponseNotFoundError
from app.store.base import DocumentStore, SURVEY_RESPONSES
from app.utils.formatters import format_marketing, format_rating
from app.utils.sorting import contains, sort_items

logger = logging.getLogger(__name__)


async def list_survey_responses(store: DocumentStore) -> List[SurveyResponseRecord]:
    """Newest submissions first"""
    docs = await store.list(SURVEY_RESPONSES, order_by="submitted", descending=True)
    return [SurveyResponseRecord.model_validate(d) for d in docs]


async def get_survey_response(store: DocumentStore, response_id: str) -> SurveyResponseRecord:
    doc = await store.get(SURVEY_RESPONSES, response_id)
    if doc is None:
        raise SurveyResponseNotFoundError(f"Survey response {response_id} not found")
    return SurveyResponseRecord.model_validate(doc)


async def delete_survey_response(store: DocumentStore, response_id: str) -> None:
    if not await store.delete(SURVEY_RESPONSES, response_id):
        raise SurveyResponseNotFoundError(f"Survey response {response_id} not found")
    logger.info(f"🗑️ Deleted survey response {response_id}")


def _sort_value(response: SurveyResponseRecord, key: str):
    # Rating columns are addressed by their item name, e.g. "session-app"
    if key in response.ratings:
        return response.ratings[key]
    return getattr(response, key, None)


def search_and_sort_survey_responses(
    responses: List[SurveyResponseRecord],
    filter: Optional[SurveyResponseFilter] = None,
    sort: Optional[SortConfig] = None,
) -> List[SurveyResponseRecord]:
    filter = filter or SurveyResponseFilter()
    sort = sort or SortConfig()
    term = (filter.search or "").strip().lower()

    def keep(response: SurveyResponseRecord) -> bool:
        if filter.event_location_id and response.event_location_id != filter.event_location_id:
            return False
        if not term:
            return True
        return (
            contains(response.name, term)
            or contains(response.email, term)
            or term in (response.contact_number or "")
            or contains(response.feedback, term)
        )

    return sort_items(
        [r for r in responses if keep(r)], sort.key, sort.direction, getter=_sort_value
    )


def describe_survey_response(response: SurveyResponseRecord) -> Dict[str, Any]:
    """Survey response with ratings as stars and the marketing answer as Yes/No"""
    return {
        "id": response.id,
        "name": response.name,
        "email": response.email,
        "contact_number": response.contact_number,
        "event_location_id": response.event_location_id,
        "feedback": response.feedback,
        "marketing": format_marketing(response.marketing),
        "ratings": {item: format_rating(score) for item, score in sorted(response.ratings.items())},
        "submitted": response.submitted,
    }
