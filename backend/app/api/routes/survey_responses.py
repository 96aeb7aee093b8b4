import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_store
from app.core.deps import get_current_admin
from app.schemas import SortConfig, SortDirection, SurveyResponseFilter, SurveyResponseRecord
from app.services import survey_responses as survey_service
from app.services.exceptions import SurveyResponseNotFoundError
from app.store.base import DocumentStore

router = APIRouter(dependencies=[Depends(get_current_admin)])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[SurveyResponseRecord])
async def get_survey_responses(
    search: str = "",
    event_location_id: Optional[str] = None,
    sort_key: Optional[str] = None,
    direction: SortDirection = "asc",
    store: DocumentStore = Depends(get_store),
):
    responses = await survey_service.list_survey_responses(store)
    return survey_service.search_and_sort_survey_responses(
        responses,
        SurveyResponseFilter(search=search, event_location_id=event_location_id),
        SortConfig(key=sort_key, direction=direction),
    )


@router.get("/{response_id}", response_model=SurveyResponseRecord)
async def get_survey_response(response_id: str, store: DocumentStore = Depends(get_store)):
    try:
        return await survey_service.get_survey_response(store, response_id)
    except SurveyResponseNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{response_id}")
async def delete_survey_response(response_id: str, store: DocumentStore = Depends(get_store)):
    try:
        await survey_service.delete_survey_response(store, response_id)
    except SurveyResponseNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"status": "success", "message": f"Survey response {response_id} deleted."}


@router.get("/{response_id}/display")
async def display_survey_response(response_id: str, store: DocumentStore = Depends(get_store)):
    """Detail view with star ratings"""
    try:
        response = await survey_service.get_survey_response(store, response_id)
    except SurveyResponseNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return survey_service.describe_survey_response(response)
