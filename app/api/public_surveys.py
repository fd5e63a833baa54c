"""Public survey router (respondents)."""
from typing import Annotated
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.limiter import limiter
from app.services.survey_service import SurveyService
from app.services.response_service import ResponseService
from app.schemas.survey import PublicSurveyResponse
from app.schemas.response import SubmitResponseRequest, SubmitResponseResult
from app.api.dependencies import OptionalUser

router = APIRouter(prefix="/surveys", tags=["Public - Surveys"])


@router.get("/{survey_id}", response_model=PublicSurveyResponse)
def get_survey_for_respondent(
    survey_id: int,
    db: Annotated[Session, Depends(get_db)]
):
    """
    Survey with its questions in display order.
    """
    service = SurveyService(db)
    return service.get_survey_view(survey_id)


@router.post("/{survey_id}/responses", response_model=SubmitResponseResult, status_code=201)
@limiter.limit(settings.SUBMISSION_RATE_LIMIT)
def submit_survey_response(
    request: Request,
    survey_id: int,
    payload: SubmitResponseRequest,
    db: Annotated[Session, Depends(get_db)],
    current_user: OptionalUser
):
    """
    Submit answers to an active survey.
    
    - Bearer token optional: without one (or with an invalid one) the
      answers are stored anonymously.
    - Rate-limited per client IP.
    """
    service = ResponseService(db)
    return service.submit_response(survey_id, payload, user=current_user)
