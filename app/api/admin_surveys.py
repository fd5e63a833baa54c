"""Survey router (Admin control plane)."""
from typing import Annotated, List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.services.survey_service import SurveyService
from app.services.results_service import ResultsService
from app.schemas.survey import (
    SurveyCreate,
    SurveyStatusUpdate,
    SurveyResponse,
    PublicSurveyResponse,
    AdminSurveyResponse,
)
from app.schemas.results import SurveyResultsView
from app.api.dependencies import AdminUser

router = APIRouter(prefix="/admin/surveys", tags=["Admin - Surveys"])


@router.post("", response_model=SurveyResponse, status_code=201)
def create_survey(
    survey_data: SurveyCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: AdminUser
):
    """
    Create a new survey with questions (Admin only).
    """
    service = SurveyService(db)
    return service.create_survey(survey_data)


@router.get("", response_model=List[AdminSurveyResponse])
def list_surveys(
    db: Annotated[Session, Depends(get_db)],
    current_user: AdminUser
):
    """
    List all surveys with question, respondent and completion stats (Admin only).
    """
    service = SurveyService(db)
    return service.list_surveys_with_stats()


@router.get("/{survey_id}", response_model=PublicSurveyResponse)
def get_survey(
    survey_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: AdminUser
):
    """
    Get survey details with questions (Admin only).
    """
    service = SurveyService(db)
    return service.get_survey_view(survey_id)


@router.get("/{survey_id}/results", response_model=SurveyResultsView)
def get_survey_results(
    survey_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: AdminUser
):
    """
    Aggregated results: per-question analytics and respondents (Admin only).
    """
    service = ResultsService(db)
    return service.get_survey_results(survey_id)


@router.patch("/{survey_id}/status", response_model=SurveyResponse)
def update_survey_status(
    survey_id: int,
    status_data: SurveyStatusUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: AdminUser
):
    """
    Change survey status: DRAFT, ACTIVE or INACTIVE (Admin only).
    """
    service = SurveyService(db)
    return service.update_status(survey_id, status_data.status)


@router.delete("/{survey_id}", status_code=204)
def delete_survey(
    survey_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: AdminUser
):
    """
    Delete survey with all its answers (Admin only).
    """
    service = SurveyService(db)
    service.delete_survey(survey_id)
