"""Dashboard analytics router (Admin)."""
from typing import Annotated
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import SurveyNotFoundError
from app.api.dependencies import AdminUser
from app.repositories.survey_repository import SurveyRepository
from app.services.analytics_service import AnalyticsService, format_completion_time

router = APIRouter(prefix="/admin/analytics", tags=["Admin - Analytics"])


@router.get("/overview")
def get_dashboard_overview(
    db: Annotated[Session, Depends(get_db)],
    current_user: AdminUser,
    response: Response,
):
    """Headline counters for the admin dashboard."""
    response.headers["Cache-Control"] = "private, max-age=60"
    return AnalyticsService(db).get_overview()


@router.get("/response-trends")
def get_response_trends(
    db: Annotated[Session, Depends(get_db)],
    current_user: AdminUser,
    days: int = Query(30, ge=1, le=365),
):
    """Answers per day over the last `days` days."""
    return AnalyticsService(db).get_response_trends(days)


@router.get("/recent-activity")
def get_recent_activity(
    db: Annotated[Session, Depends(get_db)],
    current_user: AdminUser,
    limit: int = Query(50, ge=1, le=200),
):
    """Newest survey and answer events."""
    return AnalyticsService(db).get_recent_activity(limit)


@router.get("/recent-responses")
def get_recent_responses(
    db: Annotated[Session, Depends(get_db)],
    current_user: AdminUser,
    limit: int = Query(5, ge=1, le=100),
):
    """Newest submissions with respondent and timing details."""
    return AnalyticsService(db).get_recent_responses(limit)


@router.get("/survey-performance")
def get_survey_performance(
    db: Annotated[Session, Depends(get_db)],
    current_user: AdminUser,
):
    """Answer counts per survey, busiest first."""
    return AnalyticsService(db).get_survey_performance()


@router.get("/surveys/{survey_id}/completion-time")
def get_completion_time(
    survey_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: AdminUser,
):
    """Average time respondents took to complete a survey."""
    if not SurveyRepository(db).get_by_id(survey_id, include_questions=False):
        raise SurveyNotFoundError(survey_id)

    average = AnalyticsService(db).get_average_completion_time(survey_id)
    return {
        "surveyId": survey_id,
        "averageCompletionTimeSeconds": average,
        "formatted": format_completion_time(average),
    }
