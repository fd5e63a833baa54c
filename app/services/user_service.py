"""User service - the respondent's own view."""
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.exceptions import SurveyNotFoundError
from app.models.survey import Survey
from app.models.user import User
from app.repositories.answer_repository import AnswerRepository
from app.repositories.response_repository import ResponseRepository
from app.repositories.survey_repository import SurveyRepository
from app.schemas.user import (
    UserAnswerView,
    UserDashboard,
    UserDashboardStats,
    UserOwnResponse,
    UserSurveySummary,
)


def _estimated_time(survey: Survey) -> str:
    return f"{max(5, len(survey.questions))} minutes"


class UserService:
    """Dashboard and own-answer lookups for a signed-in user."""

    def __init__(self, db: Session):
        self.db = db
        self.survey_repo = SurveyRepository(db)
        self.answer_repo = AnswerRepository(db)
        self.response_repo = ResponseRepository(db)

    def get_dashboard(self, user: User) -> UserDashboard:
        """
        Active surveys split into pending and completed for this user.

        A survey counts as completed once the user has answered any of its questions.
        """
        answered = self.answer_repo.last_answered_by_survey(user.id)
        submissions = self.response_repo.count_by_survey()

        pending: List[UserSurveySummary] = []
        completed: List[UserSurveySummary] = []
        for survey in self.survey_repo.get_all():
            if not survey.is_active:
                continue
            if survey.id in answered:
                completed.append(UserSurveySummary(
                    id=survey.id,
                    title=survey.title,
                    description=survey.description,
                    status="COMPLETED",
                    completed_date=answered[survey.id],
                    responses=submissions.get(survey.id, 0),
                ))
            else:
                pending.append(UserSurveySummary(
                    id=survey.id,
                    title=survey.title,
                    description=survey.description,
                    status="PENDING",
                    deadline=survey.end_date,
                    estimated_time=_estimated_time(survey),
                ))

        times = [
            response.completion_time_seconds
            for response in self.response_repo.get_by_user(user.id)
            if response.completion_time_seconds is not None and response.completion_time_seconds > 0
        ]
        stats = UserDashboardStats(
            completed_surveys_count=len(completed),
            average_completion_time_minutes=round(sum(times) / len(times) / 60, 2) if times else None,
            total_time_spent_minutes=sum(times) // 60 if times else None,
        )
        return UserDashboard(stats=stats, pending_surveys=pending, completed_surveys=completed)

    def get_own_response(self, user: User, survey_id: int) -> UserOwnResponse:
        """
        The user's answers to one survey, in question display order.

        Raises:
            SurveyNotFoundError: If survey not found
            HTTPException: If the user has not answered this survey
        """
        if not self.survey_repo.get_by_id(survey_id, include_questions=False):
            raise SurveyNotFoundError(survey_id)

        answers = self.answer_repo.get_by_user_and_survey(user.id, survey_id)
        if not answers:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No response found for this survey"
            )
        answers.sort(key=lambda a: a.question.sort_key)

        submission = self.response_repo.get_latest_for_user(user.id, survey_id)
        if submission is not None:
            submitted_at = submission.created_at
        else:
            submitted_at = min(a.created_at for a in answers)

        return UserOwnResponse(
            response_id=submission.id if submission else None,
            survey_id=survey_id,
            submitted_at=submitted_at,
            completion_time_seconds=submission.completion_time_seconds if submission else None,
            answers=[
                UserAnswerView(
                    question_id=a.question_id,
                    question_text=a.question.question_text,
                    question_type=a.question.type,
                    answer_text=a.answer_text,
                    rating_value=a.rating_value,
                )
                for a in answers
            ],
        )
