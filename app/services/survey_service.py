"""Survey service."""
import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.exceptions import SurveyNotFoundError
from app.repositories.survey_repository import SurveyRepository
from app.repositories.answer_repository import AnswerRepository
from app.models.survey import Survey, SurveyStatus, Question
from app.schemas.survey import (
    SurveyCreate,
    AdminSurveyResponse,
    PublicSurveyResponse,
    QuestionResponse,
    SurveyResponse,
)

logger = logging.getLogger(__name__)


class SurveyService:
    """Survey business logic."""

    def __init__(self, db: Session):
        self.db = db
        self.survey_repo = SurveyRepository(db)
        self.answer_repo = AnswerRepository(db)

    def create_survey(self, survey_data: SurveyCreate) -> Survey:
        """
        Create a new survey with its questions.

        Raises:
            HTTPException: If a survey with the same title exists
        """
        title = survey_data.title.strip()
        if self.survey_repo.exists_by_title(title):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Survey title already exists"
            )

        questions = [
            Question(
                type=question_data.type,
                question_text=question_data.question_text,
                options_json=question_data.options_json,
                order_number=question_data.order_number,
                required=question_data.required,
            )
            for question_data in survey_data.questions
        ]

        survey = self.survey_repo.create(
            title=title,
            description=survey_data.description,
            status=(SurveyStatus.ACTIVE if survey_data.active else SurveyStatus.DRAFT).value,
            end_date=survey_data.end_date,
            questions=questions
        )
        logger.info("Created survey %s with %d questions", survey.id, len(questions))
        return survey

    def get_survey(self, survey_id: int) -> Survey:
        """
        Get survey by ID with its questions.

        Raises:
            SurveyNotFoundError: If survey not found
        """
        survey = self.survey_repo.get_by_id(survey_id)

        if not survey:
            raise SurveyNotFoundError(survey_id)

        return survey

    def get_survey_view(self, survey_id: int) -> PublicSurveyResponse:
        """
        Survey with its questions by order number (nulls last), then id.

        Raises:
            SurveyNotFoundError: If survey not found
        """
        survey = self.get_survey(survey_id)
        questions = sorted(survey.questions, key=lambda q: q.sort_key)
        return PublicSurveyResponse(
            **SurveyResponse.model_validate(survey).model_dump(),
            questions=[QuestionResponse.model_validate(q) for q in questions],
        )

    def list_surveys_with_stats(self) -> List[AdminSurveyResponse]:
        """
        All surveys with question count, respondent count and completion rate.

        Completion rate is answers / (respondents x questions), in percent.
        Respondents are counted the same way the results view resolves them.
        """
        stats = self.answer_repo.respondent_stats_by_survey()
        rows = []
        for survey in self.survey_repo.get_all():
            answer_count, respondents = stats.get(survey.id, (0, 0))
            question_count = len(survey.questions)

            expected = respondents * question_count
            rate = min(100.0, answer_count / expected * 100) if expected else 0.0

            rows.append(AdminSurveyResponse(
                **SurveyResponse.model_validate(survey).model_dump(),
                question_count=question_count,
                total_responses=respondents,
                completion_rate=round(rate, 1),
            ))
        return rows

    def update_status(self, survey_id: int, new_status: SurveyStatus) -> Survey:
        """
        Change survey status.

        Raises:
            SurveyNotFoundError: If survey not found
        """
        survey = self.survey_repo.update(survey_id, status=SurveyStatus(new_status).value)

        if not survey:
            raise SurveyNotFoundError(survey_id)

        logger.info("Survey %s status set to %s", survey_id, survey.status)
        return survey

    def delete_survey(self, survey_id: int) -> None:
        """
        Delete survey with its questions, answers and responses.

        Raises:
            SurveyNotFoundError: If survey not found
        """
        if not self.survey_repo.delete(survey_id):
            raise SurveyNotFoundError(survey_id)

        logger.info("Deleted survey %s", survey_id)
