"""Survey response service."""
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.exceptions import SurveyNotFoundError
from app.models.answer import Answer
from app.models.survey import Question, QuestionType, Survey
from app.models.user import User
from app.repositories.answer_repository import AnswerRepository
from app.repositories.response_repository import ResponseRepository
from app.repositories.survey_repository import SurveyRepository
from app.schemas.response import AnswerSubmit, SubmitResponseRequest, SubmitResponseResult
from app.services.question_analytics import MAX_RATING, MIN_RATING

logger = logging.getLogger(__name__)


def _is_rating(question: Question) -> bool:
    return (question.type or "").upper() == QuestionType.RATING.value


def _has_answer(question: Question, answer: AnswerSubmit) -> bool:
    if _is_rating(question):
        return answer.rating_value is not None
    return bool(answer.answer_value and answer.answer_value.strip())


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class ResponseService:
    """Survey submission business logic."""

    def __init__(self, db: Session):
        self.db = db
        self.survey_repo = SurveyRepository(db)
        self.response_repo = ResponseRepository(db)
        self.answer_repo = AnswerRepository(db)

    def _check_open(self, survey: Survey) -> None:
        if not survey.is_active:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={"code": "survey_closed", "message": "Survey is not accepting responses"}
            )
        if survey.end_date is not None and datetime.now(timezone.utc) > _as_utc(survey.end_date):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={"code": "survey_expired",
                        "message": "Survey has expired and is no longer accepting responses"}
            )

    def _validate(self, questions_by_id: Dict[int, Question],
                  request: SubmitResponseRequest, survey_id: int) -> None:
        seen = set()
        for answer in request.answers:
            if answer.question_id in seen:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Question {answer.question_id} is answered more than once"
                )
            seen.add(answer.question_id)

            question = questions_by_id.get(answer.question_id)
            if question is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Question {answer.question_id} is not part of survey {survey_id}"
                )
            if _is_rating(question) and answer.rating_value is not None \
                    and not MIN_RATING <= answer.rating_value <= MAX_RATING:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Rating value must be between {MIN_RATING} and {MAX_RATING} "
                           f"for question: {question.question_text}"
                )

        answered = {
            answer.question_id
            for answer in request.answers
            if _has_answer(questions_by_id[answer.question_id], answer)
        }
        missing = [
            question.question_text
            for question in sorted(questions_by_id.values(), key=lambda q: q.sort_key)
            if question.required and question.id not in answered
        ]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Please answer all required questions: " + ", ".join(missing)
            )

    def submit_response(self, survey_id: int, request: SubmitResponseRequest,
                        user: Optional[User] = None) -> SubmitResponseResult:
        """
        Store one submission: a Response row and one Answer per answered question.

        Blank answers to optional questions are skipped.

        Raises:
            SurveyNotFoundError: If survey not found
            HTTPException: If the survey is closed or the answers are invalid
        """
        survey = self.survey_repo.get_by_id(survey_id)
        if not survey:
            raise SurveyNotFoundError(survey_id)

        self._check_open(survey)

        questions_by_id = {question.id: question for question in survey.questions}
        self._validate(questions_by_id, request, survey_id)

        try:
            response = self.response_repo.create_response(
                survey_id=survey.id,
                user_id=user.id if user else None,
                completion_time_seconds=request.completion_time_seconds
            )

            saved = 0
            for answer_data in request.answers:
                question = questions_by_id[answer_data.question_id]
                if not _has_answer(question, answer_data):
                    continue

                answer = Answer(question_id=question.id, user_id=user.id if user else None)
                if _is_rating(question):
                    answer.rating_value = answer_data.rating_value
                else:
                    answer.answer_text = answer_data.answer_value.strip()
                self.answer_repo.add(answer)
                saved += 1

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "Stored response %s for survey %s (%d answers, %s)",
            response.id, survey_id, saved, "user %s" % user.id if user else "anonymous"
        )
        return SubmitResponseResult(
            response_id=response.id,
            survey_id=survey.id,
            answers_saved=saved,
            anonymous=user is None,
        )
