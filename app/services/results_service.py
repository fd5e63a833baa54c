"""Survey results assembly."""
import logging
from collections import defaultdict
from typing import Dict, List

from sqlalchemy.orm import Session

from app.core.exceptions import SurveyNotFoundError
from app.models.answer import Answer
from app.models.survey import Question, Survey
from app.repositories.answer_repository import AnswerRepository
from app.repositories.survey_repository import SurveyRepository
from app.schemas.results import (
    AnswerSummary,
    QuestionResult,
    Respondent,
    RespondentInfo,
    ResponseDetail,
    SurveyResultsView,
)
from app.services.question_analytics import analyze_question
from app.services.respondent_resolver import (
    ANONYMOUS_NAME,
    RespondentGroup,
    resolve_respondents,
    respondent_key,
)

logger = logging.getLogger(__name__)


def completion_rate(answer_count: int, respondent_count: int) -> float:
    """Share of respondents that answered, in percent; 0 without respondents."""
    if respondent_count <= 0:
        return 0.0
    return answer_count / respondent_count * 100


def _respondent_info(answer: Answer) -> RespondentInfo:
    user = answer.user
    return RespondentInfo(
        respondent_id=respondent_key(answer),
        name=user.name if user is not None else ANONYMOUS_NAME,
        email=user.email if user is not None else None,
        is_anonymous=user is None,
    )


def _answer_summary(answer: Answer) -> AnswerSummary:
    return AnswerSummary(
        answer_id=answer.id,
        answer_text=answer.answer_text,
        rating_value=answer.rating_value,
        submitted_at=answer.created_at,
        respondent=_respondent_info(answer),
    )


def _respondent(group: RespondentGroup) -> Respondent:
    return Respondent(
        respondent_id=group.respondent_id,
        name=group.name,
        email=group.email,
        is_anonymous=group.is_anonymous,
        total_answers_submitted=group.total_answers,
        first_submission_at=group.first_submission_at,
        responses=[
            ResponseDetail(
                question_id=answer.question.id,
                question_text=answer.question.question_text,
                answer_text=answer.answer_text,
                rating_value=answer.rating_value,
                submitted_at=answer.created_at,
            )
            for answer in group.answers
        ],
    )


def _order_key(result: QuestionResult) -> tuple:
    return (result.order_number is None, result.order_number or 0)


def build_question_result(question: Question, answers: List[Answer],
                          respondent_count: int) -> QuestionResult:
    """Results and analytics of one question."""
    return QuestionResult(
        question_id=question.id,
        question_text=question.question_text,
        question_type=question.type,
        order_number=question.order_number,
        required=bool(question.required),
        total_answers=len(answers),
        completion_rate=completion_rate(len(answers), respondent_count),
        answers=[_answer_summary(a) for a in sorted(answers, key=lambda a: a.created_at)],
        analytics=analyze_question(question, answers),
    )


def assemble_results(survey: Survey, answers: List[Answer]) -> SurveyResultsView:
    """
    Build the results view from an already-loaded survey and its answers.

    Questions are ordered by order number with nulls last; respondents by
    first submission.
    """
    groups = resolve_respondents(answers)

    answers_by_question: Dict[int, List[Answer]] = defaultdict(list)
    for answer in answers:
        answers_by_question[answer.question.id].append(answer)

    question_results = [
        build_question_result(question, answers_by_question.get(question.id, []), len(groups))
        for question in survey.questions
    ]
    question_results.sort(key=_order_key)

    return SurveyResultsView(
        survey_id=survey.id,
        survey_title=survey.title,
        survey_description=survey.description,
        survey_created_at=survey.created_at,
        total_responses=len(groups),
        total_questions=len(survey.questions),
        question_results=question_results,
        respondents=[_respondent(group) for group in groups],
    )


class ResultsService:
    """Read-only survey results."""

    def __init__(self, db: Session):
        self.db = db
        self.survey_repo = SurveyRepository(db)
        self.answer_repo = AnswerRepository(db)

    def get_survey_results(self, survey_id: int) -> SurveyResultsView:
        """
        Full results of a survey: per-question analytics and respondents.

        Raises:
            SurveyNotFoundError: If the survey does not exist
        """
        survey = self.survey_repo.get_by_id(survey_id)
        if not survey:
            raise SurveyNotFoundError(survey_id)

        answers = self.answer_repo.get_by_survey_id(survey_id)
        results = assemble_results(survey, answers)

        logger.info(
            "Assembled results for survey %s: %d questions, %d answers, %d respondents",
            survey_id, results.total_questions, len(answers), results.total_responses
        )
        return results
