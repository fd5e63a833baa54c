"""Database models."""
from app.models.user import User, UserRole
from app.models.survey import Survey, SurveyStatus, Question, QuestionType
from app.models.answer import Answer
from app.models.response import Response

__all__ = [
    "User",
    "UserRole",
    "Survey",
    "SurveyStatus",
    "Question",
    "QuestionType",
    "Answer",
    "Response",
]
