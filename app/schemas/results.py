"""Survey results schemas (admin dashboard and CSV export)."""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Any
from datetime import datetime


class CamelModel(BaseModel):
    """Serialized with camelCase keys, populated by field name."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuestionAnalytics(CamelModel):
    """
    Type-specific statistics for one question.

    Every field is present for every question type; fields that do not
    apply to the question's type stay None or empty.
    """
    # Rating
    average_rating: Optional[float] = None
    median_rating: Optional[float] = None
    min_rating: Optional[int] = None
    max_rating: Optional[int] = None
    rating_distribution: Dict[str, int] = Field(default_factory=dict)
    # Choice
    option_counts: Dict[str, int] = Field(default_factory=dict)
    option_percentages: Dict[str, float] = Field(default_factory=dict)
    most_popular_option: Optional[str] = None
    least_popular_option: Optional[str] = None
    # Text
    average_text_length: Optional[int] = None
    min_text_length: Optional[int] = None
    max_text_length: Optional[int] = None
    common_keywords: List[str] = Field(default_factory=list)
    # Overflow
    custom_metrics: Dict[str, Any] = Field(default_factory=dict)


class RespondentInfo(CamelModel):
    """Respondent identity embedded in an answer summary."""
    respondent_id: str
    name: str
    email: Optional[str] = None
    is_anonymous: bool


class AnswerSummary(CamelModel):
    """One answer as shown under its question."""
    answer_id: int
    answer_text: Optional[str] = None
    rating_value: Optional[int] = None
    submitted_at: datetime
    respondent: RespondentInfo


class QuestionResult(CamelModel):
    """Per-question results with analytics."""
    question_id: int
    question_text: str
    question_type: str
    order_number: Optional[int] = None
    required: bool = False
    total_answers: int
    completion_rate: float
    answers: List[AnswerSummary] = Field(default_factory=list)
    analytics: QuestionAnalytics


class ResponseDetail(CamelModel):
    """One answer as shown under its respondent."""
    question_id: int
    question_text: str
    answer_text: Optional[str] = None
    rating_value: Optional[int] = None
    submitted_at: datetime


class Respondent(CamelModel):
    """A logical respondent and everything they answered."""
    respondent_id: str
    name: str
    email: Optional[str] = None
    is_anonymous: bool
    total_answers_submitted: int
    first_submission_at: datetime
    responses: List[ResponseDetail] = Field(default_factory=list)


class SurveyResultsView(CamelModel):
    """Full results of one survey."""
    survey_id: int
    survey_title: str
    survey_description: Optional[str] = None
    survey_created_at: Optional[datetime] = None
    total_responses: int
    total_questions: int
    question_results: List[QuestionResult] = Field(default_factory=list)
    respondents: List[Respondent] = Field(default_factory=list)
