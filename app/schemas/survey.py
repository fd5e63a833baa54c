"""Survey schemas."""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime

from app.models.survey import SurveyStatus


class SurveyBaseModel(BaseModel):
    """camelCase on the wire, snake_case in code."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Question schemas
class QuestionCreate(SurveyBaseModel):
    """Create question."""
    type: str = Field(..., min_length=1, max_length=50)
    question_text: str = Field(..., min_length=1)
    options_json: Optional[str] = None
    order_number: Optional[int] = None
    required: bool = False

    @field_validator("type")
    @classmethod
    def normalize_type(cls, value: str) -> str:
        return value.strip().upper()


class QuestionResponse(SurveyBaseModel):
    """Question response."""
    id: int
    type: str
    question_text: str
    options_json: Optional[str] = None
    order_number: Optional[int] = None
    required: bool = False


# Survey schemas
class SurveyCreate(SurveyBaseModel):
    """Create survey with questions."""
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    active: bool = False
    end_date: Optional[datetime] = None
    questions: List[QuestionCreate] = Field(default_factory=list)


class SurveyStatusUpdate(SurveyBaseModel):
    """Change survey status (case-insensitive)."""
    status: SurveyStatus

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value):
        return value.strip().upper() if isinstance(value, str) else value


class SurveyResponse(SurveyBaseModel):
    """Survey response."""
    id: int
    title: str
    description: Optional[str] = None
    status: str
    end_date: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class PublicSurveyResponse(SurveyResponse):
    """Survey with its questions, for respondents."""
    questions: List[QuestionResponse] = []


class AdminSurveyResponse(SurveyResponse):
    """Survey row on the admin dashboard."""
    question_count: int
    total_responses: int
    completion_rate: float
