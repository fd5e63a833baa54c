"""Response submission schemas."""
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, List


class AnswerSubmit(BaseModel):
    """One answer in a submission."""
    question_id: int
    answer_value: Optional[str] = None  # text, selected option; null for rating questions
    rating_value: Optional[int] = None  # 0-5; null for non-rating questions

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SubmitResponseRequest(BaseModel):
    """A full survey submission."""
    answers: List[AnswerSubmit]
    completion_time_seconds: Optional[int] = Field(None, ge=0)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SubmitResponseResult(BaseModel):
    """Submission receipt."""
    response_id: int
    survey_id: int
    answers_saved: int
    anonymous: bool

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
