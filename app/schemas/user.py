"""User schemas."""
from pydantic import BaseModel, EmailStr, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

from app.models.user import UserRole


class UserRegister(BaseModel):
    """Sign-up request."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8)


class Token(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """Authenticated user's profile."""
    id: int
    name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime
    
    model_config = ConfigDict(from_attributes=True)


class UserDashboardModel(BaseModel):
    """camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserSurveySummary(UserDashboardModel):
    """An active survey as listed on the respondent dashboard."""
    id: int
    title: str
    description: Optional[str] = None
    status: str  # PENDING or COMPLETED
    deadline: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    estimated_time: Optional[str] = None
    responses: Optional[int] = None


class UserDashboardStats(UserDashboardModel):
    """Totals over the user's own submissions."""
    completed_surveys_count: int
    average_completion_time_minutes: Optional[float] = None
    total_time_spent_minutes: Optional[int] = None


class UserDashboard(UserDashboardModel):
    """Respondent dashboard."""
    stats: UserDashboardStats
    pending_surveys: List[UserSurveySummary] = []
    completed_surveys: List[UserSurveySummary] = []


class UserAnswerView(UserDashboardModel):
    """One of the user's own answers."""
    question_id: int
    question_text: str
    question_type: str
    answer_text: Optional[str] = None
    rating_value: Optional[int] = None


class UserOwnResponse(UserDashboardModel):
    """What the user submitted to one survey."""
    response_id: Optional[int] = None
    survey_id: int
    submitted_at: datetime
    completion_time_seconds: Optional[int] = None
    answers: List[UserAnswerView] = []
