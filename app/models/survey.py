"""Survey models."""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enum import Enum

from app.core.database import Base


class SurveyStatus(str, Enum):
    """Survey lifecycle states. Lookup is case-insensitive."""
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            return cls.__members__.get(value.strip().upper())
        return None


class QuestionType(str, Enum):
    """
    Question types with dedicated analytics.

    The column itself is an open string; unknown types are stored as given
    and fall through to basic counts.
    """
    TEXT = "TEXT"
    LONG_TEXT = "LONG_TEXT"
    RATING = "RATING"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    RADIO = "RADIO"
    DROPDOWN = "DROPDOWN"


CHOICE_TYPES = {QuestionType.MULTIPLE_CHOICE, QuestionType.RADIO, QuestionType.DROPDOWN}
TEXT_TYPES = {QuestionType.TEXT, QuestionType.LONG_TEXT}


class Survey(Base):
    """Survey model - owns its questions."""
    
    __tablename__ = "surveys"
    
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=SurveyStatus.DRAFT.value)
    end_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    questions = relationship(
        "Question",
        back_populates="survey",
        cascade="all, delete-orphan",
        order_by="Question.id",
    )
    responses = relationship("Response", back_populates="survey", cascade="all, delete-orphan")
    
    @property
    def is_active(self) -> bool:
        return SurveyStatus(self.status) is SurveyStatus.ACTIVE
    
    def __repr__(self):
        return f"<Survey(id={self.id}, title={self.title}, status={self.status})>"


class Question(Base):
    """Question model - belongs to a survey."""
    
    __tablename__ = "questions"
    
    id = Column(Integer, primary_key=True, index=True)
    survey_id = Column(Integer, ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    question_text = Column(Text, nullable=False)
    options_json = Column(Text, nullable=True)  # e.g. ["Poor","OK","Great"]
    order_number = Column(Integer, nullable=True)  # Display order, nulls last
    required = Column(Boolean, default=False, nullable=False)
    
    # Relationships
    survey = relationship("Survey", back_populates="questions")
    answers = relationship("Answer", back_populates="question", cascade="all, delete-orphan")
    
    @property
    def sort_key(self) -> tuple:
        """Order number first (nulls last), then id."""
        return (self.order_number is None, self.order_number or 0, self.id or 0)
    
    def __repr__(self):
        return f"<Question(id={self.id}, type={self.type}, text={self.question_text[:30]})>"
