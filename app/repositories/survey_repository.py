"""Survey repository."""
from typing import Optional, List
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import func

from app.models.survey import Survey, Question


class SurveyRepository:
    """Survey data access layer."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def create(self, title: str, description: Optional[str], status: str,
               questions: List[Question], end_date=None) -> Survey:
        """Create a survey together with its questions."""
        survey = Survey(
            title=title,
            description=description,
            status=status,
            end_date=end_date,
            questions=questions
        )
        self.db.add(survey)
        self.db.commit()
        self.db.refresh(survey)
        return survey
    
    def get_by_id(self, survey_id: int, include_questions: bool = True) -> Optional[Survey]:
        """Get survey by ID with optional questions."""
        query = self.db.query(Survey)
        
        if include_questions:
            query = query.options(selectinload(Survey.questions))
        
        return query.filter(Survey.id == survey_id).first()
    
    def get_all(self) -> List[Survey]:
        """Get all surveys with their questions, newest first."""
        return self.db.query(Survey)\
            .options(selectinload(Survey.questions))\
            .order_by(Survey.created_at.desc(), Survey.id.desc())\
            .all()
    
    def exists_by_title(self, title: str) -> bool:
        """Case-insensitive title check."""
        return self.db.query(Survey.id)\
            .filter(func.lower(Survey.title) == title.strip().lower())\
            .first() is not None
    
    def update(self, survey_id: int, **kwargs) -> Optional[Survey]:
        """Update survey fields."""
        survey = self.get_by_id(survey_id, include_questions=False)
        if not survey:
            return None
        
        for key, value in kwargs.items():
            if value is not None and hasattr(survey, key):
                setattr(survey, key, value)
        
        self.db.commit()
        self.db.refresh(survey)
        return survey
    
    def delete(self, survey_id: int) -> bool:
        """Hard delete survey with its questions, answers and responses."""
        survey = self.get_by_id(survey_id, include_questions=False)
        if not survey:
            return False
        
        self.db.delete(survey)
        self.db.commit()
        return True
    
    def get_recent(self, limit: int) -> List[Survey]:
        """Newest surveys first."""
        return self.db.query(Survey)\
            .order_by(Survey.created_at.desc(), Survey.id.desc())\
            .limit(limit)\
            .all()
