"""Response repository."""
from typing import Dict, List, Optional
from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy import func

from app.models.response import Response
from app.models.survey import Survey


class ResponseRepository:
    """Submission metadata data access layer."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def create_response(self, survey_id: int, user_id: Optional[int],
                        completion_time_seconds: Optional[int] = None) -> Response:
        """Stage a submission record and flush it to get an id; the caller commits."""
        response = Response(
            survey_id=survey_id,
            user_id=user_id,
            completion_time_seconds=completion_time_seconds
        )
        self.db.add(response)
        self.db.flush()
        return response
    
    def get_by_survey(self, survey_id: int) -> List[Response]:
        """Get all submissions for a survey."""
        return self.db.query(Response)\
            .filter(Response.survey_id == survey_id)\
            .order_by(Response.created_at.asc())\
            .all()
    
    def get_by_user(self, user_id: int) -> List[Response]:
        """All submissions made by a user."""
        return self.db.query(Response)\
            .filter(Response.user_id == user_id)\
            .all()
    
    def get_latest_for_user(self, user_id: int, survey_id: int) -> Optional[Response]:
        """A user's most recent submission to a survey."""
        return self.db.query(Response)\
            .filter(Response.user_id == user_id, Response.survey_id == survey_id)\
            .order_by(Response.created_at.desc(), Response.id.desc())\
            .first()
    
    def count_by_survey(self) -> Dict[int, int]:
        """Submission count per survey id."""
        rows = self.db.query(Response.survey_id, func.count(Response.id))\
            .group_by(Response.survey_id)\
            .all()
        return {survey_id: count for survey_id, count in rows}
    
    def get_recent(self, limit: int) -> List[Response]:
        """Newest submissions first, with user and survey loaded."""
        return self.db.query(Response)\
            .options(
                joinedload(Response.user),
                joinedload(Response.survey).selectinload(Survey.questions),
            )\
            .order_by(Response.created_at.desc(), Response.id.desc())\
            .limit(limit)\
            .all()
