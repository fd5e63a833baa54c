"""Answer repository."""
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import case, distinct, func

from app.models.answer import Answer
from app.models.survey import Question


class AnswerRepository:
    """Answer data access layer."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_by_survey_id(self, survey_id: int) -> List[Answer]:
        """All answers to any question of a survey, with question and user loaded."""
        return self.db.query(Answer)\
            .join(Question, Question.id == Answer.question_id)\
            .options(joinedload(Answer.question), joinedload(Answer.user))\
            .filter(Question.survey_id == survey_id)\
            .order_by(Answer.id.asc())\
            .all()
    
    def count(self, created_after: Optional[datetime] = None,
              created_before: Optional[datetime] = None) -> int:
        """Count answers, optionally inside a creation window."""
        query = self.db.query(func.count(Answer.id))
        if created_after is not None:
            query = query.filter(Answer.created_at >= created_after)
        if created_before is not None:
            query = query.filter(Answer.created_at < created_before)
        return query.scalar() or 0
    
    def count_by_survey(self) -> dict:
        """Answer count per survey id."""
        rows = self.db.query(Question.survey_id, func.count(Answer.id))\
            .join(Answer, Answer.question_id == Question.id)\
            .group_by(Question.survey_id)\
            .all()
        return {survey_id: count for survey_id, count in rows}
    
    def respondent_stats_by_survey(self) -> Dict[int, Tuple[int, int]]:
        """
        (answer count, respondent count) per survey id, in one query.

        Respondents are distinct users plus one per anonymous answer.
        """
        rows = self.db.query(
                Question.survey_id,
                func.count(Answer.id),
                func.count(distinct(Answer.user_id)),
                func.sum(case((Answer.user_id.is_(None), 1), else_=0)),
            )\
            .join(Answer, Answer.question_id == Question.id)\
            .group_by(Question.survey_id)\
            .all()
        return {
            survey_id: (answers, users + (anonymous or 0))
            for survey_id, answers, users, anonymous in rows
        }

    def get_created_since(self, since: datetime) -> List[datetime]:
        """Creation timestamps of answers submitted since `since`."""
        rows = self.db.query(Answer.created_at)\
            .filter(Answer.created_at >= since)\
            .all()
        return [row.created_at for row in rows]
    
    def add(self, answer: Answer) -> Answer:
        """Stage an answer; the caller commits."""
        self.db.add(answer)
        return answer
    
    def get_recent(self, limit: int) -> List[Answer]:
        """Newest answers first, with question and survey loaded."""
        return self.db.query(Answer)\
            .options(joinedload(Answer.question).joinedload(Question.survey))\
            .order_by(Answer.created_at.desc(), Answer.id.desc())\
            .limit(limit)\
            .all()
    
    def last_answered_by_survey(self, user_id: int) -> Dict[int, datetime]:
        """Survey id -> time of the user's latest answer, for surveys the user answered."""
        rows = self.db.query(Question.survey_id, func.max(Answer.created_at))\
            .join(Answer, Answer.question_id == Question.id)\
            .filter(Answer.user_id == user_id)\
            .group_by(Question.survey_id)\
            .all()
        return {survey_id: answered_at for survey_id, answered_at in rows}
    
    def get_by_user_and_survey(self, user_id: int, survey_id: int) -> List[Answer]:
        """A user's answers to one survey, with questions loaded."""
        return self.db.query(Answer)\
            .join(Question, Question.id == Answer.question_id)\
            .options(joinedload(Answer.question))\
            .filter(Answer.user_id == user_id, Question.survey_id == survey_id)\
            .order_by(Answer.id.asc())\
            .all()
