"""Dashboard analytics service."""
from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.survey import SurveyStatus
from app.repositories.answer_repository import AnswerRepository
from app.repositories.response_repository import ResponseRepository
from app.repositories.survey_repository import SurveyRepository
from app.services.respondent_resolver import ANONYMOUS_NAME


def _to_date(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


def format_completion_time(seconds: Optional[float]) -> str:
    """Human readable duration: "42s", "2m 5s", "1h 3m"; "N/A" when unknown."""
    if seconds is None or seconds <= 0:
        return "N/A"
    total = round(seconds)
    if total < 60:
        return f"{total}s"
    if total < 3600:
        minutes, secs = divmod(total, 60)
        return f"{minutes}m {secs}s"
    hours, minutes = divmod(round(seconds / 60), 60)
    return f"{hours}h {minutes}m"


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value.astimezone(timezone.utc)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def format_time_ago(value: datetime, now: Optional[datetime] = None) -> str:
    """Relative time such as "just now", "5 minutes ago" or "2 weeks ago"."""
    now = now or datetime.now(timezone.utc)
    elapsed = _as_utc(now) - _as_utc(value)
    minutes = int(elapsed.total_seconds() // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return _plural(minutes, "minute")
    if minutes < 24 * 60:
        return _plural(minutes // 60, "hour")
    days = elapsed.days
    if days < 7:
        return _plural(days, "day")
    return _plural(days // 7, "week")


def format_date(value: datetime) -> str:
    return _as_utc(value).strftime("%b %d, %Y at %H:%M")


def _survey_action(status: str) -> str:
    return {
        SurveyStatus.ACTIVE: "Survey activated",
        SurveyStatus.DRAFT: "Survey created",
    }.get(SurveyStatus(status), "Survey updated")


class AnalyticsService:
    """Admin dashboard statistics."""

    def __init__(self, db: Session):
        self.db = db
        self.survey_repo = SurveyRepository(db)
        self.answer_repo = AnswerRepository(db)
        self.response_repo = ResponseRepository(db)

    def get_overview(self, now: Optional[datetime] = None) -> dict:
        """Headline counters for the dashboard."""
        now = now or datetime.now(timezone.utc)
        one_week_ago = now - timedelta(days=7)
        two_weeks_ago = now - timedelta(days=14)
        start_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        surveys = self.survey_repo.get_all()

        return {
            "totalSurveys": len(surveys),
            "activeSurveys": sum(1 for s in surveys if s.is_active),
            "totalResponses": self.answer_repo.count(),
            "responsesThisWeek": self.answer_repo.count(created_after=one_week_ago),
            "responsesLastWeek": self.answer_repo.count(
                created_after=two_weeks_ago, created_before=one_week_ago
            ),
            "newSurveysThisMonth": sum(
                1 for s in surveys
                if s.created_at is not None and _to_date(s.created_at) >= start_of_month.date()
            ),
        }

    def get_response_trends(self, days: int = 30, today: Optional[date] = None) -> List[dict]:
        """Answers per day for the last `days` days, oldest first."""
        today = today or datetime.now(timezone.utc).date()
        first_day = today - timedelta(days=days - 1)
        since = datetime.combine(first_day, datetime.min.time(), tzinfo=timezone.utc)

        per_day = Counter(_to_date(created) for created in self.answer_repo.get_created_since(since))

        trends = []
        for offset in range(days):
            day = first_day + timedelta(days=offset)
            trends.append({
                "date": f"{day.strftime('%b')} {day.day}",
                "fullDate": day.isoformat(),
                "responses": per_day.get(day, 0),
            })
        return trends

    def get_survey_performance(self) -> List[dict]:
        """Answer count per survey, busiest first."""
        counts = self.answer_repo.count_by_survey()
        performance = [
            {
                "surveyId": survey.id,
                "surveyTitle": survey.title,
                "totalResponses": counts.get(survey.id, 0),
                "status": SurveyStatus(survey.status).value,
                "createdAt": survey.created_at,
            }
            for survey in self.survey_repo.get_all()
        ]
        performance.sort(key=lambda row: row["totalResponses"], reverse=True)
        return performance

    def get_average_completion_time(self, survey_id: int) -> Optional[float]:
        """Mean of the positive completion times recorded for a survey."""
        times = [
            response.completion_time_seconds
            for response in self.response_repo.get_by_survey(survey_id)
            if response.completion_time_seconds is not None and response.completion_time_seconds > 0
        ]
        if not times:
            return None
        return sum(times) / len(times)

    def get_recent_activity(self, limit: int = 50, now: Optional[datetime] = None) -> List[dict]:
        """
        Newest survey and answer events, merged and newest first.

        Each kind contributes at most half of `limit` (rounded up).
        """
        now = now or datetime.now(timezone.utc)
        share = (limit + 1) // 2

        activities = [
            {
                "id": survey.id,
                "action": _survey_action(survey.status),
                "survey": survey.title,
                "time": format_time_ago(survey.created_at, now),
                "timestamp": _as_utc(survey.created_at),
                "type": "survey",
            }
            for survey in self.survey_repo.get_recent(share)
        ]
        activities += [
            {
                "id": answer.id,
                "action": "New response",
                "survey": answer.question.survey.title,
                "time": format_time_ago(answer.created_at, now),
                "timestamp": _as_utc(answer.created_at),
                "type": "response",
            }
            for answer in self.answer_repo.get_recent(share)
        ]

        activities.sort(key=lambda activity: activity["timestamp"], reverse=True)
        return activities[:limit]

    def get_recent_responses(self, limit: int = 5, now: Optional[datetime] = None) -> List[dict]:
        """Newest submissions with respondent, survey and timing details."""
        now = now or datetime.now(timezone.utc)
        rows = []
        for response in self.response_repo.get_recent(limit):
            user = response.user
            rows.append({
                "responseId": response.id,
                "surveyId": response.survey_id,
                "surveyName": response.survey.title,
                "userName": user.name if user is not None else ANONYMOUS_NAME,
                "isAnonymous": user is None,
                "submittedAt": _as_utc(response.created_at),
                "totalQuestions": len(response.survey.questions),
                "completionTimeSeconds": response.completion_time_seconds,
                "formattedCompletionTime": format_completion_time(response.completion_time_seconds),
                "formattedTime": format_time_ago(response.created_at, now),
                "formattedDate": format_date(response.created_at),
            })
        return rows
