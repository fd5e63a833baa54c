"""Group a survey's answers into logical respondents."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from app.models.answer import Answer

ANONYMOUS_NAME = "Anonymous User"


def respondent_key(answer: Answer) -> str:
    """
    `user_<id>` for authenticated answers, `anonymous_<answerId>` otherwise.

    Anonymous answers are never merged: each one is its own respondent.
    """
    if answer.user is not None:
        return f"user_{answer.user.id}"
    return f"anonymous_{answer.id}"


def _question_sort_key(answer: Answer) -> tuple:
    question = answer.question
    return (question.order_number is None, question.order_number or 0, question.id or 0)


@dataclass
class RespondentGroup:
    """All answers attributed to one respondent."""
    respondent_id: str
    name: str
    email: Optional[str]
    is_anonymous: bool
    answers: List[Answer] = field(default_factory=list)

    @property
    def total_answers(self) -> int:
        return len(self.answers)

    @property
    def first_submission_at(self) -> datetime:
        return min(answer.created_at for answer in self.answers)


def resolve_respondents(answers: Iterable[Answer]) -> List[RespondentGroup]:
    """
    Partition answers into respondent groups.

    Authenticated users are merged across all their submissions. Each
    group's answers are ordered by question order number (nulls last)
    then question id, and groups are sorted by first submission.
    """
    groups: Dict[str, RespondentGroup] = {}

    for answer in answers:
        key = respondent_key(answer)
        group = groups.get(key)
        if group is None:
            user = answer.user
            group = RespondentGroup(
                respondent_id=key,
                name=user.name if user is not None else ANONYMOUS_NAME,
                email=user.email if user is not None else None,
                is_anonymous=user is None,
            )
            groups[key] = group
        group.answers.append(answer)

    for group in groups.values():
        group.answers.sort(key=_question_sort_key)

    return sorted(groups.values(), key=lambda g: g.first_submission_at)
