"""Grouping answers into respondents."""
from datetime import datetime, timedelta, timezone

from app.models import Answer, Question, User
from app.services.respondent_resolver import ANONYMOUS_NAME, resolve_respondents, respondent_key

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_question(question_id, order_number):
    return Question(id=question_id, survey_id=1, type="TEXT", question_text=f"Q{question_id}",
                    order_number=order_number)


def make_answer(answer_id, question, minutes, user=None):
    return Answer(id=answer_id, question=question, user=user, answer_text="x",
                  created_at=T0 + timedelta(minutes=minutes))


def test_keys_distinguish_users_and_anonymous_answers():
    question = make_question(1, 1)
    user = User(id=7, name="Jane", email="jane@example.com")

    assert respondent_key(make_answer(3, question, 0, user)) == "user_7"
    assert respondent_key(make_answer(4, question, 0)) == "anonymous_4"


def test_user_answers_are_merged_across_submissions():
    q1, q2 = make_question(1, 1), make_question(2, 2)
    user = User(id=7, name="Jane", email="jane@example.com")
    answers = [
        make_answer(1, q1, 0, user),
        make_answer(2, q2, 60, user),
    ]

    groups = resolve_respondents(answers)

    assert len(groups) == 1
    assert groups[0].respondent_id == "user_7"
    assert groups[0].name == "Jane"
    assert groups[0].email == "jane@example.com"
    assert groups[0].is_anonymous is False
    assert groups[0].total_answers == 2
    assert groups[0].first_submission_at == T0


def test_each_anonymous_answer_is_its_own_respondent():
    q1, q2 = make_question(1, 1), make_question(2, 2)
    answers = [make_answer(10, q1, 0), make_answer(11, q2, 0)]

    groups = resolve_respondents(answers)

    assert [g.respondent_id for g in groups] == ["anonymous_10", "anonymous_11"]
    assert all(g.is_anonymous and g.name == ANONYMOUS_NAME and g.email is None for g in groups)
    assert all(g.total_answers == 1 for g in groups)


def test_groups_are_ordered_by_first_submission():
    question = make_question(1, 1)
    early = User(id=1, name="Early", email="early@example.com")
    late = User(id=2, name="Late", email="late@example.com")
    answers = [
        make_answer(1, question, 30, late),
        make_answer(2, question, 20),
        make_answer(3, question, 10, early),
        make_answer(4, question, 40, early),
    ]

    groups = resolve_respondents(answers)

    assert [g.respondent_id for g in groups] == ["user_1", "anonymous_2", "user_2"]


def test_answers_within_a_group_follow_question_order_with_nulls_last():
    user = User(id=7, name="Jane", email="jane@example.com")
    unordered = make_question(1, None)
    second = make_question(2, 2)
    first = make_question(3, 1)
    answers = [
        make_answer(1, unordered, 0, user),
        make_answer(2, second, 1, user),
        make_answer(3, first, 2, user),
    ]

    groups = resolve_respondents(answers)

    assert [a.question.id for a in groups[0].answers] == [3, 2, 1]


def test_no_answers_means_no_respondents():
    assert resolve_respondents([]) == []


def test_resolving_twice_gives_the_same_groups():
    q1, q2 = make_question(1, 2), make_question(2, 1)
    user = User(id=7, name="Jane", email="jane@example.com")
    answers = [
        make_answer(1, q1, 5, user),
        make_answer(2, q1, 1),
        make_answer(3, q2, 6, user),
        make_answer(4, q2, 3),
    ]

    def summary(groups):
        return [(g.respondent_id, [a.id for a in g.answers]) for g in groups]

    first = summary(resolve_respondents(answers))
    second = summary(resolve_respondents(answers))

    assert first == second
    assert first == [("anonymous_2", [2]), ("anonymous_4", [4]), ("user_7", [3, 1])]
