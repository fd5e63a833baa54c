"""Public survey view and response submission."""
from datetime import datetime, timedelta, timezone

from app.models import Answer, Response


def ordered_ids(survey):
    return [q.id for q in sorted(survey.questions, key=lambda q: q.order_number)]


def test_public_view_lists_questions_in_order(client, make_survey):
    survey = make_survey(questions=[
        {"type": "TEXT", "text": "Last", "order": None},
        {"type": "TEXT", "text": "Second", "order": 2},
        {"type": "TEXT", "text": "First", "order": 1},
    ])

    response = client.get(f"/surveys/{survey.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Customer feedback"
    assert [q["questionText"] for q in body["questions"]] == ["First", "Second", "Last"]


def test_public_view_of_unknown_survey(client):
    response = client.get("/surveys/999")

    assert response.status_code == 404
    body = response.json()
    assert body["code"] == "survey_not_found"
    assert body["message"] == "Survey not found with id: 999"
    assert body["retriable"] is False
    assert response.headers["X-Request-Id"] == body["request_id"]


def test_anonymous_submission(client, db, feedback_survey):
    rating, choice, comment = ordered_ids(feedback_survey)

    response = client.post(f"/surveys/{feedback_survey.id}/responses", json={
        "answers": [
            {"questionId": rating, "ratingValue": 4},
            {"questionId": choice, "answerValue": "Yes"},
            {"questionId": comment, "answerValue": "  Friendly staff  "},
        ],
        "completionTimeSeconds": 95,
    })

    assert response.status_code == 201
    body = response.json()
    assert body == {
        "responseId": body["responseId"],
        "surveyId": feedback_survey.id,
        "answersSaved": 3,
        "anonymous": True,
    }
    stored = db.query(Response).one()
    assert stored.user_id is None
    assert stored.completion_time_seconds == 95
    answers = {a.question_id: a for a in db.query(Answer).all()}
    assert answers[rating].rating_value == 4
    assert answers[rating].answer_text is None
    assert answers[comment].answer_text == "Friendly staff"
    assert all(a.user_id is None for a in answers.values())


def test_authenticated_submission_is_attributed(client, db, feedback_survey, respondent_user, user_headers):
    rating, _, _ = ordered_ids(feedback_survey)

    response = client.post(
        f"/surveys/{feedback_survey.id}/responses",
        json={"answers": [{"questionId": rating, "ratingValue": 5}]},
        headers=user_headers,
    )

    assert response.status_code == 201
    assert response.json()["anonymous"] is False
    assert db.query(Answer).one().user_id == respondent_user.id
    assert db.query(Response).one().user_id == respondent_user.id


def test_invalid_token_submits_anonymously(client, feedback_survey):
    rating, _, _ = ordered_ids(feedback_survey)

    response = client.post(
        f"/surveys/{feedback_survey.id}/responses",
        json={"answers": [{"questionId": rating, "ratingValue": 3}]},
        headers={"Authorization": "Bearer not-a-token"},
    )

    assert response.status_code == 201
    assert response.json()["anonymous"] is True


def test_blank_optional_answers_are_skipped(client, db, feedback_survey):
    rating, choice, comment = ordered_ids(feedback_survey)

    response = client.post(f"/surveys/{feedback_survey.id}/responses", json={
        "answers": [
            {"questionId": rating, "ratingValue": 0},
            {"questionId": choice, "answerValue": ""},
            {"questionId": comment, "answerValue": "   "},
        ],
    })

    assert response.status_code == 201
    assert response.json()["answersSaved"] == 1
    assert db.query(Answer).count() == 1


def test_missing_required_answer_is_rejected(client, db, feedback_survey):
    _, choice, _ = ordered_ids(feedback_survey)

    response = client.post(f"/surveys/{feedback_survey.id}/responses", json={
        "answers": [{"questionId": choice, "answerValue": "No"}],
    })

    assert response.status_code == 400
    assert "Rate our service" in response.json()["message"]
    assert db.query(Answer).count() == 0
    assert db.query(Response).count() == 0


def test_duplicate_question_is_rejected(client, db, feedback_survey):
    rating, _, _ = ordered_ids(feedback_survey)

    response = client.post(f"/surveys/{feedback_survey.id}/responses", json={
        "answers": [
            {"questionId": rating, "ratingValue": 4},
            {"questionId": rating, "ratingValue": 2},
        ],
    })

    assert response.status_code == 400
    assert "more than once" in response.json()["message"]
    assert db.query(Answer).count() == 0
    assert db.query(Response).count() == 0


def test_out_of_range_rating_is_rejected(client, feedback_survey):
    rating, _, _ = ordered_ids(feedback_survey)

    response = client.post(f"/surveys/{feedback_survey.id}/responses", json={
        "answers": [{"questionId": rating, "ratingValue": 6}],
    })

    assert response.status_code == 400
    assert "between 0 and 5" in response.json()["message"]


def test_question_from_another_survey_is_rejected(client, make_survey, feedback_survey):
    other = make_survey(title="Other", questions=[{"type": "TEXT", "text": "Elsewhere"}])
    rating, _, _ = ordered_ids(feedback_survey)

    response = client.post(f"/surveys/{feedback_survey.id}/responses", json={
        "answers": [
            {"questionId": rating, "ratingValue": 5},
            {"questionId": other.questions[0].id, "answerValue": "sneaky"},
        ],
    })

    assert response.status_code == 400
    assert "is not part of survey" in response.json()["message"]


def test_inactive_survey_is_closed(client, make_survey):
    survey = make_survey(status="DRAFT", questions=[{"type": "TEXT", "text": "Hi"}])

    response = client.post(f"/surveys/{survey.id}/responses", json={
        "answers": [{"questionId": survey.questions[0].id, "answerValue": "hello"}],
    })

    assert response.status_code == 409
    assert response.json()["code"] == "survey_closed"


def test_expired_survey_is_closed(client, make_survey):
    survey = make_survey(
        questions=[{"type": "TEXT", "text": "Hi"}],
        end_date=datetime.now(timezone.utc) - timedelta(days=1),
    )

    response = client.post(f"/surveys/{survey.id}/responses", json={
        "answers": [{"questionId": survey.questions[0].id, "answerValue": "hello"}],
    })

    assert response.status_code == 409
    assert response.json()["code"] == "survey_expired"


def test_submission_to_unknown_survey(client):
    response = client.post("/surveys/999/responses", json={"answers": []})

    assert response.status_code == 404
    assert response.json()["code"] == "survey_not_found"


def test_negative_completion_time_fails_validation(client, feedback_survey):
    response = client.post(f"/surveys/{feedback_survey.id}/responses", json={
        "answers": [],
        "completionTimeSeconds": -5,
    })

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"
