"""CSV export endpoint."""


def submit(client, survey, rating_value, comment):
    rating, _, text = sorted(survey.questions, key=lambda q: q.order_number)
    client.post(f"/surveys/{survey.id}/responses", json={
        "answers": [
            {"questionId": rating.id, "ratingValue": rating_value},
            {"questionId": text.id, "answerValue": comment},
        ],
    })


def test_export_default_sections(client, admin_headers, feedback_survey):
    submit(client, feedback_survey, 4, "Quick and\nfriendly")

    response = client.get(f"/admin/exports/surveys/{feedback_survey.id}/analysis/csv", headers=admin_headers)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith(f'attachment; filename="survey_analysis_{feedback_survey.id}_')
    assert disposition.endswith('.csv"')
    text = response.text
    assert "=== SURVEY ANALYSIS REPORT ===" in text
    assert "=== QUESTION ANALYSIS ===" in text
    assert "=== RESPONDENT ANALYSIS ===" in text
    assert "=== RAW RESPONSE DATA ===" not in text


def test_export_with_raw_responses_only(client, admin_headers, feedback_survey):
    submit(client, feedback_survey, 5, "Quick and\nfriendly")

    response = client.get(
        f"/admin/exports/surveys/{feedback_survey.id}/analysis/csv",
        params={
            "includeQuestionAnalysis": "false",
            "includeRespondentData": "false",
            "includeRawResponses": "true",
        },
        headers=admin_headers,
    )

    text = response.text
    assert "=== QUESTION ANALYSIS ===" not in text
    assert "=== RESPONDENT ANALYSIS ===" not in text
    assert "=== RAW RESPONSE DATA ===" in text
    assert "Quick and friendly" in text


def test_export_of_unknown_survey(client, admin_headers):
    response = client.get("/admin/exports/surveys/999/analysis/csv", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["code"] == "survey_not_found"


def test_export_requires_admin(client, user_headers, feedback_survey):
    response = client.get(f"/admin/exports/surveys/{feedback_survey.id}/analysis/csv", headers=user_headers)

    assert response.status_code == 403
