"""Per-question analytics."""
import json
from datetime import datetime, timezone

import pytest

from app.models import Answer, Question
from app.services.question_analytics import (
    analyze_question,
    extract_keywords,
    parse_options,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_question(question_type, options=None, options_json=None):
    if options is not None:
        options_json = json.dumps(options)
    return Question(id=1, survey_id=1, type=question_type, question_text="Q", options_json=options_json)


def make_answers(question, texts=(), ratings=()):
    answers = [Answer(id=i, answer_text=t, question=question, created_at=NOW) for i, t in enumerate(texts, 1)]
    answers += [
        Answer(id=100 + i, rating_value=r, question=question, created_at=NOW)
        for i, r in enumerate(ratings, 1)
    ]
    return answers


def test_rating_statistics():
    question = make_question("RATING")
    analytics = analyze_question(question, make_answers(question, ratings=[2, 3, 4, 5, 5]))

    assert analytics.average_rating == pytest.approx(3.8)
    assert analytics.median_rating == 4.0
    assert analytics.min_rating == 2
    assert analytics.max_rating == 5
    assert analytics.rating_distribution == {"2": 1, "3": 1, "4": 1, "5": 2}
    assert analytics.custom_metrics == {"totalRatings": 5, "uniqueRatings": 4}


def test_rating_ignores_null_and_out_of_range_values():
    question = make_question("rating")
    analytics = analyze_question(question, make_answers(question, ratings=[7, None, 3, -1]))

    assert analytics.average_rating == 3.0
    assert analytics.rating_distribution == {"3": 1}
    assert analytics.custom_metrics["totalRatings"] == 1


def test_rating_with_only_invalid_values_has_no_average():
    question = make_question("RATING")
    analytics = analyze_question(question, make_answers(question, ratings=[None, 9]))

    assert analytics.average_rating is None
    assert analytics.median_rating is None
    assert analytics.rating_distribution == {}


def test_median_of_even_count_is_mean_of_middle_values():
    question = make_question("RATING")
    analytics = analyze_question(question, make_answers(question, ratings=[1, 4, 2, 3]))

    assert analytics.median_rating == 2.5


def test_popular_option_ties_go_to_first_listed_option():
    question = make_question("RADIO", options=["A", "B", "C"])
    analytics = analyze_question(question, make_answers(question, texts=["B", "A", "C", "C"]))

    assert analytics.most_popular_option == "C"
    assert analytics.least_popular_option == "A"


def test_choice_counts_include_unpicked_predefined_options():
    question = make_question("RADIO", options=["Yes", "No", "Maybe"])
    analytics = analyze_question(question, make_answers(question, texts=["Yes", "Yes", "Maybe"]))

    assert analytics.option_counts == {"Yes": 2, "No": 0, "Maybe": 1}
    assert analytics.option_percentages["Yes"] == pytest.approx(66.666, rel=1e-3)
    assert analytics.option_percentages["No"] == 0
    assert analytics.option_percentages["Maybe"] == pytest.approx(33.333, rel=1e-3)
    assert analytics.most_popular_option == "Yes"
    assert analytics.least_popular_option == "No"


def test_choice_counts_answers_outside_predefined_options():
    question = make_question("DROPDOWN", options=["North", "South"])
    analytics = analyze_question(question, make_answers(question, texts=[" North ", "Elsewhere", "", None]))

    assert analytics.option_counts == {"North": 1, "South": 0, "Elsewhere": 1}
    assert analytics.option_percentages["North"] == 50.0
    assert analytics.custom_metrics == {"totalAnswers": 4, "uniqueOptions": 3, "predefinedOptions": 2}


def test_choice_with_malformed_options_uses_answers_only():
    question = make_question("MULTIPLE_CHOICE", options_json="not json [")
    analytics = analyze_question(question, make_answers(question, texts=["A", "B", "A"]))

    assert analytics.option_counts == {"A": 2, "B": 1}
    assert analytics.most_popular_option == "A"
    assert analytics.least_popular_option == "B"


@pytest.mark.parametrize("raw", [None, "", "  ", "{\"a\": 1}", "42", "not json"])
def test_parse_options_rejects_missing_or_non_list(raw):
    assert parse_options(raw) == []


def test_parse_options_trims_and_drops_blank_entries():
    assert parse_options('[" Good ", "", null, "Bad"]') == ["Good", "Bad"]


def test_long_text_statistics_and_keywords():
    question = make_question("LONG_TEXT")
    texts = ["The service was great", "great service and great staff"]
    analytics = analyze_question(question, make_answers(question, texts=texts))

    assert analytics.min_text_length == 21
    assert analytics.max_text_length == 29
    assert analytics.average_text_length == 25
    assert analytics.common_keywords == ["great", "service", "the", "was", "and"]
    assert analytics.custom_metrics["totalWords"] == 9


def test_text_statistics_count_blank_answers_as_empty():
    question = make_question("TEXT")
    analytics = analyze_question(question, make_answers(question, texts=["hello", "  ", None]))

    assert analytics.min_text_length == 2
    assert analytics.max_text_length == 5
    assert analytics.average_text_length == 3
    assert analytics.custom_metrics["totalTextAnswers"] == 1
    assert analytics.custom_metrics["emptyAnswers"] == 2


def test_keywords_skip_short_words_and_punctuation():
    assert extract_keywords(["Ok, it's fine!", "FINE fine"]) == ["fine", "its"]


def test_keywords_rank_by_frequency_then_first_seen():
    keywords = extract_keywords(["ab", "hello world", "hello there friend"])

    assert keywords == ["hello", "world", "there", "friend"]


def test_keywords_are_limited_to_five():
    assert len(extract_keywords(["alpha bravo charlie delta echoes foxtrot golf"])) == 5


def test_unknown_type_reports_basic_counts():
    question = make_question("NPS")
    analytics = analyze_question(question, make_answers(question, texts=["9", "10"]))

    assert analytics.custom_metrics == {"totalAnswers": 2, "questionType": "NPS"}
    assert analytics.average_rating is None
    assert analytics.option_counts == {}
    assert analytics.common_keywords == []


@pytest.mark.parametrize("question_type", ["RATING", "RADIO", "TEXT", "NPS"])
def test_no_answers_gives_empty_analytics(question_type):
    analytics = analyze_question(make_question(question_type, options=["A"]), [])

    assert analytics.average_rating is None
    assert analytics.option_counts == {}
    assert analytics.average_text_length is None
    assert analytics.custom_metrics == {}
