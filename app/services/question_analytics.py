"""
Per-question analytics.

Each question category computes its own typed record (`RatingStats`,
`OptionStats`, `TextStats`), which `analyze_question` flattens into the
single `QuestionAnalytics` shape used by every question type. Anything
that has no dedicated field goes into `custom_metrics`.
"""
import json
import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from statistics import median
from typing import Dict, List, Optional, Sequence

from app.models.answer import Answer
from app.models.survey import Question, QuestionType, CHOICE_TYPES, TEXT_TYPES
from app.schemas.results import QuestionAnalytics

logger = logging.getLogger(__name__)

MIN_RATING = 0
MAX_RATING = 5
KEYWORD_LIMIT = 5
MIN_KEYWORD_LENGTH = 3

_NON_WORD = re.compile(r"[^a-z0-9\s]")


@dataclass
class RatingStats:
    average: Optional[float] = None
    median: Optional[float] = None
    minimum: Optional[int] = None
    maximum: Optional[int] = None
    distribution: Dict[str, int] = field(default_factory=dict)
    extra: Dict[str, object] = field(default_factory=dict)


@dataclass
class OptionStats:
    counts: Dict[str, int] = field(default_factory=dict)
    percentages: Dict[str, float] = field(default_factory=dict)
    most_popular: Optional[str] = None
    least_popular: Optional[str] = None
    extra: Dict[str, object] = field(default_factory=dict)


@dataclass
class TextStats:
    average_length: Optional[int] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    keywords: List[str] = field(default_factory=list)
    extra: Dict[str, object] = field(default_factory=dict)


# Rating

def valid_ratings(answers: Sequence[Answer]) -> List[int]:
    """Ratings in [0, 5]; null and out-of-range values are dropped."""
    return [
        answer.rating_value
        for answer in answers
        if answer.rating_value is not None and MIN_RATING <= answer.rating_value <= MAX_RATING
    ]


def rating_stats(answers: Sequence[Answer]) -> RatingStats:
    ratings = valid_ratings(answers)
    stats = RatingStats()

    for rating in ratings:
        key = str(rating)
        stats.distribution[key] = stats.distribution.get(key, 0) + 1

    if ratings:
        stats.average = sum(ratings) / len(ratings)
        stats.median = float(median(ratings))
        stats.minimum = min(ratings)
        stats.maximum = max(ratings)

    stats.extra = {
        "totalRatings": len(ratings),
        "uniqueRatings": len(stats.distribution),
    }
    return stats


# Choice

def parse_options(options_json: Optional[str]) -> List[str]:
    """
    Predefined options of a choice question.

    Malformed or non-list JSON yields no options; the question is then
    analyzed from its answers alone.
    """
    if not options_json or not options_json.strip():
        return []
    try:
        parsed = json.loads(options_json)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed options JSON: %r", options_json[:200])
        return []
    if not isinstance(parsed, list):
        logger.warning("Options JSON is not a list: %r", options_json[:200])
        return []

    options = []
    for item in parsed:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            options.append(text)
    return options


def option_stats(question: Question, answers: Sequence[Answer]) -> OptionStats:
    predefined = parse_options(question.options_json)
    stats = OptionStats(counts={option: 0 for option in predefined})

    answered = 0
    for answer in answers:
        text = (answer.answer_text or "").strip()
        if not text:
            continue
        answered += 1
        stats.counts[text] = stats.counts.get(text, 0) + 1

    if answered:
        stats.percentages = {
            option: count / answered * 100 for option, count in stats.counts.items()
        }

    if stats.counts:
        # max/min keep the first entry on ties
        stats.most_popular = max(stats.counts.items(), key=lambda item: item[1])[0]
        stats.least_popular = min(stats.counts.items(), key=lambda item: item[1])[0]

    stats.extra = {
        "totalAnswers": len(answers),
        "uniqueOptions": len(stats.counts),
        "predefinedOptions": len(predefined),
    }
    return stats


# Text

def extract_keywords(texts: Sequence[str], limit: int = KEYWORD_LIMIT) -> List[str]:
    """Most frequent words longer than two characters, first-seen wins ties."""
    frequency: Counter = Counter()
    for text in texts:
        if not text or not text.strip():
            continue
        words = _NON_WORD.sub("", text.lower()).split()
        frequency.update(word for word in words if len(word) >= MIN_KEYWORD_LENGTH)
    return [word for word, _ in frequency.most_common(limit)]


def text_stats(answers: Sequence[Answer]) -> TextStats:
    texts = [answer.answer_text for answer in answers if answer.answer_text is not None]
    stats = TextStats()

    if texts:
        lengths = [len(text) for text in texts]
        stats.average_length = int(sum(lengths) / len(lengths))
        stats.min_length = min(lengths)
        stats.max_length = max(lengths)
        stats.keywords = extract_keywords(texts)

    non_blank = [text for text in texts if text.strip()]
    stats.extra = {
        "totalTextAnswers": len(non_blank),
        "emptyAnswers": len(answers) - len(non_blank),
    }
    if non_blank:
        total_words = sum(len(text.split()) for text in non_blank)
        stats.extra["averageLength"] = sum(len(text) for text in non_blank) / len(non_blank)
        stats.extra["totalWords"] = total_words
        stats.extra["averageWords"] = total_words / len(non_blank)
    return stats


def analyze_question(question: Question, answers: Sequence[Answer]) -> QuestionAnalytics:
    """
    Analytics for one question given all of its answers.

    Dispatches on the upper-cased question type; unknown types only get
    an answer count and the type string.
    """
    analytics = QuestionAnalytics()
    if not answers:
        return analytics

    question_type = (question.type or "").strip().upper()

    if question_type == QuestionType.RATING.value:
        stats = rating_stats(answers)
        analytics.average_rating = stats.average
        analytics.median_rating = stats.median
        analytics.min_rating = stats.minimum
        analytics.max_rating = stats.maximum
        analytics.rating_distribution = stats.distribution
        analytics.custom_metrics = stats.extra

    elif question_type in {t.value for t in CHOICE_TYPES}:
        stats = option_stats(question, answers)
        analytics.option_counts = stats.counts
        analytics.option_percentages = stats.percentages
        analytics.most_popular_option = stats.most_popular
        analytics.least_popular_option = stats.least_popular
        analytics.custom_metrics = stats.extra

    elif question_type in {t.value for t in TEXT_TYPES}:
        stats = text_stats(answers)
        analytics.average_text_length = stats.average_length
        analytics.min_text_length = stats.min_length
        analytics.max_text_length = stats.max_length
        analytics.common_keywords = stats.keywords
        analytics.custom_metrics = stats.extra

    else:
        analytics.custom_metrics = {
            "totalAnswers": len(answers),
            "questionType": question.type,
        }

    return analytics
