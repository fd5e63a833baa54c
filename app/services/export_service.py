"""CSV export of survey results."""
import csv
import io
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.schemas.results import QuestionResult, Respondent, SurveyResultsView
from app.services.results_service import ResultsService

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
NOT_AVAILABLE = "N/A"

_LINE_BREAKS = re.compile(r"[\r\n]+")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ExportOptions:
    """Sections to include in the report."""
    include_question_analysis: bool = True
    include_respondent_data: bool = True
    include_raw_responses: bool = False


def clean_text(text: Optional[str]) -> str:
    """Collapse line breaks and runs of whitespace."""
    if text is None:
        return ""
    return _WHITESPACE.sub(" ", _LINE_BREAKS.sub(" ", text)).strip()


def format_datetime(value: Optional[datetime]) -> str:
    return value.strftime(DATE_FORMAT) if value else NOT_AVAILABLE


def _percent(part: float, whole: float) -> str:
    return f"{part / whole * 100:.1f}%" if whole else NOT_AVAILABLE


class SurveyCsvReport:
    """Writes the sections of one survey analysis report."""

    def __init__(self, results: SurveyResultsView):
        self.results = results
        self.buffer = io.StringIO()
        self.writer = csv.writer(self.buffer, lineterminator="\n")

    def row(self, *values) -> None:
        self.writer.writerow(["" if v is None else str(v) for v in values])

    def blank(self) -> None:
        self.writer.writerow([])

    def overview(self) -> None:
        results = self.results
        self.row("=== SURVEY ANALYSIS REPORT ===")
        self.blank()
        self.row("Survey Title", clean_text(results.survey_title) or NOT_AVAILABLE)
        self.row("Survey Description", clean_text(results.survey_description) or NOT_AVAILABLE)
        self.row("Survey ID", results.survey_id)
        self.row("Created At", format_datetime(results.survey_created_at))
        self.row("Total Responses", results.total_responses)
        self.row("Total Questions", results.total_questions)
        self.blank()

    def question_analysis(self) -> None:
        questions = self.results.question_results
        self.row("=== QUESTION ANALYSIS ===")
        self.blank()
        if not questions:
            self.row("No question data available")
            self.blank()
            return

        self.row("Question ID", "Question Text", "Question Type", "Order", "Required",
                 "Total Answers", "Completion Rate %", "Average Rating", "Most Popular Option")
        for question in questions:
            analytics = question.analytics
            self.row(
                question.question_id,
                clean_text(question.question_text),
                question.question_type,
                question.order_number if question.order_number is not None else NOT_AVAILABLE,
                question.required,
                question.total_answers,
                f"{question.completion_rate:.1f}",
                f"{analytics.average_rating:.2f}" if analytics.average_rating is not None else NOT_AVAILABLE,
                clean_text(analytics.most_popular_option) or NOT_AVAILABLE,
            )
        self.blank()

        for question in questions:
            self._question_details(question)

    def _question_details(self, question: QuestionResult) -> None:
        analytics = question.analytics
        self.row(f"--- Question {question.order_number if question.order_number is not None else NOT_AVAILABLE}"
                 f" Detailed Analysis ---")
        self.row("Question:", clean_text(question.question_text))
        self.row("Type:", question.question_type)

        if analytics.average_rating is not None:
            self.row("Rating Statistics:")
            self.row("Average Rating", f"{analytics.average_rating:.2f}")
            self.row("Median Rating", analytics.median_rating)
            self.row("Min Rating", analytics.min_rating)
            self.row("Max Rating", analytics.max_rating)
            total = sum(analytics.rating_distribution.values())
            self.row("Rating", "Count", "Percentage")
            for rating, count in sorted(analytics.rating_distribution.items()):
                self.row(rating, count, _percent(count, total))

        if analytics.option_counts:
            self.row("Option Distribution:")
            self.row("Option", "Count", "Percentage")
            for option, count in analytics.option_counts.items():
                percentage = analytics.option_percentages.get(option)
                self.row(clean_text(option), count,
                         f"{percentage:.1f}%" if percentage is not None else NOT_AVAILABLE)

        if analytics.average_text_length is not None:
            self.row("Text Analysis:")
            self.row("Average Length", analytics.average_text_length)
            self.row("Min Length", analytics.min_text_length)
            self.row("Max Length", analytics.max_text_length)
            if analytics.common_keywords:
                self.row("Common Keywords", ", ".join(analytics.common_keywords))
        self.blank()

    def respondent_analysis(self) -> None:
        respondents = self.results.respondents
        self.row("=== RESPONDENT ANALYSIS ===")
        self.blank()
        if not respondents:
            self.row("No respondent data available")
            self.blank()
            return

        authenticated = sum(1 for r in respondents if not r.is_anonymous)
        self.row("Total Respondents", len(respondents))
        self.row("Authenticated Users", authenticated)
        self.row("Anonymous Users", len(respondents) - authenticated)
        self.row("Authentication Rate", _percent(authenticated, len(respondents)))
        self.blank()

        self.row("Respondent ID", "Name", "Email", "Type", "Total Answers", "First Submission")
        for respondent in respondents:
            name, email = self._identity(respondent)
            self.row(
                respondent.respondent_id,
                name,
                email,
                "Anonymous" if respondent.is_anonymous else "Authenticated",
                respondent.total_answers_submitted,
                format_datetime(respondent.first_submission_at),
            )
        self.blank()

    def raw_responses(self) -> None:
        respondents = self.results.respondents
        self.row("=== RAW RESPONSE DATA ===")
        self.blank()
        if not respondents:
            self.row("No response data available")
            return

        self.row("Respondent ID", "Respondent Name", "Respondent Email", "Question ID",
                 "Question Text", "Answer Text", "Rating Value", "Submitted At")
        for respondent in respondents:
            name, email = self._identity(respondent)
            for detail in respondent.responses:
                self.row(
                    respondent.respondent_id,
                    name,
                    email,
                    detail.question_id,
                    clean_text(detail.question_text),
                    clean_text(detail.answer_text),
                    detail.rating_value if detail.rating_value is not None else NOT_AVAILABLE,
                    format_datetime(detail.submitted_at),
                )

    @staticmethod
    def _identity(respondent: Respondent) -> tuple:
        if respondent.is_anonymous:
            return "Anonymous", NOT_AVAILABLE
        return clean_text(respondent.name), clean_text(respondent.email)

    def render(self, options: ExportOptions) -> str:
        self.overview()
        if options.include_question_analysis:
            self.question_analysis()
        if options.include_respondent_data:
            self.respondent_analysis()
        if options.include_raw_responses:
            self.raw_responses()
        return self.buffer.getvalue()


def render_survey_csv(results: SurveyResultsView, options: ExportOptions) -> str:
    """CSV report text for already-assembled results."""
    return SurveyCsvReport(results).render(options)


class ExportService:
    """Survey export business logic."""

    def __init__(self, db: Session):
        self.db = db
        self.results_service = ResultsService(db)

    def export_survey_analysis_csv(self, survey_id: int, options: ExportOptions) -> bytes:
        """
        CSV report of a survey's results, UTF-8 encoded.

        Raises:
            SurveyNotFoundError: If the survey does not exist
        """
        results = self.results_service.get_survey_results(survey_id)
        return render_survey_csv(results, options).encode("utf-8")
