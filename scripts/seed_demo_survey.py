"""
Seed a demo survey that covers every question type, plus a few sample submissions.
Safe to run multiple times: skips creation if the survey title already exists.
"""
import json
import sys
from pathlib import Path
from datetime import datetime, timezone, timedelta

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.core.database import SessionLocal, engine, Base
from app.models import Answer, Question, QuestionType, Response, Survey, SurveyStatus, User

SURVEY_TITLE = "[DEMO] Customer feedback"

# (text, type, required, options)
QUESTIONS = [
    ("How would you rate our service overall?", QuestionType.RATING, True, []),
    ("Which channel did you use to contact us?", QuestionType.RADIO, True,
     ["Phone", "Email", "Chat"]),
    ("Which features do you use most?", QuestionType.MULTIPLE_CHOICE, False,
     ["Reports", "Dashboard", "Exports", "Alerts"]),
    ("Where are you based?", QuestionType.DROPDOWN, False, ["North", "South", "East", "West"]),
    ("What is your job title?", QuestionType.TEXT, False, []),
    ("Anything else you would like to tell us?", QuestionType.LONG_TEXT, False, []),
]

# One tuple per sample submission, answers in question order (None = skipped)
SAMPLE_SUBMISSIONS = [
    (5, "Chat", "Dashboard", "North", "Analyst", "Great support team, very fast replies"),
    (4, "Email", "Reports", "South", None, "Reports could load faster"),
    (2, "Phone", "Dashboard", None, "Manager", "Phone support waiting time was too long"),
    (5, "Chat", "Exports", "East", "Engineer", None),
]


def run():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        existing = db.query(Survey).filter(Survey.title == SURVEY_TITLE).first()
        if existing:
            print(f"Demo survey already exists (id={existing.id}). Nothing to do.")
            return

        now = datetime.now(timezone.utc)
        survey = Survey(
            title=SURVEY_TITLE,
            description="Demo survey with one question of each supported type.",
            status=SurveyStatus.ACTIVE.value,
            end_date=now + timedelta(days=30),
        )
        for order, (text, qtype, required, options) in enumerate(QUESTIONS, start=1):
            survey.questions.append(Question(
                type=qtype.value,
                question_text=text,
                options_json=json.dumps(options) if options else None,
                order_number=order,
                required=required,
            ))
        db.add(survey)
        db.flush()

        # First submission is attributed to the admin, if there is one
        admin = db.query(User).order_by(User.id.asc()).first()

        for index, values in enumerate(SAMPLE_SUBMISSIONS):
            user_id = admin.id if admin and index == 0 else None
            db.add(Response(survey_id=survey.id, user_id=user_id, completion_time_seconds=60 + index * 45))
            for question, value in zip(survey.questions, values):
                if value is None:
                    continue
                answer = Answer(question_id=question.id, user_id=user_id)
                if question.type == QuestionType.RATING.value:
                    answer.rating_value = value
                else:
                    answer.answer_text = value
                db.add(answer)

        db.commit()

        print(f"Demo survey created (id={survey.id})")
        print(f"   {len(QUESTIONS)} questions covering all {len(QuestionType)} question types")
        print(f"   {len(SAMPLE_SUBMISSIONS)} sample submissions")

    except Exception as e:
        print(f"Error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    run()
