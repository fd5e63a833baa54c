"""Shared fixtures: in-memory database, API client and authenticated users."""
import json
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.core.limiter import limiter
from app.core.security import create_access_token, get_password_hash
from app.main import app
from app.models import Question, Survey, SurveyStatus, User, UserRole

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        limiter.enabled = True


def _make_user(db, name, email, role):
    user = User(
        name=name,
        email=email,
        hashed_password=get_password_hash("password123"),
        role=role,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _auth_headers(user):
    token = create_access_token({"sub": str(user.id), "role": user.role.value, "ver": user.token_version})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_user(db):
    return _make_user(db, "Admin", "admin@example.com", UserRole.ADMIN)


@pytest.fixture
def respondent_user(db):
    return _make_user(db, "Jane Doe", "jane@example.com", UserRole.USER)


@pytest.fixture
def admin_headers(admin_user):
    return _auth_headers(admin_user)


@pytest.fixture
def user_headers(respondent_user):
    return _auth_headers(respondent_user)


@pytest.fixture
def make_survey(db):
    """
    Factory for persisted surveys.

    Questions are given as dicts with `type`, `text` and optional
    `options`, `order` and `required`.
    """
    def factory(title="Customer feedback", questions=(), status=SurveyStatus.ACTIVE, end_date=None):
        survey = Survey(
            title=title,
            description="How did we do?",
            status=SurveyStatus(status).value,
            end_date=end_date,
        )
        for item in questions:
            options = item.get("options")
            survey.questions.append(Question(
                type=item["type"],
                question_text=item["text"],
                options_json=json.dumps(options) if options is not None else None,
                order_number=item.get("order"),
                required=item.get("required", False),
            ))
        db.add(survey)
        db.commit()
        db.refresh(survey)
        return survey

    return factory


@pytest.fixture
def feedback_survey(make_survey):
    """Active survey with one rating, one choice and one text question."""
    return make_survey(questions=[
        {"type": "RATING", "text": "Rate our service", "order": 1, "required": True},
        {"type": "RADIO", "text": "Would you recommend us?", "options": ["Yes", "No", "Maybe"], "order": 2},
        {"type": "LONG_TEXT", "text": "Any comments?", "order": 3},
    ])
