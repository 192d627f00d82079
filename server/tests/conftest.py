from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import examprep.models  # noqa: F401
from examprep.auth import AuthUser, get_current_user
from examprep.config import settings
from examprep.database import Base, build_engine, get_db
from examprep.main import app
from examprep.models import (
    AISettings,
    CourseSection,
    Exam,
    ExamAnswer,
    ExamSession,
    ExamShare,
    Question,
    QuestionAIAnalysis,
)
from examprep.services.supabase_client import get_user_directory

ADMIN_EMAIL = "admin@example.com"

OWNER = AuthUser(id="user-owner", email="owner@example.com")
OTHER = AuthUser(id="user-other", email="other@example.com")
ADMIN = AuthUser(id="user-admin", email=ADMIN_EMAIL)

BASE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeDirectory:
    """In-memory stand-in for the Supabase user lookups."""

    def __init__(self, users=None):
        self.users = dict(users or {})

    def email_for(self, user_id):
        return self.users.get(user_id)

    def id_for_email(self, email):
        for user_id, user_email in self.users.items():
            if user_email == email:
                return user_id
        return None


class Factory:
    def __init__(self, db):
        self.db = db
        self._counter = 0

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def _tick(self):
        self._counter += 1
        return BASE_TIME + timedelta(minutes=self._counter)

    def exam(self, owner=OWNER, **kwargs):
        kwargs.setdefault("name", "Cloud Architect")
        kwargs.setdefault("description", "Practice set")
        kwargs.setdefault("is_sample", False)
        kwargs.setdefault("created_at", self._tick())
        return self._save(Exam(user_id=owner.id if owner else None, **kwargs))

    def question(self, exam, number, **kwargs):
        kwargs.setdefault("question_text", f"Question {number}?")
        kwargs.setdefault("options", {"A": "One", "B": "Two", "C": "Three", "D": "Four"})
        kwargs.setdefault("correct_answer", "A")
        return self._save(Question(exam_id=exam.id, question_number=number, **kwargs))

    def analysis(self, question, **kwargs):
        kwargs.setdefault("ai_recommended_answer", "A")
        kwargs.setdefault("ai_confidence_score", 0.9)
        kwargs.setdefault("option_short_explanations", {"A": "Right", "B": "Wrong"})
        kwargs.setdefault("option_long_explanations", {"A": "Right because", "B": "Wrong because"})
        kwargs.setdefault("reasoning_summary", "Summary")
        kwargs.setdefault("reasoning_detailed", "Details")
        return self._save(QuestionAIAnalysis(question_id=question.id, **kwargs))

    def session(self, exam, user=OWNER, **kwargs):
        kwargs.setdefault("completed", True)
        kwargs.setdefault("score", 0)
        kwargs.setdefault("total_questions", 0)
        kwargs.setdefault("correct_count", 0)
        kwargs.setdefault("created_at", self._tick())
        return self._save(ExamSession(exam_id=exam.id, user_id=user.id, **kwargs))

    def answer(self, session, question, is_correct, selected="A"):
        return self._save(ExamAnswer(
            session_id=session.id,
            question_id=question.id,
            selected_answer=selected,
            is_correct=is_correct,
        ))

    def share(self, exam, shared_by, shared_with):
        return self._save(ExamShare(
            exam_id=exam.id,
            shared_by=shared_by.id,
            shared_with=shared_with.id,
            created_at=self._tick(),
        ))

    def course_section(self, exam, topic, order_index, content="# Notes"):
        return self._save(CourseSection(
            exam_id=exam.id,
            topic_name=topic,
            content_md=content,
            order_index=order_index,
        ))

    def ai_settings(self, **kwargs):
        kwargs.setdefault("provider", "openai")
        kwargs.setdefault("model_id", "gpt-4o-mini")
        kwargs.setdefault("model_name", "GPT-4o mini")
        return self._save(AISettings(**kwargs))


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def factory(db):
    return Factory(db)


@pytest.fixture
def directory():
    return FakeDirectory({
        OWNER.id: OWNER.email,
        OTHER.id: OTHER.email,
        ADMIN.id: ADMIN.email,
    })


@pytest.fixture
def client(db, directory, monkeypatch):
    monkeypatch.setattr(settings, "admin_email", ADMIN_EMAIL)
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_user_directory] = lambda: directory
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login():
    """Authenticate subsequent requests as ``user``."""
    def _login(user):
        app.dependency_overrides[get_current_user] = lambda: user
    return _login
