import os
import tempfile
from pathlib import Path

import pytest

# Must be set before db.py is imported anywhere.
_DB_FILE = Path(tempfile.mkdtemp(prefix="problems-test-")) / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_FILE}"
os.environ.setdefault("AUTO_CREATE_TABLES", "1")

from db import SessionLocal  # noqa: E402
from deps.llm import get_text_generator  # noqa: E402
from main import app  # noqa: E402
from models import ProblemSession, Submission  # noqa: E402


class StubLLM:
    """Deterministic TextGenerator: pops queued replies, records prompts."""

    def __init__(self):
        self.replies = []
        self.prompts = []
        self.default = "Great effort! Keep practising."
        self.error = None

    def generate_text(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if self.replies:
            return self.replies.pop(0)
        return self.default


@pytest.fixture(autouse=True)
def clean_db():
    with SessionLocal() as db:
        db.query(Submission).delete()
        db.query(ProblemSession).delete()
        db.commit()
    yield


@pytest.fixture(autouse=True)
def llm():
    stub = StubLLM()
    app.dependency_overrides[get_text_generator] = lambda: stub
    yield stub
    app.dependency_overrides.pop(get_text_generator, None)


@pytest.fixture
def make_session():
    def _make(problem_text="Ali has 40 marbles and wins 2 more. How many now?", correct_answer=42.0, created_at=None):
        with SessionLocal() as db:
            row = ProblemSession(problem_text=problem_text, correct_answer=correct_answer)
            if created_at is not None:
                row.created_at = created_at
            db.add(row)
            db.commit()
            return row.id

    return _make


@pytest.fixture
def submissions_for():
    def _load(session_id):
        with SessionLocal() as db:
            return (
                db.query(Submission)
                .filter(Submission.session_id == session_id)
                .order_by(Submission.created_at)
                .all()
            )

    return _load
