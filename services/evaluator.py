"""Grading of student answers and the reveal-the-answer flow."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

import store
from answers import is_within_tolerance, parse_numeric_answer
from errors import SessionClosedError, ValidationError
from llm import TextGenerator
from prompts import feedback_prompt, reveal_prompt

logger = logging.getLogger(__name__)

# --- Grading policy toggles ------------------------------------------------------
# If True: once a session has a correct (or revealed) submission, further
# submit/reveal calls are rejected with 409. If False the UI convention of
# disabling the form is the only guard.
LOCK_SOLVED_SESSIONS = os.getenv("LOCK_SOLVED_SESSIONS", "").lower() in ("1", "true", "yes")


def _require_session_id(session_id: Optional[str]) -> str:
    if session_id is None or not str(session_id).strip():
        raise ValidationError("Session ID is required")
    return str(session_id).strip()


def _check_open(db: Session, session_id: str) -> None:
    if LOCK_SOLVED_SESSIONS and store.has_correct_submission(db, session_id):
        raise SessionClosedError()


def submit_answer(
    db: Session, llm: TextGenerator, session_id: Optional[str], user_answer: Any
) -> Dict[str, Any]:
    if session_id is None or user_answer is None:
        raise ValidationError("Missing required fields")
    session_id = _require_session_id(session_id)
    try:
        answer = parse_numeric_answer(user_answer)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    session = store.get_session(db, session_id)
    _check_open(db, session_id)

    correct_answer = float(session.correct_answer)
    is_correct = is_within_tolerance(answer, correct_answer)

    feedback = llm.generate_text(
        feedback_prompt(session.problem_text, correct_answer, answer, is_correct)
    ).strip()

    store.create_submission(db, session_id, answer, is_correct, feedback)
    logger.info("submission session=%s answer=%s correct=%s", session_id, answer, is_correct)
    return {
        "is_correct": is_correct,
        "feedback": feedback,
        "correct_answer": correct_answer,
    }


def reveal_answer(db: Session, llm: TextGenerator, session_id: Optional[str]) -> Dict[str, Any]:
    session_id = _require_session_id(session_id)
    session = store.get_session(db, session_id)
    _check_open(db, session_id)

    correct_answer = float(session.correct_answer)
    feedback = llm.generate_text(reveal_prompt(session.problem_text, correct_answer)).strip()

    store.create_submission(
        db, session_id, correct_answer, True, feedback, is_revealed=True
    )
    logger.info("answer revealed session=%s", session_id)
    return {
        "is_correct": True,
        "feedback": feedback,
        "correct_answer": correct_answer,
        "is_revealed": True,
    }
