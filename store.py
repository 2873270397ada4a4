"""Data access for problem sessions and their submissions.

Every function takes an open SQLAlchemy ``Session``. Driver or constraint
failures are rolled back and re-raised as ``StorageError``; nothing here
retries.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from errors import NotFoundError, StorageError
from models import ProblemSession, Submission

logger = logging.getLogger(__name__)


def _fail(db: Session, op: str, exc: SQLAlchemyError) -> StorageError:
    db.rollback()
    logger.error("store %s failed: %s: %s", op, type(exc).__name__, exc)
    return StorageError(f"{op} failed: {exc}")


def create_session(db: Session, problem_text: str, correct_answer: float) -> ProblemSession:
    try:
        row = ProblemSession(problem_text=problem_text, correct_answer=correct_answer)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row
    except SQLAlchemyError as e:
        raise _fail(db, "create_session", e) from e


def get_session(db: Session, session_id: str) -> ProblemSession:
    try:
        row = db.get(ProblemSession, session_id)
    except SQLAlchemyError as e:
        raise _fail(db, "get_session", e) from e
    if row is None:
        raise NotFoundError()
    return row


def get_sessions(db: Session, session_ids: Iterable[str]) -> List[ProblemSession]:
    """Sessions matching ``session_ids``, newest first."""
    ids = list(session_ids)
    try:
        stmt = (
            select(ProblemSession)
            .where(ProblemSession.id.in_(ids))
            .order_by(ProblemSession.created_at.desc())
        )
        return list(db.scalars(stmt).all())
    except SQLAlchemyError as e:
        raise _fail(db, "get_sessions", e) from e


def create_submission(
    db: Session,
    session_id: str,
    user_answer: float,
    is_correct: bool,
    feedback_text: str,
    is_revealed: bool = False,
) -> Submission:
    try:
        row = Submission(
            session_id=session_id,
            user_answer=user_answer,
            is_correct=is_correct,
            feedback_text=feedback_text,
            is_revealed=is_revealed,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        return row
    except SQLAlchemyError as e:
        raise _fail(db, "create_submission", e) from e


def get_submissions(db: Session, session_ids: Iterable[str]) -> List[Submission]:
    ids = list(session_ids)
    try:
        stmt = (
            select(Submission)
            .where(Submission.session_id.in_(ids))
            .order_by(Submission.created_at)
        )
        return list(db.scalars(stmt).all())
    except SQLAlchemyError as e:
        raise _fail(db, "get_submissions", e) from e


def has_correct_submission(db: Session, session_id: str) -> bool:
    try:
        stmt = (
            select(Submission.id)
            .where(Submission.session_id == session_id, Submission.is_correct.is_(True))
            .limit(1)
        )
        return db.scalars(stmt).first() is not None
    except SQLAlchemyError as e:
        raise _fail(db, "has_correct_submission", e) from e
