from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import store
from deps.db import get_db
from deps.llm import get_text_generator
from errors import ValidationError
from llm import TextGenerator
from schemas.problems import (
    HistoryRequest,
    HistoryResponse,
    ProblemDetailOut,
    ProblemOut,
    RevealRequest,
    RevealResponse,
    SubmitRequest,
    SubmitResponse,
)
from services.evaluator import reveal_answer, submit_answer
from services.generator import generate_problem
from services.history import get_history

router = APIRouter(prefix="/problem", tags=["problems"])


@router.post("", response_model=ProblemOut)
def create_problem(
    db: Session = Depends(get_db), llm: TextGenerator = Depends(get_text_generator)
):
    return generate_problem(db, llm)


@router.post("/submit", response_model=SubmitResponse)
def submit(
    req: SubmitRequest,
    db: Session = Depends(get_db),
    llm: TextGenerator = Depends(get_text_generator),
):
    return submit_answer(db, llm, req.session_id, req.user_answer)


@router.post("/reveal", response_model=RevealResponse)
def reveal(
    req: RevealRequest,
    db: Session = Depends(get_db),
    llm: TextGenerator = Depends(get_text_generator),
):
    return reveal_answer(db, llm, req.session_id)


@router.post("/history", response_model=HistoryResponse)
def history(req: Optional[HistoryRequest] = None, db: Session = Depends(get_db)):
    ids = req.session_ids if req else None
    return {"history": get_history(db, ids)}


@router.get("/{session_id}", response_model=ProblemDetailOut)
def get_problem(session_id: str, db: Session = Depends(get_db)):
    if not session_id.strip():
        raise ValidationError("Session ID is required")
    s = store.get_session(db, session_id.strip())
    return {
        "session_id": s.id,
        "problem_text": s.problem_text,
        "final_answer": s.correct_answer,
        "created_at": s.created_at,
    }
