# schemas/problems.py
from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt

# Request fields are optional on purpose: a missing field is a 400 raised by
# the service layer, not a 422 from FastAPI.

# ---------- Generate / fetch ----------


class ProblemOut(BaseModel):
    session_id: str
    problem_text: str
    final_answer: float


class ProblemDetailOut(ProblemOut):
    created_at: datetime


# ---------- Submit / reveal ----------


class SubmitRequest(BaseModel):
    session_id: Optional[str] = None
    # number, or a numeric string such as "3/4" or "1,250"; booleans are rejected
    user_answer: Optional[Union[StrictFloat, StrictInt, str]] = Field(
        default=None, union_mode="left_to_right"
    )


class SubmitResponse(BaseModel):
    is_correct: bool
    feedback: str
    correct_answer: float


class RevealRequest(BaseModel):
    session_id: Optional[str] = None


class RevealResponse(SubmitResponse):
    is_revealed: bool = True


# ---------- History ----------

class HistoryRequest(BaseModel):
    # anything that is not a list of ids reads as "no sessions"
    session_ids: Any = None


class SubmissionOut(BaseModel):
    user_answer: float
    is_correct: bool
    feedback_text: str
    submitted_at: datetime
    is_revealed: bool = False


class HistoryItem(BaseModel):
    session_id: str
    problem_text: str
    correct_answer: float
    created_at: datetime
    submissions: List[SubmissionOut]


class HistoryResponse(BaseModel):
    history: List[HistoryItem]
