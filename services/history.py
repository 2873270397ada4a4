from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, List

from sqlalchemy.orm import Session

import store
from errors import ValidationError

MAX_HISTORY_IDS = 200


def get_history(db: Session, session_ids: Any) -> List[Dict[str, Any]]:
    """
    Sessions for ``session_ids`` (newest first), each with its submissions
    oldest first. Unknown ids are simply absent from the result; anything
    other than a non-empty list gives an empty history.
    """
    if not session_ids or not isinstance(session_ids, list):
        return []
    if len(session_ids) > MAX_HISTORY_IDS:
        raise ValidationError(f"At most {MAX_HISTORY_IDS} session ids per request")
    # keep first-seen order, drop blanks, non-strings and repeats
    ids = list(dict.fromkeys(s for s in session_ids if isinstance(s, str) and s))
    if not ids:
        return []

    sessions = store.get_sessions(db, ids)
    submissions = store.get_submissions(db, ids)

    by_session: Dict[str, list] = defaultdict(list)
    for sub in submissions:
        by_session[sub.session_id].append(sub)

    history = []
    for s in sessions:
        subs = sorted(by_session.get(s.id, []), key=lambda sub: sub.created_at)
        history.append(
            {
                "session_id": s.id,
                "problem_text": s.problem_text,
                "correct_answer": s.correct_answer,
                "created_at": s.created_at,
                "submissions": [
                    {
                        "user_answer": sub.user_answer,
                        "is_correct": sub.is_correct,
                        "feedback_text": sub.feedback_text,
                        "submitted_at": sub.created_at,
                        "is_revealed": bool(sub.is_revealed),
                    }
                    for sub in subs
                ],
            }
        )
    return history
