from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

import store
from answers import parse_numeric_answer
from errors import GenerationParseError
from llm import TextGenerator
from prompts import generation_prompt

logger = logging.getLogger(__name__)


def _balanced_object_end(text: str, start: int) -> Optional[int]:
    """Index of the ``}`` closing the ``{`` at ``start``, or None if unbalanced."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Parse the first balanced ``{...}`` in ``text``.

    Models like to wrap the payload in prose or code fences, so everything
    before the first brace is ignored. Braces inside JSON strings do not
    count towards the balance.
    """
    if not isinstance(text, str):
        raise GenerationParseError("model response is not text")
    start = text.find("{")
    if start < 0:
        raise GenerationParseError("no JSON object in model response")
    end = _balanced_object_end(text, start)
    if end is None:
        raise GenerationParseError("unbalanced braces in model response")
    try:
        data = json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        raise GenerationParseError(f"invalid JSON in model response: {e}") from e
    if not isinstance(data, dict):
        raise GenerationParseError("model JSON is not an object")
    return data


def parse_problem_payload(data: Dict[str, Any]) -> tuple[str, float]:
    problem_text = data.get("problem_text")
    if not isinstance(problem_text, str) or not problem_text.strip():
        raise GenerationParseError("problem_text missing from model JSON")
    try:
        final_answer = parse_numeric_answer(data.get("final_answer"))
    except ValueError as e:
        raise GenerationParseError(f"final_answer is not numeric: {e}") from e
    return problem_text.strip(), final_answer


def generate_problem(db: Session, llm: TextGenerator) -> Dict[str, Any]:
    raw = llm.generate_text(generation_prompt())
    problem_text, final_answer = parse_problem_payload(extract_json_object(raw))

    row = store.create_session(db, problem_text, final_answer)
    logger.info("generated problem session=%s answer=%s", row.id, final_answer)
    return {
        "session_id": row.id,
        "problem_text": row.problem_text,
        "final_answer": row.correct_answer,
    }
