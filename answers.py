from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any, Optional

from sympy import nan, oo, preorder_traversal, zoo
from sympy.core.power import Pow
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)

# --- Grading policy ---------------------------------------------------------------
# Absolute tolerance; a difference of exactly this much is NOT accepted.
TOLERANCE = Decimal("0.01")

# --- Parsing / validation helpers ------------------------------------------------
LEN_LIMIT = 100
INVALID_CHARS_MSG = (
    "Only numeric answers using digits, spaces, commas, + - * / ^ . and parentheses are allowed."
)
NON_FINITE_MSG = "Answer is not finite (e.g., division by zero)."
TOO_COMPLEX_MSG = "Answer is too complex."
_ALLOWED_RE = re.compile(r"^[0-9+\-*/^().,\s]{1,100}$")
# 1,250 or 10,000,000.5 ; any other comma use is rejected
_THOUSANDS_RE = re.compile(r"(?<=\d),(?=\d{3}(?!\d))")

TRANSFORMS = standard_transformations + (
    convert_xor,
    implicit_multiplication_application,
)

_MAX_OPS = 200
_MAX_INT_DIGITS = 200
_MAX_EXPONENT_ABS = 2000


def validate_answer_text(s: Any) -> Optional[str]:
    if s is None or not isinstance(s, str) or not s.strip():
        return "Answer required."
    if len(s) > LEN_LIMIT:
        return f"Answer too long (> {LEN_LIMIT})."
    if _ALLOWED_RE.fullmatch(s) is None:
        return INVALID_CHARS_MSG
    return None


def _assert_finite_sym(val: Any) -> None:
    if getattr(val, "is_finite", None) is False:
        raise ValueError(NON_FINITE_MSG)
    if val in (oo, -oo, zoo, nan):
        raise ValueError(NON_FINITE_MSG)


def _assert_expr_complexity(sym: Any) -> None:
    if getattr(sym, "is_Number", False):
        return
    if hasattr(sym, "count_ops") and sym.count_ops() > _MAX_OPS:
        raise ValueError(TOO_COMPLEX_MSG)
    for node in preorder_traversal(sym):
        if getattr(node, "is_Integer", False) and len(str(abs(int(node)))) > _MAX_INT_DIGITS:
            raise ValueError(TOO_COMPLEX_MSG)
        if isinstance(node, Pow) and getattr(node.exp, "is_number", False):
            try:
                e = float(node.exp)
            except TypeError:
                raise ValueError(TOO_COMPLEX_MSG)
            if not math.isfinite(e) or abs(e) > _MAX_EXPONENT_ABS:
                raise ValueError(TOO_COMPLEX_MSG)


def _eval_numeric(expr: str) -> float:
    cleaned = _THOUSANDS_RE.sub("", expr)
    if "," in cleaned:
        raise ValueError(INVALID_CHARS_MSG)
    try:
        raw = parse_expr(cleaned, transformations=TRANSFORMS, evaluate=False)
    except Exception:
        raise ValueError(INVALID_CHARS_MSG)
    # check the unevaluated tree first so 9^9^9 is never computed
    _assert_expr_complexity(raw)
    sym = parse_expr(cleaned, transformations=TRANSFORMS, evaluate=True)
    _assert_finite_sym(sym)
    try:
        val = float(sym.evalf())
    except (TypeError, OverflowError):
        raise ValueError(INVALID_CHARS_MSG)
    if not math.isfinite(val):
        raise ValueError(NON_FINITE_MSG)
    return val


def parse_numeric_answer(value: Any) -> float:
    """
    Coerce a JSON number or a short numeric expression ("3/4", "1,250")
    into a finite float. Raises ValueError with a student-facing message.
    """
    if isinstance(value, bool):
        raise ValueError(INVALID_CHARS_MSG)
    if isinstance(value, (int, float)):
        try:
            f = float(value)
        except OverflowError:
            raise ValueError(NON_FINITE_MSG)
        if not math.isfinite(f):
            raise ValueError(NON_FINITE_MSG)
        return f
    msg = validate_answer_text(value)
    if msg:
        raise ValueError(msg)
    s = value.strip()
    # Fast path: plain number without going through sympy.
    try:
        f = float(s)
    except ValueError:
        return _eval_numeric(s)
    if not math.isfinite(f):
        raise ValueError(NON_FINITE_MSG)
    return f


def format_number(x: float) -> str:
    if math.isfinite(x) and abs(x - round(x)) < 1e-12:
        return str(int(round(x)))
    return repr(float(x))


def is_within_tolerance(user_answer: float, correct_answer: float) -> bool:
    # Compare the decimal forms so 42.01 vs 42 is exactly 0.01 apart.
    diff = abs(Decimal(repr(float(user_answer))) - Decimal(repr(float(correct_answer))))
    return diff < TOLERANCE
