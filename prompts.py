"""Prompt text sent to the language model."""

from __future__ import annotations

from answers import format_number

P5_SYLLABUS_CONTEXT = """
You are generating math word problems for Primary 5 students in Singapore.
Primary 5 topics include:
- Whole numbers up to 10 million
- Four operations with fractions (proper, improper, mixed numbers)
- Decimals up to 3 decimal places
- Percentage (up to 100%)
- Ratio
- Rate
- Basic algebra
- Geometry (angles, triangles, quadrilaterals, circles)
- Area and perimeter (triangles, parallelograms, trapeziums)
- Volume (cubes, cuboids)

Generate a word problem that:
1. Is appropriate for Primary 5 level (age 10-11)
2. Uses real-world context that students can relate to
3. Has ONE clear numerical answer
4. Is not too simple but not overly complex

Return ONLY a JSON object with this format:
{
  "problem_text": "The word problem here",
  "final_answer": 123
}

The final_answer should be a number (can be decimal or whole number).
""".strip()

_TEACHER_ROLE = "You are a helpful and encouraging Primary 5 math teacher."
_TONE = (
    "Keep the tone friendly, supportive, and appropriate for a 10-11 year old student.\n"
    "Return ONLY the feedback text, no additional formatting."
)

_CORRECT_POINTS = (
    "1. Praises the student for getting the correct answer\n"
    "2. Briefly explains why the answer is correct or highlights the key concept\n"
    "3. Encourages them to keep practicing"
)
_INCORRECT_POINTS = (
    "1. Gently explains what went wrong\n"
    "2. Provides a hint or shows the correct approach\n"
    "3. Encourages the student to try again"
)
_REVEAL_POINTS = (
    "1. Acknowledges their decision to reveal the answer\n"
    "2. Explains the correct answer and the key concepts involved\n"
    "3. Encourages them to try similar problems in the future"
)


def generation_prompt() -> str:
    return P5_SYLLABUS_CONTEXT


def feedback_prompt(
    problem_text: str, correct_answer: float, user_answer: float, is_correct: bool
) -> str:
    return "\n\n".join(
        [
            _TEACHER_ROLE,
            f"Problem: {problem_text}\n"
            f"Correct Answer: {format_number(correct_answer)}\n"
            f"Student's Answer: {format_number(user_answer)}\n"
            f"Result: {'CORRECT' if is_correct else 'INCORRECT'}",
            "Generate a personalized feedback message (2-3 sentences) that:\n"
            + (_CORRECT_POINTS if is_correct else _INCORRECT_POINTS),
            _TONE,
        ]
    )


def reveal_prompt(problem_text: str, correct_answer: float) -> str:
    return "\n\n".join(
        [
            _TEACHER_ROLE,
            f"Problem: {problem_text}\nCorrect Answer: {format_number(correct_answer)}",
            "The student has chosen to reveal the correct answer instead of "
            "continuing to try solving it themselves.",
            "Generate a supportive feedback message (2-3 sentences) that:\n" + _REVEAL_POINTS,
            _TONE,
        ]
    )
