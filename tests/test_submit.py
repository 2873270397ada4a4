from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def test_submit_within_tolerance_is_correct(make_session, submissions_for, llm):
    sid = make_session(correct_answer=42)
    llm.replies = ["Well done! You added correctly."]
    r = client.post("/problem/submit", json={"session_id": sid, "user_answer": 42.005})
    assert r.status_code == 200
    body = r.json()
    assert body == {
        "is_correct": True,
        "feedback": "Well done! You added correctly.",
        "correct_answer": 42.0,
    }
    subs = submissions_for(sid)
    assert len(subs) == 1
    assert subs[0].is_correct is True
    assert subs[0].is_revealed is False
    assert subs[0].user_answer == 42.005
    assert subs[0].feedback_text == "Well done! You added correctly."


def test_submit_outside_tolerance_is_incorrect(make_session, submissions_for, llm):
    sid = make_session(correct_answer=42)
    r = client.post("/problem/submit", json={"session_id": sid, "user_answer": 42.02})
    assert r.status_code == 200
    assert r.json()["is_correct"] is False
    assert submissions_for(sid)[0].is_correct is False


def test_feedback_prompt_branches_on_verdict(make_session, llm):
    sid = make_session(problem_text="What is 6 x 7?", correct_answer=42)
    client.post("/problem/submit", json={"session_id": sid, "user_answer": 42})
    client.post("/problem/submit", json={"session_id": sid, "user_answer": 40})

    right, wrong = llm.prompts
    assert "What is 6 x 7?" in right
    assert "Result: CORRECT" in right and "Praises the student" in right
    assert "Student's Answer: 40" in wrong
    assert "Result: INCORRECT" in wrong and "hint" in wrong


def test_submit_accepts_numeric_strings(make_session):
    sid = make_session(correct_answer=0.75)
    r = client.post("/problem/submit", json={"session_id": sid, "user_answer": "3/4"})
    assert r.status_code == 200
    assert r.json()["is_correct"] is True


def test_submit_missing_session_id_is_400(make_session, submissions_for, llm):
    sid = make_session()
    r = client.post("/problem/submit", json={"user_answer": 42})
    assert r.status_code == 400
    assert r.json()["error"]
    assert submissions_for(sid) == []
    assert llm.prompts == []


def test_submit_missing_answer_is_400(make_session, submissions_for):
    sid = make_session()
    r = client.post("/problem/submit", json={"session_id": sid})
    assert r.status_code == 400
    assert submissions_for(sid) == []


def test_submit_garbage_answer_is_400(make_session, submissions_for):
    sid = make_session()
    r = client.post("/problem/submit", json={"session_id": sid, "user_answer": "forty-two"})
    assert r.status_code == 400
    assert submissions_for(sid) == []


def test_submit_malformed_body_is_400():
    r = client.post("/problem/submit", content=b"not json", headers={"content-type": "application/json"})
    assert r.status_code == 400


def test_submit_unknown_session_is_404(make_session, submissions_for, llm):
    sid = make_session()
    r = client.post("/problem/submit", json={"session_id": "nope", "user_answer": 1})
    assert r.status_code == 404
    assert r.json() == {"error": "Problem session not found"}
    assert submissions_for("nope") == []
    assert submissions_for(sid) == []
    assert llm.prompts == []


def test_model_failure_creates_no_submission(make_session, submissions_for, llm):
    from errors import ExternalServiceError

    sid = make_session()
    llm.error = ExternalServiceError("timeout")
    r = client.post("/problem/submit", json={"session_id": sid, "user_answer": 42})
    assert r.status_code == 500
    assert submissions_for(sid) == []


def test_repeated_submissions_each_persist(make_session, submissions_for):
    sid = make_session(correct_answer=42)
    for ans in (40, 42, 42):
        assert client.post("/problem/submit", json={"session_id": sid, "user_answer": ans}).status_code == 200
    assert [s.is_correct for s in submissions_for(sid)] == [False, True, True]


def test_lock_rejects_submission_after_correct(make_session, submissions_for, monkeypatch):
    import services.evaluator as evaluator

    monkeypatch.setattr(evaluator, "LOCK_SOLVED_SESSIONS", True)
    sid = make_session(correct_answer=42)
    assert client.post("/problem/submit", json={"session_id": sid, "user_answer": 41}).status_code == 200
    assert client.post("/problem/submit", json={"session_id": sid, "user_answer": 42}).status_code == 200

    r = client.post("/problem/submit", json={"session_id": sid, "user_answer": 42})
    assert r.status_code == 409
    r = client.post("/problem/reveal", json={"session_id": sid})
    assert r.status_code == 409
    assert len(submissions_for(sid)) == 2


def test_submit_boolean_answer_is_400(make_session, submissions_for, llm):
    sid = make_session(correct_answer=1)
    for flag in (True, False):
        r = client.post("/problem/submit", json={"session_id": sid, "user_answer": flag})
        assert r.status_code == 400
        assert r.json()["error"]
    assert submissions_for(sid) == []
    assert llm.prompts == []


def test_submit_integer_answer_still_accepted(make_session):
    sid = make_session(correct_answer=7)
    r = client.post("/problem/submit", json={"session_id": sid, "user_answer": 7})
    assert r.status_code == 200
    assert r.json()["is_correct"] is True


def test_submit_huge_integer_answer_is_400(make_session, submissions_for):
    sid = make_session()
    r = client.post("/problem/submit", json={"session_id": sid, "user_answer": 10**400})
    assert r.status_code == 400
    assert submissions_for(sid) == []
