from datetime import datetime, timedelta

from fastapi.testclient import TestClient

import store
from errors import StorageError
from main import app

client = TestClient(app)


def _boom(*args, **kwargs):
    raise AssertionError("store must not be touched")


def test_empty_history_skips_store(monkeypatch):
    monkeypatch.setattr(store, "get_sessions", _boom)
    monkeypatch.setattr(store, "get_submissions", _boom)

    for body in ({"session_ids": []}, {}, None):
        r = client.post("/problem/history", json=body)
        assert r.status_code == 200
        assert r.json() == {"history": []}


def test_history_orders_sessions_newest_first(make_session):
    t0 = datetime(2026, 1, 5, 9, 0, 0)
    old = make_session(problem_text="old", created_at=t0)
    mid = make_session(problem_text="mid", created_at=t0 + timedelta(minutes=5))
    new = make_session(problem_text="new", created_at=t0 + timedelta(minutes=10))
    make_session(problem_text="someone else's")

    r = client.post("/problem/history", json={"session_ids": [old, new, mid, "unknown-id"]})
    assert r.status_code == 200
    history = r.json()["history"]
    assert [h["session_id"] for h in history] == [new, mid, old]
    assert [h["problem_text"] for h in history] == ["new", "mid", "old"]
    assert all(h["submissions"] == [] for h in history)


def test_history_groups_submissions_in_time_order(make_session):
    a = make_session(correct_answer=10)
    b = make_session(correct_answer=20)
    client.post("/problem/submit", json={"session_id": a, "user_answer": 10})
    client.post("/problem/submit", json={"session_id": b, "user_answer": 19})
    client.post("/problem/submit", json={"session_id": a, "user_answer": 11})

    r = client.post("/problem/history", json={"session_ids": [a, b]})
    items = {h["session_id"]: h for h in r.json()["history"]}

    subs_a = items[a]["submissions"]
    assert [s["user_answer"] for s in subs_a] == [10, 11]
    assert [s["is_correct"] for s in subs_a] == [True, False]
    assert subs_a[0]["submitted_at"] <= subs_a[1]["submitted_at"]
    assert set(subs_a[0]) == {"user_answer", "is_correct", "feedback_text", "submitted_at", "is_revealed"}

    assert [s["user_answer"] for s in items[b]["submissions"]] == [19]


def test_reveal_then_history(make_session):
    sid = make_session(correct_answer=3.25)
    client.post("/problem/reveal", json={"session_id": sid})

    [item] = client.post("/problem/history", json={"session_ids": [sid]}).json()["history"]
    assert item["correct_answer"] == 3.25
    [sub] = item["submissions"]
    assert sub["is_revealed"] is True
    assert sub["is_correct"] is True
    assert sub["user_answer"] == 3.25


def test_history_deduplicates_ids(make_session):
    sid = make_session()
    r = client.post("/problem/history", json={"session_ids": [sid, sid, sid]})
    assert len(r.json()["history"]) == 1


def test_history_storage_failure_is_500(make_session, monkeypatch):
    sid = make_session()

    def fail(*args, **kwargs):
        raise StorageError("connection refused")

    monkeypatch.setattr(store, "get_sessions", fail)
    r = client.post("/problem/history", json={"session_ids": [sid]})
    assert r.status_code == 500
    assert r.json() == {"error": "Database request failed"}


def test_history_rejects_oversized_request():
    r = client.post("/problem/history", json={"session_ids": [f"id-{i}" for i in range(201)]})
    assert r.status_code == 400


def test_non_list_session_ids_give_empty_history(make_session, monkeypatch):
    make_session()
    monkeypatch.setattr(store, "get_sessions", _boom)
    monkeypatch.setattr(store, "get_submissions", _boom)

    for ids in ("abc", 42, {"id": "abc"}, [None, 3, ""]):
        r = client.post("/problem/history", json={"session_ids": ids})
        assert r.status_code == 200
        assert r.json() == {"history": []}
