import pytest
from fastapi.testclient import TestClient

import api.history as history
import api.session as session
from api.app import SESSION_COOKIE, create_app
from api.sample_questions import SAMPLE_QUESTIONS


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app(start_cleanup=False))


def _engine(client: TestClient):
    return session.get_slot(client.cookies.get(SESSION_COOKIE)).engine


def _run_out_the_clock(client: TestClient) -> None:
    # Pretend the whole duration has passed since the last tick
    timer = _engine(client).timer
    timer._last_tick -= timer.seconds_remaining + 1


def _answer_all_correct(client: TestClient) -> None:
    for q in SAMPLE_QUESTIONS:
        resp = client.post("/api/save-answer", json={"question_id": q.id, "answer": q.correct_answer})
        assert resp.status_code == 200


def test_health(client: TestClient) -> None:
    assert client.get("/api/health").json() == {"status": "ok"}


def test_exam_state_requires_a_session(client: TestClient) -> None:
    assert client.get("/api/exam-state").status_code == 404


def test_sample_exam_initial_state(client: TestClient) -> None:
    resp = client.post("/api/start-sample-exam")
    assert resp.status_code == 200
    assert resp.json()["total"] == 10

    state = client.get("/api/exam-state").json()
    assert state["current_index"] == 0
    assert state["status_counts"]["notAnswered"] == 1
    assert state["status_counts"]["notVisited"] == 9
    assert [s["name"] for s in state["sections"]] == ["Physics", "Chemistry", "Biology"]
    assert state["timer"]["state"] == "running"
    assert state["timer"]["seconds_remaining"] <= 600


def test_question_hides_correct_answer(client: TestClient) -> None:
    client.post("/api/start-sample-exam")
    data = client.get("/api/question/0").json()

    assert data["id"] == "sample-1"
    assert "correct_answer" not in data
    assert data["status"] == "notAnswered"
    assert client.get("/api/question/10").status_code == 404


def test_answer_mark_and_navigation(client: TestClient) -> None:
    client.post("/api/start-sample-exam")

    resp = client.post("/api/save-answer", json={"question_id": "sample-1", "answer": "Newton"})
    assert resp.json()["status"] == "answered"
    resp = client.post("/api/toggle-mark", json={"question_id": "sample-1"})
    assert resp.json()["status"] == "markedAndAnswered"
    resp = client.post("/api/clear-answer", json={"question_id": "sample-1"})
    assert resp.json()["status"] == "markedForReview"

    assert client.post("/api/navigate", json={"index": 2}).json()["index"] == 2
    resp = client.post("/api/save-next", json={"mark": True})
    assert resp.json()["index"] == 3
    state = client.get("/api/exam-state").json()
    assert state["current_section"] == "Chemistry"
    assert state["statuses"]["sample-3"] == "markedForReview"

    assert client.post("/api/previous").json()["index"] == 2
    assert client.post("/api/navigate", json={"index": 10}).status_code == 404
    assert client.post("/api/save-answer", json={"question_id": "x", "answer": "A"}).status_code == 404


def test_submit_results_and_history(client: TestClient) -> None:
    client.post("/api/start-sample-exam")
    _answer_all_correct(client)
    client.post("/api/save-answer", json={"question_id": "sample-4", "answer": "4"})

    resp = client.post("/api/submit-exam")
    assert resp.status_code == 200
    score = resp.json()["score"]
    assert score["correct"] == 9
    assert score["incorrect"] == 1
    assert score["total_score"] == 35
    assert score["max_score"] == 40

    assert client.post("/api/submit-exam").status_code == 409
    assert client.post("/api/save-answer", json={"question_id": "sample-1", "answer": "Joule"}).status_code == 409

    results = client.get("/api/results").json()
    assert results["attempted"] == 10
    assert results["incorrect_question_ids"] == ["sample-4"]
    breakdown = results["subject_breakdown"]
    assert [s["subject"] for s in breakdown["subjects"]] == ["Physics", "Chemistry", "Biology"]
    assert breakdown["weakest"] == "Chemistry"

    items = client.get("/api/history").json()["items"]
    assert len(items) == 1
    assert items[0]["test_attempt_id"] == resp.json()["attempt_id"]


def test_retake_overwrites_previous_attempt(client: TestClient) -> None:
    client.post("/api/start-sample-exam")
    client.post("/api/save-answer", json={"question_id": "sample-1", "answer": "Newton"})
    first = client.post("/api/submit-exam").json()

    resp = client.post("/api/retake-exam")
    assert resp.json()["attempt_id"] == first["attempt_id"]
    state = client.get("/api/exam-state").json()
    assert state["status_counts"]["answered"] == 0

    _answer_all_correct(client)
    second = client.post("/api/submit-exam").json()
    assert second["attempt_id"] == first["attempt_id"]

    items = client.get("/api/history").json()["items"]
    assert len(items) == 1
    assert items[0]["score"]["total_score"] == 40


def test_start_exam_with_generated_questions(client: TestClient) -> None:
    payload = {
        "questions": [
            {"subject": "Physics", "question": "Q1?", "options": ["a", "b"], "answer": "a"},
            {"subject": "Physics", "question": "Q2?", "options": ["a", "b"], "answer": "b"},
        ],
        "test_type": "practice",
        "config": {"subject": "Physics", "chapter": "Kinematics", "number_of_questions": 2},
    }
    resp = client.post("/api/start-exam", json=payload)
    assert resp.status_code == 200
    assert resp.json()["quiz_id"].startswith("practice-Physics-Kinematics-")

    engine = _engine(client)
    assert engine.duration_seconds == 2 * 60
    assert engine.questions[0].id == "practice-1"


def test_start_exam_validation_errors(client: TestClient) -> None:
    bad = client.post("/api/start-exam", json={"questions": [{"subject": "Physics"}]})
    assert bad.status_code == 422
    assert bad.json()["detail"]["errors"]

    empty = client.post("/api/start-exam", json={"questions": []})
    assert empty.status_code == 400

    questions = [{"subject": "Physics", "question": "Q?", "options": ["a", "b"], "answer": "a"}]
    zero = client.post("/api/start-exam", json={"questions": questions, "duration_minutes": 0})
    assert zero.status_code == 400


def test_expired_timer_submits_automatically(client: TestClient) -> None:
    client.post("/api/start-sample-exam")
    client.post("/api/save-answer", json={"question_id": "sample-1", "answer": "Newton"})
    _run_out_the_clock(client)

    state = client.get("/api/exam-state").json()
    assert state["is_submitted"] is True
    assert state["timer"]["state"] == "expired"

    results = client.get("/api/results").json()
    assert results["score"]["correct"] == 1
    assert results["time_taken_seconds"] == 600


def test_submit_racing_the_timer_gets_the_auto_submitted_result(client: TestClient) -> None:
    client.post("/api/start-sample-exam")
    client.post("/api/save-answer", json={"question_id": "sample-1", "answer": "Newton"})
    _run_out_the_clock(client)

    resp = client.post("/api/submit-exam")
    assert resp.status_code == 200
    assert resp.json()["score"]["correct"] == 1
    assert resp.json()["attempt_id"] == client.get("/api/results").json()["test_attempt_id"]
    assert len(client.get("/api/history").json()["items"]) == 1

    assert client.post("/api/submit-exam").status_code == 409


def test_submit_after_expiry_seen_elsewhere_still_acknowledged_once(client: TestClient) -> None:
    client.post("/api/start-sample-exam")
    _run_out_the_clock(client)

    assert client.get("/api/exam-state").json()["is_submitted"] is True
    assert client.post("/api/submit-exam").status_code == 200
    assert client.post("/api/submit-exam").status_code == 409


def test_expired_session_drops_its_history(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    client.post("/api/start-sample-exam")
    client.post("/api/submit-exam")
    sid = client.cookies.get(SESSION_COOKIE)
    assert len(history.get_history(sid)) == 1

    monkeypatch.setattr(session, "SESSION_TTL", -1)
    assert session.cleanup_expired() >= 1

    assert session.get_slot(sid) is None
    assert history.get_history(sid) == []


def test_stale_slot_lookup_drops_its_history(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    client.post("/api/start-sample-exam")
    client.post("/api/submit-exam")
    sid = client.cookies.get(SESSION_COOKIE)

    monkeypatch.setattr(session, "SESSION_TTL", -1)
    assert session.get_slot(sid) is None
    assert history.get_history(sid) == []


def test_history_delete_and_clear(client: TestClient) -> None:
    client.post("/api/start-sample-exam")
    first = client.post("/api/submit-exam").json()["attempt_id"]
    client.post("/api/start-sample-exam")
    client.post("/api/submit-exam")

    assert len(client.get("/api/history").json()["items"]) == 2
    assert client.delete(f"/api/history/{first}").status_code == 200
    assert client.delete(f"/api/history/{first}").status_code == 404
    assert client.delete("/api/history").json()["removed"] == 1
    assert client.get("/api/history").json()["items"] == []


def test_history_is_scoped_per_browser_session() -> None:
    app = create_app(start_cleanup=False)
    alice, bob = TestClient(app), TestClient(app)

    alice.post("/api/start-sample-exam")
    alice.post("/api/submit-exam")

    assert len(alice.get("/api/history").json()["items"]) == 1
    assert bob.get("/api/history").json()["items"] == []
