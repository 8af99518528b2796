import uuid
from datetime import datetime, timedelta, timezone

import api.history as history
from conftest import make_question
from testprep_cbt.models.result_model import AttemptInfo
from testprep_cbt.services.exam_service import build_result

_T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def _result(attempt_id: str, minutes_later: int = 0, answers=None):
    return build_result(
        [make_question("q1"), make_question("q2")],
        answers or {},
        AttemptInfo(retake_attempt_id=attempt_id),
        60,
        now=_T0 + timedelta(minutes=minutes_later),
    )


def test_save_is_insert_or_update() -> None:
    owner = uuid.uuid4().hex

    assert history.save_result(owner, _result("a1")) is False
    assert history.save_result(owner, _result("a1", answers={"q1": "A"})) is True

    items = history.get_history(owner)
    assert len(items) == 1
    assert items[0].score.correct == 1


def test_history_is_newest_first() -> None:
    owner = uuid.uuid4().hex
    history.save_result(owner, _result("old", 0))
    history.save_result(owner, _result("new", 30))
    history.save_result(owner, _result("mid", 10))

    assert [r.test_attempt_id for r in history.get_history(owner)] == ["new", "mid", "old"]
    assert history.get_result(owner, "mid").test_attempt_id == "mid"


def test_delete_and_clear() -> None:
    owner = uuid.uuid4().hex
    history.save_result(owner, _result("a1"))
    history.save_result(owner, _result("a2"))

    assert history.delete_result(owner, "a1") is True
    assert history.delete_result(owner, "a1") is False
    assert history.clear_history(owner) == 1
    assert history.get_history(owner) == []
    assert history.get_history(uuid.uuid4().hex) == []
