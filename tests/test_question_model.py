import re

import pytest

from conftest import make_question
from testprep_cbt.errors import SchemaViolation
from testprep_cbt.models.question_model import (
    AnsweredQuestion, Question, find_unscorable, generate_quiz_id, parse_question_set,
)


def test_parse_generator_output_assigns_ids() -> None:
    payload = {
        "questions": [
            {"subject": "Physics", "question": "Unit of force?", "options": ["N", "J"], "answer": "N"},
            {"subject": "Biology", "question": "Cell powerhouse?", "options": ["Mito", "Ribo"], "answer": "Mito"},
        ]
    }
    questions = parse_question_set(payload, id_prefix="mock")

    assert [q.id for q in questions] == ["mock-1", "mock-2"]
    assert questions[0].question_text == "Unit of force?"
    assert questions[1].correct_answer == "Mito"


def test_parse_stored_questions_with_camel_case_keys() -> None:
    payload = [
        {
            "id": "x1", "subject": "Chemistry", "questionText": "pH of water?",
            "options": ["7", "1"], "correctAnswer": "7", "userAnswer": "1",
        }
    ]
    questions = parse_question_set(payload)

    assert questions == [
        Question(id="x1", subject="Chemistry", question_text="pH of water?",
                 options=["7", "1"], correct_answer="7")
    ]


def test_parse_collects_every_error() -> None:
    payload = [
        {"subject": "Physics", "question": "Q?", "options": ["only one"], "answer": "only one"},
        {"subject": "Physics", "options": ["a", "b"], "answer": "a"},
        "not an object",
    ]
    with pytest.raises(SchemaViolation) as exc_info:
        parse_question_set(payload)

    locs = [tuple(err["loc"][:1]) for err in exc_info.value.errors]
    assert (0,) in locs
    assert (1,) in locs
    assert (2,) in locs


def test_parse_rejects_duplicate_ids() -> None:
    q = {"id": "dup", "subject": "Physics", "questionText": "Q?", "options": ["a", "b"], "correctAnswer": "a"}
    with pytest.raises(SchemaViolation, match="1 error"):
        parse_question_set([q, dict(q)])


@pytest.mark.parametrize("payload", [None, "questions", {"questions": "nope"}, 3])
def test_parse_rejects_non_list_payload(payload) -> None:
    with pytest.raises(SchemaViolation):
        parse_question_set(payload)


def test_find_unscorable_is_permissive_about_case() -> None:
    ok = make_question("ok", correct=" a ")
    bad = make_question("bad", correct="E")
    assert find_unscorable([ok, bad]) == ["bad"]


def test_answered_question_dumps_camel_case() -> None:
    q = AnsweredQuestion(
        id="q1", subject="Physics", question_text="Q?", options=["a", "b"],
        correct_answer="a", user_answer="b",
    )
    dumped = q.model_dump(by_alias=True)
    assert dumped["questionText"] == "Q?"
    assert dumped["correctAnswer"] == "a"
    assert dumped["userAnswer"] == "b"


def test_generate_quiz_id_formats() -> None:
    assert re.fullmatch(r"mock-\d+-[a-z0-9]{7}", generate_quiz_id("mock"))
    assert re.fullmatch(
        r"practice-Organic-Chemistry-Alkanes-and-Alkenes-\d+-[a-z0-9]{7}",
        generate_quiz_id("practice", "Organic Chemistry", "Alkanes  and Alkenes"),
    )
    assert generate_quiz_id("practice").startswith("practice-custom-topic-")
