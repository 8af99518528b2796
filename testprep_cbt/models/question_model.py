import random
import re
import string
import time
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from testprep_cbt.errors import SchemaViolation


class Question(BaseModel):
    """
    Multiple-choice question as handed to the assessment engine.
    Immutable once a session starts.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Identifier, unique within the question set"
    )
    subject: str = Field(
        ...,
        min_length=1,
        description="Subject label (e.g. Physics, Chemistry)"
    )
    question_text: str = Field(
        ...,
        min_length=1,
        description="Question body"
    )
    options: List[str] = Field(
        ...,
        description="Answer options, in display order"
    )
    correct_answer: str = Field(
        ...,
        description="Exact text of the correct option (not an index)"
    )

    @field_validator('options')
    @classmethod
    def validate_options_length(cls, v: List[str]) -> List[str]:
        """A question needs at least two options to be answerable."""
        if len(v) < 2:
            raise ValueError("options must contain at least 2 items")
        return v


class AnsweredQuestion(Question):
    """Question plus the final answer the candidate left on it."""

    user_answer: str = Field(
        default="",
        description="Selected option text, empty string when unanswered"
    )


class _GeneratedQuestion(BaseModel):
    """Shape produced by the question generator: no id, short field names."""

    subject: str = Field(..., min_length=1)
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2)
    answer: str


def _normalize(text: str) -> str:
    return text.strip().lower()


def _simple_errors(exc: ValidationError, index: int) -> List[Dict[str, Any]]:
    return [
        {"loc": [index, *err["loc"]], "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]


def parse_question_set(payload: Any, id_prefix: str = "q") -> List[Question]:
    """
    Strictly parse a raw question payload into Question objects.

    Accepts a list of questions or a ``{"questions": [...]}`` wrapper. Each
    entry is either a stored question (has ``id``, camelCase or snake_case
    keys) or a generator entry (``subject``/``question``/``options``/``answer``),
    in which case the id becomes ``f"{id_prefix}-{n}"`` (1-based).

    Raises:
        SchemaViolation: any entry fails validation or ids collide.
    """
    if isinstance(payload, dict):
        payload = payload.get("questions")
    if not isinstance(payload, list):
        raise SchemaViolation(
            "question set must be a list or an object with a 'questions' list",
            [{"loc": ["questions"], "msg": "expected a list", "type": "list_type"}],
        )

    questions: List[Question] = []
    errors: List[Dict[str, Any]] = []
    for i, item in enumerate(payload):
        if not isinstance(item, dict):
            errors.append({"loc": [i], "msg": "expected an object", "type": "dict_type"})
            continue
        try:
            if "id" in item:
                questions.append(Question.model_validate(item))
            else:
                gq = _GeneratedQuestion.model_validate(item)
                questions.append(Question(
                    id=f"{id_prefix}-{i + 1}",
                    subject=gq.subject,
                    question_text=gq.question,
                    options=gq.options,
                    correct_answer=gq.answer,
                ))
        except ValidationError as e:
            errors.extend(_simple_errors(e, i))

    seen: set[str] = set()
    for i, q in enumerate(questions):
        if q.id in seen:
            errors.append({"loc": [i, "id"], "msg": f"duplicate id '{q.id}'", "type": "value_error"})
        seen.add(q.id)

    if errors:
        raise SchemaViolation(f"question set failed validation ({len(errors)} error(s))", errors)
    return questions


def find_unscorable(questions: List[Question]) -> List[str]:
    """
    Ids of questions whose correct answer matches none of the options
    (trimmed, case-insensitive). Such questions can never be scored correct.
    """
    return [
        q.id for q in questions
        if _normalize(q.correct_answer) not in {_normalize(o) for o in q.options}
    ]


def generate_quiz_id(
    test_type: str,
    subject: Optional[str] = None,
    chapter: Optional[str] = None,
) -> str:
    """
    Unique id for a newly generated quiz.

    mock     -> ``mock-<epoch ms>-<7 chars>``
    practice -> ``practice-<subject>-<chapter>-<epoch ms>-<7 chars>``
    """
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=7))
    stamp = int(time.time() * 1000)
    if test_type == "mock":
        return f"mock-{stamp}-{suffix}"
    safe_subject = re.sub(r"\s+", "-", subject) if subject else "custom"
    safe_chapter = re.sub(r"\s+", "-", chapter) if chapter else "topic"
    return f"practice-{safe_subject}-{safe_chapter}-{stamp}-{suffix}"
