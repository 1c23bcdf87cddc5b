# survey_api/services/normalizer.py

import logging
import math
from typing import Any, Dict, Iterable, Optional

from survey_api.core.errors import AnswerValidationError
from survey_api.schemas.survey import (
    NUMERIC_TYPES,
    Answer,
    QuestionType,
    SurveyQuestion,
    SurveyTemplate,
    is_number,
)

logger = logging.getLogger(__name__)


def default_value(question: SurveyQuestion) -> Any:
    """Type-appropriate value used when a question was left unanswered."""
    if question.type == QuestionType.BOOLEAN:
        return False
    if question.type == QuestionType.TEXT:
        return ""
    if question.type == QuestionType.SELECT:
        return question.options[0].value
    return question.lower


def _coerce_numeric(question: SurveyQuestion, value: Any) -> float:
    if not is_number(value):
        raise AnswerValidationError(f"Question {question.id} expects a number, got {value!r}", question.id)
    try:
        number = float(value)
    except OverflowError:
        raise AnswerValidationError(f"Question {question.id} expects a finite number, got an out-of-range integer", question.id)
    if not math.isfinite(number):
        raise AnswerValidationError(f"Question {question.id} expects a finite number, got {value!r}", question.id)
    if number < question.lower or number > question.upper:
        raise AnswerValidationError(
            f"Question {question.id} expects a value between {question.lower:g} and {question.upper:g}, got {value!r}",
            question.id,
        )
    return number


def _coerce_boolean(question: SurveyQuestion, value: Any) -> bool:
    if not isinstance(value, bool):
        raise AnswerValidationError(f"Question {question.id} expects true or false, got {value!r}", question.id)
    return value


def _coerce_select(question: SurveyQuestion, value: Any):
    option = question.find_option(value)
    if option is None:
        allowed = ", ".join(repr(o.value) for o in question.options)
        raise AnswerValidationError(
            f"Question {question.id} expects one of {allowed}, got {value!r}", question.id
        )
    return option.value


def _coerce_text(question: SurveyQuestion, value: Any) -> str:
    if not isinstance(value, str):
        raise AnswerValidationError(f"Question {question.id} expects text, got {value!r}", question.id)
    if question.required and not value.strip():
        raise AnswerValidationError(f"Question {question.id} is required", question.id)
    return value


def coerce(question: SurveyQuestion, value: Any) -> Any:
    if question.type in NUMERIC_TYPES:
        return _coerce_numeric(question, value)
    if question.type == QuestionType.BOOLEAN:
        return _coerce_boolean(question, value)
    if question.type == QuestionType.SELECT:
        return _coerce_select(question, value)
    return _coerce_text(question, value)


def normalize(template: SurveyTemplate, raw_answers: Iterable[Answer]) -> Dict[str, Any]:
    """Validate ``raw_answers`` against ``template`` and fill in the gaps.

    Returns a mapping of question id to typed value with exactly one entry per
    template question, in template order.
    """
    questions = template.question_map()
    submitted: Dict[str, Any] = {}
    for answer in raw_answers:
        if answer.question_id not in questions:
            raise AnswerValidationError(
                f"Answer references unknown question {answer.question_id} for template {template.code}",
                answer.question_id,
            )
        if answer.question_id in submitted:
            raise AnswerValidationError(f"Question {answer.question_id} was answered more than once", answer.question_id)
        submitted[answer.question_id] = answer.value

    normalized: Dict[str, Any] = {}
    defaulted = 0
    for _, question in template.iter_questions():
        value: Optional[Any] = submitted.get(question.id)
        if value is None:
            value = default_value(question)
            defaulted += 1
        normalized[question.id] = coerce(question, value)

    if defaulted:
        logger.debug(f"Template {template.code}: defaulted {defaulted} unanswered question(s)")
    return normalized
