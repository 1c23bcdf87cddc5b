# survey_api/services/scoring.py

import logging
import math
from typing import Any, Callable, Dict, Mapping, Tuple

from survey_api.core.errors import ScoringRuleMissing, UnknownQuestion
from survey_api.schemas.survey import (
    QuestionType,
    ScoreBreakdown,
    SurveyQuestion,
    SurveyTemplate,
    is_number,
)

logger = logging.getLogger(__name__)

# Value transforms a numeric question may declare in ``extra["transform"]``.
TRANSFORMS: Dict[str, Callable[[float], float]] = {
    "identity": lambda x: x,
    "sqrt": math.sqrt,
    "log1p": math.log1p,
}


def _boolean_weight(question: SurveyQuestion) -> float:
    if question.score is None:
        raise ScoringRuleMissing(f"Boolean question {question.id} has no score weight")
    return question.score


def _numeric_rule(question: SurveyQuestion) -> Tuple[float, Callable[[float], float]]:
    name = question.extra.get("transform", "identity")
    transform = TRANSFORMS.get(name)
    if transform is None:
        raise ScoringRuleMissing(f"Question {question.id} uses unknown transform {name!r}")
    weight = question.score if question.score is not None else 1.0
    return weight, transform


def _option_points(question: SurveyQuestion, option) -> float:
    if option.score is not None:
        return option.score
    if is_number(option.value):
        return float(option.value)
    raise ScoringRuleMissing(f"Option {option.value!r} of question {question.id} has no score")


def _boolean_term(question: SurveyQuestion, value: Any) -> float:
    weight = _boolean_weight(question)
    return weight if value else 0.0


def _numeric_term(question: SurveyQuestion, value: Any) -> float:
    weight, transform = _numeric_rule(question)
    return weight * transform(float(value))


def _select_term(question: SurveyQuestion, value: Any) -> float:
    option = question.find_option(value)
    if option is None:
        raise ScoringRuleMissing(f"Question {question.id} has no option {value!r}")
    return _option_points(question, option)


def _text_term(question: SurveyQuestion, value: Any) -> float:
    return 0.0


# One scoring rule per question type; new scales only add template data.
SCORING_RULES: Dict[QuestionType, Callable[[SurveyQuestion, Any], float]] = {
    QuestionType.BOOLEAN: _boolean_term,
    QuestionType.NUMBER: _numeric_term,
    QuestionType.SCALE: _numeric_term,
    QuestionType.VAS: _numeric_term,
    QuestionType.VAS100: _numeric_term,
    QuestionType.SELECT: _select_term,
    QuestionType.TEXT: _text_term,
}


def score_breakdown(template: SurveyTemplate, answers: Mapping[str, Any]) -> ScoreBreakdown:
    """Fold normalized answers into a total plus per-section and per-question terms.

    Args:
        template: The template the answers were normalized against.
        answers: Mapping of question id to normalized value.

    Returns:
        ScoreBreakdown: The unrounded total and its decomposition.
    """
    located = {question.id: (section, question) for section, question in template.iter_questions()}
    terms: Dict[str, float] = {}
    section_terms: Dict[str, list] = {section.section: [] for section in template.questions}

    for question_id, value in answers.items():
        if question_id not in located:
            raise UnknownQuestion(f"Template {template.code} has no question {question_id}")
        section, question = located[question_id]
        term = SCORING_RULES[question.type](question, value)
        terms[question_id] = term
        section_terms[section.section].append(term)

    offset = template.scoring_logic.offset
    total = math.fsum([offset, *terms.values()])
    sections = {name: math.fsum(values) for name, values in section_terms.items()}
    logger.debug(f"Template {template.code} scored {total} from {len(terms)} answer(s)")
    return ScoreBreakdown(total=total, offset=offset, sections=sections, terms=terms)


def score(template: SurveyTemplate, answers: Mapping[str, Any]) -> float:
    return score_breakdown(template, answers).total


def _term_bounds(question: SurveyQuestion) -> Tuple[float, float]:
    if question.type == QuestionType.BOOLEAN:
        weight = _boolean_weight(question)
        return min(0.0, weight), max(0.0, weight)
    if question.type == QuestionType.SELECT:
        points = [_option_points(question, option) for option in question.options]
        return min(points), max(points)
    if question.type == QuestionType.TEXT:
        return 0.0, 0.0
    # transforms are monotonic, so the extremes sit at the range ends
    ends = (_numeric_term(question, question.lower), _numeric_term(question, question.upper))
    return min(ends), max(ends)


def score_bounds(template: SurveyTemplate) -> Tuple[float, float]:
    """Lowest and highest score the template can produce."""
    lows, highs = [template.scoring_logic.offset], [template.scoring_logic.offset]
    for _, question in template.iter_questions():
        low, high = _term_bounds(question)
        lows.append(low)
        highs.append(high)
    return math.fsum(lows), math.fsum(highs)
