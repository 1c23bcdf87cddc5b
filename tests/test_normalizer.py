# tests/test_normalizer.py

import math
import pytest
from survey_api.core.errors import AnswerValidationError
from survey_api.schemas.survey import Answer, SurveyQuestion, SurveyTemplate
from survey_api.services.normalizer import normalize


def answers(**values):
    return [Answer(question_id=k, value=v) for k, v in values.items()]


def test_complete_answers_are_kept(asa_template):
    assert normalize(asa_template, answers(flag=True, scale=3)) == {"flag": True, "scale": 3.0}


def test_missing_answers_are_defaulted(asa_template, notes_template):
    assert normalize(asa_template, []) == {"flag": False, "scale": 0.0}
    assert normalize(notes_template, []) == {"pain": 0.0, "symptoms": "", "concerns": ""}


def test_missing_scale_defaults_to_min(asa_template):
    assert normalize(asa_template, answers(flag=True)) == {"flag": True, "scale": 0.0}


def test_none_value_counts_as_missing(asa_template):
    assert normalize(asa_template, answers(flag=None, scale=2))["flag"] is False


def test_output_follows_template_order(notes_template):
    result = normalize(notes_template, answers(concerns="sleep", pain=4, symptoms="cough"))
    assert list(result) == ["pain", "symptoms", "concerns"]


@pytest.mark.parametrize("value", [0, 4, 0.0, 4.0])
def test_numeric_range_ends_are_accepted(asa_template, value):
    assert normalize(asa_template, answers(scale=value))["scale"] == float(value)


@pytest.mark.parametrize("value", [-0.001, 4.001, 10, -1])
def test_numeric_outside_range_is_rejected(asa_template, value):
    with pytest.raises(AnswerValidationError) as exc_info:
        normalize(asa_template, answers(scale=value))
    assert exc_info.value.question_id == "scale"


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_numeric_must_be_finite(asa_template, value):
    with pytest.raises(AnswerValidationError):
        normalize(asa_template, answers(scale=value))


@pytest.mark.parametrize("value", [True, "3", [3]])
def test_numeric_rejects_non_numbers(asa_template, value):
    with pytest.raises(AnswerValidationError):
        normalize(asa_template, answers(scale=value))


@pytest.mark.parametrize("value", [1, 0, "true", "yes"])
def test_boolean_rejects_non_booleans(asa_template, value):
    with pytest.raises(AnswerValidationError):
        normalize(asa_template, answers(flag=value))


def test_numeric_defaults_to_zero_ten_bounds():
    question = SurveyQuestion(id="q", text="Q", type="number")
    assert (question.lower, question.upper) == (0.0, 10.0)


def _select_template(**question):
    return SurveyTemplate.model_validate({
        "code": "SEL",
        "name": "Select",
        "questions": [{"section": "s", "questions": [{"id": "choice", "text": "Choice", "type": "select", **question}]}],
    })


def test_select_accepts_option_values():
    template = _select_template(options=[{"value": 1, "label": "One"}, {"value": 2, "label": "Two"}])
    assert normalize(template, answers(choice=2)) == {"choice": 2}
    assert normalize(template, answers(choice=2.0)) == {"choice": 2}


@pytest.mark.parametrize("value", [3, "2", True])
def test_select_rejects_values_outside_options(value):
    template = _select_template(options=[{"value": 1, "label": "One"}, {"value": 2, "label": "Two"}])
    with pytest.raises(AnswerValidationError):
        normalize(template, answers(choice=value))


def test_missing_select_takes_first_option():
    template = _select_template(options=[{"value": "a", "label": "A"}, {"value": "b", "label": "B"}])
    assert normalize(template, []) == {"choice": "a"}


def test_select_accepts_legacy_string_options():
    template = _select_template(options=["Never", "Sometimes", "Often"])
    question = template.question_map()["choice"]
    assert [o.value for o in question.options] == [0, 1, 2]
    assert normalize(template, answers(choice=1)) == {"choice": 1}


def test_text_accepts_empty_unless_required(notes_template):
    assert normalize(notes_template, answers(symptoms=""))["symptoms"] == ""

    template = SurveyTemplate.model_validate({
        "code": "REQ",
        "name": "Required text",
        "questions": [{"section": "s", "questions": [{"id": "why", "text": "Why", "type": "text", "required": True}]}],
    })
    with pytest.raises(AnswerValidationError):
        normalize(template, answers(why="   "))
    with pytest.raises(AnswerValidationError):
        normalize(template, [])
    assert normalize(template, answers(why=" because ")) == {"why": " because "}


def test_text_rejects_non_strings(notes_template):
    with pytest.raises(AnswerValidationError):
        normalize(notes_template, answers(symptoms=5))


def test_unknown_question_is_rejected(asa_template):
    with pytest.raises(AnswerValidationError) as exc_info:
        normalize(asa_template, answers(ghost=True))
    assert exc_info.value.question_id == "ghost"


def test_duplicate_answers_are_rejected(asa_template):
    duplicated = [Answer(question_id="flag", value=True), Answer(question_id="flag", value=False)]
    with pytest.raises(AnswerValidationError):
        normalize(asa_template, duplicated)


def test_integer_beyond_float_range_is_rejected(asa_template):
    with pytest.raises(AnswerValidationError) as exc_info:
        normalize(asa_template, answers(scale=10 ** 400))
    assert exc_info.value.question_id == "scale"


def test_select_with_integer_beyond_float_range_is_rejected():
    template = _select_template(options=[{"value": 1.5, "label": "One and a half"}, {"value": 2, "label": "Two"}])
    with pytest.raises(AnswerValidationError):
        normalize(template, answers(choice=10 ** 400))
