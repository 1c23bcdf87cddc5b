# survey_api/schemas/survey.py

import math
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, Iterator, List, Literal, Optional, Tuple, Union


class QuestionType(str, Enum):
    BOOLEAN = "boolean"
    NUMBER = "number"
    SCALE = "scale"
    SELECT = "select"
    TEXT = "text"
    VAS = "vas"
    VAS100 = "vas100"


NUMERIC_TYPES = frozenset({QuestionType.NUMBER, QuestionType.SCALE, QuestionType.VAS, QuestionType.VAS100})

DEFAULT_MIN = 0.0
DEFAULT_MAX = 10.0


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a numeric answer
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def same_value(left: Any, right: Any) -> bool:
    if is_number(left) and is_number(right):
        if isinstance(left, int) and isinstance(right, int):
            return left == right
        try:
            return float(left) == float(right)
        except OverflowError:
            return False
    if isinstance(left, bool) or isinstance(right, bool):
        return False
    return left == right


class SurveyOption(BaseModel):
    value: Union[int, float, str]
    label: str
    score: Optional[float] = None


class SurveyQuestion(BaseModel):
    id: str
    text: str
    type: QuestionType
    score: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None
    options: Optional[List[SurveyOption]] = None
    labels: Optional[Dict[str, str]] = None
    required: bool = False
    extra: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("options", mode="before")
    @classmethod
    def _convert_legacy_options(cls, value):
        # Older templates store options as a plain list of labels.
        if isinstance(value, list) and value and all(isinstance(item, str) for item in value):
            return [{"value": index, "label": label} for index, label in enumerate(value)]
        return value

    @field_validator("extra", mode="before")
    @classmethod
    def _default_extra(cls, value):
        return {} if value is None else value

    @model_validator(mode="after")
    def _check_constraints(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"question {self.id}: min {self.min} is greater than max {self.max}")
        if self.type == QuestionType.SELECT and not self.options:
            raise ValueError(f"question {self.id}: select questions need at least one option")
        return self

    @property
    def lower(self) -> float:
        return self.min if self.min is not None else DEFAULT_MIN

    @property
    def upper(self) -> float:
        return self.max if self.max is not None else DEFAULT_MAX

    def find_option(self, value: Any) -> Optional[SurveyOption]:
        for option in self.options or []:
            if same_value(option.value, value):
                return option
        return None


class SurveySection(BaseModel):
    section: str
    title: Optional[str] = None
    questions: List[SurveyQuestion] = Field(default_factory=list)


class ScoringLogic(BaseModel):
    type: Literal["sum"] = "sum"
    offset: float = 0.0


class InterpretationBand(BaseModel):
    """A score interval ``[min, max)`` mapped to an interpretation label.

    ``max=None`` leaves the band unbounded above. The last band of a template is
    closed at its top, so a score equal to its ``max`` still matches.
    """

    min: float
    max: Optional[float] = None
    label: str
    category: Optional[str] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def _check_bounds(self):
        if self.max is not None and self.min > self.max:
            raise ValueError(f"band {self.label!r}: min {self.min} is greater than max {self.max}")
        return self

    def contains(self, score: float, closed_top: bool = False) -> bool:
        if math.isnan(score) or score < self.min:
            return False
        if self.max is None:
            return True
        return score < self.max or (closed_top and score == self.max)


class InterpretationRules(BaseModel):
    ranges: List[InterpretationBand] = Field(default_factory=list)


class ResultModifier(BaseModel):
    """Suffixes appended to the band category and label when a boolean answer is true.

    ``below`` limits the modifier to scores strictly under that value.
    """

    question_id: str
    category_suffix: str = ""
    label_suffix: str = ""
    below: Optional[float] = None

    def applies(self, score: float, answers: Dict[str, Any]) -> bool:
        if answers.get(self.question_id) is not True:
            return False
        return self.below is None or score < self.below


class SurveyTemplateSummary(BaseModel):
    id: Optional[str] = None
    code: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return None if value is None else str(value)


class SurveyTemplate(SurveyTemplateSummary):
    version: int = 1
    is_active: bool = True
    questions: List[SurveySection] = Field(default_factory=list)
    scoring_logic: ScoringLogic = Field(default_factory=ScoringLogic)
    interpretation_rules: InterpretationRules = Field(default_factory=InterpretationRules)
    modifiers: List[ResultModifier] = Field(default_factory=list)
    # Policy flag: request advice automatically after scoring.
    auto_advice: Optional[bool] = None

    @field_validator("scoring_logic", "interpretation_rules", mode="before")
    @classmethod
    def _default_rules(cls, value):
        return {} if value is None else value

    @field_validator("modifiers", mode="before")
    @classmethod
    def _default_modifiers(cls, value):
        return [] if value is None else value

    @model_validator(mode="after")
    def _check_template(self):
        seen = set()
        for _, question in self.iter_questions():
            if question.id in seen:
                raise ValueError(f"template {self.code}: duplicate question id {question.id}")
            seen.add(question.id)
        questions = self.question_map()
        for modifier in self.modifiers:
            question = questions.get(modifier.question_id)
            if question is None or question.type != QuestionType.BOOLEAN:
                raise ValueError(f"template {self.code}: modifier needs a boolean question, got {modifier.question_id}")
        if self.auto_advice is None:
            self.auto_advice = bool(self.text_questions())
        return self

    def iter_questions(self) -> Iterator[Tuple[SurveySection, SurveyQuestion]]:
        for section in self.questions:
            for question in section.questions:
                yield section, question

    def question_map(self) -> Dict[str, SurveyQuestion]:
        return {question.id: question for _, question in self.iter_questions()}

    def text_questions(self) -> List[SurveyQuestion]:
        return [q for _, q in self.iter_questions() if q.type == QuestionType.TEXT]

    def summary(self) -> SurveyTemplateSummary:
        return SurveyTemplateSummary(
            id=self.id,
            code=self.code,
            name=self.name,
            description=self.description,
            category=self.category,
        )


class Answer(BaseModel):
    question_id: str
    value: Any = None


class SurveyAnswers(BaseModel):
    answers: List[Answer] = Field(default_factory=list)

    @field_validator("answers", mode="before")
    @classmethod
    def _accept_mapping(cls, value):
        # {"question_id": value, ...} is accepted alongside the list form
        if isinstance(value, dict):
            return [{"question_id": key, "value": item} for key, item in value.items()]
        return value


class AdviceRequest(SurveyAnswers):
    text: Optional[str] = None


class ScoreBreakdown(BaseModel):
    total: float
    offset: float = 0.0
    sections: Dict[str, float] = Field(default_factory=dict)
    terms: Dict[str, float] = Field(default_factory=dict)


class SurveyResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float
    interpretation: str
    category: Optional[str] = None


class SurveyCalculation(SurveyResult):
    advice_requested: bool = False


class SessionStatus(str, Enum):
    ANSWERED = "answered"
    SCORED = "scored"
    ADVICE_PENDING = "advice_pending"
    ADVICE_READY = "advice_ready"
    ADVICE_FAILED = "advice_failed"
