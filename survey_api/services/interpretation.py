# survey_api/services/interpretation.py

import logging
from typing import Any, Mapping, Optional

from survey_api.core.errors import NoBandMatch
from survey_api.schemas.survey import InterpretationBand, SurveyResult, SurveyTemplate

logger = logging.getLogger(__name__)


def resolve_band(template: SurveyTemplate, score: float) -> InterpretationBand:
    # Bands are half-open [min, max); only the last one is closed at its top.
    bands = template.interpretation_rules.ranges
    for index, band in enumerate(bands):
        if band.contains(score, closed_top=index == len(bands) - 1):
            return band
    logger.error(f"No interpretation band of template {template.code} contains score {score}")
    raise NoBandMatch(f"Template {template.code} has no interpretation band for score {score}")


def interpret(template: SurveyTemplate, score: float) -> str:
    return resolve_band(template, score).label


def build_result(template: SurveyTemplate, score: float, answers: Optional[Mapping[str, Any]] = None) -> SurveyResult:
    """Resolve the band for ``score`` and apply the template's result modifiers.

    Modifiers only look at ``answers``; they never move the score into another band.
    """
    band = resolve_band(template, score)
    label, category = band.label, band.category
    for modifier in template.modifiers:
        if answers and modifier.applies(score, answers):
            label += modifier.label_suffix
            if category is not None:
                category += modifier.category_suffix
    return SurveyResult(score=score, interpretation=label, category=category)
