# survey_api/services/advice_service.py

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate

from survey_api.core.errors import AdviceUnavailable
from survey_api.db.advice_repository import DEFAULT_LIMIT, AdviceRepository
from survey_api.schemas.advice import AIAdviceRecord, AIAdviceResult
from survey_api.schemas.survey import ScoreBreakdown, SurveyResult, SurveyTemplate
from survey_api.services.openai_service import AdviceGenerator
from survey_api.services.scoring import score_breakdown

logger = logging.getLogger(__name__)

PATIENT_ADVICE_DISCLAIMER = (
    "Important: this is general information, not a clinical recommendation, and it does not "
    "replace a consultation with a doctor. If you feel worse, or have severe pain, a high "
    "temperature, shortness of breath or other alarming symptoms, seek medical help."
)

# Phrases that mark a model-written closing disclaimer.
_DISCLAIMER_HINTS = ("not a substitute", "does not replace", "not medical advice", "not a clinical", "consult", "doctor")
_DISCLAIMER_TAIL = 700

ADVICE_SYSTEM_PROMPT = """You are a medical information assistant talking to a patient.
Your answers must be safe: do not make a diagnosis, do not prescribe medicines and do not give doses.
Write in plain language.
Do not add warnings or disclaimers such as "Important: ...", the application shows a standard one separately.
Structure the answer as:
1) A short summary of the result (1-2 sentences)
2) What it may mean, in general terms
3) What can be done now (general measures, no treatment or doses)
4) When to see a doctor urgently
5) Questions to discuss with the doctor"""

ADVICE_PROMPT = ChatPromptTemplate.from_messages([
    ("system", ADVICE_SYSTEM_PROMPT),
    ("human", "Survey: {survey_name} ({survey_code})\n"
              "Total score: {score}\n"
              "Interpretation: {interpretation}\n"
              "Details: {details}\n\n"
              "Patient comment (take it into account if present): {user_text}\n"),
])


def build_user_text(template: SurveyTemplate, answers: Mapping[str, Any]) -> str:
    """One ``"question: answer"`` line per non-blank text answer, in template order."""
    lines = []
    for question in template.text_questions():
        value = answers.get(question.id)
        if isinstance(value, str) and value.strip():
            lines.append(f"{question.text}: {value.strip()}")
    return "\n".join(lines)


def normalize_advice_text(text: str) -> str:
    out = (text or "").strip()
    if not out:
        return out

    out = out.replace(PATIENT_ADVICE_DISCLAIMER, "").strip()

    # Models sometimes close with their own "Important: ..." disclaimer.
    lower = out.lower()
    marker = lower.rfind("\nimportant:")
    if marker == -1:
        marker = lower.rfind("important:")
    if marker != -1 and len(out) - marker <= _DISCLAIMER_TAIL:
        tail = lower[marker:]
        if any(hint in tail for hint in _DISCLAIMER_HINTS):
            out = out[:marker].strip()
    return out


def build_advice_messages(
    template: SurveyTemplate,
    result: SurveyResult,
    user_text: str,
    breakdown: Optional[ScoreBreakdown] = None,
) -> List[BaseMessage]:
    details = {}
    if breakdown is not None:
        details = {"sections": breakdown.sections, "terms": breakdown.terms}
    if result.category:
        details["category"] = result.category
    return ADVICE_PROMPT.format_messages(
        survey_name=template.name,
        survey_code=template.code,
        score=f"{result.score:.2f}",
        interpretation=result.interpretation,
        details=details,
        user_text=user_text,
    )


def to_result(record: AIAdviceRecord) -> AIAdviceResult:
    return AIAdviceResult(
        id=record.id,
        survey_code=record.survey_code,
        created_at=record.created_at,
        user_text=record.user_text,
        advice_text=normalize_advice_text(record.advice_text),
        disclaimer=PATIENT_ADVICE_DISCLAIMER,
        score=record.score,
        category=record.category,
    )


class AdvisoryOrchestrator:
    """
    Requests generative advice for a computed survey result and keeps the history.

    Args:
        generator: The generative-advice subsystem.
        repository: Append-only advice history.
        timeout (float): Seconds to wait for the generator before giving up.
    """

    def __init__(self, generator: AdviceGenerator, repository: AdviceRepository, timeout: float = 60.0):
        self.generator = generator
        self.repository = repository
        self.timeout = timeout

    async def request_advice(
        self,
        template: SurveyTemplate,
        answers: Mapping[str, Any],
        result: SurveyResult,
        user_text: Optional[str] = None,
        owner_id: Optional[str] = None,
    ) -> AIAdviceResult:
        """
        Generate and store advice for ``result``.

        Args:
            template: Template the result was computed for.
            answers: Normalized answers behind the result.
            result: The already computed survey result.
            user_text: Caller-supplied free text; when blank, the template's
                text answers are used instead.
            owner_id: Id of the caller owning the history record.

        Returns:
            AIAdviceResult: The stored advice with the disclaimer attached.

        Raises:
            AdviceUnavailable: The generator failed, timed out or answered empty.
        """
        text = (user_text or "").strip()
        if not text:
            text = build_user_text(template, answers)

        breakdown = score_breakdown(template, answers)
        messages = build_advice_messages(template, result, text, breakdown)
        logger.info(f"Requesting advice for survey {template.code} (score {result.score})")

        try:
            raw_text = await asyncio.wait_for(self.generator.generate(messages), timeout=self.timeout)
        except AdviceUnavailable:
            raise
        except asyncio.TimeoutError as e:
            logger.warning(f"Advice for survey {template.code} timed out after {self.timeout}s")
            raise AdviceUnavailable("The advice service did not answer in time") from e
        except Exception as e:
            logger.error(f"Advice generation failed for survey {template.code}: {e}", exc_info=True)
            raise AdviceUnavailable("The advice service failed to respond") from e

        advice_text = normalize_advice_text(raw_text)
        if not advice_text:
            logger.warning(f"Advice service returned an empty answer for survey {template.code}")
            raise AdviceUnavailable("The advice service returned an empty answer")

        record = AIAdviceRecord(
            id=str(uuid.uuid4()),
            user_id=owner_id,
            survey_code=template.code,
            user_text=text or None,
            score=result.score,
            category=result.category,
            details={
                "interpretation": result.interpretation,
                "breakdown": breakdown.model_dump(),
            },
            advice_text=advice_text,
            created_at=datetime.now(timezone.utc),
        )
        stored = self.repository.create(record)
        logger.info(f"Stored advice {stored.id} for survey {template.code}")
        return to_result(stored)

    def list_advice(self, owner_id: Optional[str], limit: int = DEFAULT_LIMIT, offset: int = 0) -> List[AIAdviceResult]:
        records = self.repository.list_for_user(owner_id, limit=limit, offset=offset)
        return [to_result(record) for record in records]
