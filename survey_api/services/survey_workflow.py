# survey_api/services/survey_workflow.py

from langgraph.graph import StateGraph, END
from typing import Any, Dict, List, Optional, TypedDict
from survey_api.core.errors import AdviceUnavailable
from survey_api.schemas.advice import AIAdviceResult
from survey_api.schemas.survey import Answer, ScoreBreakdown, SessionStatus, SurveyResult, SurveyTemplate
from survey_api.services.advice_service import AdvisoryOrchestrator
from survey_api.services.interpretation import build_result
from survey_api.services.normalizer import normalize
from survey_api.services.scoring import score_breakdown
import logging

class SurveySessionState(TypedDict, total=False):
    """
    Represents one survey session as it moves through the workflow.

    Attributes:
        template (SurveyTemplate): Template being answered.
        raw_answers (List[Answer]): Answers as submitted.
        answers (Dict[str, Any]): Normalized answers keyed by question id.
        breakdown (ScoreBreakdown): Score decomposition.
        result (SurveyResult): Score and interpretation.
        request_advice (bool): Whether the advice step should run.
        user_text (Optional[str]): Free text supplied by the caller.
        owner_id (Optional[str]): Caller owning the advice record.
        advice (Optional[AIAdviceResult]): Advice, once ready.
        advice_error (Optional[str]): Reason the advice step failed.
        status (SessionStatus): Current session state.
    """
    template: SurveyTemplate
    raw_answers: List[Answer]
    answers: Dict[str, Any]
    breakdown: ScoreBreakdown
    result: SurveyResult
    request_advice: bool
    user_text: Optional[str]
    owner_id: Optional[str]
    advice: Optional[AIAdviceResult]
    advice_error: Optional[str]
    status: SessionStatus

class SurveyWorkflow:
    """
    Runs a survey session: normalize, score, interpret and optionally advise.
    """

    def __init__(self, orchestrator: AdvisoryOrchestrator):
        """
        Initialize the SurveyWorkflow.

        Args:
            orchestrator: Advisory orchestrator used by the advice step.
        """
        self.orchestrator = orchestrator
        self.workflow = self._create_workflow()

    def _create_workflow(self):
        """
        Create the survey session graph.

        Returns:
            Compiled workflow graph.
        """
        workflow = StateGraph(SurveySessionState)
        workflow.add_node("normalize", self.normalize_answers)
        workflow.add_node("score", self.score_answers)
        workflow.add_node("interpret", self.interpret_score)
        workflow.add_node("advice_pending", self.mark_advice_pending)
        workflow.add_node("advise", self.advise)
        workflow.set_entry_point("normalize")
        workflow.add_edge("normalize", "score")
        workflow.add_edge("score", "interpret")
        # advice can only follow a scored result
        workflow.add_conditional_edges(
            "interpret",
            lambda state: "advice_pending" if state.get("request_advice", False) else END,
            {"advice_pending": "advice_pending", END: END},
        )
        workflow.add_edge("advice_pending", "advise")
        workflow.add_edge("advise", END)
        return workflow.compile()

    def normalize_answers(self, state: SurveySessionState) -> Dict[str, Any]:
        answers = normalize(state["template"], state.get("raw_answers", []))
        return {"answers": answers, "status": SessionStatus.ANSWERED}

    def score_answers(self, state: SurveySessionState) -> Dict[str, Any]:
        return {"breakdown": score_breakdown(state["template"], state["answers"])}

    def interpret_score(self, state: SurveySessionState) -> Dict[str, Any]:
        result = build_result(state["template"], state["breakdown"].total, state["answers"])
        logging.debug(f"Survey {state['template'].code} scored: {result}")
        return {"result": result, "status": SessionStatus.SCORED}

    def mark_advice_pending(self, state: SurveySessionState) -> Dict[str, Any]:
        return {"status": SessionStatus.ADVICE_PENDING}

    async def advise(self, state: SurveySessionState) -> Dict[str, Any]:
        template = state["template"]
        try:
            advice = await self.orchestrator.request_advice(
                template,
                state["answers"],
                state["result"],
                user_text=state.get("user_text"),
                owner_id=state.get("owner_id"),
            )
        except AdviceUnavailable as e:
            # the scored result stays valid
            logging.warning(f"Advice unavailable for survey {template.code}: {e.message}")
            return {"advice": None, "advice_error": e.message, "status": SessionStatus.ADVICE_FAILED}
        return {"advice": advice, "advice_error": None, "status": SessionStatus.ADVICE_READY}

    async def run(
        self,
        template: SurveyTemplate,
        raw_answers: List[Answer],
        request_advice: bool = False,
        user_text: Optional[str] = None,
        owner_id: Optional[str] = None,
    ) -> SurveySessionState:
        """
        Run one survey session.

        Args:
            template: Template being answered.
            raw_answers: Answers as submitted by the client.
            request_advice (bool): Continue to the advice step after scoring.
            user_text: Free text for the advice prompt.
            owner_id: Caller owning the advice record.

        Returns:
            SurveySessionState: Final state; ``result`` is always present.
        """
        state: SurveySessionState = {
            "template": template,
            "raw_answers": list(raw_answers),
            "request_advice": request_advice,
            "user_text": user_text,
            "owner_id": owner_id,
        }
        if request_advice:
            logging.info(f"Advice requested for survey {template.code}")
        return await self.workflow.ainvoke(state)
