# survey_api/api/v1/endpoints/surveys.py

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from typing import Any, Dict, List, Optional
from survey_api.api import deps
from survey_api.core.errors import AdviceUnavailable, SurveyEngineError
from survey_api.schemas.advice import AIAdviceResult
from survey_api.schemas.survey import (
    AdviceRequest,
    SurveyAnswers,
    SurveyCalculation,
    SurveyResult,
    SurveyTemplate,
    SurveyTemplateSummary,
)
from survey_api.schemas.user import User
from survey_api.services.advice_service import AdvisoryOrchestrator
from survey_api.services.survey_workflow import SurveyWorkflow
from survey_api.services.template_store import TemplateStore
import logging

router = APIRouter()

@router.get("/templates", response_model=List[SurveyTemplateSummary])
def list_templates(store: TemplateStore = Depends(deps.get_template_store)):
    return store.list_templates()

@router.get("/templates/{code}", response_model=SurveyTemplate)
def get_template(code: str, store: TemplateStore = Depends(deps.get_template_store)):
    logging.info(f"Fetching survey template: {code}")
    return store.get_template(code)

async def auto_advice(
    orchestrator: AdvisoryOrchestrator,
    template: SurveyTemplate,
    answers: Dict[str, Any],
    result: SurveyResult,
    owner_id: Optional[str],
):
    try:
        advice = await orchestrator.request_advice(template, answers, result, owner_id=owner_id)
        logging.info(f"Automatic advice {advice.id} ready for survey {template.code}")
    except AdviceUnavailable as e:
        logging.warning(f"Automatic advice failed for survey {template.code}: {e.message}")

@router.post("/{code}/calculate", response_model=SurveyCalculation)
async def calculate_survey(
    code: str,
    submission: SurveyAnswers,
    background_tasks: BackgroundTasks,
    store: TemplateStore = Depends(deps.get_template_store),
    workflow: SurveyWorkflow = Depends(deps.get_survey_workflow),
    current_user: Optional[User] = Depends(deps.get_optional_user),
):
    logging.info(f"Calculating survey {code} with {len(submission.answers)} answer(s)")
    template = store.get_template(code)
    state = await workflow.run(template, submission.answers)
    result = state["result"]

    # advice history is per user, so anonymous calculations get no automatic advice
    advice_requested = bool(template.auto_advice) and current_user is not None
    if advice_requested:
        background_tasks.add_task(auto_advice, workflow.orchestrator, template, state["answers"], result, current_user.id)

    return SurveyCalculation(**result.model_dump(), advice_requested=advice_requested)

@router.post("/{code}/advice", response_model=AIAdviceResult)
async def create_advice(
    code: str,
    advice_request: AdviceRequest,
    store: TemplateStore = Depends(deps.get_template_store),
    workflow: SurveyWorkflow = Depends(deps.get_survey_workflow),
    current_user: User = Depends(deps.get_current_user),
):
    logging.info(f"Advice requested for survey {code} by user {current_user.id}")
    try:
        template = store.get_template(code)
        state = await workflow.run(
            template,
            advice_request.answers,
            request_advice=True,
            user_text=advice_request.text,
            owner_id=current_user.id,
        )
        if state.get("advice") is None:
            raise AdviceUnavailable(state.get("advice_error") or "Advice is unavailable")
        return state["advice"]
    except (HTTPException, SurveyEngineError) as e:
        logging.error(f"Advice request for survey {code} failed: {str(e)}")
        raise
    except Exception as e:
        logging.error(f"Unexpected error in create_advice: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")
