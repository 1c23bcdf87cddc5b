# survey_api/api/v1/endpoints/advice.py

from fastapi import APIRouter, Depends, Query
from typing import List
from survey_api.api import deps
from survey_api.db.advice_repository import DEFAULT_LIMIT
from survey_api.schemas.advice import AIAdviceResult
from survey_api.schemas.user import User
from survey_api.services.advice_service import AdvisoryOrchestrator

router = APIRouter()

@router.get("/advice", response_model=List[AIAdviceResult])
def list_advice(
    limit: int = Query(DEFAULT_LIMIT),
    offset: int = Query(0),
    orchestrator: AdvisoryOrchestrator = Depends(deps.get_orchestrator),
    current_user: User = Depends(deps.get_current_user),
):
    return orchestrator.list_advice(current_user.id, limit=limit, offset=offset)
