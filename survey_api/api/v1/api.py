from fastapi import APIRouter
from survey_api.api.v1.endpoints import surveys, advice

api_router = APIRouter()
api_router.include_router(surveys.router, prefix="/surveys", tags=["surveys"])
api_router.include_router(advice.router, prefix="/ai", tags=["advice"])
