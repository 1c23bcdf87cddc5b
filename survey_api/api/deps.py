# survey_api/api/deps.py

import logging
from functools import lru_cache
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt
from jose.exceptions import JWTError, ExpiredSignatureError, JWTClaimsError
from survey_api.core.config import settings
from survey_api.db.advice_repository import AdviceRepository, InMemoryAdviceRepository, SupabaseAdviceRepository
from survey_api.db.session import get_supabase
from survey_api.schemas.user import User
from survey_api.services.advice_service import AdvisoryOrchestrator
from survey_api.services.openai_service import AdviceGenerator, OpenAIAdviceGenerator
from survey_api.services.survey_workflow import SurveyWorkflow
from survey_api.services.template_store import BuiltinTemplateStore, SupabaseTemplateStore, TemplateStore
from survey_api.templates.catalog import BUILTIN_TEMPLATES
from typing import Optional

logger = logging.getLogger(__name__)
security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

def decode_user(token: str) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not settings.SUPABASE_JWT_SECRET:
        logger.error("JWT verification is not configured, set the Supabase signing key")
        raise credentials_exception
    try:
        # Define the expected audience and issuer
        expected_audience = "authenticated"
        expected_issuer = f"{settings.SUPABASE_URL}/auth/v1" if settings.SUPABASE_URL else None

        # Log only the first 10 characters of the token for security
        logger.debug(f"Received token: {token[:10]}...")
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.ALGORITHM],
            audience=expected_audience,
            issuer=expected_issuer,
        )
        user_id: Optional[str] = payload.get("sub")
        email: Optional[str] = payload.get("email")
        if user_id is None:
            logger.warning("Invalid token payload")
            raise credentials_exception
    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTClaimsError as e:
        logger.error(f"JWT claims error: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid claims: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTError as e:
        logger.error(f"JWT error: {e}")
        raise credentials_exception

    logger.info(f"User authenticated: {user_id}")
    return User(id=user_id, email=email or None)

def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security)) -> User:
    return decode_user(credentials.credentials)

def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> Optional[User]:
    if credentials is None:
        return None
    try:
        return decode_user(credentials.credentials)
    except HTTPException as e:
        # public endpoints fall back to anonymous access
        logger.info(f"Ignoring invalid bearer credentials: {e.detail}")
        return None

@lru_cache
def get_template_store() -> TemplateStore:
    if settings.STORAGE_BACKEND == "supabase":
        return SupabaseTemplateStore(get_supabase())
    return BuiltinTemplateStore(BUILTIN_TEMPLATES)

@lru_cache
def get_advice_repository() -> AdviceRepository:
    if settings.STORAGE_BACKEND == "supabase":
        return SupabaseAdviceRepository(get_supabase())
    return InMemoryAdviceRepository()

@lru_cache
def get_advice_generator() -> AdviceGenerator:
    return OpenAIAdviceGenerator(api_key=settings.OPENAI_API_KEY)

def get_orchestrator(
    generator: AdviceGenerator = Depends(get_advice_generator),
    repository: AdviceRepository = Depends(get_advice_repository),
) -> AdvisoryOrchestrator:
    return AdvisoryOrchestrator(generator, repository, timeout=settings.ADVICE_TIMEOUT_SECONDS)

def get_survey_workflow(orchestrator: AdvisoryOrchestrator = Depends(get_orchestrator)) -> SurveyWorkflow:
    return SurveyWorkflow(orchestrator)
