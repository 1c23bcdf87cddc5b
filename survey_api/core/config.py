# survey_api/core/config.py

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AnyHttpUrl
from typing import List, Literal, Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "Clinical Survey API"
    LOG_LEVEL: str = "INFO"

    # "memory" serves the built-in template catalogue and keeps advice in-process
    STORAGE_BACKEND: Literal["memory", "supabase"] = "memory"

    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None
    SUPABASE_JWT_SECRET: Optional[str] = None
    ALGORITHM: str = "HS256"

    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o"
    ADVICE_TIMEOUT_SECONDS: float = 60.0
    ADVICE_MAX_TOKENS: int = 2000
    ADVICE_TEMPERATURE: float = 0.3

    # CORS origins
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
