# survey_api/schemas/advice.py

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from datetime import datetime

class AIAdviceRecord(BaseModel):
    id: str
    user_id: Optional[str] = None
    survey_code: str
    user_text: Optional[str] = None
    score: Optional[float] = None
    category: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    advice_text: str
    created_at: datetime

class AIAdviceResult(BaseModel):
    id: str
    survey_code: str
    created_at: datetime
    user_text: Optional[str] = None
    advice_text: str
    disclaimer: str
    score: Optional[float] = None
    category: Optional[str] = None
