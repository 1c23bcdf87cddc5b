# survey_api/schemas/user.py

from pydantic import BaseModel, EmailStr
from typing import Optional

class User(BaseModel):
    id: str
    email: Optional[EmailStr] = None
