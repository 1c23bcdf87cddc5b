# survey_api/db/advice_repository.py

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from supabase import Client

from survey_api.schemas.advice import AIAdviceRecord

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50


def clamp_page(limit: int, offset: int):
    if limit <= 0:
        limit = DEFAULT_LIMIT
    if offset < 0:
        offset = 0
    return limit, offset


class AdviceRepository(ABC):
    # Append-only store of advice history.

    @abstractmethod
    def create(self, record: AIAdviceRecord) -> AIAdviceRecord:
        ...

    @abstractmethod
    def list_for_user(self, user_id: Optional[str], limit: int = DEFAULT_LIMIT, offset: int = 0) -> List[AIAdviceRecord]:
        ...


class InMemoryAdviceRepository(AdviceRepository):

    def __init__(self):
        self._records: List[AIAdviceRecord] = []

    def create(self, record: AIAdviceRecord) -> AIAdviceRecord:
        self._records.append(record)
        return record

    def list_for_user(self, user_id: Optional[str], limit: int = DEFAULT_LIMIT, offset: int = 0) -> List[AIAdviceRecord]:
        limit, offset = clamp_page(limit, offset)
        # newest insert first among equal timestamps
        owned = [r for r in reversed(self._records) if r.user_id == user_id]
        owned.sort(key=lambda r: r.created_at, reverse=True)
        return owned[offset:offset + limit]


class SupabaseAdviceRepository(AdviceRepository):
    table = "ai_advice"

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def create(self, record: AIAdviceRecord) -> AIAdviceRecord:
        data = record.model_dump(mode="json")
        logger.info(f"Storing advice {record.id} for survey {record.survey_code}")
        response = self.supabase.table(self.table).insert(data).execute()
        if not response.data:
            logger.error(f"Failed to store advice. Supabase response: {response}")
            raise RuntimeError("Failed to store advice record")
        return AIAdviceRecord.model_validate(response.data[0])

    def list_for_user(self, user_id: Optional[str], limit: int = DEFAULT_LIMIT, offset: int = 0) -> List[AIAdviceRecord]:
        limit, offset = clamp_page(limit, offset)
        query = self.supabase.table(self.table).select("*")
        if user_id is None:
            query = query.is_("user_id", "null")
        else:
            query = query.eq("user_id", user_id)
        response = query.order("created_at", desc=True).range(offset, offset + limit - 1).execute()
        return [AIAdviceRecord.model_validate(row) for row in response.data or []]
