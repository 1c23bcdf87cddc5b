# survey_api/services/openai_service.py

from abc import ABC, abstractmethod
from openai import AsyncOpenAI, OpenAIError
from langchain_core.messages import BaseMessage
from survey_api.core.config import settings
from survey_api.core.errors import AdviceUnavailable
from typing import List, Optional
import logging

ROLE_BY_MESSAGE_TYPE = {"system": "system", "human": "user", "ai": "assistant"}

class AdviceGenerator(ABC):
    """Generative-advice subsystem: turns prompt messages into free text."""

    @abstractmethod
    async def generate(self, messages: List[BaseMessage]) -> str:
        ...

class OpenAIAdviceGenerator(AdviceGenerator):
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = settings.OPENAI_MODEL,
        temperature: float = settings.ADVICE_TEMPERATURE,
        max_tokens: int = settings.ADVICE_MAX_TOKENS,
        timeout: float = settings.ADVICE_TIMEOUT_SECONDS,
    ):
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout) if api_key else None
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate(self, messages: List[BaseMessage]) -> str:
        if self.client is None:
            logging.warning("OPENAI_API_KEY is not set, advice generation is disabled")
            raise AdviceUnavailable("Advice generation is not configured")

        payload = [{"role": ROLE_BY_MESSAGE_TYPE[m.type], "content": m.content} for m in messages]
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=payload,
                max_tokens=self.max_tokens,
                n=1,
                temperature=self.temperature,
            )
        except OpenAIError as e:
            logging.error(f"OpenAI API error: {e}")
            raise AdviceUnavailable("The advice service failed to respond") from e

        if not response.choices:
            raise AdviceUnavailable("The advice service returned no choices")
        return (response.choices[0].message.content or "").strip()
