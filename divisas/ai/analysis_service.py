"""Optional AI commentary on the business day."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from openai import AsyncOpenAI, OpenAIError

from divisas.ai.context_builder import summarize_transactions
from divisas.ai.prompt_builder import build_day_analysis_prompt
from divisas.config import Settings
from divisas.schemas.ai import DayAnalysisResponse
from divisas.schemas.transaction import Transaction
from divisas.utils.clock import local_day_bounds_ms, now_ms, to_local

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "Clave de API no configurada. Configure el entorno para usar IA."
NO_TRANSACTIONS_MESSAGE = "No hay transacciones hoy para analizar."
EMPTY_ANSWER_MESSAGE = "No se pudo generar el análisis."
PROVIDER_ERROR_MESSAGE = "Error conectando con el servicio de IA."


class DayAnalysisService:
    """Ask an OpenAI-compatible model for a short read on today's activity.

    Works without a key; every failure degrades to a fixed message.
    """

    def __init__(
        self,
        client: Optional[AsyncOpenAI],
        model: str,
        timezone: str,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._client = client
        self._model = model
        self._timezone = timezone
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> DayAnalysisService:
        client = None
        if settings.ai_api_key:
            client = AsyncOpenAI(api_key=settings.ai_api_key, base_url=settings.ai_base_url)
        return cls(client=client, model=settings.ai_model, timezone=settings.timezone)

    async def analyze(self, transactions: list[Transaction]) -> DayAnalysisResponse:
        today = to_local(self._clock(), self._timezone).date()
        start, end = local_day_bounds_ms(today, self._timezone)
        todays = [tx for tx in transactions if start <= tx.timestamp < end]

        if self._client is None:
            return DayAnalysisResponse(message=MISSING_KEY_MESSAGE, transaction_count=len(todays))
        if not todays:
            return DayAnalysisResponse(message=NO_TRANSACTIONS_MESSAGE, transaction_count=0)

        prompt = build_day_analysis_prompt(summarize_transactions(todays))
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                temperature=0.3,
                messages=[{"role": "user", "content": prompt}],
            )
        except OpenAIError as exc:
            logger.warning("AI analysis failed: %s", exc)
            return DayAnalysisResponse(message=PROVIDER_ERROR_MESSAGE, transaction_count=len(todays))

        message = (response.choices[0].message.content or "").strip()
        return DayAnalysisResponse(message=message or EMPTY_ANSWER_MESSAGE, transaction_count=len(todays))
