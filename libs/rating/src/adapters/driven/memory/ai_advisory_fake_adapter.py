"""AI Advisory Fake Adapter"""

import asyncio
import time

from libs.rating.src.ports.ai_advisory_port import AIAdvisoryPort
from libs.shared.src.dtos.rating.ai_advisory_dto import (
    AIAdvisoryInputDTO,
    AIAdvisoryResultDTO,
)
from libs.shared.src.enums.ai_action import AIAction


class AIAdvisoryFakeAdapter(AIAdvisoryPort):
    """Canned advisory answers for tests and offline runs"""

    def __init__(
        self,
        rating: float = 8.0,
        confidence: float = 80.0,
        action: str = AIAction.BUY.value,
    ) -> None:
        self._rating = rating
        self._confidence = confidence
        self._action = action
        self._reasoning = [
            "Volume expansion confirms the trend",
            "Pullbacks are shallow and bought quickly",
            "Holder count is growing steadily",
            "Social activity is rising",
        ]
        self._warnings: list[str] = []
        self._should_fail = False
        self._delay_seconds = 0.0
        self._requests: list[AIAdvisoryInputDTO] = []

    def set_should_fail(self, should_fail: bool) -> None:
        self._should_fail = should_fail

    def set_delay(self, seconds: float) -> None:
        self._delay_seconds = seconds

    def set_warnings(self, warnings: list[str]) -> None:
        self._warnings = warnings

    def get_requests(self) -> list[AIAdvisoryInputDTO]:
        return self._requests

    def is_enabled(self) -> bool:
        return True

    async def analyze(self, advisory_input: AIAdvisoryInputDTO) -> AIAdvisoryResultDTO | None:
        self._requests.append(advisory_input)
        if self._delay_seconds:
            await asyncio.sleep(self._delay_seconds)
        if self._should_fail:
            raise RuntimeError("advisory service unavailable")

        return {
            "momentum_quality": self._rating,
            "entry_risk": 10 - self._rating,
            "timeframe_analysis": self._rating,
            "volume_analysis": self._rating,
            "final_recommendation": {"rating": self._rating, "action": self._action},
            "reasoning": list(self._reasoning),
            "confidence": self._confidence,
            "warnings": list(self._warnings),
            "timestamp": time.time() * 1000,
            "token_address": advisory_input["token_data"].get("address", "unknown"),
        }
