"""
AIAdvisoryPort - Driven Port

Implemented by: AIAdvisoryFakeAdapter, AIAdvisoryDisabledAdapter
"""

from typing import Protocol

from libs.shared.src.dtos.rating.ai_advisory_dto import (
    AIAdvisoryInputDTO,
    AIAdvisoryResultDTO,
)


class AIAdvisoryPort(Protocol):
    """Driven Port for the optional secondary rating service"""

    def is_enabled(self) -> bool:
        ...

    async def analyze(self, advisory_input: AIAdvisoryInputDTO) -> AIAdvisoryResultDTO | None:
        """Ask the advisory service for a secondary opinion

        Args:
            advisory_input: Token summary and the technical rating so far

        Returns:
            AIAdvisoryResultDTO | None: None when the service has no answer
        """
        ...
