"""AI Advisory Disabled Adapter"""

from libs.rating.src.ports.ai_advisory_port import AIAdvisoryPort
from libs.shared.src.dtos.rating.ai_advisory_dto import (
    AIAdvisoryInputDTO,
    AIAdvisoryResultDTO,
)


class AIAdvisoryDisabledAdapter(AIAdvisoryPort):
    """No advisory service configured; ratings stay purely technical"""

    def is_enabled(self) -> bool:
        return False

    async def analyze(self, advisory_input: AIAdvisoryInputDTO) -> AIAdvisoryResultDTO | None:
        return None
