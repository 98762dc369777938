"""AI Advisory Adapter Unit Tests"""

import pytest

from libs.rating.src.adapters.driven.memory.ai_advisory_disabled_adapter import (
    AIAdvisoryDisabledAdapter,
)
from libs.rating.src.adapters.driven.memory.ai_advisory_fake_adapter import (
    AIAdvisoryFakeAdapter,
)

ADVISORY_INPUT = {
    "token_data": {"address": "token-1"},
    "technical_indicators": {},
    "momentum": {},
    "volume": {},
    "risk_factors": [],
    "initial_technical_rating": 7.5,
}


class TestAIAdvisoryAdapters:
    """Advisory adapters"""

    @pytest.mark.asyncio
    async def test_disabled_adapter(self) -> None:
        """The disabled adapter never answers"""
        adapter = AIAdvisoryDisabledAdapter()

        assert adapter.is_enabled() is False
        assert await adapter.analyze(ADVISORY_INPUT) is None

    @pytest.mark.asyncio
    async def test_fake_answer(self) -> None:
        """The fake returns its canned answer and records the request"""
        adapter = AIAdvisoryFakeAdapter(rating=9.0, confidence=85.0, action="STRONG_BUY")
        adapter.set_warnings(["whale wallet active"])

        answer = await adapter.analyze(ADVISORY_INPUT)

        assert answer["final_recommendation"] == {"rating": 9.0, "action": "STRONG_BUY"}
        assert answer["confidence"] == 85.0
        assert answer["entry_risk"] == 1.0
        assert answer["warnings"] == ["whale wallet active"]
        assert answer["token_address"] == "token-1"
        assert adapter.get_requests() == [ADVISORY_INPUT]

    @pytest.mark.asyncio
    async def test_fake_failure(self) -> None:
        """A failing fake raises after recording the request"""
        adapter = AIAdvisoryFakeAdapter()
        adapter.set_should_fail(True)

        with pytest.raises(RuntimeError):
            await adapter.analyze(ADVISORY_INPUT)

        assert len(adapter.get_requests()) == 1
