"""Subsystem Computation Error"""

from libs.shared.src.errors.domain_error import DomainError


class SubsystemComputationError(DomainError):
    """An optional subsystem (multi-timeframe, consecutive momentum,
    exhaustion penalty, AI advisory) failed or timed out

    Recovered locally; the rating proceeds without that enhancement.
    """

    def __init__(
        self, subsystem: str, reason: str, is_timeout: bool = False
    ) -> None:
        super().__init__(
            f"{subsystem} calculation failed: {reason}",
            code="SUBSYSTEM_COMPUTATION_FAILED",
        )
        self.subsystem = subsystem
        self.reason = reason
        self.is_timeout = is_timeout
