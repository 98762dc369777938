"""Component Computation Error"""

from libs.shared.src.errors.domain_error import DomainError


class ComponentComputationError(DomainError):
    """A base component calculator failed or timed out

    Recovered locally by the engine with a neutral score.
    """

    def __init__(
        self, component: str, reason: str, is_timeout: bool = False
    ) -> None:
        super().__init__(
            f"{component} score calculation failed: {reason}",
            code="COMPONENT_COMPUTATION_FAILED",
        )
        self.component = component
        self.reason = reason
        self.is_timeout = is_timeout
