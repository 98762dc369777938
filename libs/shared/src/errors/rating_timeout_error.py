"""Rating Timeout Error"""

from libs.shared.src.errors.domain_error import DomainError


class RatingTimeoutError(DomainError):
    """The whole rating call exceeded its outer timeout

    Not recovered: no partial RatingResult is returned.
    """

    def __init__(self, token_address: str, timeout_seconds: float) -> None:
        message = (
            f"Rating calculation timeout for {token_address} "
            f"(after {timeout_seconds:g}s)"
        )
        super().__init__(message, code="RATING_TIMEOUT")
        self.token_address = token_address
        self.timeout_seconds = timeout_seconds
