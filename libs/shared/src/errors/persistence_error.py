"""Persistence Error"""

from libs.shared.src.errors.domain_error import DomainError


class PersistenceError(DomainError):
    """A history store read or write failed"""

    def __init__(self, operation: str, reason: str | None = None) -> None:
        message = f"History store {operation} failed"
        if reason:
            message += f": {reason}"
        super().__init__(message, code="PERSISTENCE_FAILED")
        self.operation = operation
        self.reason = reason
