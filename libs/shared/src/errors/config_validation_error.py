"""Config Validation Error"""

from libs.shared.src.errors.domain_error import DomainError


class ConfigValidationError(DomainError):
    """Rating engine configuration is invalid

    Raised at construction time, before any rating is attempted.
    """

    def __init__(self, errors: list[str]) -> None:
        message = "Invalid rating engine configuration: " + "; ".join(errors)
        super().__init__(message, code="CONFIG_VALIDATION_FAILED")
        self.errors = errors
