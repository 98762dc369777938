"""Domain Error Base Class"""


class DomainError(Exception):
    """Base class for rating domain errors

    Every error carries a stable ``code`` so callers can branch on it
    without parsing the message.
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
