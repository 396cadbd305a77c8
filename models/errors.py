"""Exceptions raised for input the engine refuses to guess about."""


class InvalidEventError(ValueError):
    """A craving event or intervention outcome record is malformed."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field
