"""Domain errors raised below the HTTP layer."""


class InvalidInputError(ValueError):
    """A card was requested for a missing or unidentified tour."""


class TourValidationError(ValueError):
    """A create/update payload failed validation."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []
