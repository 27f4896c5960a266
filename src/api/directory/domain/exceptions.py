"""Domain exceptions for the directory bounded context."""


class UserValidationError(Exception):
    """Raised when a user candidate breaks one or more field rules.

    Carries every violated rule, in rule order, so callers can report all
    problems at once instead of one per round trip.
    """

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = list(errors)
