"""Port-level exceptions for the directory bounded context.

These exceptions represent errors that can occur while reading or writing
the directory through a repository or a gateway. They should be caught and
handled by the application layer or translated at the presentation layer.
"""


class UserNotFoundError(Exception):
    """Raised when the referenced user id does not exist.

    Also raised when a row disappears between two requests (for example a
    concurrent delete); callers treat it as a normal, non-fatal outcome.
    """

    def __init__(self, user_id: int | str):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class DuplicateEmailError(Exception):
    """Raised when an email is already used by a different user.

    The unique index on users.email is the authoritative guard; this error
    is raised when the store rejects a write because of it.
    """

    def __init__(self, email: str | None = None):
        super().__init__(
            f"Email '{email}' already exists" if email else "Email already exists"
        )
        self.email = email


class TransientFailureError(Exception):
    """Raised by the directory gateway on network faults and server errors.

    The operation did not take effect (or its outcome is unknown) and may be
    retried by the user. Nothing retries automatically.
    """
