"""Application services for the directory bounded context.

The user service is the server-side "front door": routes call it, and it
owns validation and transactions before anything reaches the repository.
"""

from directory.application.services.user_service import UserService

__all__ = ["UserService"]
