"""Domain-Oriented Observability for directory infrastructure."""

from directory.infrastructure.observability.gateway_probe import (
    DefaultDirectoryGatewayProbe,
    DirectoryGatewayProbe,
)
from directory.infrastructure.observability.repository_probe import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)

__all__ = [
    "DefaultDirectoryGatewayProbe",
    "DefaultUserRepositoryProbe",
    "DirectoryGatewayProbe",
    "UserRepositoryProbe",
]
