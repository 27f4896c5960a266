"""Domain-Oriented Observability for the directory application layer.

Probes for application service and view controller operations.
"""

from directory.application.observability.user_service_probe import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)
from directory.application.observability.view_controller_probe import (
    DefaultViewControllerProbe,
    ViewControllerProbe,
)

__all__ = [
    "UserServiceProbe",
    "DefaultUserServiceProbe",
    "ViewControllerProbe",
    "DefaultViewControllerProbe",
]
