"""UI components that log through an injected Logger.

Classes:
    LoggedComponent: base class with mount/unmount/error hooks
    ExampleComponent: demo component exercising every Logger operation
"""

from component_logger.components.base import LoggedComponent
from component_logger.components.example import (
    ExampleComponent,
    SimulatedFetchError,
)

__all__ = [
    "ExampleComponent",
    "LoggedComponent",
    "SimulatedFetchError",
]
