"""Reference logging service (FastAPI)."""

from component_logger.web.app import (
    API_PREFIX,
    ComponentLogRequest,
    LogStore,
    StoredLogRecord,
    create_app,
)

__all__ = [
    "API_PREFIX",
    "ComponentLogRequest",
    "LogStore",
    "StoredLogRecord",
    "create_app",
]
