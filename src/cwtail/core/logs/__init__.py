"""Log retrieval: data model, backend abstraction and polling operations."""

from cwtail.core.logs.base import (
    Done,
    Error,
    GroupPage,
    LogGroup,
    LogRecord,
    LogStorageBackend,
    LogStream,
    Notification,
    Page,
    Record,
    StreamBoundary,
)

__all__ = [
    "Done",
    "Error",
    "GroupPage",
    "LogGroup",
    "LogRecord",
    "LogStorageBackend",
    "LogStream",
    "Notification",
    "Page",
    "Record",
    "StreamBoundary",
]
