"""Data model and backend abstraction for log retrieval."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Union


@dataclass(frozen=True)
class LogGroup:
    """A named collection of log streams.

    Metadata other than the name is passed through from the backend as is.
    """

    name: str
    retention_days: int | None = None
    stored_bytes: int | None = None
    creation_time: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        created = None
        if self.creation_time:
            created = datetime.fromtimestamp(
                self.creation_time / 1000, tz=timezone.utc
            ).isoformat()
        return {
            "name": self.name,
            "retention_days": self.retention_days,
            "stored_bytes": self.stored_bytes,
            "created": created,
        }


@dataclass(frozen=True)
class LogStream:
    """A log stream as reported by the backend for one poll cycle."""

    log_group: str
    name: str
    last_event_timestamp: int | None = None

    @property
    def is_empty(self) -> bool:
        return self.last_event_timestamp is None


@dataclass(frozen=True)
class LogRecord:
    """A single log event, stamped with the stream it was read from."""

    timestamp: int
    message: str
    stream: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "timestamp": self.timestamp,
            "message": self.message,
            "stream": self.stream,
        }


@dataclass(frozen=True)
class GroupPage:
    """One page of a log group listing."""

    log_groups: list[LogGroup]
    next_token: str | None = None


# Notifications emitted by retrieval operations, in order.


@dataclass(frozen=True)
class StreamBoundary:
    """The following records come from a different stream."""

    stream: str


@dataclass(frozen=True)
class Record:
    record: LogRecord


@dataclass(frozen=True)
class Page:
    page: GroupPage


@dataclass(frozen=True)
class Error:
    """The operation failed; emitted at most once, right before Done."""

    cause: Exception


@dataclass(frozen=True)
class Done:
    """Terminal notification, emitted exactly once."""

    pass


Notification = Union[StreamBoundary, Record, Page, Error, Done]


class LogStorageBackend(ABC):
    """Abstract remote log storage.

    Implementations raise BackendError for every failure.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get backend name."""
        pass

    @abstractmethod
    def list_log_groups(self, next_token: str | None = None) -> GroupPage:
        """Fetch one page of log groups.

        Args:
            next_token: Continuation token from the previous page

        Returns:
            The page, with next_token set when more pages exist
        """
        pass

    @abstractmethod
    def list_streams(self, log_group: str, limit: int) -> list[LogStream]:
        """List streams of a group, most recently active first.

        Args:
            log_group: Log group name
            limit: Maximum number of streams to return

        Returns:
            Streams in descending last-event order
        """
        pass

    @abstractmethod
    def fetch_events(self, log_group: str, stream: str) -> list[LogRecord]:
        """Fetch the currently available events of a stream in one call.

        Args:
            log_group: Log group name
            stream: Log stream name

        Returns:
            Records in backend order, stamped with the stream name
        """
        pass

