"""Polling retrieval of new log records across the streams of a group."""

import threading
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Iterator, Mapping

from cwtail.core.exceptions import BackendError, ConfigurationError
from cwtail.core.logging import StructuredLogger
from cwtail.core.logs.base import (
    Done,
    Error,
    LogRecord,
    LogStorageBackend,
    Notification,
    Record,
    StreamBoundary,
)
from cwtail.core.logs.fetcher import EventFetcher
from cwtail.core.logs.selector import DEFAULT_FAN_OUT, StreamSelector
from cwtail.core.logs.watermark import WatermarkTracker


class Operation(ABC):
    """A cancellable, single-use stream of notifications.

    Iterating yields the operation's notifications in order. The last one is
    always Done, preceded by at most one Error. cancel() may be called from
    any thread; it takes effect before the next backend call or wakes up a
    pending sleep.
    """

    def __init__(self, logger: StructuredLogger):
        self._logger = logger
        self._cancelled = threading.Event()
        self._started = False
        self._error: Exception | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def error(self) -> Exception | None:
        """The failure reported by the operation, if any."""
        return self._error

    def cancel(self) -> None:
        """Ask the operation to stop. Done is still emitted."""
        self._cancelled.set()

    def __iter__(self) -> Iterator[Notification]:
        if self._started:
            raise RuntimeError(f"{type(self).__name__} can only be iterated once")
        self._started = True
        return self._notifications()

    def _notifications(self) -> Iterator[Notification]:
        try:
            yield from self._run()
        except BackendError as e:
            self._logger.debug("Operation failed", error=e)
            self._error = e
            yield Error(e)
        except Exception as e:
            self._logger.debug("Operation failed", error=e)
            self._error = BackendError(f"Log retrieval failed: {e}", cause=e)
            yield Error(self._error)
        yield Done()

    @abstractmethod
    def _run(self) -> Iterator[Notification]:
        """Yield the operation's notifications, raising on failure."""
        pass

    def _sleep(self, seconds: float) -> bool:
        """Sleep unless cancelled. Returns True if cancellation was requested."""
        return self._cancelled.wait(seconds)


class MessagesRetriever(Operation):
    """Retrieves new records of a log group, once or repeatedly.

    Each poll cycle selects the most recently active streams, fetches them one
    at a time until num_records records were read (a stream is always
    consumed in full, so the cap may be exceeded), drops records at or below
    each stream's watermark and emits the rest grouped by stream. In follow
    mode the cycle repeats every poll_interval_ms with the same watermarks,
    and stops once the group has no non-empty streams.
    """

    def __init__(
        self,
        backend: LogStorageBackend,
        log_group: str,
        num_records: int,
        follow: bool = False,
        poll_interval_ms: int | None = None,
        fan_out: int = DEFAULT_FAN_OUT,
    ):
        if not log_group:
            raise ConfigurationError("log group name required")
        if num_records is None or num_records < 1:
            raise ConfigurationError("num_records must be a positive integer")
        if poll_interval_ms is not None and poll_interval_ms < 1:
            raise ConfigurationError("poll_interval_ms must be a positive integer")
        if follow and poll_interval_ms is None:
            raise ConfigurationError("poll_interval_ms is required in follow mode")
        if fan_out < 1:
            raise ConfigurationError("fan_out must be a positive integer")

        super().__init__(StructuredLogger(__name__).bind(log_group=log_group))
        self.log_group = log_group
        self.num_records = num_records
        self.follow = follow
        self.poll_interval_ms = poll_interval_ms
        self._selector = StreamSelector(backend, fan_out=fan_out)
        self._fetcher = EventFetcher(backend)
        self._tracker = WatermarkTracker()
        self._cycles = 0

    @property
    def watermarks(self) -> Mapping[str, int]:
        return self._tracker.watermarks

    @property
    def cycles(self) -> int:
        """Number of poll cycles completed so far."""
        return self._cycles

    def records(self) -> Iterator[LogRecord]:
        """Iterate over records only, raising the failure at the end if any."""
        for notification in self:
            if isinstance(notification, Record):
                yield notification.record
        if self._error is not None:
            raise self._error

    def _run(self) -> Iterator[Notification]:
        while not self.cancelled:
            streams = self._selector.select(self.log_group)
            self._logger.debug("Poll cycle started", cycle=self._cycles + 1, streams=len(streams))

            pending = deque(streams)
            records: list[LogRecord] = []
            num_read = 0
            while pending and num_read < self.num_records:
                if self.cancelled:
                    return
                stream = pending.popleft()
                fetched = self._fetcher.fetch(self.log_group, stream)
                records.extend(fetched)
                num_read += len(fetched)

            if self.cancelled:
                return

            new_records = self._tracker.filter(records)
            self._cycles += 1
            self._logger.debug(
                "Poll cycle finished",
                cycle=self._cycles,
                read=num_read,
                new=len(new_records),
                skipped_streams=len(pending),
            )

            prev_stream = None
            for record in new_records:
                if record.stream != prev_stream:
                    prev_stream = record.stream
                    yield StreamBoundary(record.stream)
                yield Record(record)

            if not self.follow:
                return
            if not streams:
                self._logger.info("No streams with events, nothing to follow")
                return

            self._logger.debug("Sleeping", interval_ms=self.poll_interval_ms)
            if self._sleep(self.poll_interval_ms / 1000):
                return
