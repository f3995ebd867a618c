"""Per-stream event fetching."""

from cwtail.core.logs.base import LogRecord, LogStorageBackend


class EventFetcher:
    """Fetches the currently available events of a single stream.

    Only one backend page is read per call. Events beyond that page are
    picked up by later follow cycles through the watermark.
    """

    def __init__(self, backend: LogStorageBackend):
        self._backend = backend

    def fetch(self, log_group: str, stream: str) -> list[LogRecord]:
        records = self._backend.fetch_events(log_group, stream)
        # Backends should stamp the stream already; enforce it
        return [
            r if r.stream == stream else LogRecord(r.timestamp, r.message, stream)
            for r in records
        ]
