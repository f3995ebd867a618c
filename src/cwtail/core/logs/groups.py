"""Page-by-page enumeration of log groups."""

from collections.abc import Iterator

from cwtail.core.exceptions import ConfigurationError
from cwtail.core.logging import StructuredLogger
from cwtail.core.logs.base import LogGroup, LogStorageBackend, Notification, Page
from cwtail.core.logs.retriever import Operation


class LogGroupsRetriever(Operation):
    """Lists log groups, yielding each page as soon as it arrives."""

    def __init__(self, backend: LogStorageBackend, max_pages: int | None = None):
        if max_pages is not None and max_pages < 1:
            raise ConfigurationError("max_pages must be a positive integer")
        super().__init__(StructuredLogger(__name__))
        self._backend = backend
        self.max_pages = max_pages
        self._pages_read = 0

    @property
    def pages_read(self) -> int:
        return self._pages_read

    def log_groups(self) -> Iterator[LogGroup]:
        """Iterate over log groups only, raising the failure at the end if any."""
        for notification in self:
            if isinstance(notification, Page):
                yield from notification.page.log_groups
        if self._error is not None:
            raise self._error

    def _run(self) -> Iterator[Notification]:
        next_token: str | None = None
        while self.max_pages is None or self._pages_read < self.max_pages:
            if self.cancelled:
                return
            page = self._backend.list_log_groups(next_token)
            self._pages_read += 1
            self._logger.debug("Fetched log group page", page=self._pages_read, groups=len(page.log_groups))
            yield Page(page)
            next_token = page.next_token
            if not next_token:
                return
