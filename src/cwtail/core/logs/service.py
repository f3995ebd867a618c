"""Entry point tying a log storage backend to retrieval operations."""

from cwtail.core.logs.base import LogStorageBackend
from cwtail.core.logs.groups import LogGroupsRetriever
from cwtail.core.logs.retriever import MessagesRetriever
from cwtail.core.logs.selector import DEFAULT_FAN_OUT


class CwTail:
    """Creates independent retrieval operations against one backend.

    Every retriever owns its own watermark table; nothing is shared between
    operations.
    """

    def __init__(self, backend: LogStorageBackend):
        self._backend = backend

    def create_log_groups_retriever(self, max_pages: int | None = None) -> LogGroupsRetriever:
        """Create a log group listing operation.

        Args:
            max_pages: Stop after this many pages; unbounded when None

        Raises:
            ConfigurationError: If max_pages is not positive
        """
        return LogGroupsRetriever(self._backend, max_pages=max_pages)

    def create_messages_retriever(
        self,
        log_group: str,
        num_records: int,
        follow: bool = False,
        poll_interval_ms: int | None = None,
        fan_out: int = DEFAULT_FAN_OUT,
    ) -> MessagesRetriever:
        """Create a record retrieval operation for a log group.

        Args:
            log_group: Log group name
            num_records: Soft cap on records read per poll cycle
            follow: Keep polling until cancelled
            poll_interval_ms: Delay between poll cycles, required with follow
            fan_out: Maximum number of streams considered per cycle

        Raises:
            ConfigurationError: If the options are invalid
        """
        return MessagesRetriever(
            self._backend,
            log_group,
            num_records=num_records,
            follow=follow,
            poll_interval_ms=poll_interval_ms,
            fan_out=fan_out,
        )
