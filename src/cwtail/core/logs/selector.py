"""Stream selection for a poll cycle."""

from cwtail.core.logging import get_logger
from cwtail.core.logs.base import LogStorageBackend

logger = get_logger(__name__)

DEFAULT_FAN_OUT = 10


class StreamSelector:
    """Picks the candidate streams of a log group, most recently active first."""

    def __init__(self, backend: LogStorageBackend, fan_out: int = DEFAULT_FAN_OUT):
        self._backend = backend
        self._fan_out = fan_out

    @property
    def fan_out(self) -> int:
        return self._fan_out

    def select(self, log_group: str) -> list[str]:
        """Return up to fan_out non-empty stream names in descending recency.

        BackendError from the listing call propagates to the caller.
        """
        streams = self._backend.list_streams(log_group, limit=self._fan_out)
        selected = [s.name for s in streams[: self._fan_out] if not s.is_empty]
        logger.debug(
            "Selected %d of %d stream(s) in %s", len(selected), len(streams), log_group
        )
        return selected
