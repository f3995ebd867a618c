"""Per-stream deduplication against timestamp watermarks."""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from cwtail.core.logs.base import LogRecord


def dedup(
    records: Iterable[LogRecord],
    watermarks: Mapping[str, int],
) -> tuple[list[LogRecord], dict[str, int]]:
    """Filter out already emitted records and compute the next watermarks.

    Every record is compared against the watermark as it stood at the start
    of the cycle, so records sharing a timestamp within one cycle are all
    kept. The new maxima are merged only after the whole pass.

    Args:
        records: Records of one cycle, grouped by stream, in arrival order
        watermarks: Highest timestamp already emitted, per stream

    Returns:
        Records to emit (arrival order kept) and the updated watermark table.
        The input mapping is left untouched.
    """
    emitted: list[LogRecord] = []
    new_timestamps: dict[str, int] = {}

    for record in records:
        seen = watermarks.get(record.stream)
        if seen is not None and record.timestamp <= seen:
            continue
        current = new_timestamps.get(record.stream)
        if current is None or record.timestamp > current:
            new_timestamps[record.stream] = record.timestamp
        emitted.append(record)

    updated = dict(watermarks)
    for stream, timestamp in new_timestamps.items():
        seen = updated.get(stream)
        if seen is None or timestamp > seen:
            updated[stream] = timestamp

    return emitted, updated


class WatermarkTracker:
    """Watermark table owned by a single retrieval session."""

    def __init__(self) -> None:
        self._watermarks: dict[str, int] = {}

    @property
    def watermarks(self) -> Mapping[str, int]:
        """Read-only view of the committed watermarks."""
        return MappingProxyType(self._watermarks)

    def filter(self, records: Iterable[LogRecord]) -> list[LogRecord]:
        """Drop already emitted records and commit the new watermarks."""
        emitted, self._watermarks = dedup(records, self._watermarks)
        return emitted
