"""CloudWatch Logs backend implementation."""

from typing import Any

from cwtail.clients.aws import handle_aws_error
from cwtail.core.logging import get_logger
from cwtail.core.logs.base import GroupPage, LogGroup, LogRecord, LogStorageBackend, LogStream

logger = get_logger(__name__)


class CloudWatchBackend(LogStorageBackend):
    """Log storage backend for AWS CloudWatch Logs."""

    def __init__(self, logs_client: Any):
        """Initialize CloudWatch backend.

        Args:
            logs_client: boto3 CloudWatch Logs client
        """
        self._client = logs_client

    @property
    def name(self) -> str:
        return "cloudwatch"

    @handle_aws_error
    def list_log_groups(self, next_token: str | None = None) -> GroupPage:
        params: dict[str, Any] = {}
        if next_token:
            params["nextToken"] = next_token

        response = self._client.describe_log_groups(**params)

        groups = [
            LogGroup(
                name=group["logGroupName"],
                retention_days=group.get("retentionInDays"),
                stored_bytes=group.get("storedBytes"),
                creation_time=group.get("creationTime"),
                raw=group,
            )
            for group in response.get("logGroups", [])
        ]
        return GroupPage(log_groups=groups, next_token=response.get("nextToken"))

    @handle_aws_error
    def list_streams(self, log_group: str, limit: int) -> list[LogStream]:
        response = self._client.describe_log_streams(
            logGroupName=log_group,
            orderBy="LastEventTime",
            descending=True,
            limit=limit,
        )
        return [
            LogStream(
                log_group=log_group,
                name=stream["logStreamName"],
                last_event_timestamp=stream.get("lastEventTimestamp"),
            )
            for stream in response.get("logStreams", [])
        ]

    @handle_aws_error
    def fetch_events(self, log_group: str, stream: str) -> list[LogRecord]:
        response = self._client.get_log_events(
            logGroupName=log_group,
            logStreamName=stream,
        )
        events = response.get("events") or []
        logger.debug("Fetched %d event(s) from %s/%s", len(events), log_group, stream)
        return [
            LogRecord(
                timestamp=event["timestamp"],
                message=event.get("message", ""),
                stream=stream,
            )
            for event in events
        ]
