"""Pytest fixtures for cwtail tests."""

import os
from typing import Generator

import pytest
from click.testing import CliRunner

from cwtail.config import AWSConfig, CwTailConfig, ProfileConfig, TailConfig
from cwtail.core.exceptions import BackendError
from cwtail.core.logs.base import GroupPage, LogGroup, LogRecord, LogStorageBackend, LogStream


class FakeBackend(LogStorageBackend):
    """In-memory backend recording every call.

    Streams are listed in insertion order, which stands for descending
    recency. A stream without events has no last event timestamp.
    """

    def __init__(self) -> None:
        self.streams: dict[str, list[tuple[int, str]]] = {}
        self.group_pages: list[list[str]] = []
        self.calls: list[tuple] = []
        self.fail_on: set[tuple] = set()

    @property
    def name(self) -> str:
        return "fake"

    def add_stream(self, name: str, *events: tuple[int, str]) -> "FakeBackend":
        self.streams[name] = list(events)
        return self

    def append(self, name: str, *events: tuple[int, str]) -> None:
        self.streams.setdefault(name, []).extend(events)

    def _check(self, call: tuple) -> None:
        self.calls.append(call)
        if call in self.fail_on or call[:1] in self.fail_on:
            raise BackendError(f"{call[0]} failed", cause=RuntimeError("boom"))

    def list_log_groups(self, next_token: str | None = None) -> GroupPage:
        self._check(("list_log_groups", next_token))
        index = int(next_token) if next_token else 0
        names = self.group_pages[index] if index < len(self.group_pages) else []
        has_more = index + 1 < len(self.group_pages)
        return GroupPage(
            log_groups=[LogGroup(name=n) for n in names],
            next_token=str(index + 1) if has_more else None,
        )

    def list_streams(self, log_group: str, limit: int) -> list[LogStream]:
        self._check(("list_streams", log_group))
        return [
            LogStream(
                log_group=log_group,
                name=name,
                last_event_timestamp=max(ts for ts, _ in events) if events else None,
            )
            for name, events in list(self.streams.items())[:limit]
        ]

    def fetch_events(self, log_group: str, stream: str) -> list[LogRecord]:
        self._check(("fetch_events", stream))
        return [LogRecord(ts, msg, stream) for ts, msg in self.streams.get(stream, [])]

    def fetched_streams(self) -> list[str]:
        return [c[1] for c in self.calls if c[0] == "fetch_events"]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner."""
    return CliRunner()


@pytest.fixture
def mock_config() -> CwTailConfig:
    """Create a mock configuration."""
    return CwTailConfig(
        profiles={
            "default": ProfileConfig(
                aws=AWSConfig(profile="test", region="us-east-1"),
                tail=TailConfig(),
            )
        }
    )


@pytest.fixture(autouse=True)
def clean_env() -> Generator[None, None, None]:
    """Clean environment variables before each test."""
    env_vars = [
        "CWTAIL_AWS_PROFILE",
        "CWTAIL_AWS_REGION",
        "CWTAIL_CONFIG",
        "CWTAIL_PROFILE",
        "CWTAIL_TAIL_NUM_RECORDS",
        "CWTAIL_TAIL_POLL_INTERVAL_MS",
        "CWTAIL_TAIL_FOLLOW",
        "AWS_PROFILE",
        "AWS_REGION",
        "FORCE_COLOR",
        "TTY_COMPATIBLE",
    ]

    original = {k: os.environ.get(k) for k in env_vars}

    for k in env_vars:
        os.environ.pop(k, None)

    yield

    for k, v in original.items():
        if v is not None:
            os.environ[k] = v
        else:
            os.environ.pop(k, None)


@pytest.fixture
def temp_config_file(tmp_path):
    """Create a temporary config file."""
    config_content = """
version: "1"
global:
  output_format: raw
profiles:
  default:
    aws:
      profile: test
      region: us-east-1
    tail:
      num_records: 5
      poll_interval_ms: 250
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_content)
    return str(config_file)
