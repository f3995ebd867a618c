"""Shared state for the cwtail command."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cwtail.config import CwTailConfig, ProfileConfig, get_default_config
from cwtail.core.logging import LogLevel, StructuredLogger, setup_logging
from cwtail.core.output import OutputFormat, OutputFormatter

if TYPE_CHECKING:
    from cwtail.clients.aws import AWSClientFactory
    from cwtail.core.logs.service import CwTail


class CwTailContext:
    """Configuration, output and lazily created clients for one invocation."""

    def __init__(
        self,
        config: CwTailConfig | None = None,
        profile: str | None = None,
        output_format: OutputFormat | None = None,
        verbose: int = 0,
        color: bool = True,
    ):
        self._config = config or get_default_config()
        self._profile_name = profile or "default"
        self._output_format = output_format or self._config.global_settings.output_format
        self._color = _resolve_color(color, self._config.global_settings.color)

        log_level = LogLevel.from_verbosity(verbose, self._config.global_settings.verbosity)
        setup_logging(log_level, rich_output=self._color is not False)
        self._logger = StructuredLogger("context")

        self._output = OutputFormatter(
            format=self._output_format,
            color=self._color,
        )

        self._aws_factory: AWSClientFactory | None = None
        self._cwtail: CwTail | None = None

    @property
    def profile(self) -> ProfileConfig:
        """Get the current profile configuration."""
        return self._config.get_profile(self._profile_name)

    @property
    def output(self) -> OutputFormatter:
        return self._output

    @property
    def output_format(self) -> OutputFormat:
        return self._output_format

    @property
    def logger(self) -> StructuredLogger:
        return self._logger

    @property
    def aws(self) -> "AWSClientFactory":
        """Get or create AWS client factory."""
        if self._aws_factory is None:
            from cwtail.clients.aws import AWSClientFactory

            self._aws_factory = AWSClientFactory(self.profile.aws)
        return self._aws_factory

    @property
    def cwtail(self) -> "CwTail":
        """Get or create the retrieval service backed by CloudWatch Logs."""
        if self._cwtail is None:
            from cwtail.core.logs.cloudwatch import CloudWatchBackend
            from cwtail.core.logs.service import CwTail

            self._logger.debug("Creating CloudWatch backend", region=self.aws.region)
            self._cwtail = CwTail(CloudWatchBackend(self.aws.logs))
        return self._cwtail


def _resolve_color(enabled: bool, setting: str) -> bool | None:
    """Combine --no-color with the configured mode. None lets Rich detect a terminal."""
    if not enabled or setting == "never":
        return False
    if setting == "always":
        return True
    return None
