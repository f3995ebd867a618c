"""Main CLI entry point for cwtail."""

import os
import sys
from typing import Any

import click
from rich.console import Console

from cwtail import __version__
from cwtail.config import load_config
from cwtail.core.context import CwTailContext
from cwtail.core.exceptions import ConfigurationError, CwTailError
from cwtail.core.logs.base import Error, Page, Record, StreamBoundary
from cwtail.core.output import OutputFormat


CONTEXT_SETTINGS = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 120,
}

LIST_HEADERS = ["name", "retention_days", "stored_bytes", "created"]


class OutputFormatType(click.ParamType):
    """Custom Click parameter type for output format."""

    name = "format"

    def convert(
        self,
        value: Any,
        param: click.Parameter | None,
        ctx: click.Context | None,
    ) -> OutputFormat:
        if isinstance(value, OutputFormat):
            return value
        try:
            return OutputFormat(value.lower())
        except ValueError:
            self.fail(
                f"Invalid format '{value}'. Choose from: table, json, yaml, raw",
                param,
                ctx,
            )


OUTPUT_FORMAT = OutputFormatType()


def print_version(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console = Console()
    console.print(f"cwtail version {__version__}")
    ctx.exit()


@click.command(context_settings=CONTEXT_SETTINGS)
@click.argument("log_group", required=False)
@click.option("-f", "--follow", is_flag=True, help="Follow the log (default is to exit)")
@click.option("-n", "--num", type=click.IntRange(min=1), default=None, help="Number of log records to show [default: 30]")
@click.option("--interval", type=click.IntRange(min=1), default=None, metavar="MS", help="The messages polling interval in ms [default: 5000]")
@click.option("-s", "--streams", "show_streams", is_flag=True, help="Show log stream names")
@click.option("-t", "--time", "show_time", is_flag=True, help="Show timestamps in log records")
@click.option("-e", "--eol", is_flag=True, help="Append end-of-line to log records")
@click.option("-l", "--list", "list_groups", is_flag=True, help="List available log groups")
@click.option("-p", "--profile", "aws_profile", metavar="NAME", help="Select AWS profile")
@click.option("-r", "--region", metavar="NAME", help="Select AWS region")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=True),
    metavar="FILE",
    envvar="CWTAIL_CONFIG",
    help="Path to config file",
)
@click.option("--config-profile", metavar="NAME", envvar="CWTAIL_PROFILE", help="Configuration profile to use")
@click.option(
    "-o",
    "--output",
    "output_format",
    type=OUTPUT_FORMAT,
    metavar="FORMAT",
    help="Output format for --list: table, json, yaml, raw",
)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v for info, -vv for debug)")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option(
    "--version",
    is_flag=True,
    callback=print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit",
)
def cli(
    log_group: str | None,
    follow: bool,
    num: int | None,
    interval: int | None,
    show_streams: bool,
    show_time: bool,
    eol: bool,
    list_groups: bool,
    aws_profile: str | None,
    region: str | None,
    config_file: str | None,
    config_profile: str | None,
    output_format: OutputFormat | None,
    verbose: int,
    no_color: bool,
) -> None:
    """CloudWatch Logs tail.

    Shows the most recent records of LOG_GROUP, optionally following it.

    \b
    Examples:
        cwtail /aws/lambda/my-func
        cwtail -f -s -t /aws/ecs/my-service
        cwtail --list -o raw

    \b
    Configuration:
        ~/.cwtail/config.yaml    User configuration
        ./cwtail.yaml            Project configuration
        CWTAIL_TAIL_*            Retrieval defaults
    """
    if aws_profile:
        os.environ["CWTAIL_AWS_PROFILE"] = aws_profile
    if region:
        os.environ["CWTAIL_AWS_REGION"] = region

    try:
        config = load_config(config_file)
        ctx = CwTailContext(
            config=config,
            profile=config_profile,
            output_format=output_format,
            verbose=verbose,
            color=not no_color,
        )
        settings = ctx.profile.tail

        if list_groups:
            _list_log_groups(ctx)
            return

        if not log_group:
            raise ConfigurationError("log group name required")

        _tail(
            ctx,
            log_group,
            num_records=num or settings.num_records,
            follow=follow or settings.follow,
            poll_interval_ms=interval or settings.poll_interval_ms,
            fan_out=settings.fan_out,
            show_streams=show_streams or settings.show_streams,
            show_time=show_time or settings.show_time,
            eol=eol or settings.eol,
        )

    except ConfigurationError as e:
        console = Console(stderr=True)
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)


def _list_log_groups(ctx: CwTailContext) -> None:
    retriever = ctx.cwtail.create_log_groups_retriever()
    streaming = ctx.output_format == OutputFormat.RAW
    rows: list[dict[str, Any]] = []

    try:
        for notification in retriever:
            if isinstance(notification, Page):
                page_rows = [group.to_dict() for group in notification.page.log_groups]
                if streaming:
                    ctx.output.print_data(page_rows, headers=LIST_HEADERS)
                else:
                    rows.extend(page_rows)
            elif isinstance(notification, Error):
                ctx.output.print_error(str(notification.cause))
    except KeyboardInterrupt:
        retriever.cancel()
        ctx.output.print_info("Interrupted")
        sys.exit(130)

    if not streaming and (rows or retriever.error is None):
        ctx.output.print_data(rows, headers=LIST_HEADERS, title="Log Groups")
    if retriever.error is not None:
        sys.exit(1)


def _tail(
    ctx: CwTailContext,
    log_group: str,
    num_records: int,
    follow: bool,
    poll_interval_ms: int,
    fan_out: int,
    show_streams: bool,
    show_time: bool,
    eol: bool,
) -> None:
    retriever = ctx.cwtail.create_messages_retriever(
        log_group,
        num_records=num_records,
        follow=follow,
        poll_interval_ms=poll_interval_ms,
        fan_out=fan_out,
    )
    ctx.logger.debug("Tailing", log_group=log_group, follow=follow, num=num_records)

    try:
        for notification in retriever:
            if isinstance(notification, Record):
                ctx.output.write_record(notification.record, show_time=show_time, eol=eol)
            elif isinstance(notification, StreamBoundary):
                if show_streams:
                    ctx.output.write_stream_boundary(notification.stream)
            elif isinstance(notification, Error):
                ctx.output.print_error(str(notification.cause))
    except KeyboardInterrupt:
        retriever.cancel()
        ctx.output.print_info("Stopped")
        sys.exit(130)

    if retriever.error is not None:
        sys.exit(1)


def main() -> None:
    """Main entry point."""
    try:
        cli()
    except CwTailError as e:
        console = Console(stderr=True)
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        console = Console(stderr=True)
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
