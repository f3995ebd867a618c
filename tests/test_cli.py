"""Tests for the cwtail command line."""

import json
import os

import pytest
from click.testing import CliRunner
from moto import mock_aws

from cwtail.cli import cli
from cwtail.core.context import CwTailContext
from cwtail.core.logs.service import CwTail
from cwtail.core.output import STREAM_SEPARATOR


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep user and project config files out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def fake_service(backend, monkeypatch):
    """Route the CLI to the in-memory backend."""
    backend.add_stream("A", (1, "a1"), (2, "a2"))
    backend.add_stream("B", (5, "b5"))
    monkeypatch.setattr(CwTailContext, "cwtail", property(lambda self: CwTail(backend)))
    return backend


class TestCLIEntryPoint:
    """Tests for main CLI entry point, flags, and options."""

    def test_help(self, cli_runner: CliRunner):
        result = cli_runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "CloudWatch Logs tail" in result.output
        assert "--follow" in result.output
        assert "--list" in result.output

    def test_version(self, cli_runner: CliRunner):
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "cwtail version" in result.output

    def test_log_group_required(self, cli_runner: CliRunner):
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 1
        assert "log group name required" in result.output

    def test_invalid_num(self, cli_runner: CliRunner):
        result = cli_runner.invoke(cli, ["-n", "0", "svc"])
        assert result.exit_code == 2

    def test_invalid_output_format(self, cli_runner: CliRunner):
        result = cli_runner.invoke(cli, ["-l", "-o", "xml"])
        assert result.exit_code == 2
        assert "Invalid format" in result.output

    def test_unknown_config_profile(self, cli_runner: CliRunner):
        result = cli_runner.invoke(cli, ["--config-profile", "nope", "svc"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_aws_profile_and_region_options(self, cli_runner: CliRunner, fake_service):
        result = cli_runner.invoke(cli, ["-p", "prod", "-r", "eu-west-1", "svc"])
        assert result.exit_code == 0
        assert os.environ["CWTAIL_AWS_PROFILE"] == "prod"
        assert os.environ["CWTAIL_AWS_REGION"] == "eu-west-1"


class TestTail:
    """Tests for tailing a log group."""

    def test_prints_messages(self, cli_runner: CliRunner, fake_service):
        result = cli_runner.invoke(cli, ["--no-color", "-e", "svc"])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["a1", "a2", "b5"]

    def test_messages_are_written_verbatim(self, cli_runner: CliRunner, fake_service):
        result = cli_runner.invoke(cli, ["--no-color", "svc"])
        assert result.exit_code == 0
        assert result.output == "a1a2b5"

    def test_show_streams(self, cli_runner: CliRunner, fake_service):
        result = cli_runner.invoke(cli, ["--no-color", "-s", "-e", "svc"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            STREAM_SEPARATOR, "A", STREAM_SEPARATOR, "a1", "a2",
            STREAM_SEPARATOR, "B", STREAM_SEPARATOR, "b5",
        ]

    def test_show_time(self, cli_runner: CliRunner, fake_service):
        result = cli_runner.invoke(cli, ["--no-color", "-t", "-e", "-n", "1", "svc"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "[1970-01-01T00:00:00.001Z] a1",
            "[1970-01-01T00:00:00.002Z] a2",
        ]

    def test_num_from_config(self, cli_runner: CliRunner, fake_service, tmp_path):
        config = tmp_path / "custom.yaml"
        config.write_text("profiles:\n  default:\n    tail:\n      num_records: 1\n      eol: true\n")
        result = cli_runner.invoke(cli, ["--no-color", "-c", str(config), "svc"])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["a1", "a2"]

    def test_follow_empty_group_exits(self, cli_runner: CliRunner, fake_service):
        fake_service.streams = {"idle": []}
        result = cli_runner.invoke(cli, ["--no-color", "-f", "--interval", "10", "svc"])
        assert result.exit_code == 0
        assert result.output == ""

    def test_backend_error(self, cli_runner: CliRunner, fake_service):
        fake_service.fail_on.add(("fetch_events", "B"))
        result = cli_runner.invoke(cli, ["--no-color", "svc"])
        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "a1" not in result.output


class TestListGroups:
    """Tests for listing log groups."""

    def test_list_raw(self, cli_runner: CliRunner, fake_service):
        fake_service.group_pages = [["/aws/a", "/aws/b"], ["/aws/c"]]
        result = cli_runner.invoke(cli, ["--no-color", "-l", "-o", "raw"])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["/aws/a", "/aws/b", "/aws/c"]

    def test_list_json(self, cli_runner: CliRunner, fake_service):
        fake_service.group_pages = [["/aws/a"], ["/aws/b"]]
        result = cli_runner.invoke(cli, ["--no-color", "-l", "-o", "json"])
        assert result.exit_code == 0
        assert [g["name"] for g in json.loads(result.output)] == ["/aws/a", "/aws/b"]

    def test_list_json_piped_is_plain(self, cli_runner: CliRunner, fake_service):
        fake_service.group_pages = [["/aws/a"], ["/aws/b"]]
        result = cli_runner.invoke(cli, ["-l", "-o", "json"])
        assert result.exit_code == 0
        assert "\x1b[" not in result.output
        assert [g["name"] for g in json.loads(result.output)] == ["/aws/a", "/aws/b"]

    def test_list_table_is_default(self, cli_runner: CliRunner, fake_service):
        fake_service.group_pages = [["/aws/a", "/aws/b"]]
        result = cli_runner.invoke(cli, ["-l"])
        assert result.exit_code == 0
        assert "\x1b[" not in result.output
        assert "Log Groups" in result.output
        assert "retention_days" in result.output
        assert "/aws/a" in result.output
        assert "/aws/b" in result.output

    def test_color_always_from_config(self, cli_runner: CliRunner, fake_service, tmp_path):
        fake_service.group_pages = [["/aws/a"]]
        config = tmp_path / "custom.yaml"
        config.write_text("global:\n  color: always\n")
        result = cli_runner.invoke(cli, ["-c", str(config), "-l", "-o", "json"])
        assert result.exit_code == 0
        assert "\x1b[" in result.output

    def test_list_error(self, cli_runner: CliRunner, fake_service):
        fake_service.fail_on.add(("list_log_groups",))
        result = cli_runner.invoke(cli, ["--no-color", "-l", "-o", "raw"])
        assert result.exit_code == 1
        assert "list_log_groups failed" in result.output

    @mock_aws
    def test_list_against_moto(self, cli_runner: CliRunner):
        import boto3

        logs = boto3.client("logs", region_name="us-east-1")
        logs.create_log_group(logGroupName="/aws/lambda/one")
        logs.create_log_group(logGroupName="/aws/lambda/two")

        result = cli_runner.invoke(cli, ["--no-color", "--list", "-o", "raw"])

        assert result.exit_code == 0
        assert "/aws/lambda/one" in result.output
        assert "/aws/lambda/two" in result.output
