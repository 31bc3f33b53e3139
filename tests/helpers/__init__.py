"""Test helper utilities for the gitwatcher test suite."""

from tests.helpers.cli_assertions import (
    assert_command_failed,
    assert_command_success,
    assert_output_contains,
    parse_json_output,
)
from tests.helpers.fakes import (
    FakeHistory,
    FakeRepository,
    FakeStatusParser,
    FakeWatchBackend,
    ManualTimer,
)

__all__ = [
    "assert_command_success",
    "assert_command_failed",
    "assert_output_contains",
    "parse_json_output",
    "FakeHistory",
    "FakeRepository",
    "FakeStatusParser",
    "FakeWatchBackend",
    "ManualTimer",
]
