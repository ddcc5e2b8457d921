"""Test the "example" command."""

import argparse
import io
import logging
import sys

import pytest

from modkitctl import diagnostics, faults, settings
from modkitctl.commands import example
from tests.conftest import assert_messages_match, diagnostic_messages


def make_args(names, **overrides) -> argparse.Namespace:
    """Build the command's arguments with no options set."""
    values = {"names": names, "output": None, "dry_run": False, "force": True}
    values.update(overrides)
    return argparse.Namespace(**values)


def test_get_help():
    """Test the help text names the product."""
    assert settings.MODULE_SOFTWARE_NAME in example.get_help()


def test_setup_parser():
    """Test the command's arguments."""
    parser = argparse.ArgumentParser()
    example.setup_parser(parser)
    args = parser.parse_args(["Ada", "--dry-run", "-f"])
    assert args.names == ["Ada"]
    assert args.dry_run
    assert args.force
    assert args.output is None


def test_collect_names_from_args():
    """Test positional names are used as given."""
    assert example.collect_names(["Ada", "Grace"]) == ["Ada", "Grace"]


@pytest.mark.parametrize("names", ([], ["-"]))
def test_collect_names_from_stdin(names, monkeypatch):
    """Test names are read from piped stdin when none or '-' is given."""
    monkeypatch.setattr(sys, "stdin", io.StringIO("Ada\nGrace\n"))
    assert example.collect_names(names) == ["Ada", "Grace"]


def test_greet():
    """Test greet builds the greeting."""
    assert example.greet(" Ada ") == "Hello, Ada!"


def test_greet_empty_name():
    """Test greet refuses a blank name."""
    with pytest.raises(ValueError, match="Cannot greet an empty name."):
        example.greet("  ")


def test_run_prints_greetings(capsys):
    """Test every name is greeted on stdout."""
    assert example.run(make_args(["Ada", "Grace"]))
    assert capsys.readouterr().out.splitlines() == ["Hello, Ada!", "Hello, Grace!"]


def test_run_appends_to_output(tmp_path, capsys):
    """Test greetings are appended to the output file."""
    output = tmp_path / "greetings.txt"
    output.write_text("Hello, earlier!\n")
    assert example.run(make_args(["Ada"], output=output))
    assert output.read_text() == "Hello, earlier!\nHello, Ada!\n"
    assert not capsys.readouterr().out


def test_run_dry_run(tmp_path, capsys):
    """Test --dry-run only describes what would happen."""
    output = tmp_path / "greetings.txt"
    assert example.run(make_args(["Ada"], dry_run=True, output=output, force=False))
    assert capsys.readouterr().out.strip() == "What if: Greeting 'Ada'."
    assert not output.exists()


def test_run_asks_for_confirmation(mocker, capsys):
    """Test each name is confirmed unless --force is given."""
    confirm = mocker.patch.object(
        example.shell_utils, "confirm", side_effect=[True, False]
    )
    assert example.run(make_args(["Ada", "Grace"], force=False))
    assert confirm.call_count == 2
    confirm.assert_called_with("Greet 'Grace'?")
    assert capsys.readouterr().out.splitlines() == ["Hello, Ada!"]


def test_run_yes_skips_confirmation(mocker, capsys):
    """Test the global --yes answers every prompt."""
    settings.runtime.update(yes=True)
    mock_input = mocker.patch("builtins.input")
    assert example.run(make_args(["Ada"], force=False))
    mock_input.assert_not_called()
    assert capsys.readouterr().out.strip() == "Hello, Ada!"


def test_run_without_names(monkeypatch, caplog):
    """Test the command fails when there is nothing to greet."""
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    assert not example.run(make_args([]))
    assert caplog.messages == ["No names were given."]


def test_run_continues_past_failures(capsys, caplog):
    """Test a bad name is reported as a warning and the rest are greeted."""
    assert not example.run(make_args(["Ada", " ", "Grace"]))
    assert capsys.readouterr().out.splitlines() == ["Hello, Ada!", "Hello, Grace!"]
    assert_messages_match(
        caplog.messages, settings.FAULT_HEADER, "Cannot greet an empty name.", "greet"
    )
    assert all(record.levelno == logging.WARNING for record in caplog.records)


def test_run_continues_past_write_failures(tmp_path, caplog):
    """Test an unwritable output is reported per name without stopping the rest."""
    assert not example.run(make_args(["Ada", "Grace"], output=tmp_path))
    assert_messages_match(
        caplog.messages, settings.FAULT_HEADER, "Is a directory", settings.FAULT_HEADER
    )
    assert sum(settings.FAULT_HEADER in message for message in caplog.messages) == 2
    assert all(record.levelno == logging.WARNING for record in caplog.records)


def test_run_stops_on_failure_with_fatal_override(capsys):
    """Test a fatal exception action stops the pipeline at the bad name."""
    settings.runtime.update(exception_action=faults.ExceptionAction.STOP)
    with pytest.raises(faults.FatalFaultError, match="Cannot greet an empty name."):
        example.run(make_args(["Ada", "", "Grace"]))
    assert capsys.readouterr().out.splitlines() == ["Hello, Ada!"]


def test_run_traces_greet_when_command_has_debug(caplog, capsys):
    """Test greet is traced when the command was invoked with --debug."""
    with diagnostics.call_frame("example", {}, ("--debug", "example", "Ada")):
        assert example.run(make_args(["Ada"]))
    messages = diagnostic_messages(caplog)
    assert len(messages) == 3
    assert messages[0].startswith(f"{settings.TRACE_ENTER_ARROW} greet ")
    assert messages[1] == "Greeting 'Ada'"
    assert messages[2].startswith(f"{settings.TRACE_EXIT_ARROW} greet ")


def test_run_not_traced_when_debug_forced_off(caplog, capsys):
    """Test --no-debug beats a stray --debug token."""
    with diagnostics.call_frame("example", {"debug": False}, ("--debug",)):
        assert example.run(make_args(["Ada"]))
    assert not diagnostic_messages(caplog)
