"""Helper functions to support argparse."""

import argparse
import pathlib
from gettext import gettext as _

from modkitctl import faults


def exception_action(value: str) -> faults.ExceptionAction:
    """Enforce a known exception action value."""
    try:
        return faults.ExceptionAction.parse(value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(str(error)) from error


def existing_directory(value: str) -> pathlib.Path:
    """Enforce a path to an existing directory."""
    path = pathlib.Path(value).expanduser()
    if not path.is_dir():
        raise argparse.ArgumentTypeError(
            _("not an existing directory: '%(value)s'") % {"value": value}
        )
    return path.resolve()


def workspace_from_args(args: argparse.Namespace) -> pathlib.Path:
    """Get the workspace directory selected on the command line."""
    if workspace := getattr(args, "workspace", None):
        return pathlib.Path(workspace)
    return pathlib.Path.cwd()
