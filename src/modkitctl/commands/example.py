"""Greet names to demonstrate the confirmation, dry-run, and pipeline conventions."""

import argparse
import logging
import pathlib
from gettext import gettext as _

from modkitctl import diagnostics, faults, settings, shell_utils, tracing

logger = logging.getLogger(__name__)

STDIN_MARKER = "-"


def get_help() -> str:
    """Get the help/docstring for this command."""
    return _(
        "Greet each NAME to demonstrate the %(software_name)s command conventions."
    ) % {"software_name": settings.MODULE_SOFTWARE_NAME}


def setup_parser(parser: argparse.ArgumentParser) -> None:
    """Add arguments to this command's argparse subparser."""
    parser.add_argument(
        "names",
        nargs="*",
        metavar="NAME",
        help=_("Names to greet (default: read one name per line from stdin)"),
    )
    parser.add_argument(
        "-o",
        "--output",
        type=pathlib.Path,
        help=_("Append greetings to this file instead of printing them"),
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help=_("Show what would happen without doing it"),
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help=_("Do not ask for confirmation before each greeting"),
    )


def collect_names(names: list[str]) -> list[str]:
    """Get names from the arguments, or from stdin when none or '-' is given."""
    if not names or names == [STDIN_MARKER]:
        return shell_utils.read_stdin_lines()
    return list(names)


@tracing.traced
def greet(name: str) -> str:
    """Build the greeting for one name."""
    diagnostics.emit_debug(_("Greeting %(name)r"), {"name": name})
    if not name.strip():
        raise ValueError(_("Cannot greet an empty name."))
    return _("Hello, %(name)s!") % {"name": name.strip()}


def write_greeting(greeting: str, output: pathlib.Path | None) -> None:
    """Print the greeting or append it to the output file."""
    if output is None:
        print(greeting)
        return
    with output.open("a") as output_file:
        output_file.write(f"{greeting}\n")
    diagnostics.emit_verbose(
        _("Appended greeting to %(output)s"), {"output": output}
    )


def run(args: argparse.Namespace) -> bool:
    """Greet every name, continuing past names that fail."""
    names = collect_names(args.names)
    if not names:
        logger.error(_("No names were given."))
        return False

    success = True
    for name in names:
        if args.dry_run:
            print(_("What if: Greeting '%(name)s'.") % {"name": name})
            continue
        if not args.force and not shell_utils.confirm(
            _("Greet '%(name)s'?") % {"name": name}
        ):
            logger.info(_("Skipped '%(name)s'."), {"name": name})
            continue
        try:
            write_greeting(greet(name), args.output)
        except (ValueError, OSError):
            faults.report_fault()
            success = False
    return success
