"""Main command-line entrypoint."""

import argparse
import importlib
import logging
import os
import pkgutil
import sys
from gettext import gettext as _
from types import ModuleType

from . import argparse_utils, diagnostics, faults, repository, settings, shell_utils

logger = logging.getLogger(__name__)


def load_commands() -> dict[str, ModuleType]:
    """Dynamically load command modules."""
    commands = {}
    for __, module_name, __ in pkgutil.iter_modules([settings.COMMANDS_PACKAGE_PATH]):
        module = importlib.import_module(f"modkitctl.commands.{module_name}")
        if not getattr(module, "NOT_A_COMMAND", False):
            commands[module_name] = module
    return commands


def create_parser(commands: dict[str, ModuleType]) -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(prog=settings.PROGRAM_NAME)
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        dest="verbosity",
        default=0,
        help=_("Increase verbose output"),
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        dest="quiet",
        default=False,
        help=_("Quiet output (overrides `-v`/`--verbose`)"),
    )
    parser.add_argument(
        "--debug",
        action=argparse.BooleanOptionalAction,
        dest="debug",
        default=None,
        help=_("Force debug output and function tracing on or off"),
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        dest="yes",
        default=False,
        help=_("Answer yes to every confirmation prompt"),
    )
    parser.add_argument(
        "--exception-action",
        dest="exception_action",
        type=argparse_utils.exception_action,
        metavar="ACTION",
        help=_(
            "How reported errors are handled: Continue, SilentlyContinue, "
            "Stop, or Abort (default: $%(env_var)s or Continue)"
        )
        % {"env_var": settings.EXCEPTION_ACTION_ENV_VAR},
    )
    parser.add_argument(
        "-w",
        "--workspace",
        dest="workspace",
        type=argparse_utils.existing_directory,
        help=_("Module workspace directory (default: current directory)"),
    )

    subparsers = parser.add_subparsers(dest="command")
    for command_name, command_module in commands.items():
        command_parser = subparsers.add_parser(
            command_name, help=command_module.get_help()
        )
        if hasattr(command_module, "setup_parser"):
            command_module.setup_parser(command_parser)

    return parser


def get_exception_action(args: argparse.Namespace) -> faults.ExceptionAction | None:
    """Get the process-wide exception action from the arguments or environment."""
    action = getattr(args, "exception_action", None)
    if isinstance(action, faults.ExceptionAction):
        return action
    if value := shell_utils.get_env(settings.EXCEPTION_ACTION_ENV_VAR):
        try:
            return faults.ExceptionAction.parse(value)
        except ValueError as error:
            logger.warning(
                _("Ignoring %(env_var)s: %(error)s"),
                {"env_var": settings.EXCEPTION_ACTION_ENV_VAR, "error": error},
            )
    return None


def update_runtime_settings(args: argparse.Namespace) -> None:
    """Initialize the global runtime settings from the parsed arguments."""
    settings.runtime.update(
        quiet=args.quiet is True,
        yes=args.yes is True,
        verbose_preference=(
            settings.PREFERENCE_CONTINUE
            if not args.quiet and args.verbosity > 0
            else None
        ),
        debug_preference=settings.PREFERENCE_CONTINUE if args.debug is True else None,
        exception_action=get_exception_action(args),
    )


def get_bound_parameters(args: argparse.Namespace) -> dict[str, bool]:
    """Get the diagnostic switches the user explicitly gave on the command line."""
    bound = {}
    if isinstance(args.debug, bool):
        bound[diagnostics.DiagnosticChannel.DEBUG.parameter] = args.debug
    if not args.quiet and args.verbosity > 0:
        bound[diagnostics.DiagnosticChannel.VERBOSE.parameter] = True
    return bound


def configure_logging(verbosity: int = 0, quiet: bool = False, debug: bool = False) -> int:
    """
    Configure the base logger.

    Returns the calculated level used to configure the logging module.
    """
    if quiet:
        log_level = logging.CRITICAL
    elif debug:
        log_level = logging.DEBUG
    else:
        log_level = max(logging.DEBUG, settings.DEFAULT_LOG_LEVEL - (verbosity * 10))
    log_format = (
        "%(asctime)s %(levelname)s: %(message)s"
        if verbosity > 2  # noqa: PLR2004
        else "%(levelname)s: %(message)s"
    )
    logging.basicConfig(
        format=log_format,
        level=log_level,
        encoding="utf-8",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    diagnostics.diagnostic_logger.setLevel(logging.CRITICAL if quiet else logging.DEBUG)
    return log_level


def run():
    """Run the program with arguments from the CLI."""
    commands = load_commands()
    parser = create_parser(commands)
    args = parser.parse_args()
    update_runtime_settings(args)
    debug = diagnostics.is_active(
        diagnostics.DiagnosticChannel.DEBUG,
        diagnostics.InvocationContext(
            explicit=args.debug if isinstance(args.debug, bool) else None,
            environment=os.environ.get(settings.DEBUG_ENV_VAR),
            preference=settings.runtime.debug_preference,
        ),
    )
    configure_logging(args.verbosity, args.quiet, debug)

    if args.command in commands:
        try:
            with diagnostics.call_frame(
                args.command, get_bound_parameters(args), tuple(sys.argv[1:])
            ):
                if not commands[args.command].run(args):
                    sys.exit(1)
        except SystemExit:
            raise
        except KeyboardInterrupt:  # can occur via control-c input
            print()  # new line for cleaner output before logger
            logger.error(_("Exiting due to keyboard interrupt."))
            sys.exit(1)
        except EOFError:  # can occur via control-d input
            print()  # new line for cleaner output before logger
            logger.error(_("Input closed unexpectedly."))
            sys.exit(1)
        except faults.FatalFaultError as e:
            # a reported fault escalated by the exception action in effect
            print()
            logger.log(e.action.severity, e)
            sys.exit(1)
        except (
            repository.RepositoryNotReadyError,
            shell_utils.ToolNotFoundError,
        ) as e:
            print()
            logger.error(e)
            sys.exit(1)
        except Exception as e:  # noqa: BLE001
            print()  # new line for cleaner output before logger
            logger.exception(e)
            sys.exit(1)

    else:
        parser.print_help()


if __name__ == "__main__":
    run()
