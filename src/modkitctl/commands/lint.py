"""Run static analysis over the workspace's source."""

import argparse
import logging
import pathlib
from gettext import gettext as _

from modkitctl import argparse_utils, settings, shell_utils, tracing

logger = logging.getLogger(__name__)


def get_help() -> str:
    """Get the help/docstring for this command."""
    return _("Run static analysis over the workspace's source with %(linter)s.") % {
        "linter": settings.LINTER_COMMAND
    }


def setup_parser(parser: argparse.ArgumentParser) -> None:
    """Add arguments to this command's argparse subparser."""
    parser.add_argument(
        "paths",
        nargs="*",
        type=pathlib.Path,
        metavar="PATH",
        help=_("Files or directories to check (default: the workspace source)"),
    )
    parser.add_argument(
        "--fix",
        action="store_true",
        help=_("Apply automatic fixes where possible"),
    )
    parser.add_argument(
        "--select",
        action="append",
        default=[],
        metavar="RULE",
        help=_("Only check this rule or rule prefix (repeatable)"),
    )
    parser.add_argument(
        "--config",
        type=pathlib.Path,
        help=_("Use this linter configuration file"),
    )


def default_paths(workspace: pathlib.Path) -> list[pathlib.Path]:
    """Get the source paths to check when none are given."""
    source_dir = workspace / settings.WORKSPACE_SOURCE_DIRNAME
    return [source_dir] if source_dir.is_dir() else [workspace]


@tracing.traced
def build_command(
    paths: list[pathlib.Path],
    fix: bool = False,
    select: list[str] | None = None,
    config: pathlib.Path | None = None,
) -> list[str]:
    """Build the linter command line."""
    command = [settings.LINTER_COMMAND, "check"]
    if fix:
        command.append("--fix")
    if select:
        command.append(f"--select={','.join(select)}")
    if config:
        command += ["--config", str(config)]
    return command + [str(path) for path in paths]


def run(args: argparse.Namespace) -> bool:
    """Run the lint command."""
    shell_utils.require_executable(settings.LINTER_COMMAND)
    workspace = argparse_utils.workspace_from_args(args)
    paths = args.paths or default_paths(workspace)

    command = build_command(
        paths, fix=args.fix, select=args.select, config=args.config
    )
    stdout, __, exit_code = shell_utils.run_command(
        command, raise_error=False, cwd=workspace
    )
    if exit_code != 0:
        if not settings.runtime.quiet and stdout.strip():
            print(stdout.rstrip())
        logger.error(
            _("Static analysis reported problems (exit code %(exit_code)s)."),
            {"exit_code": exit_code},
        )
        return False
    logger.info(_("Static analysis found no problems."))
    return True
