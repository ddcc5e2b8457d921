"""Publish the workspace module to the workspace-local package repository."""

import argparse
import logging
import pathlib
import tempfile
from gettext import gettext as _

from modkitctl import argparse_utils, repository, settings, shell_utils

logger = logging.getLogger(__name__)


def get_help() -> str:
    """Get the help/docstring for this command."""
    return _("Build the workspace module and publish it to the local repository.")


def setup_parser(parser: argparse.ArgumentParser) -> None:
    """Add arguments to this command's argparse subparser."""
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help=_("Show what would be published without building anything"),
    )


def confirm_replacement(project_name: str, existing: list[pathlib.Path]) -> bool:
    """Ask before earlier wheels of the project are replaced."""
    if not existing:
        return True
    logger.warning(
        _("'%(name)s' is already published: %(wheels)s"),
        {"name": project_name, "wheels": ", ".join(wheel.name for wheel in existing)},
    )
    return shell_utils.confirm(_("Do you want to replace the published package?"))


def build_and_replace(workspace: pathlib.Path, existing: list[pathlib.Path]) -> bool:
    """
    Build the module and swap it in for the existing wheels.

    The build happens in a temporary directory so a failed build leaves the
    published wheels in place. Superseded wheels are removed only after the
    new ones were added.
    """
    with tempfile.TemporaryDirectory(prefix=f"{settings.PROGRAM_NAME}-") as build_dir:
        build_path = pathlib.Path(build_dir)
        if not repository.build_wheel(workspace, build_path):
            return False
        added = repository.add_wheels(workspace, build_path)
    superseded = [wheel for wheel in existing if wheel not in added]
    return all([repository.remove_wheel(wheel) for wheel in superseded])


def run(args: argparse.Namespace) -> bool:
    """Run the publish command."""
    workspace = argparse_utils.workspace_from_args(args)
    repo_dir = repository.require_repository(workspace)
    project_name = repository.read_project_name(workspace)

    if args.dry_run:
        print(
            _("What if: Publishing '%(name)s' from %(workspace)s to %(repo_dir)s.")
            % {
                "name": project_name or workspace.name,
                "workspace": workspace,
                "repo_dir": repo_dir,
            }
        )
        return True

    existing = []
    if project_name:
        existing = repository.find_published(workspace, project_name)
    if not confirm_replacement(project_name, existing):
        logger.info(_("Nothing was published."))
        return False
    if not build_and_replace(workspace, existing):
        return False

    if not settings.runtime.quiet:
        print(
            _("Published '%(name)s' to the %(repository)s repository.")
            % {
                "name": project_name or workspace.name,
                "repository": settings.REPOSITORY_NAME,
            }
        )
    return True
