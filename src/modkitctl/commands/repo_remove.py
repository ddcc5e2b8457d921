"""Remove the workspace-local package repository."""

import argparse
import logging
from gettext import gettext as _

from modkitctl import argparse_utils, repository, shell_utils

logger = logging.getLogger(__name__)


def get_help() -> str:
    """Get the help/docstring for this command."""
    return _("Remove the workspace-local package repository and everything in it.")


def run(args: argparse.Namespace) -> bool:
    """Run the repo_remove command."""
    workspace = argparse_utils.workspace_from_args(args)
    packages = repository.list_packages(workspace)
    if packages:
        logger.warning(
            _("The repository holds %(count)d published package(s)."),
            {"count": len(packages)},
        )
    if not shell_utils.confirm(
        _("Are you sure you want to remove the package repository?")
    ):
        logger.info(_("The package repository was not removed."))
        return False
    return repository.remove(workspace)
