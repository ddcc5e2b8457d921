"""Bootstrap the workspace-local package repository."""

import argparse
import logging
from gettext import gettext as _

from modkitctl import argparse_utils, repository, settings

logger = logging.getLogger(__name__)


def get_help() -> str:
    """Get the help/docstring for this command."""
    return _("Create and register the workspace-local package repository.")


def run(args: argparse.Namespace) -> bool:
    """Run the repo_init command."""
    workspace = argparse_utils.workspace_from_args(args)
    repository.initialize(workspace)
    if not settings.runtime.quiet:
        print(
            _("Install published modules with: PIP_CONFIG_FILE=%(path)s pip install NAME")
            % {"path": repository.pip_config_path(workspace)}
        )
    return True
