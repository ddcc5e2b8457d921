"""Functions to manage the workspace-local package repository.

The repository is a plain directory of wheels that pip reads with its
`find-links` option. A pip configuration file next to it points there, so
`PIP_CONFIG_FILE=.modkit/pip.conf pip install NAME` installs published
modules without any index server.
"""

import configparser
import logging
import pathlib
import re
import shutil
import tomllib
from gettext import gettext as _

from modkitctl import diagnostics, settings, shell_utils, tracing

logger = logging.getLogger(__name__)


class RepositoryNotReadyError(Exception):
    """Exception raised when the workspace repository is not initialized."""


def state_dir(workspace: pathlib.Path) -> pathlib.Path:
    """Get the directory holding this tool's workspace state."""
    return pathlib.Path(workspace) / settings.WORKSPACE_STATE_DIRNAME


def repository_dir(workspace: pathlib.Path) -> pathlib.Path:
    """Get the repository directory for the workspace."""
    return state_dir(workspace) / settings.REPOSITORY_DIRNAME


def pip_config_path(workspace: pathlib.Path) -> pathlib.Path:
    """Get the pip configuration file that registers the repository."""
    return state_dir(workspace) / settings.PIP_CONFIG_FILENAME


def is_initialized(workspace: pathlib.Path) -> bool:
    """Check if the repository directory and its pip configuration exist."""
    return repository_dir(workspace).is_dir() and pip_config_path(workspace).is_file()


def require_repository(workspace: pathlib.Path) -> pathlib.Path:
    """
    Get the repository directory, making sure it was initialized.

    Raises:
        RepositoryNotReadyError: If the repository was not initialized.
    """
    if not is_initialized(workspace):
        raise RepositoryNotReadyError(
            _(
                "The package repository for %(workspace)s is not initialized. "
                "Please run `%(program_name)s repo_init` first."
            )
            % {"workspace": workspace, "program_name": settings.PROGRAM_NAME}
        )
    return repository_dir(workspace)


def write_pip_config(workspace: pathlib.Path) -> pathlib.Path:
    """Write the pip configuration that points find-links at the repository."""
    config = configparser.ConfigParser()
    config["global"] = {"find-links": str(repository_dir(workspace).resolve())}
    config_path = pip_config_path(workspace)
    with config_path.open("w") as config_file:
        config.write(config_file)
    diagnostics.emit_debug(
        _("Wrote pip configuration %(path)s"), {"path": config_path}
    )
    return config_path


def read_find_links(workspace: pathlib.Path) -> str | None:
    """Get the find-links location registered in the pip configuration."""
    config = configparser.ConfigParser()
    if not config.read(pip_config_path(workspace)):
        return None
    return config.get("global", "find-links", fallback=None)


@tracing.traced
def initialize(workspace: pathlib.Path) -> bool:
    """Create the repository and register it, unless already done.

    Returns True if anything was created.
    """
    repo_dir = repository_dir(workspace)
    expected_links = str(repo_dir.resolve())
    if is_initialized(workspace) and read_find_links(workspace) == expected_links:
        logger.info(
            _("The package repository '%(name)s' is already registered at %(path)s."),
            {"name": settings.REPOSITORY_NAME, "path": repo_dir},
        )
        return False

    repo_dir.mkdir(parents=True, exist_ok=True)
    write_pip_config(workspace)
    logger.info(
        _("Registered the package repository '%(name)s' at %(path)s."),
        {"name": settings.REPOSITORY_NAME, "path": repo_dir},
    )
    return True


def normalize_project_name(name: str) -> str:
    """Normalize a project name the way wheel filenames spell it."""
    return re.sub(r"[-_.]+", "_", name).lower()


def read_project_name(workspace: pathlib.Path) -> str | None:
    """Get the normalized project name from the workspace's pyproject.toml."""
    pyproject_path = pathlib.Path(workspace) / "pyproject.toml"
    if not pyproject_path.is_file():
        return None
    try:
        with pyproject_path.open("rb") as pyproject_file:
            project = tomllib.load(pyproject_file).get("project")
    except tomllib.TOMLDecodeError as error:
        logger.error(
            _("Could not parse %(path)s: %(error)s"),
            {"path": pyproject_path, "error": error},
        )
        return None
    if not isinstance(project, dict):
        return None
    name = project.get("name")
    return normalize_project_name(name) if isinstance(name, str) and name else None


def wheel_project_name(wheel_path: pathlib.Path) -> str:
    """Get the normalized project name from a wheel filename."""
    return normalize_project_name(pathlib.Path(wheel_path).name.split("-", 1)[0])


def list_packages(workspace: pathlib.Path) -> list[pathlib.Path]:
    """List the wheels published to the repository."""
    repo_dir = repository_dir(workspace)
    if not repo_dir.is_dir():
        return []
    return sorted(repo_dir.glob("*.whl"))


def find_published(workspace: pathlib.Path, project_name: str) -> list[pathlib.Path]:
    """List the published wheels belonging to one project."""
    normalized = normalize_project_name(project_name)
    return [
        wheel
        for wheel in list_packages(workspace)
        if wheel_project_name(wheel) == normalized
    ]


@tracing.traced
def build_wheel(
    workspace: pathlib.Path, wheel_dir: pathlib.Path | None = None
) -> bool:
    """Build the workspace project with pip.

    Wheels go to wheel_dir when given, otherwise straight into the repository.
    """
    repo_dir = require_repository(workspace)
    command = shell_utils.python_command(
        *settings.PIP_WHEEL_ARGS, str(wheel_dir or repo_dir), str(workspace)
    )
    __, __, exit_code = shell_utils.run_command(command, raise_error=False)
    if exit_code == 0:
        return True
    logger.error(
        _("pip failed to build a wheel from %(workspace)s."), {"workspace": workspace}
    )
    return False


def add_wheels(workspace: pathlib.Path, source_dir: pathlib.Path) -> list[pathlib.Path]:
    """Move every wheel from source_dir into the repository."""
    repo_dir = require_repository(workspace)
    added = []
    for wheel in sorted(pathlib.Path(source_dir).glob("*.whl")):
        target = repo_dir / wheel.name
        shutil.move(str(wheel), str(target))
        logger.info(_("Added %(path)s."), {"path": target})
        added.append(target)
    return added


def remove_wheel(wheel_path: pathlib.Path) -> bool:
    """Remove one published wheel."""
    try:
        wheel_path.unlink()
    except OSError as error:
        logger.error(
            _("Failed to remove %(path)s - %(error)s."),
            {"path": wheel_path, "error": error},
        )
        return False
    logger.info(_("Removed %(path)s."), {"path": wheel_path})
    return True


def remove(workspace: pathlib.Path) -> bool:
    """Remove the repository and its pip configuration."""
    state_path = state_dir(workspace)
    if not state_path.exists():
        logger.debug(
            _("No package repository found at %(path)s."), {"path": state_path}
        )
        return True
    shutil.rmtree(state_path)
    logger.info(
        _("Removed the package repository '%(name)s'."),
        {"name": settings.REPOSITORY_NAME},
    )
    return True
