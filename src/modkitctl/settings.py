"""Global configuration settings for modkitctl."""

import logging
import pathlib

PROGRAM_NAME = "modkitctl"  # this program's executable command
MODULE_SOFTWARE_NAME = "ModKit"  # user-facing "product" name in messages
ENV_VAR_PREFIX = "MODKIT_"  # used to construct env vars read at startup

COMMANDS_PACKAGE_PATH = str(pathlib.Path(__file__).parent.resolve() / "commands")

DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_SUBPROCESS_WAIT_TIMEOUT = 600  # seconds, or 10 minutes

# Environment variables that switch on a diagnostic channel or override
# how faults are handled for the whole process.
VERBOSE_ENV_VAR = f"{ENV_VAR_PREFIX}VERBOSE"
DEBUG_ENV_VAR = f"{ENV_VAR_PREFIX}DEBUG"
EXCEPTION_ACTION_ENV_VAR = f"{ENV_VAR_PREFIX}EXCEPTION_ACTION"
TRUTHY_ENV_VALUES = frozenset(("1", "true", "yes", "on"))

# Ambient preference values. Only "Continue" switches a channel on.
PREFERENCE_CONTINUE = "Continue"
PREFERENCE_SILENTLY_CONTINUE = "SilentlyContinue"

DIAGNOSTICS_LOGGER_NAME = "modkitctl.diagnostics"
TRACE_RULE_WIDTH = 70
TRACE_RULE_GLYPH = "-"
TRACE_ENTER_ARROW = "-->"
TRACE_EXIT_ARROW = "<--"
FAULT_RULE_WIDTH = 80
FAULT_RULE_GLYPH = "="
FAULT_HEADER = "Exception StackTrace"

# Workspace layout. Paths are relative to the workspace root.
WORKSPACE_STATE_DIRNAME = ".modkit"
REPOSITORY_DIRNAME = "repository"
PIP_CONFIG_FILENAME = "pip.conf"
WORKSPACE_TESTS_DIRNAME = "tests"
WORKSPACE_SOURCE_DIRNAME = "src"
REPOSITORY_NAME = "modkit-local"

# External tools commonly run
TEST_RUNNER_MODULE = "pytest"
LINTER_COMMAND = "ruff"
PIP_WHEEL_ARGS = ["-m", "pip", "wheel", "--no-deps", "--wheel-dir"]


class RuntimeSettings:
    """A class to hold and manage global runtime settings."""

    def __init__(self):
        self._quiet: bool = False
        self._yes: bool = False
        self._verbose_preference: str = PREFERENCE_SILENTLY_CONTINUE
        self._debug_preference: str = PREFERENCE_SILENTLY_CONTINUE
        self._exception_action = None

    def update(  # noqa: PLR0913
        self,
        *,
        quiet: bool | None = None,
        yes: bool | None = None,
        verbose_preference: str | None = None,
        debug_preference: str | None = None,
        exception_action=None,
    ):
        """Update the global runtime settings."""
        if isinstance(quiet, bool):
            self._quiet = quiet
        if isinstance(yes, bool):
            self._yes = yes
        if isinstance(verbose_preference, str):
            self._verbose_preference = verbose_preference
        if isinstance(debug_preference, str):
            self._debug_preference = debug_preference
        if exception_action is not None:
            self._exception_action = exception_action

    def reset(self):
        """Restore every runtime setting to its startup default."""
        self.__init__()

    def preference(self, parameter: str) -> str:
        """Get the ambient preference for a diagnostic channel parameter name."""
        return getattr(self, f"_{parameter}_preference", PREFERENCE_SILENTLY_CONTINUE)

    @property
    def quiet(self) -> bool:
        """Get the 'quiet' mode."""
        return self._quiet

    @property
    def yes(self) -> bool:
        """Get the 'yes' mode."""
        return self._yes

    @property
    def verbose_preference(self) -> str:
        """Get the ambient verbose preference."""
        return self._verbose_preference

    @property
    def debug_preference(self) -> str:
        """Get the ambient debug preference."""
        return self._debug_preference

    @property
    def exception_action(self):
        """Get the process-wide exception action override, if any."""
        return self._exception_action


runtime = RuntimeSettings()
