"""Report caught faults as warnings, suppress them, or escalate them.

The same call site can be fatal in interactive use, silent in a suppressed
test run, and a non-fatal warning by default. Which of those happens is
decided by an ExceptionAction resolved in this order:

    1. the action passed to report_fault()
    2. the process-wide override in settings.runtime.exception_action
    3. ExceptionAction.CONTINUE
"""

import dataclasses
import logging
import sys
import traceback
from enum import Enum
from gettext import gettext as _

from modkitctl import settings

logger = logging.getLogger(__name__)


class ExceptionAction(Enum):
    """Enumeration of ways to handle a reported fault."""

    CONTINUE = "Continue"
    SILENTLY_CONTINUE = "SilentlyContinue"
    STOP = "Stop"
    ABORT = "Abort"

    @property
    def severity(self) -> int:
        """Get the logging level used when this action is reported."""
        return {
            ExceptionAction.CONTINUE: logging.WARNING,
            ExceptionAction.SILENTLY_CONTINUE: logging.NOTSET,
            ExceptionAction.STOP: logging.ERROR,
            ExceptionAction.ABORT: logging.CRITICAL,
        }[self]

    @property
    def is_fatal(self) -> bool:
        """Return True if this action escalates instead of returning."""
        return self not in (ExceptionAction.CONTINUE, ExceptionAction.SILENTLY_CONTINUE)

    @classmethod
    def parse(cls, value: "str | ExceptionAction") -> "ExceptionAction":
        """Get the action matching a value or member name, ignoring case."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().replace("_", "").replace("-", "").lower()
        for action in cls:
            if normalized == action.value.lower():
                return action
        raise ValueError(
            _("invalid exception action: '%(value)s' (choose from %(choices)s)")
            % {
                "value": value,
                "choices": ", ".join(action.value for action in cls),
            }
        )


@dataclasses.dataclass(frozen=True)
class FaultReport:
    """A caught error reduced to its message and stack trace text."""

    message: str
    stack_trace: str = ""
    error: BaseException | None = None

    @classmethod
    def from_exception(cls, error: BaseException) -> "FaultReport":
        """Build a report from an exception and its traceback."""
        message = str(error) or type(error).__name__
        stack_trace = "".join(traceback.format_tb(error.__traceback__)).rstrip()
        return cls(message=message, stack_trace=stack_trace, error=error)


class FatalFaultError(Exception):
    """Exception raised when a reported fault is escalated."""

    def __init__(self, message: str, *, action: ExceptionAction, report: FaultReport):
        super().__init__(message)
        self.action = action
        self.report = report


def resolve_exception_action(
    action: "str | ExceptionAction | None" = None,
) -> ExceptionAction:
    """Get the action to use for a fault reported right now."""
    if action is not None:
        return ExceptionAction.parse(action)
    if (override := settings.runtime.exception_action) is not None:
        return ExceptionAction.parse(override)
    return ExceptionAction.CONTINUE


def resolve_fault(
    fault: "FaultReport | BaseException | None" = None,
) -> FaultReport | None:
    """Get a FaultReport for the given fault or the exception being handled."""
    if isinstance(fault, FaultReport):
        return fault
    if isinstance(fault, BaseException):
        return FaultReport.from_exception(fault)
    if (handled := sys.exc_info()[1]) is not None:
        return FaultReport.from_exception(handled)
    return None


def format_fault(report: FaultReport) -> list[str]:
    """Format a fault as a delimited block of lines."""
    width = settings.FAULT_RULE_WIDTH
    glyph = settings.FAULT_RULE_GLYPH
    header = f"{glyph * 4} {settings.FAULT_HEADER} "
    header += glyph * max(0, width - len(header))
    return [
        header,
        report.message,
        report.stack_trace or _("No stack trace available."),
        glyph * width,
    ]


def report_fault(
    fault: "FaultReport | BaseException | None" = None,
    action: "str | ExceptionAction | None" = None,
) -> None:
    """
    Report a fault according to the resolved ExceptionAction.

    With no fault given, the exception currently being handled is used.

    Raises:
        FatalFaultError: If the resolved action is fatal (STOP or ABORT).
    """
    report = resolve_fault(fault)
    if report is None:
        logger.debug(_("No fault to report."))
        return

    resolved_action = resolve_exception_action(action)
    if resolved_action is ExceptionAction.SILENTLY_CONTINUE:
        return
    if resolved_action is ExceptionAction.CONTINUE:
        for line in format_fault(report):
            logger.warning("%s", line)
        return

    raise FatalFaultError(
        report.message, action=resolved_action, report=report
    ) from report.error
