"""
Function entry/exit tracing on the debug channel.

Trace lines are a fixed-width rule around the function name, for example:

    --> publish_wheel -------------------------------------------------------
    <-- publish_wheel -------------------------------------------------------

Tracing never interrupts the traced function. Any error raised while
tracing is reported as a warning and otherwise ignored.
"""

import functools
import inspect

from modkitctl import diagnostics, faults, settings

# trace_enter/trace_exit -> _trace -> _calling_function_name
_CALLER_DEPTH = 3


def format_trace_line(arrow: str, name: str) -> str:
    """Format a trace line padded to the trace rule width."""
    fill = settings.TRACE_RULE_GLYPH * max(0, settings.TRACE_RULE_WIDTH - len(name))
    return f"{arrow} {name} {fill}"


def _calling_function_name() -> str:
    frame = inspect.currentframe()
    try:
        for __ in range(_CALLER_DEPTH):
            frame = frame.f_back
        return getattr(frame.f_code, "co_qualname", frame.f_code.co_name)
    finally:
        del frame


def _trace(arrow: str, name: str | None) -> None:
    try:
        if not diagnostics.is_active(diagnostics.DiagnosticChannel.DEBUG):
            return
        if name is None:
            name = _calling_function_name()
        diagnostics.diagnostic_logger.debug("%s", format_trace_line(arrow, name))
    except Exception:  # noqa: BLE001
        faults.report_fault(action=faults.ExceptionAction.CONTINUE)


def trace_enter(name: str | None = None) -> None:
    """Log a function entry line if the debug channel is active."""
    _trace(settings.TRACE_ENTER_ARROW, name)


def trace_exit(name: str | None = None) -> None:
    """Log a function exit line if the debug channel is active."""
    _trace(settings.TRACE_EXIT_ARROW, name)


def traced(func):
    """Register the decorated function's calls and trace their entry and exit.

    The exit line is logged even when the function raises.
    """
    signature = inspect.signature(func)
    name = func.__qualname__

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        bound_parameters = diagnostics.bind_parameters(signature, args, kwargs)
        with diagnostics.call_frame(name, bound_parameters):
            trace_enter(name)
            try:
                return func(*args, **kwargs)
            finally:
                trace_exit(name)

    return wrapper
