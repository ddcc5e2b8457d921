"""
Decide whether the verbose or debug diagnostic channel is active.

A channel is resolved from an InvocationContext, first match wins:

    1. an explicit boolean for the channel (terminal, even when False)
    2. the channel's environment variable set to a truthy string
    3. the ambient preference for the channel equal to "Continue"
    4. an explicit boolean bound by the immediate caller (terminal)
    5. the channel's flag token among the immediate caller's raw arguments
    6. otherwise inactive

Functions register themselves in a thread-local stack of CallFrames with the
`command` decorator or the `call_frame` context manager. When no context is
given, the top of that stack is the function asking and the frame directly
under it is its caller. Only that one level is ever inspected.
"""

import contextlib
import dataclasses
import functools
import inspect
import logging
import os
import threading
import types
from collections.abc import Iterator, Mapping
from enum import Enum
from typing import Any

from modkitctl import faults, settings, shell_utils

diagnostic_logger = logging.getLogger(settings.DIAGNOSTICS_LOGGER_NAME)
# The resolver, not the log level, decides whether diagnostics are shown.
diagnostic_logger.setLevel(logging.DEBUG)

_local = threading.local()


class DiagnosticChannel(Enum):
    """Enumeration of diagnostic output channels."""

    VERBOSE = "verbose"
    DEBUG = "debug"

    @property
    def parameter(self) -> str:
        """Get the parameter name that explicitly switches this channel."""
        return self.value

    @property
    def env_var(self) -> str:
        """Get the environment variable that switches this channel on."""
        if self is DiagnosticChannel.VERBOSE:
            return settings.VERBOSE_ENV_VAR
        return settings.DEBUG_ENV_VAR

    @property
    def flag_tokens(self) -> tuple[str, ...]:
        """Get the raw command-line tokens that switch this channel on."""
        return (f"--{self.value}",)


class DiagnosticState(Enum):
    """Enumeration of resolved channel states."""

    ACTIVE = "active"
    INACTIVE = "inactive"

    def __bool__(self) -> bool:
        return self is DiagnosticState.ACTIVE

    @classmethod
    def from_bool(cls, value: bool) -> "DiagnosticState":
        return cls.ACTIVE if value else cls.INACTIVE


@dataclasses.dataclass(frozen=True)
class CallFrame:
    """A function invocation as seen by the resolver."""

    name: str
    bound_parameters: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    unbound_arguments: tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(
            self, "bound_parameters", types.MappingProxyType(dict(self.bound_parameters))
        )
        object.__setattr__(self, "unbound_arguments", tuple(self.unbound_arguments))


@dataclasses.dataclass(frozen=True)
class InvocationContext:
    """Read-only inputs for resolving one diagnostic channel."""

    explicit: bool | None = None
    environment: str | None = None
    preference: str | None = None
    caller: CallFrame | None = None


def _frames() -> list[CallFrame]:
    frames = getattr(_local, "frames", None)
    if frames is None:
        frames = _local.frames = []
    return frames


def push_frame(frame: CallFrame) -> CallFrame:
    """Push a frame onto this thread's call frame stack."""
    _frames().append(frame)
    return frame


def pop_frame() -> CallFrame:
    """Pop the most recently pushed frame."""
    return _frames().pop()


def current_frame() -> CallFrame | None:
    """Get the frame of the function currently running, if registered."""
    frames = _frames()
    return frames[-1] if frames else None


def caller_frame() -> CallFrame | None:
    """Get the frame directly under the current one, if any."""
    frames = _frames()
    return frames[-2] if len(frames) > 1 else None


def clear_frames():
    """Forget every frame registered on this thread."""
    _frames().clear()


@contextlib.contextmanager
def call_frame(
    name: str,
    bound_parameters: Mapping[str, Any] | None = None,
    unbound_arguments: tuple[str, ...] = (),
) -> Iterator[CallFrame]:
    """Register a call frame for the duration of the with block."""
    frame = push_frame(CallFrame(name, bound_parameters or {}, unbound_arguments))
    try:
        yield frame
    finally:
        pop_frame()


def bind_parameters(
    signature: inspect.Signature, args: tuple, kwargs: dict
) -> dict[str, Any]:
    """Get only the parameters a call passed explicitly, without defaults."""
    bound = signature.bind_partial(*args, **kwargs).arguments
    parameters = {}
    for name, value in bound.items():
        if signature.parameters[name].kind is inspect.Parameter.VAR_KEYWORD:
            parameters.update(value)
        else:
            parameters[name] = value
    return parameters


def command(func):
    """Register each call of the decorated function as a call frame."""
    signature = inspect.signature(func)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with call_frame(func.__qualname__, bind_parameters(signature, args, kwargs)):
            return func(*args, **kwargs)

    return wrapper


def _explicit_flag(parameters: Mapping[str, Any], channel: DiagnosticChannel):
    value = parameters.get(channel.parameter)
    return value if isinstance(value, bool) else None


def capture_context(channel: DiagnosticChannel) -> InvocationContext:
    """Build the context for the function on top of the call frame stack."""
    explicit = None
    caller = None
    try:
        if (frame := current_frame()) is not None:
            explicit = _explicit_flag(frame.bound_parameters, channel)
        caller = caller_frame()
    except Exception:  # noqa: BLE001
        faults.report_fault(action=faults.ExceptionAction.CONTINUE)
        explicit, caller = None, None
    return InvocationContext(
        explicit=explicit,
        environment=os.environ.get(channel.env_var),
        preference=settings.runtime.preference(channel.parameter),
        caller=caller,
    )


def resolve_channel_state(
    channel: DiagnosticChannel, context: InvocationContext | None = None
) -> DiagnosticState:
    """Resolve whether a diagnostic channel is active."""
    if context is None:
        context = capture_context(channel)

    if isinstance(context.explicit, bool):
        return DiagnosticState.from_bool(context.explicit)
    if shell_utils.is_truthy(context.environment):
        return DiagnosticState.ACTIVE
    if context.preference == settings.PREFERENCE_CONTINUE:
        return DiagnosticState.ACTIVE

    caller = context.caller
    if caller is None:
        return DiagnosticState.INACTIVE
    if (flag := _explicit_flag(caller.bound_parameters, channel)) is not None:
        return DiagnosticState.from_bool(flag)
    if any(token in caller.unbound_arguments for token in channel.flag_tokens):
        return DiagnosticState.ACTIVE
    return DiagnosticState.INACTIVE


def is_active(
    channel: DiagnosticChannel, context: InvocationContext | None = None
) -> bool:
    """Return True if the channel resolves to ACTIVE."""
    return bool(resolve_channel_state(channel, context))


def emit_verbose(message: str, *args: Any) -> None:
    """Log a message on the diagnostics logger if the verbose channel is active."""
    if is_active(DiagnosticChannel.VERBOSE):
        diagnostic_logger.info(message, *args)


def emit_debug(message: str, *args: Any) -> None:
    """Log a message on the diagnostics logger if the debug channel is active."""
    if is_active(DiagnosticChannel.DEBUG):
        diagnostic_logger.debug(message, *args)
