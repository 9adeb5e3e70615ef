""" Exception handlers for the launcher's best-effort steps. Each one doubles as a 'with' block guard. """

from traceback import format_exception
from types import TracebackType
from typing import Any, Callable, Optional, Type

Logger = Callable[[str], Any]


class ExceptionHandler:
    """ Generic exception handler. Same signature as __exit__.
        Should return True if the exception was handled. In a 'with' block, handled exceptions are suppressed.
        Only subclasses of Exception are offered to the handler; interrupts and exits always get through. """

    def __call__(self, exc_type:Type[BaseException], exc:BaseException, tb:Optional[TracebackType]) -> bool:
        raise NotImplementedError

    def __enter__(self) -> "ExceptionHandler":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None or not issubclass(exc_type, Exception):
            return False
        return bool(self(exc_type, exc, tb))


class ExceptionEater(ExceptionHandler):
    """ GULP. Absence of an optional tool is the common case, so nothing is said about it. """

    def __call__(self, *_) -> bool:
        return True


class ExceptionReporter(ExceptionHandler):
    """ Writes a header line and the bare exception message to a logger, then counts the exception as handled. """

    def __init__(self, logger:Logger, header:str) -> None:
        self._logger = logger  # String logger callable. Its return value is ignored.
        self._header = header  # Context line explaining what was being attempted.

    def __call__(self, exc_type, exc, tb) -> bool:
        self._logger(self._header)
        self._logger(str(exc))
        return True


class ExceptionLogger(ExceptionHandler):
    """ Writes exception tracebacks to arbitrary callables. """

    def __init__(self, logger:Logger, *, max_frames=20) -> None:
        self._logger = logger          # String logger callable. Its return value is ignored.
        self._max_frames = max_frames  # Maximum number of stack frames to write.

    def __call__(self, exc_type, exc, tb) -> bool:
        """ Write the stack trace to the logger. This does *not* count as handling the exception. """
        tb_lines = format_exception(exc_type, exc, tb, limit=self._max_frames)
        self._logger("".join(tb_lines))
        return False


class CompositeExceptionHandler(ExceptionHandler):
    """ Delegates exception handling to other handlers in order of addition. """

    def __init__(self, *handlers:ExceptionHandler) -> None:
        self._handlers = [*handlers]  # List of all child exception handler callbacks.

    def add(self, handler:ExceptionHandler) -> None:
        """ Add a new callback to receive the exception. """
        self._handlers.append(handler)

    def __call__(self, *args) -> bool:
        """ Call each exception handler in turn until one (if any) returns True. """
        for handle_exception in self._handlers:
            if handle_exception(*args):
                return True
        return False
