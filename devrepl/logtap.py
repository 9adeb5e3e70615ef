""" Bridge from the standard logging package to the tap sink.
    Every record a logger decides to emit is also sent to tap() as a plain dict, so log traffic shows up
    in whatever viewer is tapped in. Log output itself is unaffected; this is only a side channel.

    The hook point is the log record factory. Loggers only build a record after their level check passes,
    so disabled levels are never tapped, and handler lookup (including logging.lastResort) is left alone. """

from datetime import datetime
import logging
from typing import Any, Callable, Optional

from devrepl import taps

Sink = Callable[[Any], Any]
RecordFactory = Callable[..., logging.LogRecord]


def record_event(record:logging.LogRecord) -> dict:
    """ Build the tapped event for a record. The caller location is whatever the logging package found
        by walking the stack; when that is unavailable, the logger name stands in for the module. """
    if record.exc_info and record.exc_info[1] is not None:
        result = record.exc_info[1]
    else:
        result = record.getMessage()
    # Line 0 means the logging package couldn't find the caller.
    ns = record.module if record.lineno else record.name
    return {"form":    (),
            "level":   record.levelname.lower(),
            "result":  result,
            "ns":      ns,
            "logger":  record.name,
            "file":    record.filename,
            "line":    record.lineno,
            "column":  0,
            "time":    datetime.fromtimestamp(record.created),
            "runtime": "py"}


class TappingRecordFactory:
    """ Wraps the real record factory. The original always builds the record; the tap is only a passenger. """

    def __init__(self, factory:RecordFactory, sink:Sink=None) -> None:
        self.wrapped = factory  # Original record factory.
        self._sink = sink       # Destination for events. Looked up on the taps module at call time if None.

    def __call__(self, *args, **kwargs) -> logging.LogRecord:
        record = self.wrapped(*args, **kwargs)
        try:
            sink = self._sink or taps.tap
            sink(record_event(record))
        except Exception:
            # Tapping is best-effort. A failure here must not disturb the program doing the logging.
            pass
        return record


def install_log_tap(sink:Sink=None) -> TappingRecordFactory:
    """ Install the tapping record factory and return it. If one is already installed, return that one. """
    factory = logging.getLogRecordFactory()
    if isinstance(factory, TappingRecordFactory):
        return factory
    tapping = TappingRecordFactory(factory, sink)
    logging.setLogRecordFactory(tapping)
    return tapping


def remove_log_tap() -> Optional[TappingRecordFactory]:
    """ Restore the record factory that was in place before install_log_tap(). """
    factory = logging.getLogRecordFactory()
    if not isinstance(factory, TappingRecordFactory):
        return None
    logging.setLogRecordFactory(factory.wrapped)
    return factory
