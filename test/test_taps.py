""" Tests for the tap sink and the logging bridge into it. """

import logging
import threading

import pytest

from devrepl import logtap, taps
from devrepl.logtap import install_log_tap, record_event, remove_log_tap, TappingRecordFactory
from devrepl.taps import TapSink

from . import wait_for


def test_tap_delivery() -> None:
    sink = TapSink()
    first, second = [], []
    def broken(value):
        raise ValueError("viewer crashed")
    sink.add(first.append)
    sink.add(broken)
    sink.add(second.append)
    sink.add(first.append)
    for i in range(5):
        assert sink.send(i)
    assert wait_for(lambda: len(second) == 5)
    # A tap registered twice still gets each value once; a broken tap doesn't stop the others.
    assert first == second == [0, 1, 2, 3, 4]
    sink.remove(first.append)
    sink.send("after")
    assert wait_for(lambda: len(second) == 6)
    assert first == [0, 1, 2, 3, 4]


def test_tap_queue_full() -> None:
    """ With the only tap stuck, values pile up to the limit and then get dropped. """
    sink = TapSink(maxsize=2)
    release = threading.Event()
    sink.add(lambda value: release.wait(5.0))
    try:
        # The delivery thread may or may not have taken the first value yet, so one of the last two must fail.
        results = [sink.send(i) for i in range(4)]
        assert results[:2] == [True, True]
        assert not all(results)
    finally:
        release.set()


def test_no_backlog_without_taps() -> None:
    """ Values sent before anyone is listening are not delivered to a tap added later. """
    sink = TapSink()
    assert sink.send("early")
    received = []
    sink.add(received.append)
    sink.send("late")
    assert wait_for(lambda: received == ["late"])
    assert received == ["late"]


def test_module_taps() -> None:
    received = []
    taps.add_tap(received.append)
    try:
        assert taps.tap({"x": 1})
        assert wait_for(lambda: received == [{"x": 1}])
    finally:
        taps.remove_tap(received.append)


@pytest.fixture
def tapped():
    """ Install the logging bridge with a plain list as the sink, and take it out again afterwards. """
    events = []
    original = logging.getLogRecordFactory()
    factory = install_log_tap(events.append)
    yield factory, events
    logging.setLogRecordFactory(original)


def test_log_tap_events(tapped, caplog) -> None:
    factory, events = tapped
    logger = logging.getLogger("devrepl.test.logtap")
    logger.setLevel(logging.INFO)
    with caplog.at_level(logging.INFO, logger="devrepl.test.logtap"):
        logger.debug("not enabled")
        logger.info("hello %s", "world")
    # Logging itself is unchanged.
    assert [r.getMessage() for r in caplog.records] == ["hello world"]
    # Disabled levels never even make a record, so only one event is tapped.
    assert len(events) == 1
    event = events[0]
    assert event["level"] == "info"
    assert event["result"] == "hello world"
    assert event["ns"] == "test_taps"
    assert event["logger"] == "devrepl.test.logtap"
    assert event["file"] == "test_taps.py"
    assert event["line"] > 0
    assert event["column"] == 0
    assert event["runtime"] == "py"


def test_log_tap_exception(tapped) -> None:
    factory, events = tapped
    logger = logging.getLogger("devrepl.test.logtap.exc")
    logger.setLevel(logging.ERROR)
    try:
        raise KeyError("missing")
    except KeyError:
        logger.exception("lookup failed")
    assert len(events) == 1
    assert events[0]["level"] == "error"
    assert isinstance(events[0]["result"], KeyError)


def test_log_tap_install_once(tapped) -> None:
    factory, events = tapped
    assert install_log_tap() is factory
    assert remove_log_tap() is factory
    assert not isinstance(logging.getLogRecordFactory(), TappingRecordFactory)
    assert remove_log_tap() is None


def test_log_tap_survives_broken_sink() -> None:
    def broken(event):
        raise RuntimeError("sink is down")
    factory = TappingRecordFactory(logging.LogRecord, broken)
    record = factory("name", logging.WARNING, __file__, 10, "msg %d", (1,), None)
    assert record.getMessage() == "msg 1"


def test_record_event_without_caller() -> None:
    record = logging.LogRecord("some.logger", logging.WARNING, "(unknown file)", 0, "msg", None, None)
    assert record_event(record)["ns"] == "some.logger"


def test_default_sink_is_tap(monkeypatch) -> None:
    sent = []
    monkeypatch.setattr(logtap.taps, "tap", sent.append)
    factory = TappingRecordFactory(logging.LogRecord)
    factory("name", logging.WARNING, __file__, 10, "msg", None, None)
    assert sent and sent[0]["result"] == "msg"
