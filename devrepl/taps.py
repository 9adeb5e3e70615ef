""" A general-purpose inspection sink. Any code may send a value with tap(); any number of tap functions
    (a pretty-printer, a data browser, a list that collects things) may be registered to receive them.
    Values are delivered on a single background thread so the sender never waits on a slow viewer. """

from queue import Full, Queue
from threading import Lock, Thread
from typing import Any, Callable, List

TapFn = Callable[[Any], Any]

QUEUE_SIZE = 1024  # Values waiting for delivery. Anything sent past this is dropped.


class TapSink:
    """ Delivers tapped values to every registered function, in order of registration. """

    def __init__(self, maxsize=QUEUE_SIZE) -> None:
        self._queue = Queue(maxsize)  # Values waiting for delivery.
        self._taps: List[TapFn] = []  # Registered tap functions. Replaced, never mutated, so the loop can iterate it.
        self._lock = Lock()
        self._thread = None           # Delivery thread, started with the first registration.

    def add(self, fn:TapFn) -> None:
        with self._lock:
            if fn not in self._taps:
                self._taps = [*self._taps, fn]
            if self._thread is None:
                self._thread = Thread(target=self._run, name="tap-loop", daemon=True)
                self._thread.start()

    def remove(self, fn:TapFn) -> None:
        with self._lock:
            self._taps = [t for t in self._taps if t != fn]

    def send(self, value:Any) -> bool:
        """ Queue <value> without blocking. Return False if it was dropped because the queue is full.
            With no taps registered, the value goes nowhere; a tap added later never sees a backlog. """
        if not self._taps:
            return True
        try:
            self._queue.put_nowait(value)
            return True
        except Full:
            return False

    def _run(self) -> None:
        while True:
            value = self._queue.get()
            for fn in self._taps:
                try:
                    fn(value)
                except Exception:
                    # A broken viewer must not stop delivery to the others.
                    continue


_sink = TapSink()


def add_tap(fn:TapFn) -> None:
    """ Register <fn> to receive every tapped value. Registering the same function twice has no effect. """
    _sink.add(fn)


def remove_tap(fn:TapFn) -> None:
    _sink.remove(fn)


def tap(value:Any) -> bool:
    """ Send <value> to every registered tap function. Return False if the value was dropped. """
    return _sink.send(value)
