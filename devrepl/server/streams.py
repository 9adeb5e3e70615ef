""" Per-thread redirection of the standard streams.
    Swapping sys.stdout outright (as a single-console redirector would) is no good with several socket clients
    evaluating code at once; each client thread must see its own output stream and nobody else's. """

from contextlib import contextmanager
import sys
from threading import local, Lock
from typing import Iterator, TextIO


class ThreadLocalStream:
    """ Stands in for a standard stream. Writes go to the stream bound on the current thread, if any,
        otherwise to the original. Every other attribute is looked up on whichever stream is current. """

    def __init__(self, default:TextIO) -> None:
        self._default = default  # Original system stream.
        self._local = local()    # Holds the 'stream' attribute on threads that have one bound.

    def current(self) -> TextIO:
        return getattr(self._local, "stream", None) or self._default

    def bind(self, stream:TextIO) -> None:
        self._local.stream = stream

    def unbind(self) -> None:
        self._local.stream = None

    def write(self, text:str) -> int:
        return self.current().write(text)

    def flush(self) -> None:
        self.current().flush()

    def __getattr__(self, name:str):
        return getattr(self.current(), name)


_install_lock = Lock()


def install_proxies() -> None:
    """ Replace sys.stdout and sys.stderr with thread-local proxies. Does nothing if it has been done already. """
    with _install_lock:
        for name in ("stdout", "stderr"):
            stream = getattr(sys, name)
            if not isinstance(stream, ThreadLocalStream):
                setattr(sys, name, ThreadLocalStream(stream))


@contextmanager
def redirected(stream:TextIO) -> Iterator[None]:
    """ Send this thread's standard output and error to <stream> for the duration of the block. """
    install_proxies()
    proxies = [sys.stdout, sys.stderr]
    for p in proxies:
        if isinstance(p, ThreadLocalStream):
            p.bind(stream)
    try:
        yield
    finally:
        for p in proxies:
            if isinstance(p, ThreadLocalStream):
                p.unbind()
