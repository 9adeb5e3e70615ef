""" Accept function for socket REPL connections: a standard interactive console running over the socket. """

from code import InteractiveConsole
import io
import sys

from devrepl.console import override_code_excepthook
from devrepl.server.streams import redirected
from devrepl.server.tcp import TCPConnection, TCPConnectionHandler

BANNER = f"devrepl socket REPL - Python {sys.version}"


class SessionExit:
    """ Replaces the exit() and quit() builtins for socket clients. The builtins close sys.stdin on the way out,
        and that stream belongs to the host's own shell. """

    def __init__(self, name:str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return f"Use {self._name}() or Ctrl-D to close this connection."

    def __call__(self, code=None):
        raise SystemExit(code)


# Every connection evaluates in the same globals, so definitions made by one client are visible to the next.
SHARED_NAMESPACE = {"__name__": "__console__", "__doc__": None,
                    "exit": SessionExit("exit"), "quit": SessionExit("quit")}


class SocketWriter(io.TextIOBase):
    """ Write-only text stream that encodes straight onto the connection. Reads go through a separate wrapper;
        a TextIOWrapper that is written to throws away whatever it had read ahead. """

    def __init__(self, stream, encoding='utf-8') -> None:
        super().__init__()
        self._stream = stream      # Binary connection stream.
        self._encoding = encoding

    @property
    def encoding(self) -> str:
        return self._encoding

    def writable(self) -> bool:
        return True

    def write(self, text:str) -> int:
        self._stream.write(text.encode(self._encoding, 'replace'))
        return len(text)


class SocketConsole(InteractiveConsole):
    """ Interactive console that reads lines from one text stream, and writes prompts, results and tracebacks
        to another. """

    def __init__(self, reader:io.TextIOBase, writer:io.TextIOBase, namespace:dict=None) -> None:
        super().__init__(SHARED_NAMESPACE if namespace is None else namespace, filename="<socket>")
        self._reader = reader
        self._writer = writer

    def raw_input(self, prompt="") -> str:
        """ A client hanging up looks just like Ctrl-D. """
        self.write(prompt)
        line = self._reader.readline()
        if not line:
            raise EOFError
        return line.rstrip("\r\n")

    def write(self, data:str) -> None:
        try:
            self._writer.write(data)
            self._writer.flush()
        except (OSError, ValueError):
            # The client is gone. The next read will end the session.
            pass


def open_reader(conn:TCPConnection) -> io.TextIOWrapper:
    """ Read-only text view of the connection. Multiple lines sent in one packet stay buffered here. """
    return io.TextIOWrapper(conn.stream, encoding='utf-8', errors='replace', newline=None)


def repl(conn:TCPConnection, namespace:dict=None) -> None:
    """ Run a read-eval-print loop for a single client until it disconnects or calls exit(). """
    override_code_excepthook()
    reader = open_reader(conn)
    writer = SocketWriter(conn.stream)
    console = SocketConsole(reader, writer, namespace)
    with redirected(writer):
        try:
            console.interact(banner=BANNER, exitmsg="")
        except SystemExit:
            # exit() ends this client's session, not the whole process.
            pass
    try:
        reader.detach()
    except (OSError, ValueError):
        pass


class REPLHandler(TCPConnectionHandler):
    """ Adapts an accept function to the TCP server's handler interface. """

    def __init__(self, accept=repl) -> None:
        self._accept = accept

    def handle_connection(self, conn:TCPConnection) -> None:
        self._accept(conn)
