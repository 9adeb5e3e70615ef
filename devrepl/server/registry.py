""" Process-wide registry of running socket servers, keyed by name. """

from threading import Lock, Thread
from typing import Callable, Dict, Optional

from devrepl.server.repl import repl, REPLHandler
from devrepl.server.tcp import TCPConnection, ThreadedTCPServer

AcceptFn = Callable[[TCPConnection], None]


class SocketServer:
    """ A named TCP server running its accept loop on a daemon thread. Each client gets its own thread. """

    def __init__(self, name:str, accept:AcceptFn=repl) -> None:
        self.name = name
        self._server = ThreadedTCPServer(REPLHandler(accept))
        self._thread = None

    def start(self, address:str, port:int) -> int:
        """ Bind to <address:port>, start serving in the background, and return the actual port. """
        bound_port = self._server.bind(address, port)
        self._thread = Thread(target=self._server.serve_forever, name=self.name, daemon=True)
        self._thread.start()
        return bound_port

    @property
    def port(self) -> int:
        return self._server.port

    def stop(self, timeout:float=None) -> None:
        self._server.shutdown()
        if self._thread is not None:
            self._thread.join(timeout)

    def __repr__(self) -> str:
        return f"<SocketServer {self.name!r}>"


servers: Dict[str, SocketServer] = {}  # Every running server by name. Treat as read-only outside this module.
_lock = Lock()


def get_server(name:str) -> Optional[SocketServer]:
    return servers.get(name)


def start_server(name:str, port:int, accept:AcceptFn=repl, address="127.0.0.1") -> SocketServer:
    """ Start a socket server and register it under <name>. Port 0 lets the OS choose.
        Raises ValueError if the name is taken, or OSError if the port can't be bound. """
    with _lock:
        if name in servers:
            raise ValueError(f"Server already exists: {name}")
        server = SocketServer(name, accept)
        server.start(address, port)
        servers[name] = server
        return server


def stop_server(name:str) -> bool:
    """ Stop the server registered under <name>. Return True if there was one. """
    with _lock:
        server = servers.pop(name, None)
    if server is None:
        return False
    server.stop()
    return True


def stop_servers() -> None:
    for name in list(servers):
        stop_server(name)
