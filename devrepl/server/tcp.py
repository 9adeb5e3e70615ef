""" Module for creating and listening to TCP/IP socket connections. """

from io import BufferedReader, RawIOBase
from select import select
from socket import socket, SHUT_WR, SO_REUSEADDR, SOL_SOCKET
from threading import Thread
from typing import BinaryIO


class TCPConnection:
    """ Data structure for an open TCP connection (in the server role). """

    def __init__(self, stream:BinaryIO, addr:str, port:int) -> None:
        self.stream = stream  # Raw binary I/O stream.
        self.addr = addr      # Client IP address.
        self.port = port      # Client TCP port.


class TCPConnectionHandler:
    """ Interface for a handler of incoming TCP client connections. """

    def handle_connection(self, conn:TCPConnection) -> None:
        """ Handle a TCP connection for its entire duration. It will be closed when this method exits. """
        raise NotImplementedError


class _SocketReader(RawIOBase):
    """ Aliases socket reading functions to match I/O methods. """

    def __init__(self, sock:socket) -> None:
        super().__init__()
        self.readinto = sock.recv_into

    def readable(self) -> bool:
        return True


class _SocketStream(BufferedReader, BinaryIO):
    """ A raw socket connection which sends/receives data as a binary I/O stream.
        The I/O reader is line-buffered; the writer is raw. """

    def __init__(self, sock:socket) -> None:
        super().__init__(_SocketReader(sock))
        self._sock = sock

    def write(self, data:bytes) -> int:
        self._sock.sendall(data)
        return len(data)

    def writable(self) -> bool:
        return True

    def close(self) -> None:
        super().close()
        try:
            self._sock.shutdown(SHUT_WR)
        except OSError:
            pass
        self._sock.close()


class TCPServerSocket(socket):
    """ TCP socket subclass to poll for and accept connections using a basic selector. """

    def poll(self, timeout:float) -> bool:
        """ Wait for <timeout> seconds and return True if a connection becomes ready for acceptance. """
        try:
            return bool(select([self.fileno()], [], [], timeout)[0])
        except (InterruptedError, OSError, ValueError):
            return False

    def accept_connection(self) -> TCPConnection:
        """ Connect to the client and return an I/O stream along with the client's IP address and TCP port. """
        sock, (addr, port, *_) = self.accept()
        sock.settimeout(None)
        stream = _SocketStream(sock)
        return TCPConnection(stream, addr, port)

    def __enter__(self) -> "TCPServerSocket":
        return self

    def __exit__(self, *args) -> None:
        self.close()


class TCPServer:
    """ Simple TCP/IP stream server using sockets. Binding and serving are separate steps,
        so the caller can find out which port the OS picked before anything starts blocking. """

    def __init__(self, handler:TCPConnectionHandler, *, timeout=0.5) -> None:
        self._handler = handler  # Handler of TCP/IP connections.
        self._timeout = timeout  # Timeout in seconds to poll for new socket connections.
        self._running = False    # True once the polling loop has been entered.
        self._stopping = False   # State variable. When set to True, the server stops after its current polling cycle.
        self._sock = None        # Listening socket, created by bind().

    def bind(self, address:str, port:int) -> int:
        """ Make a server socket object bound to <address:port> and activate it. Return the actual port.
            Port 0 means the OS picks any free port. """
        if self._sock is not None:
            raise RuntimeError("Server already bound.")
        sock = TCPServerSocket()
        try:
            sock.setsockopt(SOL_SOCKET, SO_REUSEADDR, 1)
            sock.bind((address, port))
            sock.listen()
        except OSError:
            sock.close()
            raise
        self._sock = sock
        return self.port

    @property
    def port(self) -> int:
        return self._sock.getsockname()[1]

    def serve_forever(self) -> None:
        """ Poll the socket for connections until another thread calls shutdown(). """
        if self._running:
            raise RuntimeError("Server already running.")
        self._running = True
        with self._sock as sock:
            while not self._stopping:
                if sock.poll(self._timeout):
                    try:
                        conn = sock.accept_connection()
                    except OSError:
                        continue
                    self.connect(conn)

    def connect(self, conn:TCPConnection) -> None:
        """ Send a newly established TCP connection to the connection handler. Close it when finished. """
        with conn.stream:
            self._handler.handle_connection(conn)

    def shutdown(self) -> None:
        """ Halt serving and close any open sockets and files. Must be called by another thread. """
        self._stopping = True


class ThreadedTCPServer(TCPServer):
    """ Handles each connection with a new thread. The handler must be thread-safe. """

    def connect(self, *args) -> None:
        Thread(target=super().connect, args=args, daemon=True).start()
