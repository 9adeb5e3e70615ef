""" Package for the socket REPL server. Any client that can open a TCP connection (netcat, an editor plugin)
    can evaluate Python code inside the running process through it. """

from .registry import get_server, servers, start_server, stop_server, stop_servers
