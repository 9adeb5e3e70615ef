import os
import sys
from typing import Mapping, Optional

from devrepl.runtime import DEFAULT_LIB_DIR
from devrepl.util.config import first_present, parse_int, SimpleConfigDict

PORT_ENV_VAR = "SOCKET_REPL_PORT"       # Environment variable with a port number (or "none").
PORT_XOPTION = "socket-repl-port"       # Interpreter option, as in: python -X socket-repl-port=5555
PORT_DISABLED = "none"                  # Exact value of the environment variable that suppresses the server.
CONFIG_FILENAME = ".devrepl.cfg"        # Optional CFG file in the working directory.
CONFIG_SECTION = "devrepl"


class DevOptions:
    """ Gathers every configuration source the launcher looks at.
        There are no command-line options; everything comes from the environment, interpreter -X options,
        and files in the working directory. Each source may be replaced for testing. """

    DEFAULTS = {"address":       "127.0.0.1",          # Interface for the socket REPL to bind.
                "build_target":  "dev",                # Environment name for the build tool's shell.
                "port_file":     ".socket-repl-port",  # Cache of the last bound socket REPL port.
                "log":           None,                 # Extra text file to log progress to.
                "debugger_port": None,                 # Port of a listening debugger to connect to.
                "lib_dir":       DEFAULT_LIB_DIR}      # Target directory for libraries added at runtime.

    # Values in .devrepl.cfg go through literal_eval. These must stay text even when they look like numbers.
    TEXT_OPTIONS = frozenset(["address", "build_target", "port_file", "log", "lib_dir"])

    def __init__(self, environ:Mapping[str, str]=None, xoptions:Mapping[str, object]=None, cwd:str=None) -> None:
        self.environ = os.environ if environ is None else environ
        self.xoptions = sys._xoptions if xoptions is None else xoptions
        self.cwd = cwd or os.getcwd()
        self._cfg = SimpleConfigDict(self.path(CONFIG_FILENAME), CONFIG_SECTION)
        self._cfg.read()

    def __getattr__(self, name:str):
        if name not in self.DEFAULTS:
            raise AttributeError(f'"{name}" is not the name of a valid launcher option.')
        value = self._cfg.get(name, self.DEFAULTS[name])
        if value is not None and name in self.TEXT_OPTIONS:
            value = str(value)
        return value

    def path(self, filename:str) -> str:
        """ Return the full path of a file in the working directory. """
        return os.path.join(self.cwd, filename)

    def port_file_path(self) -> str:
        return self.path(self.port_file)

    def socket_port_disabled(self) -> bool:
        return self.environ.get(PORT_ENV_VAR) == PORT_DISABLED

    def read_port_file(self) -> Optional[str]:
        """ Return the stripped contents of the port cache file, or None if it can't be read. """
        try:
            with open(self.port_file_path(), 'r', encoding='utf-8') as fp:
                return fp.read().strip()
        except (OSError, UnicodeDecodeError):
            return None

    def write_port_file(self, port:int) -> None:
        """ Record the bound port for editors and other tools that want to connect later. """
        with open(self.port_file_path(), 'w', encoding='utf-8') as fp:
            fp.write(str(port))

    def socket_port(self) -> int:
        """ Select the socket REPL port: environment, then -X option, then cache file, then 0 (any free port). """
        xopt = self.xoptions.get(PORT_XOPTION)
        return first_present(parse_int(self.environ.get(PORT_ENV_VAR)),
                             parse_int(xopt if isinstance(xopt, str) else None),
                             parse_int(self.read_port_file()),
                             default=0)
