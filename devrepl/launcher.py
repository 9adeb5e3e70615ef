""" The bootstrap routine. Looks at what tooling is installed and starts a REPL.

    Every step is best-effort: a failure in one is logged (or ignored, for optional tools) and the next step
    runs anyway. Whatever happens along the way, the launcher always gets as far as starting some shell. """

from typing import Any, Callable, Optional

from devrepl.logtap import install_log_tap, TappingRecordFactory
from devrepl.namespaces import all_modules, ModuleIndex
from devrepl.options import DevOptions
from devrepl.runtime import DynamicLoader
from devrepl.server import registry
from devrepl.shells import default_candidates, launch, select_shell
from devrepl.util.exception import ExceptionEater, ExceptionReporter
from devrepl.util.log import open_log

Logger = Callable[[str], Any]

RESERVED_SERVER_NAME = "repl"       # A server under this name was started by someone else; leave it be.
SERVER_FRONTENDS = ("ipykernel",    # These provide their own remote access. A socket REPL as well is a waste.
                    "ptpython")
DATE_EXTENSION = "dateutil.parser"
INSPECTION_TOOL = "rich"
LOGGING_FACILITY = "logging"


def setup_loader(options:DevOptions, log:Logger) -> Optional[DynamicLoader]:
    """ Open up the import system so that libraries can be added while the REPL is running. """
    with ExceptionReporter(log, "Unable to establish a dynamic loader!"):
        loader = DynamicLoader(options.lib_dir, cwd=options.cwd)
        loader.install()
        return loader
    return None


def load_extensions(log:Logger) -> bool:
    """ If python-dateutil is installed, load its parser so date strings can be explored at the prompt. """
    with ExceptionEater():
        __import__(DATE_EXTENSION)
        log("Date parsing via dateutil is available...")
        return True
    return False


def server_name(port:int) -> str:
    return f"REPL-{port}"


def start_socket_repl(options:DevOptions, index:ModuleIndex, log:Logger) -> Optional[registry.SocketServer]:
    """ Start a socket REPL server. The port is selected from:
          * SOCKET_REPL_PORT environment variable if present, else
          * the socket-repl-port interpreter option (python -X socket-repl-port=N) if present, else
          * the .socket-repl-port file if present, else
          * 0, which picks any available port.
        The port actually bound is written back to the file for editors to find (and for next time).
        Set SOCKET_REPL_PORT=none, or install ipykernel or ptpython, to suppress the server. """
    if options.socket_port_disabled() or any(index.lookup(m) for m in SERVER_FRONTENDS):
        return None
    if registry.get_server(RESERVED_SERVER_NAME) is not None:
        return None
    with ExceptionReporter(log, "Unable to select a port for the Socket REPL"):
        port = options.socket_port()
        with ExceptionReporter(log, f"Unable to start the Socket REPL on port {port}"):
            server = registry.start_server(server_name(port), port, address=options.address)
            bound_port = server.port
            log(f"Selected port {bound_port} for the Socket REPL...")
            options.write_port_file(bound_port)
            return server
    return None


def setup_log_tap(index:ModuleIndex) -> Optional[TappingRecordFactory]:
    """ If an inspection tool is installed, tap every (enabled) log record in addition to logging it. """
    if not index.lookup(LOGGING_FACILITY):
        return None
    with ExceptionEater():
        __import__(INSPECTION_TOOL)
        return install_log_tap()
    return None


def default_logger(options:DevOptions) -> Logger:
    """ Progress goes to the console, plus the configured log file if there is one.
        A log file that can't be opened is reported on the console, which carries on alone. """
    console_log = open_log()
    if not options.log:
        return console_log
    filename = options.path(options.log)
    with ExceptionReporter(console_log, f"Unable to open the log file {filename}"):
        return open_log(filename)
    return console_log


def start_repl(options:DevOptions=None, log:Logger=None, index:ModuleIndex=None, candidates=None) -> None:
    """ Run every bootstrap step, then select a shell and run it until the session ends. """
    if options is None:
        options = DevOptions()
    if log is None:
        log = default_logger(options)
    if index is None:
        index = all_modules()
    setup_loader(options, log)
    load_extensions(log)
    start_socket_repl(options, index, log)
    setup_log_tap(index)
    if candidates is None:
        candidates = default_candidates(options.build_target)
    name, launcher = select_shell(candidates)
    launch(name, launcher, log)
