#!/usr/bin/env python3

""" Master console script and primary entry point for the dev launcher. Takes no command-line arguments. """

import sys

from devrepl.launcher import default_logger, start_repl
from devrepl.options import DevOptions
from devrepl.runtime import check_version
from devrepl.util.entrypoints import EntryPoint
from devrepl.util.exception import CompositeExceptionHandler, ExceptionEater, ExceptionLogger

DEBUGGER = EntryPoint("debugpy", "connect", "Attach to a debugger listening for the process.")


def connect_debugger(options:DevOptions) -> bool:
    """ If a debugger port is configured and debugpy is installed, connect to the waiting debugger.
        Nobody listening is not an error worth mentioning. """
    port = options.debugger_port
    if port is None:
        return False
    with ExceptionEater():
        DEBUGGER((options.address, int(port)))
        return True
    return False


def main() -> int:
    """ Start a REPL with whatever tooling is installed. The exit status is 0 once the session is over. """
    check_version()
    options = DevOptions()
    log = default_logger(options)
    connect_debugger(options)
    # Anything that escapes the bootstrap (or the shell itself) is written out in full, and the process still
    # ends normally. The version check above is the only thing allowed to fail hard.
    with CompositeExceptionHandler(ExceptionLogger(log), ExceptionEater()):
        start_repl(options, log)
    return 0


if __name__ == '__main__':
    sys.exit(main())
