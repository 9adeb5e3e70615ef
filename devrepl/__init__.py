""" Development launcher for Python's interactive shell. It looks at what tooling is installed and starts a REPL:

    namespaces - Which tools are installed is decided by scanning sys.path once for top-level modules.
    Nothing is imported just to find out whether it exists.

    runtime - Process age, the interpreter version check, and a dynamic loader that keeps the import system
    open to libraries installed after startup (see add_libs).

    options - All configuration comes from the environment, -X interpreter options, and files in the working
    directory (.devrepl.cfg and the .socket-repl-port cache). There are no command-line options.

    server - A socket REPL server so that editors and other tools can evaluate code inside the running process.
    The port actually bound is written to .socket-repl-port for them to find.

    taps, logtap - A general-purpose inspection sink, and an optional bridge that copies every log record into it.

    shells - The shell itself is the first one available of: a Hatch environment shell, ptpython, an IPython
    kernel (with extensions if possible), and finally the plain Python console.

    launcher - Runs the steps above in order. Each one is best-effort; whatever fails, a shell still starts.

    __main__ - Entry point. Runs the launcher and exits with status 0 when the shell session ends. """

__version__ = "1.0.0"
