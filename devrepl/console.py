""" The plain Python console: what runs when no better shell is installed. """

import code
import inspect
import sys

BANNER = f"devrepl console - Python {sys.version}\n" \
         f"Type 'dir()' to see the development helpers and other globals."


class Proxy:
    """ Wrapper for setting attributes without affecting the original object. """

    def __init__(self, obj:object) -> None:
        self.__obj = obj

    def __getattr__(self, name:str):
        return getattr(self.__obj, name)


def override_code_excepthook() -> None:
    """ The code module handles exceptions rather stupidly based on the identity of sys.excepthook:
          - sys.excepthook is sys.__excepthook__: ignore it and print the traceback manually.
          - sys.excepthook is not sys.__excepthook__: call it and let exceptions out of the sandbox.
        This behavior can only be overridden by wrapping its global reference to sys. """
    if code.sys.excepthook is not sys.__excepthook__:
        code.sys = sys_proxy = Proxy(sys)
        sys_proxy.excepthook = sys.__excepthook__


class xhelp:
    """ You asked for help on help, didn't you? Boredom has claimed yet another victim.
        This object overrides the builtin 'help', whose pager fights with consoles it doesn't own. """

    _HELP_SECTIONS = [lambda x: [f"OBJECT - {x!r}"],
                      lambda x: [f"  TYPE - {type(x).__name__}"],
                      lambda x: ["-----------SIGNATURE------------",
                                 str(inspect.signature(x))],
                      lambda x: ["-------PUBLIC ATTRIBUTES--------",
                                 ', '.join([k for k in dir(x) if not k.startswith('_')]) or "None"],
                      lambda x: ["--------------INFO--------------",
                                 *map(str.lstrip, str(x.__doc__).splitlines())]]

    def __init__(self, file=None) -> None:
        self._file = file  # Output stream. Resolved at call time if None, since sys.stdout may be replaced.

    def __call__(self, *args:object) -> None:
        """ Write lines from each help section that doesn't raise an exception, in order. """
        lines = [] if args else [repr(self)]
        for obj in args:
            lines.append("")
            for fn in self._HELP_SECTIONS:
                try:
                    lines += fn(obj)
                except Exception:
                    # Arbitrary objects may raise arbitrary exceptions. Just skip sections that don't behave.
                    continue
            lines.append("")
        file = self._file or sys.stdout
        file.write("\n".join(lines) + "\n")

    def __repr__(self) -> str:
        return "Type help(object) for auto-generated help on any Python object."


def dev_namespace() -> dict:
    """ Globals for the plain console: the helpers a developer is most likely to reach for. """
    from devrepl.runtime import add_libs, up_since
    from devrepl.server.registry import servers
    from devrepl.taps import add_tap, remove_tap, tap
    return {"__name__": "__console__", "__doc__": None, "help": xhelp(),
            "add_libs": add_libs, "up_since": up_since, "servers": servers,
            "add_tap": add_tap, "remove_tap": remove_tap, "tap": tap}


def interact(namespace:dict=None) -> int:
    """ Run a Python console using the standard streams. Blocks until the user exits. """
    if namespace is None:
        namespace = dev_namespace()
    override_code_excepthook()
    code.interact(banner=BANNER, local=namespace, exitmsg="")
    return 0
