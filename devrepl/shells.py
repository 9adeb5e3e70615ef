""" Shell selection. Candidates are tried in a fixed order of preference, and the first one that can be loaded wins.
    Probing is lazy: once a shell is found, nothing further down the list is even imported. """

import importlib
from typing import Any, Callable, Iterable, List, Sequence, Tuple

from devrepl.console import interact
from devrepl.util.entrypoints import EntryPoint
from devrepl.util.exception import ExceptionEater

Launcher = Callable[[], Any]
Probe = Callable[[], Launcher]

HATCH = EntryPoint("hatch.cli", "hatch", "Build tool environment shell.")
PTPYTHON = EntryPoint("ptpython.entry_points.run_ptpython", "run", "Enhanced line-editing shell.")
IPYKERNEL = EntryPoint("ipykernel.kernelapp", "launch_new_instance", "Network kernel for notebooks and editors.")

# Module whose presence selects the extension-enhanced kernel over the plain one.
ENHANCED_KERNEL_UNIT = "rich"

# Kernel extensions to load if available, as (module to probe, extension name to pass to the kernel).
MIDDLEWARE_CANDIDATES = [("rich", "rich"),
                         ("line_profiler", "line_profiler")]

EXTENSIONS_OPTION = "--InteractiveShellApp.extensions"


class ShellCandidate:
    """ A named shell with a probe. The probe returns a zero-argument launcher, or raises if the shell is missing. """

    def __init__(self, name:str, probe:Probe) -> None:
        self.name = name
        self.probe = probe

    def __repr__(self) -> str:
        return f"<ShellCandidate {self.name!r}>"


def select_shell(candidates:Iterable[ShellCandidate]) -> Tuple[str, Launcher]:
    """ Return the name and launcher of the first candidate whose probe succeeds. """
    for candidate in candidates:
        with ExceptionEater():
            return candidate.name, candidate.probe()
    raise LookupError("No interactive shell is available.")


def module_loads(name:str) -> bool:
    """ Return True if module <name> can actually be imported. """
    with ExceptionEater():
        importlib.import_module(name)
        return True
    return False


def find_middleware(candidates:Sequence[Tuple[str, str]]=MIDDLEWARE_CANDIDATES,
                    loadable:Callable[[str], bool]=module_loads) -> List[str]:
    """ Keep the extensions whose module loads, in their original order. """
    return [ext for module_name, ext in candidates if loadable(module_name)]


def middleware_args(middleware:Sequence[str]) -> List[str]:
    """ Command-line arguments that load <middleware> in the kernel. No extensions means no arguments at all. """
    return [f"{EXTENSIONS_OPTION}={ext}" for ext in middleware]


def _hatch_probe(build_target:str) -> Probe:
    def probe() -> Launcher:
        hatch = HATCH.resolve()
        return lambda: hatch.main(["run", f"{build_target}:python"], prog_name="hatch")
    return probe


def _ptpython_probe() -> Launcher:
    return PTPYTHON.resolve()


def _kernel_probe(required:Sequence[str], loadable:Callable[[str], bool]) -> Probe:
    def probe() -> Launcher:
        missing = [name for name in required if not loadable(name)]
        if missing:
            raise ImportError(f"Kernel requires missing modules: {', '.join(missing)}")
        kernel = IPYKERNEL.resolve()
        args = middleware_args(find_middleware(MIDDLEWARE_CANDIDATES, loadable))
        return lambda: kernel(args)
    return probe


def default_candidates(build_target="dev", namespace:dict=None,
                       loadable:Callable[[str], bool]=module_loads) -> List[ShellCandidate]:
    """ The standard order of preference. The plain console is always last and always available. """
    return [ShellCandidate(f"Hatch {build_target} environment", _hatch_probe(build_target)),
            ShellCandidate("ptpython", _ptpython_probe),
            ShellCandidate("Rich-enhanced IPython Kernel", _kernel_probe([ENHANCED_KERNEL_UNIT], loadable)),
            ShellCandidate("IPython Kernel", _kernel_probe([], loadable)),
            ShellCandidate("Python console", lambda: lambda: interact(namespace))]


def launch(name:str, launcher:Launcher, log:Callable[[str], Any]=print) -> None:
    """ Announce the shell and run it until the user is done. A shell's own CLI may exit through SystemExit;
        that still counts as the session ending normally. """
    log(f"Starting {name} as the REPL...")
    try:
        launcher()
    except SystemExit:
        pass
