""" Module discovery. The launcher only needs to know *whether* a tool could be imported, and answering that
    by importing it would load every optional dependency on the machine. Scanning the path is much cheaper. """

from functools import lru_cache
import pkgutil
import sys
from typing import AbstractSet, FrozenSet, Iterable


def find_modules(paths:Iterable[str]=None) -> FrozenSet[str]:
    """ Return the names of all top-level modules and packages importable from <paths> (default sys.path).
        Built-in modules have no location on the path, so they are added separately. """
    if paths is None:
        paths = sys.path
    names = {name for finder, name, ispkg in pkgutil.iter_modules(list(paths))}
    names.update(sys.builtin_module_names)
    return frozenset(names)


class ModuleIndex:
    """ Immutable set of module names used only for membership tests. """

    def __init__(self, names:AbstractSet[str]) -> None:
        self._names = frozenset(names)

    def lookup(self, name:str) -> bool:
        """ Return True if module <name> is present. Submodules are assumed present along with their root package;
            checking deeper would mean importing the package. """
        root = name.split(".", 1)[0]
        return root in self._names

    __contains__ = lookup

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self):
        return iter(self._names)


@lru_cache(maxsize=None)
def all_modules() -> ModuleIndex:
    """ Scan the path once per session. Modules installed later won't show up here, which is fine for a launcher. """
    return ModuleIndex(find_modules())


def lookup_module(name:str) -> bool:
    return all_modules().lookup(name)
