""" Helpers that deal with the running interpreter itself: its age, its version, and its import system. """

from datetime import datetime
import importlib
import os
import site
import subprocess
import sys
import time
from typing import Optional, Sequence

import psutil

MINIMUM_VERSION = (3, 8)
DEFAULT_LIB_DIR = os.path.join(".devrepl", "libs")


def uptime() -> float:
    """ Return the number of seconds since this process was started. """
    return time.time() - psutil.Process().create_time()


def up_since() -> datetime:
    """ Return the date this REPL (Python process) was started. """
    return datetime.fromtimestamp(time.time() - uptime())


def check_version(minimum:Sequence[int]=MINIMUM_VERSION, current:Sequence[int]=None) -> None:
    """ Refuse to run on an interpreter that is too old. This is the one error that is never caught. """
    if current is None:
        current = sys.version_info
    if tuple(current[:len(minimum)]) < tuple(minimum):
        required = ".".join(map(str, minimum))
        raise RuntimeError(f"devrepl requires at least Python {required}")


_active_loader = None


def current_loader() -> Optional["DynamicLoader"]:
    """ Return the loader installed by the launcher, if any. """
    return _active_loader


class DynamicLoader:
    """ Keeps the import system open to code that shows up after startup.
        Libraries added with add_libs() are installed into a private directory which is then put on sys.path,
        so they may be imported in the running session without a restart. """

    def __init__(self, lib_dir:str=DEFAULT_LIB_DIR, *, cwd:str=None, path:list=None) -> None:
        self._cwd = cwd or os.getcwd()  # Project directory. Its modules should always be importable.
        self._lib_dir = os.path.join(self._cwd, lib_dir)
        self._path = sys.path if path is None else path  # Module search path to modify.

    def _insert(self, directory:str) -> None:
        if directory not in self._path:
            self._path.insert(0, directory)

    def install(self) -> None:
        """ Make the project and any previously added libraries importable, then become the active loader.
            Console scripts don't get the working directory on sys.path the way 'python -m' does. """
        global _active_loader
        self._insert(self._cwd)
        if os.path.isdir(self._lib_dir):
            self._insert(self._lib_dir)
        importlib.invalidate_caches()
        _active_loader = self

    def add_path(self, directory:str) -> None:
        """ Add a site directory (processing any .pth files) and forget stale finder caches. """
        directory = os.path.abspath(directory)
        site.addsitedir(directory)
        self._insert(directory)
        importlib.invalidate_caches()

    def add_libs(self, *requirements:str) -> None:
        """ Install <requirements> with pip into the library directory and make them importable right away. """
        if not requirements:
            return
        os.makedirs(self._lib_dir, exist_ok=True)
        cmd = (sys.executable, '-m', 'pip', 'install', '--target', self._lib_dir, *requirements)
        subprocess.run(cmd, check=True)
        self.add_path(self._lib_dir)


def add_libs(*requirements:str) -> None:
    """ Shortcut for use at the prompt. """
    loader = current_loader()
    if loader is None:
        raise RuntimeError("No dynamic loader is installed.")
    loader.add_libs(*requirements)
