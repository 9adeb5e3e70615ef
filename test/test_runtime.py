""" Tests for interpreter helpers: process age, version check and the dynamic loader. """

from datetime import datetime, timedelta
import os
import sys

import pytest

from devrepl import runtime
from devrepl.runtime import check_version, current_loader, DynamicLoader, up_since, uptime


def test_up_since() -> None:
    assert uptime() >= 0
    started = up_since()
    now = datetime.now()
    assert started <= now + timedelta(seconds=1)
    assert now - started < timedelta(days=7)


def test_check_version() -> None:
    check_version()
    check_version((3, 8), (3, 12, 1))
    check_version((3, 8), (3, 8))
    with pytest.raises(RuntimeError):
        check_version((3, 8), (3, 7, 9))
    with pytest.raises(RuntimeError):
        check_version((4,))


def test_loader_install(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(runtime, "_active_loader", None)
    lib_dir = tmp_path / "libs"
    path = ["/somewhere/else"]
    loader = DynamicLoader("libs", cwd=str(tmp_path), path=path)
    loader.install()
    # The lib directory doesn't exist yet, so only the project directory is added.
    assert path == [str(tmp_path), "/somewhere/else"]
    assert current_loader() is loader
    lib_dir.mkdir()
    loader.install()
    assert path == [os.path.join(str(tmp_path), "libs"), str(tmp_path), "/somewhere/else"]


def test_add_libs_requires_loader(monkeypatch) -> None:
    monkeypatch.setattr(runtime, "_active_loader", None)
    with pytest.raises(RuntimeError):
        runtime.add_libs("anything")


def test_add_libs_runs_pip(tmp_path, monkeypatch) -> None:
    """ Libraries go into the private directory, which is then added to the path. """
    calls = []
    monkeypatch.setattr(runtime.subprocess, "run", lambda cmd, check: calls.append(cmd))
    added = []
    loader = DynamicLoader("libs", cwd=str(tmp_path), path=[])
    monkeypatch.setattr(loader, "add_path", added.append)
    loader.add_libs()
    assert not calls
    loader.add_libs("somelib==1.0")
    lib_dir = os.path.join(str(tmp_path), "libs")
    assert calls == [(sys.executable, '-m', 'pip', 'install', '--target', lib_dir, "somelib==1.0")]
    assert added == [lib_dir]
    assert os.path.isdir(lib_dir)
