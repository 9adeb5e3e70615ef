""" Tests for launcher configuration, mostly the socket REPL port precedence chain. """

import pytest

from devrepl.options import DevOptions


def _options(tmp_path, env=None, xopts=None, port_file=None) -> DevOptions:
    if port_file is not None:
        (tmp_path / ".socket-repl-port").write_text(port_file, encoding="utf-8")
    return DevOptions(environ=env or {}, xoptions=xopts or {}, cwd=str(tmp_path))


def test_port_from_environment_wins(tmp_path) -> None:
    opts = _options(tmp_path, {"SOCKET_REPL_PORT": "5001"}, {"socket-repl-port": "5002"}, "5003")
    assert opts.socket_port() == 5001


def test_port_from_xoption(tmp_path) -> None:
    opts = _options(tmp_path, {}, {"socket-repl-port": "5002"}, "5003")
    assert opts.socket_port() == 5002


def test_port_from_file(tmp_path) -> None:
    opts = _options(tmp_path, port_file="5003\n")
    assert opts.socket_port() == 5003


def test_port_default(tmp_path) -> None:
    assert _options(tmp_path).socket_port() == 0


@pytest.mark.parametrize("env, xopts, port_file, expected", [
    ({"SOCKET_REPL_PORT": "abc"}, {"socket-repl-port": "5002"}, None, 5002),
    ({"SOCKET_REPL_PORT": "none"}, {}, "5003", 5003),
    ({}, {"socket-repl-port": True}, "5003", 5003),
    ({}, {"socket-repl-port": "x"}, "garbage", 0),
    ({"SOCKET_REPL_PORT": "0"}, {"socket-repl-port": "5002"}, None, 0),
])
def test_port_fallthrough(tmp_path, env, xopts, port_file, expected) -> None:
    """ Sources that don't parse are skipped as if they were absent. """
    assert _options(tmp_path, env, xopts, port_file).socket_port() == expected


@pytest.mark.parametrize("value, disabled", [("none", True), ("None", False), ("NONE", False), ("5555", False)])
def test_port_disabled(tmp_path, value, disabled) -> None:
    assert _options(tmp_path, {"SOCKET_REPL_PORT": value}).socket_port_disabled() is disabled
    assert not _options(tmp_path).socket_port_disabled()


def test_port_file_roundtrip(tmp_path) -> None:
    opts = _options(tmp_path)
    assert opts.read_port_file() is None
    opts.write_port_file(41234)
    assert (tmp_path / ".socket-repl-port").read_text(encoding="utf-8") == "41234"
    assert opts.socket_port() == 41234


def test_config_file_overrides(tmp_path) -> None:
    (tmp_path / ".devrepl.cfg").write_text("[devrepl]\n"
                                           "build_target = test\n"
                                           "port_file = ports/last\n", encoding="utf-8")
    opts = _options(tmp_path)
    assert opts.build_target == "test"
    assert opts.address == "127.0.0.1"
    assert opts.port_file_path() == str(tmp_path / "ports" / "last")
    with pytest.raises(AttributeError):
        opts.no_such_option


def test_text_options_stay_text(tmp_path) -> None:
    """ Options naming files and hosts are strings even when the config value reads as a number. """
    (tmp_path / ".devrepl.cfg").write_text("[devrepl]\n"
                                           "port_file = 5555\n"
                                           "build_target = 3\n"
                                           "debugger_port = 5678\n", encoding="utf-8")
    opts = _options(tmp_path)
    assert opts.port_file == "5555"
    assert opts.build_target == "3"
    assert opts.port_file_path() == str(tmp_path / "5555")
    assert opts.socket_port() == 0
    assert opts.debugger_port == 5678
    assert opts.log is None
