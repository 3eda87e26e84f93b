"""Tests for CLI helpers: _fmt_inline, _fmt_inspect, _show_groups, _process_line, main."""

import io

import pytest

from scfg_core import Config, ConfigRepl, VFloat32, VText, VUInt32
from scfg_core.repl import (
    _fmt_inline,
    _fmt_inspect,
    _process_line,
    _show_entries,
    _show_groups,
    main,
)


# ---------------------------------------------------------------------------
# _fmt_inline / _fmt_inspect
# ---------------------------------------------------------------------------

def test_fmt_inline_text():
    assert _fmt_inline(VText("hello")) == '"hello"'

def test_fmt_inline_number():
    assert _fmt_inline(VUInt32(8080)) == "8080"

def test_fmt_inline_float32():
    assert _fmt_inline(VFloat32(3.141)) == "3.141"

def test_fmt_inspect():
    repl = ConfigRepl()
    entry = repl.assign("net.port = 8080 -> u32")
    assert _fmt_inspect(entry) == "Entry(port) u32 = 8080"


# ---------------------------------------------------------------------------
# _show_groups / _show_entries
# ---------------------------------------------------------------------------

def test_show_groups_empty():
    dest = io.StringIO()
    _show_groups(ConfigRepl(), dest)
    assert "(no groups defined)" in dest.getvalue()

def test_show_groups():
    repl = ConfigRepl()
    repl.assign("net.port = 8080 -> u32")
    repl.assign("net.host = localhost -> str")
    dest = io.StringIO()
    _show_groups(repl, dest)
    assert "[net]  (2 entries)" in dest.getvalue()

def test_show_entries_uses_file_format():
    repl = ConfigRepl()
    repl.assign("net.port = 8080 -> u32")
    dest = io.StringIO()
    _show_entries(repl, dest)
    assert dest.getvalue() == "[net]\n  port: 8080 -> u32\n"


# ---------------------------------------------------------------------------
# _process_line
# ---------------------------------------------------------------------------

def test_process_line_quit():
    assert _process_line(ConfigRepl(), ":q", io.StringIO()) is False
    assert _process_line(ConfigRepl(), ":quit", io.StringIO()) is False

def test_process_line_blank():
    assert _process_line(ConfigRepl(), "   ", io.StringIO()) is True

def test_process_line_assign_then_lookup():
    repl = ConfigRepl()
    dest = io.StringIO()
    _process_line(repl, "net.host = localhost -> str", dest)
    _process_line(repl, "net.host", dest)
    assert dest.getvalue() == '"localhost"\n'

def test_process_line_inspect():
    repl = ConfigRepl()
    dest = io.StringIO()
    _process_line(repl, "net.port = 8080 -> u32", dest)
    _process_line(repl, "i(net.port)", dest)
    assert dest.getvalue() == "Entry(port) u32 = 8080\n"

def test_process_line_show_group():
    repl = ConfigRepl()
    repl.assign("a.x = 1 -> i32")
    repl.assign("b.y = 2 -> i32")
    dest = io.StringIO()
    _process_line(repl, ":show b", dest)
    assert dest.getvalue() == "[b]\n  y: 2 -> i32\n"

def test_process_line_error_goes_to_stderr(capsys):
    repl = ConfigRepl()
    dest = io.StringIO()
    assert _process_line(repl, "net.port", dest) is True
    assert dest.getvalue() == ""
    assert "no such group: 'net'" in capsys.readouterr().err

def test_process_line_save_and_load(net_config, cfg_path):
    repl = ConfigRepl()
    dest = io.StringIO()
    _process_line(repl, "net.port = 8080 -> u32", dest)
    _process_line(repl, "net.host = localhost -> str", dest)
    _process_line(repl, f":save {cfg_path}", dest)
    assert Config.load(cfg_path) == net_config

    _process_line(repl, ":reset", dest)
    assert len(repl.config) == 0
    _process_line(repl, f":load {cfg_path}", dest)
    assert repl.config == net_config
    assert "loaded 1 groups" in dest.getvalue()

def test_process_line_batch_file(tmp_path):
    script = tmp_path / "cmds.txt"
    script.write_text("net.port = 8080 -> u32\nnet.port\n", encoding="utf-8")
    repl = ConfigRepl()
    dest = io.StringIO()
    _process_line(repl, f"?<< {script}", dest)
    assert dest.getvalue() == "8080\n"

def test_process_line_batch_file_missing(tmp_path, capsys):
    _process_line(ConfigRepl(), f"?<< {tmp_path / 'nope.txt'}", io.StringIO())
    assert "Error reading" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# main
# ---------------------------------------------------------------------------

def test_main_session(monkeypatch, capsys, net_config, cfg_path):
    net_config.save(cfg_path)
    inputs = iter(["net.port", "net.port = 9090 -> u32", ":save", ":q"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))

    main([str(cfg_path)])

    out = capsys.readouterr().out
    assert "8080" in out
    assert Config.load(cfg_path).get_entry("net", "port").get(VUInt32) == 9090

def test_main_eof(monkeypatch, capsys):
    def _eof(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", _eof)
    main([])
    assert "SCFG REPL" in capsys.readouterr().out

def test_main_output_redirect(monkeypatch, capsys, tmp_path):
    out_file = tmp_path / "out.txt"
    inputs = iter([
        "g.e = hello -> str",
        f"?>> {out_file}",
        "g.e",
        "?>>",
        "i(g.e)",
        ":q",
    ])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))

    main([])

    assert out_file.read_text(encoding="utf-8") == '"hello"\n'
    out = capsys.readouterr().out
    assert '"hello"' not in out.splitlines()
    assert 'Entry(e) str = "hello"' in out

def test_main_redirect_to_bad_path(monkeypatch, capsys, tmp_path):
    inputs = iter([f"?>> {tmp_path / 'missing' / 'out.txt'}", "g.e = 1 -> i32", "g.e", ":q"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))

    main([])

    captured = capsys.readouterr()
    assert "Error opening" in captured.err
    assert "1\n" in captured.out
