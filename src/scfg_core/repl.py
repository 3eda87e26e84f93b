"""ConfigRepl: interactive shell for inspecting and editing config files.

Also provides the ``scfg-repl`` CLI entry point via ``main()``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO

from . import settings
from .codec import format_entry, format_value, parse_typed_value
from .config import Config, Entry
from .errors import MalformedLine, SCFGError
from .model import TypeTag, Value


# ---------------------------------------------------------------------------
# ConfigRepl class (programmatic use)
# ---------------------------------------------------------------------------

class ConfigRepl:
    """Stateful shell holding one Config between commands.

    Usage::

        repl = ConfigRepl()
        repl.assign("net.port = 8080 -> u32")
        repl.lookup("net.port").get("u32")   # → 8080
        repl.save("app.cfg")
        repl.reset()
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.config = Config()
        self.path: Path | None = None
        self.logger = logger

    def lookup(self, target: str) -> Entry:
        """Resolve ``group.entry``; raises NotFound when either is absent."""
        group, entry = _split_target(target)
        return self.config.get_entry(group, entry)

    def assign(self, text: str) -> Entry:
        """Apply ``group.entry = <value> -> <tag>``, creating what is missing.

        Blanks around ``=`` are not part of the value, so ``g.e  =  x -> str``
        stores ``"x"``.
        """
        target, sep, rhs = text.partition("=")
        if not sep:
            raise MalformedLine("expected <group>.<entry> = <value> -> <tag>", text)
        group_name, entry_name = _split_target(target)
        value = parse_typed_value(" " + rhs.lstrip())
        if group_name in self.config:
            group = self.config.get_group(group_name)
        else:
            group = self.config.add_group(group_name, logger=self.logger)
        if entry_name in group:
            entry = group.get_entry(entry_name)
            entry.set(value)
            return entry
        return group.add_entry(entry_name, value, logger=self.logger)

    def load(self, path: str | Path) -> None:
        """Replace the current state with the contents of *path*."""
        self.config = Config.load(path, logger=self.logger)
        self.path = Path(path)

    def save(self, path: str | Path | None = None) -> Path:
        """Save to *path*, or to the file last loaded or saved."""
        if path is None:
            if self.path is None:
                raise MalformedLine("no file to save to; use :save <path>", ":save")
            path = self.path
        self.config.save(path, logger=self.logger)
        self.path = Path(path)
        return self.path

    def reset(self) -> None:
        """Clear all groups and forget the current file."""
        self.config = Config()
        self.path = None


def _split_target(target: str) -> tuple[str, str]:
    group, sep, entry = target.strip().partition(".")
    if not sep or not group or not entry:
        raise MalformedLine("expected <group>.<entry>", target)
    return group, entry


# ---------------------------------------------------------------------------
# CLI helpers
# ---------------------------------------------------------------------------

def _fmt_inline(value: Value) -> str:
    """Format a single value for compact one-line display."""
    if value.discriminant() is TypeTag.TEXT:
        return f'"{value.value}"'
    return format_value(value)


def _fmt_inspect(entry: Entry) -> str:
    """Pretty-print an entry for inspect() / i()."""
    return f"Entry({entry.name}) {entry.kind.tag} = {_fmt_inline(entry.value)}"


def _show_groups(repl: ConfigRepl, dest: IO[str]) -> None:
    """Print all group names with their entry counts."""
    if not repl.config.groups:
        print("  (no groups defined)", file=dest)
        return
    for name, group in repl.config.groups.items():
        print(f"  [{name}]  ({len(group)} entries)", file=dest)


def _show_entries(repl: ConfigRepl, dest: IO[str], group_name: str | None = None) -> None:
    """Print the entries of one group, or of every group, as saved lines."""
    if group_name:
        groups = [repl.config.get_group(group_name)]
    else:
        groups = list(repl.config.groups.values())
    if not groups:
        print("  (no groups defined)", file=dest)
        return
    for group in groups:
        print(f"[{group.name}]", file=dest)
        for name, entry in group.entries.items():
            print(f"  {format_entry(name, entry.value)}", file=dest)


def _run_file(repl: ConfigRepl, filepath: str, dest: IO[str]) -> None:
    try:
        with open(filepath, encoding="utf-8") as fh:
            for file_line in fh:
                _process_line(repl, file_line.rstrip("\n"), dest)
    except OSError as exc:
        print(f"Error reading '{filepath}': {exc}", file=sys.stderr)


def _dispatch(repl: ConfigRepl, line: str, dest: IO[str]) -> bool:
    # ── Exit ──────────────────────────────────────────────────────────────
    if line in (":q", ":quit"):
        return False

    # ── Control commands ──────────────────────────────────────────────────
    if line == ":groups":
        _show_groups(repl, dest)
        return True

    if line == ":show" or line.startswith(":show "):
        _show_entries(repl, dest, line[len(":show"):].strip() or None)
        return True

    if line == ":reset":
        repl.reset()
        return True

    if line.startswith(":load "):
        repl.load(line[len(":load "):].strip())
        print(f"  loaded {len(repl.config)} groups from {repl.path}", file=dest)
        return True

    if line == ":save" or line.startswith(":save "):
        path = repl.save(line[len(":save"):].strip() or None)
        print(f"  saved {len(repl.config)} groups to {path}", file=dest)
        return True

    # ── inspect() / i() ───────────────────────────────────────────────────
    for prefix in ("inspect(", "i("):
        if line.startswith(prefix) and line.endswith(")"):
            entry = repl.lookup(line[len(prefix):-1])
            print(_fmt_inspect(entry), file=dest)
            return True

    # ── Batch file ────────────────────────────────────────────────────────
    if line.startswith("?<< "):
        _run_file(repl, line[4:].strip(), dest)
        return True

    # ── Assignment / lookup ───────────────────────────────────────────────
    if "=" in line:
        repl.assign(line)
        return True

    print(_fmt_inline(repl.lookup(line).value), file=dest)
    return True


def _process_line(repl: ConfigRepl, line: str, dest: IO[str]) -> bool:
    """Process one input line.  Returns False when the session should end."""
    line = line.strip()
    if not line:
        return True
    try:
        return _dispatch(repl, line, dest)
    except SCFGError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return True


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def _redirect(target: str, current: IO[str] | None) -> IO[str] | None:
    """Close the current redirect file and open *target* (``""`` = stdout)."""
    if current is not None:
        current.close()
    if not target:
        return None
    try:
        return open(target, "w", encoding="utf-8")
    except OSError as exc:
        print(f"Error opening '{target}': {exc}", file=sys.stderr)
        return None


def main(argv: list[str] | None = None) -> None:
    """Interactive config shell (``scfg-repl [file]`` / ``python -m scfg_core.repl``)."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format=settings.LOG_FORMAT,
        datefmt=settings.LOG_DATEFMT,
    )
    args = sys.argv[1:] if argv is None else argv

    repl = ConfigRepl()
    out: IO[str] | None = None

    if args:
        _process_line(repl, f":load {args[0]}", sys.stdout)

    print("SCFG REPL  (:q to quit  |  :groups  :show  :reset  :load  :save  |  g.e = v -> tag  inspect(g.e))")

    try:
        while True:
            try:
                line = input(settings.PROMPT).strip()
            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                print()
                continue

            # ?>> path sends output to a file, a bare ?>> back to stdout
            if line == "?>>" or line.startswith("?>> "):
                out = _redirect(line[3:].strip(), out)
                continue

            if not _process_line(repl, line, out or sys.stdout):
                break
    finally:
        if out is not None:
            out.close()


if __name__ == "__main__":
    main()
