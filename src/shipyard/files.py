"""Workspace file discovery and properties parsing."""

from __future__ import annotations

from pathlib import Path

from shipyard.build_log import BuildLog
from shipyard.errors import MissingFileError


def to_relative_path(workspace: Path, path: Path) -> str:
    return path.relative_to(workspace).as_posix()


def lookup_file(workspace: Path, file_name: str, log: BuildLog) -> Path | None:
    """Find *file_name* anywhere under *workspace*.

    Globs ``**/<file_name>``. When several files match, the one with the
    shortest path (closest to the workspace root) wins; equal lengths are
    ordered lexicographically so the pick is stable across runs.

    Returns None when nothing matches.
    """
    if not workspace.is_dir():
        log.notice("workspace %s does not exist", workspace)
        return None

    matches = sorted(
        (p for p in workspace.glob(f"**/{file_name}") if p.is_file()),
        key=lambda p: (len(str(p)), str(p)),
    )
    if not matches:
        log.notice("could not find matching file: %s", file_name)
        return None

    chosen = matches[0]
    if len(matches) > 1:
        candidates = ", ".join(to_relative_path(workspace, p) for p in matches)
        log.notice(
            "ambiguous match for %s (%s), using closest: %s",
            file_name,
            candidates,
            to_relative_path(workspace, chosen),
        )
    else:
        log.notice("lookup for %s found at %s", file_name, to_relative_path(workspace, chosen))
    return chosen


def require_file(workspace: Path, file_name: str, log: BuildLog) -> Path:
    """Like lookup_file, but raises MissingFileError when nothing matches."""
    found = lookup_file(workspace, file_name, log)
    if found is None:
        raise MissingFileError(file_name)
    return found


_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _unescape(text: str) -> str:
    out: list[str] = []
    chars = iter(text)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, "")
        if nxt == "u":
            code = "".join(next(chars, "") for _ in range(4))
            try:
                out.append(chr(int(code, 16)))
            except ValueError:
                out.append("u" + code)
        else:
            out.append(_ESCAPES.get(nxt, nxt))
    return "".join(out)


def _logical_lines(text: str) -> list[str]:
    """Join backslash-continued physical lines, dropping comments and blanks."""
    lines: list[str] = []
    pending = ""
    for physical in text.splitlines():
        stripped = physical.lstrip()
        if not pending and (not stripped or stripped[0] in "#!"):
            continue
        # an odd number of trailing backslashes continues the line
        trailing = len(stripped) - len(stripped.rstrip("\\"))
        if trailing % 2 == 1:
            pending += stripped[:-1]
            continue
        lines.append(pending + stripped)
        pending = ""
    if pending:
        lines.append(pending)
    return lines


def _split_pair(line: str) -> tuple[str, str]:
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in "=: \t\f":
            break
        i += 1
    key = line[:i]
    rest = line[i:].lstrip(" \t\f")
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(" \t\f")
    return _unescape(key), _unescape(rest)


def parse_properties(text: str) -> dict[str, str]:
    """Parse Java-properties text into an ordered dict."""
    result: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_pair(line)
        result[key] = value
    return result


def read_properties(path: Path) -> dict[str, str]:
    return parse_properties(path.read_text(encoding="utf-8"))
