"""Turn file positions in command output into navigable links."""

from __future__ import annotations

import html
import os
import re
from dataclasses import dataclass
from pathlib import PurePosixPath

FIELD_RE = re.compile(r"\S+")
MAX_LINK_FIELDS = 2


@dataclass(frozen=True)
class FileLink:
    """A file reference found in an output line."""

    path: str
    line: int | None = None
    column: int | None = None
    text: str = ""
    start: int = 0
    end: int = 0

    @property
    def href(self) -> str:
        path = self.path if self.path.startswith("/") else "/" + self.path.replace("\\", "/")
        href = f"file://{path}"
        if self.line is not None:
            href += f"#L{self.line}"
            if self.column is not None:
                href += f"C{self.column}"
        return href

    def anchor(self) -> str:
        return f'<a href="{html.escape(self.href)}">{html.escape(self.text, quote=False)}</a>'


def _looks_like_file(field: str) -> bool:
    return "." in field or "/" in field


def _position(value: str) -> int | None:
    return int(value) if value.isdigit() else None


def _resolve(name: str, base_dir: str) -> str:
    if not base_dir or os.path.isabs(name) or PurePosixPath(name).is_absolute():
        return name
    if name.startswith("./"):
        name = name[2:]
    return os.path.join(base_dir, name)


def find_file_link(line: str, base_dir: str = "") -> FileLink | None:
    """Return the first file-like field among the first two fields of ``line``.

    A field qualifies when it contains a dot or a slash; ``name:line`` and
    ``name:line:col`` suffixes become the link position.  Relative names are
    resolved against ``base_dir``.
    """

    for count, match in enumerate(FIELD_RE.finditer(line)):
        if count >= MAX_LINK_FIELDS:
            break
        field = match.group(0)
        if not _looks_like_file(field):
            continue
        parts = field.split(":")
        line_no = _position(parts[1]) if len(parts) > 1 else None
        column = _position(parts[2]) if len(parts) > 2 and line_no is not None else None
        return FileLink(
            path=_resolve(parts[0], base_dir),
            line=line_no,
            column=column,
            text=field,
            start=match.start(),
            end=match.end(),
        )
    return None


def markup_line(line: str, base_dir: str = "") -> str:
    """Rewrite the first file reference in ``line`` as an ``<a href>`` link.

    Everything outside the rewritten field is kept verbatim.
    """

    link = find_file_link(line, base_dir)
    if link is None:
        return line
    return line[: link.start] + link.anchor() + line[link.end :]


class OutputAnnotator:
    """Marks up output lines relative to one directory."""

    def __init__(self, base_dir: str = "") -> None:
        self.base_dir = base_dir

    def __call__(self, line: str) -> str:
        return markup_line(line, self.base_dir)
