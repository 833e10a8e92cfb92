"""Placeholder binding against project context.

Strings may reference context values as ``{Name}``.  A backslash before an
opening brace (``\\{``) yields a literal brace.  A ``/`` that sits directly
between two resolved placeholders is rewritten to the platform separator, so
``{FileDirPath}/{FileName}`` composes correctly on every platform.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path

TOKEN_RE = re.compile(r"\\\{|\{([A-Za-z_][A-Za-z0-9_]*)\}")


def token(name: str) -> str:
    """Return the placeholder form of a variable name."""

    return "{" + name + "}"


def find_tokens(text: str) -> list[str]:
    """Return placeholder tokens in order of appearance, escapes excluded."""

    return [match.group(0) for match in TOKEN_RE.finditer(text) if match.group(1) is not None]


def bind(text: str, variables: Mapping[str, str], *, sep: str = os.sep) -> str:
    """Replace every resolvable ``{Name}`` in ``text``.

    ``variables`` is keyed by bare names (``FilePath``).  Unknown placeholders
    are left verbatim so a later pass, typically prompting, can fill them.
    """

    out: list[str] = []
    pos = 0
    prev_resolved_end = -1
    for match in TOKEN_RE.finditer(text):
        start, end = match.span()
        literal = text[pos:start]
        name = match.group(1)
        resolved = name is not None and name in variables
        if resolved and literal == "/" and prev_resolved_end == start - 1:
            literal = sep
        out.append(literal)
        if name is None:
            out.append("{")
        elif resolved:
            out.append(variables[name])
            prev_resolved_end = end
        else:
            out.append(match.group(0))
        pos = end
    out.append(text[pos:])
    return "".join(out)


def bind_all(items: Iterable[str], variables: Mapping[str, str], *, sep: str = os.sep) -> list[str]:
    return [bind(item, variables, sep=sep) for item in items]


def _relative(path: Path, root: Path | None) -> str:
    if root is None:
        return str(path)
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


@dataclass(frozen=True)
class ProjectContext:
    """Live project state that placeholder variables are derived from."""

    project_path: Path | None = None
    file_path: Path | None = None
    build_dir: Path | None = None
    build_target: str = ""
    run_exec: Path | None = None
    cur_line: int | None = None
    cur_col: int | None = None
    cur_word: str = ""
    extra: Mapping[str, str] = field(default_factory=dict)

    def variables(self) -> dict[str, str]:
        """Return the variable mapping used for binding."""

        values: dict[str, str] = {}
        root = self.project_path
        if root is not None:
            values["ProjPath"] = str(root)
            values["ProjDir"] = root.name
        if self.file_path is not None:
            path = self.file_path
            values["FilePath"] = str(path)
            values["FileName"] = path.name
            values["FileExt"] = path.suffix
            values["FileExtLC"] = path.suffix.lower()
            values["FileNameNoExt"] = path.stem
            values["FileDir"] = path.parent.name
            values["FileDirPath"] = str(path.parent)
            values["FilePathProjRel"] = _relative(path, root)
            values["FileDirProjRel"] = _relative(path.parent, root)
        if self.build_dir is not None:
            values["BuildDir"] = str(self.build_dir)
        if self.build_target:
            values["BuildTarget"] = self.build_target
        if self.run_exec is not None:
            values["RunExec"] = str(self.run_exec)
            values["RunExecPath"] = str(self.run_exec.parent)
            values["RunExecDir"] = self.run_exec.parent.name
        if self.cur_line is not None:
            values["CurLine"] = str(self.cur_line)
        if self.cur_col is not None:
            values["CurCol"] = str(self.cur_col)
        if self.cur_word:
            values["CurWord"] = self.cur_word
        values.update(self.extra)
        return values
