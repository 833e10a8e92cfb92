"""Inspected variable trees and their bounded text rendering."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypeAlias

from cmdflow.errors import VariableKindError

INDENT = "  "


class Kind(StrEnum):
    UNKNOWN = "unknown"
    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    COMPLEX = "complex"
    STRING = "string"
    POINTER = "pointer"
    ARRAY = "array"
    SLICE = "slice"
    MAP = "map"
    STRUCT = "struct"
    INTERFACE = "interface"
    FUNC = "func"
    CHAN = "chan"

    @property
    def is_primitive(self) -> bool:
        return self in _PRIMITIVE_KINDS

    @property
    def is_pointer(self) -> bool:
        return self is Kind.POINTER


_PRIMITIVE_KINDS = frozenset({Kind.BOOL, Kind.INT, Kind.UINT, Kind.FLOAT, Kind.COMPLEX, Kind.STRING})


@dataclass(frozen=True)
class Location:
    """Source position where a variable was defined."""

    file: str = ""
    line: int = 0
    func: str = ""


@dataclass(frozen=True)
class Scalar:
    value: str


@dataclass(frozen=True)
class ListContent:
    """Primitive elements of an array or slice."""

    items: tuple[str, ...]


@dataclass(frozen=True)
class PrimitiveMapContent:
    items: dict[str, str]


@dataclass(frozen=True)
class NestedMapContent:
    items: dict[str, Variable]


@dataclass(frozen=True)
class Children:
    """Ordered child nodes, e.g. struct fields or a pointer target."""

    nodes: tuple[Variable, ...]


Content: TypeAlias = Scalar | ListContent | PrimitiveMapContent | NestedMapContent | Children


def _allowed_content(kind: Kind) -> tuple[type, ...] | None:
    if kind is Kind.UNKNOWN:
        return None
    if kind.is_primitive:
        return (Scalar,)
    if kind is Kind.POINTER:
        return (Scalar, Children)
    if kind in (Kind.ARRAY, Kind.SLICE):
        return (ListContent, Children)
    if kind is Kind.MAP:
        return (PrimitiveMapContent, NestedMapContent, Children)
    if kind in (Kind.FUNC, Kind.CHAN):
        return (Scalar, Children)
    return (Children,)


@dataclass
class Variable:
    """One node of an inspected value tree.

    ``value`` holds the rendered display text once it has been computed and is
    empty otherwise.  ``content`` holds the raw data in exactly one shape.
    """

    name: str = ""
    type_str: str = ""
    full_type_str: str = ""
    kind: Kind = Kind.UNKNOWN
    content: Content | None = None
    value: str = ""
    length: int = 0
    capacity: int = 0
    addr: int = 0
    heap: bool = False
    loc: Location = field(default_factory=Location)

    def __post_init__(self) -> None:
        allowed = _allowed_content(self.kind)
        if self.content is not None and allowed is not None and not isinstance(self.content, allowed):
            raise VariableKindError(
                f"variable {self.name!r} of kind {self.kind} cannot hold {type(self.content).__name__}"
            )

    @property
    def children(self) -> tuple[Variable, ...]:
        if isinstance(self.content, Children):
            return self.content.nodes
        return ()

    def value_string(
        self,
        newlines: bool = False,
        indent: int = 0,
        max_depth: int = 4,
        max_len: int = 100,
        with_type: bool = False,
    ) -> str:
        """Render the value, descending into sub-elements.

        Nodes deeper than ``max_depth`` render as ``{...}``.  Once the text of
        one aggregate grows beyond ``max_len`` it ends with ``...`` and the
        remaining elements are skipped.  With ``newlines`` every element goes
        on its own indented line.  Generally used to fill ``value`` after new
        data arrives.
        """

        if self.value:
            return self.value
        content = self.content
        if isinstance(content, Scalar) and content.value:
            return content.value
        kids = self.children
        if self.kind.is_pointer and len(kids) == 1:
            return "*" + kids[0].value_string(newlines, indent, max_depth, max_len, True)

        text = f"{self.type_str} {{" if with_type and self.type_str else "{"
        if indent > max_depth:
            text += "..."
            if newlines:
                text += "\n" + INDENT * indent
            return text + "}"

        first = True
        for label, render in self._entries(newlines, indent, max_depth, max_len):
            if newlines:
                text += "\n" + INDENT * (indent + 1)
            elif not first:
                text += ", "
            first = False
            text += label + render()
            if len(text) > max_len:
                text += "..."
                break
        if newlines:
            text += "\n" + INDENT * indent
        return text + "}"

    def _entries(
        self, newlines: bool, indent: int, max_depth: int, max_len: int
    ) -> Iterator[tuple[str, Callable[[], str]]]:
        content = self.content
        if isinstance(content, ListContent):
            for idx, item in enumerate(content.items):
                yield f"{idx}: ", lambda item=item: item
        elif isinstance(content, PrimitiveMapContent):
            for key, item in content.items.items():
                yield f"{key}: ", lambda item=item: item
        elif isinstance(content, NestedMapContent):
            for key, node in content.items.items():
                yield f"{key}: ", lambda node=node: node.value_string(newlines, indent + 1, max_depth, max_len, False)
        for node in self.children:
            label = f"{node.name}: " if node.name else ""
            yield label, lambda node=node: node.value_string(newlines, indent + 1, max_depth, max_len, True)

    def type_info(self, newlines: bool = False) -> str:
        """Summarize name, type, sizes and storage, one item per line or tab."""

        sep = "\n" if newlines else "\t"
        info = [
            f"Name: {self.name}",
            f"Type: {self.type_str}",
            f"Len:  {self.length}",
            f"Cap:  {self.capacity}",
            f"Addr: {self.addr:x}",
            f"Heap: {str(self.heap).lower()}",
        ]
        return sep.join(info)


def sort_variables(variables: list[Variable]) -> None:
    variables.sort(key=lambda item: item.name)


@dataclass(frozen=True)
class VarParams:
    """How much detail a debugger reports about variables."""

    follow_pointers: bool = False
    max_recurse: int = 4
    max_string_len: int = 100
    max_array_values: int = 10
    max_struct_fields: int = -1


DEFAULT_VAR_LIST_PARAMS = VarParams()
DEFAULT_GET_VAR_PARAMS = VarParams(max_recurse=10, max_string_len=1024, max_array_values=1024)
