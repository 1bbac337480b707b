"""Format-agnostic structural model for captured values.

A Content tree is built once per assertion, optionally rewritten by
the redaction engine, and handed to a renderer. Nodes are frozen
dataclasses holding tuples, so two trees compare equal exactly when
they are structurally identical. Transformations always build new
nodes; nothing here mutates a tree in place.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator


class StepKind(str, Enum):
    """How a child is reached from its parent node."""

    INDEX = "index"
    KEY = "key"
    FIELD = "field"
    PAYLOAD = "payload"


@dataclass(frozen=True)
class Step:
    """A single edge in a concrete path from the root to a node.

    Attributes:
        kind: Which container relation the step follows.
        value: The sequence index, map key Content, field name, or
            enum variant name.
        position: Entry offset within a Map or Struct. Lets the same
            key appear twice in a map without ambiguity.
    """

    kind: StepKind
    value: Any
    position: int | None = None


Path = tuple[Step, ...]


@dataclass(frozen=True)
class Content:
    """Base class for every node of a Content tree."""

    kind = "content"

    @property
    def is_primitive(self) -> bool:
        return False

    def children(self) -> Iterator[tuple[Step, Content]]:
        """Yield (step, child) pairs in their stored order."""
        return iter(())

    def replace_child(self, step: Step, child: Content) -> Content:
        """Return a copy of this node with one child swapped out."""
        raise KeyError(f"{self.kind} node has no child {step.value!r}")


@dataclass(frozen=True)
class Nil(Content):
    kind = "nil"

    @property
    def is_primitive(self) -> bool:
        return True


@dataclass(frozen=True)
class Bool(Content):
    value: bool
    kind = "bool"

    @property
    def is_primitive(self) -> bool:
        return True


@dataclass(frozen=True)
class Integer(Content):
    value: int
    kind = "integer"

    @property
    def is_primitive(self) -> bool:
        return True


@dataclass(frozen=True, eq=False)
class Float(Content):
    """Float node. Equality is by bit pattern: 0.0 != -0.0, NaN == NaN."""

    value: float
    kind = "float"

    @property
    def is_primitive(self) -> bool:
        return True

    def _bits(self) -> bytes:
        return struct.pack("<d", self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Float):
            return NotImplemented
        return self._bits() == other._bits()

    def __hash__(self) -> int:
        return hash((Float, self._bits()))


@dataclass(frozen=True)
class String(Content):
    value: str
    kind = "string"

    @property
    def is_primitive(self) -> bool:
        return True


@dataclass(frozen=True)
class Bytes(Content):
    value: bytes
    kind = "bytes"


@dataclass(frozen=True)
class Seq(Content):
    """Ordered list of child nodes."""

    items: tuple[Content, ...] = ()
    kind = "sequence"

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def children(self) -> Iterator[tuple[Step, Content]]:
        for idx, item in enumerate(self.items):
            yield Step(StepKind.INDEX, idx), item

    def replace_child(self, step: Step, child: Content) -> Content:
        if step.kind is not StepKind.INDEX or not 0 <= step.value < len(self.items):
            raise IndexError(f"sequence has no index {step.value!r}")
        items = list(self.items)
        items[step.value] = child
        return Seq(tuple(items))


@dataclass(frozen=True)
class Map(Content):
    """Ordered (key, value) pairs. Insertion order is kept as given."""

    entries: tuple[tuple[Content, Content], ...] = ()
    kind = "map"

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "entries", tuple((k, v) for k, v in self.entries)
        )

    def get(self, key: Content) -> Content | None:
        for k, v in self.entries:
            if k == key:
                return v
        return None

    def children(self) -> Iterator[tuple[Step, Content]]:
        for pos, (key, value) in enumerate(self.entries):
            yield Step(StepKind.KEY, key, pos), value

    def replace_child(self, step: Step, child: Content) -> Content:
        if step.kind is not StepKind.KEY:
            raise KeyError(f"map has no child {step.value!r}")
        pos = step.position
        if pos is None:
            pos = next(
                (i for i, (k, _) in enumerate(self.entries) if k == step.value),
                None,
            )
        if pos is None or not 0 <= pos < len(self.entries):
            raise KeyError(f"map has no key {step.value!r}")
        entries = list(self.entries)
        entries[pos] = (entries[pos][0], child)
        return Map(tuple(entries))


@dataclass(frozen=True)
class Struct(Content):
    """A named record with fields in the order the capture layer supplied."""

    name: str
    fields: tuple[tuple[str, Content], ...] = ()
    kind = "struct"

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "fields", tuple((n, v) for n, v in self.fields)
        )

    def get(self, name: str) -> Content | None:
        for field_name, value in self.fields:
            if field_name == name:
                return value
        return None

    def children(self) -> Iterator[tuple[Step, Content]]:
        for pos, (name, value) in enumerate(self.fields):
            yield Step(StepKind.FIELD, name, pos), value

    def replace_child(self, step: Step, child: Content) -> Content:
        if step.kind is not StepKind.FIELD:
            raise KeyError(f"struct {self.name} has no child {step.value!r}")
        pos = step.position
        if pos is None:
            pos = next(
                (i for i, (n, _) in enumerate(self.fields) if n == step.value),
                None,
            )
        if pos is None or not 0 <= pos < len(self.fields):
            raise KeyError(f"struct {self.name} has no field {step.value!r}")
        fields = list(self.fields)
        fields[pos] = (fields[pos][0], child)
        return Struct(self.name, tuple(fields))


@dataclass(frozen=True)
class EnumVariant(Content):
    """A tagged enum value: type name, variant name and optional payload."""

    type_name: str
    variant: str
    payload: Content | None = field(default=None)
    kind = "enum"

    def children(self) -> Iterator[tuple[Step, Content]]:
        if self.payload is not None:
            yield Step(StepKind.PAYLOAD, self.variant), self.payload

    def replace_child(self, step: Step, child: Content) -> Content:
        if step.kind is not StepKind.PAYLOAD or self.payload is None:
            raise KeyError(f"enum {self.type_name}::{self.variant} has no payload")
        return EnumVariant(self.type_name, self.variant, child)


def replace_at(tree: Content, path: Iterable[Step], value: Content) -> Content:
    """Return a new tree with the node at ``path`` replaced by ``value``.

    An empty path replaces the root. Nodes off the path are shared with
    the input tree, which is left untouched.

    Raises:
        KeyError: If a map key, struct field or payload step is missing.
        IndexError: If a sequence index is out of range.
    """
    steps = tuple(path)
    if not steps:
        return value
    head, rest = steps[0], steps[1:]
    for step, child in tree.children():
        if _same_step(step, head):
            return tree.replace_child(step, replace_at(child, rest, value))
    if head.kind is StepKind.INDEX:
        raise IndexError(f"{tree.kind} node has no index {head.value!r}")
    raise KeyError(f"{tree.kind} node has no child {head.value!r}")


def _same_step(actual: Step, wanted: Step) -> bool:
    if actual.kind is not wanted.kind or actual.value != wanted.value:
        return False
    return wanted.position is None or actual.position == wanted.position


def primitive(value: Any) -> Content:
    """Build a primitive Content node from a plain Python scalar.

    Raises:
        TypeError: If ``value`` is not None, bool, int, float or str.
    """
    if isinstance(value, Content):
        if not value.is_primitive:
            raise TypeError(f"expected a primitive Content node, got {value.kind}")
        return value
    if value is None:
        return Nil()
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return Bool(value)
    if isinstance(value, int):
        return Integer(value)
    if isinstance(value, float):
        return Float(value)
    if isinstance(value, str):
        return String(value)
    raise TypeError(
        f"replacement must be a bool, int, float, str or None, got {type(value).__name__}"
    )
