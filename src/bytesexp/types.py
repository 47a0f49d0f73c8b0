"""
S-expression tree types.

A tree is either an Atom holding an opaque byte string, or a List holding an
ordered tuple of child trees:

    (wire (pts "a b" c))
    → List([Atom(b"wire"), List([Atom(b"pts"), Atom(b"a b"), Atom(b"c")])])

Trees are immutable once built. Equality, hashing and traversal walk the
tree with an explicit stack, so arbitrarily deep trees never hit the
interpreter's recursion limit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, BinaryIO, Iterable, Iterator, Tuple, Union

AtomValue = Union[bytes, bytearray, memoryview, str]

_OPEN = object()
_CLOSE = object()


class Sexp:
    """
    Base class of the two tree kinds, Atom and List.

    Use isinstance() or the is_atom / is_list properties to tell them apart.
    """

    __slots__ = ()

    @property
    def is_atom(self) -> bool:
        """True if this is a leaf node."""
        return isinstance(self, Atom)

    @property
    def is_list(self) -> bool:
        """True if this is a list node."""
        return isinstance(self, List)

    def iter_all(self) -> Iterator[Sexp]:
        """Iterate over this node and all descendants, pre-order."""
        stack: list[Sexp] = [self]
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, List):
                stack.extend(reversed(node.children))

    def iter_atoms(self) -> Iterator[Atom]:
        """Iterate over every atom in the tree, left to right."""
        for node in self.iter_all():
            if isinstance(node, Atom):
                yield node

    def _events(self) -> Iterator[Any]:
        """Flatten the tree into atom payloads and open/close markers."""
        stack: list[Iterator[Sexp]] = [iter((self,))]
        while stack:
            node = next(stack[-1], None)
            if node is None:
                stack.pop()
                if stack:
                    yield _CLOSE
            elif isinstance(node, Atom):
                yield node.data
            else:
                yield _OPEN
                stack.append(iter(node.children))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sexp):
            return NotImplemented
        pending = [(self, other)]
        while pending:
            left, right = pending.pop()
            if left is right:
                continue
            if isinstance(left, Atom):
                if not isinstance(right, Atom) or left.data != right.data:
                    return False
            else:
                if not isinstance(right, List) or len(left.children) != len(right.children):
                    return False
                pending.extend(zip(left.children, right.children))
        return True

    def __hash__(self) -> int:
        h = 0
        for event in self._events():
            if event is _OPEN:
                h = hash((h, "("))
            elif event is _CLOSE:
                h = hash((h, ")"))
            else:
                h = hash((h, event))
        return h

    def to_bytes(self) -> bytes:
        """Canonical single-line serialization."""
        from bytesexp.printer import to_bytes

        return to_bytes(self)

    def to_bytes_mach(self) -> bytes:
        """Compact serialization without optional separators."""
        from bytesexp.printer import to_bytes_mach

        return to_bytes_mach(self)

    def write(self, sink: BinaryIO) -> None:
        """Write the canonical serialization to a binary sink."""
        from bytesexp.printer import write

        write(self, sink)

    def __str__(self) -> str:
        return self.to_bytes().decode("utf-8", errors="replace")

    # Convenience constructors
    @classmethod
    def atom(cls, value: AtomValue) -> Atom:
        """Create an atom node."""
        return Atom(value)

    @classmethod
    def list(cls, *children: Union[Sexp, AtomValue]) -> List:
        """Create a list node, wrapping plain values as atoms."""
        return List(child if isinstance(child, Sexp) else Atom(child) for child in children)


@dataclass(frozen=True, eq=False, repr=False)
class Atom(Sexp):
    """A leaf: an opaque, possibly empty, byte string."""

    data: bytes = b""

    def __post_init__(self):
        data = self.data
        if isinstance(data, str):
            data = data.encode("utf-8")
        elif isinstance(data, (bytearray, memoryview)):
            data = bytes(data)
        elif not isinstance(data, bytes):
            raise TypeError(f"Atom data must be bytes or str, not {type(data).__name__}")
        object.__setattr__(self, "data", data)

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"Atom({self.data!r})"


@dataclass(frozen=True, eq=False, repr=False)
class List(Sexp):
    """An ordered sequence of child trees."""

    children: Tuple[Sexp, ...] = ()

    def __post_init__(self):
        children = tuple(self.children)
        for child in children:
            if not isinstance(child, Sexp):
                raise TypeError(f"List children must be Sexp, not {type(child).__name__}")
        object.__setattr__(self, "children", children)

    def __len__(self) -> int:
        return len(self.children)

    def __iter__(self) -> Iterator[Sexp]:
        return iter(self.children)

    def __getitem__(self, index):
        return self.children[index]

    def __repr__(self) -> str:
        parts: list[str] = []
        stack: list[Iterator[Sexp]] = [iter(self.children)]
        parts.append("List([")
        # Whether the current list already has an element written
        started = [False]
        while stack:
            node = next(stack[-1], None)
            if node is None:
                stack.pop()
                started.pop()
                parts.append("])")
                continue
            if started[-1]:
                parts.append(", ")
            started[-1] = True
            if isinstance(node, Atom):
                parts.append(repr(node))
            else:
                parts.append("List([")
                stack.append(iter(node.children))
                started.append(False)
        return "".join(parts)


def atom(value: AtomValue) -> Atom:
    """Shorthand for Atom(value)."""
    return Atom(value)


def sexp_list(children: Iterable[Sexp] = ()) -> List:
    """Shorthand for List(children)."""
    return List(children)


__all__ = ["Sexp", "Atom", "List", "AtomValue", "atom", "sexp_list"]
