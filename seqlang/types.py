"""Runtime values for seqlang.

A value is either a plain Python ``int`` or a handle to a ``Sequence``.
Sequences are heap objects with an explicit reference count: every
handle the interpreter hands out has been counted with ``grab`` (or
came fresh from ``SequenceHeap.allocate``) and must be given back with
``release`` exactly once. Storage is dropped when the count reaches
zero, and any later access raises ``HeapError``.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Union

from .errors import HeapError, IndexOutOfBounds

INITIAL_CAPACITY = 5


class Sequence:
    """A growable array of integers with a reference count.

    Instances are created through ``SequenceHeap.allocate`` and start
    with one reference owned by the caller.
    """

    def __init__(self, heap: 'SequenceHeap', serial: int, items: List[int]):
        self.heap = heap
        self.serial = serial
        self.ref = 1
        self.capacity = max(INITIAL_CAPACITY, len(items))
        self._items: Optional[List[int]] = items

    def __repr__(self) -> str:
        if self._items is None:
            return f"<Sequence #{self.serial} freed>"
        return f"Sequence#{self.serial}({self._items!r}, ref={self.ref})"

    @property
    def freed(self) -> bool:
        return self._items is None

    @property
    def items(self) -> List[int]:
        if self._items is None:
            raise HeapError(f"sequence #{self.serial} used after free")
        return self._items

    @property
    def count(self) -> int:
        return len(self.items)

    def __len__(self) -> int:
        return self.count

    def grab(self) -> 'Sequence':
        if self._items is None:
            raise HeapError(f"sequence #{self.serial} grabbed after free")
        self.ref += 1
        self.heap._event(f"grab sequence #{self.serial} ref={self.ref}")
        return self

    def release(self) -> None:
        if self._items is None or self.ref <= 0:
            raise HeapError(f"sequence #{self.serial} released too many times")
        self.ref -= 1
        self.heap._event(f"release sequence #{self.serial} ref={self.ref}")
        if self.ref == 0:
            self._items = None
            self.heap._freed(self)

    def check_index(self, index: int) -> None:
        if index < 0 or index >= len(self.items):
            raise IndexOutOfBounds()

    def get(self, index: int) -> int:
        self.check_index(index)
        return self.items[index]

    def set(self, index: int, value: int) -> None:
        self.check_index(index)
        self.items[index] = value

    def push(self, value: int) -> None:
        items = self.items
        if len(items) >= self.capacity:
            self.capacity *= 2
        items.append(value)


class SequenceHeap:
    """Allocator for sequences that keeps count of what is still alive.

    ``on_event`` is called with a short description of every allocation,
    reference count change and free; the interpreter routes it to its
    debug trace.
    """

    def __init__(self, on_event: Optional[Callable[[str], None]] = None):
        self.allocated = 0
        self.freed = 0
        self.on_event = on_event

    @property
    def live(self) -> int:
        return self.allocated - self.freed

    def allocate(self, items: Iterable[int] = ()) -> Sequence:
        self.allocated += 1
        seq = Sequence(self, self.allocated, list(items))
        self._event(f"alloc sequence #{seq.serial} ref={seq.ref} count={seq.count} capacity={seq.capacity}")
        return seq

    def _event(self, msg: str) -> None:
        if self.on_event:
            self.on_event(msg)

    def _freed(self, seq: Sequence) -> None:
        self.freed += 1
        self._event(f"free sequence #{seq.serial}")


Value = Union[int, Sequence]


def type_name(value: Value) -> str:
    if isinstance(value, Sequence):
        return 'Seq'
    return 'Int'


def release(value: Value) -> None:
    """Give back a handle if ``value`` is a sequence; ints are ignored."""
    if isinstance(value, Sequence):
        value.release()


def to_python(value: Value) -> Union[int, List[int]]:
    """Plain Python copy of a value, without touching reference counts."""
    if isinstance(value, Sequence):
        return list(value.items)
    return value


def to_text(value: Value) -> str:
    """Text ``print`` writes for a value."""
    if isinstance(value, Sequence):
        return ''.join(chr(code & 0xFF) for code in value.items)
    return str(value)
