import pytest

from seqlang.environment import Environment
from seqlang.errors import HeapError, IndexOutOfBounds
from seqlang.types import SequenceHeap, to_text, type_name


def test_sequence_is_freed_exactly_when_count_reaches_zero():
    heap = SequenceHeap()
    seq = heap.allocate([1, 2])
    seq.grab()
    seq.release()
    assert not seq.freed and heap.live == 1
    seq.release()
    assert seq.freed and heap.live == 0 and heap.freed == 1


def test_release_past_zero_and_use_after_free_are_detected():
    heap = SequenceHeap()
    seq = heap.allocate()
    seq.release()
    with pytest.raises(HeapError):
        seq.release()
    with pytest.raises(HeapError):
        seq.grab()
    with pytest.raises(HeapError):
        seq.push(1)
    assert heap.freed == 1


def test_element_access_checks_bounds():
    seq = SequenceHeap().allocate([3])
    assert seq.get(0) == 3
    seq.set(0, 4)
    assert seq.items == [4]
    with pytest.raises(IndexOutOfBounds):
        seq.get(1)
    with pytest.raises(IndexOutOfBounds):
        seq.set(-1, 0)


def test_heap_reports_reference_count_changes():
    events = []
    heap = SequenceHeap(on_event=events.append)
    seq = heap.allocate([7])
    seq.grab()
    seq.release()
    seq.release()
    assert events == [
        'alloc sequence #1 ref=1 count=1 capacity=%d' % seq.capacity,
        'grab sequence #1 ref=2',
        'release sequence #1 ref=1',
        'release sequence #1 ref=0',
        'free sequence #1',
    ]


def test_value_helpers():
    seq = SequenceHeap().allocate([104, 105, 256 + 33])
    assert type_name(seq) == 'Seq'
    assert type_name(7) == 'Int'
    assert to_text(seq) == 'hi!'
    assert to_text(-12) == '-12'


def test_environment_owns_one_reference_per_entry():
    heap = SequenceHeap()
    env = Environment()
    assert env.lookup('x') == 0

    first = heap.allocate([1])
    env.set('x', first)
    env.set('y', 5)
    env.set('x', heap.allocate([2]))
    assert first.freed
    assert env.export_names == ['x', 'y']
    assert env.snapshot() == {'x': [2], 'y': 5}

    shared = env.lookup('x').grab()
    env.set('z', shared)
    env.teardown()
    assert heap.live == 0
    assert env.export_names == []
