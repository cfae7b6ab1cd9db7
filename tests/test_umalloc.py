import pytest

from xvtools.umalloc import HEADER_SIZE, MIN_UNITS, Heap


def test_sbrk_moves_break():
    heap = Heap(100)
    assert heap.sbrk(10) == 0
    assert heap.sbrk(0) == 10
    assert heap.sbrk(-5) == 10
    assert heap.sbrk(0) == 5


def test_sbrk_beyond_limit_fails():
    heap = Heap(100)
    with pytest.raises(MemoryError):
        heap.sbrk(101)
    with pytest.raises(MemoryError):
        heap.sbrk(-1)
    assert heap.sbrk(0) == 0


def test_malloc_fails_when_heap_cannot_grow():
    with pytest.raises(MemoryError):
        Heap(1000).malloc(1)


def test_request_larger_than_limit_fails():
    heap = Heap(MIN_UNITS * HEADER_SIZE)
    with pytest.raises(MemoryError):
        heap.malloc(MIN_UNITS * HEADER_SIZE)


def test_allocations_are_aligned_and_disjoint():
    heap = Heap(MIN_UNITS * HEADER_SIZE * 4)
    sizes = [1, 10, 100, 1000, 16, 17, 4000]
    spans = []
    for size in sizes:
        addr = heap.malloc(size)
        assert addr % HEADER_SIZE == 0
        spans.append((addr, addr + size))
    spans.sort()
    for (_, end), (start, _) in zip(spans, spans[1:]):
        assert end <= start


def test_free_everything_restores_free_space():
    heap = Heap(MIN_UNITS * HEADER_SIZE)
    addrs = [heap.malloc(n) for n in (10, 200, 3000, 5)]
    assert heap.free_units() < MIN_UNITS
    for addr in reversed(addrs):
        heap.free(addr)
    assert heap.free_units() == MIN_UNITS


def test_free_in_any_order_coalesces():
    heap = Heap(MIN_UNITS * HEADER_SIZE)
    addrs = [heap.malloc(64) for _ in range(6)]
    for addr in addrs[::2] + addrs[1::2]:
        heap.free(addr)
    assert heap.free_units() == MIN_UNITS
    big = heap.malloc((MIN_UNITS - 1) * HEADER_SIZE)
    assert big % HEADER_SIZE == 0


def test_freed_block_is_reused():
    heap = Heap(MIN_UNITS * HEADER_SIZE)
    first = heap.malloc(100)
    heap.free(first)
    assert heap.malloc(100) == first


def test_double_free_rejected():
    heap = Heap(MIN_UNITS * HEADER_SIZE)
    addr = heap.malloc(8)
    heap.free(addr)
    with pytest.raises(ValueError):
        heap.free(addr)


def test_free_unknown_address_rejected():
    heap = Heap(MIN_UNITS * HEADER_SIZE)
    heap.malloc(8)
    with pytest.raises(ValueError):
        heap.free(12345)


def test_heap_grows_past_first_chunk():
    heap = Heap(MIN_UNITS * HEADER_SIZE * 3)
    addrs = [heap.malloc(10001) for _ in range(10)]
    assert len(set(addrs)) == 10
    assert heap.sbrk(0) > MIN_UNITS * HEADER_SIZE
    for addr in addrs:
        heap.free(addr)
    assert heap.free_units() * HEADER_SIZE == heap.sbrk(0)