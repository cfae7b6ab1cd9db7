"""A first-fit free-list allocator over a simulated program break."""

from dataclasses import dataclass

HEADER_SIZE = 16
MIN_UNITS = 4096
_BASE = -HEADER_SIZE


@dataclass
class _Header:
    ptr: int | None
    size: int


class Heap:
    """Circular free list of blocks, grown through :meth:`sbrk`."""

    def __init__(self, limit):
        if limit < 0:
            raise ValueError("limit must be non-negative")
        self.limit = limit
        self._brk = 0
        self._headers = {}
        self._allocated = set()
        self._freep = None

    def sbrk(self, n):
        """Move the break by ``n`` bytes and return the old break."""
        old = self._brk
        new = old + n
        if new < 0 or new > self.limit:
            raise MemoryError("sbrk: out of memory")
        self._brk = new
        return old

    def _release(self, bp):
        hdr = self._headers
        p = self._freep
        while not (p < bp < hdr[p].ptr):
            if p >= hdr[p].ptr and (bp > p or bp < hdr[p].ptr):
                break
            p = hdr[p].ptr
        block = hdr[bp]
        prev = hdr[p]
        if bp + block.size * HEADER_SIZE == prev.ptr:
            following = hdr.pop(prev.ptr)
            block.size += following.size
            block.ptr = following.ptr
        else:
            block.ptr = prev.ptr
        if p + prev.size * HEADER_SIZE == bp:
            prev.size += block.size
            prev.ptr = block.ptr
            del hdr[bp]
        else:
            prev.ptr = bp
        self._freep = p

    def _morecore(self, nunits):
        nunits = max(nunits, MIN_UNITS)
        try:
            start = self.sbrk(nunits * HEADER_SIZE)
        except MemoryError:
            return None
        self._headers[start] = _Header(None, nunits)
        self._release(start)
        return self._freep

    def malloc(self, nbytes):
        """Allocate ``nbytes`` and return the address of the usable area."""
        if nbytes < 0:
            raise ValueError("nbytes must be non-negative")
        nunits = (nbytes + HEADER_SIZE - 1) // HEADER_SIZE + 1
        if self._freep is None:
            self._headers[_BASE] = _Header(_BASE, 0)
            self._freep = _BASE
        prevp = self._freep
        p = self._headers[prevp].ptr
        while True:
            block = self._headers[p]
            if block.size >= nunits:
                if block.size == nunits:
                    self._headers[prevp].ptr = block.ptr
                else:
                    block.size -= nunits
                    p += block.size * HEADER_SIZE
                    self._headers[p] = _Header(None, nunits)
                self._freep = prevp
                self._allocated.add(p)
                return p + HEADER_SIZE
            if p == self._freep:
                p = self._morecore(nunits)
                if p is None:
                    raise MemoryError("malloc: out of memory")
            prevp, p = p, self._headers[p].ptr

    def free(self, address):
        """Return a block obtained from :meth:`malloc`."""
        bp = address - HEADER_SIZE
        if bp not in self._allocated:
            raise ValueError(f"free: {address:#x} is not an allocated block")
        self._allocated.remove(bp)
        self._release(bp)

    def free_units(self):
        """Total size, in header units, of the blocks on the free list."""
        if self._freep is None:
            return 0
        total = 0
        p = self._headers[_BASE].ptr
        while p != _BASE:
            total += self._headers[p].size
            p = self._headers[p].ptr
        return total