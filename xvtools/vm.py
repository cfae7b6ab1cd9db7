"""Sv39 three-level page tables over a simulated physical memory."""

import struct
from dataclasses import dataclass

from xvtools.layout import KERNBASE

PGSIZE = 4096
PGSHIFT = 12
PXMASK = 0x1FF
# One bit less than the full 39-bit Sv39 range, so that addresses never
# need sign extension.
MAXVA = 1 << (9 + 9 + 9 + 12 - 1)

PTE_V = 1 << 0
PTE_R = 1 << 1
PTE_W = 1 << 2
PTE_X = 1 << 3
PTE_U = 1 << 4

_ENTRIES_PER_TABLE = 512
_PTE = struct.Struct("<Q")


class KernelPanic(RuntimeError):
    """An invariant of the kernel was broken."""


def pg_round_up(a):
    """Round ``a`` up to a page boundary."""
    return (a + PGSIZE - 1) & ~(PGSIZE - 1)


def pg_round_down(a):
    """Round ``a`` down to a page boundary."""
    return a & ~(PGSIZE - 1)


def _px(level, va):
    return (va >> (PGSHIFT + 9 * level)) & PXMASK


def _pa2pte(pa):
    return (pa >> PGSHIFT) << 10


def _pte2pa(pte):
    return (pte >> 10) << PGSHIFT


class PhysicalMemory:
    """A run of physical pages starting at KERNBASE, with a page allocator."""

    def __init__(self, npages):
        if npages < 0:
            raise ValueError("npages must be non-negative")
        self.base = KERNBASE
        self.end = KERNBASE + npages * PGSIZE
        self._ram = bytearray(npages * PGSIZE)
        self._free = [self.base + i * PGSIZE for i in reversed(range(npages))]
        self._free_set = set(self._free)

    def kalloc(self):
        """Take one page off the free list and return its physical address."""
        if not self._free:
            raise MemoryError("kalloc: out of memory")
        pa = self._free.pop()
        self._free_set.discard(pa)
        return pa

    def kfree(self, pa):
        """Return a page obtained from :meth:`kalloc`."""
        if pa % PGSIZE or not self.base <= pa < self.end:
            raise KernelPanic("kfree")
        if pa in self._free_set:
            raise KernelPanic("kfree: page already free")
        self._free.append(pa)
        self._free_set.add(pa)

    def _offset(self, pa, n):
        if n < 0 or pa < self.base or pa + n > self.end:
            raise KernelPanic(f"physical access out of range: {pa:#x}")
        return pa - self.base

    def read(self, pa, n):
        """Read ``n`` bytes at physical address ``pa``."""
        off = self._offset(pa, n)
        return bytes(self._ram[off:off + n])

    def write(self, pa, data):
        """Write ``data`` at physical address ``pa``."""
        data = bytes(data)
        off = self._offset(pa, len(data))
        self._ram[off:off + len(data)] = data

    def zero_page(self, pa):
        self.write(pa, bytes(PGSIZE))

    def free_pages(self):
        """Number of pages on the free list."""
        return len(self._free)


@dataclass(eq=False)
class Pte:
    """A page-table entry stored in physical memory."""

    memory: PhysicalMemory
    address: int

    @property
    def value(self):
        return _PTE.unpack(self.memory.read(self.address, _PTE.size))[0]

    @value.setter
    def value(self, raw):
        self.memory.write(self.address, _PTE.pack(raw & 0xFFFFFFFFFFFFFFFF))

    @property
    def valid(self):
        return bool(self.value & PTE_V)

    @property
    def flags(self):
        return self.value & 0x3FF

    @property
    def pa(self):
        return _pte2pa(self.value)


class AddressSpace:
    """A user page table and the memory it maps."""

    def __init__(self, memory):
        self.memory = memory
        self.root = memory.kalloc()
        memory.zero_page(self.root)

    def _entry(self, table, index):
        return Pte(self.memory, table + _PTE.size * index)

    def walk(self, va, alloc=False):
        """Return the level-0 entry for ``va``, creating tables if ``alloc``."""
        if not 0 <= va < MAXVA:
            raise KernelPanic("walk")
        table = self.root
        for level in (2, 1):
            pte = self._entry(table, _px(level, va))
            if pte.valid:
                table = pte.pa
                continue
            if not alloc:
                return None
            try:
                table = self.memory.kalloc()
            except MemoryError:
                return None
            self.memory.zero_page(table)
            pte.value = _pa2pte(table) | PTE_V
        return self._entry(table, _px(0, va))

    def walkaddr(self, va):
        """Physical address of a user page, or None if it is not mapped."""
        if not 0 <= va < MAXVA:
            return None
        pte = self.walk(va, False)
        if pte is None:
            return None
        value = pte.value
        if not value & PTE_V or not value & PTE_U:
            return None
        return _pte2pa(value)

    def mappages(self, va, size, pa, perm):
        """Map ``size`` bytes at ``va`` to physical memory at ``pa``."""
        if size == 0:
            raise KernelPanic("mappages: size")
        a = pg_round_down(va)
        last = pg_round_down(va + size - 1)
        while True:
            pte = self.walk(a, True)
            if pte is None:
                raise MemoryError("mappages: cannot allocate a page-table page")
            if pte.valid:
                raise KernelPanic("mappages: remap")
            pte.value = _pa2pte(pa) | perm | PTE_V
            if a == last:
                return
            a += PGSIZE
            pa += PGSIZE

    def unmap(self, va, npages, do_free):
        """Remove ``npages`` existing mappings from ``va``, freeing if asked."""
        if va % PGSIZE:
            raise KernelPanic("uvmunmap: not aligned")
        for a in range(va, va + npages * PGSIZE, PGSIZE):
            pte = self.walk(a, False)
            if pte is None:
                raise KernelPanic("uvmunmap: walk")
            if not pte.valid:
                raise KernelPanic("uvmunmap: not mapped")
            if pte.flags == PTE_V:
                raise KernelPanic("uvmunmap: not a leaf")
            if do_free:
                self.memory.kfree(pte.pa)
            pte.value = 0

    def load_first(self, src):
        """Place ``src``, less than a page, at address zero."""
        src = bytes(src)
        if len(src) >= PGSIZE:
            raise KernelPanic("uvmfirst: more than a page")
        mem = self.memory.kalloc()
        self.memory.zero_page(mem)
        self.mappages(0, PGSIZE, mem, PTE_W | PTE_R | PTE_X | PTE_U)
        self.memory.write(mem, src)

    def grow(self, oldsz, newsz, xperm):
        """Allocate zeroed pages to grow from ``oldsz`` to ``newsz``."""
        if newsz < oldsz:
            return oldsz
        oldsz = pg_round_up(oldsz)
        for a in range(oldsz, newsz, PGSIZE):
            try:
                mem = self.memory.kalloc()
            except MemoryError:
                self.shrink(a, oldsz)
                raise
            self.memory.zero_page(mem)
            try:
                self.mappages(a, PGSIZE, mem, PTE_R | PTE_U | xperm)
            except MemoryError:
                self.memory.kfree(mem)
                self.shrink(a, oldsz)
                raise
        return newsz

    def shrink(self, oldsz, newsz):
        """Free pages to bring the size from ``oldsz`` down to ``newsz``."""
        if newsz >= oldsz:
            return oldsz
        if pg_round_up(newsz) < pg_round_up(oldsz):
            npages = (pg_round_up(oldsz) - pg_round_up(newsz)) // PGSIZE
            self.unmap(pg_round_up(newsz), npages, True)
        return newsz

    def _freewalk(self, table):
        raw = self.memory.read(table, PGSIZE)
        for index, (pte,) in enumerate(_PTE.iter_unpack(raw)):
            if pte & PTE_V and not pte & (PTE_R | PTE_W | PTE_X):
                self._freewalk(_pte2pa(pte))
                self._entry(table, index).value = 0
            elif pte & PTE_V:
                raise KernelPanic("freewalk: leaf")
        self.memory.kfree(table)

    def free(self, sz):
        """Free the user pages below ``sz`` and then the page tables."""
        if sz > 0:
            self.unmap(0, pg_round_up(sz) // PGSIZE, True)
        self._freewalk(self.root)
        self.root = None

    def copy_to(self, other, sz):
        """Copy the first ``sz`` bytes of memory and mappings into ``other``."""
        for i in range(0, sz, PGSIZE):
            pte = self.walk(i, False)
            if pte is None:
                raise KernelPanic("uvmcopy: pte should exist")
            if not pte.valid:
                raise KernelPanic("uvmcopy: page not present")
            pa, flags = pte.pa, pte.flags
            try:
                mem = self.memory.kalloc()
            except MemoryError:
                other.unmap(0, i // PGSIZE, True)
                raise
            self.memory.write(mem, self.memory.read(pa, PGSIZE))
            try:
                other.mappages(i, PGSIZE, mem, flags)
            except MemoryError:
                self.memory.kfree(mem)
                other.unmap(0, i // PGSIZE, True)
                raise

    def clear_user(self, va):
        """Make the page at ``va`` inaccessible to user code."""
        pte = self.walk(va, False)
        if pte is None:
            raise KernelPanic("uvmclear")
        pte.value = pte.value & ~PTE_U

    def copyout(self, dstva, data):
        """Copy ``data`` into user memory at ``dstva``."""
        view = memoryview(bytes(data))
        while view:
            va0 = pg_round_down(dstva)
            pa0 = self.walkaddr(va0)
            if pa0 is None:
                raise ValueError(f"copyout: bad address {dstva:#x}")
            n = min(PGSIZE - (dstva - va0), len(view))
            self.memory.write(pa0 + (dstva - va0), view[:n])
            view = view[n:]
            dstva = va0 + PGSIZE

    def copyin(self, srcva, n):
        """Read ``n`` bytes of user memory at ``srcva``."""
        chunks = []
        while n > 0:
            va0 = pg_round_down(srcva)
            pa0 = self.walkaddr(va0)
            if pa0 is None:
                raise ValueError(f"copyin: bad address {srcva:#x}")
            count = min(PGSIZE - (srcva - va0), n)
            chunks.append(self.memory.read(pa0 + (srcva - va0), count))
            n -= count
            srcva = va0 + PGSIZE
        return b"".join(chunks)

    def copyinstr(self, srcva, max):
        """Read a NUL-terminated string of at most ``max`` bytes, without the NUL."""
        out = bytearray()
        while max > 0:
            va0 = pg_round_down(srcva)
            pa0 = self.walkaddr(va0)
            if pa0 is None:
                raise ValueError(f"copyinstr: bad address {srcva:#x}")
            count = min(PGSIZE - (srcva - va0), max)
            chunk = self.memory.read(pa0 + (srcva - va0), count)
            end = chunk.find(0)
            if end >= 0:
                out += chunk[:end]
                return bytes(out)
            out += chunk
            max -= count
            srcva = va0 + PGSIZE
        raise ValueError("copyinstr: string not terminated")