"""Virtio MMIO register offsets and the little-endian ring structures."""

import struct
from dataclasses import dataclass, field
from typing import ClassVar

VIRTIO_MMIO_MAGIC_VALUE = 0x000
VIRTIO_MMIO_VERSION = 0x004
VIRTIO_MMIO_DEVICE_ID = 0x008
VIRTIO_MMIO_VENDOR_ID = 0x00C
VIRTIO_MMIO_DEVICE_FEATURES = 0x010
VIRTIO_MMIO_DRIVER_FEATURES = 0x020
VIRTIO_MMIO_QUEUE_SEL = 0x030
VIRTIO_MMIO_QUEUE_NUM_MAX = 0x034
VIRTIO_MMIO_QUEUE_NUM = 0x038
VIRTIO_MMIO_QUEUE_READY = 0x044
VIRTIO_MMIO_QUEUE_NOTIFY = 0x050
VIRTIO_MMIO_INTERRUPT_STATUS = 0x060
VIRTIO_MMIO_INTERRUPT_ACK = 0x064
VIRTIO_MMIO_STATUS = 0x070
VIRTIO_MMIO_QUEUE_DESC_LOW = 0x080
VIRTIO_MMIO_QUEUE_DESC_HIGH = 0x084
VIRTIO_MMIO_DRIVER_DESC_LOW = 0x090
VIRTIO_MMIO_DRIVER_DESC_HIGH = 0x094
VIRTIO_MMIO_DEVICE_DESC_LOW = 0x0A0
VIRTIO_MMIO_DEVICE_DESC_HIGH = 0x0A4

VIRTIO_CONFIG_S_ACKNOWLEDGE = 1
VIRTIO_CONFIG_S_DRIVER = 2
VIRTIO_CONFIG_S_DRIVER_OK = 4
VIRTIO_CONFIG_S_FEATURES_OK = 8

VIRTIO_BLK_F_RO = 5
VIRTIO_BLK_F_SCSI = 7
VIRTIO_BLK_F_CONFIG_WCE = 11
VIRTIO_BLK_F_MQ = 12
VIRTIO_F_ANY_LAYOUT = 27
VIRTIO_RING_F_INDIRECT_DESC = 28
VIRTIO_RING_F_EVENT_IDX = 29

NUM = 8

VRING_DESC_F_NEXT = 1
VRING_DESC_F_WRITE = 2

VIRTIO_BLK_T_IN = 0
VIRTIO_BLK_T_OUT = 1


def _pack(layout, *values):
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise ValueError(str(exc)) from None


def _unpack(layout, data):
    data = bytes(data)
    if len(data) != layout.size:
        raise ValueError(f"expected {layout.size} bytes, got {len(data)}")
    return layout.unpack(data)


@dataclass(frozen=True)
class VirtqDesc:
    """One descriptor of the descriptor table."""

    addr: int
    len: int
    flags: int = 0
    next: int = 0

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<QIHH")

    def pack(self):
        return _pack(self.LAYOUT, self.addr, self.len, self.flags, self.next)

    @classmethod
    def unpack(cls, data):
        return cls(*_unpack(cls.LAYOUT, data))


@dataclass(frozen=True)
class VirtqAvail:
    """The available ring written by the driver."""

    flags: int = 0
    idx: int = 0
    ring: tuple = (0,) * NUM
    unused: int = 0

    LAYOUT: ClassVar[struct.Struct] = struct.Struct(f"<HH{NUM}HH")

    def __post_init__(self):
        ring = tuple(self.ring)
        if len(ring) != NUM:
            raise ValueError(f"ring must hold {NUM} entries")
        object.__setattr__(self, "ring", ring)

    def pack(self):
        return _pack(self.LAYOUT, self.flags, self.idx, *self.ring, self.unused)

    @classmethod
    def unpack(cls, data):
        values = _unpack(cls.LAYOUT, data)
        return cls(values[0], values[1], values[2:2 + NUM], values[2 + NUM])


@dataclass(frozen=True)
class VirtqUsedElem:
    """One completed request reported by the device."""

    id: int
    len: int

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<II")

    def pack(self):
        return _pack(self.LAYOUT, self.id, self.len)

    @classmethod
    def unpack(cls, data):
        return cls(*_unpack(cls.LAYOUT, data))


@dataclass(frozen=True)
class VirtqUsed:
    """The used ring written by the device."""

    flags: int = 0
    idx: int = 0
    ring: tuple = field(
        default_factory=lambda: tuple(VirtqUsedElem(0, 0) for _ in range(NUM))
    )

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<HH" + "II" * NUM)

    def __post_init__(self):
        ring = tuple(self.ring)
        if len(ring) != NUM:
            raise ValueError(f"ring must hold {NUM} entries")
        object.__setattr__(self, "ring", ring)

    def pack(self):
        values = [v for elem in self.ring for v in (elem.id, elem.len)]
        return _pack(self.LAYOUT, self.flags, self.idx, *values)

    @classmethod
    def unpack(cls, data):
        values = _unpack(cls.LAYOUT, data)
        pairs = values[2:]
        ring = tuple(VirtqUsedElem(i, n) for i, n in zip(pairs[0::2], pairs[1::2]))
        return cls(values[0], values[1], ring)


@dataclass(frozen=True)
class BlkRequest:
    """Header descriptor of a block device request."""

    type: int
    sector: int
    reserved: int = 0

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<IIQ")

    def pack(self):
        return _pack(self.LAYOUT, self.type, self.reserved, self.sector)

    @classmethod
    def unpack(cls, data):
        kind, reserved, sector = _unpack(cls.LAYOUT, data)
        return cls(type=kind, sector=sector, reserved=reserved)