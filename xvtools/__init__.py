"""Userland tools and kernel building blocks of a small teaching Unix."""

__version__ = "0.1.0"

__all__ = [
    "bench",
    "coreutils",
    "fmt",
    "grep",
    "layout",
    "prng",
    "sh",
    "ulib",
    "umalloc",
    "virtio",
    "vm",
]