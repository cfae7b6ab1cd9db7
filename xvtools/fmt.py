"""Minimal printf-style formatting: %d %l %x %p %s %c and %%."""

import sys

_DIGITS = "0123456789ABCDEF"
_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _as_int32(value):
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


def _render_int(value, base, signed):
    """Render a 32-bit integer the way a C int argument would print."""
    value = _as_int32(int(value))
    negative = signed and value < 0
    x = -value if negative else value & _MASK32
    digits = []
    while True:
        x, rem = divmod(x, base)
        digits.append(_DIGITS[rem])
        if x == 0:
            break
    if negative:
        digits.append("-")
    return "".join(reversed(digits))


def _render_pointer(value):
    return "0x" + f"{int(value) & _MASK64:016X}"


def _render_char(value):
    if isinstance(value, str):
        if len(value) != 1:
            raise ValueError("%c expects a single character")
        return value
    return chr(int(value) & 0xFF)


def format(fmt, *args):
    """Return ``fmt`` with its conversions replaced by ``args``."""
    values = iter(args)

    def take():
        try:
            return next(values)
        except StopIteration:
            raise TypeError("not enough arguments for format string") from None

    out = []
    pending = False
    for c in fmt:
        if not pending:
            if c == "%":
                pending = True
            else:
                out.append(c)
            continue
        pending = False
        if c == "d":
            out.append(_render_int(take(), 10, True))
        elif c == "l":
            out.append(_render_int(take(), 10, False))
        elif c == "x":
            out.append(_render_int(take(), 16, False))
        elif c == "p":
            out.append(_render_pointer(take()))
        elif c == "s":
            s = take()
            out.append("(null)" if s is None else str(s))
        elif c == "c":
            out.append(_render_char(take()))
        elif c == "%":
            out.append("%")
        else:
            out.append("%" + c)
    return "".join(out)


def fprintf(stream, fmt, *args):
    """Format and write to a text stream."""
    stream.write(format(fmt, *args))


def printf(fmt, *args):
    """Format and write to standard output."""
    fprintf(sys.stdout, fmt, *args)