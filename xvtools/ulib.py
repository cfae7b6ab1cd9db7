"""Small string and input helpers used by the user programs."""


def atoi(s):
    """Parse the leading decimal digits of ``s``; no sign, no whitespace."""
    n = 0
    for ch in s:
        if not "0" <= ch <= "9":
            break
        n = n * 10 + (ord(ch) - ord("0"))
    return n


def _c_bytes(value):
    data = value.encode("utf-8") if isinstance(value, str) else bytes(value)
    end = data.find(b"\0")
    return data if end < 0 else data[:end]


def strcmp(p, q):
    """Compare as C strings; return the difference of the first unequal bytes."""
    a = _c_bytes(p)
    b = _c_bytes(q)
    for x, y in zip(a, b):
        if x != y:
            return x - y
    if len(a) == len(b):
        return 0
    return a[len(b)] if len(a) > len(b) else -b[len(a)]


def gets(stream, max):
    """Read at most ``max - 1`` characters, stopping after a newline or return."""
    parts = []
    empty = None
    while len(parts) + 1 < max:
        c = stream.read(1)
        if empty is None:
            empty = c[:0]
        if not c:
            break
        parts.append(c)
        if c in ("\n", "\r") or c in (b"\n", b"\r"):
            break
    return ("" if empty is None else empty).join(parts)