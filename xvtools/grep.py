"""A small grep that understands only the ^ . * $ operators."""

import sys

_BUFSIZE = 1024


def match(re, text):
    """Return True if ``re`` matches anywhere in ``text``."""
    if re.startswith("^"):
        return _matchhere(re[1:], text)
    # The empty suffix is tried too, so patterns like "$" can match.
    return any(_matchhere(re, text[start:]) for start in range(len(text) + 1))


def _matchhere(re, text):
    """Match ``re`` at the beginning of ``text``."""
    if not re:
        return True
    if len(re) > 1 and re[1] == "*":
        return _matchstar(re[0], re[2:], text)
    if re == "$":
        return not text
    if text and (re[0] == "." or re[0] == text[0]):
        return _matchhere(re[1:], text[1:])
    return False


def _matchstar(c, re, text):
    """Match ``c*`` followed by ``re`` at the beginning of ``text``."""
    pos = 0
    while True:
        if _matchhere(re, text[pos:]):
            return True
        if pos < len(text) and (text[pos] == c or c == "."):
            pos += 1
        else:
            return False


def grep(pattern, stream, out):
    """Write to ``out`` every complete line of ``stream`` that matches.

    Lines are read through a fixed buffer: a final line without a newline
    is ignored, and a line that does not fit the buffer ends the scan.
    """
    pending = ""
    while True:
        room = _BUFSIZE - 1 - len(pending)
        chunk = stream.read(room) if room > 0 else ""
        if not chunk:
            break
        pending += chunk
        *lines, pending = pending.split("\n")
        for line in lines:
            if match(pattern, line):
                out.write(line + "\n")


def main(argv=None):
    """Run grep on the files named in ``argv``, or on standard input."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern, *paths = args
    if not paths:
        grep(pattern, sys.stdin, sys.stdout)
        return 0
    for path in paths:
        try:
            stream = open(path, encoding="utf-8", errors="replace", newline="")
        except OSError:
            sys.stdout.write(f"grep: cannot open {path}\n")
            return 1
        with stream:
            grep(pattern, stream, sys.stdout)
    return 0