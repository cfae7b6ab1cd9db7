"""The small file utilities: cat, echo, wc, ls, mkdir, rm, ln and kill."""

import os
import signal
import stat
import sys
from typing import NamedTuple

from xvtools.layout import FileType
from xvtools.ulib import atoi

DIRSIZ = 14
_BUFSIZE = 512
_LS_BUFSIZE = 512
_WC_SPACE = " \r\t\n\v\0"


def cat(stream, out):
    """Copy ``stream`` to ``out`` in small chunks; return the amount copied."""
    total = 0
    while True:
        chunk = stream.read(_BUFSIZE)
        if not chunk:
            return total
        out.write(chunk)
        total += len(chunk)


def cat_main(argv=None):
    """Concatenate the named files, or standard input, to standard output."""
    args = sys.argv[1:] if argv is None else list(argv)
    out = sys.stdout.buffer
    try:
        if not args:
            cat(sys.stdin.buffer, out)
            return 0
        for path in args:
            try:
                stream = open(path, "rb")
            except OSError:
                sys.stderr.write(f"cat: cannot open {path}\n")
                return 1
            with stream:
                cat(stream, out)
    except OSError:
        sys.stderr.write("cat: read error\n")
        return 1
    finally:
        out.flush()
    return 0


def echo_main(argv=None):
    """Print the arguments separated by spaces."""
    args = sys.argv[1:] if argv is None else list(argv)
    if args:
        sys.stdout.write(" ".join(args) + "\n")
    return 0


class WcCounts(NamedTuple):
    lines: int
    words: int
    chars: int


def wc_counts(stream):
    """Count lines, words and characters (bytes for binary streams)."""
    lines = words = chars = 0
    inword = False
    while True:
        chunk = stream.read(_BUFSIZE)
        if not chunk:
            break
        if isinstance(chunk, (bytes, bytearray)):
            chunk = bytes(chunk).decode("latin-1")
        for ch in chunk:
            chars += 1
            if ch == "\n":
                lines += 1
            if ch in _WC_SPACE:
                inword = False
            elif not inword:
                words += 1
                inword = True
    return WcCounts(lines, words, chars)


def wc_main(argv=None):
    """Print line, word and byte counts of each named file or of standard input."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        counts = wc_counts(sys.stdin.buffer)
        sys.stdout.write(f"{counts.lines} {counts.words} {counts.chars} \n")
        return 0
    for path in args:
        try:
            stream = open(path, "rb")
        except OSError:
            sys.stdout.write(f"wc: cannot open {path}\n")
            return 1
        with stream:
            try:
                counts = wc_counts(stream)
            except OSError:
                sys.stdout.write("wc: read error\n")
                return 1
        sys.stdout.write(f"{counts.lines} {counts.words} {counts.chars} {path}\n")
    return 0


def fmtname(path):
    """Last path component, blank-padded to DIRSIZ characters."""
    name = path[path.rfind("/") + 1:]
    if len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def _file_type(mode):
    if stat.S_ISDIR(mode):
        return FileType.DIR
    if stat.S_ISREG(mode):
        return FileType.FILE
    return FileType.DEVICE


def _entry_line(path, st):
    kind = _file_type(st.st_mode)
    return f"{fmtname(path)} {int(kind)} {st.st_ino} {st.st_size}\n"


def ls(path, out):
    """Describe a file, or each entry of a directory, on ``out``."""
    try:
        st = os.stat(path)
    except OSError:
        sys.stderr.write(f"ls: cannot open {path}\n")
        return
    if _file_type(st.st_mode) is not FileType.DIR:
        out.write(_entry_line(path, st))
        return
    if len(path) + 1 + DIRSIZ + 1 > _LS_BUFSIZE:
        out.write("ls: path too long\n")
        return
    try:
        names = sorted(os.listdir(path))
    except OSError:
        sys.stderr.write(f"ls: cannot open {path}\n")
        return
    for name in [".", "..", *names]:
        child = f"{path}/{name}"
        try:
            child_st = os.stat(child)
        except OSError:
            out.write(f"ls: cannot stat {child}\n")
            continue
        out.write(_entry_line(child, child_st))


def ls_main(argv=None):
    """List each named path, or the current directory."""
    args = sys.argv[1:] if argv is None else list(argv)
    for path in args or ["."]:
        ls(path, sys.stdout)
    return 0


def mkdir_main(argv=None):
    """Create directories, stopping at the first failure."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("Usage: mkdir files...\n")
        return 1
    for path in args:
        try:
            os.mkdir(path)
        except OSError:
            sys.stderr.write(f"mkdir: {path} failed to create\n")
            break
    return 0


def rm_main(argv=None):
    """Remove files or empty directories, stopping at the first failure."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("Usage: rm files...\n")
        return 1
    for path in args:
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                os.rmdir(path)
            else:
                os.unlink(path)
        except OSError:
            sys.stderr.write(f"rm: {path} failed to delete\n")
            break
    return 0


def ln_main(argv=None):
    """Create a hard link ``new`` to ``old``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        sys.stderr.write("Usage: ln old new\n")
        return 1
    old, new = args
    try:
        os.link(old, new)
    except OSError:
        sys.stderr.write(f"link {old} {new}: failed\n")
    return 0


def kill_main(argv=None):
    """Terminate the processes whose ids are given."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        sys.stderr.write("usage: kill pid...\n")
        return 1
    sig = getattr(signal, "SIGKILL", signal.SIGTERM)
    for arg in args:
        pid = atoi(arg)
        if pid <= 0:
            # There is no process with id 0; the request simply fails.
            continue
        try:
            os.kill(pid, sig)
        except OSError:
            pass
    return 0