"""CPU and file I/O throughput benchmarks that report per interval."""

import os
import sys
import time
from operator import mul

N = 128
TIMES = 32
MINTICKS = 100
TOTAL_TICKS = 2000
OPSIZE = 160

# One tick is 2**20 cycles of a 10 MHz timer.
TICK_SECONDS = (1 << 20) / 10_000_000
DEFAULT_DURATION = TOTAL_TICKS * TICK_SECONDS


def make_matrices(n=N):
    """Return the matrices a, b and c: a[y][x] = y - x, b = -a, c zero."""
    a = [[float(y - x) for x in range(n)] for y in range(n)]
    b = [[float(x - y) for x in range(n)] for y in range(n)]
    c = [[0.0] * n for _ in range(n)]
    return a, b, c


def matmul(a, b, c, beta):
    """Add ``beta * a @ b`` into ``c`` in place and return ``c``."""
    columns = list(zip(*b))
    for arow, crow in zip(a, c):
        scaled = [beta * v for v in arow]
        crow[:] = [acc + sum(map(mul, scaled, col)) for acc, col in zip(crow, columns)]
    return c


def _interval(duration):
    return duration * MINTICKS / TOTAL_TICKS


def cpubench(duration=DEFAULT_DURATION, out=None):
    """Multiply matrices for ``duration`` seconds; return the operations reported.

    A batch stops early once the time is up, so short runs stay short.
    """
    out = sys.stdout if out is None else out
    pid = os.getpid()
    interval = _interval(duration)
    a, b, c = make_matrices(N)
    beta = 1.0
    start = time.monotonic()
    deadline = start + duration
    ops = total_ops = 0
    while time.monotonic() < deadline:
        end = time.monotonic()
        elapsed = end - start
        if elapsed > 0 and elapsed >= interval:
            measurement = int(ops * interval / elapsed) // 1_000_000
            out.write(f"{pid}: {measurement} MFLOP{MINTICKS}T\n")
            start = end
            total_ops += ops
            ops = 0
        for _ in range(TIMES):
            if time.monotonic() >= deadline:
                break
            matmul(a, b, c, beta)
            beta = -beta
            ops += 3 * N * N * N
    out.write(f"Termino cpubench {pid}: total ops {total_ops} --> \n")
    return total_ops


def iobench(path, duration=DEFAULT_DURATION, out=None):
    """Write and read back ``path`` repeatedly; return the operations reported."""
    out = sys.stdout if out is None else out
    pid = os.getpid()
    interval = _interval(duration)
    data = b"a" * OPSIZE
    start = time.monotonic()
    deadline = start + duration
    opsw = opsr = total_ops = 0
    while time.monotonic() < deadline:
        end = time.monotonic()
        elapsed = end - start

        fd = os.open(path, os.O_CREAT | os.O_WRONLY, 0o666)
        with os.fdopen(fd, "wb", buffering=0) as stream:
            for _ in range(TIMES):
                stream.write(data)
        opsw += 2 * TIMES

        with open(path, "rb", buffering=0) as stream:
            for _ in range(TIMES):
                stream.read(OPSIZE)
        opsr += 2 * TIMES

        if elapsed > 0 and elapsed >= interval:
            writes = int(opsw * interval / elapsed)
            reads = int(opsr * interval / elapsed)
            out.write(
                f"\t\t\t\t\t{pid}: {writes} OPW{MINTICKS}T, {reads} OPR{MINTICKS}T\n"
            )
            start = end
            total_ops += opsr + opsw
            opsw = opsr = 0
    out.write(f"Termino iobench {pid}: total ops {total_ops} -->\t\n")
    return total_ops


def cpubench_main(argv=None):
    """Run the CPU benchmark for the default duration."""
    cpubench(DEFAULT_DURATION, sys.stdout)
    return 0


def iobench_main(argv=None):
    """Run the I/O benchmark on a file named after the process id."""
    path = f"{os.getpid() % 100:02d}iops"
    iobench(path, DEFAULT_DURATION, sys.stdout)
    return 0