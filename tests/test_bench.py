import io
import re

from xvtools import bench


def test_make_matrices_shape_and_symmetry():
    a, b, c = bench.make_matrices(5)
    assert len(a) == len(b) == len(c) == 5
    for y in range(5):
        assert a[y][y] == 0.0
        for x in range(5):
            assert a[y][x] == -a[x][y]
            assert b[y][x] == -a[y][x]
            assert c[y][x] == 0.0
    assert a[2][0] == 2.0


def test_matmul_with_identity_scales_b():
    _, b, c = bench.make_matrices(3)
    identity = [[1.0 if x == y else 0.0 for x in range(3)] for y in range(3)]
    result = bench.matmul(identity, b, c, 2.0)
    assert result is c
    assert c == [[2.0 * v for v in row] for row in b]


def test_matmul_alternating_beta_cancels():
    a, b, c = bench.make_matrices(4)
    bench.matmul(a, b, c, 1.0)
    assert any(v != 0.0 for row in c for v in row)
    bench.matmul(a, b, c, -1.0)
    assert all(v == 0.0 for row in c for v in row)


def test_cpubench_zero_duration_reports_nothing():
    out = io.StringIO()
    total = bench.cpubench(0.0, out)
    assert total == 0
    lines = out.getvalue().splitlines()
    assert len(lines) == 1
    assert re.fullmatch(r"Termino cpubench \d+: total ops 0 --> ", lines[0])


def test_iobench_zero_duration_touches_no_file(tmp_path):
    path = tmp_path / "iops"
    out = io.StringIO()
    assert bench.iobench(str(path), 0.0, out) == 0
    assert not path.exists()
    assert out.getvalue().startswith("Termino iobench")


def test_iobench_writes_and_reports(tmp_path):
    path = tmp_path / "iops"
    out = io.StringIO()
    total = bench.iobench(str(path), 0.05, out)
    assert path.stat().st_size == bench.OPSIZE * bench.TIMES
    assert total % (4 * bench.TIMES) == 0
    lines = out.getvalue().splitlines()
    assert lines[-1].startswith("Termino iobench")
    assert lines[-1].endswith(f"total ops {total} -->\t")
    for line in lines[:-1]:
        assert re.fullmatch(r"\t{5}\d+: \d+ OPW100T, \d+ OPR100T", line)