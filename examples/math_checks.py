"""Example checks for arithmetic helpers."""

import tempfile
from pathlib import Path

import utest

_scratch: dict[str, Path] = {}


def mean(values):
    return sum(values) / len(values)


@utest.init(context="Math")
def make_scratch_dir():
    _scratch["dir"] = Path(tempfile.mkdtemp(prefix="utest-math-"))
    return _scratch["dir"].is_dir()


@utest.cleanup(context="Math")
def remove_scratch_dir():
    directory = _scratch.pop("dir")
    for path in directory.iterdir():
        path.unlink()
    directory.rmdir()
    return not directory.exists()


@utest.case(context="Math", must_pass=True)
def addition_is_sane(t):
    t.equal(1 + 1, 2)


@utest.case(context="Math")
def MeanOfValues(t):
    t.equal(mean([1, 2, 3]), 2)
    t.raises(ZeroDivisionError, mean, [])


@utest.case(context="Math")
def results_round_trip_through_a_file(t):
    path = _scratch["dir"] / "result.txt"
    path.write_text(str(mean([2, 4])))
    t.compare(float(path.read_text()), "==", 3.0)
