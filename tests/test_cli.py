import pytest

from iterative_stability import Batch
from iterative_stability import cli
from iterative_stability.cli import build_parser, main


def test_defaults():
    opt = build_parser().parse_args([])
    assert opt.fractal == "mandelbrot"
    assert opt.strategy == "sequential"
    assert opt.max_iterations == 1000
    assert opt.lower == [-2.0, -2.0]
    assert opt.upper == [2.0, 2.0]


def test_mandelbrot_summary(capsys):
    assert main(["--x-res", "5", "--y-res", "5"]) == 0
    out = capsys.readouterr().out
    assert "fractal: mandelbrot" in out
    assert "resolution: 5x5" in out
    assert "pixels: 25" in out
    assert "stable: " in out


def test_julia_summary(capsys):
    assert main(["--fractal", "julia", "--c", "0", "0", "--x-res", "5", "--y-res", "5", "--max-iterations", "50"]) == 0
    out = capsys.readouterr().out
    assert "fractal: julia" in out
    assert "pixels: 25" in out


def test_parallel_strategy(capsys):
    assert main(["--x-res", "4", "--y-res", "3", "--strategy", "parallel", "--workers", "2"]) == 0
    assert "pixels: 12" in capsys.readouterr().out


@pytest.mark.parametrize(
    "argv",
    [
        ["--fractal", "julia"],
        ["--fractal", "julia", "--c", "0", "0", "--strategy", "batch"],
        ["--x-res", "0"],
        ["--max-iterations", "-1"],
        ["--strategy", "gpu"],
        ["--strategy", "parallel", "--workers", "0"],
        ["--workers", "-3"],
    ],
)
def test_bad_arguments_exit_with_usage_error(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2


def test_unavailable_backend_exits_with_error(monkeypatch, capsys):
    def backend(coordinates):
        raise ConnectionError("no device")

    monkeypatch.setattr(cli, "resolve_strategy", lambda name, **kwargs: Batch(backend, kwargs["max_iterations"]))

    assert main(["--x-res", "3", "--y-res", "3", "--strategy", "batch"]) == 1
    captured = capsys.readouterr()
    assert "error: batch backend failed: no device" in captured.err
    assert "pixels:" not in captured.out
