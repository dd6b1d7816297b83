from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass

BASE_ARGS = ["--x-res", "41", "--y-res", "41"]


@dataclass
class Example:
    name: str
    args: list[str]
    expected: list[str]

    def full_args(self) -> list[str]:
        return [sys.executable, "-m", "iterative_stability", *self.args]


EXAMPLES: list[Example] = [
    Example(
        name="mandelbrot",
        args=[*BASE_ARGS],
        expected=["fractal: mandelbrot", "pixels: 1681"],
    ),
    Example(
        name="julia",
        args=[*BASE_ARGS, "--fractal", "julia", "--c", "-0.8", "0.156"],
        expected=["fractal: julia", "pixels: 1681"],
    ),
    Example(
        name="bounds",
        args=[*BASE_ARGS, "--lower", "-0.8", "0.0", "--upper", "-0.6", "0.2"],
        expected=["bounds: (-0.8, 0.0) .. (-0.6, 0.2)"],
    ),
    Example(
        name="max-iterations",
        args=[*BASE_ARGS, "--max-iterations", "64"],
        expected=["pixels: 1681"],
    ),
    Example(
        name="precision",
        args=[*BASE_ARGS, "--precision", "single"],
        expected=["pixels: 1681"],
    ),
    Example(
        name="parallel",
        args=[*BASE_ARGS, "--strategy", "parallel", "--workers", "2"],
        expected=["strategy: Parallel(max_workers=2", "pixels: 1681"],
    ),
    Example(
        name="batch",
        args=[*BASE_ARGS, "--strategy", "batch", "--device", "/CPU:0"],
        expected=["strategy: Batch(", "pixels: 1681"],
    ),
    Example(
        name="verbose",
        args=[*BASE_ARGS, "--verbose"],
        expected=["pixels: 1681"],
    ),
]


def _verify(example: Example, output: str) -> None:
    for line in example.expected:
        if line not in output:
            raise RuntimeError(f"Example {example.name} did not print {line!r}")


def main() -> None:
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        completed = subprocess.run(example.full_args(), check=True, capture_output=True, text=True)
        print(completed.stdout, end="")
        _verify(example, completed.stdout)
    print("\nAll CLI examples ran successfully.")


if __name__ == "__main__":
    main()
