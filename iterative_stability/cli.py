"""Command-line summary of a stability raster."""

from __future__ import annotations

import logging
import sys
import time
from argparse import ArgumentParser
from typing import Optional, Sequence

from .engine import MAX_ITERATIONS
from .errors import StabilityError
from .numeric import PRECISIONS
from .screen import julia_screen_space, mandelbrot_screen_space
from .strategy import STRATEGY_NAMES, resolve_strategy

logger = logging.getLogger(__name__)


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="iterative-stability", description="Compute escape-time stability over a raster.")

    parser.add_argument('--fractal', choices=['mandelbrot', 'julia'], default='mandelbrot',
                        help='which iteration to run for every pixel')

    parser.add_argument('--c', type=float, nargs=2, dest='c', metavar=('RE', 'IM'), default=None,
                        help='constant of the Julia iteration z -> z^2 + c (required for --fractal julia)')

    parser.add_argument('--lower', type=float, nargs=2, dest='lower', metavar=('X', 'Y'), default=[-2.0, -2.0],
                        help='lower corner of the parametric rectangle')

    parser.add_argument('--upper', type=float, nargs=2, dest='upper', metavar=('X', 'Y'), default=[2.0, 2.0],
                        help='upper corner of the parametric rectangle')

    parser.add_argument('--x-res', type=int,
                        dest='x_res', help='resolution of samples along the x-axis',
                        metavar='X_RES', default=101)

    parser.add_argument('--y-res', type=int,
                        dest='y_res', help='resolution of samples along the y-axis',
                        metavar='Y_RES', default=101)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration cap after which a point counts as stable',
                        metavar='MAX_ITERATIONS', default=MAX_ITERATIONS)

    parser.add_argument('--strategy', choices=STRATEGY_NAMES, default='sequential',
                        help='how pixels are evaluated: one by one, over a process pool, or in one TensorFlow batch')

    parser.add_argument('--workers', type=int, dest='workers', metavar='WORKERS', default=None,
                        help='worker processes for the parallel strategy (default: one per CPU)')

    parser.add_argument('--device', type=str, dest='device', metavar='DEVICE', default=None,
                        help='TensorFlow device for the batch strategy, e.g. "/GPU:0" (default: auto-detect)')

    parser.add_argument('--precision', choices=sorted(PRECISIONS), default='double',
                        help='floating-point width used for coordinates and iteration')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    opt = parser.parse_args(argv)

    logging.basicConfig(format="%(levelname)s: %(message)s", level=logging.DEBUG if opt.verbose else logging.WARNING)

    if opt.x_res <= 0 or opt.y_res <= 0:
        parser.error("--x-res and --y-res must be positive.")
    if opt.max_iterations < 0:
        parser.error("--max-iterations must not be negative.")
    if opt.workers is not None and opt.workers <= 0:
        parser.error("--workers must be positive.")
    if opt.fractal == 'julia' and opt.c is None:
        parser.error("--fractal julia requires --c RE IM.")
    if opt.fractal == 'julia' and opt.strategy == 'batch':
        parser.error("the batch strategy only supports --fractal mandelbrot.")

    strategy = resolve_strategy(
        opt.strategy,
        max_workers=opt.workers,
        device=opt.device,
        max_iterations=opt.max_iterations,
    )
    precision = PRECISIONS[opt.precision]
    resolution = (opt.x_res, opt.y_res)

    print(f"fractal: {opt.fractal}")
    print(f"bounds: {tuple(opt.lower)} .. {tuple(opt.upper)}")
    print(f"resolution: {opt.x_res}x{opt.y_res}")
    print(f"strategy: {strategy!r}")
    logger.info("precision: %s, max iterations: %d", precision.name, opt.max_iterations)

    started = time.perf_counter()
    try:
        if opt.fractal == 'julia':
            results = julia_screen_space(
                opt.lower, opt.upper, resolution, tuple(opt.c),
                strategy=strategy, precision=precision, max_iterations=opt.max_iterations,
            )
        else:
            results = mandelbrot_screen_space(
                opt.lower, opt.upper, resolution,
                strategy=strategy, precision=precision, max_iterations=opt.max_iterations,
            )

        pixels = stable = capped = total_iterations = 0
        for iterations, is_stable in results:
            pixels += 1
            total_iterations += iterations
            stable += is_stable
            capped += iterations == opt.max_iterations
    except StabilityError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    elapsed = time.perf_counter() - started

    print(f"pixels: {pixels}")
    print(f"stable: {stable}")
    print(f"capped: {capped}")
    print(f"mean iterations: {total_iterations / pixels:.3f}")
    print(f"elapsed: {elapsed:.3f}s")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
