"""Mandelbrot and Julia stability rasters built on the iteration engine."""

from __future__ import annotations

import functools
import logging
from typing import Any, Iterable, Optional, Union

import numpy as np

from .engine import MAX_ITERATIONS, StabilityResult, is_stable
from .errors import ConfigurationError
from .numeric import DOUBLE, Precision
from .offload import evaluate_batch
from .space import Point, Resolution, SpaceParams, cartesian_grid, make_params, pixel_to_cartesian
from .strategy import Batch, Sequential, Strategy

logger = logging.getLogger(__name__)

JuliaConstant = Union[complex, tuple[float, float]]


def _is_bounded(z: Any) -> bool:
    # NaN fails the comparison as well, so it counts as an escape.
    return bool(abs(z.real) < np.inf and abs(z.imag) < np.inf)


def mandelbrot_pixel(
    index: int,
    resolution: Resolution,
    params: SpaceParams,
    max_iterations: int = MAX_ITERATIONS,
) -> StabilityResult:
    """Iterate ``z * z + c`` from zero, with ``c`` the pixel's coordinate."""

    precision = params.precision
    c = precision.complex(*pixel_to_cartesian(index, resolution, params))

    with np.errstate(over="ignore", invalid="ignore"):
        return is_stable(lambda z: z * z + c, precision.zero, _is_bounded, max_iterations)


def julia_pixel(
    index: int,
    resolution: Resolution,
    params: SpaceParams,
    c: JuliaConstant,
    max_iterations: int = MAX_ITERATIONS,
) -> StabilityResult:
    """Iterate ``z * z + c`` for a fixed ``c``, starting from the pixel's coordinate."""

    precision = params.precision
    c = precision.to_complex(c)
    z0 = precision.complex(*pixel_to_cartesian(index, resolution, params))

    with np.errstate(over="ignore", invalid="ignore"):
        return is_stable(lambda z: z * z + c, z0, _is_bounded, max_iterations)


def mandelbrot_screen_space(
    lower: Point,
    upper: Point,
    resolution: Resolution,
    *,
    strategy: Optional[Strategy] = None,
    precision: Precision = DOUBLE,
    max_iterations: Optional[int] = None,
) -> Iterable[StabilityResult]:
    """Stability of every pixel of a Mandelbrot raster, in raster order.

    With a ``Batch`` strategy the cap is the one the backend iterates to;
    ``max_iterations`` may be omitted, and must agree with it if given.
    """

    strategy = strategy if strategy is not None else Sequential()
    params = make_params(lower, upper, resolution, precision)
    width, height = resolution
    total = width * height

    if isinstance(strategy, Batch):
        if max_iterations is not None and max_iterations != strategy.max_iterations:
            raise ConfigurationError(
                f"max_iterations={max_iterations} does not match the batch cap {strategy.max_iterations}"
            )
        logger.debug("offloading %d Mandelbrot pixels to %r", total, strategy.backend)
        return evaluate_batch(cartesian_grid(resolution, params), strategy.backend, strategy.max_iterations)

    pixel = functools.partial(
        mandelbrot_pixel,
        resolution=(width, height),
        params=params,
        max_iterations=max_iterations if max_iterations is not None else MAX_ITERATIONS,
    )
    logger.debug("Mandelbrot raster %dx%d with %r", width, height, strategy)
    return strategy.map(pixel, total)


def julia_screen_space(
    lower: Point,
    upper: Point,
    resolution: Resolution,
    c: JuliaConstant,
    *,
    strategy: Optional[Strategy] = None,
    precision: Precision = DOUBLE,
    max_iterations: int = MAX_ITERATIONS,
) -> Iterable[StabilityResult]:
    """Stability of every pixel of the Julia raster for constant ``c``, in raster order."""

    strategy = strategy if strategy is not None else Sequential()
    if isinstance(strategy, Batch):
        raise ConfigurationError("batch offload only supports Mandelbrot rasters")

    params = make_params(lower, upper, resolution, precision)
    width, height = resolution

    pixel = functools.partial(
        julia_pixel,
        resolution=(width, height),
        params=params,
        c=precision.to_complex(c),
        max_iterations=max_iterations,
    )
    logger.debug("Julia raster %dx%d for c=%s with %r", width, height, c, strategy)
    return strategy.map(pixel, width * height)
