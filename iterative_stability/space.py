"""Mapping between raster pixels and the parametric plane."""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from typing import Any

import numpy as np

from .errors import ConfigurationError
from .numeric import DOUBLE, Precision

logger = logging.getLogger(__name__)

Point = tuple[float, float]
Resolution = tuple[int, int]


@dataclass(frozen=True)
class SpaceParams:
    """Per-axis geometry of a parametric rectangle sampled on a raster.

    ``scale`` is the rectangle's extent, ``offset`` its midpoint (the point
    that lands on the raster centre) and ``delta`` the extent of one pixel.
    """

    scale: tuple[Any, Any]
    offset: tuple[Any, Any]
    delta: tuple[Any, Any]
    precision: Precision = DOUBLE


def validate_resolution(resolution: Resolution) -> Resolution:
    try:
        width, height = resolution
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"resolution must be a (width, height) pair, got {resolution!r}") from exc

    for axis, value in (("width", width), ("height", height)):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise ConfigurationError(f"resolution {axis} must be an integer, got {value!r}")
        if value <= 0:
            raise ConfigurationError(f"resolution {axis} must be positive, got {value}")
    return int(width), int(height)


def make_params(lower: Point, upper: Point, resolution: Resolution, precision: Precision = DOUBLE) -> SpaceParams:
    """Compute scale, offset and pixel size for ``lower``..``upper`` at ``resolution``."""

    width, height = validate_resolution(resolution)
    lower_x, lower_y = (precision.real(v) for v in lower)
    upper_x, upper_y = (precision.real(v) for v in upper)

    scale = (abs(upper_x - lower_x), abs(upper_y - lower_y))
    two = precision.from_int(2)
    offset = ((lower_x + upper_x) / two, (lower_y + upper_y) / two)
    delta = (scale[0] / precision.from_int(width), scale[1] / precision.from_int(height))

    if delta[0] == 0 or delta[1] == 0:
        logger.warning("degenerate bounds %s..%s: every pixel maps to the same coordinate on one axis", lower, upper)

    params = SpaceParams(scale=scale, offset=offset, delta=delta, precision=precision)
    logger.debug("space params for %dx%d: %s", width, height, params)
    return params


def pixel_to_cartesian(index: int, resolution: Resolution, params: SpaceParams) -> tuple[Any, Any]:
    """Map a row-major pixel index to its point in the parametric plane.

    Row 0 is the top of the raster, so the vertical axis is flipped: it maps
    to the largest y. Recentering uses integer halves of the resolution, which
    leaves even resolutions half a pixel off the true midpoint.
    """

    width, height = resolution
    screen_x = index % width
    screen_y = index // width

    cart_x = screen_x - width // 2
    cart_y = -screen_y + height // 2

    from_int = params.precision.from_int
    x = from_int(cart_x) * params.delta[0] + params.offset[0]
    y = from_int(cart_y) * params.delta[1] + params.offset[1]
    return x, y


def cartesian_grid(resolution: Resolution, params: SpaceParams) -> np.ndarray:
    """Return every pixel's coordinate as an ``(width * height, 2)`` array in raster order."""

    width, height = validate_resolution(resolution)
    dtype = params.precision.real_type

    index = np.arange(width * height, dtype=np.int64)
    cart_x = (index % width - width // 2).astype(dtype)
    cart_y = (-(index // width) + height // 2).astype(dtype)

    grid = np.empty((width * height, 2), dtype=dtype)
    grid[:, 0] = cart_x * dtype(params.delta[0]) + dtype(params.offset[0])
    grid[:, 1] = cart_y * dtype(params.delta[1]) + dtype(params.offset[1])
    return grid
