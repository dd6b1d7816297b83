"""Public API for escape-time stability computations."""

from .engine import MAX_ITERATIONS, StabilityResult, is_stable
from .errors import BackendUnavailableError, ConfigurationError, StabilityError
from .numeric import DOUBLE, SINGLE, Precision
from .offload import HORIZON, TensorFlowBackend, evaluate_batch, select_device
from .screen import julia_pixel, julia_screen_space, mandelbrot_pixel, mandelbrot_screen_space
from .space import SpaceParams, cartesian_grid, make_params, pixel_to_cartesian
from .strategy import Batch, LazyScreenSpace, Parallel, Sequential, resolve_strategy

__all__ = [
    "BackendUnavailableError",
    "Batch",
    "ConfigurationError",
    "DOUBLE",
    "HORIZON",
    "LazyScreenSpace",
    "MAX_ITERATIONS",
    "Parallel",
    "Precision",
    "SINGLE",
    "Sequential",
    "SpaceParams",
    "StabilityError",
    "StabilityResult",
    "TensorFlowBackend",
    "cartesian_grid",
    "evaluate_batch",
    "is_stable",
    "julia_pixel",
    "julia_screen_space",
    "make_params",
    "mandelbrot_pixel",
    "mandelbrot_screen_space",
    "pixel_to_cartesian",
    "resolve_strategy",
    "select_device",
]
