"""Batch offload of a whole raster to an accelerated backend."""

from __future__ import annotations

import functools
import logging
import os
import time
from typing import Any, Callable, Optional

import numpy as np

from .engine import MAX_ITERATIONS, StabilityResult
from .errors import BackendUnavailableError, StabilityError

logger = logging.getLogger(__name__)

HORIZON = 4

BatchBackend = Callable[[np.ndarray], Any]


def evaluate_batch(
    coordinates: np.ndarray,
    backend: BatchBackend,
    max_iterations: int = MAX_ITERATIONS,
) -> list[StabilityResult]:
    """Run ``backend`` over every coordinate and reinterpret its raw counts.

    A count equal to ``max_iterations`` is read as stable, any other count as
    an escape at that iteration. This does not reproduce the engine's
    fixed-point exit or its predicate, so results can differ from the
    per-pixel path near the boundary of the set.
    """

    coordinates = np.asarray(coordinates)
    expected = coordinates.shape[0]

    started = time.perf_counter()
    try:
        counts = backend(coordinates)
    except StabilityError:
        raise
    except Exception as exc:
        raise BackendUnavailableError(f"batch backend failed: {exc}") from exc
    elapsed = time.perf_counter() - started

    counts = np.asarray(counts).reshape(-1)
    if counts.shape[0] != expected:
        raise BackendUnavailableError(f"batch backend returned {counts.shape[0]} counts for {expected} coordinates")

    logger.debug("batch of %d coordinates evaluated in %.3fs", expected, elapsed)
    return [StabilityResult(n, n == max_iterations) for n in (int(value) for value in counts.tolist())]


def _load_tensorflow() -> Any:
    verbose = logger.isEnabledFor(logging.DEBUG)
    if not verbose:
        os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "3")

    try:
        import tensorflow as tf
    except ImportError as exc:
        raise BackendUnavailableError(
            "TensorFlow is required for batch offload; install iterative-stability[tensorflow]"
        ) from exc

    if not verbose:
        tf.get_logger().setLevel("ERROR")
    return tf


@functools.lru_cache(maxsize=None)
def _escape_kernel() -> Callable:
    tf = _load_tensorflow()

    @tf.function
    def _escape_step(zs, cs, ns, active, horizon):
        """Perform a single iteration for points that have not escaped."""

        zs_new = zs * zs + cs
        zs = tf.where(active, zs_new, zs)
        ns = ns + tf.cast(active, tf.int32)
        az = tf.abs(zs)
        new_active = tf.logical_and(active, az < horizon)
        return zs, ns, new_active

    @tf.function
    def _escape_run(cs, max_iterations, horizon):
        """Iterate ``z * z + c`` from zero using a TensorFlow while loop."""

        i = tf.constant(0, dtype=tf.int32)
        zs = tf.zeros_like(cs)
        ns = tf.zeros(tf.shape(cs), dtype=tf.int32)
        active = tf.ones_like(ns, tf.bool)

        def cond(i, zs, ns, active):
            return tf.logical_and(tf.less(i, max_iterations), tf.reduce_any(active))

        def body(i, zs, ns, active):
            zs, ns, active = _escape_step(zs, cs, ns, active, horizon)
            return i + 1, zs, ns, active

        _, _, ns, _ = tf.while_loop(cond, body, (i, zs, ns, active))
        return ns

    return _escape_run


def select_device() -> str:
    """Pick the first visible GPU, or the CPU when TensorFlow sees none."""

    tf = _load_tensorflow()
    gpus = tf.config.list_physical_devices("GPU")
    if not gpus:
        logger.info("No GPU found, using CPU")
        return "/CPU:0"
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as exc:
        logger.info("GPU setup failed (%s), using CPU", exc)
        return "/CPU:0"
    logger.info("GPU found, using %s", gpus[0].name)
    return "/GPU:0"


class TensorFlowBackend:
    """Escape-time counts for Mandelbrot coordinates, computed with TensorFlow.

    Points escape once ``|z|`` reaches ``horizon``; points still bounded after
    ``max_iterations`` steps report exactly ``max_iterations``.
    """

    def __init__(
        self,
        max_iterations: int = MAX_ITERATIONS,
        device: Optional[str] = None,
        horizon: float = HORIZON,
    ) -> None:
        self.max_iterations = max_iterations
        self.device = device
        self.horizon = horizon

    def __repr__(self) -> str:
        return f"TensorFlowBackend(max_iterations={self.max_iterations}, device={self.device!r}, horizon={self.horizon})"

    def __call__(self, coordinates: np.ndarray) -> np.ndarray:
        tf = _load_tensorflow()
        kernel = _escape_kernel()

        coordinates = np.asarray(coordinates)
        real_dtype = tf.float32 if coordinates.dtype == np.float32 else tf.float64
        if self.device is None:
            self.device = select_device()

        try:
            with tf.device(self.device):
                x = tf.convert_to_tensor(coordinates[:, 0], dtype=real_dtype)
                y = tf.convert_to_tensor(coordinates[:, 1], dtype=real_dtype)
                cs = tf.complex(x, y)
                ns = kernel(
                    cs,
                    tf.constant(self.max_iterations, dtype=tf.int32),
                    tf.constant(self.horizon, dtype=real_dtype),
                )
                return ns.numpy()
        except (tf.errors.OpError, RuntimeError) as exc:
            raise BackendUnavailableError(f"TensorFlow batch on {self.device} failed: {exc}") from exc
