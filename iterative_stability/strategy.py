"""How a raster's pixels are scheduled for evaluation."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Union

from .engine import MAX_ITERATIONS, StabilityResult
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

PixelFunction = Callable[[int], StabilityResult]


class LazyScreenSpace:
    """A re-iterable, sized view over a raster that evaluates pixels on demand.

    Every iteration starts over from pixel 0 and recomputes, so nothing is
    cached between passes.
    """

    def __init__(self, pixel: PixelFunction, total: int) -> None:
        self._pixel = pixel
        self._total = total

    def __len__(self) -> int:
        return self._total

    def __iter__(self) -> Iterator[StabilityResult]:
        pixel = self._pixel
        for index in range(self._total):
            yield pixel(index)


@dataclass(frozen=True)
class Sequential:
    """Evaluate pixels one at a time, lazily, in raster order."""

    def map(self, pixel: PixelFunction, total: int) -> LazyScreenSpace:
        return LazyScreenSpace(pixel, total)


@dataclass(frozen=True)
class Parallel:
    """Fan pixel evaluation out over a ``concurrent.futures`` pool.

    Workers may finish in any order; ``Executor.map`` hands results back in
    index order. Process pools need ``pixel`` to be picklable, which is why
    the generators pass ``functools.partial`` objects over module functions.
    """

    max_workers: Optional[int] = None
    chunksize: int = 1024
    use_threads: bool = False

    def executor(self) -> Executor:
        if self.use_threads:
            return ThreadPoolExecutor(max_workers=self.max_workers)
        return ProcessPoolExecutor(max_workers=self.max_workers)

    def map(self, pixel: PixelFunction, total: int) -> list[StabilityResult]:
        if self.chunksize < 1:
            raise ConfigurationError(f"chunksize must be positive, got {self.chunksize}")
        logger.debug(
            "parallel evaluation of %d pixels (workers=%s, chunksize=%d, threads=%s)",
            total,
            self.max_workers,
            self.chunksize,
            self.use_threads,
        )
        # chunksize only matters for process pools; thread pools ignore it
        with self.executor() as pool:
            return list(pool.map(pixel, range(total), chunksize=self.chunksize))


@dataclass(frozen=True)
class Batch:
    """Hand the whole raster to an accelerated backend in one blocking call.

    ``backend`` maps an ``(N, 2)`` coordinate array to ``N`` raw iteration
    counts; ``max_iterations`` is the cap that backend iterates to, and a
    count equal to it is read back as stable.
    """

    backend: Callable
    max_iterations: int = MAX_ITERATIONS

    @classmethod
    def tensorflow(cls, *, device: Optional[str] = None, max_iterations: int = MAX_ITERATIONS) -> "Batch":
        from .offload import TensorFlowBackend

        return cls(TensorFlowBackend(max_iterations=max_iterations, device=device), max_iterations)


Strategy = Union[Sequential, Parallel, Batch]

STRATEGY_NAMES = ("sequential", "parallel", "batch")


def resolve_strategy(
    name: str,
    *,
    max_workers: Optional[int] = None,
    device: Optional[str] = None,
    max_iterations: int = MAX_ITERATIONS,
) -> Strategy:
    """Build a strategy from its command-line name."""

    mode = name.lower()
    if mode == "sequential":
        return Sequential()
    if mode == "parallel":
        return Parallel(max_workers=max_workers)
    if mode == "batch":
        return Batch.tensorflow(device=device, max_iterations=max_iterations)
    raise ConfigurationError(f"Unknown strategy '{name}'. Valid choices: {', '.join(STRATEGY_NAMES)}.")
