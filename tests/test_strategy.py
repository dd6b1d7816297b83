import pytest

from iterative_stability import (
    Batch,
    ConfigurationError,
    LazyScreenSpace,
    Parallel,
    Sequential,
    StabilityResult,
    TensorFlowBackend,
    resolve_strategy,
)


def fake_pixel(index):
    return StabilityResult(index % 7, index % 2 == 0)


def test_sequential_is_lazy():
    calls = []

    def pixel(index):
        calls.append(index)
        return fake_pixel(index)

    results = Sequential().map(pixel, 5)
    assert isinstance(results, LazyScreenSpace)
    assert calls == []

    iterator = iter(results)
    assert next(iterator) == (0, True)
    assert calls == [0]


def test_sequential_restarts_from_first_pixel():
    results = Sequential().map(fake_pixel, 4)
    assert list(results) == list(results) == [fake_pixel(i) for i in range(4)]
    assert len(results) == 4


def test_parallel_keeps_index_order():
    results = Parallel(max_workers=3, chunksize=5, use_threads=True).map(fake_pixel, 50)
    assert results == [fake_pixel(i) for i in range(50)]


def test_parallel_rejects_bad_chunksize():
    with pytest.raises(ConfigurationError):
        Parallel(chunksize=0).map(fake_pixel, 3)


def test_resolve_strategy_names():
    assert resolve_strategy("sequential") == Sequential()
    assert resolve_strategy("Parallel", max_workers=2) == Parallel(max_workers=2)


def test_resolve_batch_builds_tensorflow_backend_lazily():
    strategy = resolve_strategy("batch", device="/CPU:0", max_iterations=42)
    assert isinstance(strategy, Batch)
    assert isinstance(strategy.backend, TensorFlowBackend)
    assert strategy.backend.device == "/CPU:0"
    assert strategy.backend.max_iterations == strategy.max_iterations == 42


def test_resolve_unknown_strategy():
    with pytest.raises(ConfigurationError):
        resolve_strategy("gpu")
