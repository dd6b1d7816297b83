import numpy as np
import pytest

from iterative_stability import (
    SINGLE,
    BackendUnavailableError,
    Batch,
    TensorFlowBackend,
    cartesian_grid,
    evaluate_batch,
    make_params,
    mandelbrot_screen_space,
)


def test_counts_equal_to_cap_are_stable():
    coordinates = np.zeros((4, 2))
    results = evaluate_batch(coordinates, lambda c: [500, 1, 499, 0], max_iterations=500)
    assert results == [(500, True), (1, False), (499, False), (0, False)]
    assert all(isinstance(n, int) for n, _ in results)


def test_order_is_preserved():
    coordinates = np.arange(12, dtype=np.float64).reshape(6, 2)
    results = evaluate_batch(coordinates, lambda c: c[:, 0].astype(np.int32), max_iterations=4)
    assert [n for n, _ in results] == [0, 2, 4, 6, 8, 10]
    assert [stable for _, stable in results] == [False, False, True, False, False, False]


def test_backend_failure_is_fatal():
    def backend(coordinates):
        raise OSError("device lost")

    with pytest.raises(BackendUnavailableError) as excinfo:
        evaluate_batch(np.zeros((3, 2)), backend)
    assert isinstance(excinfo.value.__cause__, OSError)


def test_backend_is_called_once_without_retry():
    calls = []

    def backend(coordinates):
        calls.append(len(coordinates))
        raise TimeoutError("stalled")

    with pytest.raises(BackendUnavailableError):
        evaluate_batch(np.zeros((3, 2)), backend)
    assert calls == [3]


def test_wrong_number_of_counts_rejected():
    with pytest.raises(BackendUnavailableError):
        evaluate_batch(np.zeros((3, 2)), lambda c: [1, 2])


def test_backend_unavailable_error_is_runtime_error():
    with pytest.raises(RuntimeError):
        evaluate_batch(np.zeros((1, 2)), lambda c: [])


class TestTensorFlowBackend:
    @pytest.fixture(autouse=True)
    def _requires_tensorflow(self):
        pytest.importorskip("tensorflow")

    def test_counts(self):
        backend = TensorFlowBackend(max_iterations=100, device="/CPU:0")
        coordinates = np.array([[0.0, 0.0], [2.0, 0.0], [-1.0, 0.0], [3.0, 3.0]])
        counts = backend(coordinates)
        # 0 and -1 stay bounded; 2 -> 6 passes the horizon on step 2; 3+3i on step 1
        assert list(counts) == [100, 2, 100, 1]

    def test_screen_space_batch(self):
        resolution = (5, 5)
        results = mandelbrot_screen_space(
            (-2.0, -2.0),
            (2.0, 2.0),
            resolution,
            strategy=Batch(TensorFlowBackend(max_iterations=200, device="/CPU:0"), max_iterations=200),
        )
        assert len(results) == 25
        assert results[12] == (200, True)
        assert results[0].stable is False

    def test_single_precision_grid(self):
        params = make_params((-2.0, -2.0), (2.0, 2.0), (3, 3), SINGLE)
        counts = TensorFlowBackend(max_iterations=50, device="/CPU:0")(cartesian_grid((3, 3), params))
        assert counts.shape == (9,)
        assert counts[4] == 50
