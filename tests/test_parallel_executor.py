"""
Unit tests for parallel sweep processing.

Tests SweepParallelExecutor and the engine's parallel mode for correctness
and error handling.
"""

import pytest

from scanner_registration.acceleration import SweepParallelExecutor
from scanner_registration.alignment import AlignmentEngine, OverlapMatcher
from scanner_registration.utils.config import AppConfig

from conftest import WORKED_EXAMPLE_POSITIONS


# Module-level worker functions for pickling compatibility
def _scaling_worker(item, scale=1):
    """Worker that scales the item."""
    import time
    import random
    time.sleep(random.uniform(0.001, 0.01))
    return item * scale


def _error_worker(item):
    """Worker that raises an error."""
    raise ValueError(f"Intentional error on item {item}")


class TestSweepParallelExecutor:
    """Test suite for SweepParallelExecutor."""

    def test_executor_initialization(self):
        """Test executor initializes with correct worker count."""
        executor = SweepParallelExecutor()
        assert executor.n_workers >= 1

        executor = SweepParallelExecutor(n_workers=4)
        assert executor.n_workers == 4

        # Minimum workers (should be at least 1)
        executor = SweepParallelExecutor(n_workers=0)
        assert executor.n_workers == 1

    def test_empty_items(self):
        executor = SweepParallelExecutor(n_workers=2)
        assert executor.map_items([], _scaling_worker, {}) == []

    def test_sequential_fallback_one_item(self):
        """Test executor uses sequential processing for a single item."""
        executor = SweepParallelExecutor(n_workers=4)
        results = executor.map_items(items=[3], worker_fn=_scaling_worker, worker_kwargs={'scale': 2})
        assert results == [6]

    def test_parallel_preserves_input_order(self):
        """Results come back in input order despite unordered completion."""
        executor = SweepParallelExecutor(n_workers=2)
        items = list(range(12))
        results = executor.map_items(items=items, worker_fn=_scaling_worker, worker_kwargs={'scale': 3})
        assert results == [i * 3 for i in items]

    def test_worker_errors_raise_runtime_error(self):
        executor = SweepParallelExecutor(n_workers=2)
        with pytest.raises(RuntimeError, match="failed"):
            executor.map_items(items=[1, 2, 3], worker_fn=_error_worker, worker_kwargs={})

    def test_sequential_errors_raise_runtime_error(self):
        executor = SweepParallelExecutor(n_workers=1)
        with pytest.raises(RuntimeError, match="Intentional error"):
            executor.map_items(items=[1], worker_fn=_error_worker, worker_kwargs={})


class TestParallelAlignment:
    def test_matches_sequential_registration(self, worked_example, rotation_group):
        sequential = AlignmentEngine(OverlapMatcher(12), rotation_group).align(worked_example)
        parallel = AlignmentEngine(
            OverlapMatcher(12), rotation_group, executor=SweepParallelExecutor(n_workers=2)
        ).align(worked_example)

        assert parallel.positions() == WORKED_EXAMPLE_POSITIONS
        assert parallel.positions() == sequential.positions()
        for s in parallel.scanners:
            assert (s.rotation == sequential.by_id(s.id).rotation).all()
        assert parallel.unique_beacon_count() == 79
        assert parallel.max_scanner_distance() == 3621

    def test_chain_scene(self, chain_scene, rotation_group):
        result = AlignmentEngine(
            OverlapMatcher(12), rotation_group, executor=SweepParallelExecutor(n_workers=2)
        ).align(chain_scene.scanners)
        assert result.positions() == chain_scene.positions
        assert result.unique_beacon_count() == chain_scene.unique_beacons

    def test_from_config_enables_executor(self, rotation_group):
        cfg = AppConfig.model_validate({"parallel": {"enabled": True, "n_workers": 2}})
        engine = AlignmentEngine.from_config(cfg, rotation_group)
        assert isinstance(engine.executor, SweepParallelExecutor)
        assert engine.executor.n_workers == 2

        engine = AlignmentEngine.from_config(AppConfig(), rotation_group)
        assert engine.executor is None
