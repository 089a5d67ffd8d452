"""
Parallel execution of registration sweeps.

Provides SweepParallelExecutor for distributing the candidate searches of one
alignment sweep across multiple CPU cores using multiprocessing. Results are
returned in input order so the engine can apply them sequentially.
"""

from __future__ import annotations

import logging
import time
from multiprocessing import Pool, cpu_count
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


def _worker_wrapper(args: Tuple[int, Any, Callable, Dict[str, Any]]) -> Tuple[int, Any, Optional[str]]:
    """
    Worker wrapper for parallel candidate searches.

    Must be at module level for pickling on Windows.

    Args:
        args: Tuple of (item_index, item, worker_fn, worker_kwargs)

    Returns:
        Tuple of (item_index, result, error_message)
    """
    idx, item, worker_fn, worker_kwargs = args
    try:
        result = worker_fn(item, **worker_kwargs)
        return (idx, result, None)
    except Exception as e:
        error_msg = f"{type(e).__name__}: {str(e)}"
        logger.error(f"Worker error on item {idx}: {error_msg}")
        return (idx, None, error_msg)


class SweepParallelExecutor:
    """
    Parallel executor for independent candidate searches.

    Example:
        executor = SweepParallelExecutor(n_workers=4)
        results = executor.map_items(
            items=pending_scanners,
            worker_fn=search_candidate,
            worker_kwargs={'references': aligned, 'rotations': rotations},
        )
    """

    def __init__(self, n_workers: Optional[int] = None):
        """
        Args:
            n_workers: Number of worker processes. If None, uses cpu_count - 1
                to leave one core for coordination. Minimum is 1.
        """
        if n_workers is None:
            n_workers = max(1, cpu_count() - 1)
        else:
            n_workers = max(1, int(n_workers))

        self.n_workers = n_workers

        logger.info(
            f"Initialized SweepParallelExecutor with {self.n_workers} workers "
            f"(total CPUs: {cpu_count()})"
        )

    def map_items(
        self,
        items: List[Any],
        worker_fn: Callable,
        worker_kwargs: Dict[str, Any],
    ) -> List[Any]:
        """
        Map worker function over items, preserving input order.

        Args:
            items: Work items (one per pending scanner)
            worker_fn: Picklable callable with signature
                worker_fn(item, **worker_kwargs) -> result
            worker_kwargs: Fixed keyword arguments passed to each call

        Returns:
            List of results in the same order as `items`

        Raises:
            RuntimeError: If any worker fails
        """
        n_items = len(items)
        if n_items == 0:
            return []

        start_time = time.time()

        # No pool overhead for trivial sweeps
        if self.n_workers == 1 or n_items == 1:
            results = []
            for i, item in enumerate(items):
                try:
                    results.append(worker_fn(item, **worker_kwargs))
                except Exception as e:
                    logger.error(f"Error processing item {i}: {e}", exc_info=True)
                    raise RuntimeError(f"Candidate search failed: {e}") from e
            logger.debug(f"Sequential sweep of {n_items} items in {time.time() - start_time:.3f}s")
            return results

        try:
            results = self._parallel_map(items, worker_fn, worker_kwargs)
        except RuntimeError:
            raise
        except Exception as e:
            logger.error(f"Parallel processing failed: {e}", exc_info=True)
            raise RuntimeError(f"Parallel candidate search failed: {e}") from e

        logger.debug(
            f"Parallel sweep of {n_items} items with {self.n_workers} workers "
            f"in {time.time() - start_time:.3f}s"
        )
        return results

    def _parallel_map(
        self,
        items: List[Any],
        worker_fn: Callable,
        worker_kwargs: Dict[str, Any],
    ) -> List[Any]:
        n_items = len(items)
        worker_args = [(i, item, worker_fn, worker_kwargs) for i, item in enumerate(items)]

        results_dict: Dict[int, Any] = {}
        errors = []
        with Pool(processes=min(self.n_workers, n_items)) as pool:
            for idx, result, error in pool.imap_unordered(_worker_wrapper, worker_args):
                if error:
                    errors.append((idx, error))
                else:
                    results_dict[idx] = result

        if errors:
            error_msg = f"{len(errors)} candidate searches failed out of {n_items}"
            logger.error(error_msg)
            for idx, error in errors[:5]:
                logger.error(f"  Item {idx}: {error}")
            if len(errors) > 5:
                logger.error(f"  ... and {len(errors) - 5} more errors")
            raise RuntimeError(error_msg)

        return [results_dict[i] for i in range(n_items)]
