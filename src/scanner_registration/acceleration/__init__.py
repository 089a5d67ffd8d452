"""
Acceleration Module

Optional multiprocessing support for the alignment sweeps.
"""

from .parallel_executor import SweepParallelExecutor

__all__ = [
    "SweepParallelExecutor",
]
