"""
Visualization Module

Interactive plotly views of registered scans.
"""

from .registration import RegistrationVisualizer

__all__ = [
    "RegistrationVisualizer",
]
