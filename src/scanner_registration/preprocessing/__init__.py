"""
Scan Report Preprocessing Module

Parsing and validation of scanner beacon reports.
"""

from .loader import ScanReportLoader

__all__ = [
    "ScanReportLoader",
]
