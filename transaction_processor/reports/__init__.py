"""
Read-only views derived from the current snapshot.
"""

from .generator import ReportGenerator

__all__ = [
    "ReportGenerator",
]
