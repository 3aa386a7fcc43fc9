"""
Balance aggregation over validated transactions.
"""

from .aggregator import LedgerAggregator

__all__ = [
    "LedgerAggregator",
]
