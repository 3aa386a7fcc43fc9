"""
Core data models for the transaction processor.

Transactions and malformed records are pydantic models; raw rows and
derived views are plain mappings.
"""

from decimal import Decimal
from typing import Union

from .ingest_result import IngestResult
from .malformed_record import MalformedRecord
from .transaction import Transaction

RawRecord = dict[str, str]
ClassifiedRecord = Union[Transaction, MalformedRecord]
AccountBalanceView = dict[str, dict[str, Decimal]]

__all__ = [
    "RawRecord",
    "Transaction",
    "MalformedRecord",
    "ClassifiedRecord",
    "AccountBalanceView",
    "IngestResult",
]
