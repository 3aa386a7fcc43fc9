"""
Classification rules for raw transaction rows.
"""

from .classifier import TransactionClassifier
from .field_map import FieldMap, FieldMapConfigLoader

__all__ = [
    "TransactionClassifier",
    "FieldMap",
    "FieldMapConfigLoader",
]
