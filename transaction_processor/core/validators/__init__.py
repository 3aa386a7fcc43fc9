"""
Field validators for raw transaction rows.
"""

from .base_validator import BaseValidator, ValidationError
from .decimal_validator import DecimalValidator
from .required_field_validator import RequiredFieldValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "RequiredFieldValidator",
    "DecimalValidator",
]
