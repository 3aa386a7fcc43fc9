"""
Base validator interface for field rules applied to raw rows.

All validators inherit from BaseValidator and implement validate().
"""

from abc import ABC, abstractmethod
from typing import Any


class ValidationError(Exception):
    """Raised when a field rule fails for one row."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class BaseValidator(ABC):
    """
    Abstract base class for all field validators.

    A validator checks one named field of a raw row and returns the value
    normalised to the type the rule guarantees.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            field_name: Name of the column to validate
            parameters: Rule-specific parameters
        """
        self.field_name = field_name
        self.parameters = parameters or {}

    @abstractmethod
    def validate(self, value: Any, record: dict[str, Any]) -> Any:
        """
        Validate a value against this rule.

        Args:
            value: The field value (None if the column is absent)
            record: The entire row, for presence checks

        Returns:
            The normalised value

        Raises:
            ValidationError: If validation fails
        """
        pass

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"
