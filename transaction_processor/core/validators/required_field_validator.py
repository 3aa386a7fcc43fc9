"""
RequiredFieldValidator - ensures a column is present and not empty.
"""

from typing import Any

from .base_validator import BaseValidator, ValidationError


class RequiredFieldValidator(BaseValidator):
    """
    Validates that a required column is present and not null/empty.

    Fails if:
    - Column is missing from the row (short row or absent header)
    - Value is None
    - Value is an empty string (configurable)
    - Value is whitespace-only, unless strip_whitespace is False
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.allow_empty_string = self.parameters.get("allow_empty_string", False)
        self.strip_whitespace = self.parameters.get("strip_whitespace", True)

    def validate(self, value: Any, record: dict[str, Any]) -> Any:
        """
        Validate that the column is present and not null/empty.

        Returns:
            The value unchanged

        Raises:
            ValidationError: If the column is missing, None, or empty
        """
        if self.field_name not in record:
            raise ValidationError(
                rule_name=self.rule_type,
                field_name=self.field_name,
                message="Field is missing from record"
            )

        if value is None:
            raise ValidationError(
                rule_name=self.rule_type,
                field_name=self.field_name,
                message="Field value is null"
            )

        if not self.allow_empty_string and isinstance(value, str) and self._is_empty(value):
            raise ValidationError(
                rule_name=self.rule_type,
                field_name=self.field_name,
                message="Field value is empty string"
            )

        return value

    def _is_empty(self, value: str) -> bool:
        return (value.strip() if self.strip_whitespace else value) == ""

    @property
    def rule_type(self) -> str:
        return "required_field"
