"""
DecimalValidator - validates and converts signed decimal amounts.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any

from .base_validator import BaseValidator, ValidationError

# Plain positional notation: optional sign, digits, "." as separator.
DECIMAL_PATTERN = re.compile(r"^[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)$")


class DecimalValidator(BaseValidator):
    """
    Validates that a column holds a locale-agnostic decimal number.

    Accepted: "100", "-30", "12.50", "+7", ".5", " 42 " (surrounding
    whitespace is ignored). Rejected: "abc", "1,000.00", "1e3", "NaN",
    "12.50 USD".
    """

    def validate(self, value: Any, record: dict[str, Any]) -> Decimal:
        """
        Validate the value and convert it to Decimal.

        Args:
            value: Raw string value
            record: The entire row

        Returns:
            Parsed amount

        Raises:
            ValidationError: If the value is not a plain decimal number
        """
        if isinstance(value, Decimal):
            return value

        if not isinstance(value, str):
            raise ValidationError(
                rule_name=self.rule_type,
                field_name=self.field_name,
                message=f"Expected string, got {type(value).__name__}"
            )

        text = value.strip()
        if not DECIMAL_PATTERN.match(text):
            raise ValidationError(
                rule_name=self.rule_type,
                field_name=self.field_name,
                message=f"'{value}' is not a decimal number"
            )

        try:
            return Decimal(text)
        except InvalidOperation as e:
            raise ValidationError(
                rule_name=self.rule_type,
                field_name=self.field_name,
                message=f"Cannot convert '{value}' to decimal: {e}"
            )

    @property
    def rule_type(self) -> str:
        return "decimal"
