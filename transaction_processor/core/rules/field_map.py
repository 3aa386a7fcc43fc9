"""
Column mapping configuration.

Maps the logical transaction fields onto the header names used by the
uploaded files. Defaults match the operator's export format; a YAML file
can override any of them.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class FieldMap(BaseModel):
    """
    Header names of the columns the classifier reads.

    Attributes:
        account_name: Column holding the owning account
        card_number: Column holding the instrument within the account
        amount: Column holding the signed transaction amount
    """

    account_name: str = Field("Account Name", min_length=1)
    card_number: str = Field("Card Number", min_length=1)
    amount: str = Field("Transaction Amount", min_length=1)

    class Config:
        frozen = True


class FieldMapConfigLoader:
    """
    Loads a FieldMap from a YAML configuration file.

    Expected YAML format:
    ```yaml
    fields:
      account_name: "Account Name"
      card_number: "Card Number"
      amount: "Transaction Amount"
    ```
    """

    KNOWN_FIELDS = ("account_name", "card_number", "amount")

    def __init__(self, config_path: str | Path):
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Field map configuration file not found: {config_path}")

    def load(self) -> FieldMap:
        """
        Load and validate the field mapping.

        Returns:
            FieldMap with overrides applied over the defaults

        Raises:
            ValueError: If the YAML is missing the 'fields' section, names an
                unknown field or maps a field to a non-string
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f)

        if not config or "fields" not in config:
            raise ValueError("Configuration file must contain 'fields' section")

        fields: dict[str, Any] = config["fields"] or {}
        if not isinstance(fields, dict):
            raise ValueError("'fields' section must be a mapping")

        for name, column in fields.items():
            if name not in self.KNOWN_FIELDS:
                raise ValueError(
                    f"Unknown field '{name}'. Expected one of: {', '.join(self.KNOWN_FIELDS)}"
                )
            if not isinstance(column, str) or not column.strip():
                raise ValueError(f"Column name for field '{name}' must be a non-empty string")

        return FieldMap(**{name: column.strip() for name, column in fields.items()})
