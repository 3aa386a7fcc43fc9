"""
MalformedRecord model representing a row that failed validation.
"""

from pydantic import BaseModel, Field, field_validator


class MalformedRecord(BaseModel):
    """
    A raw row that could not be turned into a Transaction.

    The original field mapping is kept verbatim for operator review; the
    failed rules and messages explain why it was rejected.

    Attributes:
        raw_payload: Original row, column name -> string value
        failed_rules: Names of the rules that failed
        error_messages: Corresponding error messages
    """

    raw_payload: dict[str, str]
    failed_rules: list[str] = Field(..., min_length=1)
    error_messages: list[str] = Field(..., min_length=1)

    @field_validator('error_messages')
    @classmethod
    def check_arrays_same_length(cls, v, info):
        """Validate that failed_rules and error_messages have the same length."""
        failed_rules = info.data.get('failed_rules', [])
        if len(v) != len(failed_rules):
            raise ValueError(
                f"error_messages length ({len(v)}) must match failed_rules length ({len(failed_rules)})"
            )
        return v

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "raw_payload": {
                    "Account Name": "Bob",
                    "Card Number": "4111111111111111",
                    "Transaction Amount": "abc",
                },
                "failed_rules": ["amount_decimal"],
                "error_messages": ["[decimal] Transaction Amount: 'abc' is not a decimal number"],
            }
        }
