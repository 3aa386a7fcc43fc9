"""
Transaction model representing a validated financial movement.
"""

from decimal import Decimal

from pydantic import BaseModel, Field


class Transaction(BaseModel):
    """
    A validated movement of money on one card of one account.

    Only produced by the classifier from a raw row that carried a non-empty
    account name and a parseable amount.

    Attributes:
        account_name: Owning account (non-empty)
        card_number: Instrument within the account, "" when the row had none
        amount: Signed amount, exact decimal
    """

    account_name: str = Field(..., min_length=1)
    card_number: str = ""
    amount: Decimal

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "account_name": "Alice",
                "card_number": "4111111111111111",
                "amount": "-30.50",
            }
        }
