"""
Transaction classifier.

Turns each raw row into exactly one of Transaction or MalformedRecord by
running the field validators in a fixed order.
"""

from collections.abc import Iterable
from decimal import Decimal

from transaction_processor.core.models import (
    ClassifiedRecord,
    MalformedRecord,
    RawRecord,
    Transaction,
)
from transaction_processor.core.validators import (
    BaseValidator,
    DecimalValidator,
    RequiredFieldValidator,
    ValidationError,
)

from .field_map import FieldMap


class TransactionClassifier:
    """
    Classifies raw rows as transactions or malformed records.

    Rules, in order:
    1. account name and amount columns present and non-empty (a blank
       amount counts as empty; account names are taken as-is)
    2. amount parses as a decimal number

    Presence rules are all evaluated so a malformed record lists every
    missing column; the decimal rule only runs once presence passed.
    The card number is optional and defaults to "".
    """

    def __init__(self, field_map: FieldMap | None = None):
        """
        Initialize the classifier.

        Args:
            field_map: Column names to read (defaults to the standard export headers)
        """
        self.field_map = field_map or FieldMap()
        self.presence_rules: list[tuple[str, BaseValidator]] = [
            ("account_name_required", RequiredFieldValidator(
                self.field_map.account_name, {"strip_whitespace": False}
            )),
            ("amount_required", RequiredFieldValidator(self.field_map.amount)),
        ]
        self.amount_rule: tuple[str, BaseValidator] = (
            "amount_decimal",
            DecimalValidator(self.field_map.amount),
        )

    def classify(self, record: RawRecord) -> ClassifiedRecord:
        """
        Classify one raw row.

        Args:
            record: Column name -> string value

        Returns:
            Transaction if every rule passed, MalformedRecord otherwise
        """
        failed_rules: list[str] = []
        error_messages: list[str] = []

        for rule_name, validator in self.presence_rules:
            try:
                validator.validate(record.get(validator.field_name), record)
            except ValidationError as e:
                failed_rules.append(rule_name)
                error_messages.append(str(e))

        if failed_rules:
            return self._malformed(record, failed_rules, error_messages)

        rule_name, validator = self.amount_rule
        try:
            amount: Decimal = validator.validate(record.get(validator.field_name), record)
        except ValidationError as e:
            return self._malformed(record, [rule_name], [str(e)])

        return Transaction(
            account_name=record[self.field_map.account_name],
            card_number=record.get(self.field_map.card_number) or "",
            amount=amount,
        )

    def classify_all(self, records: Iterable[RawRecord]) -> list[ClassifiedRecord]:
        """Classify a sequence of rows, preserving order."""
        return [self.classify(record) for record in records]

    def transactions(self, records: Iterable[RawRecord]) -> list[Transaction]:
        """Return only the rows that classify as transactions, in order."""
        return [r for r in self.classify_all(records) if isinstance(r, Transaction)]

    def malformed(self, records: Iterable[RawRecord]) -> list[MalformedRecord]:
        """Return only the rows that classify as malformed, in order."""
        return [r for r in self.classify_all(records) if isinstance(r, MalformedRecord)]

    @staticmethod
    def _malformed(
        record: RawRecord, failed_rules: list[str], error_messages: list[str]
    ) -> MalformedRecord:
        return MalformedRecord(
            raw_payload=dict(record),
            failed_rules=failed_rules,
            error_messages=error_messages,
        )
