"""
Report generator deriving views from the current snapshot.

Every report reads the snapshot and recomputes from scratch; nothing
derived is cached, so a report can never be stale relative to the store.
"""

from transaction_processor.core.models import (
    AccountBalanceView,
    MalformedRecord,
    RawRecord,
    Transaction,
)
from transaction_processor.core.rules import TransactionClassifier
from transaction_processor.ledger import LedgerAggregator
from transaction_processor.observability.metrics import record_report
from transaction_processor.store import SnapshotStore


class ReportGenerator:
    """
    Builds the account, malformed and collections reports.

    An empty or never-written snapshot yields {}, [] and [] respectively.
    StoreUnavailable from the store propagates to the caller.
    """

    def __init__(
        self,
        store: SnapshotStore,
        classifier: TransactionClassifier | None = None,
        aggregator: LedgerAggregator | None = None,
    ):
        self.store = store
        self.classifier = classifier or TransactionClassifier()
        self.aggregator = aggregator or LedgerAggregator()

    def account_report(self) -> AccountBalanceView:
        """
        Balances per account and card.

        Returns:
            account name -> card number -> signed total, first-seen order
        """
        record_report("accounts")
        transactions = self.classifier.transactions(self.store.current())
        return self.aggregator.aggregate(transactions)

    def malformed_report(self) -> list[RawRecord]:
        """
        Rows that failed validation, verbatim and in file order.
        """
        record_report("malformed")
        return [
            record.raw_payload
            for record in self.classifier.classify_all(self.store.current())
            if isinstance(record, MalformedRecord)
        ]

    def collections_report(self) -> list[str]:
        """
        Accounts with at least one negative-amount transaction.

        Inclusion is decided per transaction, not on the aggregated balance:
        an account is listed even when its total is positive. Names are
        de-duplicated keeping first-seen order.
        """
        record_report("collections")
        accounts: dict[str, None] = {}
        for record in self.classifier.classify_all(self.store.current()):
            if isinstance(record, Transaction) and record.amount < 0:
                accounts.setdefault(record.account_name, None)
        return list(accounts)
