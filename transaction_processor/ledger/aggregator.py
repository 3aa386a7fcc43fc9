"""
Ledger aggregator folding transactions into account/card balances.
"""

from collections.abc import Iterable
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Context, Decimal, localcontext

from transaction_processor.core.models import AccountBalanceView, Transaction

# Unbounded precision: sums of finite decimals are never rounded.
EXACT_CONTEXT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


class LedgerAggregator:
    """
    Accumulates signed amounts into a two-level balance mapping.

    balances[account_name][card_number] is the sum of every transaction
    amount on that card. Keys keep first-seen order; totals do not depend
    on iteration order because additions run in an unbounded-precision context.
    """

    def aggregate(self, transactions: Iterable[Transaction]) -> AccountBalanceView:
        """
        Fold transactions into balances.

        Args:
            transactions: Validated transactions, in snapshot order

        Returns:
            account -> card -> balance (empty when there are no transactions)
        """
        balances: AccountBalanceView = {}

        with localcontext(EXACT_CONTEXT):
            for tx in transactions:
                cards = balances.setdefault(tx.account_name, {})
                cards[tx.card_number] = cards.get(tx.card_number, Decimal("0")) + tx.amount

        return balances
