"""Append-only history of token snapshots."""

from decimal import Decimal

from crypto_portfolio_metrics.core.ledger import compute_pnl_and_unit_price
from crypto_portfolio_metrics.core.models import TokenData, TokenHistoricEntry, Transaction


class HistoricTracker:
    """Records a snapshot of a token each time a transaction changes it."""

    def record(self, token: TokenData, transaction: Transaction) -> TokenHistoricEntry:
        """
        Append a snapshot of the token's current state to its history.

        Deltas are taken against the previous entry, or against zero for
        the first one.

        Parameters
        ----------
        token : TokenData
            Token after all legs of the transaction were applied
        transaction : Transaction
            The transaction that changed the token

        Returns
        -------
        TokenHistoricEntry
            The appended entry

        """
        pnl_realized, unit_price = compute_pnl_and_unit_price(token)
        previous = token.historic[-1] if token.historic else None

        def delta(field: str) -> Decimal:
            current = getattr(token, field)
            return current - getattr(previous, field) if previous else current

        entry = TokenHistoricEntry(
            date=transaction.date,
            quantity=token.quantity.computed,
            cash_in=token.cash_in,
            cash_in_delta=delta("cash_in"),
            cash_out=token.cash_out,
            cash_out_delta=delta("cash_out"),
            total_buy=token.total_buy,
            total_buy_delta=delta("total_buy"),
            total_sell=token.total_sell,
            total_sell_delta=delta("total_sell"),
            pnl_realized=pnl_realized,
            unit_price=unit_price,
            transaction=transaction,
        )
        token.historic.append(entry)
        return entry
