"""Token ledger holding the running aggregate of every canonical token."""

import logging
from decimal import Decimal

from crypto_portfolio_metrics.core.aliases import TokenAliasResolver
from crypto_portfolio_metrics.core.classifier import TransactionClassifier
from crypto_portfolio_metrics.core.config import PortfolioConfig
from crypto_portfolio_metrics.core.models import (
    QuantityData,
    TokenData,
    Transaction,
    TransactionType,
    UnitPrice,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def compute_pnl_and_unit_price(token: TokenData) -> tuple[Decimal, UnitPrice]:
    """
    Derive realized P&L and breakeven unit prices from a token's aggregates.

    A positive P&L leaves no loss to recover, so both unit prices are zero.
    Otherwise the loss is spread over the held quantity; a missing or zero
    quantity also gives zero.

    Parameters
    ----------
    token : TokenData
        Token to derive values for

    Returns
    -------
    tuple[Decimal, UnitPrice]
        Realized P&L and unit prices

    """
    pnl_realized = token.total_sell - token.total_buy
    return pnl_realized, UnitPrice(
        computed=_unit_price(pnl_realized, token.quantity.computed),
        expected=_unit_price(pnl_realized, token.quantity.expected),
    )


def _unit_price(pnl_realized: Decimal, quantity: Decimal | None) -> Decimal:
    if pnl_realized > 0 or not quantity:
        return ZERO
    return abs(pnl_realized) / quantity


class TokenLedger:
    """
    Running per-token state for one fold over a transaction list.

    The token map is keyed by canonical symbol and ordered by first
    appearance. It is owned by the ledger; callers get copies through
    :meth:`snapshot`.

    Parameters
    ----------
    config : PortfolioConfig
        Portfolio configuration
    resolver : TokenAliasResolver
        Alias resolver
    classifier : TransactionClassifier
        Transaction classifier

    """

    def __init__(
        self,
        config: PortfolioConfig,
        resolver: TokenAliasResolver,
        classifier: TransactionClassifier,
    ) -> None:
        self.resolver = resolver
        self.classifier = classifier
        self.expected_quantities = {resolver.resolve(k): v for k, v in config.expected_quantities.items()}
        self.tokens: dict[str, TokenData] = {}
        self.total_fees = ZERO

    def ensure_token(self, symbol: str) -> TokenData:
        """
        Get the data of a token, creating it on first use.

        Parameters
        ----------
        symbol : str
            Canonical symbol or alias

        Returns
        -------
        TokenData
            Ledger entry of the canonical token

        """
        canonical = self.resolver.resolve(symbol)
        token = self.tokens.get(canonical)
        if token is None:
            token = TokenData(
                symbol=canonical,
                aliases=self.resolver.aliases(canonical),
                quantity=QuantityData(expected=self.expected_quantities.get(canonical)),
            )
            self.tokens[canonical] = token
        return token

    def apply(self, transaction: Transaction) -> list[str]:
        """
        Apply every leg of a transaction.

        Parameters
        ----------
        transaction : Transaction
            Next transaction in chronological order

        Returns
        -------
        list[str]
            Canonical symbols whose quantity changed

        """
        if self.classifier.is_relevant_investment(transaction):
            self.apply_receive_leg(transaction)
        if transaction.type == TransactionType.EXCHANGE:
            self.apply_sell_leg(transaction)
            self.apply_cash_out_leg(transaction)
        dirty = self.apply_quantity(transaction)
        self.apply_fees(transaction)
        return dirty

    def apply_receive_leg(self, transaction: Transaction) -> None:
        """Add the received value to total buy, and to cash in for fiat investments."""
        if not _has_priced_received(transaction):
            if transaction.amount_received:
                _log_skipped("receive", transaction)
            return

        value = transaction.amount_received * transaction.price_token_received
        token = self.ensure_token(transaction.token_received)
        token.total_buy += value
        if self.classifier.is_fiat_investment(transaction):
            token.cash_in += value

    def apply_sell_leg(self, transaction: Transaction) -> None:
        """Add the sent value of an exchange to the sent token's total sell."""
        if transaction.type != TransactionType.EXCHANGE:
            return
        if not _has_priced_sent(transaction):
            if transaction.amount_sent:
                _log_skipped("sell", transaction)
            return

        token = self.ensure_token(transaction.token_sent)
        token.total_sell += transaction.amount_sent * transaction.price_token_sent

    def apply_cash_out_leg(self, transaction: Transaction) -> None:
        """Add the sent value of an exchange into fiat to the sent token's cash out."""
        if not self.classifier.is_cash_out(transaction):
            return
        if not (_has_priced_received(transaction) and _has_priced_sent(transaction)):
            if transaction.amount_sent:
                _log_skipped("cash out", transaction)
            return

        token = self.ensure_token(transaction.token_sent)
        token.cash_out += transaction.amount_sent * transaction.price_token_sent

    def apply_fees(self, transaction: Transaction) -> None:
        """Add the fee value to the portfolio-wide fee total."""
        if transaction.fees and transaction.price_token_fees:
            self.total_fees += transaction.fees * transaction.price_token_fees

    def apply_quantity(self, transaction: Transaction) -> list[str]:
        """
        Move computed quantities for the received, sent and fee legs.

        Parameters
        ----------
        transaction : Transaction
            Transaction to apply

        Returns
        -------
        list[str]
            Canonical symbols whose quantity changed, in leg order

        """
        dirty: list[str] = []
        legs = (
            (transaction.token_received, transaction.amount_received),
            (transaction.token_sent, -transaction.amount_sent if transaction.amount_sent else None),
            (transaction.token_fees, -transaction.fees if transaction.fees else None),
        )
        for symbol, change in legs:
            if not (symbol and change):
                continue
            token = self.ensure_token(symbol)
            token.quantity.computed += change
            if token.symbol not in dirty:
                dirty.append(token.symbol)
        return dirty

    def finalize(self) -> None:
        """Compute P&L, unit prices and quantity deltas of every token."""
        for token in self.tokens.values():
            token.pnl_realized, token.unit_price = compute_pnl_and_unit_price(token)

            quantity = token.quantity
            if quantity.expected is None:
                quantity.delta = None
                quantity.delta_percent = None
                continue
            quantity.delta = quantity.computed - quantity.expected
            # Zero target has no meaningful relative gap
            quantity.delta_percent = quantity.delta / quantity.expected * HUNDRED if quantity.expected else None

    def snapshot(self) -> dict[str, TokenData]:
        """Deep copy of the token map."""
        return {symbol: token.model_copy(deep=True) for symbol, token in self.tokens.items()}

    def cash_totals(self) -> tuple[Decimal, Decimal]:
        """Sum of cash in and cash out over all tokens."""
        cash_in = sum((token.cash_in for token in self.tokens.values()), ZERO)
        cash_out = sum((token.cash_out for token in self.tokens.values()), ZERO)
        return cash_in, cash_out


def _has_priced_received(transaction: Transaction) -> bool:
    return bool(transaction.amount_received and transaction.price_token_received and transaction.token_received)


def _has_priced_sent(transaction: Transaction) -> bool:
    return bool(transaction.amount_sent and transaction.price_token_sent and transaction.token_sent)


def _log_skipped(leg: str, transaction: Transaction) -> None:
    logger.debug(
        "Skipping %s leg of %s transaction on %s: incomplete amount/price",
        leg,
        transaction.type,
        transaction.date,
    )
