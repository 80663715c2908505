"""Predicates deciding how a transaction counts toward investment totals."""

from collections.abc import Iterable

from crypto_portfolio_metrics.core.aliases import TokenAliasResolver
from crypto_portfolio_metrics.core.models import Transaction, TransactionType

CRYPTO_PURCHASE_LABEL = "Achat de crypto"


class TransactionClassifier:
    """
    Classifies transactions against the configured fiat set.

    Symbols are compared in canonical form, so a fiat configured with
    aliases is recognised under any of its names.

    Parameters
    ----------
    fiat_tokens : Iterable[str]
        Fiat tickers
    resolver : TokenAliasResolver
        Alias resolver used to canonicalise symbols

    """

    def __init__(self, fiat_tokens: Iterable[str], resolver: TokenAliasResolver) -> None:
        self.resolver = resolver
        self.fiat_tokens = frozenset(resolver.resolve(token) for token in fiat_tokens)

    def is_fiat(self, symbol: str | None) -> bool:
        """Check whether a symbol is one of the fiat tokens."""
        if not symbol:
            return False
        return self.resolver.resolve(symbol) in self.fiat_tokens

    def is_fiat_investment(self, transaction: Transaction) -> bool:
        """
        Check if fresh fiat money entered the portfolio.

        Parameters
        ----------
        transaction : Transaction
            Transaction to classify

        Returns
        -------
        bool
            True for an exchange sending fiat, or a crypto purchase deposit

        """
        if transaction.type == TransactionType.EXCHANGE:
            return self.is_fiat(transaction.token_sent)
        return _is_crypto_purchase(transaction)

    def is_relevant_investment(self, transaction: Transaction) -> bool:
        """
        Check if the transaction counts toward total investment.

        Parameters
        ----------
        transaction : Transaction
            Transaction to classify

        Returns
        -------
        bool
            True for any exchange, or a crypto purchase deposit

        """
        return transaction.type == TransactionType.EXCHANGE or _is_crypto_purchase(transaction)

    def is_cash_out(self, transaction: Transaction) -> bool:
        """Check if the transaction exchanges a token back into fiat."""
        return transaction.type == TransactionType.EXCHANGE and self.is_fiat(transaction.token_received)


def _is_crypto_purchase(transaction: Transaction) -> bool:
    return transaction.type == TransactionType.DEPOSIT and transaction.label == CRYPTO_PURCHASE_LABEL
