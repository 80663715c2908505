"""Wallet view of the holdings, overall and per platform."""

import logging
from collections.abc import Iterable
from decimal import Decimal

from crypto_portfolio_metrics.core.aliases import TokenAliasResolver
from crypto_portfolio_metrics.core.classifier import TransactionClassifier
from crypto_portfolio_metrics.core.models import PriceAction, Transaction, TransactionType, WalletToken

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


class WalletBuilder:
    """
    Builds token holdings with their buy and sell prices.

    Workflow:
    1. Apply the incoming leg of deposits and exchanges
    2. Apply the outgoing leg of withdrawals and exchanges
    3. Derive average prices and breakeven price per token

    Only priced legs move the wallet. Incoming legs of relevant investments
    count as buys, outgoing legs of exchanges count as sells.

    Parameters
    ----------
    resolver : TokenAliasResolver
        Alias resolver, wallets are keyed by canonical symbol
    classifier : TransactionClassifier
        Classifier deciding which incoming legs are buys

    """

    def __init__(self, resolver: TokenAliasResolver, classifier: TransactionClassifier) -> None:
        self.resolver = resolver
        self.classifier = classifier

    def build(self, transactions: Iterable[Transaction]) -> dict[str, WalletToken]:
        """
        Build the wallet over all transactions.

        Parameters
        ----------
        transactions : Iterable[Transaction]
            Transactions in chronological order

        Returns
        -------
        dict[str, WalletToken]
            Canonical symbol to holdings, in order of first appearance

        """
        wallet: dict[str, WalletToken] = {}
        for transaction in transactions:
            self.apply(wallet, transaction)
        return self.compute_prices(wallet)

    def build_platforms(self, transactions: Iterable[Transaction]) -> dict[str, dict[str, WalletToken]]:
        """
        Build one wallet per platform.

        Parameters
        ----------
        transactions : Iterable[Transaction]
            Transactions in chronological order

        Returns
        -------
        dict[str, dict[str, WalletToken]]
            Platform name to its wallet, in order of first appearance

        """
        platforms: dict[str, dict[str, WalletToken]] = {}
        for transaction in transactions:
            self.apply(platforms.setdefault(transaction.platform, {}), transaction)

        for name, wallet in platforms.items():
            self.compute_prices(wallet)
            logger.debug("Platform %s holds %d tokens", name or "<none>", len(wallet))
        return platforms

    def apply(self, wallet: dict[str, WalletToken], transaction: Transaction) -> None:
        """Apply the legs of one transaction to a wallet."""
        if transaction.type in (TransactionType.DEPOSIT, TransactionType.EXCHANGE):
            self._apply_incoming(wallet, transaction)
        if transaction.type in (TransactionType.WITHDRAWAL, TransactionType.EXCHANGE):
            self._apply_outgoing(wallet, transaction)

    def _apply_incoming(self, wallet: dict[str, WalletToken], transaction: Transaction) -> None:
        amount = transaction.amount_received
        price = transaction.price_token_received
        if not (transaction.token_received and amount and price):
            return

        token = wallet.setdefault(self.resolver.resolve(transaction.token_received), WalletToken())
        token.quantity += amount
        if self.classifier.is_relevant_investment(transaction):
            token.quantity_buy += amount
            token.price_buy.append(PriceAction(price=price, quantity=amount, date=transaction.date))

    def _apply_outgoing(self, wallet: dict[str, WalletToken], transaction: Transaction) -> None:
        amount = transaction.amount_sent
        price = transaction.price_token_sent
        if not (transaction.token_sent and amount and price):
            return

        token = wallet.setdefault(self.resolver.resolve(transaction.token_sent), WalletToken())
        token.quantity -= amount
        if transaction.type == TransactionType.EXCHANGE:
            token.quantity_sell += amount
            token.price_sell.append(PriceAction(price=price, quantity=amount, date=transaction.date))

    @staticmethod
    def compute_prices(wallet: dict[str, WalletToken]) -> dict[str, WalletToken]:
        """
        Derive average, summed and breakeven prices of every token.

        The breakeven price is the net amount spent over the held quantity,
        floored at zero. It is zero when nothing is held.

        Parameters
        ----------
        wallet : dict[str, WalletToken]
            Wallet to update in place

        Returns
        -------
        dict[str, WalletToken]
            The same wallet

        """
        for token in wallet.values():
            token.avg_price_buy, token.sum_price_buy = _average(token.price_buy)
            token.avg_price_sell, token.sum_price_sell = _average(token.price_sell)
            if token.quantity:
                token.breakeven_price = max((token.sum_price_buy - token.sum_price_sell) / token.quantity, ZERO)
            else:
                token.breakeven_price = ZERO
        return wallet


def _average(actions: list[PriceAction]) -> tuple[Decimal, Decimal]:
    quantity = sum((action.quantity for action in actions), ZERO)
    total = sum((action.price * action.quantity for action in actions), ZERO)
    return (total / quantity if quantity else ZERO), total
