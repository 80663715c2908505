"""Transaction builders for tests."""

from decimal import Decimal

from crypto_portfolio_metrics.core import CRYPTO_PURCHASE_LABEL, Transaction, TransactionType


def exchange(
    sent,
    amount_sent,
    price_sent,
    received,
    amount_received,
    price_received,
    date="01/01/2023 12:00:00",
    **extra,
):
    """Build an exchange transaction."""
    return Transaction(
        type=TransactionType.EXCHANGE,
        date=date,
        token_sent=sent,
        amount_sent=Decimal(str(amount_sent)),
        price_token_sent=None if price_sent is None else Decimal(str(price_sent)),
        token_received=received,
        amount_received=Decimal(str(amount_received)),
        price_token_received=None if price_received is None else Decimal(str(price_received)),
        label=extra.pop("label", CRYPTO_PURCHASE_LABEL),
        **extra,
    )


def deposit(token, amount, price=None, label=CRYPTO_PURCHASE_LABEL, date="01/01/2023 12:00:00"):
    """Build a deposit transaction."""
    return Transaction(
        type=TransactionType.DEPOSIT,
        date=date,
        token_received=token,
        amount_received=Decimal(str(amount)),
        price_token_received=None if price is None else Decimal(str(price)),
        label=label,
    )


def withdrawal(token, amount, price=None, date="01/01/2023 12:00:00"):
    """Build a withdrawal transaction."""
    return Transaction(
        type=TransactionType.WITHDRAWAL,
        date=date,
        token_sent=token,
        amount_sent=Decimal(str(amount)),
        price_token_sent=None if price is None else Decimal(str(price)),
        label="Retrait",
    )
