"""Tests for the wallet and per-platform wallet views."""

from decimal import Decimal

import pytest

from crypto_portfolio_metrics.core import WalletBuilder
from tests.factories import deposit, exchange, withdrawal


@pytest.fixture
def builder(resolver, classifier):
    """Wallet builder over the shared configuration."""
    return WalletBuilder(resolver, classifier)


def test_buys_and_sells(builder):
    """Test quantities, average prices and breakeven after buys and a sale."""
    wallet = builder.build(
        [
            exchange("EUR", 3000, 1, "BTC", "0.1", 30000, date="01/01/2023 10:00:00"),
            exchange("EUR", 1000, 1, "Bitcoin", "0.05", 20000, date="02/01/2023 10:00:00"),
            exchange("BTC", "0.05", 40000, "EUR", 2000, 1, date="03/01/2023 10:00:00"),
        ]
    )

    assert list(wallet) == ["BTC", "EUR"]
    btc = wallet["BTC"]
    assert btc.quantity == Decimal("0.1")
    assert btc.quantity_buy == Decimal("0.15")
    assert btc.quantity_sell == Decimal("0.05")
    assert [action.date for action in btc.price_buy] == ["01/01/2023 10:00:00", "02/01/2023 10:00:00"]
    assert btc.sum_price_buy == Decimal("4000")
    assert btc.avg_price_buy == Decimal("4000") / Decimal("0.15")
    assert btc.sum_price_sell == Decimal("2000")
    assert btc.avg_price_sell == Decimal("40000")
    assert btc.breakeven_price == Decimal("20000")

    eur = wallet["EUR"]
    assert eur.quantity == Decimal("-2000")
    assert eur.quantity_sell == Decimal("4000")


def test_deposits_and_withdrawals(builder):
    """Test transfers move quantities without counting as buys or sells."""
    wallet = builder.build(
        [
            deposit("ETH", 2, 1500, label="Airdrop"),
            withdrawal("Ether", "0.5", 1600),
            deposit("BTC", "0.1", 30000),
        ]
    )

    eth = wallet["ETH"]
    assert eth.quantity == Decimal("1.5")
    assert eth.quantity_buy == Decimal("0")
    assert eth.quantity_sell == Decimal("0")
    assert eth.price_buy == []
    assert eth.price_sell == []
    assert eth.avg_price_buy == Decimal("0")
    assert eth.breakeven_price == Decimal("0")

    btc = wallet["BTC"]
    assert btc.quantity_buy == Decimal("0.1")
    assert btc.avg_price_buy == Decimal("30000")
    assert btc.breakeven_price == Decimal("30000")


def test_unpriced_legs_are_ignored(builder):
    """Test legs without a price leave the wallet untouched."""
    wallet = builder.build([deposit("SOL", 5), withdrawal("BTC", "0.1")])

    assert wallet == {}


def test_breakeven_is_floored_at_zero(builder):
    """Test a profitable token has a zero breakeven price."""
    wallet = builder.build(
        [
            exchange("EUR", 3000, 1, "BTC", "0.1", 30000),
            exchange("BTC", "0.05", 80000, "EUR", 4000, 1),
        ]
    )

    assert wallet["BTC"].breakeven_price == Decimal("0")


def test_breakeven_without_holdings(builder):
    """Test a fully sold token has a zero breakeven price."""
    wallet = builder.build(
        [
            exchange("EUR", 3000, 1, "BTC", "0.1", 30000),
            exchange("BTC", "0.1", 20000, "EUR", 2000, 1),
        ]
    )

    assert wallet["BTC"].quantity == Decimal("0")
    assert wallet["BTC"].breakeven_price == Decimal("0")


def test_platforms(builder):
    """Test one wallet per platform, each with its own prices."""
    transactions = [
        exchange("EUR", 3000, 1, "BTC", "0.1", 30000, platform="Kraken"),
        exchange("EUR", 2000, 1, "ETH", 1, 2000, platform="Binance"),
        exchange("EUR", 4000, 1, "BTC", "0.1", 40000, platform="Binance"),
        deposit("BTC", "0.1", 50000).model_copy(update={"platform": "Kraken"}),
    ]

    platforms = builder.build_platforms(transactions)

    assert list(platforms) == ["Kraken", "Binance"]
    assert list(platforms["Binance"]) == ["ETH", "EUR", "BTC"]
    assert platforms["Kraken"]["BTC"].quantity == Decimal("0.2")
    assert platforms["Kraken"]["BTC"].avg_price_buy == Decimal("40000")
    assert platforms["Binance"]["BTC"].avg_price_buy == Decimal("40000")
    assert platforms["Binance"]["EUR"].quantity == Decimal("-6000")
    assert "ETH" not in platforms["Kraken"]


def test_report_includes_wallets(engine):
    """Test the engine report carries the wallet views."""
    transactions = iter(
        [
            exchange("EUR", 3000, 1, "BTC", "0.1", 30000, platform="Kraken"),
            withdrawal("BTC", "0.02", 35000),
        ]
    )

    report = engine.run(transactions)

    assert report.metrics.tokens["BTC"].quantity.computed == Decimal("0.08")
    assert report.wallet["BTC"].quantity == Decimal("0.08")
    assert list(report.platforms) == ["Kraken", ""]
    assert report.platforms[""]["BTC"].quantity == Decimal("-0.02")
