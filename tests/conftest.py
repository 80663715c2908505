"""Pytest configuration for crypto-portfolio-metrics tests."""

from decimal import Decimal

import pytest

from crypto_portfolio_metrics.core import (
    PortfolioConfig,
    PortfolioEngine,
    ScenarioConfig,
    TokenAliasResolver,
    TokenLedger,
    TransactionClassifier,
)
from tests.factories import exchange


@pytest.fixture
def config():
    """Configuration shared by most tests."""
    return PortfolioConfig(
        fiat_tokens=["USD", "EUR"],
        token_aliases={
            "MATIC": ["POL", "Polygon"],
            "ETH": ["Ethereum", "Ether"],
            "BTC": ["Bitcoin"],
        },
        expected_quantities={"BTC": Decimal("0.5"), "ETH": Decimal("5"), "SOL": Decimal("0")},
        groups={
            "Majors": ["BTC", "ETH"],
            "Layer2": ["MATIC"],
            "Empty": ["LTC"],
        },
        scenarios={
            "Optimistic": ScenarioConfig(
                description="Bull market",
                prices={"MATIC": Decimal("2.5"), "ETH": Decimal("3500"), "BTC": Decimal("60000")},
            ),
            "Pessimistic": ScenarioConfig(
                description="Bear market",
                prices={"MATIC": Decimal("0.8"), "ETH": Decimal("1500"), "BTC": Decimal("30000")},
            ),
            "PartialScenario": ScenarioConfig(
                description="Only MATIC",
                prices={"MATIC": Decimal("2")},
            ),
        },
    )


@pytest.fixture
def resolver(config):
    """Alias resolver built from the shared configuration."""
    return TokenAliasResolver(config.token_aliases)


@pytest.fixture
def classifier(config, resolver):
    """Classifier built from the shared configuration."""
    return TransactionClassifier(config.fiat_tokens, resolver)


@pytest.fixture
def ledger(config, resolver, classifier):
    """Empty token ledger."""
    return TokenLedger(config, resolver, classifier)


@pytest.fixture
def engine(config):
    """Portfolio engine over the shared configuration."""
    return PortfolioEngine(config)


@pytest.fixture
def mock_transaction():
    """Exchange of 100 USD for 50 BTC with a 2 BTC fee."""
    return exchange(
        "USD",
        100,
        1,
        "BTC",
        50,
        50000,
        fees=Decimal("2"),
        token_fees="BTC",
        price_token_fees=Decimal("50000"),
        platform="Binance",
        description="Exchange transaction",
    )
