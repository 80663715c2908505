"""Core functionality including models, ledger, aggregator, valuation engine, and wallet."""

from crypto_portfolio_metrics.core.aggregator import GroupAggregator
from crypto_portfolio_metrics.core.aliases import TokenAliasResolver
from crypto_portfolio_metrics.core.classifier import CRYPTO_PURCHASE_LABEL, TransactionClassifier
from crypto_portfolio_metrics.core.config import PortfolioConfig, ScenarioConfig
from crypto_portfolio_metrics.core.engine import PortfolioEngine
from crypto_portfolio_metrics.core.historic import HistoricTracker
from crypto_portfolio_metrics.core.ledger import TokenLedger, compute_pnl_and_unit_price
from crypto_portfolio_metrics.core.models import (
    GroupData,
    GroupHistoricEntry,
    Overview,
    PortfolioReport,
    PortfolioResult,
    PriceAction,
    QuantityData,
    ScenarioValuation,
    TokenData,
    TokenHistoricEntry,
    TokenValuation,
    Transaction,
    TransactionType,
    UnitPrice,
    WalletToken,
)
from crypto_portfolio_metrics.core.valuation import ValuationEngine
from crypto_portfolio_metrics.core.wallet import WalletBuilder

__all__ = [
    "CRYPTO_PURCHASE_LABEL",
    "GroupAggregator",
    "GroupData",
    "GroupHistoricEntry",
    "HistoricTracker",
    "Overview",
    "PortfolioConfig",
    "PortfolioEngine",
    "PortfolioReport",
    "PortfolioResult",
    "PriceAction",
    "QuantityData",
    "ScenarioConfig",
    "ScenarioValuation",
    "TokenAliasResolver",
    "TokenData",
    "TokenHistoricEntry",
    "TokenLedger",
    "TokenValuation",
    "Transaction",
    "TransactionClassifier",
    "TransactionType",
    "UnitPrice",
    "ValuationEngine",
    "WalletBuilder",
    "WalletToken",
    "compute_pnl_and_unit_price",
]
