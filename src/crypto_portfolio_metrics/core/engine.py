"""Portfolio engine folding transactions into metrics and valuations."""

import logging
from collections.abc import Iterable

from crypto_portfolio_metrics.core.aggregator import GroupAggregator
from crypto_portfolio_metrics.core.aliases import TokenAliasResolver
from crypto_portfolio_metrics.core.classifier import TransactionClassifier
from crypto_portfolio_metrics.core.config import PortfolioConfig
from crypto_portfolio_metrics.core.historic import HistoricTracker
from crypto_portfolio_metrics.core.ledger import TokenLedger
from crypto_portfolio_metrics.core.models import (
    Overview,
    PortfolioReport,
    PortfolioResult,
    ScenarioValuation,
    Transaction,
    WalletToken,
)
from crypto_portfolio_metrics.core.valuation import ValuationEngine
from crypto_portfolio_metrics.core.wallet import WalletBuilder

logger = logging.getLogger(__name__)


class PortfolioEngine:
    """
    Orchestrates the metrics fold and the scenario valuations.

    Workflow:
    1. Fold transactions through the ledger, in the order given
    2. Record a historic entry for every token each transaction changed
    3. Derive P&L, unit prices and quantity deltas
    4. Aggregate configured groups
    5. Value the final quantities under every scenario
    6. Build the wallet, overall and per platform

    Each call uses a fresh ledger, so an engine can be reused and runs do
    not share state.

    Parameters
    ----------
    config : PortfolioConfig
        Portfolio configuration

    """

    def __init__(self, config: PortfolioConfig) -> None:
        self.config = config
        self.resolver = TokenAliasResolver(config.token_aliases)
        self.classifier = TransactionClassifier(config.fiat_tokens, self.resolver)
        self.historic = HistoricTracker()
        self.group_aggregator = GroupAggregator(config.groups, self.resolver)
        self.valuation_engine = ValuationEngine(config.scenarios, self.resolver)
        self.wallet_builder = WalletBuilder(self.resolver, self.classifier)

    def compute_metrics(self, transactions: Iterable[Transaction]) -> PortfolioResult:
        """
        Compute token, group and overview metrics.

        Parameters
        ----------
        transactions : Iterable[Transaction]
            Transactions in chronological order

        Returns
        -------
        PortfolioResult
            Metrics detached from the ledger that produced them

        """
        ledger = TokenLedger(self.config, self.resolver, self.classifier)

        count = 0
        for transaction in transactions:
            for symbol in ledger.apply(transaction):
                self.historic.record(ledger.tokens[symbol], transaction)
            count += 1

        ledger.finalize()
        tokens = ledger.snapshot()
        cash_in, cash_out = ledger.cash_totals()

        logger.debug("Folded %d transactions into %d tokens", count, len(tokens))

        return PortfolioResult(
            overview=Overview(cash_in=cash_in, cash_out=cash_out, fees=ledger.total_fees),
            groups=self.group_aggregator.build(tokens),
            tokens=tokens,
        )

    def compute_valuations(self, result: PortfolioResult) -> list[ScenarioValuation]:
        """
        Value the holdings of a result under every configured scenario.

        Parameters
        ----------
        result : PortfolioResult
            Metrics from :meth:`compute_metrics`

        Returns
        -------
        list[ScenarioValuation]
            One valuation per scenario, in configuration order

        """
        return self.valuation_engine.calculate(result)

    def compute_wallet(self, transactions: Iterable[Transaction]) -> dict[str, WalletToken]:
        """Build the wallet with buy and sell prices of every token."""
        return self.wallet_builder.build(transactions)

    def compute_platforms(self, transactions: Iterable[Transaction]) -> dict[str, dict[str, WalletToken]]:
        """Build one wallet per platform."""
        return self.wallet_builder.build_platforms(transactions)

    def run(self, transactions: Iterable[Transaction]) -> PortfolioReport:
        """Compute metrics, valuations and wallets in one go."""
        transactions = list(transactions)
        metrics = self.compute_metrics(transactions)
        return PortfolioReport(
            metrics=metrics,
            valuations=self.compute_valuations(metrics),
            wallet=self.compute_wallet(transactions),
            platforms=self.compute_platforms(transactions),
        )
