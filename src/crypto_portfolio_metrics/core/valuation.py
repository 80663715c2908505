"""Valuation of the final holdings under named price scenarios."""

from crypto_portfolio_metrics.core.aliases import TokenAliasResolver
from crypto_portfolio_metrics.core.config import ScenarioConfig
from crypto_portfolio_metrics.core.models import PortfolioResult, ScenarioValuation, TokenValuation


class ValuationEngine:
    """
    Values computed and expected quantities for each configured scenario.

    Parameters
    ----------
    scenarios : dict[str, ScenarioConfig]
        Scenario name to price table
    resolver : TokenAliasResolver
        Alias resolver for scenario price keys

    """

    def __init__(self, scenarios: dict[str, ScenarioConfig], resolver: TokenAliasResolver) -> None:
        self.scenarios = scenarios
        self.resolver = resolver

    def calculate(self, result: PortfolioResult) -> list[ScenarioValuation]:
        """
        Value the holdings of a result under every scenario.

        Parameters
        ----------
        result : PortfolioResult
            Finished portfolio metrics

        Returns
        -------
        list[ScenarioValuation]
            One valuation per scenario, in configuration order

        """
        return [self.calculate_scenario(name, scenario, result) for name, scenario in self.scenarios.items()]

    def calculate_scenario(self, name: str, scenario: ScenarioConfig, result: PortfolioResult) -> ScenarioValuation:
        """
        Value the holdings under one scenario.

        Only tokens priced by the scenario are included. The expected total
        becomes None as soon as one included token has no expected quantity.

        Parameters
        ----------
        name : str
            Scenario name
        scenario : ScenarioConfig
            Scenario prices and description
        result : PortfolioResult
            Finished portfolio metrics

        Returns
        -------
        ScenarioValuation
            Per-token valuations and totals

        """
        prices = {self.resolver.resolve(symbol): price for symbol, price in scenario.prices.items()}
        valuation = ScenarioValuation(scenario_name=name, scenario_description=scenario.description)

        for symbol, token in result.tokens.items():
            price = prices.get(symbol)
            if price is None:
                continue

            computed = token.quantity.computed * price
            expected = token.quantity.expected * price if token.quantity.expected is not None else None

            valuation.total_computed += computed
            if expected is None:
                valuation.total_expected = None
            elif valuation.total_expected is not None:
                valuation.total_expected += expected

            valuation.token_valuations[symbol] = TokenValuation(computed=computed, expected=expected)

        return valuation
