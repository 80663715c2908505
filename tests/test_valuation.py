"""Tests for scenario valuations."""

from decimal import Decimal

import pytest

from crypto_portfolio_metrics.core import (
    PortfolioResult,
    QuantityData,
    ScenarioConfig,
    TokenData,
    ValuationEngine,
)


def _holding(symbol, computed, expected=None):
    return TokenData(
        symbol=symbol,
        aliases=[symbol],
        quantity=QuantityData(
            computed=Decimal(str(computed)),
            expected=None if expected is None else Decimal(str(expected)),
        ),
    )


@pytest.fixture
def mock_result():
    """Holdings of MATIC, ETH and BTC with targets."""
    return PortfolioResult(
        tokens={
            "MATIC": _holding("MATIC", 200, 160),
            "ETH": _holding("ETH", 2, "1.8"),
            "BTC": _holding("BTC", "0.5", "0.4"),
        }
    )


@pytest.fixture
def valuations(config, resolver, mock_result):
    """Valuations of the mock result under the shared scenarios."""
    return ValuationEngine(config.scenarios, resolver).calculate(mock_result)


def test_scenarios_in_configuration_order(valuations):
    """Test one valuation per scenario, in configuration order."""
    assert [v.scenario_name for v in valuations] == ["Optimistic", "Pessimistic", "PartialScenario"]
    assert valuations[0].scenario_description == "Bull market"


def test_optimistic_scenario(valuations):
    """Test valuations under the optimistic scenario."""
    optimistic = valuations[0]

    assert optimistic.total_computed == Decimal("37500")
    assert optimistic.total_expected == Decimal("30700")
    assert optimistic.token_valuations["MATIC"].computed == Decimal("500")
    assert optimistic.token_valuations["MATIC"].expected == Decimal("400")
    assert optimistic.token_valuations["ETH"].computed == Decimal("7000")
    assert optimistic.token_valuations["ETH"].expected == Decimal("6300")
    assert optimistic.token_valuations["BTC"].computed == Decimal("30000")
    assert optimistic.token_valuations["BTC"].expected == Decimal("24000")


def test_pessimistic_scenario(valuations):
    """Test valuations under the pessimistic scenario."""
    pessimistic = valuations[1]

    assert pessimistic.total_computed == Decimal("18160")
    assert pessimistic.total_expected == Decimal("14828")
    assert pessimistic.token_valuations["MATIC"].computed == Decimal("160")
    assert pessimistic.token_valuations["ETH"].expected == Decimal("2700")
    assert pessimistic.token_valuations["BTC"].expected == Decimal("12000")


def test_unpriced_tokens_are_excluded(valuations):
    """Test tokens missing from the price list are left out."""
    partial = valuations[2]

    assert partial.total_computed == Decimal("400")
    assert partial.total_expected == Decimal("320")
    assert set(partial.token_valuations) == {"MATIC"}


def test_bull_and_thin_scenarios(resolver):
    """Test a scenario without a BTC price ignores BTC."""
    result = PortfolioResult(tokens={"BTC": _holding("BTC", "0.5"), "ETH": _holding("ETH", 2)})
    scenarios = {
        "Bull": ScenarioConfig(prices={"BTC": Decimal("60000")}),
        "Thin": ScenarioConfig(prices={"ETH": Decimal("3000")}),
    }

    bull, thin = ValuationEngine(scenarios, resolver).calculate(result)

    assert bull.token_valuations["BTC"].computed == Decimal("30000")
    assert "BTC" not in thin.token_valuations
    assert thin.total_computed == Decimal("6000")


def test_missing_target_voids_expected_total(resolver):
    """Test one priced token without target makes the expected total None."""
    result = PortfolioResult(tokens={"DOGE": _holding("DOGE", 1000), "BTC": _holding("BTC", "0.5", "0.4")})
    scenario = ScenarioConfig(prices={"DOGE": Decimal("0.1"), "BTC": Decimal("60000")})

    (valuation,) = ValuationEngine({"Mixed": scenario}, resolver).calculate(result)

    assert valuation.token_valuations["DOGE"].expected is None
    assert valuation.token_valuations["BTC"].expected == Decimal("24000")
    assert valuation.total_expected is None
    assert valuation.total_computed == Decimal("30100")


def test_unpriced_token_without_target_keeps_expected_total(resolver):
    """Test tokens outside the scenario do not void the expected total."""
    result = PortfolioResult(tokens={"DOGE": _holding("DOGE", 1000), "BTC": _holding("BTC", "0.5", "0.4")})
    scenario = ScenarioConfig(prices={"BTC": Decimal("60000")})

    (valuation,) = ValuationEngine({"BTC only": scenario}, resolver).calculate(result)

    assert valuation.total_expected == Decimal("24000")


def test_zero_target_is_valued(resolver):
    """Test a zero target gives a zero expected value, not None."""
    result = PortfolioResult(tokens={"SOL": _holding("SOL", 3, 0)})
    scenario = ScenarioConfig(prices={"SOL": Decimal("100")})

    (valuation,) = ValuationEngine({"Sol": scenario}, resolver).calculate(result)

    assert valuation.token_valuations["SOL"].expected == Decimal("0")
    assert valuation.total_expected == Decimal("0")


def test_scenario_prices_accept_aliases(resolver):
    """Test scenario prices keyed by alias apply to the canonical token."""
    result = PortfolioResult(tokens={"BTC": _holding("BTC", "0.5")})
    scenario = ScenarioConfig(prices={"Bitcoin": Decimal("60000")})

    (valuation,) = ValuationEngine({"Alias": scenario}, resolver).calculate(result)

    assert valuation.token_valuations["BTC"].computed == Decimal("30000")


def test_no_scenarios(resolver, mock_result):
    """Test an empty scenario table yields no valuations."""
    assert ValuationEngine({}, resolver).calculate(mock_result) == []
