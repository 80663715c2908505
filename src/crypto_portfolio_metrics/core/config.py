"""Portfolio configuration: fiat set, aliases, targets, groups and price scenarios."""

from decimal import Decimal

from pydantic import BaseModel, Field, model_validator


class ScenarioConfig(BaseModel):
    """
    A named hypothetical price table.

    Attributes
    ----------
    description : str
        Free-text description of the scenario
    prices : dict[str, Decimal]
        Token symbol to price

    """

    description: str = ""
    prices: dict[str, Decimal] = Field(default_factory=dict)


class PortfolioConfig(BaseModel):
    """
    Resolved configuration passed explicitly to every engine component.

    Attributes
    ----------
    fiat_tokens : list[str]
        Fiat tickers (e.g., 'EUR', 'USD')
    token_aliases : dict[str, list[str]]
        Canonical symbol to the other names it is exported under
    expected_quantities : dict[str, Decimal]
        Canonical symbol to target quantity
    groups : dict[str, list[str]]
        Group name to member symbols
    scenarios : dict[str, ScenarioConfig]
        Scenario name to price table, in presentation order

    """

    fiat_tokens: list[str] = Field(default_factory=lambda: ["EUR", "USD"])
    token_aliases: dict[str, list[str]] = Field(default_factory=dict)
    expected_quantities: dict[str, Decimal] = Field(default_factory=dict)
    groups: dict[str, list[str]] = Field(default_factory=dict)
    scenarios: dict[str, ScenarioConfig] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_aliases(self) -> "PortfolioConfig":
        # An alias must map to exactly one canonical token
        owners: dict[str, str] = {}
        for canonical, aliases in self.token_aliases.items():
            for alias in aliases:
                if alias == canonical:
                    continue
                if alias in self.token_aliases:
                    msg = f"Alias {alias!r} of {canonical!r} is itself a canonical token"
                    raise ValueError(msg)
                previous = owners.setdefault(alias, canonical)
                if previous != canonical:
                    msg = f"Alias {alias!r} is configured for both {previous!r} and {canonical!r}"
                    raise ValueError(msg)

        _check_one_key_per_token(self.expected_quantities, owners, "expected_quantities")
        for name, scenario in self.scenarios.items():
            _check_one_key_per_token(scenario.prices, owners, f"scenario {name!r} prices")
        return self


def _check_one_key_per_token(mapping: dict[str, Decimal], owners: dict[str, str], where: str) -> None:
    seen: dict[str, str] = {}
    for key in mapping:
        canonical = owners.get(key, key)
        previous = seen.setdefault(canonical, key)
        if previous != key:
            msg = f"{where} lists both {previous!r} and {key!r} for token {canonical!r}"
            raise ValueError(msg)
