"""Data models for transactions, token metrics, groups, and scenario valuations."""

from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

DATE_FORMAT = "%d/%m/%Y %H:%M:%S"


class TransactionType(StrEnum):
    """Type of transaction, as labelled in Waltio exports."""

    EXCHANGE = "Échange"
    DEPOSIT = "Dépôt"
    WITHDRAWAL = "Retrait"


class Transaction(BaseModel):
    """
    A single exchange, deposit or withdrawal record.

    Each side (sent, received, fees) is optional. An amount without its
    price still moves quantities but is ignored for value calculations.

    Attributes
    ----------
    type : TransactionType
        Kind of transaction
    date : str
        Timestamp formatted as ``DD/MM/YYYY HH:MM:SS``
    time_zone : str
        Time zone label of ``date``
    amount_sent, token_sent, price_token_sent : Decimal | str | None
        Sent side of the transaction
    amount_received, token_received, price_token_received : Decimal | str | None
        Received side of the transaction
    fees, token_fees, price_token_fees : Decimal | str | None
        Fee side of the transaction
    platform, description, label : str
        Free-text metadata
    address, transaction_hash, external_id : str
        Opaque identifiers

    """

    model_config = ConfigDict(frozen=True)

    type: TransactionType
    date: str
    time_zone: str = ""
    amount_received: Decimal | None = None
    token_received: str | None = None
    amount_sent: Decimal | None = None
    token_sent: str | None = None
    fees: Decimal | None = None
    token_fees: str | None = None
    platform: str = ""
    description: str = ""
    label: str = ""
    price_token_sent: Decimal | None = None
    price_token_received: Decimal | None = None
    price_token_fees: Decimal | None = None
    address: str = ""
    transaction_hash: str = ""
    external_id: str = ""

    @field_validator("date")
    @classmethod
    def _validate_date(cls, value: str) -> str:
        try:
            datetime.strptime(value, DATE_FORMAT)
        except ValueError as e:
            msg = f"date must match DD/MM/YYYY HH:MM:SS, got {value!r}"
            raise ValueError(msg) from e
        return value

    @field_validator("token_received", "token_sent", "token_fees", mode="before")
    @classmethod
    def _empty_token(cls, value: str | None) -> str | None:
        if value == "":
            return None
        return value

    @property
    def timestamp(self) -> datetime:
        """Parsed ``date``."""
        return datetime.strptime(self.date, DATE_FORMAT)


class QuantityData(BaseModel):
    """
    Held quantity of a token compared with its configured target.

    Attributes
    ----------
    computed : Decimal
        Running net quantity from the transactions
    expected : Decimal | None
        Target quantity from configuration
    delta : Decimal | None
        ``computed - expected``
    delta_percent : Decimal | None
        ``delta / expected * 100``; None when expected is None or zero

    """

    computed: Decimal = Decimal("0")
    expected: Decimal | None = None
    delta: Decimal | None = None
    delta_percent: Decimal | None = None


class UnitPrice(BaseModel):
    """Breakeven price per unit for the computed and expected quantities."""

    computed: Decimal = Decimal("0")
    expected: Decimal = Decimal("0")


class TokenHistoricEntry(BaseModel):
    """
    Snapshot of a token after one transaction touched it.

    Attributes
    ----------
    date : str
        Date of the triggering transaction
    quantity : Decimal
        Computed quantity after the transaction
    cash_in, cash_out, total_buy, total_sell : Decimal
        Cumulative values after the transaction
    cash_in_delta, cash_out_delta, total_buy_delta, total_sell_delta : Decimal
        Change against the previous entry
    pnl_realized : Decimal
        ``total_sell - total_buy``
    unit_price : UnitPrice
        Unit prices at this point
    transaction : Transaction
        The triggering transaction

    """

    date: str
    quantity: Decimal
    cash_in: Decimal
    cash_in_delta: Decimal
    cash_out: Decimal
    cash_out_delta: Decimal
    total_buy: Decimal
    total_buy_delta: Decimal
    total_sell: Decimal
    total_sell_delta: Decimal
    pnl_realized: Decimal
    unit_price: UnitPrice
    transaction: Transaction


class TokenData(BaseModel):
    """
    Aggregated investment metrics of one canonical token.

    Attributes
    ----------
    symbol : str
        Canonical token symbol
    aliases : list[str]
        Canonical symbol followed by its configured aliases
    quantity : QuantityData
        Computed and expected quantities
    cash_in : Decimal
        Fiat invested into the token
    cash_out : Decimal
        Fiat received when selling the token for fiat
    total_buy : Decimal
        Value of all acquisitions
    total_sell : Decimal
        Value of all disposals
    pnl_realized : Decimal
        ``total_sell - total_buy``
    unit_price : UnitPrice
        Breakeven unit prices
    historic : list[TokenHistoricEntry]
        One entry per transaction that touched the token

    """

    symbol: str
    aliases: list[str] = Field(default_factory=list)
    quantity: QuantityData = Field(default_factory=QuantityData)
    cash_in: Decimal = Decimal("0")
    cash_out: Decimal = Decimal("0")
    total_buy: Decimal = Decimal("0")
    total_sell: Decimal = Decimal("0")
    pnl_realized: Decimal = Decimal("0")
    unit_price: UnitPrice = Field(default_factory=UnitPrice)
    historic: list[TokenHistoricEntry] = Field(default_factory=list)


class GroupHistoricEntry(BaseModel):
    """Cumulative group values after one member entry."""

    date: str
    cash_in: Decimal
    cash_out: Decimal
    total_buy: Decimal
    total_sell: Decimal
    pnl_realized: Decimal
    transaction: Transaction


class GroupData(BaseModel):
    """
    Aggregated metrics of a configured group of tokens.

    Attributes
    ----------
    name : str
        Group name from configuration
    tokens : list[str]
        Canonical members that appear in the ledger
    cash_in, cash_out, total_buy, total_sell : Decimal
        Sums over the members
    pnl_realized : Decimal
        ``total_sell - total_buy`` of the sums
    historic : list[GroupHistoricEntry]
        Chronologically merged member history

    """

    name: str
    tokens: list[str] = Field(default_factory=list)
    cash_in: Decimal = Decimal("0")
    cash_out: Decimal = Decimal("0")
    total_buy: Decimal = Decimal("0")
    total_sell: Decimal = Decimal("0")
    pnl_realized: Decimal = Decimal("0")
    historic: list[GroupHistoricEntry] = Field(default_factory=list)


class Overview(BaseModel):
    """Portfolio-wide totals."""

    cash_in: Decimal = Decimal("0")
    cash_out: Decimal = Decimal("0")
    fees: Decimal = Decimal("0")


class PortfolioResult(BaseModel):
    """
    Investment metrics of the whole portfolio.

    Attributes
    ----------
    overview : Overview
        Totals over all tokens
    groups : dict[str, GroupData]
        Group name to group metrics
    tokens : dict[str, TokenData]
        Canonical symbol to token metrics

    """

    overview: Overview = Field(default_factory=Overview)
    groups: dict[str, GroupData] = Field(default_factory=dict)
    tokens: dict[str, TokenData] = Field(default_factory=dict)


class TokenValuation(BaseModel):
    """Value of a token's computed and expected quantity in one scenario."""

    computed: Decimal
    expected: Decimal | None = None


class ScenarioValuation(BaseModel):
    """
    Valuation of the holdings under one price scenario.

    Attributes
    ----------
    scenario_name : str
        Scenario key from configuration
    scenario_description : str
        Free-text description
    token_valuations : dict[str, TokenValuation]
        Valuations of the tokens priced by the scenario
    total_computed : Decimal
        Sum of computed values
    total_expected : Decimal | None
        Sum of expected values, None if any priced token has no expected quantity

    """

    scenario_name: str
    scenario_description: str = ""
    token_valuations: dict[str, TokenValuation] = Field(default_factory=dict)
    total_computed: Decimal = Decimal("0")
    total_expected: Decimal | None = Decimal("0")


class PriceAction(BaseModel):
    """One priced buy or sell of a token."""

    price: Decimal
    quantity: Decimal
    date: str


class WalletToken(BaseModel):
    """
    Holdings of one token with its buy and sell price history.

    Attributes
    ----------
    quantity : Decimal
        Net quantity moved in and out
    quantity_buy, quantity_sell : Decimal
        Quantity bought and sold
    price_buy, price_sell : list[PriceAction]
        Individual buys and sells in transaction order
    avg_price_buy, avg_price_sell : Decimal
        Quantity-weighted average prices, zero without buys or sells
    sum_price_buy, sum_price_sell : Decimal
        Total value bought and sold
    breakeven_price : Decimal
        Price at which the held quantity recovers the net amount spent

    """

    quantity: Decimal = Decimal("0")
    quantity_buy: Decimal = Decimal("0")
    quantity_sell: Decimal = Decimal("0")
    price_buy: list[PriceAction] = Field(default_factory=list)
    price_sell: list[PriceAction] = Field(default_factory=list)
    avg_price_buy: Decimal = Decimal("0")
    avg_price_sell: Decimal = Decimal("0")
    sum_price_buy: Decimal = Decimal("0")
    sum_price_sell: Decimal = Decimal("0")
    breakeven_price: Decimal = Decimal("0")


class PortfolioReport(BaseModel):
    """
    Metrics together with their scenario valuations and wallet views.

    Attributes
    ----------
    metrics : PortfolioResult
        Investment metrics
    valuations : list[ScenarioValuation]
        One valuation per scenario
    wallet : dict[str, WalletToken]
        Canonical symbol to wallet holdings
    platforms : dict[str, dict[str, WalletToken]]
        Platform name to the wallet held there

    """

    metrics: PortfolioResult
    valuations: list[ScenarioValuation] = Field(default_factory=list)
    wallet: dict[str, WalletToken] = Field(default_factory=dict)
    platforms: dict[str, dict[str, WalletToken]] = Field(default_factory=dict)
