"""Group aggregator merging member token metrics and histories."""

import logging
from decimal import Decimal

from crypto_portfolio_metrics.core.aliases import TokenAliasResolver
from crypto_portfolio_metrics.core.models import GroupData, GroupHistoricEntry, TokenData, TokenHistoricEntry

logger = logging.getLogger(__name__)


class GroupAggregator:
    """
    Builds group metrics from the finished per-token data.

    Workflow:
    1. Resolve configured members to canonical symbols present in the ledger
    2. Sum member aggregates
    3. Merge member histories chronologically into one group timeline

    Parameters
    ----------
    groups : dict[str, list[str]]
        Group name to member symbols
    resolver : TokenAliasResolver
        Alias resolver for member symbols

    """

    def __init__(self, groups: dict[str, list[str]], resolver: TokenAliasResolver) -> None:
        self.groups = groups
        self.resolver = resolver

    def build(self, tokens: dict[str, TokenData]) -> dict[str, GroupData]:
        """
        Build every configured group.

        Parameters
        ----------
        tokens : dict[str, TokenData]
            Finished token map keyed by canonical symbol

        Returns
        -------
        dict[str, GroupData]
            Group name to group metrics, in configuration order

        """
        return {name: self.build_group(name, members, tokens) for name, members in self.groups.items()}

    def build_group(self, name: str, members: list[str], tokens: dict[str, TokenData]) -> GroupData:
        """
        Build one group.

        Parameters
        ----------
        name : str
            Group name
        members : list[str]
            Configured member symbols
        tokens : dict[str, TokenData]
            Finished token map

        Returns
        -------
        GroupData
            Aggregated group, empty if no member appears in ``tokens``

        """
        group = GroupData(name=name)

        for symbol in members:
            canonical = self.resolver.resolve(symbol)
            if canonical not in tokens or canonical in group.tokens:
                continue
            token = tokens[canonical]
            group.tokens.append(canonical)
            group.cash_in += token.cash_in
            group.cash_out += token.cash_out
            group.total_buy += token.total_buy
            group.total_sell += token.total_sell

        if not group.tokens:
            logger.debug("Group %s has no member in the ledger", name)

        group.pnl_realized = group.total_sell - group.total_buy
        group.historic = self._build_historic([tokens[symbol] for symbol in group.tokens])
        return group

    def _build_historic(self, members: list[TokenData]) -> list[GroupHistoricEntry]:
        """
        Merge member histories into a cumulative group timeline.

        Parameters
        ----------
        members : list[TokenData]
            Group members

        Returns
        -------
        list[GroupHistoricEntry]
            One entry per member entry, ordered by transaction timestamp

        """
        entries: list[TokenHistoricEntry] = [entry for token in members for entry in token.historic]
        # sorted() is stable: equal timestamps keep member then insertion order
        entries = sorted(entries, key=lambda entry: entry.transaction.timestamp)

        cash_in = cash_out = total_buy = total_sell = Decimal("0")
        historic: list[GroupHistoricEntry] = []

        for entry in entries:
            cash_in += entry.cash_in_delta
            cash_out += entry.cash_out_delta
            total_buy += entry.total_buy_delta
            total_sell += entry.total_sell_delta
            historic.append(
                GroupHistoricEntry(
                    date=entry.date,
                    cash_in=cash_in,
                    cash_out=cash_out,
                    total_buy=total_buy,
                    total_sell=total_sell,
                    pnl_realized=total_sell - total_buy,
                    transaction=entry.transaction,
                )
            )

        return historic
