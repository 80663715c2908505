"""Token alias resolution against the configured alias table."""


class TokenAliasResolver:
    """
    Maps any configured token name to its canonical symbol.

    Parameters
    ----------
    token_aliases : dict[str, list[str]]
        Canonical symbol to its aliases

    Examples
    --------
    >>> resolver = TokenAliasResolver({"ETH": ["Ethereum", "Ether"]})
    >>> resolver.resolve("Ether")
    'ETH'
    >>> resolver.aliases("Ethereum")
    ['ETH', 'Ethereum', 'Ether']

    """

    def __init__(self, token_aliases: dict[str, list[str]]) -> None:
        self._aliases: dict[str, list[str]] = {}
        self._canonical: dict[str, str] = {}

        for canonical, aliases in token_aliases.items():
            names = [canonical]
            for alias in aliases:
                if alias not in names:
                    names.append(alias)
            self._aliases[canonical] = names
            for name in names:
                # First canonical entry wins
                self._canonical.setdefault(name, canonical)

    def resolve(self, symbol: str) -> str:
        """
        Get the canonical symbol for a token name.

        Parameters
        ----------
        symbol : str
            Canonical symbol or alias

        Returns
        -------
        str
            Canonical symbol, or ``symbol`` itself if it is not configured

        """
        return self._canonical.get(symbol, symbol)

    def aliases(self, symbol: str) -> list[str]:
        """
        Get every known name of the token a symbol belongs to.

        Parameters
        ----------
        symbol : str
            Canonical symbol or alias

        Returns
        -------
        list[str]
            Canonical symbol followed by its aliases, or ``[symbol]`` if untracked

        """
        canonical = self.resolve(symbol)
        return list(self._aliases.get(canonical, [canonical]))

    def is_tracked(self, symbol: str) -> bool:
        """Check whether the symbol appears in the alias table."""
        return symbol in self._canonical
