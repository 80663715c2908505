"""CLI for crypto portfolio metrics."""

import json
import logging
from decimal import Decimal
from enum import StrEnum
from pathlib import Path

import typer
from pydantic_core import to_jsonable_python
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.traceback import install

from crypto_portfolio_metrics.core import PortfolioEngine, PortfolioReport, WalletToken
from crypto_portfolio_metrics.data import load_config, load_transactions, save_json

# Install rich traceback handler
install(show_locals=False)

app = typer.Typer(
    name="crypto-portfolio-metrics",
    help="Compute investment metrics and scenario valuations from a portfolio transaction export",
    add_completion=False,
)

console = Console()


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def report(
    transactions: Path = typer.Argument(..., help="Transactions file (.json, or Waltio .csv or .xlsx export)"),
    config: Path = typer.Option(Path("config.yaml"), "--config", "-c", help="Portfolio configuration (YAML)"),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Write metrics, valuations, wallet and platforms JSON files into this directory",
    ),
    format: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--format",
        "-f",
        help="Output format",
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """
    Compute portfolio metrics and valuations.

    Examples:

        # Print token, group and scenario tables
        crypto-portfolio-metrics report data/export_waltio.xlsx --config config.yaml

        # Save JSON results
        crypto-portfolio-metrics report data/transactions.json -c config.yaml -o output
    """
    _setup_logging(debug)

    try:
        portfolio_config = load_config(config)
        records = load_transactions(transactions)
        result = PortfolioEngine(portfolio_config).run(records)

        if output_dir is not None:
            for name, data in (
                ("metrics", result.metrics),
                ("valuations", result.valuations),
                ("wallet", result.wallet),
                ("platforms", result.platforms),
            ):
                saved = save_json(data, output_dir / f"{name}.json")
                console.print(f"[dim]Saved {saved}[/dim]")

        if format == OutputFormat.JSON:
            _output_json(result)
        else:
            _output_table(result)

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if debug:
            # Rich traceback will automatically handle this
            raise
        raise typer.Exit(1)


@app.command()
def scenarios(
    config: Path = typer.Option(Path("config.yaml"), "--config", "-c", help="Portfolio configuration (YAML)"),
) -> None:
    """List configured price scenarios."""
    try:
        portfolio_config = load_config(config)
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    table = Table(title="Price Scenarios", show_header=True, header_style="bold magenta")
    table.add_column("Scenario", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Priced Tokens", style="green")

    for name, scenario in portfolio_config.scenarios.items():
        table.add_row(name, scenario.description, ", ".join(scenario.prices))

    console.print(table)


@app.command()
def wallet(
    transactions: Path = typer.Argument(..., help="Transactions file (.json, or Waltio .csv or .xlsx export)"),
    config: Path = typer.Option(Path("config.yaml"), "--config", "-c", help="Portfolio configuration (YAML)"),
    platforms: bool = typer.Option(False, "--platforms", "-p", help="Split the wallet by platform"),
    format: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--format",
        "-f",
        help="Output format",
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug output"),
) -> None:
    """
    Show held quantities with average buy/sell and breakeven prices.

    Examples:

        # Wallet over all platforms
        crypto-portfolio-metrics wallet data/export_waltio.xlsx -c config.yaml

        # One wallet per platform, as JSON
        crypto-portfolio-metrics wallet data/export_waltio.xlsx -c config.yaml --platforms -f json
    """
    _setup_logging(debug)

    try:
        engine = PortfolioEngine(load_config(config))
        records = load_transactions(transactions)
        wallets = engine.compute_platforms(records) if platforms else {"Wallet": engine.compute_wallet(records)}
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        if debug:
            raise
        raise typer.Exit(1)

    if format == OutputFormat.JSON:
        data = wallets if platforms else wallets["Wallet"]
        console.print_json(json.dumps(to_jsonable_python(data), ensure_ascii=False))
        return

    for name, holdings in wallets.items():
        _output_wallet_table(name or "(no platform)", holdings)


def _fmt(value: Decimal | None, places: int = 2) -> str:
    if value is None:
        return "-"
    return f"{value:,.{places}f}"


def _output_table(result: PortfolioReport) -> None:
    """Output metrics and valuations as rich tables."""
    metrics = result.metrics
    if not metrics.tokens:
        console.print("\n[yellow]No transactions found[/yellow]")
        return

    table = Table(title="Tokens", show_header=True, header_style="bold magenta")
    table.add_column("Token", style="cyan")
    table.add_column("Quantity", style="white", justify="right")
    table.add_column("Expected", style="white", justify="right")
    table.add_column("Delta %", style="yellow", justify="right")
    table.add_column("Cash In", style="green", justify="right")
    table.add_column("Cash Out", style="green", justify="right")
    table.add_column("Realized P&L", style="bold", justify="right")
    table.add_column("Unit Price", style="blue", justify="right")

    for symbol, token in metrics.tokens.items():
        table.add_row(
            symbol,
            _fmt(token.quantity.computed, 6),
            _fmt(token.quantity.expected, 6),
            _fmt(token.quantity.delta_percent),
            _fmt(token.cash_in),
            _fmt(token.cash_out),
            _fmt(token.pnl_realized),
            _fmt(token.unit_price.computed),
        )

    console.print("\n")
    console.print(table)

    if metrics.groups:
        group_table = Table(title="Groups", show_header=True, header_style="bold magenta")
        group_table.add_column("Group", style="cyan")
        group_table.add_column("Tokens", style="white")
        group_table.add_column("Cash In", style="green", justify="right")
        group_table.add_column("Cash Out", style="green", justify="right")
        group_table.add_column("Realized P&L", style="bold", justify="right")

        for name, group in metrics.groups.items():
            group_table.add_row(
                name,
                ", ".join(group.tokens),
                _fmt(group.cash_in),
                _fmt(group.cash_out),
                _fmt(group.pnl_realized),
            )

        console.print("\n")
        console.print(group_table)

    if result.valuations:
        valuation_table = Table(title="Scenarios", show_header=True, header_style="bold magenta")
        valuation_table.add_column("Scenario", style="cyan")
        valuation_table.add_column("Description", style="white")
        valuation_table.add_column("Computed", style="bold green", justify="right")
        valuation_table.add_column("Expected", style="green", justify="right")

        for valuation in result.valuations:
            valuation_table.add_row(
                valuation.scenario_name,
                valuation.scenario_description,
                _fmt(valuation.total_computed),
                _fmt(valuation.total_expected),
            )

        console.print("\n")
        console.print(valuation_table)

    # Summary table
    summary_table = Table(show_header=False, box=None)
    summary_table.add_column("Label", style="bold")
    summary_table.add_column("Value", style="bold green")

    summary_table.add_row("Cash In:", _fmt(metrics.overview.cash_in))
    summary_table.add_row("Cash Out:", _fmt(metrics.overview.cash_out))
    summary_table.add_row("Fees:", _fmt(metrics.overview.fees))
    summary_table.add_row("Tokens:", str(len(metrics.tokens)))

    console.print("\n")
    console.print(summary_table)
    console.print("\n")


def _output_wallet_table(title: str, holdings: dict[str, WalletToken]) -> None:
    """Output one wallet as a rich table."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Token", style="cyan")
    table.add_column("Quantity", style="white", justify="right")
    table.add_column("Bought", style="white", justify="right")
    table.add_column("Sold", style="white", justify="right")
    table.add_column("Avg Buy", style="green", justify="right")
    table.add_column("Avg Sell", style="green", justify="right")
    table.add_column("Breakeven", style="bold yellow", justify="right")

    for symbol, token in holdings.items():
        table.add_row(
            symbol,
            _fmt(token.quantity, 6),
            _fmt(token.quantity_buy, 6),
            _fmt(token.quantity_sell, 6),
            _fmt(token.avg_price_buy),
            _fmt(token.avg_price_sell),
            _fmt(token.breakeven_price),
        )

    console.print(table)


def _output_json(result: PortfolioReport) -> None:
    """Output metrics and valuations as JSON."""
    data = result.model_dump(mode="json")
    console.print_json(json.dumps(data, ensure_ascii=False))


if __name__ == "__main__":
    app()
