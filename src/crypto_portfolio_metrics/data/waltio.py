"""Readers for Waltio transaction exports, as CSV or as an Excel workbook."""

import logging
from collections.abc import Iterable
from csv import reader
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from openpyxl import load_workbook
from pydantic import BaseModel, field_validator

from crypto_portfolio_metrics.core.models import DATE_FORMAT, Transaction, TransactionType

logger = logging.getLogger(__name__)

# Column order of the Waltio export sheet
WALTIO_COLUMNS = (
    "type",
    "date",
    "time_zone",
    "amount_received",
    "token_received",
    "amount_sent",
    "token_sent",
    "fees",
    "token_fees",
    "platform",
    "description",
    "label",
    "price_token_sent",
    "price_token_received",
    "price_token_fees",
    "address",
    "transaction_hash",
    "external_id",
)

_AMOUNT_COLUMNS = (
    "amount_received",
    "amount_sent",
    "fees",
    "price_token_sent",
    "price_token_received",
    "price_token_fees",
)


class WaltioRow(BaseModel):
    """One raw export row, with cells still formatted as in the sheet."""

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

    @field_validator(*_AMOUNT_COLUMNS, mode="before")
    @classmethod
    def _parse_amount(cls, value: str | Decimal | None) -> str | Decimal | None:
        if isinstance(value, str):
            value = value.strip().replace(",", ".")
            if value == "":
                return None
        return value

    @field_validator("token_received", "token_sent", "token_fees", mode="before")
    @classmethod
    def _empty_token(cls, value: str | None) -> str | None:
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    def to_transaction(self) -> Transaction:
        """Convert the row into a core transaction."""
        return Transaction(**self.model_dump())


def read_waltio_csv(path: str | Path, delimiter: str = ",") -> list[Transaction]:
    """
    Read transactions from a Waltio export saved as CSV.

    The first row is a header and is skipped. Cells are mapped by position
    in the Waltio column order; missing trailing cells are treated as empty.

    Parameters
    ----------
    path : str | Path
        CSV file path
    delimiter : str
        Field delimiter

    Returns
    -------
    list[Transaction]
        Transactions in file order

    Raises
    ------
    pydantic.ValidationError
        If a row does not describe a valid transaction

    """
    with open(path, encoding="utf-8-sig", newline="") as f:
        rows = reader(f, delimiter=delimiter)
        next(rows, None)
        transactions = _rows_to_transactions(rows)

    logger.debug("Read %d transactions from %s", len(transactions), path)
    return transactions


def read_waltio_xlsx(path: str | Path) -> list[Transaction]:
    """
    Read transactions from a Waltio export workbook.

    Only the first worksheet is read. Its first row is a header and is
    skipped; cells are mapped by position as for the CSV export.

    Parameters
    ----------
    path : str | Path
        ``.xlsx`` file path

    Returns
    -------
    list[Transaction]
        Transactions in sheet order

    Raises
    ------
    pydantic.ValidationError
        If a row does not describe a valid transaction

    """
    workbook = load_workbook(path, read_only=True, data_only=True)
    try:
        worksheet = workbook.worksheets[0]
        rows = ([_cell_text(value) for value in row] for row in worksheet.iter_rows(min_row=2, values_only=True))
        transactions = _rows_to_transactions(rows)
    finally:
        workbook.close()

    logger.debug("Read %d transactions from %s", len(transactions), path)
    return transactions


def _cell_text(value: object) -> str:
    # Sheets may store dates as real datetimes
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime(DATE_FORMAT)
    return str(value)


def _rows_to_transactions(rows: Iterable[list[str]]) -> list[Transaction]:
    transactions: list[Transaction] = []
    for cells in rows:
        if not any(cell.strip() for cell in cells):
            continue
        values = dict(zip(WALTIO_COLUMNS, cells, strict=False))
        transactions.append(WaltioRow(**values).to_transaction())
    return transactions
