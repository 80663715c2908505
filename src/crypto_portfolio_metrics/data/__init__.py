"""Data loading and report persistence."""

from crypto_portfolio_metrics.data.loader import (
    load_config,
    load_transactions,
    load_yaml,
    save_json,
)
from crypto_portfolio_metrics.data.waltio import WALTIO_COLUMNS, WaltioRow, read_waltio_csv, read_waltio_xlsx

__all__ = [
    "WALTIO_COLUMNS",
    "WaltioRow",
    "load_config",
    "load_transactions",
    "load_yaml",
    "read_waltio_csv",
    "read_waltio_xlsx",
    "save_json",
]
