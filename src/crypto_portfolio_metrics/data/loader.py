"""Configuration, transaction and report file handling."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, TypeAdapter
from pydantic_core import to_jsonable_python

from crypto_portfolio_metrics.core.config import PortfolioConfig
from crypto_portfolio_metrics.core.models import Transaction
from crypto_portfolio_metrics.data.waltio import read_waltio_csv, read_waltio_xlsx

_TRANSACTIONS = TypeAdapter(list[Transaction])


def load_yaml(path: str | Path) -> dict[str, Any]:
    """
    Load a YAML mapping.

    Parameters
    ----------
    path : str | Path
        YAML file path

    Returns
    -------
    dict[str, Any]
        Parsed mapping, empty for an empty file

    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(path: str | Path) -> PortfolioConfig:
    """
    Load the portfolio configuration from a YAML file.

    Parameters
    ----------
    path : str | Path
        YAML file with ``fiat_tokens``, ``token_aliases``,
        ``expected_quantities``, ``groups`` and ``scenarios`` keys

    Returns
    -------
    PortfolioConfig
        Validated configuration

    Raises
    ------
    pydantic.ValidationError
        If the configuration is malformed or an alias is ambiguous

    """
    return PortfolioConfig.model_validate(load_yaml(path))


def load_transactions(path: str | Path) -> list[Transaction]:
    """
    Load transactions from a JSON list or a Waltio export (CSV or workbook).

    Parameters
    ----------
    path : str | Path
        ``.json``, ``.csv`` or ``.xlsx`` file

    Returns
    -------
    list[Transaction]
        Transactions in file order

    Raises
    ------
    ValueError
        If the file extension is not supported

    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        return read_waltio_csv(path)
    if suffix == ".xlsx":
        return read_waltio_xlsx(path)
    if suffix == ".json":
        with open(path, encoding="utf-8") as f:
            return _TRANSACTIONS.validate_python(json.load(f))

    msg = f"Unsupported transactions file {path.name!r}: expected .json, .csv or .xlsx"
    raise ValueError(msg)


def save_json(data: BaseModel | list[BaseModel] | dict[str, Any], path: str | Path) -> Path:
    """
    Write models, or lists and mappings of models, as indented JSON.

    Decimals are written as strings.

    Parameters
    ----------
    data : BaseModel | list[BaseModel] | dict[str, Any]
        Data to write
    path : str | Path
        Output file; parent directories are created

    Returns
    -------
    Path
        The written file

    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(to_jsonable_python(data), f, indent=2, ensure_ascii=False)
    return path
