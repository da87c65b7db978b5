from __future__ import annotations

import logging
import os
from typing import Tuple

import numpy as np
import pandas as pd

from .models import ContractSpec

logger = logging.getLogger(__name__)


def _warn_or_raise(message: str, warn_only: bool) -> None:
    if warn_only:
        logger.warning(message)
    else:
        raise ValueError(message)

def _format_hint(contract: ContractSpec) -> str:
    if contract.description:
        return f" Hint: {contract.description}"
    return ""


def _count_out_of_range(df: pd.DataFrame, value_range: Tuple[float, float]) -> int:
    values = df.to_numpy(dtype=np.float64)
    low, high = value_range
    return int(np.count_nonzero((values < low) | (values > high)))


def bind_output_path(contract: ContractSpec, path: str) -> ContractSpec:
    return contract.model_copy(update={"output_path": path})


def validate_contract(contract: ContractSpec, warn_only: bool = True) -> bool:
    if not contract.output_path:
        _warn_or_raise(
            f"[{contract.name}] Missing output_path on contract; cannot validate.{_format_hint(contract)}",
            warn_only,
        )
        return False
    if contract.output_kind == "dir":
        return validate_dir(contract.output_path, contract, warn_only=warn_only)
    if contract.output_kind == "file":
        return validate_file(contract.output_path, contract, warn_only=warn_only)
    return validate_csv(contract.output_path, contract, warn_only=warn_only)


def validate_dir(path: str, contract: ContractSpec, warn_only: bool = True) -> bool:
    if not os.path.exists(path):
        _warn_or_raise(
            f"[{contract.name}] Missing directory: {path}.{_format_hint(contract)}",
            warn_only,
        )
        return False
    if not os.path.isdir(path):
        _warn_or_raise(
            f"[{contract.name}] Expected directory: {path}.{_format_hint(contract)}",
            warn_only,
        )
        return False
    entries = len(os.listdir(path))
    if entries < contract.min_entries:
        _warn_or_raise(
            f"[{contract.name}] Expected at least {contract.min_entries} entries in {path}, got {entries}.{_format_hint(contract)}",
            warn_only,
        )
        return False
    return True


def validate_file(path: str, contract: ContractSpec, warn_only: bool = True) -> bool:
    if not os.path.exists(path):
        _warn_or_raise(
            f"[{contract.name}] Missing file: {path}.{_format_hint(contract)}",
            warn_only,
        )
        return False
    if not os.path.isfile(path):
        _warn_or_raise(
            f"[{contract.name}] Expected file: {path}.{_format_hint(contract)}",
            warn_only,
        )
        return False
    return True


def validate_csv(path: str, contract: ContractSpec, warn_only: bool = True) -> bool:
    try:
        df = pd.read_csv(path, header=0 if contract.has_header else None)
    except FileNotFoundError:
        _warn_or_raise(
            f"[{contract.name}] Missing file: {path}.{_format_hint(contract)}",
            warn_only,
        )
        return False
    except pd.errors.EmptyDataError:
        _warn_or_raise(
            f"[{contract.name}] Empty file: {path}.{_format_hint(contract)}",
            warn_only,
        )
        return False
    except Exception as exc:  # pragma: no cover - unexpected read failures
        _warn_or_raise(
            f"[{contract.name}] Failed to read CSV {path}: {exc}.{_format_hint(contract)}",
            warn_only,
        )
        return False

    ok = True

    if contract.min_columns and df.shape[1] < contract.min_columns:
        _warn_or_raise(
            f"[{contract.name}] Expected at least {contract.min_columns} column(s), got {df.shape[1]}.{_format_hint(contract)}",
            warn_only,
        )
        ok = False

    if contract.value_range is not None and not df.empty:
        try:
            out_of_range = _count_out_of_range(df, contract.value_range)
        except (TypeError, ValueError):
            _warn_or_raise(
                f"[{contract.name}] Non-numeric values found in {path}.{_format_hint(contract)}",
                warn_only,
            )
            return False
        if out_of_range:
            # Out-of-range pixels still load; the renderer wraps them.
            logger.warning(
                "[%s] %s value(s) outside %s in %s.",
                contract.name,
                out_of_range,
                list(contract.value_range),
                path,
            )
            ok = False

    return ok
