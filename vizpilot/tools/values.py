"""Scalar helpers shared by the schema and chart tools."""

from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np
import pandas as pd


def is_missing(value: Any) -> bool:
    """True for ``None``, NaN and NaT."""
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # list-like cells
        return False


def to_number(value: Any) -> Optional[float]:
    """Coerce a cell value to a finite number, or ``None`` if it has none.

    Booleans count as 1/0 and numeric strings are parsed; empty strings are
    treated as missing.
    """
    if is_missing(value):
        return None
    if isinstance(value, (bool, np.bool_)):
        return int(value)
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = value.item() if isinstance(value, np.generic) else value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if isinstance(number, float) and not math.isfinite(number):
        return None
    return number


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like ``Math.round`` (ties toward +inf) instead of to even."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
