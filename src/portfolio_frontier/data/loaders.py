"""Conversion of uploaded OHLCV CSV text into monthly simple returns."""

from __future__ import annotations

import logging
import math
import re
from pathlib import Path

import numpy as np
import numpy.typing as npt

from portfolio_frontier.errors import CsvValidationError

LOGGER = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n|\r")


def parse_ohlcv_close_returns(text: str) -> npt.NDArray[np.float64]:
    """Parse ``Date``/``Close`` columns from CSV text and return simple returns.

    The header is matched case-insensitively. Rows with an empty date or a
    non-numeric close are skipped. Rows are ordered by the raw date string.
    """
    lines = [line.strip() for line in _LINE_SPLIT.split(text)]
    lines = [line for line in lines if line]
    if not lines:
        raise CsvValidationError("CSV is empty; expected a header row with Date and Close.")

    header = [column.strip().lower() for column in lines[0].split(",")]
    if "date" not in header or "close" not in header:
        raise CsvValidationError(
            'CSV must have "Date" and "Close" columns (e.g. Date,Open,High,Low,Close,Volume).'
        )
    date_idx = header.index("date")
    close_idx = header.index("close")

    rows: list[tuple[str, float]] = []
    skipped = 0
    for line in lines[1:]:
        cols = [column.strip() for column in line.split(",")]
        date = cols[date_idx] if date_idx < len(cols) else ""
        close = _parse_number(cols[close_idx]) if close_idx < len(cols) else None
        if not date or close is None:
            skipped += 1
            continue
        rows.append((date, close))

    if skipped:
        LOGGER.debug("Skipped %d CSV rows without a usable Date/Close pair.", skipped)
    if len(rows) < 2:
        raise CsvValidationError(
            f"Too few valid Date/Close records (min. 2, found {len(rows)})."
        )

    rows.sort(key=lambda row: row[0])

    returns: list[float] = []
    for (_, prev), (_, cur) in zip(rows, rows[1:]):
        if prev <= 0:
            continue
        returns.append(cur / prev - 1.0)

    if len(returns) < 2:
        raise CsvValidationError(
            f"Too few return points after conversion (min. 2, found {len(returns)})."
        )
    return np.array(returns, dtype=float)


def load_upload_returns(text: str, min_returns: int = 12) -> npt.NDArray[np.float64]:
    """Parse an upload and require at least ``min_returns`` monthly returns."""
    returns = parse_ohlcv_close_returns(text)
    if returns.size < min_returns:
        raise CsvValidationError(
            f"CSV must contain at least {min_returns} data points. Found: {returns.size}"
        )
    return returns


def load_returns_file(path: str | Path, min_returns: int = 12) -> npt.NDArray[np.float64]:
    """Read an OHLCV CSV file from disk and convert it to returns."""
    csv_path = Path(path)
    LOGGER.info("Loading close prices from CSV: %s", csv_path)
    text = csv_path.read_text(encoding="utf-8")
    return load_upload_returns(text, min_returns=min_returns)


def _parse_number(raw: str) -> float | None:
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None
