"""UI helper utilities (pure logic, testable without Streamlit)."""

from __future__ import annotations

import pandas as pd

from portfolio_frontier.portfolio.session import PortfolioSession, SessionSnapshot



def fmt_pct(value: float, digits: int = 2) -> str:
    return f"{value * 100:.{digits}f}%"



def fmt_num(value: float, digits: int = 3) -> str:
    return f"{value:.{digits}f}"



def decode_upload(raw: bytes) -> str:
    """Decode uploaded CSV bytes, tolerating a UTF-8 byte-order mark."""
    return raw.decode("utf-8-sig", errors="replace")



def allocation_table(snapshot: SessionSnapshot) -> pd.DataFrame:
    """One row per asset with weight, standalone annual stats, data source and point counts."""
    return pd.DataFrame(
        {
            "ticker": snapshot.tickers,
            "name": [asset.name for asset in snapshot.assets],
            "weight": snapshot.weights,
            "return_annual": snapshot.asset_returns_annual,
            "volatility_annual": snapshot.asset_volatilities_annual,
            "source": ["CSV" if name else "MOCK" for name in snapshot.upload_names],
            "points": snapshot.raw_lengths,
            "aligned_points": [int(series.size) for series in snapshot.aligned],
        }
    )



def sync_upload(
    session: PortfolioSession,
    asset_id: str,
    filename: str | None,
    raw: bytes | None,
) -> bool:
    """Mirror the uploader widget onto the session; return whether the series changed.

    No file clears a previous upload. A new file is parsed and may raise
    ``CsvValidationError``, leaving the session untouched.
    """
    current = session.upload_name(asset_id)
    if filename is None or raw is None:
        if current is None:
            return False
        session.clear_upload(asset_id)
        return True
    if current == filename:
        return False
    session.upload_csv(asset_id, decode_upload(raw), filename)
    return True
