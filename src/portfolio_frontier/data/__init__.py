"""Data loading and preprocessing subpackage."""

from portfolio_frontier.data.loaders import (
    load_returns_file,
    load_upload_returns,
    parse_ohlcv_close_returns,
)
from portfolio_frontier.data.preprocess import align_series
from portfolio_frontier.data.synthetic import (
    DEFAULT_PROFILE,
    TUNED_PROFILES,
    AssetProfile,
    SyntheticSeries,
    generate_synthetic_returns,
)

__all__ = [
    "parse_ohlcv_close_returns",
    "load_upload_returns",
    "load_returns_file",
    "align_series",
    "AssetProfile",
    "DEFAULT_PROFILE",
    "TUNED_PROFILES",
    "SyntheticSeries",
    "generate_synthetic_returns",
]
