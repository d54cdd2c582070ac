"""Weight handling, frontier sampling and the portfolio session."""

from portfolio_frontier.portfolio.frontier import (
    FrontierPoint,
    FrontierResult,
    best_sharpe_point,
    current_point,
    extract_frontier_envelope,
    sample_frontier,
)
from portfolio_frontier.portfolio.session import Asset, PortfolioSession, SessionSnapshot
from portfolio_frontier.portfolio.weights import (
    equal_weights,
    normalize_long_only,
    random_long_only_weights,
    resize_weights,
    update_weight,
)

__all__ = [
    "Asset",
    "PortfolioSession",
    "SessionSnapshot",
    "FrontierPoint",
    "FrontierResult",
    "sample_frontier",
    "extract_frontier_envelope",
    "best_sharpe_point",
    "current_point",
    "normalize_long_only",
    "update_weight",
    "equal_weights",
    "random_long_only_weights",
    "resize_weights",
]
