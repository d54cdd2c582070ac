"""Typed Streamlit session state models for the frontier dashboard."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from portfolio_frontier.config import AppConfig
from portfolio_frontier.portfolio.session import PortfolioSession

CommentaryStatus = Literal["idle", "loading", "error"]


@dataclass
class UIState:
    """Session-backed state container for UI workflow."""

    config: AppConfig = field(default_factory=AppConfig)
    session: PortfolioSession | None = None
    commentary_text: str = ""
    commentary_status: CommentaryStatus = "idle"
    last_error: str | None = None

    def portfolio(self) -> PortfolioSession:
        if self.session is None:
            self.session = PortfolioSession(self.config)
        return self.session

    def remove_asset(self, asset_id: str) -> None:
        """Drop an instrument together with any error reported for the current inputs."""
        self.portfolio().remove_asset(asset_id)
        self.last_error = None
