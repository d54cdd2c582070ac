"""Portfolio fact payloads and the language-model commentary exchange."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal

import httpx
import numpy as np

from portfolio_frontier.config import CommentaryConfig
from portfolio_frontier.errors import CommentaryError
from portfolio_frontier.metrics.statistics import top_correlation_pairs

if TYPE_CHECKING:
    from openai import OpenAI

    from portfolio_frontier.portfolio.session import SessionSnapshot

LOGGER = logging.getLogger(__name__)

PROMPT_TEMPLATE = """\
You are an investment analyst with strong portfolio analysis skills.
Write a short commentary on the results of the portfolio configured by the user.
Rules:
- language: {language}
- 4-7 points as a list (each point on its own line, starting with "• ")
- no investment advice of the "buy/sell" kind
- focus on interpretation: return, risk, Sharpe, weight concentration, correlations, data quality
- take the correlations and asset weights into account
- score the portfolio on a 1-10 scale by your own criteria and justify the score
- USE ONLY THE DATA PROVIDED, DO NOT INVENT NUMBERS OR FACTS
Point out what could be improved.
Data (annual, annualized):
{facts}
"""


@dataclass(frozen=True)
class CommentaryResult:
    status: Literal["ok", "error"]
    text: str


def build_commentary_facts(
    snapshot: SessionSnapshot,
    notes: str = "",
    top_pairs: int = 3,
) -> dict[str, Any]:
    """Summarize a session snapshot into the JSON payload sent for commentary."""
    weights = np.asarray(snapshot.weights, dtype=float)
    tickers = snapshot.tickers
    if weights.size:
        top_idx = int(np.argmax(weights))
        concentration = {"topAsset": tickers[top_idx], "topWeight": float(weights[top_idx])}
    else:
        concentration = {"topAsset": None, "topWeight": 0.0}

    return {
        "metrics": {
            "expectedReturnAnnual": snapshot.metrics.expected_return,
            "volatilityAnnual": snapshot.metrics.volatility,
            "sharpeAnnual": snapshot.metrics.sharpe,
            "rfAnnual": snapshot.risk_free_rate_annual,
        },
        "allocation": [
            {"ticker": asset.ticker, "name": asset.name, "weight": float(weight)}
            for asset, weight in zip(snapshot.assets, weights)
        ],
        "concentration": concentration,
        "correlation": top_correlation_pairs(snapshot.corr, tickers, k=top_pairs),
        "notes": notes,
        "dataQuality": {
            "alignedPoints": snapshot.aligned_points,
            "assets": [
                {
                    "ticker": asset.ticker,
                    "points": int(series.size),
                    "source": "CSV" if upload else "MOCK",
                    "file": upload or None,
                }
                for asset, series, upload in zip(
                    snapshot.assets, snapshot.aligned, snapshot.upload_names
                )
            ],
        },
    }


def build_prompt(facts: Any, language: str = "English") -> str:
    return PROMPT_TEMPLATE.format(
        language=language,
        facts=json.dumps(facts, indent=2, ensure_ascii=False),
    )


def generate_commentary_text(
    facts: Any,
    client: OpenAI,
    config: CommentaryConfig,
) -> str:
    """Ask the chat-completions API for commentary on ``facts``."""
    response = client.chat.completions.create(
        model=config.model,
        messages=[{"role": "user", "content": build_prompt(facts, config.language)}],
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )
    return response.choices[0].message.content or ""


class CommentaryClient:
    """POSTs fact payloads to the commentary endpoint; one request per call, no retries."""

    def __init__(
        self,
        base_url: str,
        endpoint_path: str = "/api/ai/commentary",
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.endpoint_path = endpoint_path
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: CommentaryConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> CommentaryClient:
        return cls(
            base_url=config.base_url,
            endpoint_path=config.endpoint_path,
            timeout=config.timeout_seconds,
            transport=transport,
        )

    def fetch(self, facts: dict[str, Any]) -> str:
        """Return the commentary text or raise ``CommentaryError``."""
        LOGGER.debug("Requesting commentary from %s%s", self.base_url, self.endpoint_path)
        try:
            with httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = client.post(self.endpoint_path, json=facts)
        except httpx.HTTPError as exc:
            raise CommentaryError(str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            message = f"HTTP {response.status_code}"
            detail = _error_detail(response)
            if detail:
                message = f"{message}: {detail}"
            raise CommentaryError(message)

        try:
            payload = response.json()
        except ValueError as exc:
            raise CommentaryError("Commentary service returned invalid JSON.") from exc
        return str(payload.get("text") or "") if isinstance(payload, dict) else ""

    def request(self, facts: dict[str, Any]) -> CommentaryResult:
        """Like :meth:`fetch`, but report failures as an error status with the message."""
        try:
            return CommentaryResult(status="ok", text=self.fetch(facts))
        except CommentaryError as exc:
            LOGGER.warning("Commentary request failed: %s", exc)
            return CommentaryResult(status="error", text=str(exc))


def _error_detail(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict) and payload.get("error"):
        return str(payload["error"])
    return None
