"""Command line interface for the portfolio frontier lab."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import numpy as np
import typer

from portfolio_frontier.commentary import CommentaryClient
from portfolio_frontier.config import AppConfig, AssetConfig, build_config, merge_config
from portfolio_frontier.data.synthetic import generate_synthetic_returns
from portfolio_frontier.errors import CsvValidationError
from portfolio_frontier.portfolio.session import Asset, PortfolioSession
from portfolio_frontier.viz.frontier import plot_efficient_frontier

app = typer.Typer(help="Portfolio frontier analytics toolkit")
LOGGER = logging.getLogger(__name__)

DEFAULT_TICKERS = "AAPL,TSLA,GLD,BTC"



def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    if quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")



def _load_config(config_path: str | None) -> AppConfig:
    return build_config(config_path=config_path) if config_path else AppConfig()



def _parse_tickers(tickers: str) -> list[str]:
    parsed = [ticker.strip() for ticker in tickers.split(",") if ticker.strip()]
    if not parsed:
        raise typer.BadParameter("At least one ticker is required.")
    if len({ticker.upper() for ticker in parsed}) != len(parsed):
        raise typer.BadParameter("Tickers must be unique.")
    return parsed



def _parse_weights(weights: str) -> np.ndarray:
    try:
        arr = np.array([float(x.strip()) for x in weights.split(",")], dtype=float)
    except ValueError as exc:
        raise typer.BadParameter("Failed parsing --weights as comma-separated floats.") from exc
    return arr



def _parse_csv_specs(specs: list[str] | None) -> dict[str, Path]:
    uploads: dict[str, Path] = {}
    for spec in specs or []:
        ticker, sep, path = spec.partition("=")
        if not sep or not ticker.strip() or not path.strip():
            raise typer.BadParameter(f"Expected TICKER=PATH for --csv, got '{spec}'.")
        uploads[ticker.strip().upper()] = Path(path.strip())
    return uploads



def _build_session(
    cfg: AppConfig,
    tickers: str,
    csv_specs: list[str] | None,
    weights: str | None,
) -> PortfolioSession:
    symbols = _parse_tickers(tickers)
    assets = [
        AssetConfig(id=symbol.lower(), name=symbol, ticker=symbol).model_dump()
        for symbol in symbols
    ]
    session = PortfolioSession(merge_config(cfg, {"data": {"initial_assets": assets}}))

    by_ticker: dict[str, Asset] = {asset.ticker.upper(): asset for asset in session.assets}
    for ticker, path in _parse_csv_specs(csv_specs).items():
        if ticker not in by_ticker:
            raise typer.BadParameter(f"--csv ticker '{ticker}' is not in --tickers.")
        if not path.exists():
            raise typer.BadParameter(f"CSV file not found: {path}")
        try:
            session.upload_csv(by_ticker[ticker].id, path.read_text(encoding="utf-8"), path.name)
        except CsvValidationError as exc:
            raise typer.BadParameter(f"{path.name}: {exc}") from exc

    if weights:
        w = _parse_weights(weights)
        if len(w) != len(symbols):
            raise typer.BadParameter("weights length does not match number of tickers.")
        session.set_weights(w)
    return session



def _emit(payload: Any, out_format: str) -> None:
    if out_format == "json":
        typer.echo(json.dumps(payload, indent=2, default=_json_default))
    else:
        if isinstance(payload, dict):
            for key, value in payload.items():
                typer.echo(f"{key}: {value}")
        else:
            typer.echo(str(payload))



def _json_default(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


@app.command("generate-data")
def generate_data(
    output: str = typer.Option(..., help="Output CSV path."),
    tickers: str = typer.Option(DEFAULT_TICKERS, help="Comma-separated list of symbols."),
    months: int | None = typer.Option(None, help="Number of monthly periods."),
    seed: int | None = typer.Option(None, help="Random seed for the factor model."),
    config: str | None = typer.Option(None, help="Path to YAML config."),
    verbose: bool = typer.Option(False, "--verbose"),
    quiet: bool = typer.Option(False, "--quiet"),
) -> None:
    """Write synthetic monthly returns for the given tickers to CSV."""
    _configure_logging(verbose, quiet)
    cfg = _load_config(config)
    symbols = _parse_tickers(tickers)
    assets = [Asset(id=symbol.lower(), name=symbol, ticker=symbol) for symbol in symbols]
    generated = generate_synthetic_returns(
        assets,
        months=months if months is not None else cfg.data.months,
        seed=seed if seed is not None else cfg.data.seed,
    )
    frame = generated.to_frame(symbols)

    out_path = Path(output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(out_path)
    LOGGER.info("Wrote %d months x %d assets", generated.months, len(symbols))
    typer.echo(f"Saved returns: {out_path}")


@app.command("analyze")
def analyze(
    tickers: str = typer.Option(DEFAULT_TICKERS, help="Comma-separated list of symbols."),
    csv: list[str] | None = typer.Option(
        None,
        "--csv",
        help="TICKER=PATH of an OHLCV CSV replacing that ticker's synthetic series (repeatable).",
    ),
    weights: str | None = typer.Option(None, help="Comma-separated weights (normalized)."),
    seed: int | None = typer.Option(None, help="Random seed for synthetic data."),
    risk_free_rate: float | None = typer.Option(None, help="Annual risk-free rate."),
    out_format: str = typer.Option("text", "--format", help="text|json"),
    config: str | None = typer.Option(None, help="Path to YAML config."),
    verbose: bool = typer.Option(False, "--verbose"),
    quiet: bool = typer.Option(False, "--quiet"),
) -> None:
    """Compute annualized return, volatility, Sharpe and correlations."""
    _configure_logging(verbose, quiet)
    cfg = _apply_common_overrides(_load_config(config), seed, risk_free_rate)
    session = _build_session(cfg, tickers, csv, weights)
    snap = session.recompute()

    payload = {
        **snap.metrics.to_dict(),
        "risk_free_rate_annual": snap.risk_free_rate_annual,
        "aligned_points": snap.aligned_points,
        "weights": dict(zip(snap.tickers, snap.weights.round(6).tolist())),
        "assets": {
            ticker: {"return_annual": float(ret), "volatility_annual": float(vol)}
            for ticker, ret, vol in zip(
                snap.tickers, snap.asset_returns_annual, snap.asset_volatilities_annual
            )
        },
        "correlation": {
            ticker: dict(zip(snap.tickers, row.round(4).tolist()))
            for ticker, row in zip(snap.tickers, snap.corr)
        },
    }
    _emit(payload, out_format)


@app.command("frontier")
def frontier(
    tickers: str = typer.Option(DEFAULT_TICKERS, help="Comma-separated list of symbols."),
    csv: list[str] | None = typer.Option(
        None,
        "--csv",
        help="TICKER=PATH of an OHLCV CSV replacing that ticker's synthetic series (repeatable).",
    ),
    weights: str | None = typer.Option(None, help="Comma-separated weights for the current point."),
    seed: int | None = typer.Option(None, help="Random seed for synthetic data."),
    points: int | None = typer.Option(None, help="Number of random portfolios."),
    buckets: int | None = typer.Option(None, help="Number of risk buckets in the envelope."),
    frontier_seed: int | None = typer.Option(None, help="Random seed for portfolio sampling."),
    risk_free_rate: float | None = typer.Option(None, help="Annual risk-free rate."),
    output_csv: str | None = typer.Option(None, help="Optional CSV path for the envelope."),
    cloud_csv: str | None = typer.Option(None, help="Optional CSV path for the full cloud."),
    plot: str | None = typer.Option(None, help="Optional plot output (.html or image)."),
    backend: str = typer.Option("plotly", help="plotly|matplotlib"),
    out_format: str = typer.Option("text", "--format", help="text|json"),
    config: str | None = typer.Option(None, help="Path to YAML config."),
    verbose: bool = typer.Option(False, "--verbose"),
    quiet: bool = typer.Option(False, "--quiet"),
) -> None:
    """Sample random long-only portfolios and report the frontier envelope."""
    _configure_logging(verbose, quiet)
    cfg = _apply_common_overrides(_load_config(config), seed, risk_free_rate)
    frontier_overrides = {
        key: value
        for key, value in {"points": points, "buckets": buckets, "seed": frontier_seed}.items()
        if value is not None
    }
    if frontier_overrides:
        cfg = merge_config(cfg, {"frontier": frontier_overrides})

    session = _build_session(cfg, tickers, csv, weights)
    result = session.generate_frontier()
    current = session.current_point()

    if output_csv:
        Path(output_csv).parent.mkdir(parents=True, exist_ok=True)
        result.frontier.to_csv(output_csv, index=False)
    if cloud_csv:
        Path(cloud_csv).parent.mkdir(parents=True, exist_ok=True)
        result.cloud_with_weights().to_csv(cloud_csv, index=False)
    if plot:
        plot_efficient_frontier(result, current=current, show=False, save_path=plot, backend=backend)

    best = result.best_sharpe
    payload: dict[str, Any] = {
        "samples": int(len(result.cloud)),
        "frontier_points": int(len(result.frontier)),
        "best_sharpe": (
            {**best.to_dict(), "weights": dict(zip(result.labels, best.weights))}
            if best is not None
            else None
        ),
        "current": {"risk": current.risk, "ret": current.ret, "sharpe": current.sharpe},
        "frontier": result.frontier.to_dict(orient="records"),
    }
    if output_csv:
        payload["output_csv"] = output_csv
    _emit(payload, out_format)


@app.command("commentary")
def commentary(
    tickers: str = typer.Option(DEFAULT_TICKERS, help="Comma-separated list of symbols."),
    csv: list[str] | None = typer.Option(
        None,
        "--csv",
        help="TICKER=PATH of an OHLCV CSV replacing that ticker's synthetic series (repeatable).",
    ),
    weights: str | None = typer.Option(None, help="Comma-separated weights (normalized)."),
    seed: int | None = typer.Option(None, help="Random seed for synthetic data."),
    base_url: str | None = typer.Option(None, help="Commentary service base URL."),
    show_facts: bool = typer.Option(False, help="Print the fact payload before requesting."),
    config: str | None = typer.Option(None, help="Path to YAML config."),
    verbose: bool = typer.Option(False, "--verbose"),
    quiet: bool = typer.Option(False, "--quiet"),
) -> None:
    """Send portfolio facts to the commentary service and print the reply."""
    _configure_logging(verbose, quiet)
    cfg = _apply_common_overrides(_load_config(config), seed, None)
    if base_url:
        cfg = merge_config(cfg, {"commentary": {"base_url": base_url}})

    session = _build_session(cfg, tickers, csv, weights)
    facts = session.commentary_facts()
    if show_facts:
        typer.echo(json.dumps(facts, indent=2))

    result = CommentaryClient.from_config(cfg.commentary).request(facts)
    if result.status == "error":
        typer.echo(f"Commentary failed: {result.text}", err=True)
        raise typer.Exit(code=1)
    typer.echo(result.text)


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, help="Bind host."),
    port: int | None = typer.Option(None, help="Bind port."),
    config: str | None = typer.Option(None, help="Path to YAML config."),
    verbose: bool = typer.Option(False, "--verbose"),
    quiet: bool = typer.Option(False, "--quiet"),
) -> None:
    """Run the commentary HTTP service."""
    import uvicorn

    from portfolio_frontier.api import create_app

    _configure_logging(verbose, quiet)
    cfg = _load_config(config)
    bind_host = host if host is not None else cfg.server.host
    bind_port = port if port is not None else cfg.server.port
    LOGGER.info("Commentary API listening on http://%s:%d", bind_host, bind_port)
    uvicorn.run(create_app(cfg), host=bind_host, port=bind_port)



def _apply_common_overrides(
    cfg: AppConfig,
    seed: int | None,
    risk_free_rate: float | None,
) -> AppConfig:
    overrides: dict[str, Any] = {}
    if seed is not None:
        overrides["data"] = {"seed": seed}
    if risk_free_rate is not None:
        overrides["metrics"] = {"risk_free_rate_annual": risk_free_rate}
    return merge_config(cfg, overrides) if overrides else cfg


if __name__ == "__main__":
    app()
