import json
from pathlib import Path

import pandas as pd
from typer.testing import CliRunner

from portfolio_frontier.cli import app
from portfolio_frontier.commentary import CommentaryClient, CommentaryResult


runner = CliRunner()


def test_generate_data_command(tmp_path: Path):
    out_path = tmp_path / "returns.csv"
    result = runner.invoke(
        app,
        ["generate-data", "--output", str(out_path), "--tickers", "AAPL,GLD", "--months", "36", "--quiet"],
    )

    assert result.exit_code == 0
    assert "Saved returns" in result.stdout
    frame = pd.read_csv(out_path, index_col=0)
    assert list(frame.columns) == ["AAPL", "GLD"]
    assert len(frame) == 36


def test_analyze_command_with_csv(tmp_path: Path, make_csv):
    csv_path = tmp_path / "aapl.csv"
    csv_path.write_text(make_csv([100.0 + 2 * i for i in range(20)]), encoding="utf-8")

    result = runner.invoke(
        app,
        [
            "analyze",
            "--tickers",
            "AAPL,GLD",
            "--csv",
            f"AAPL={csv_path}",
            "--weights",
            "0.6,0.4",
            "--format",
            "json",
            "--quiet",
        ],
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["aligned_points"] == 19
    assert payload["weights"] == {"AAPL": 0.6, "GLD": 0.4}
    assert payload["risk_free_rate_annual"] == 0.035
    assert {"expected_return", "volatility", "sharpe"} <= set(payload)
    assert payload["correlation"]["AAPL"]["AAPL"] == 1.0
    assert set(payload["assets"]["GLD"]) == {"return_annual", "volatility_annual"}


def test_analyze_rejects_bad_csv(tmp_path: Path):
    csv_path = tmp_path / "bad.csv"
    csv_path.write_text("Date,Open\n2024-01-01,1\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["analyze", "--tickers", "AAPL", "--csv", f"AAPL={csv_path}", "--quiet"],
    )
    assert result.exit_code != 0


def test_analyze_rejects_weight_length():
    result = runner.invoke(app, ["analyze", "--tickers", "AAPL,GLD", "--weights", "1", "--quiet"])
    assert result.exit_code != 0


def test_frontier_command_writes_envelope(tmp_path: Path):
    out_path = tmp_path / "frontier.csv"
    plot_path = tmp_path / "frontier.html"
    result = runner.invoke(
        app,
        [
            "frontier",
            "--points",
            "300",
            "--buckets",
            "10",
            "--output-csv",
            str(out_path),
            "--plot",
            str(plot_path),
            "--format",
            "json",
            "--quiet",
        ],
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["samples"] == 300
    assert 0 < payload["frontier_points"] <= 10
    assert set(payload["best_sharpe"]["weights"]) == {"AAPL", "TSLA", "GLD", "BTC"}
    assert out_path.exists()
    assert plot_path.exists()
    assert list(pd.read_csv(out_path).columns) == ["risk", "ret"]


def test_commentary_command(monkeypatch):
    captured = {}

    def fake_request(self, facts):
        captured["facts"] = facts
        return CommentaryResult(status="ok", text="• Concentrated in AAPL.")

    monkeypatch.setattr(CommentaryClient, "request", fake_request)
    result = runner.invoke(
        app,
        ["commentary", "--tickers", "AAPL,GLD", "--weights", "0.9,0.1", "--quiet"],
    )

    assert result.exit_code == 0
    assert "Concentrated in AAPL" in result.stdout
    assert captured["facts"]["concentration"]["topAsset"] == "AAPL"


def test_commentary_command_failure(monkeypatch):
    monkeypatch.setattr(
        CommentaryClient,
        "request",
        lambda self, facts: CommentaryResult(status="error", text="HTTP 500: Missing OPENAI_API_KEY"),
    )
    result = runner.invoke(app, ["commentary", "--tickers", "AAPL", "--quiet"])
    assert result.exit_code == 1


def test_serve_passes_explicit_bind_values(monkeypatch):
    import uvicorn

    calls = {}

    def fake_run(app_obj, host, port):
        calls["host"] = host
        calls["port"] = port

    monkeypatch.setattr(uvicorn, "run", fake_run)
    result = runner.invoke(app, ["serve", "--host", "", "--port", "0", "--quiet"])

    assert result.exit_code == 0
    assert calls == {"host": "", "port": 0}


def test_serve_defaults_from_config(monkeypatch):
    import uvicorn

    calls = {}
    monkeypatch.setattr(uvicorn, "run", lambda app_obj, host, port: calls.update(host=host, port=port))
    result = runner.invoke(app, ["serve", "--quiet"])

    assert result.exit_code == 0
    assert calls == {"host": "127.0.0.1", "port": 4173}
