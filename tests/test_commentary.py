import json
from types import SimpleNamespace

import httpx
import pytest

from portfolio_frontier.commentary import (
    CommentaryClient,
    build_commentary_facts,
    build_prompt,
    generate_commentary_text,
)
from portfolio_frontier.config import AppConfig, CommentaryConfig, merge_config
from portfolio_frontier.errors import CommentaryError
from portfolio_frontier.portfolio.session import PortfolioSession


@pytest.fixture()
def snapshot(make_csv):
    assets = [
        {"id": "aapl", "name": "Apple", "ticker": "AAPL"},
        {"id": "gld", "name": "Gold", "ticker": "GLD"},
        {"id": "btc", "name": "Bitcoin", "ticker": "BTC"},
    ]
    session = PortfolioSession(merge_config(AppConfig(), {"data": {"initial_assets": assets}}))
    session.set_weights([0.2, 0.5, 0.3])
    session.upload_csv("btc", make_csv([100.0 * 1.02**i for i in range(30)]), "btc.csv")
    return session.snapshot


def _fake_openai(content):
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        message = SimpleNamespace(content=content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return client, calls


def test_build_commentary_facts_structure(snapshot):
    facts = build_commentary_facts(snapshot, notes="monthly", top_pairs=3)

    assert set(facts) == {"metrics", "allocation", "concentration", "correlation", "notes", "dataQuality"}
    assert facts["metrics"]["rfAnnual"] == 0.035
    assert facts["metrics"]["sharpeAnnual"] == snapshot.metrics.sharpe
    assert [row["ticker"] for row in facts["allocation"]] == ["AAPL", "GLD", "BTC"]
    assert facts["concentration"] == {"topAsset": "GLD", "topWeight": pytest.approx(0.5)}
    assert len(facts["correlation"]) == 3
    corrs = [pair["corr"] for pair in facts["correlation"]]
    assert corrs == sorted(corrs, reverse=True)
    assert facts["notes"] == "monthly"

    quality = facts["dataQuality"]
    assert quality["alignedPoints"] == 29
    assert quality["assets"][2] == {"ticker": "BTC", "points": 29, "source": "CSV", "file": "btc.csv"}
    assert quality["assets"][0]["source"] == "MOCK"
    assert quality["assets"][0]["file"] is None
    json.dumps(facts)


def test_build_commentary_facts_empty_portfolio():
    session = PortfolioSession()
    session.remove_asset("inst_1")
    facts = build_commentary_facts(session.snapshot)
    assert facts["concentration"] == {"topAsset": None, "topWeight": 0.0}
    assert facts["allocation"] == []
    assert facts["correlation"] == []


def test_build_prompt_embeds_facts_and_language():
    prompt = build_prompt({"metrics": {"sharpeAnnual": 1.23}}, language="Polish")
    assert "language: Polish" in prompt
    assert '"sharpeAnnual": 1.23' in prompt
    assert "1-10" in prompt


def test_generate_commentary_text_uses_config():
    client, calls = _fake_openai("• Diversified.")
    cfg = CommentaryConfig(model="test-model", temperature=0.1, max_tokens=42)
    text = generate_commentary_text({"notes": "x"}, client, cfg)
    assert text == "• Diversified."
    assert calls[0]["model"] == "test-model"
    assert calls[0]["max_tokens"] == 42
    assert calls[0]["messages"][0]["role"] == "user"


def test_generate_commentary_text_empty_content():
    client, _ = _fake_openai(None)
    assert generate_commentary_text({}, client, CommentaryConfig()) == ""


def test_client_success():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"text": "• Looks balanced."})

    client = CommentaryClient("http://test", transport=httpx.MockTransport(handler))
    result = client.request({"notes": "n"})
    assert result.status == "ok"
    assert result.text == "• Looks balanced."
    assert seen == {"path": "/api/ai/commentary", "body": {"notes": "n"}}


def test_client_server_error_message():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(500, json={"error": "Missing OPENAI_API_KEY"})
    )
    client = CommentaryClient("http://test", transport=transport)
    with pytest.raises(CommentaryError, match="HTTP 500: Missing OPENAI_API_KEY"):
        client.fetch({})
    result = client.request({})
    assert result.status == "error"
    assert result.text == "HTTP 500: Missing OPENAI_API_KEY"


def test_client_error_without_body():
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="bad gateway"))
    result = CommentaryClient("http://test", transport=transport).request({})
    assert result.status == "error"
    assert result.text == "HTTP 502"


def test_client_network_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = CommentaryClient("http://test", transport=httpx.MockTransport(handler)).request({})
    assert result.status == "error"
    assert "connection refused" in result.text


def test_client_from_config():
    cfg = CommentaryConfig(base_url="http://example:9000/", endpoint_path="/x", timeout_seconds=5)
    client = CommentaryClient.from_config(cfg)
    assert client.base_url == "http://example:9000"
    assert client.endpoint_path == "/x"
    assert client.timeout == 5
