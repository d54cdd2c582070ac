from pathlib import Path

import pytest

from portfolio_frontier.config import build_config, load_yaml_config


def test_build_config_yaml_then_overrides_precedence(tmp_path: Path):
    yaml_path = tmp_path / "config.yaml"
    yaml_path.write_text(
        """
data:
  months: 60
  seed: 7
metrics:
  risk_free_rate_annual: 0.01
frontier:
  points: 1000
""".strip()
        + "\n",
        encoding="utf-8",
    )

    cfg = build_config(
        config_path=yaml_path,
        overrides={
            "data": {"seed": 11},
            "frontier": {"buckets": 25},
        },
    )

    assert cfg.data.months == 60
    assert cfg.data.seed == 11
    assert cfg.metrics.risk_free_rate_annual == 0.01
    assert cfg.frontier.points == 1000
    assert cfg.frontier.buckets == 25


def test_yaml_must_be_mapping(tmp_path: Path):
    yaml_path = tmp_path / "config.yaml"
    yaml_path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_yaml_config(yaml_path)
