"""
Configuration tests
"""
from pathlib import Path

import pytest
from pydantic import ValidationError

from hippique.config import (
    CombinationConfig,
    Config,
    ScenarioConfig,
    get_config,
    load_config,
    reset_config,
)

REPO_CONFIG = Path(__file__).resolve().parents[1] / "config" / "config.yaml"


@pytest.fixture(autouse=True)
def _reset():
    reset_config()
    yield
    reset_config()


def test_defaults():
    cfg = Config()
    assert cfg.scoring.weights.form == 0.40
    assert cfg.scoring.weights.class_ == 0.25
    assert cfg.scenario.dominant_shares == [50.0, 18.0, 12.0]
    assert cfg.combinations.quinte_method == "approx"
    assert cfg.kelly.fraction == 0.25


def test_repo_config_matches_defaults():
    assert load_config(REPO_CONFIG).model_dump() == Config().model_dump()


def test_load_partial_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "scoring:\n"
        "  weights:\n"
        "    class: 0.30\n"
        "kelly:\n"
        "  fraction: 0.5\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.scoring.weights.class_ == pytest.approx(0.30)
    assert cfg.scoring.weights.form == pytest.approx(0.40)
    assert cfg.kelly.fraction == pytest.approx(0.5)


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path).model_dump() == Config().model_dump()


def test_env_var(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("value_bet:\n  ratio: 1.5\n", encoding="utf-8")
    monkeypatch.setenv("HIPPIQUE_CONFIG_PATH", str(path))

    assert load_config().value_bet.ratio == pytest.approx(1.5)
    assert get_config().value_bet.ratio == pytest.approx(1.5)


def test_get_config_is_cached(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("kelly:\n  min_stake: 2\n", encoding="utf-8")
    monkeypatch.setenv("HIPPIQUE_CONFIG_PATH", str(path))

    assert get_config() is get_config()
    reset_config()
    path.write_text("kelly:\n  min_stake: 3\n", encoding="utf-8")
    assert get_config().kelly.min_stake == 3.0


class TestValidation:
    def test_unknown_quinte_method(self):
        with pytest.raises(ValidationError):
            CombinationConfig(quinte_method="montecarlo")

    def test_shares_over_100(self):
        with pytest.raises(ValidationError):
            ScenarioConfig(dominant_shares=[60.0, 30.0, 20.0])

    def test_negative_weight(self):
        with pytest.raises(ValidationError):
            Config.model_validate({"scoring": {"weights": {"form": -1.0}}})

    def test_house_take_below_one(self):
        with pytest.raises(ValidationError):
            Config.model_validate({"combinations": {"quinte_odds": {"multiplier": 1.5, "house_take": 1.0}}})
