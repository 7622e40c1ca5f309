"""
Configuration

Reads config/config.yaml and validates it with Pydantic.

Path resolution:
    1. an explicit path passed to load_config()
    2. the HIPPIQUE_CONFIG_PATH environment variable
    3. config/config.yaml found by walking up from cwd
    4. built-in defaults

Engine functions never call get_config() themselves; they take the relevant
config model as an argument and fall back to a fresh default instance.
"""

import os
from pathlib import Path
from typing import Optional

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, Field, field_validator


def find_project_root() -> Optional[Path]:
    """
    Locate the project root (the directory holding config/config.yaml).
    """
    env_path = os.environ.get("HIPPIQUE_PROJECT_ROOT")
    if env_path:
        root = Path(env_path)
        if root.exists():
            return root

    current = Path.cwd()
    for _ in range(10):
        config_path = current / "config" / "config.yaml"
        if config_path.exists():
            return current
        if current.parent == current:
            break
        current = current.parent

    # src/hippique/config.py -> project root
    module_path = Path(__file__).resolve()
    for _ in range(10):
        config_path = module_path / "config" / "config.yaml"
        if config_path.exists():
            return module_path
        if module_path.parent == module_path:
            break
        module_path = module_path.parent

    return None


PROJECT_ROOT: Optional[Path] = find_project_root()


class ScoreWeights(BaseModel):
    """Sub-score weights of the raw probability score"""

    form: float = 0.40
    class_: float = Field(default=0.25, alias="class")
    connections: float = 0.25
    aptitude: float = 0.10
    # weighted sum (0-10) is scaled to the 1-100 range
    scale: float = 10.0
    min_score: float = 1.0
    max_score: float = 100.0

    model_config = {"populate_by_name": True}

    @field_validator("form", "class_", "connections", "aptitude", "scale")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("score weights must be >= 0")
        return v


class FormConfig(BaseModel):
    """Musique points and recency weights"""

    points_first: float = 10.0
    points_second: float = 7.0
    points_third: float = 5.0
    # 4th and 5th
    points_minor_place: float = 3.0
    points_other: float = 1.0
    # D (disqualified), T (fell / stopped)
    points_non_finish: float = 0.0
    # years back -> weight; anything older uses weight_older
    year_weights: list[float] = Field(default_factory=lambda: [1.0, 0.5, 0.25])
    weight_older: float = 0.1
    neutral: float = 5.0


class ClassConfig(BaseModel):
    """Career class sub-score"""

    confidence_floor_races: int = Field(default=20, gt=0)
    win_rate_points: float = 10.0
    win_rate_cap: float = 5.0
    # earnings per race worth one point
    earnings_unit: float = Field(default=10000.0, gt=0)
    earnings_cap: float = 5.0
    neutral: float = 5.0


class ConnectionsConfig(BaseModel):
    """Jockey / trainer sub-score"""

    neutral: float = 5.0
    # typical win rate of a jockey; rates above it add points
    reference_rate: float = Field(default=0.10, ge=0.0, le=1.0)
    jockey_scale: float = 10.0
    synergy_scale: float = 10.0
    min_pair_races: int = Field(default=3, ge=1)


class AptitudeConfig(BaseModel):
    """Draw and weight sub-score"""

    neutral: float = 5.0
    # percentile bands (draw / field_size)
    good_draw_pct: float = 0.25
    fair_draw_pct: float = 0.50
    bad_draw_pct: float = 0.75
    good_draw_bonus: float = 2.0
    fair_draw_bonus: float = 1.0
    bad_draw_penalty: float = 2.0
    # fixed gate bands when field size is unknown
    good_gate_max: int = 3
    bad_gate_min: int = 12
    reference_weight_kg: float = 60.0
    weight_penalty_per_kg: float = 0.5
    # lighter than reference - margin earns a bonus
    light_margin_kg: float = 3.0
    light_bonus_per_kg: float = 0.25
    light_bonus_cap: float = 1.0


class ScoringConfig(BaseModel):
    """Scoring engine settings"""

    weights: ScoreWeights = Field(default_factory=ScoreWeights)
    form: FormConfig = Field(default_factory=FormConfig)
    class_: ClassConfig = Field(default_factory=ClassConfig, alias="class")
    connections: ConnectionsConfig = Field(default_factory=ConnectionsConfig)
    aptitude: AptitudeConfig = Field(default_factory=AptitudeConfig)

    model_config = {"populate_by_name": True}


class ScenarioConfig(BaseModel):
    """Race-shape scenario thresholds and shares"""

    min_field: int = 3
    dominant_gap: float = 15.0
    clear_top2_gap: float = 10.0
    grouped_gap: float = 5.0
    dominant_shares: list[float] = Field(default_factory=lambda: [50.0, 18.0, 12.0])
    clear_top2_shares: list[float] = Field(default_factory=lambda: [38.0, 32.0])
    grouped_top5_split: tuple[float, float] = (80.0, 20.0)
    grouped_top4_split: tuple[float, float] = (75.0, 25.0)
    grouped_top3_split: tuple[float, float] = (70.0, 30.0)
    standard_split: tuple[float, float] = (70.0, 30.0)

    @field_validator("dominant_shares", "clear_top2_shares")
    @classmethod
    def _shares_le_100(cls, v: list[float]) -> list[float]:
        if any(s < 0 for s in v) or sum(v) > 100.0:
            raise ValueError("fixed shares must be >= 0 and sum to <= 100")
        return v


class ValueBetConfig(BaseModel):
    """Value bet flag on predictions"""

    ratio: float = 1.2
    # percentage points
    abs_gap: float = 5.0


class PayoutOddsConfig(BaseModel):
    """Payout odds estimate: 1/p * multiplier * (1 - house_take)"""

    multiplier: float
    house_take: float = Field(ge=0.0, lt=1.0)


class CombinationConfig(BaseModel):
    """Combination generators"""

    ordre_window: int = 8
    desordre_window: int = 10
    quinte_window: int = 10
    # loop bounds of the first quinte pick; following picks add one each
    quinte_first_bound: int = 6
    quinte_method: str = "approx"
    tierce_ordre_odds: PayoutOddsConfig = Field(
        default_factory=lambda: PayoutOddsConfig(multiplier=1.3, house_take=0.30)
    )
    tierce_desordre_odds: PayoutOddsConfig = Field(
        default_factory=lambda: PayoutOddsConfig(multiplier=1.1, house_take=0.25)
    )
    quinte_odds: PayoutOddsConfig = Field(
        default_factory=lambda: PayoutOddsConfig(multiplier=1.5, house_take=0.30)
    )

    @field_validator("quinte_method")
    @classmethod
    def _known_method(cls, v: str) -> str:
        if v not in ("approx", "exact"):
            raise ValueError(f"Unsupported quinte_method: {v}")
        return v


class KellyConfig(BaseModel):
    """Kelly sizing"""

    fraction: float = Field(default=0.25, gt=0.0, le=1.0)
    min_kelly: float = Field(default=0.001, ge=0.0)
    min_stake: float = 1.0
    default_bankroll: float = 1000.0


class StrategyConfig(BaseModel):
    """Combination strategy recommendation"""

    stake: float = Field(default=2.0, gt=0)
    tierce_payout: float = 50.0
    quinte_payout: float = 500.0
    candidates_per_type: int = 3
    max_recommendations: int = 5
    # allocation per recommendation = stake * allocation_multiplier
    allocation_multiplier: float = 2.0
    simulation_tierce_count: int = 5
    simulation_quinte_count: int = 3


class Config(BaseModel):
    """Root config"""

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    scenario: ScenarioConfig = Field(default_factory=ScenarioConfig)
    value_bet: ValueBetConfig = Field(default_factory=ValueBetConfig)
    combinations: CombinationConfig = Field(default_factory=CombinationConfig)
    kelly: KellyConfig = Field(default_factory=KellyConfig)
    strategy: StrategyConfig = Field(default_factory=StrategyConfig)


def _read_yaml(path: Path) -> Config:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return Config.model_validate(data or {})


def load_config(config_path: Optional[Path | str] = None) -> Config:
    """
    Load the configuration.

    Args:
        config_path: explicit path (None to search)

    Lookup order:
        1. config_path
        2. HIPPIQUE_CONFIG_PATH
        3. PROJECT_ROOT / config / config.yaml
        4. defaults
    """
    if config_path:
        path = Path(config_path)
        if path.exists():
            return _read_yaml(path)

    env_config = os.environ.get("HIPPIQUE_CONFIG_PATH")
    if env_config:
        path = Path(env_config)
        if path.exists():
            return _read_yaml(path)

    if PROJECT_ROOT:
        path = PROJECT_ROOT / "config" / "config.yaml"
        if path.exists():
            return _read_yaml(path)

    return Config()


_config: Optional[Config] = None


def get_config() -> Config:
    """Lazily loaded shared config (for callers, not for the engine)"""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the shared config (tests)"""
    global _config
    _config = None
