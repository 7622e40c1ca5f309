"""
pytest shared setup

Puts src/ on the path so the tests run without `pip install -e .`.
"""
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).resolve().parents[1]
src_path = project_root / "src"

if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


REFERENCE_YEAR = 2026


@pytest.fixture
def make_prediction():
    """Build a Prediction with only the fields a test cares about."""
    from hippique.domain.models import Prediction

    def _make(entrant_id, probability, odds=None, rank=1, score=50.0, name=None, scenario=None):
        return Prediction(
            entrant_id=entrant_id,
            name=name or f"Horse {entrant_id}",
            score=score,
            probability=probability,
            odds=odds,
            value_bet=False,
            rank=rank,
            scenario=scenario,
        )

    return _make


@pytest.fixture
def field_predictions(make_prediction):
    """Six ranked predictions summing to 100%."""
    probs = [40.0, 25.0, 15.0, 10.0, 5.0, 5.0]
    return [make_prediction(f"h{i + 1}", p, odds=100.0 / p, rank=i + 1) for i, p in enumerate(probs)]
