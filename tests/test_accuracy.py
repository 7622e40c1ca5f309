"""
Prediction accuracy tests
"""
import pytest

from hippique.domain.models import AccuracyMetrics, Scenario, ScenarioKind
from hippique.eval.accuracy import (
    RaceEvaluation,
    compute_accuracy_metrics,
    evaluate_race,
    summarize_by_scenario,
)


@pytest.fixture
def ranked(make_prediction):
    return [make_prediction(eid, 20.0, rank=i + 1) for i, eid in enumerate(["a", "b", "c", "d", "e", "f"])]


class TestComputeAccuracyMetrics:
    def test_perfect(self, ranked):
        m = compute_accuracy_metrics(ranked, ["a", "c", "b"])
        assert m == AccuracyMetrics(accuracy_score=100.0, top3_accuracy=100.0, winner_rank_predicted=1)

    def test_winner_second(self, ranked):
        m = compute_accuracy_metrics(ranked, ["b", "a", "z"])
        assert m.winner_rank_predicted == 2
        assert m.top3_accuracy == pytest.approx(66.67)
        assert m.accuracy_score == pytest.approx(30.0 + 2 / 3 * 50.0, abs=0.01)

    @pytest.mark.parametrize("winner,rank,points", [("c", 3, 20.0), ("d", 4, 10.0), ("e", 5, 10.0), ("f", 6, 0.0)])
    def test_winner_points(self, ranked, winner, rank, points):
        m = compute_accuracy_metrics(ranked, [winner, "x", "y"])
        assert m.winner_rank_predicted == rank
        expected_top3 = 1 / 3 * 50.0 if rank <= 3 else 0.0
        assert m.accuracy_score == pytest.approx(points + expected_top3, abs=0.01)

    def test_winner_not_predicted(self, ranked):
        m = compute_accuracy_metrics(ranked, ["z", "a", "b"])
        assert m.winner_rank_predicted is None
        assert m.accuracy_score == pytest.approx(2 / 3 * 50.0, abs=0.01)

    def test_no_results(self, ranked):
        m = compute_accuracy_metrics(ranked, [])
        assert m == AccuracyMetrics(accuracy_score=0.0, top3_accuracy=0.0, winner_rank_predicted=None)


def test_evaluate_race_reads_scenario(make_prediction):
    scenario = Scenario(ScenarioKind.STANDARD_TOP_3, top_size=3, top_percentage=70.0, rest_percentage=30.0)
    preds = [make_prediction("a", 40.0, scenario=scenario), make_prediction("b", 30.0, rank=2)]
    ev = evaluate_race("r1", preds, ["a", "b"])
    assert ev.scenario == "STANDARD_TOP_3"
    assert ev.metrics.winner_rank_predicted == 1


class TestSummarizeByScenario:
    def test_groups(self):
        evaluations = [
            RaceEvaluation("r1", "DOMINANT_FAVORITE", AccuracyMetrics(100.0, 100.0, 1)),
            RaceEvaluation("r2", "DOMINANT_FAVORITE", AccuracyMetrics(30.0, 0.0, 2)),
            RaceEvaluation("r3", "STANDARD_TOP_3", AccuracyMetrics(50.0, 33.33, 1)),
            RaceEvaluation("r4", None, AccuracyMetrics(0.0, 0.0, None)),
        ]
        df = summarize_by_scenario(evaluations)

        assert list(df.columns) == ["scenario", "races", "avg_accuracy", "avg_top3_accuracy", "winner_found_rate"]
        assert df.iloc[0]["scenario"] == "DOMINANT_FAVORITE"
        row = df.set_index("scenario").loc["DOMINANT_FAVORITE"]
        assert row["races"] == 2
        assert row["avg_accuracy"] == pytest.approx(65.0)
        assert row["avg_top3_accuracy"] == pytest.approx(50.0)
        assert row["winner_found_rate"] == pytest.approx(0.5)
        assert "UNKNOWN" in set(df["scenario"])

    def test_empty(self):
        df = summarize_by_scenario([])
        assert df.empty
        assert "avg_accuracy" in df.columns
