"""
Scenario detection tests
"""
import pytest

from hippique.config import ScenarioConfig
from hippique.domain.models import ScenarioKind
from hippique.modeling.scenario import detect_scenario, score_gaps


def test_score_gaps_pads_with_zero():
    assert score_gaps([10.0, 8.0]) == (2.0, 0.0, 0.0, 0.0, 0.0)
    assert score_gaps([]) == (0.0,) * 5
    assert score_gaps([9, 7, 4, 0, -1, -5, -9]) == (2.0, 3.0, 4.0, 1.0, 4.0)


class TestDetectScenario:
    @pytest.mark.parametrize("scores", [[], [50.0], [60.0, 40.0]])
    def test_insufficient_data(self, scores):
        s = detect_scenario(scores)
        assert s.kind is ScenarioKind.INSUFFICIENT_DATA
        assert s.top_size == len(scores)
        assert (s.top_percentage, s.rest_percentage) == (100.0, 0.0)

    def test_dominant_favorite(self):
        s = detect_scenario([80.0, 60.0, 50.0, 40.0])
        assert s.kind is ScenarioKind.DOMINANT_FAVORITE
        assert s.fixed_shares == (50.0, 18.0, 12.0)
        assert s.top_percentage == pytest.approx(80.0)
        assert s.rest_percentage == pytest.approx(20.0)

    def test_gap_of_exactly_15_is_not_dominant(self):
        s = detect_scenario([65.0, 50.0, 45.0, 40.0])
        assert s.kind is ScenarioKind.STANDARD_TOP_3

    def test_clear_top_2(self):
        s = detect_scenario([80.0, 68.0, 55.0, 50.0])
        assert s.kind is ScenarioKind.CLEAR_TOP_2
        assert s.fixed_shares == (38.0, 32.0)
        assert s.rest_percentage == pytest.approx(30.0)

    def test_grouped_top_5(self):
        s = detect_scenario([60.0, 58.0, 56.0, 54.0, 52.0, 30.0])
        assert s.kind is ScenarioKind.GROUPED_TOP_5
        assert (s.top_size, s.top_percentage, s.rest_percentage) == (5, 80.0, 20.0)

    def test_grouped_top_4(self):
        s = detect_scenario([60.0, 58.0, 56.0, 54.0, 40.0])
        assert s.kind is ScenarioKind.GROUPED_TOP_4
        assert (s.top_size, s.top_percentage, s.rest_percentage) == (4, 75.0, 25.0)

    def test_grouped_top_3(self):
        s = detect_scenario([60.0, 58.0, 56.0, 45.0, 40.0])
        assert s.kind is ScenarioKind.GROUPED_TOP_3
        assert (s.top_size, s.top_percentage, s.rest_percentage) == (3, 70.0, 30.0)

    def test_standard(self):
        s = detect_scenario([60.0, 52.0, 50.0, 40.0])
        assert s.kind is ScenarioKind.STANDARD_TOP_3
        assert (s.top_size, s.top_percentage, s.rest_percentage) == (3, 70.0, 30.0)

    def test_small_grouped_field_takes_everything(self):
        s = detect_scenario([50.0, 49.0, 48.0])
        assert s.kind is ScenarioKind.GROUPED_TOP_3
        assert (s.top_size, s.top_percentage, s.rest_percentage) == (3, 100.0, 0.0)

    def test_grouped_label_follows_field_size(self):
        """Gaps past the last entrant never extend a grouping"""
        four = detect_scenario([50.0, 49.0, 48.0, 47.0])
        assert four.kind is ScenarioKind.GROUPED_TOP_4
        assert (four.top_size, four.top_percentage, four.rest_percentage) == (4, 100.0, 0.0)

        five = detect_scenario([50.0, 49.0, 48.0, 47.0, 46.0])
        assert five.kind is ScenarioKind.GROUPED_TOP_5
        assert five.top_size == 5

    def test_small_dominant_field_rescales_shares(self):
        s = detect_scenario([80.0, 60.0, 50.0])
        assert s.kind is ScenarioKind.DOMINANT_FAVORITE
        assert s.fixed_shares == pytest.approx((62.5, 22.5, 15.0))
        assert sum(s.fixed_shares) == pytest.approx(100.0)
        assert s.rest_percentage == pytest.approx(0.0)

    def test_top_plus_rest_is_100(self):
        fields = [
            [80.0, 60.0, 50.0, 40.0],
            [80.0, 68.0, 55.0, 50.0],
            [60.0, 58.0, 56.0, 54.0, 52.0, 30.0],
            [60.0, 52.0, 50.0, 40.0],
        ]
        for scores in fields:
            s = detect_scenario(scores)
            assert s.top_percentage + s.rest_percentage == pytest.approx(100.0)

    def test_thresholds_from_config(self):
        cfg = ScenarioConfig(dominant_gap=25.0)
        s = detect_scenario([80.0, 60.0, 50.0, 40.0], cfg)
        assert s.kind is not ScenarioKind.DOMINANT_FAVORITE
