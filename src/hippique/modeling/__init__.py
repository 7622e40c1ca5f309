"""
Modeling module

Note:
    Import explicitly.
    e.g. from hippique.modeling.predict import predict_race
"""

__all__ = [
    # "predict_race",
    # "detect_scenario",
    # "build_predictions",
]
