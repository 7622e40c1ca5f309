"""
hippique: race predictions for French horse racing.

Note:
    Subpackages are imported explicitly, e.g.
    from hippique.modeling.predict import predict_race
"""

__version__ = "0.1.0"
