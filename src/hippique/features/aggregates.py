"""
Historical aggregates (career stats, jockey / trainer rates).

The scoring engine only sees the AggregatesProvider lookup; unknown ids
return None and are scored as neutral. HistoryAggregates builds the lookup
tables once from past EntrantRecords with pandas.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict
from typing import Iterable, Optional

import pandas as pd

from ..domain.models import EntrantRecord, EntrantStats


class AggregatesProvider(ABC):
    @abstractmethod
    def entrant_stats(self, entrant_id: str) -> Optional[EntrantStats]:
        raise NotImplementedError

    @abstractmethod
    def jockey_win_rate(self, jockey_id: str) -> Optional[float]:
        raise NotImplementedError

    @abstractmethod
    def synergy_rate(self, jockey_id: str, trainer_id: str, *, min_races: int = 1) -> Optional[float]:
        raise NotImplementedError


class EmptyAggregates(AggregatesProvider):
    """Knows nothing: every entrant is scored as neutral."""

    def entrant_stats(self, entrant_id: str) -> Optional[EntrantStats]:
        return None

    def jockey_win_rate(self, jockey_id: str) -> Optional[float]:
        return None

    def synergy_rate(self, jockey_id: str, trainer_id: str, *, min_races: int = 1) -> Optional[float]:
        return None


def records_to_frame(records: Iterable[EntrantRecord]) -> pd.DataFrame:
    rows = [asdict(r) for r in records]
    cols = list(EntrantRecord.__dataclass_fields__.keys())
    df = pd.DataFrame(rows, columns=cols)
    df["rank"] = pd.to_numeric(df["rank"], errors="coerce")
    df["earnings"] = pd.to_numeric(df["earnings"], errors="coerce").fillna(0.0)
    return df


def _win_counts(df: pd.DataFrame, keys: list[str]) -> pd.DataFrame:
    work = df.dropna(subset=keys)
    if work.empty:
        return pd.DataFrame(columns=["completed", "wins"])
    work = work.assign(
        completed=work["rank"].notna().astype(int),
        win=(work["rank"] == 1).astype(int),
    )
    out = work.groupby(keys, sort=False).agg(completed=("completed", "sum"), wins=("win", "sum"))
    return out


class HistoryAggregates(AggregatesProvider):
    """
    Lookup tables computed from historical records.

    Rates are wins / completed races (0-1); a race with no known rank counts
    as started but not completed.
    """

    def __init__(
        self,
        stats: dict[str, EntrantStats],
        jockey_rates: dict[str, float],
        pair_counts: dict[tuple[str, str], tuple[int, int]],
    ):
        self._stats = stats
        self._jockey_rates = jockey_rates
        self._pair_counts = pair_counts

    @classmethod
    def from_records(cls, records: Iterable[EntrantRecord]) -> "HistoryAggregates":
        df = records_to_frame(records)
        if df.empty:
            return cls({}, {}, {})

        df = df.assign(
            completed=df["rank"].notna().astype(int),
            win=(df["rank"] == 1).astype(int),
            top3=((df["rank"] >= 1) & (df["rank"] <= 3)).astype(int),
        )
        per_entrant = df.groupby("entrant_id", sort=False).agg(
            races=("race_id", "size"),
            completed_races=("completed", "sum"),
            wins=("win", "sum"),
            top3=("top3", "sum"),
            earnings=("earnings", "sum"),
        )
        stats = {
            str(eid): EntrantStats(
                races=int(row["races"]),
                completed_races=int(row["completed_races"]),
                wins=int(row["wins"]),
                top3=int(row["top3"]),
                earnings=float(row["earnings"]),
            )
            for eid, row in per_entrant.iterrows()
        }

        jockey_rates: dict[str, float] = {}
        for jid, row in _win_counts(df, ["jockey_id"]).iterrows():
            if int(row["completed"]) > 0:
                jockey_rates[str(jid)] = float(row["wins"]) / float(row["completed"])

        pair_counts: dict[tuple[str, str], tuple[int, int]] = {}
        for (jid, tid), row in _win_counts(df, ["jockey_id", "trainer_id"]).iterrows():
            pair_counts[(str(jid), str(tid))] = (int(row["completed"]), int(row["wins"]))

        return cls(stats, jockey_rates, pair_counts)

    def entrant_stats(self, entrant_id: str) -> Optional[EntrantStats]:
        return self._stats.get(entrant_id)

    def jockey_win_rate(self, jockey_id: str) -> Optional[float]:
        return self._jockey_rates.get(jockey_id)

    def synergy_rate(self, jockey_id: str, trainer_id: str, *, min_races: int = 1) -> Optional[float]:
        counts = self._pair_counts.get((jockey_id, trainer_id))
        if counts is None:
            return None
        completed, wins = counts
        if completed < max(1, int(min_races)):
            return None
        return wins / completed
