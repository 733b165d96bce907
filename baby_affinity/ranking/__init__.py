"""Rank queries: a name's standing within its category."""

from baby_affinity.ranking.service import RankedName, RankQueryService


__all__ = [
    "RankQueryService",
    "RankedName",
]
