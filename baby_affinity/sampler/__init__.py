"""Candidate sampling: which names to present in the next round."""

from baby_affinity.sampler.constants import DEFAULT_ROUND_SIZE
from baby_affinity.sampler.sampler import CandidateSampler, Strata, stratify


__all__ = [
    "DEFAULT_ROUND_SIZE",
    "CandidateSampler",
    "Strata",
    "stratify",
]
