# additive_trainer/training/engines/sampling_engine.py
from __future__ import annotations

from typing import List, Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


def bernoulli_sample(
        items: Sequence[T],
        rate: float,
        rng: np.random.Generator,
) -> List[T]:
    """Keep each item independently with probability `rate`."""
    if rate >= 1.0:
        return list(items)
    mask = rng.random(len(items)) < rate
    return [item for item, keep in zip(items, mask) if keep]


def partition_bags(
        items: Sequence[T],
        num_bags: int,
        rng: np.random.Generator,
) -> List[List[T]]:
    """
    Shuffle, then split into num_bags disjoint groups of near-equal size.

    Always returns exactly num_bags groups; some may be empty when
    len(items) < num_bags.
    """
    order = rng.permutation(len(items))
    return [
        [items[i] for i in chunk]
        for chunk in np.array_split(order, num_bags)
    ]


def round_seeds(
        seed: Optional[int],
        iteration: int,
        num_bags: int,
) -> tuple[np.random.SeedSequence, List[np.random.SeedSequence]]:
    """
    (sampling seed, per-bag seeds) for one round.

    Derived from (seed, iteration) only, so a re-run of any bag sees the
    same dropout stream.
    """
    entropy = None if seed is None else [seed, iteration]
    root = np.random.SeedSequence(entropy)
    sample_seq, *bag_seqs = root.spawn(num_bags + 1)
    return sample_seq, bag_seqs
