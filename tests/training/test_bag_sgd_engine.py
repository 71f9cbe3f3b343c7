# tests/training/test_bag_sgd_engine.py
from __future__ import annotations

import numpy as np
import pytest

from additive_trainer.core.functions import Linear, Spline
from additive_trainer.core.model import AdditiveModel
from additive_trainer.training.engines.bag_sgd_engine import (
    BagResult,
    BagTask,
    aggregate_bags,
    average_functions,
    train_bag,
    write_back,
)
from additive_trainer.training.engines.sampling_engine import (
    bernoulli_sample,
    partition_bags,
    round_seeds,
)


@pytest.fixture
def snapshot() -> AdditiveModel:
    m = AdditiveModel()
    m.add_function("x", "v", Linear(), overwrite=True)
    m.add_function("z", "v", Spline(0.0, 1.0, 4), overwrite=True)
    return m


@pytest.fixture
def examples(make_example):
    return [
        make_example({"x": {"v": x}, "z": {"v": x}}, label=2.0 * x)
        for x in np.linspace(0.1, 1.0, 20)
    ]


# -----------------------------------------------------------------------------
# sampling / bagging
# -----------------------------------------------------------------------------
def test_full_rate_sample_keeps_everything():
    items = list(range(50))

    assert bernoulli_sample(items, 1.0, np.random.default_rng(0)) == items


def test_partial_rate_sample_is_a_subset():
    items = list(range(1000))
    sample = bernoulli_sample(items, 0.3, np.random.default_rng(0))

    assert set(sample) <= set(items)
    assert 200 < len(sample) < 400


def test_partition_is_disjoint_and_complete():
    items = list(range(23))
    bags = partition_bags(items, 4, np.random.default_rng(1))

    assert len(bags) == 4
    assert sorted(i for bag in bags for i in bag) == items


def test_partition_always_returns_num_bags_groups():
    bags = partition_bags([1, 2], 5, np.random.default_rng(0))

    assert len(bags) == 5
    assert sum(len(b) for b in bags) == 2


def test_round_seeds_are_reproducible_per_iteration():
    a_sample, a_bags = round_seeds(3, 1, 2)
    b_sample, b_bags = round_seeds(3, 1, 2)
    c_sample, _ = round_seeds(3, 2, 2)

    assert a_sample.generate_state(4).tolist() == b_sample.generate_state(4).tolist()
    assert [s.generate_state(2).tolist() for s in a_bags] == [
        s.generate_state(2).tolist() for s in b_bags
    ]
    assert a_sample.generate_state(4).tolist() != c_sample.generate_state(4).tolist()


# -----------------------------------------------------------------------------
# train_bag
# -----------------------------------------------------------------------------
def test_train_bag_never_mutates_snapshot(snapshot, examples, make_params):
    params = make_params(learning_rate=0.1)
    before = {k: f.get_weights().copy() for k, f in snapshot.items()}

    result = train_bag(
        BagTask(0, examples, np.random.SeedSequence(1)),
        snapshot=snapshot,
        params=params,
    )

    for key, weights in before.items():
        np.testing.assert_array_equal(snapshot.functions[key].get_weights(), weights)
    assert set(result.functions) == set(snapshot.functions)
    assert result.num_examples == len(examples)
    assert not np.array_equal(result.functions[("x", "v")].get_weights(), before[("x", "v")])


def test_train_bag_is_pure_for_a_fixed_seed(snapshot, examples, make_params):
    params = make_params(dropout=0.3, learning_rate=0.05, loss_mod=5)

    runs = [
        train_bag(
            BagTask(0, examples, np.random.SeedSequence(42)),
            snapshot=snapshot,
            params=params,
        )
        for _ in range(2)
    ]

    for key in snapshot.functions:
        np.testing.assert_array_equal(
            runs[0].functions[key].get_weights(),
            runs[1].functions[key].get_weights(),
        )
    assert runs[0].loss_sum == runs[1].loss_sum


def test_empty_bag_returns_unchanged_copies(snapshot, make_params):
    result = train_bag(
        BagTask(0, [], np.random.SeedSequence(0)),
        snapshot=snapshot,
        params=make_params(),
    )

    assert result.num_examples == 0
    assert result.mean_loss == 0.0
    np.testing.assert_array_equal(
        result.functions[("x", "v")].get_weights(), [0.0, 1.0]
    )


# -----------------------------------------------------------------------------
# aggregation
# -----------------------------------------------------------------------------
@pytest.mark.parametrize("num_bags", [1, 3, 7])
def test_averaging_identical_copies_is_identity(num_bags):
    s = Spline(0.0, 1.0, 4)
    s.set_weights([0.1, 0.2, 0.7, -0.3])
    copies = [s.copy() for _ in range(num_bags)]

    avg = average_functions(copies, num_bags)

    np.testing.assert_array_equal(avg.get_weights(), s.get_weights())


def test_averaging_takes_elementwise_mean():
    avg = average_functions([Linear(0.0, 1.0), Linear(2.0, 3.0)], 2)

    np.testing.assert_allclose(avg.get_weights(), [1.0, 2.0])


def test_aggregate_groups_by_key(make_params):
    params = make_params(num_bags=2)
    results = [
        BagResult(0, {("x", "v"): Linear(0.0, 2.0)}, 1.0, 1),
        BagResult(1, {("x", "v"): Linear(2.0, 4.0)}, 1.0, 1),
    ]

    aggregated = aggregate_bags(results, params)

    np.testing.assert_allclose(aggregated[("x", "v")].get_weights(), [1.0, 3.0])


def test_write_back_drops_keys_missing_from_live_model(snapshot):
    snapshot.remove([("z", "v")])
    aggregated = {("x", "v"): Linear(5.0, 5.0), ("z", "v"): Spline(0.0, 1.0, 4)}

    written = write_back(snapshot, aggregated)

    assert written == 1
    assert ("z", "v") not in snapshot
    np.testing.assert_allclose(snapshot.get("x", "v").get_weights(), [5.0, 5.0])
