import numpy as np
import pytest

from outreach_opt.exceptions import PopulationLoadError
from outreach_opt.population import CustomerScore, build_population


def test_ranked_descending_by_probability(labeled_population):
    assert [c.customer_id for c in labeled_population] == ["a", "b", "c", "d"]
    assert list(labeled_population.probabilities) == [0.9, 0.8, 0.3, 0.1]
    assert list(labeled_population.labels) == [1, 0, 1, 0]


def test_ties_keep_input_order():
    pop = build_population([
        CustomerScore("x", 0.5),
        CustomerScore("top", 0.7),
        CustomerScore("y", 0.5),
        CustomerScore("z", 0.5),
    ])
    assert [c.customer_id for c in pop] == ["top", "x", "y", "z"]


def test_base_rate_labeled_is_positive_rate(labeled_population):
    assert labeled_population.labeled
    assert labeled_population.base_rate == pytest.approx(0.5)
    assert labeled_population.total_positives == 2


def test_base_rate_unlabeled_is_mean_probability(unlabeled_population):
    assert not unlabeled_population.labeled
    assert unlabeled_population.base_rate == pytest.approx(0.525)
    assert unlabeled_population.total_positives is None


def test_empty_population():
    pop = build_population([])
    assert len(pop) == 0
    assert pop.base_rate == 0.0
    assert not pop.labeled
    assert pop.hits(0) == 0.0


def test_partial_labels_rejected():
    with pytest.raises(PopulationLoadError, match="partially labeled"):
        build_population([CustomerScore("a", 0.2, 1), CustomerScore("b", 0.4)])


def test_arrays_are_read_only(labeled_population):
    with pytest.raises(ValueError):
        labeled_population.probabilities[0] = 0.0


def test_head_is_prefix_and_inherits_dataset_fields(labeled_population):
    top = labeled_population.head(2)
    assert [c.customer_id for c in top] == ["a", "b"]
    assert top.labeled
    assert top.base_rate == labeled_population.base_rate
    assert np.shares_memory(top.probabilities, labeled_population.probabilities)


def test_hits_counts_labels_or_sums_probabilities(labeled_population, unlabeled_population):
    assert labeled_population.hits(3) == 2
    assert unlabeled_population.hits(2) == pytest.approx(1.7)


def test_to_frame_columns(labeled_population, unlabeled_population):
    assert list(labeled_population.to_frame().columns) == ["customer_id", "churn_probability", "actual_churn"]
    assert list(unlabeled_population.to_frame().columns) == ["customer_id", "churn_probability"]
