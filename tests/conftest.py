import pytest

from outreach_opt.population import CustomerScore, build_population


@pytest.fixture
def labeled_scores():
    return [
        CustomerScore("a", 0.9, 1),
        CustomerScore("b", 0.8, 0),
        CustomerScore("c", 0.3, 1),
        CustomerScore("d", 0.1, 0),
    ]


@pytest.fixture
def unlabeled_scores(labeled_scores):
    return [CustomerScore(s.customer_id, s.churn_probability) for s in labeled_scores]


@pytest.fixture
def labeled_population(labeled_scores):
    # deliberately shuffled input; ranking must restore a, b, c, d
    return build_population([labeled_scores[i] for i in (2, 0, 3, 1)])


@pytest.fixture
def unlabeled_population(unlabeled_scores):
    return build_population(unlabeled_scores)
