import pytest

from outreach_opt.curve import curve_capacities, profit_curve
from outreach_opt.population import CustomerScore, build_population
from outreach_opt.profit import PolicyEvaluator


def _population(n):
    return build_population([CustomerScore(f"c{i}", (i % 97) / 97.0) for i in range(n)])


@pytest.mark.parametrize("n", [0, 1, 4, 39, 40, 1000, 1001, 12345])
def test_curve_edges(n):
    caps = curve_capacities(n)
    assert caps[0] == 0
    assert caps[-1] == n
    assert caps == sorted(set(caps))


def test_curve_density_is_bounded():
    assert len(curve_capacities(1000)) == 41
    assert len(curve_capacities(1001)) == 42
    assert curve_capacities(4) == [0, 1, 2, 3, 4]


def test_points_match_evaluate(labeled_population):
    ev = PolicyEvaluator(labeled_population)
    curve = profit_curve(ev, 10, 100, 0.5)
    for p in curve:
        assert ev.evaluate(p.capacity, 10, 100, 0.5).profit == p.profit
    assert [p.profit for p in curve] == pytest.approx([0, 40, 30, 70, 60])


def test_points_match_evaluate_large_unlabeled():
    ev = PolicyEvaluator(_population(2000))
    curve = profit_curve(ev, 1.5, 80, 0.3)
    points = curve.points()
    assert points[0].capacity == 0
    assert points[-1].capacity == 2000
    for p in points:
        assert ev.evaluate(p.capacity, 1.5, 80, 0.3).profit == p.profit


def test_curve_is_restartable(labeled_population):
    curve = profit_curve(PolicyEvaluator(labeled_population), 10, 100, 0.5)
    assert list(curve) == list(curve)


def test_empty_population_curve():
    curve = profit_curve(PolicyEvaluator(build_population([])), 10, 100, 0.5)
    points = curve.points()
    assert len(points) == 1
    assert (points[0].capacity, points[0].profit) == (0, 0.0)


def test_peak_and_frame(labeled_population):
    curve = profit_curve(PolicyEvaluator(labeled_population), 10, 100, 0.5)
    peak = curve.peak()
    assert peak.capacity == 3
    assert peak.profit == pytest.approx(70)

    df = curve.to_frame()
    assert list(df.columns) == ["capacity", "profit"]
    assert df["capacity"].tolist() == [0, 1, 2, 3, 4]
