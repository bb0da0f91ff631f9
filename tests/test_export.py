from outreach_opt.export import targets_csv, write_targets_csv
from outreach_opt.population import CustomerScore, build_population


def test_labeled_export_is_exact(labeled_population):
    assert targets_csv(labeled_population.head(2)) == (
        "customer_id,churn_probability,actual_churn\n"
        "a,0.900000,1\n"
        "b,0.800000,0"
    )


def test_unlabeled_export_is_exact(unlabeled_population):
    assert targets_csv(unlabeled_population.head(3)) == (
        "customer_id,churn_probability\n"
        "a,0.900000\n"
        "b,0.800000\n"
        "c,0.300000"
    )


def test_empty_slice_has_header_only(labeled_population):
    assert targets_csv(labeled_population.head(0)) == "customer_id,churn_probability"


def test_probability_rounding():
    pop = build_population([CustomerScore("x", 0.12345678)])
    assert targets_csv(pop.head(1)).splitlines()[1] == "x,0.123457"


def test_write_targets_csv(tmp_path, labeled_population):
    path = write_targets_csv(labeled_population.head(1), tmp_path / "out" / "churn_targets.csv")
    assert path.read_text(encoding="utf-8") == "customer_id,churn_probability,actual_churn\na,0.900000,1"


def test_ids_with_delimiters_are_quoted():
    pop = build_population([CustomerScore("acme, inc", 0.5), CustomerScore('x"y', 0.25)])
    assert targets_csv(pop.head(2)) == (
        "customer_id,churn_probability\n"
        '"acme, inc",0.500000\n'
        '"x""y",0.250000'
    )
