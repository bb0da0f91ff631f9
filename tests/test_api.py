import pytest
from fastapi.testclient import TestClient

from outreach_opt.api import create_app
from outreach_opt.engine import DecisionEngine

SCENARIO = {"capacity": 2, "contact_cost": 10, "churn_loss": 100, "save_rate": 0.5}


@pytest.fixture
def client(labeled_population):
    return TestClient(create_app(engine=DecisionEngine(labeled_population)))


@pytest.fixture
def unlabeled_client(unlabeled_population):
    return TestClient(create_app(engine=DecisionEngine(unlabeled_population)))


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "population_loaded": True}


def test_presets(client):
    presets = client.get("/presets").json()["presets"]
    assert presets["telecom"]["contact_cost"] == 20.0


def test_population_preview(client):
    body = client.get("/population", params={"capacity": 1}).json()
    assert body["size"] == 4
    assert body["labeled"] is True
    assert body["base_rate"] == pytest.approx(0.5)
    assert [row["contact"] for row in body["preview"]] == ["Yes", "No", "No", "No"]


def test_evaluate_labeled(client):
    body = client.post("/evaluate", json=SCENARIO).json()
    assert body["evaluation"]["profit"] == pytest.approx(30)
    assert body["evaluation"]["expected_true_positives"] == 1
    assert body["metrics"]["precision"] == pytest.approx(0.5)
    assert body["metrics"]["recall"] == pytest.approx(0.5)
    assert body["metrics"]["roi"] == pytest.approx(1.5)
    assert [p["capacity"] for p in body["curve"]] == [0, 1, 2, 3, 4]
    assert body["recommendation"]["profitable"] is True
    assert len(body["comparison"]) == 3
    assert body["summary"]["action"].startswith("Recommended action")


def test_evaluate_unlabeled_metrics_are_null(unlabeled_client):
    body = unlabeled_client.post("/evaluate", json=SCENARIO).json()
    assert body["evaluation"]["profit"] == pytest.approx(65)
    assert body["metrics"]["precision"] is None
    assert body["metrics"]["recall"] is None


def test_evaluate_capacity_zero(client):
    body = client.post("/evaluate", json={**SCENARIO, "capacity": 0}).json()
    assert body["evaluation"]["profit"] == 0
    assert body["metrics"]["roi"] is None


def test_evaluate_with_preset(client):
    body = client.post("/evaluate", json={"preset": "bank"}).json()
    assert body["parameters"] == {"capacity": 4, "contact_cost": 10.0, "churn_loss": 400.0, "save_rate": 0.15}


def test_unknown_preset(client):
    assert client.post("/evaluate", json={"preset": "retail"}).status_code == 404


def test_curve_endpoint(client):
    body = client.post("/curve", json=SCENARIO).json()
    assert body["points"][-1]["capacity"] == 4
    assert body["peak"] == {"capacity": 3, "profit": pytest.approx(70)}


def test_targets_csv(client):
    resp = client.post("/targets.csv", json=SCENARIO)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert "churn_targets.csv" in resp.headers["content-disposition"]
    assert resp.text == "customer_id,churn_probability,actual_churn\na,0.900000,1\nb,0.800000,0"


def test_missing_scores_file_returns_503(tmp_path):
    app = create_app(data_path=tmp_path / "missing.csv")
    with TestClient(app) as c:
        assert c.get("/health").json()["population_loaded"] is False
        resp = c.get("/population")
        assert resp.status_code == 503
        assert "not found" in resp.json()["detail"]


def test_scores_loaded_on_startup(tmp_path):
    path = tmp_path / "scores.csv"
    path.write_text("customer_id,churn_probability\nx,0.2\ny,0.9\n", encoding="utf-8")
    with TestClient(create_app(data_path=path)) as c:
        body = c.get("/population").json()
        assert body["size"] == 2
        assert body["preview"][0]["customer_id"] == "y"
