import pytest
from fastapi.testclient import TestClient

from tablevision.data.schemas import InsightData
from tablevision.main import create_app


@pytest.fixture
def controller(make_controller, insight_recorder):
    insight_recorder.result = InsightData(summary="Steady growth", trends=["Sales up"], anomalies=[])
    return make_controller()


@pytest.fixture
def client(controller):
    with TestClient(create_app(controller)) as c:
        yield c


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {
        "status": "ok",
        "table": "orders",
        "dashboard": "ready",
        "records": 3,
        "realtime": "connected",
    }


def test_uninitialized_server_returns_503():
    c = TestClient(create_app())
    assert c.get("/api/health").status_code == 503


def test_config(client):
    body = client.get("/api/config").json()
    assert body["table"] == "orders"
    assert body["max_rows"] == 1000
    assert body["source"] == "MemorySource"
    assert body["insights_enabled"] is False


def test_dashboard_views(client):
    body = client.get("/api/dashboard").json()
    assert body["status"] == "ready"
    assert body["record_count"] == 3
    assert body["insights"]["summary"] == "Steady growth"
    views = body["views"]
    assert [m["label"] for m in views["monthly"]] == ["Jan 24", "Feb 24"]
    assert [m["profit"] for m in views["monthly"]] == [50.0, 150.0]
    assert [c["name"] for c in views["categories"]] == ["Marketing", "Sales"]
    assert all(c["color"] for c in views["categories"])
    assert views["top_rows"][0]["profit"] == 150.0


def test_change_table_to_missing_is_404_and_dashboard_reports_error(client):
    r = client.put("/api/config/table", json={"table": "missing"})
    assert r.status_code == 404
    assert r.json()["detail"]["kind"] == "table_unavailable"

    body = client.get("/api/dashboard").json()
    assert body["status"] == "error"
    assert body["table_exists"] is False
    assert body["views"] is None
    assert client.get("/api/export").status_code == 404


def test_change_table_validation(client):
    assert client.put("/api/config/table", json={"table": ""}).status_code == 422
    r = client.put("/api/config/table", json={"table": "empty"})
    assert r.status_code == 200
    assert r.json()["table"] == "empty"
    assert client.get("/api/dashboard").json()["status"] == "empty"


def test_refresh(client):
    r = client.post("/api/refresh")
    assert r.status_code == 200
    assert r.json() == {"status": "refreshed", "records": 3}


def test_push_bare_row_and_webhook_envelope(client):
    r = client.post("/api/rows", json={"revenue": 10, "cost": 1, "department": "Ops", "created_at": "2024-03-02"})
    assert r.status_code == 202
    assert r.json() == {"status": "accepted", "records": 4}

    event = {"type": "INSERT", "table": "orders", "record": {"revenue": 5, "department": "Ops"}}
    assert client.post("/api/rows", json=event).json()["records"] == 5

    names = [c["name"] for c in client.get("/api/dashboard").json()["views"]["categories"]]
    assert "Ops" in names


def test_push_row_rejections(client):
    update = {"type": "UPDATE", "table": "orders", "record": {"revenue": 1}}
    assert client.post("/api/rows", json=update).status_code == 400
    other = {"type": "INSERT", "table": "invoices", "record": {"revenue": 1}}
    assert client.post("/api/rows", json=other).status_code == 409

    client.put("/api/config/table", json={"table": "missing"})
    assert client.post("/api/rows", json={"revenue": 1}).status_code == 409


def test_insights_endpoints(client, insight_recorder):
    assert client.get("/api/insights").json()["insights"]["trends"] == ["Sales up"]

    insight_recorder.result = InsightData(summary="Refreshed")
    r = client.post("/api/insights/refresh")
    assert r.status_code == 200
    assert r.json()["insights"]["summary"] == "Refreshed"

    client.put("/api/config/table", json={"table": "empty"})
    assert client.post("/api/insights/refresh").status_code == 409


def test_export_workbook(client):
    r = client.get("/api/export")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    assert "Dashboard_orders.xlsx" in r.headers["content-disposition"]


def test_export_empty_table_is_409(client):
    client.put("/api/config/table", json={"table": "empty"})
    assert client.get("/api/export").status_code == 409
