"""HTTP tests for /api/v1/timecards."""

BASE = "/api/v1/timecards"


def test_employee_crud(client):
    created = client.post(f"{BASE}/employees", json={"code": "luis02", "name": "Luis Vera"})
    assert created.status_code == 201
    employee = created.json()
    assert employee["code"] == "LUIS02"
    assert employee["status"] == "active"

    duplicate = client.post(f"{BASE}/employees", json={"code": "LUIS02", "name": "Otro"})
    assert duplicate.status_code == 409
    assert duplicate.json()["code"] == "duplicate_code"

    updated = client.patch(f"{BASE}/employees/{employee['id']}", json={"status": "inactive"})
    assert updated.json()["status"] == "inactive"
    assert client.get(f"{BASE}/employees", params={"active_only": True}).json() == []


def test_clock_cycle(client, employee):
    clocked_in = client.post(f"{BASE}/clock-in", json={"code": "ana01"})
    assert clocked_in.status_code == 201
    assert clocked_in.json()["time_out"] is None

    status = client.get(f"{BASE}/status/ANA01").json()
    assert status["status"] == "in_progress"

    clocked_out = client.post(f"{BASE}/clock-out", json={"code": "ANA01"})
    assert clocked_out.status_code == 200
    assert clocked_out.json()["hours_worked"] is not None

    again = client.post(f"{BASE}/clock-out", json={"code": "ANA01"})
    assert again.status_code == 400
    assert again.json()["code"] == "already_clocked_out"

    history = client.get(f"{BASE}/history/ANA01").json()
    assert len(history["timecards"]) == 1


def test_unknown_employee_code(client):
    response = client.post(f"{BASE}/clock-in", json={"code": "NOBODY"})

    assert response.status_code == 404
    assert response.json()["code"] == "employee_not_found"


def test_dashboard(client, employee):
    client.post(f"{BASE}/clock-in", json={"code": "ANA01"})

    body = client.get(f"{BASE}/dashboard").json()

    assert body["total_employees"] == 1
    assert body["active_today"] == 1
    assert body["employees_status"][0]["employee"]["code"] == "ANA01"


def test_employee_report(client, employee):
    response = client.get(f"{BASE}/reports/{employee.id}", params={"month": 1, "year": 2030})

    assert response.status_code == 200
    body = response.json()
    assert body["timecards"] == []
    assert body["total_hours"] == 0.0

    invalid = client.get(f"{BASE}/reports/{employee.id}", params={"month": 13, "year": 2030})
    assert invalid.status_code == 422


def test_export_csv(client, employee):
    client.post(f"{BASE}/clock-in", json={"code": "ANA01"})

    response = client.get(f"{BASE}/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]
    lines = response.text.splitlines()
    assert lines[0].startswith("Código,Nombre")
    assert lines[1].startswith("ANA01,Ana Torres,Instructora,")
