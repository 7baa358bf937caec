def test_employee_status_hides_from_default_list(client, auth_headers, employee):
    response = client.patch(f"/employees/{employee['id']}/status", json={"is_active": False}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["is_active"] is False

    assert client.get("/employees", headers=auth_headers).json() == []
    everyone = client.get("/employees", params={"include_inactive": True}, headers=auth_headers).json()
    assert [row["name"] for row in everyone] == ["Ravi"]


def test_employee_salary_is_in_rupees(client, auth_headers, employee):
    assert employee["base_salary"] == "30000.00"
    response = client.put(f"/employees/{employee['id']}", json={"base_salary": "32500.50"}, headers=auth_headers)
    assert response.json()["base_salary"] == "32500.50"


def test_attendance_upserts_per_day(client, auth_headers, employee):
    payload = {"employee_id": employee["id"], "date": "2026-03-12T14:30:00", "status": "present"}
    first = client.post("/attendance", json=payload, headers=auth_headers)
    assert first.status_code == 201
    assert first.json()["date"].startswith("2026-03-12T00:00:00")

    second = client.post("/attendance", json={**payload, "status": "UNPAID_LEAVE"}, headers=auth_headers)
    assert second.status_code == 200
    assert second.json()["id"] == first.json()["id"]
    assert second.json()["status"] == "UNPAID_LEAVE"

    rows = client.get(
        "/attendance",
        params={"employee_id": employee["id"], "date_from": "2026-03-01", "date_to": "2026-03-31"},
        headers=auth_headers,
    ).json()
    assert len(rows) == 1


def test_attendance_for_unknown_employee(client, auth_headers):
    response = client.post(
        "/attendance",
        json={"employee_id": 999, "date": "2026-03-12T00:00:00", "status": "PRESENT"},
        headers=auth_headers,
    )
    assert response.status_code == 404


def test_audit_log_filters_by_entity(client, auth_headers, employee):
    rows = client.get("/audit", params={"entity_type": "EMPLOYEE"}, headers=auth_headers).json()
    assert rows[0]["entity_id"] == employee["id"]
    assert rows[0]["action"] == "CREATE"
