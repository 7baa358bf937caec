import pytest
from sqlalchemy import func, select

from app.models.inspection import JobInspection, JobInspectionItem


@pytest.fixture
def brake_template(client, auth_headers):
    response = client.post(
        "/inspection-templates",
        json={
            "name": "Brake check",
            "kind": "brake-job",
            "items": [
                {"label": "Front pads", "section": "Front", "is_critical": True},
                {"label": "Rear shoes", "section": "Rear"},
                {"label": "Brake fluid level"},
            ],
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


def _start(client, auth_headers, job_card, **payload):
    return client.post(f"/jobcards/{job_card['id']}/inspections", json=payload, headers=auth_headers)


def test_template_lists_items_in_order(client, auth_headers, brake_template):
    assert brake_template["kind"] == "BRAKE_JOB"
    assert [item["label"] for item in brake_template["items"]] == ["Front pads", "Rear shoes", "Brake fluid level"]
    assert [item["sort_order"] for item in brake_template["items"]] == [0, 1, 2]

    url = f"/inspection-templates/{brake_template['id']}/items"
    added = client.post(url, json={"label": "Handbrake travel"}, headers=auth_headers).json()
    assert added["items"][-1]["sort_order"] == 3

    listed = client.get("/inspection-templates", params={"kind": "BRAKE_JOB"}, headers=auth_headers).json()
    assert [template["id"] for template in listed] == [brake_template["id"]]
    assert client.get("/inspection-templates", params={"kind": "AC_SERVICE"}, headers=auth_headers).json() == []


def test_inspection_copies_template_items(client, auth_headers, job_card, brake_template):
    response = _start(client, auth_headers, job_card, template_id=brake_template["id"], type="arrival")
    assert response.status_code == 201
    inspection = response.json()

    assert inspection["job_card_id"] == job_card["id"]
    assert inspection["template_id"] == brake_template["id"]
    assert inspection["name"] == "Brake check"
    assert inspection["type"] == "ARRIVAL"
    assert [item["label"] for item in inspection["items"]] == ["Front pads", "Rear shoes", "Brake fluid level"]
    assert {item["status"] for item in inspection["items"]} == {"OK"}
    assert inspection["items"][0]["is_critical"] is True
    assert inspection["issue_count"] == 0

    listed = client.get(f"/jobcards/{job_card['id']}/inspections", headers=auth_headers).json()
    assert [row["id"] for row in listed] == [inspection["id"]]


def test_item_status_updates_count_issues(client, auth_headers, job_card, brake_template):
    inspection = _start(client, auth_headers, job_card, template_id=brake_template["id"]).json()
    base = f"/jobcards/{job_card['id']}/inspections/{inspection['id']}"
    front, rear, _ = inspection["items"]

    updated = client.patch(
        f"{base}/items/{front['id']}",
        json={"status": "not ok", "note": " Worn below 2mm "},
        headers=auth_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["status"] == "NOT_OK"
    assert updated.json()["note"] == "Worn below 2mm"

    client.patch(f"{base}/items/{rear['id']}", json={"status": "ATTENTION"}, headers=auth_headers)
    detail = client.get(base, headers=auth_headers).json()
    assert detail["issue_count"] == 2
    assert detail["critical_issue_count"] == 1

    cleared = client.patch(f"{base}/items/{front['id']}", json={"note": None}, headers=auth_headers).json()
    assert cleared["status"] == "NOT_OK"
    assert cleared["note"] is None

    assert client.patch(f"{base}/items/{front['id']}", json={"status": "BROKEN"}, headers=auth_headers).status_code == 422

    audit = client.get("/audit", params={"entity_type": "JOB_INSPECTION"}, headers=auth_headers).json()
    assert audit[0]["entity_id"] == inspection["id"]


def test_item_must_belong_to_inspection(client, auth_headers, job_card, brake_template):
    first = _start(client, auth_headers, job_card, template_id=brake_template["id"]).json()
    second = _start(client, auth_headers, job_card, name="Delivery walkaround", type="DELIVERY").json()
    assert second["items"] == []
    assert second["template_id"] is None

    foreign_item = first["items"][0]["id"]
    response = client.patch(
        f"/jobcards/{job_card['id']}/inspections/{second['id']}/items/{foreign_item}",
        json={"status": "NA"},
        headers=auth_headers,
    )
    assert response.status_code == 404


def test_missing_job_or_template(client, auth_headers, job_card):
    assert client.post("/jobcards/999/inspections", json={}, headers=auth_headers).status_code == 404
    assert _start(client, auth_headers, job_card, template_id=999).status_code == 404
    assert client.get(f"/jobcards/{job_card['id']}/inspections/999", headers=auth_headers).status_code == 404


def test_inactive_template_cannot_start_inspection(client, auth_headers, job_card, brake_template):
    url = f"/inspection-templates/{brake_template['id']}"
    assert client.put(url, json={"is_active": False}, headers=auth_headers).json()["is_active"] is False
    assert client.get("/inspection-templates", headers=auth_headers).json() == []
    assert _start(client, auth_headers, job_card, template_id=brake_template["id"]).status_code == 400


def test_ad_hoc_checks_and_deletion(client, auth_headers, job_card):
    inspection = _start(client, auth_headers, job_card, type="other", notes="Customer reported rattle").json()
    base = f"/jobcards/{job_card['id']}/inspections/{inspection['id']}"

    added = client.post(
        f"{base}/items",
        json={"label": "Exhaust mounts", "status": "attention"},
        headers=auth_headers,
    )
    assert added.status_code == 201
    assert added.json()["issue_count"] == 1

    renamed = client.put(base, json={"name": "Rattle check"}, headers=auth_headers).json()
    assert renamed["name"] == "Rattle check"
    assert renamed["notes"] == "Customer reported rattle"

    assert client.delete(base, headers=auth_headers).status_code == 200
    assert client.get(base, headers=auth_headers).status_code == 404


def test_template_changes_leave_recorded_inspections(client, auth_headers, job_card, brake_template):
    inspection = _start(client, auth_headers, job_card, template_id=brake_template["id"]).json()
    template_url = f"/inspection-templates/{brake_template['id']}"
    first_item = brake_template["items"][0]["id"]

    client.put(f"{template_url}/items/{first_item}", json={"label": "Front discs"}, headers=auth_headers)
    assert client.delete(template_url, headers=auth_headers).status_code == 200
    assert client.get(template_url, headers=auth_headers).status_code == 404

    kept = client.get(f"/jobcards/{job_card['id']}/inspections/{inspection['id']}", headers=auth_headers).json()
    assert kept["template_id"] is None
    assert kept["items"][0]["label"] == "Front pads"
    assert kept["items"][0]["template_item_id"] is None


def test_deleting_job_card_removes_inspections(client, auth_headers, db_session, job_card, brake_template):
    _start(client, auth_headers, job_card, template_id=brake_template["id"])
    assert client.delete(f"/jobcards/{job_card['id']}", headers=auth_headers).status_code == 200

    assert db_session.scalar(select(func.count()).select_from(JobInspection)) == 0
    assert db_session.scalar(select(func.count()).select_from(JobInspectionItem)) == 0
