import re
from datetime import datetime

from app.services.job_cards import line_total_paise


def test_line_total_handles_fractional_quantity():
    assert line_total_paise(2, 50_000) == 100_000
    assert line_total_paise(1.5, 33_333) == 50_000


def test_walk_in_creates_vehicle_and_numbers_jobs(client, auth_headers, job_card):
    now = datetime.utcnow()
    assert job_card["job_number"] == f"JC-{now.year}-{now.month:02d}-0001"
    assert job_card["status"] == "OPEN"
    assert job_card["vehicle"]["reg_number"] == "KA01AB1234"
    assert job_card["vehicle"]["make"] == "Maruti"

    second = client.post("/jobcards", json={"vehicle_id": job_card["vehicle_id"]}, headers=auth_headers).json()
    assert re.fullmatch(r"JC-\d{4}-\d{2}-0002", second["job_number"])
    assert second["customer_name"] == "Anil"

    history = client.get("/vehicles/by-reg/ka01ab1234/history", headers=auth_headers).json()
    assert len(history["job_cards"]) == 2


def test_job_card_needs_vehicle_reference(client, auth_headers):
    response = client.post("/jobcards", json={"complaints": "Noise"}, headers=auth_headers)
    assert response.status_code == 422


def test_line_items_drive_totals(client, auth_headers, job_card):
    url = f"/jobcards/{job_card['id']}/line-items"
    client.post(url, json={"type": "labour", "description": "General service", "quantity": 2, "unit_price": "500"}, headers=auth_headers)
    detail = client.post(
        url,
        json={"line_type": "PART", "description": "Oil filter", "unit_price": "250.50"},
        headers=auth_headers,
    ).json()
    assert detail["labour_total"] == "1000.00"
    assert detail["parts_total"] == "250.50"
    assert detail["grand_total"] == "1250.50"

    detail = client.put(
        f"/jobcards/{job_card['id']}",
        json={"discount": "50", "tax": "18", "diagnosis": "Filter clogged"},
        headers=auth_headers,
    ).json()
    assert detail["grand_total"] == "1218.50"
    assert detail["pending_amount"] == "1218.50"
    assert detail["diagnostics"] == "Filter clogged"

    labour_line = detail["line_items"][0]
    detail = client.put(f"{url}/{labour_line['id']}", json={"quantity": 1}, headers=auth_headers).json()
    assert detail["labour_total"] == "500.00"

    detail = client.delete(f"{url}/{labour_line['id']}", headers=auth_headers).json()
    assert detail["labour_total"] == "0.00"
    assert len(detail["line_items"]) == 1


def test_payments_sync_sales_per_receiver(client, auth_headers, job_card):
    job_url = f"/jobcards/{job_card['id']}"
    client.post(f"{job_url}/line-items", json={"type": "LABOUR", "description": "Overhaul", "unit_price": "2000"}, headers=auth_headers)

    payments = [
        {"amount": "500", "payment_mode": "CASH", "payment_type": "advance", "received_by": "Suresh"},
        {"amount": "300", "payment_mode": "UPI", "payment_type": "final", "received_by": "Suresh"},
        {"amount": "200", "payment_mode": "CASH", "payment_type": "FINAL"},
        {"amount": "100", "payment_mode": "CASH", "payment_type": "REFUND"},
    ]
    for payment in payments:
        response = client.post(f"{job_url}/payments", json=payment, headers=auth_headers)
        assert response.status_code == 201
    detail = response.json()

    assert detail["advance_paid"] == "900.00"
    assert detail["pending_amount"] == "1100.00"
    assert len(detail["sale_ids"]) == 2

    suresh = client.get("/sales", params={"received_by": "suresh"}, headers=auth_headers).json()
    assert len(suresh) == 1
    assert suresh[0]["amount"] == "800.00"
    assert suresh[0]["category"] == "Service"
    assert suresh[0]["reference"] == job_card["job_number"]
    assert suresh[0]["job_card_id"] == job_card["id"]

    cash_payment = detail["payments"][2]
    detail = client.delete(f"{job_url}/payments/{cash_payment['id']}", headers=auth_headers).json()
    assert len(detail["sale_ids"]) == 1
    assert detail["advance_paid"] == "700.00"


def test_overpaid_job_has_no_pending(client, auth_headers, job_card):
    job_url = f"/jobcards/{job_card['id']}"
    client.post(f"{job_url}/line-items", json={"type": "LABOUR", "description": "Wash", "unit_price": "300"}, headers=auth_headers)
    detail = client.post(f"{job_url}/payments", json={"amount": "500", "payment_mode": "CASH"}, headers=auth_headers).json()
    assert detail["pending_amount"] == "0.00"


def test_payments_with_utc_offset_are_stored_as_utc(client, auth_headers, job_card):
    job_url = f"/jobcards/{job_card['id']}"
    first = {"amount": "400", "payment_mode": "CASH", "received_by": "Ravi", "date": "2026-03-10T10:00:00"}
    second = {"amount": "600", "payment_mode": "UPI", "received_by": "Ravi", "date": "2026-03-11T10:00:00+05:30"}
    assert client.post(f"{job_url}/payments", json=first, headers=auth_headers).status_code == 201
    response = client.post(f"{job_url}/payments", json=second, headers=auth_headers)
    assert response.status_code == 201

    detail = response.json()
    assert [payment["date"] for payment in detail["payments"]] == ["2026-03-10T10:00:00", "2026-03-11T04:30:00"]

    [sale] = client.get("/sales", params={"received_by": "Ravi"}, headers=auth_headers).json()
    assert sale["amount"] == "1000.00"
    assert sale["date"] == "2026-03-11T04:30:00"
    assert sale["payment_mode"] == "UPI"


def test_close_job_card(client, auth_headers, job_card):
    closed = client.post(
        f"/jobcards/{job_card['id']}/close",
        json={"note": "Delivered to owner", "final_payment_mode": "UPI", "invoice_number": "INV-1"},
        headers=auth_headers,
    ).json()
    assert closed["status"] == "DELIVERED"
    assert closed["out_date"] is not None
    assert closed["final_payment_mode"] == "UPI"
    assert closed["additional_notes"] == "Delivered to owner"

    delivered = client.get("/jobcards", params={"status": "DELIVERED"}, headers=auth_headers).json()
    assert [row["id"] for row in delivered] == [job_card["id"]]


def test_cancelled_job_cannot_be_closed(client, auth_headers, job_card):
    client.put(f"/jobcards/{job_card['id']}", json={"status": "cancelled"}, headers=auth_headers)
    response = client.post(f"/jobcards/{job_card['id']}/close", json={}, headers=auth_headers)
    assert response.status_code == 400


def test_apply_template(client, auth_headers, job_card):
    template = client.post(
        "/job-card-templates",
        json={
            "name": "Full wash",
            "category": "washing",
            "items": [
                {"line_type": "LABOUR", "description": "Foam wash", "unit_price": "400"},
                {"line_type": "PART", "description": "Wax", "quantity": 2, "unit_price": "150"},
            ],
        },
        headers=auth_headers,
    ).json()
    assert template["estimated_total"] == "700.00"
    assert [item["sort_order"] for item in template["items"]] == [0, 1]

    detail = client.post(f"/jobcards/{job_card['id']}/apply-template/{template['id']}", headers=auth_headers).json()
    assert detail["template_used"] == "WASHING"
    assert len(detail["line_items"]) == 2
    assert detail["grand_total"] == "700.00"

    client.put(f"/job-card-templates/{template['id']}", json={"is_active": False}, headers=auth_headers)
    response = client.post(f"/jobcards/{job_card['id']}/apply-template/{template['id']}", headers=auth_headers)
    assert response.status_code == 400
    assert client.get("/job-card-templates", headers=auth_headers).json() == []


def test_delete_job_card_drops_its_sales(client, auth_headers, job_card):
    client.post(f"/jobcards/{job_card['id']}/payments", json={"amount": "500", "payment_mode": "CASH"}, headers=auth_headers)
    assert len(client.get("/sales", headers=auth_headers).json()) == 1

    assert client.delete(f"/jobcards/{job_card['id']}", headers=auth_headers).status_code == 200
    assert client.get("/sales", headers=auth_headers).json() == []
    assert client.get(f"/jobcards/{job_card['id']}", headers=auth_headers).status_code == 404
