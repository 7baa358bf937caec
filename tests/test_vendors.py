import pytest


@pytest.fixture
def vendor(client, auth_headers):
    response = client.post(
        "/vendors",
        json={"name": "Spares Depot", "gst_number": "29abcde1234f1z5"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


def _bill(client, auth_headers, vendor, **overrides):
    payload = {
        "amount": "10000",
        "amount_paid": "4000",
        "payment_mode": "CASH",
        "invoice_number": "INV-77",
        "date": "2026-03-04T12:00:00",
    }
    payload.update(overrides)
    response = client.post(f"/vendors/{vendor['id']}/payments", json=payload, headers=auth_headers)
    return response


def test_partial_payment_tracks_due_and_expense(client, auth_headers, vendor):
    assert vendor["gst_number"] == "29ABCDE1234F1Z5"
    payment = _bill(client, auth_headers, vendor).json()
    assert payment["status"] == "PARTIAL"

    detail = client.get(f"/vendors/{vendor['id']}", headers=auth_headers).json()
    assert detail["total_due"] == "6000.00"
    assert detail["summary"]["total_billed"] == "10000.00"
    assert detail["summary"]["pending_payments"] == 1

    expense = client.get(f"/expenses/{payment['related_expense_id']}", headers=auth_headers).json()
    assert expense["category"] == "Vendor Payment"
    assert expense["amount"] == "4000.00"
    assert expense["reference"] == "INV-77"


def test_settling_and_reverting_a_bill(client, auth_headers, vendor):
    payment = _bill(client, auth_headers, vendor).json()
    url = f"/vendors/{vendor['id']}/payments/{payment['id']}"

    settled = client.put(url, json={"amount_paid": "10000"}, headers=auth_headers).json()
    assert settled["status"] == "PAID"
    assert settled["related_expense_id"] == payment["related_expense_id"]
    assert client.get(f"/vendors/{vendor['id']}", headers=auth_headers).json()["total_due"] == "0.00"
    expense = client.get(f"/expenses/{payment['related_expense_id']}", headers=auth_headers).json()
    assert expense["amount"] == "10000.00"
    assert expense["version_number"] == 2

    reverted = client.put(url, json={"amount_paid": "0"}, headers=auth_headers).json()
    assert reverted["status"] == "PENDING"
    assert reverted["related_expense_id"] is None
    assert client.get(f"/expenses/{payment['related_expense_id']}", headers=auth_headers).status_code == 404
    assert client.get(f"/vendors/{vendor['id']}", headers=auth_headers).json()["total_due"] == "10000.00"


def test_overpayment_is_rejected(client, auth_headers, vendor):
    assert _bill(client, auth_headers, vendor, amount_paid="12000").status_code == 400

    payment = _bill(client, auth_headers, vendor).json()
    response = client.put(
        f"/vendors/{vendor['id']}/payments/{payment['id']}",
        json={"amount": "3000"},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_deleting_payment_reduces_due(client, auth_headers, vendor):
    payment = _bill(client, auth_headers, vendor).json()
    response = client.delete(f"/vendors/{vendor['id']}/payments/{payment['id']}", headers=auth_headers)
    assert response.status_code == 200

    detail = client.get(f"/vendors/{vendor['id']}", headers=auth_headers).json()
    assert detail["total_due"] == "0.00"
    assert detail["payments"] == []
    assert client.get(f"/expenses/{payment['related_expense_id']}", headers=auth_headers).status_code == 404


def test_unpaid_bill_has_no_expense(client, auth_headers, vendor):
    payment = _bill(client, auth_headers, vendor, amount_paid="0", payment_mode=None).json()
    assert payment["status"] == "PENDING"
    assert payment["related_expense_id"] is None
    assert client.get("/expenses", headers=auth_headers).json() == []


def test_deleting_bill_expense_unlinks_payment(client, auth_headers, vendor):
    payment = _bill(client, auth_headers, vendor).json()
    assert client.delete(f"/expenses/{payment['related_expense_id']}", headers=auth_headers).status_code == 200

    [listed] = client.get(f"/vendors/{vendor['id']}", headers=auth_headers).json()["payments"]
    assert listed["related_expense_id"] is None
    assert listed["status"] == "PARTIAL"
    assert listed["amount_paid"] == "4000.00"


def test_deleting_vendor_removes_payments_and_expenses(client, auth_headers, vendor):
    first = _bill(client, auth_headers, vendor).json()
    second = _bill(client, auth_headers, vendor, invoice_number="INV-78", amount_paid="2500").json()
    expense_ids = [first["related_expense_id"], second["related_expense_id"]]

    assert client.delete(f"/vendors/{vendor['id']}", headers=auth_headers).status_code == 200

    assert client.get(f"/vendors/{vendor['id']}", headers=auth_headers).status_code == 404
    for expense_id in expense_ids:
        assert client.get(f"/expenses/{expense_id}", headers=auth_headers).status_code == 404
    assert client.get("/expenses", headers=auth_headers).json() == []
