def _advance(client, auth_headers, employee, **overrides):
    payload = {
        "employee_id": employee["id"],
        "amount": "5000",
        "date": "2026-03-05T10:00:00",
        "payment_mode": "upi",
        "paid_by": "Owner",
    }
    payload.update(overrides)
    response = client.post("/advances", json=payload, headers=auth_headers)
    assert response.status_code == 201
    return response.json()


def test_advance_mirrors_into_expense(client, auth_headers, employee):
    advance = _advance(client, auth_headers, employee)
    assert advance["payment_mode"] == "UPI"
    assert advance["employee_name"] == "Ravi"

    expense = client.get(f"/expenses/{advance['related_expense_id']}", headers=auth_headers).json()
    assert expense["category"] == "Employee Advance"
    assert expense["vendor"] == "Ravi"
    assert expense["amount"] == "5000.00"
    assert expense["reference"] == f"Advance #{advance['id']}"


def test_advance_edit_appends_expense_version(client, auth_headers, employee):
    advance = _advance(client, auth_headers, employee)
    updated = client.put(f"/advances/{advance['id']}", json={"amount": "6000"}, headers=auth_headers)
    assert updated.status_code == 200
    assert updated.json()["related_expense_id"] == advance["related_expense_id"]

    expense = client.get(f"/expenses/{advance['related_expense_id']}", headers=auth_headers).json()
    assert expense["amount"] == "6000.00"
    assert expense["version_number"] == 2
    assert [version["version_number"] for version in expense["versions"]] == [2, 1]


def test_advance_delete_removes_expense(client, auth_headers, employee):
    advance = _advance(client, auth_headers, employee)
    assert client.delete(f"/advances/{advance['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/expenses/{advance['related_expense_id']}", headers=auth_headers).status_code == 404
    assert client.get("/advances", headers=auth_headers).json() == []


def test_unknown_payment_mode_is_rejected(client, auth_headers, employee):
    response = client.post(
        "/advances",
        json={"employee_id": employee["id"], "amount": "100", "payment_mode": "CHEQUE"},
        headers=auth_headers,
    )
    assert response.status_code == 422


def test_expense_edit_keeps_history(client, auth_headers):
    created = client.post(
        "/expenses",
        json={"amount": "1200", "category": "Rent", "payment_mode": "BANK", "date": "2026-03-01T09:00:00"},
        headers=auth_headers,
    )
    assert created.status_code == 201
    expense = created.json()
    assert expense["version_number"] == 1

    updated = client.put(
        f"/expenses/{expense['id']}",
        json={"amount": "1500", "note": "Revised"},
        headers=auth_headers,
    ).json()
    assert updated["amount"] == "1500.00"
    assert updated["category"] == "Rent"
    assert updated["note"] == "Revised"
    assert updated["current_version_id"] == updated["versions"][0]["id"]
    assert updated["versions"][1]["amount"] == "1200.00"

    listed = client.get("/expenses", params={"category": "rent"}, headers=auth_headers).json()
    assert [row["id"] for row in listed] == [expense["id"]]

    assert client.delete(f"/expenses/{expense['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/expenses/{expense['id']}", headers=auth_headers).status_code == 404


def test_sale_edit_replaces_current_version(client, auth_headers):
    sale = client.post(
        "/sales",
        json={"amount": "800", "payment_mode": "CASH", "received_by": "Suresh", "date": "2026-03-02T11:00:00"},
        headers=auth_headers,
    ).json()

    updated = client.put(
        f"/sales/{sale['id']}",
        json={"amount": "850", "payment_mode": "card", "category": "Wash"},
        headers=auth_headers,
    ).json()
    assert updated["amount"] == "850.00"
    assert updated["payment_mode"] == "CARD"
    assert updated["received_by"] == "Suresh"
    assert updated["version_number"] == 2

    versions = client.get(f"/sales/{sale['id']}/versions", headers=auth_headers).json()
    assert [version["amount"] for version in versions] == ["850.00", "800.00"]

    by_receiver = client.get("/sales", params={"received_by": "SURESH"}, headers=auth_headers).json()
    assert len(by_receiver) == 1

    client.delete(f"/sales/{sale['id']}", headers=auth_headers)
    assert client.get(f"/sales/{sale['id']}", headers=auth_headers).status_code == 404


def test_advance_date_with_offset_is_stored_as_utc(client, auth_headers, employee):
    advance = _advance(client, auth_headers, employee, date="2026-03-11T10:00:00+05:30")
    assert advance["date"] == "2026-03-11T04:30:00"

    expense = client.get(f"/expenses/{advance['related_expense_id']}", headers=auth_headers).json()
    assert expense["date"] == "2026-03-11T04:30:00"


def test_amounts_below_one_paisa_are_rejected(client, auth_headers, employee):
    expense = {"amount": "0.004", "category": "Tea", "payment_mode": "CASH"}
    assert client.post("/expenses", json=expense, headers=auth_headers).status_code == 422
    sale = {"amount": "0.001", "payment_mode": "CASH"}
    assert client.post("/sales", json=sale, headers=auth_headers).status_code == 422
    advance = {"employee_id": employee["id"], "amount": "0.004", "payment_mode": "CASH"}
    assert client.post("/advances", json=advance, headers=auth_headers).status_code == 422

    expense["amount"] = "0.01"
    created = client.post("/expenses", json=expense, headers=auth_headers)
    assert created.status_code == 201
    assert created.json()["amount"] == "0.01"


def test_deleting_advance_expense_unlinks_advance(client, auth_headers, employee):
    advance = _advance(client, auth_headers, employee)
    old_expense_id = advance["related_expense_id"]
    assert client.delete(f"/expenses/{old_expense_id}", headers=auth_headers).status_code == 200

    [listed] = client.get("/advances", headers=auth_headers).json()
    assert listed["related_expense_id"] is None
    assert listed["amount"] == "5000.00"

    updated = client.put(f"/advances/{advance['id']}", json={"amount": "7000"}, headers=auth_headers).json()
    assert updated["related_expense_id"] is not None
    assert updated["related_expense_id"] != old_expense_id

    expense = client.get(f"/expenses/{updated['related_expense_id']}", headers=auth_headers).json()
    assert expense["amount"] == "7000.00"
    assert expense["version_number"] == 1


def test_expense_list_filters(client, auth_headers):
    rows = [
        {"amount": "1200", "category": "Rent", "vendor": "Landlord", "paid_by": "Suresh"},
        {"amount": "900", "category": "Rental deposit", "vendor": "Landlord", "paid_by": "Owner"},
        {"amount": "450", "category": "Spares", "vendor": "Spares Depot", "paid_by": "Owner"},
    ]
    ids = []
    for row in rows:
        response = client.post(
            "/expenses",
            json={**row, "payment_mode": "CASH", "date": "2026-03-03T10:00:00"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        ids.append(response.json()["id"])

    def listed(**params):
        return sorted(row["id"] for row in client.get("/expenses", params=params, headers=auth_headers).json())

    assert listed(category="RENT") == [ids[0]]
    assert listed(category="  rental deposit ") == [ids[1]]
    assert listed(vendor="depot") == [ids[2]]
    assert listed(vendor="land") == [ids[0], ids[1]]
    assert listed(paid_by="owner") == [ids[1], ids[2]]
    assert listed(vendor="landlord", paid_by="OWNER") == [ids[1]]
