MARCH = {"date_from": "2026-03-01", "date_to": "2026-03-31"}


def _seed(client, auth_headers, employee):
    client.post(
        "/sales",
        json={"amount": "1000", "payment_mode": "CASH", "received_by": "Suresh", "date": "2026-03-10T10:00:00"},
        headers=auth_headers,
    )
    client.post(
        "/sales",
        json={"amount": "500", "payment_mode": "UPI", "date": "2026-03-10T15:00:00"},
        headers=auth_headers,
    )
    client.post(
        "/expenses",
        json={
            "amount": "300",
            "category": "Rent",
            "vendor": "Landlord",
            "payment_mode": "BANK",
            "paid_by": "Suresh",
            "date": "2026-03-10T18:00:00",
        },
        headers=auth_headers,
    )
    client.post(
        "/advances",
        json={
            "employee_id": employee["id"],
            "amount": "200",
            "payment_mode": "CASH",
            "paid_by": "Suresh",
            "date": "2026-03-11T09:00:00",
        },
        headers=auth_headers,
    )


def test_dashboard_totals_exclude_advances_from_expenses(client, auth_headers, employee):
    _seed(client, auth_headers, employee)
    dashboard = client.get("/dashboard", params=MARCH, headers=auth_headers)
    assert dashboard.status_code == 200
    data = dashboard.json()

    assert data["sales"]["total"] == "1500.00"
    assert data["sales"]["count"] == 2
    assert data["sales"]["average"] == "750.00"
    assert data["expenses"]["total"] == "300.00"
    assert data["expenses"]["count"] == 1
    assert data["advances"]["total"] == "200.00"
    assert data["advances"]["by_employee"][0]["label"] == "Ravi"

    assert data["kpis"] == {
        "gross_profit": "1200.00",
        "profit_margin_percent": "80.00",
        "expense_ratio_percent": "20.00",
    }


def test_dashboard_breakdowns(client, auth_headers, employee):
    _seed(client, auth_headers, employee)
    data = client.get("/dashboard", params=MARCH, headers=auth_headers).json()

    receivers = {row["label"]: row["amount"] for row in data["sales"]["by_receiver"]}
    assert receivers == {"Suresh": "1000.00", "Untracked": "500.00"}

    [suresh] = [row for row in data["cash_flow"] if row["person"] == "Suresh"]
    assert suresh == {"person": "Suresh", "received": "1000.00", "paid": "500.00", "net": "500.00"}

    [day] = [point for point in data["daily_trends"] if point["date"] == "2026-03-10"]
    assert day["sales"] == "1500.00"
    assert day["expenses"] == "300.00"
    assert day["profit"] == "1200.00"

    assert data["employees"]["active"] == 1
    assert data["employees"]["monthly_salary_liability"] == "30000.00"
    assert data["expenses"]["top_vendors"][0]["label"] == "Landlord"
    assert data["recent_activity"]


def test_dashboard_ignores_other_months(client, auth_headers, employee):
    _seed(client, auth_headers, employee)
    data = client.get(
        "/dashboard",
        params={"date_from": "2026-04-01", "date_to": "2026-04-30"},
        headers=auth_headers,
    ).json()
    assert data["sales"]["count"] == 0
    assert data["kpis"]["profit_margin_percent"] == "0.00"


def test_dashboard_rejects_inverted_range(client, auth_headers):
    response = client.get(
        "/dashboard",
        params={"date_from": "2026-03-31", "date_to": "2026-03-01"},
        headers=auth_headers,
    )
    assert response.status_code == 400
