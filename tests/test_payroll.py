from app.services.payroll import compute_payslip


def test_compute_payslip_deducts_advances_and_unpaid_leave():
    figures = compute_payslip(3_000_000, 500_000, 2, days_per_month=30)
    assert figures.unpaid_leave_deduction_paise == 200_000
    assert figures.net_pay_paise == 2_300_000


def test_compute_payslip_never_goes_negative():
    figures = compute_payslip(1_000_000, 1_500_000, 0, days_per_month=30)
    assert figures.net_pay_paise == 0


def _march_period(client, auth_headers):
    response = client.post(
        "/payroll/periods",
        json={"name": "2026-03", "start_date": "2026-03-01", "end_date": "2026-03-31"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


def test_period_upsert_by_name(client, auth_headers):
    period = _march_period(client, auth_headers)
    again = client.post(
        "/payroll/periods",
        json={"name": "2026-03", "end_date": "2026-03-30"},
        headers=auth_headers,
    )
    assert again.status_code == 200
    assert again.json()["id"] == period["id"]
    assert again.json()["end_date"].startswith("2026-03-30")

    bad = client.post(
        "/payroll/periods",
        json={"name": "2026-04", "start_date": "2026-04-30", "end_date": "2026-04-01"},
        headers=auth_headers,
    )
    assert bad.status_code == 400


def test_generate_pay_and_unpay(client, auth_headers, employee):
    client.post(
        "/advances",
        json={"employee_id": employee["id"], "amount": "5000", "date": "2026-03-05T10:00:00", "payment_mode": "CASH"},
        headers=auth_headers,
    )
    client.post(
        "/attendance",
        json={"employee_id": employee["id"], "date": "2026-03-12T00:00:00", "status": "UNPAID_LEAVE"},
        headers=auth_headers,
    )
    period = _march_period(client, auth_headers)

    generated = client.post(f"/payroll/periods/{period['id']}/generate", headers=auth_headers)
    assert generated.status_code == 200
    [payslip] = generated.json()
    assert payslip["total_advances"] == "5000.00"
    assert payslip["unpaid_leave_days"] == 1
    assert payslip["unpaid_leave_deduction"] == "1000.00"
    assert payslip["net_pay"] == "24000.00"
    assert len(payslip["advances"]) == 1

    paid = client.post(
        f"/payroll/payslips/{payslip['id']}/pay",
        json={"payment_mode": "bank", "paid_by": "Owner"},
        headers=auth_headers,
    )
    assert paid.status_code == 200
    expense_id = paid.json()["expense_id"]
    assert paid.json()["payslip"]["is_paid"] is True

    expense = client.get(f"/expenses/{expense_id}", headers=auth_headers).json()
    assert expense["category"] == "Salary Payment"
    assert expense["amount"] == "24000.00"
    assert expense["reference"] == "2026-03 - Ravi"

    again = client.post(f"/payroll/payslips/{payslip['id']}/pay", json={"payment_mode": "CASH"}, headers=auth_headers)
    assert again.status_code == 400

    unpaid = client.post(f"/payroll/payslips/{payslip['id']}/unpay", headers=auth_headers)
    assert unpaid.status_code == 200
    assert unpaid.json()["is_paid"] is False
    assert unpaid.json()["related_expense_id"] is None
    assert client.get(f"/expenses/{expense_id}", headers=auth_headers).status_code == 404


def test_regenerate_keeps_paid_payslips(client, auth_headers, employee):
    period = _march_period(client, auth_headers)
    [payslip] = client.post(f"/payroll/periods/{period['id']}/generate", headers=auth_headers).json()
    client.post(
        f"/payroll/payslips/{payslip['id']}/pay",
        json={"payment_mode": "CASH", "create_expense": False},
        headers=auth_headers,
    )
    client.post(
        "/advances",
        json={"employee_id": employee["id"], "amount": "2000", "date": "2026-03-20T10:00:00", "payment_mode": "CASH"},
        headers=auth_headers,
    )

    [regenerated] = client.post(f"/payroll/periods/{period['id']}/generate", headers=auth_headers).json()
    assert regenerated["id"] == payslip["id"]
    assert regenerated["net_pay"] == "30000.00"
    assert regenerated["related_expense_id"] is None


def test_closed_period_cannot_be_generated(client, auth_headers, employee):
    period = _march_period(client, auth_headers)
    closed = client.post(f"/payroll/periods/{period['id']}/close", headers=auth_headers)
    assert closed.json()["status"] == "CLOSED"

    assert client.post(f"/payroll/periods/{period['id']}/generate", headers=auth_headers).status_code == 400
    assert client.post(f"/payroll/periods/{period['id']}/close", headers=auth_headers).status_code == 400

    reopened = client.post(f"/payroll/periods/{period['id']}/reopen", headers=auth_headers)
    assert reopened.json()["status"] == "OPEN"
    assert reopened.json()["closed_at"] is None


def test_employee_payslip_detail(client, auth_headers, employee):
    period = _march_period(client, auth_headers)
    missing = client.get(f"/payroll/periods/{period['id']}/payslips/{employee['id']}", headers=auth_headers)
    assert missing.status_code == 404

    client.post(f"/payroll/periods/{period['id']}/generate", headers=auth_headers)
    detail = client.get(f"/payroll/periods/{period['id']}/payslips/{employee['id']}", headers=auth_headers).json()
    assert detail["employee"]["name"] == "Ravi"
    assert detail["payslip"]["gross_salary"] == "30000.00"
