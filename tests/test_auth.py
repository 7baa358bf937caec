def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_routes_require_token(client):
    assert client.get("/employees").status_code == 401
    assert client.get("/dashboard", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401


def test_register_login_and_me(client, auth_headers):
    me = client.get("/auth/me", headers=auth_headers)
    assert me.status_code == 200
    assert me.json()["email"] == "owner@garage.test"

    login = client.post("/auth/login", json={"email": "OWNER@garage.test", "password": "secret123"})
    assert login.status_code == 200
    assert login.json()["token_type"] == "bearer"

    form = client.post("/auth/token", data={"username": "owner@garage.test", "password": "secret123"})
    assert form.status_code == 200


def test_register_duplicate_email_conflicts(client, auth_headers):
    response = client.post(
        "/auth/register",
        json={"email": "owner@garage.test", "name": "Other", "password": "secret123"},
    )
    assert response.status_code == 409


def test_login_with_wrong_password(client, auth_headers):
    response = client.post("/auth/login", json={"email": "owner@garage.test", "password": "wrong-pass"})
    assert response.status_code == 401
