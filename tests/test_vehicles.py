def _vehicle(client, auth_headers, **overrides):
    payload = {"reg_number": "  mh12 ab 1 ", "owner_name": " Meena ", "make": "Honda"}
    payload.update(overrides)
    return client.post("/vehicles", json=payload, headers=auth_headers)


def test_reg_number_is_trimmed_and_upper_cased(client, auth_headers):
    response = _vehicle(client, auth_headers)
    assert response.status_code == 201
    vehicle = response.json()
    assert vehicle["reg_number"] == "MH12 AB 1"
    assert vehicle["owner_name"] == "Meena"

    history = client.get("/vehicles/by-reg/mh12 ab 1/history", headers=auth_headers)
    assert history.status_code == 200
    assert history.json()["vehicle"]["id"] == vehicle["id"]


def test_duplicate_reg_number_conflicts(client, auth_headers):
    assert _vehicle(client, auth_headers).status_code == 201
    response = _vehicle(client, auth_headers, reg_number="MH12 AB 1", owner_name="Someone else")
    assert response.status_code == 409
    assert len(client.get("/vehicles", headers=auth_headers).json()) == 1


def test_update_to_existing_reg_number_conflicts(client, auth_headers):
    _vehicle(client, auth_headers)
    other = _vehicle(client, auth_headers, reg_number="KA05 XY 9").json()

    response = client.put(f"/vehicles/{other['id']}", json={"reg_number": "mh12 ab 1"}, headers=auth_headers)
    assert response.status_code == 409

    unchanged = client.get(f"/vehicles/{other['id']}", headers=auth_headers).json()
    assert unchanged["reg_number"] == "KA05 XY 9"

    renamed = client.put(f"/vehicles/{other['id']}", json={"reg_number": " ka05 xy 10"}, headers=auth_headers)
    assert renamed.status_code == 200
    assert renamed.json()["reg_number"] == "KA05 XY 10"
