from gradeboard.core.security import create_access_token

PASSWORD = "password123"


def login(client, email: str, password: str = PASSWORD):
    return client.post("/auth/login", json={"email": email, "password": password})


def test_login_returns_bearer_token(client, seed):
    r = login(client, "student1@example.com")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["token_type"] == "bearer"

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "student1@example.com"
    assert me.json()["role"] == "student"


def test_login_rejects_bad_password(client, seed):
    r = login(client, "student1@example.com", "wrong-password")
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid email or password"


def test_register_creates_student(client, seed):
    r = client.post(
        "/auth/register",
        json={"email": "new@example.com", "password": "longenough", "full_name": "New"},
    )
    assert r.status_code == 201, r.text
    assert r.json()["role"] == "student"

    assert login(client, "new@example.com", "longenough").status_code == 200

    dup = client.post(
        "/auth/register",
        json={"email": "new@example.com", "password": "longenough"},
    )
    assert dup.status_code == 400


def test_invalid_tokens_are_unauthorized(client, seed):
    assert client.get("/auth/me").status_code == 401

    r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401

    ghost = create_access_token(data={"sub": "424242"})
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {ghost}"})
    assert r.status_code == 401
