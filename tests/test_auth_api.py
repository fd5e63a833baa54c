"""Registration, login and current user."""


def test_register(client):
    response = client.post("/auth/register", json={
        "name": "Sam Smith",
        "email": "Sam@Example.com",
        "password": "longenough",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "sam@example.com"
    assert body["role"] == "user"
    assert "hashed_password" not in body


def test_register_duplicate_email(client, respondent_user):
    response = client.post("/auth/register", json={
        "name": "Other Jane",
        "email": "JANE@example.com",
        "password": "longenough",
    })

    assert response.status_code == 409


def test_register_short_password(client):
    response = client.post("/auth/register", json={
        "name": "Sam", "email": "sam@example.com", "password": "short",
    })

    assert response.status_code == 422


def test_login_and_me(client, respondent_user):
    login = client.post("/auth/login", data={"username": "jane@example.com", "password": "password123"})

    assert login.status_code == 200
    token = login.json()["access_token"]
    assert login.json()["token_type"] == "bearer"

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert me.status_code == 200
    assert me.json()["name"] == "Jane Doe"


def test_login_wrong_password(client, respondent_user):
    response = client.post("/auth/login", data={"username": "jane@example.com", "password": "nope"})

    assert response.status_code == 401
    assert response.json()["code"] == "http_401"
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_me_with_invalid_token(client):
    response = client.get("/auth/me", headers={"Authorization": "Bearer garbage"})

    assert response.status_code == 401


def test_health(client):
    response = client.get("/")

    assert response.json()["status"] == "running"


def test_logout_revokes_issued_token(client, respondent_user):
    token = client.post(
        "/auth/login", data={"username": "jane@example.com", "password": "password123"}
    ).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    logout = client.post("/auth/logout", headers=headers)

    assert logout.status_code == 200
    assert logout.json() == {"message": "Successfully logged out"}
    me = client.get("/auth/me", headers=headers)
    assert me.status_code == 401
    assert me.json()["message"] == "Token has been revoked"


def test_login_after_logout_issues_working_token(client, respondent_user):
    credentials = {"username": "jane@example.com", "password": "password123"}
    first = client.post("/auth/login", data=credentials).json()["access_token"]
    client.post("/auth/logout", headers={"Authorization": f"Bearer {first}"})

    second = client.post("/auth/login", data=credentials).json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {second}"})
    assert me.status_code == 200
