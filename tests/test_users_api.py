from lifelink.data_access.dynamodb import DynamoDataAccess


def test_register_returns_user_without_password(client):
    response = client.post("/api/register", json={
        "name": "Asha",
        "phone": "9876543210",
        "password": "s3cret-pass",
        "profilePhoto": "photos/asha.png",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "User registered successfully"
    assert body["user"]["phone"] == "9876543210"
    assert body["user"]["profilePhoto"] == "photos/asha.png"
    assert body["user"]["donations"] == []
    assert "password" not in body["user"]


def test_password_is_stored_hashed(register_user, data_access):
    user = register_user(password="s3cret-pass")

    stored = data_access.get_user(user["id"])
    assert stored.password != "s3cret-pass"
    assert stored.password.startswith("$2")


def test_duplicate_phone_conflicts(client, register_user):
    register_user(phone="9876543210")

    response = client.post("/api/register", json={
        "name": "Someone else",
        "phone": "9876543210",
        "password": "other",
        "profilePhoto": "p.png",
    })

    assert response.status_code == 409
    assert response.json() == {"error": "User with this phone number already exists"}


def test_register_requires_all_fields(client):
    response = client.post("/api/register", json={"name": "Asha", "phone": "9876543210"})

    assert response.status_code == 400
    assert "error" in response.json()


def test_login(client, register_user):
    user = register_user(phone="9876543210", password="s3cret-pass")

    response = client.post("/api/login", json={"phone": "9876543210", "password": "s3cret-pass"})

    assert response.status_code == 200
    assert response.json()["message"] == "Login successful"
    assert response.json()["user"]["id"] == user["id"]
    assert "password" not in response.json()["user"]


def test_login_failures_are_indistinguishable(client, register_user):
    register_user(phone="9876543210", password="s3cret-pass")

    wrong_password = client.post("/api/login", json={"phone": "9876543210", "password": "nope"})
    unknown_phone = client.post("/api/login", json={"phone": "1111111111", "password": "s3cret-pass"})

    assert wrong_password.status_code == unknown_phone.status_code == 401
    assert wrong_password.json() == unknown_phone.json() == {"error": "Invalid phone number or password"}


def test_get_user(client, register_user):
    user = register_user()

    response = client.get(f"/api/user/{user['id']}")

    assert response.status_code == 200
    assert response.json()["name"] == "Asha"
    assert "password" not in response.json()


def test_get_unknown_user(client):
    response = client.get("/api/user/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


def test_partial_update(client, register_user):
    user = register_user()

    response = client.put(f"/api/user/{user['id']}", json={"name": "Asha K"})

    assert response.status_code == 200
    assert response.json()["message"] == "Profile updated successfully"
    assert response.json()["user"]["name"] == "Asha K"
    assert response.json()["user"]["phone"] == user["phone"]
    assert response.json()["user"]["profilePhoto"] == user["profilePhoto"]


def test_update_phone_moves_the_login(client, register_user):
    user = register_user(phone="9876543210", password="s3cret-pass")

    response = client.put(f"/api/user/{user['id']}", json={"phone": "9000000000"})
    assert response.status_code == 200

    assert client.post("/api/login", json={"phone": "9000000000", "password": "s3cret-pass"}).status_code == 200
    assert client.post("/api/login", json={"phone": "9876543210", "password": "s3cret-pass"}).status_code == 401
    # the old number is free again
    register_user(phone="9876543210", name="Newcomer")


def test_update_phone_to_someone_elses_conflicts(client, register_user):
    first = register_user(phone="9876543210")
    register_user(phone="9000000000", name="Other")

    response = client.put(f"/api/user/{first['id']}", json={"phone": "9000000000"})

    assert response.status_code == 409
    assert response.json() == {"error": "Phone number already in use"}


def test_update_with_own_phone_is_allowed(client, register_user):
    user = register_user(phone="9876543210")

    response = client.put(f"/api/user/{user['id']}", json={"phone": "9876543210", "name": "A"})

    assert response.status_code == 200


def test_update_unknown_user(client):
    response = client.put("/api/user/nobody", json={"name": "X"})

    assert response.status_code == 404


def test_list_users(client, register_user):
    register_user(phone="9876543210")
    register_user(phone="9000000000", name="Other")

    response = client.get("/api/users")

    assert response.status_code == 200
    assert sorted(user["phone"] for user in response.json()) == ["9000000000", "9876543210"]
    assert all("password" not in user for user in response.json())


def test_long_passphrase_can_register_and_login(client):
    passphrase = "correct horse battery staple " * 3
    assert len(passphrase.encode("utf-8")) > 72

    registered = client.post("/api/register", json={
        "name": "Asha", "phone": "9876543210", "password": passphrase,
    })
    assert registered.status_code == 201

    response = client.post("/api/login", json={"phone": "9876543210", "password": passphrase})

    assert response.status_code == 200
    assert response.json()["user"]["id"] == registered.json()["user"]["id"]


def test_users_are_listed_oldest_first(client, register_user):
    phones = ["9000000003", "9000000001", "9000000002", "9000000000"]
    for phone in phones:
        register_user(phone=phone)

    response = client.get("/api/users")

    assert [user["phone"] for user in response.json()] == phones


def test_update_of_vanished_user_frees_the_new_phone(client, register_user, monkeypatch):
    user = register_user(phone="9876543210")
    monkeypatch.setattr(DynamoDataAccess, "update_user", lambda self, user_id, changes: None)

    response = client.put(f"/api/user/{user['id']}", json={"phone": "9000000000"})

    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}
    monkeypatch.undo()
    register_user(phone="9000000000", name="Newcomer")
