def test_user_crud_as_admin(client, admin_headers):
    created = client.post(
        "/api/users",
        json={"name": "Ada", "email": "ada@example.com"},
        headers=admin_headers,
    )
    assert created.status_code == 200
    user = created.json()
    assert user["id"] == 1
    assert user["image"] is None
    assert user["createdAt"]

    assert client.get("/api/users").json() == [user]
    assert client.get(f"/api/users/{user['id']}").json() == user

    updated = client.put(
        f"/api/users/{user['id']}",
        json={"name": "Ada Lovelace", "image": "/avatars/ada.png"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["name"] == "Ada Lovelace"
    assert updated.json()["createdAt"] == user["createdAt"]

    assert client.delete(f"/api/users/{user['id']}", headers=admin_headers).json()["deleted"] is True
    assert client.get(f"/api/users/{user['id']}").status_code == 404


def test_user_ids_follow_max_plus_one(client, admin_headers):
    store = client.app.state.store
    store.save("users", [{"id": 4, "name": "Old", "email": "old@example.com", "image": None}])

    created = client.post("/api/users", json={"name": "New", "email": "new@example.com"}, headers=admin_headers)

    assert created.json()["id"] == 5


def test_user_writes_need_admin_role(client, manager_headers):
    resp = client.post("/api/users", json={"name": "X", "email": "x@example.com"}, headers=manager_headers)
    assert resp.status_code == 403


def test_user_update_rejects_unknown_fields(client, admin_headers):
    user = client.post("/api/users", json={"name": "Ada", "email": "ada@example.com"}, headers=admin_headers).json()
    resp = client.put(f"/api/users/{user['id']}", json={"role": "admin"}, headers=admin_headers)
    assert resp.status_code == 422


def test_update_and_delete_of_missing_user(client, admin_headers):
    assert client.put("/api/users/99", json={"name": "Ghost"}, headers=admin_headers).status_code == 404
    resp = client.delete("/api/users/99", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "deleted": False}
