"""
Tests for role listing and company-scoped user administration.
"""


async def role_id(client, name: str) -> str:
    roles = (await client.get("/api/roles")).json()
    return next(role["id"] for role in roles if role["name"] == name)


async def test_admin_lists_roles(alice):
    response = await alice.get("/api/roles")

    assert response.status_code == 200
    assert [role["name"] for role in response.json()] == ["admin", "user"]


async def test_regular_user_cannot_list_roles(bob):
    response = await bob.get("/api/roles")

    assert response.status_code == 403
    assert response.json() == {"message": "Forbidden"}


async def test_admin_routes_require_session(client):
    assert (await client.get("/api/roles")).status_code == 401
    assert (await client.get("/api/users")).status_code == 401
    response = await client.post("/api/users/anyone/roles", json={"roleId": "x"})
    assert response.status_code == 401


async def test_admin_lists_only_own_company_users(alice, bob, mallory):
    response = await alice.get("/api/users")

    assert response.status_code == 200
    users = response.json()
    assert {u["username"] for u in users} == {"alice", "bob"}
    assert all(u["company_id"] == alice.user["company_id"] for u in users)
    by_name = {u["username"]: u for u in users}
    assert [r["name"] for r in by_name["alice"]["roles"]] == ["admin"]
    assert [r["name"] for r in by_name["bob"]["roles"]] == ["user"]
    assert "password_hash" not in response.text


async def test_regular_user_cannot_list_users(bob):
    assert (await bob.get("/api/users")).status_code == 403


async def test_admin_assigns_role_within_company(alice, bob):
    admin_role = await role_id(alice, "admin")

    response = await alice.post(f"/api/users/{bob.user['id']}/roles", json={"roleId": admin_role})

    assert response.status_code == 200
    assert response.json() == {"message": "Role assigned successfully"}
    me = (await bob.get("/api/user")).json()
    assert sorted(r["name"] for r in me["roles"]) == ["admin", "user"]
    # bob now passes the admin check
    assert (await bob.get("/api/roles")).status_code == 200


async def test_repeated_assignment_succeeds(alice, bob):
    user_role = await role_id(alice, "user")
    url = f"/api/users/{bob.user['id']}/roles"

    first = await alice.post(url, json={"roleId": user_role})
    second = await alice.post(url, json={"roleId": user_role})

    assert first.status_code == second.status_code == 200
    me = (await bob.get("/api/user")).json()
    assert [r["name"] for r in me["roles"]] == ["user"]


async def test_admin_cannot_assign_outside_company(alice, mallory):
    admin_role = await role_id(alice, "admin")

    response = await alice.post(
        f"/api/users/{mallory.user['id']}/roles", json={"roleId": admin_role}
    )

    assert response.status_code == 403
    me = (await mallory.get("/api/user")).json()
    assert [r["name"] for r in me["roles"]] == ["admin"]


async def test_assign_to_missing_user_is_403(alice):
    admin_role = await role_id(alice, "admin")

    response = await alice.post("/api/users/01ARZ3NDEKTSV4RRFFQ69G5FAV/roles", json={"roleId": admin_role})

    assert response.status_code == 403


async def test_assign_unknown_role_is_404(alice, bob):
    response = await alice.post(f"/api/users/{bob.user['id']}/roles", json={"roleId": "no-such-role"})

    assert response.status_code == 404
    assert response.json() == {"message": "Role not found"}


async def test_regular_user_cannot_assign_roles(alice, bob):
    admin_role = await role_id(alice, "admin")

    response = await bob.post(f"/api/users/{bob.user['id']}/roles", json={"roleId": admin_role})

    assert response.status_code == 403


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
