"""个人团队 REST API 测试"""


class TestTeamApi:
    async def test_get_empty_team(self, client, alice, auth):
        resp = await client.get("/api/team/my-team", headers=auth(alice))
        assert resp.status_code == 200
        assert resp.json() == []

    async def test_add_member(self, client, alice, bob, auth):
        resp = await client.post(
            "/api/team/my-team/add", json={"email": bob.email}, headers=auth(alice)
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["message"] == "Team member added successfully"
        assert data["team"] == [{"id": bob.user_id, "name": "Bob", "email": bob.email}]

    async def test_add_unknown_email_404(self, client, alice, auth):
        resp = await client.post(
            "/api/team/my-team/add", json={"email": "ghost@example.com"}, headers=auth(alice)
        )
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "USER_NOT_FOUND"

    async def test_add_self_400(self, client, alice, auth):
        resp = await client.post(
            "/api/team/my-team/add", json={"email": alice.email}, headers=auth(alice)
        )
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_OPERATION"

    async def test_add_duplicate_409(self, client, alice, bob, auth):
        await client.post("/api/team/my-team/add", json={"email": bob.email}, headers=auth(alice))
        resp = await client.post(
            "/api/team/my-team/add", json={"email": bob.email}, headers=auth(alice)
        )
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "DUPLICATE_MEMBER"

        resp = await client.get("/api/team/my-team", headers=auth(alice))
        assert [m["id"] for m in resp.json()] == [bob.user_id]

    async def test_remove_member(self, client, alice, bob, auth):
        await client.post("/api/team/my-team/add", json={"email": bob.email}, headers=auth(alice))
        resp = await client.delete(f"/api/team/my-team/{bob.user_id}", headers=auth(alice))
        assert resp.status_code == 200
        assert resp.json() == {"message": "Team member removed", "team": []}

    async def test_remove_absent_member_is_noop(self, client, alice, bob, carol, auth):
        await client.post("/api/team/my-team/add", json={"email": bob.email}, headers=auth(alice))
        resp = await client.delete(f"/api/team/my-team/{carol.user_id}", headers=auth(alice))
        assert resp.status_code == 200
        assert [m["id"] for m in resp.json()["team"]] == [bob.user_id]

    async def test_remove_without_team_404(self, client, alice, bob, auth):
        resp = await client.delete(f"/api/team/my-team/{bob.user_id}", headers=auth(alice))
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "TEAM_NOT_FOUND"

    async def test_requires_identity(self, client):
        resp = await client.get("/api/team/my-team")
        assert resp.status_code == 401
