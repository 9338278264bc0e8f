from datetime import datetime, timedelta, timezone

import pytest


class TestFriendshipApi:
    """HTTP surface of the friendship lifecycle"""

    @pytest.mark.asyncio
    async def test_anonymous_request_is_unauthenticated(self, client, users):
        response = await client.post("/friendships", data={"username": "bobby"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthenticated!"

    @pytest.mark.asyncio
    async def test_expired_cookie_is_treated_as_anonymous(self, client, users, token_service):
        issued_at = datetime.now(timezone.utc) - timedelta(minutes=61)
        token, _ = token_service.issue_token("alice", issued_at=issued_at)

        response = await client.get("/friends", headers={"Cookie": f"Token={token}"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_send_request(self, client, users, auth_headers):
        response = await client.post("/friendships", data={"username": "bobby"}, headers=auth_headers("alice"))

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["user_id"] == users["alice"].id
        assert body["data"]["friend_id"] == users["bobby"].id

    @pytest.mark.asyncio
    async def test_send_request_validation(self, client, users, auth_headers):
        headers = auth_headers("alice")

        response = await client.post("/friendships", data={}, headers=headers)
        assert response.status_code == 400

        response = await client.post("/friendships", data={"username": "alice"}, headers=headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "cannot befriend self"

        response = await client.post("/friendships", data={"username": "nobody"}, headers=headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_duplicate_request_conflicts(self, client, users, auth_headers):
        await client.post("/friendships", data={"username": "bobby"}, headers=auth_headers("alice"))

        response = await client.post("/friendships", data={"username": "alice"}, headers=auth_headers("bobby"))
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_accept_flow(self, client, users, auth_headers):
        created = await client.post("/friendships", data={"username": "bobby"}, headers=auth_headers("alice"))
        edge_id = created.json()["data"]["id"]

        requests = await client.get("/friends/requests", params={"page": 0}, headers=auth_headers("bobby"))
        assert requests.status_code == 200
        assert [row["screen_name"] for row in requests.json()["data"]["friends"]] == ["alice"]

        profile = await client.get("/profile/bobby", headers=auth_headers("alice"))
        assert profile.json()["data"] == {"username": "bobby", "status": "pending_from_me", "friendship_id": edge_id}
        profile = await client.get("/profile/alice", headers=auth_headers("bobby"))
        assert profile.json()["data"]["status"] == "invitee"

        # only the recipient decides
        response = await client.put(f"/friends/requests/{edge_id}", data={"state": "accepted"}, headers=auth_headers("alice"))
        assert response.status_code == 403

        response = await client.put(f"/friends/requests/{edge_id}", data={"state": "accepted"}, headers=auth_headers("bobby"))
        assert response.status_code == 200
        assert response.json()["data"]["accepted"] is True
        assert response.json()["data"]["decided_at"] is not None

        for viewer, other in (("alice", "bobby"), ("bobby", "alice")):
            friends = await client.get("/friends", headers=auth_headers(viewer))
            data = friends.json()["data"]
            assert [row["screen_name"] for row in data["friends"]] == [other]
            assert data["records"] == 1
            assert data["pages"] == 1

            profile = await client.get(f"/profile/{other}", headers=auth_headers(viewer))
            assert profile.json()["data"]["status"] == "friend"

    @pytest.mark.asyncio
    async def test_reject_flow(self, client, users, auth_headers):
        created = await client.post("/friendships", data={"username": "bobby"}, headers=auth_headers("alice"))
        edge_id = created.json()["data"]["id"]

        response = await client.put(f"/friends/requests/{edge_id}", data={"state": "rejected"}, headers=auth_headers("bobby"))
        assert response.status_code == 200
        assert response.json()["data"]["rejected"] is True

        profile = await client.get("/profile/bobby", headers=auth_headers("alice"))
        assert profile.json()["data"]["status"] == "rejector"

        rejected = await client.get("/friends/requests/rejected", headers=auth_headers("bobby"))
        assert [row["screen_name"] for row in rejected.json()["data"]["friends"]] == ["alice"]

        again = await client.post("/friendships", data={"username": "bobby"}, headers=auth_headers("alice"))
        assert again.status_code == 409
        assert again.json()["detail"] == "User already have rejected your request!"

        response = await client.put(f"/friends/requests/{edge_id}", data={"state": "accepted"}, headers=auth_headers("bobby"))
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_cancel_flow(self, client, users, auth_headers):
        created = await client.post("/friendships", data={"username": "bobby"}, headers=auth_headers("alice"))
        edge_id = created.json()["data"]["id"]

        response = await client.put(f"/friends/requests/{edge_id}", data={"state": "cancelled"}, headers=auth_headers("bobby"))
        assert response.status_code == 403

        response = await client.put(f"/friends/requests/{edge_id}", data={"state": "cancelled"}, headers=auth_headers("alice"))
        assert response.status_code == 200
        assert response.json()["data"]["cancelled"] is True

        requests = await client.get("/friends/requests", headers=auth_headers("bobby"))
        assert requests.json()["data"]["friends"] == []

    @pytest.mark.asyncio
    async def test_bad_state_and_unknown_request(self, client, users, auth_headers):
        created = await client.post("/friendships", data={"username": "bobby"}, headers=auth_headers("alice"))
        edge_id = created.json()["data"]["id"]

        response = await client.put(f"/friends/requests/{edge_id}", data={"state": "maybe"}, headers=auth_headers("bobby"))
        assert response.status_code == 400

        response = await client.put("/friends/requests/9999", data={"state": "accepted"}, headers=auth_headers("bobby"))
        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/friends", "/friends/requests", "/friends/requests/rejected"])
    async def test_lists_require_authentication(self, client, users, path):
        response = await client.get(path)
        assert response.status_code == 401

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/friends", "/friends/requests", "/friends/requests/rejected"])
    async def test_negative_page_is_rejected(self, client, users, auth_headers, path):
        response = await client.get(path, params={"page": -1}, headers=auth_headers("alice"))
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_profile_views(self, client, users, auth_headers):
        response = await client.get("/profile/alice", headers=auth_headers("alice"))
        assert response.json()["data"]["status"] == "self"

        response = await client.get("/profile/alice")
        assert response.json()["data"]["status"] == "not_related"

        response = await client.get("/profile/carol", headers=auth_headers("alice"))
        assert response.json()["data"] == {"username": "carol", "status": "not_related", "friendship_id": None}

        response = await client.get("/profile/nobody", headers=auth_headers("alice"))
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_profile_for_anonymous_viewer(self, client, users):
        response = await client.get("/profile/nobody")
        assert response.status_code == 404
