"""
End-to-end notification flow through the HTTP API.

Comments and likes on another user's post store a notification and push it
to the author's live socket when they have joined; otherwise the
notification is only available through GET /api/notifications.
"""

import httpx

from app.main import app
from conftest import FakeWebSocket, auth_headers

ALICE = auth_headers("user_alice", name="Alice", email="alice@example.com")
BOB = auth_headers("user_bob", name="Bob", email="bob@example.com")


async def create_post(client: httpx.AsyncClient, headers: dict) -> str:
    resp = await client.post(
        "/api/posts",
        json={"title": "Hello", "content": "First post"},
        headers=headers,
    )
    assert resp.status_code == 201, f"Create post failed: {resp.text}"
    return resp.json()["id"]


async def join(user_id: str) -> FakeWebSocket:
    gateway = app.state.gateway
    ws = FakeWebSocket()
    connection_id = await gateway.on_connect(ws)
    await gateway.on_join(connection_id, user_id)
    return ws


async def list_notifications(client: httpx.AsyncClient, headers: dict, **params) -> dict:
    resp = await client.get("/api/notifications", headers=headers, params=params)
    assert resp.status_code == 200, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

async def test_missing_token_is_rejected(client):
    resp = await client.get("/api/notifications")
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "MISSING_TOKEN"


async def test_bad_token_is_rejected(client):
    resp = await client.get(
        "/api/notifications", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "INVALID_TOKEN"


async def test_me_creates_user_from_claims(client):
    resp = await client.get("/api/users/me", headers=ALICE)
    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == "user_alice"
    assert body["name"] == "Alice"
    assert body["email"] == "alice@example.com"
    assert body["post_count"] == 0


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

async def test_comment_pushes_to_online_author(client):
    post_id = await create_post(client, ALICE)
    alice_ws = await join("user_alice")

    resp = await client.post(
        "/api/comments",
        json={"post_id": post_id, "content": "Nice!"},
        headers=BOB,
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["author"]["name"] == "Bob"
    await app.state.gateway.drain()

    [pushed] = alice_ws.events("new_notification")
    assert pushed["type"] == "comment"
    assert pushed["message"] == "Bob commented on your post"
    assert pushed["userId"] == "user_alice"
    assert pushed["read"] is False

    stored = await list_notifications(client, ALICE)
    assert stored["total"] == 1
    assert stored["unread_count"] == 1
    assert stored["data"][0]["id"] == pushed["id"]


async def test_comment_for_offline_author_is_stored_only(client):
    post_id = await create_post(client, ALICE)
    bob_ws = await join("user_bob")

    resp = await client.post(
        "/api/comments",
        json={"post_id": post_id, "content": "Nice!"},
        headers=BOB,
    )
    assert resp.status_code == 201
    await app.state.gateway.drain()

    assert bob_ws.events("new_notification") == []
    stored = await list_notifications(client, ALICE)
    assert stored["total"] == 1
    assert stored["data"][0]["message"] == "Bob commented on your post"


async def test_comment_on_own_post_does_not_notify(client):
    post_id = await create_post(client, ALICE)
    alice_ws = await join("user_alice")

    resp = await client.post(
        "/api/comments",
        json={"post_id": post_id, "content": "Replying to myself"},
        headers=ALICE,
    )
    assert resp.status_code == 201
    await app.state.gateway.drain()

    assert alice_ws.events("new_notification") == []
    assert (await list_notifications(client, ALICE))["total"] == 0


async def test_comment_on_missing_post_is_404(client):
    resp = await client.post(
        "/api/comments",
        json={"post_id": "00000000-0000-0000-0000-000000000000", "content": "?"},
        headers=BOB,
    )
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "POST_NOT_FOUND"


async def test_list_and_delete_comments(client):
    post_id = await create_post(client, ALICE)
    created = await client.post(
        "/api/comments",
        json={"post_id": post_id, "content": "Nice!"},
        headers=BOB,
    )
    comment_id = created.json()["id"]

    listed = await client.get(f"/api/comments/post/{post_id}")
    assert listed.status_code == 200
    assert listed.json()["total"] == 1
    assert listed.json()["comments"][0]["author"]["id"] == "user_bob"

    forbidden = await client.delete(f"/api/comments/{comment_id}", headers=ALICE)
    assert forbidden.status_code == 403

    deleted = await client.delete(f"/api/comments/{comment_id}", headers=BOB)
    assert deleted.status_code == 204
    assert (await client.get(f"/api/comments/post/{post_id}")).json()["total"] == 0


# ---------------------------------------------------------------------------
# Likes
# ---------------------------------------------------------------------------

async def test_like_pushes_and_unlike_does_not(client):
    post_id = await create_post(client, ALICE)
    alice_ws = await join("user_alice")

    liked = await client.post("/api/likes/toggle", json={"post_id": post_id}, headers=BOB)
    assert liked.status_code == 200
    assert liked.json() == {"action": "liked", "liked": True, "like_count": 1}

    unliked = await client.post("/api/likes/toggle", json={"post_id": post_id}, headers=BOB)
    assert unliked.json() == {"action": "unliked", "liked": False, "like_count": 0}
    await app.state.gateway.drain()

    pushed = alice_ws.events("new_notification")
    assert len(pushed) == 1
    assert pushed[0]["type"] == "like"
    assert pushed[0]["message"] == "Bob liked your post"


async def test_like_own_post_does_not_notify(client):
    post_id = await create_post(client, ALICE)

    resp = await client.post("/api/likes/toggle", json={"post_id": post_id}, headers=ALICE)
    assert resp.json()["liked"] is True
    assert (await list_notifications(client, ALICE))["total"] == 0


async def test_like_status(client):
    post_id = await create_post(client, ALICE)
    await client.post("/api/likes/toggle", json={"post_id": post_id}, headers=BOB)

    resp = await client.get(f"/api/likes/status/{post_id}", headers=BOB)
    assert resp.status_code == 200
    assert resp.json()["liked"] is True
    assert resp.json()["like_count"] == 1
    assert resp.json()["like_id"] is not None


# ---------------------------------------------------------------------------
# Read state
# ---------------------------------------------------------------------------

async def test_mark_all_read(client):
    post_id = await create_post(client, ALICE)
    await client.post("/api/likes/toggle", json={"post_id": post_id}, headers=BOB)
    await client.post(
        "/api/comments", json={"post_id": post_id, "content": "Nice!"}, headers=BOB
    )

    resp = await client.post("/api/notifications/read", headers=ALICE)
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "updated": 2}

    stored = await list_notifications(client, ALICE)
    assert stored["unread_count"] == 0
    assert all(n["read"] for n in stored["data"])
    assert (await list_notifications(client, ALICE, unread=True))["total"] == 0


async def test_mark_single_read_is_scoped_to_owner(client):
    post_id = await create_post(client, ALICE)
    await client.post("/api/likes/toggle", json={"post_id": post_id}, headers=BOB)
    notification_id = (await list_notifications(client, ALICE))["data"][0]["id"]

    other = await client.patch(f"/api/notifications/{notification_id}/read", headers=BOB)
    assert other.status_code == 404

    own = await client.patch(f"/api/notifications/{notification_id}/read", headers=ALICE)
    assert own.status_code == 200
    assert own.json()["read"] is True
