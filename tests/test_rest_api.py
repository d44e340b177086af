"""
REST API tests for the post, comment, like and user resources that do not
involve the real-time push.
"""

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.services.user_service import UserService
from conftest import auth_headers

ALICE = auth_headers("user_alice", name="Alice", email="alice@example.com")
BOB = auth_headers("user_bob", name="Bob", email="bob@example.com")


async def create_post(client: httpx.AsyncClient, headers: dict, title: str = "Hello") -> str:
    resp = await client.post(
        "/api/posts",
        json={"title": title, "content": "First post"},
        headers=headers,
    )
    assert resp.status_code == 201, f"Create post failed: {resp.text}"
    return resp.json()["id"]


async def create_comment(client: httpx.AsyncClient, headers: dict, post_id: str) -> str:
    resp = await client.post(
        "/api/comments",
        json={"post_id": post_id, "content": "Nice!"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------

async def test_author_can_edit_post(client):
    post_id = await create_post(client, ALICE)

    resp = await client.put(
        f"/api/posts/{post_id}", json={"title": "Edited"}, headers=ALICE
    )

    assert resp.status_code == 200, resp.text
    assert resp.json()["title"] == "Edited"
    assert resp.json()["content"] == "First post"
    assert (await client.get(f"/api/posts/{post_id}")).json()["title"] == "Edited"


async def test_only_author_can_edit_post(client):
    post_id = await create_post(client, ALICE)

    resp = await client.put(f"/api/posts/{post_id}", json={"title": "Mine now"}, headers=BOB)

    assert resp.status_code == 403
    assert resp.json()["detail"]["code"] == "FORBIDDEN"
    assert (await client.get(f"/api/posts/{post_id}")).json()["title"] == "Hello"


async def test_edit_missing_post_is_404(client):
    resp = await client.put(
        "/api/posts/00000000-0000-0000-0000-000000000000",
        json={"title": "?"},
        headers=ALICE,
    )
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "POST_NOT_FOUND"


async def test_list_posts_by_user(client):
    await create_post(client, ALICE, title="A1")
    await create_post(client, BOB, title="B1")

    resp = await client.get("/api/posts/user/user_alice")

    assert resp.status_code == 200
    assert resp.json()["total"] == 1
    assert resp.json()["posts"][0]["title"] == "A1"


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------

async def test_author_can_edit_comment_and_others_cannot(client):
    post_id = await create_post(client, ALICE)
    comment_id = await create_comment(client, BOB, post_id)

    forbidden = await client.put(
        f"/api/comments/{comment_id}", json={"content": "Hijacked"}, headers=ALICE
    )
    assert forbidden.status_code == 403

    edited = await client.put(
        f"/api/comments/{comment_id}", json={"content": "Edited"}, headers=BOB
    )
    assert edited.status_code == 200, edited.text
    assert edited.json()["content"] == "Edited"
    assert edited.json()["author"]["id"] == "user_bob"


async def test_edit_missing_comment_is_404(client):
    resp = await client.put(
        "/api/comments/00000000-0000-0000-0000-000000000000",
        json={"content": "?"},
        headers=BOB,
    )
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "COMMENT_NOT_FOUND"


async def test_list_comments_by_user(client):
    post_id = await create_post(client, ALICE)
    await create_comment(client, BOB, post_id)
    await create_comment(client, ALICE, post_id)

    resp = await client.get("/api/comments/user/user_bob")

    assert resp.status_code == 200
    assert resp.json()["total"] == 1
    assert resp.json()["comments"][0]["user_id"] == "user_bob"


# ---------------------------------------------------------------------------
# Likes
# ---------------------------------------------------------------------------

async def test_list_likes_on_post_and_by_user(client):
    post_id = await create_post(client, ALICE)
    await client.post("/api/likes/toggle", json={"post_id": post_id}, headers=BOB)

    on_post = await client.get(f"/api/likes/post/{post_id}")
    assert on_post.status_code == 200
    assert on_post.json()["total"] == 1
    assert on_post.json()["likes"][0]["user"]["name"] == "Bob"

    by_user = await client.get("/api/likes/user/user_bob")
    assert by_user.json()["total"] == 1
    assert by_user.json()["likes"][0]["post_id"] == post_id

    assert (await client.get("/api/likes/user/user_alice")).json()["total"] == 0


async def test_likes_on_missing_post_is_404(client):
    resp = await client.get("/api/likes/post/00000000-0000-0000-0000-000000000000")
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

async def test_update_me(client):
    dave = auth_headers("user_dave")

    resp = await client.put(
        "/api/users/me", json={"name": "Dave", "image_url": "https://img/dave.png"}, headers=dave
    )

    assert resp.status_code == 200, resp.text
    assert resp.json()["name"] == "Dave"
    assert (await client.get("/api/users/me", headers=dave)).json()["image_url"] == (
        "https://img/dave.png"
    )


async def test_delete_me(client):
    dave = auth_headers("user_dave", name="Dave")
    await client.get("/api/users/me", headers=dave)

    resp = await client.delete("/api/users/me", headers=dave)

    assert resp.status_code == 204
    assert (await client.get("/api/users/user_dave")).status_code == 404


async def test_search_users(client):
    await client.get("/api/users/me", headers=ALICE)
    await client.get("/api/users/me", headers=BOB)

    resp = await client.get("/api/users/search", params={"q": "ALI"})

    assert resp.status_code == 200
    assert resp.json()["total"] == 1
    assert resp.json()["users"][0]["id"] == "user_alice"

    by_email = await client.get("/api/users/search", params={"q": "bob@"})
    assert [u["id"] for u in by_email.json()["users"]] == ["user_bob"]


async def test_search_requires_query(client):
    resp = await client.get("/api/users/search")
    assert resp.status_code == 422


async def test_user_activity(client):
    post_id = await create_post(client, ALICE)
    await create_comment(client, BOB, post_id)
    await client.post("/api/likes/toggle", json={"post_id": post_id}, headers=BOB)

    resp = await client.get("/api/users/user_bob/activity")

    assert resp.status_code == 200
    body = resp.json()
    assert body["recent_posts"] == []
    assert [c["post_id"] for c in body["recent_comments"]] == [post_id]
    assert [lk["post_id"] for lk in body["recent_likes"]] == [post_id]

    alice = (await client.get("/api/users/user_alice/activity")).json()
    assert alice["recent_posts"][0]["title"] == "Hello"


async def test_activity_for_unknown_user_is_404(client):
    resp = await client.get("/api/users/nobody/activity")
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "USER_NOT_FOUND"


async def test_changed_claims_refresh_profile(client):
    await client.get("/api/users/me", headers=ALICE)
    renamed = auth_headers("user_alice", name="Alice Smith", picture="https://img/a.png")

    resp = await client.get("/api/users/me", headers=renamed)

    assert resp.json()["name"] == "Alice Smith"
    stored = (await client.get("/api/users/user_alice")).json()
    assert stored["name"] == "Alice Smith"
    assert stored["image_url"] == "https://img/a.png"
    assert stored["email"] == "alice@example.com"


async def test_comment_notification_uses_refreshed_name(client):
    post_id = await create_post(client, ALICE)
    await client.get("/api/users/me", headers=BOB)
    renamed_bob = auth_headers("user_bob", name="Robert")

    await client.post(
        "/api/comments", json={"post_id": post_id, "content": "Hi"}, headers=renamed_bob
    )

    stored = (await client.get("/api/notifications", headers=ALICE)).json()
    assert stored["data"][0]["message"] == "Robert commented on your post"


async def test_ensure_user_reads_row_inserted_concurrently(db_sessionmaker, monkeypatch):
    async with db_sessionmaker() as other_request:
        other_request.add(User(id="user_carol", name="Carol"))
        await other_request.commit()

    # Our lookup ran before the other request committed.
    async def lookup_missed(self, *args, **kwargs):
        return None

    monkeypatch.setattr(AsyncSession, "get", lookup_missed)

    async with db_sessionmaker() as session:
        user = await UserService(session).ensure_user(
            "user_carol", {"name": "Carol", "email": "carol@example.com"}
        )
        await session.commit()

    assert user.id == "user_carol"
    assert user.email == "carol@example.com"
