import uuid

import pytest

from bubbly.domain.feed.models import Audience
from bubbly.domain.notifications.service import NotificationService
from bubbly.domain.posts import service as posts_service
from bubbly.domain.posts.service import PostService

ALICE = {"X-User-Id": "alice"}
BOB = {"X-User-Id": "bob"}


@pytest.fixture
def posts(world, notification_repo, monkeypatch):
	monkeypatch.setattr(posts_service, "_SERVICE", PostService(world, NotificationService(notification_repo)))
	return world


@pytest.mark.asyncio
async def test_create_and_fetch_post(api_client, posts):
	created = await api_client.post(
		"/api/posts",
		json={"content": "first", "audience": "Following"},
		headers=ALICE,
	)

	assert created.status_code == 201
	data = created.json()["data"]
	assert data["audience"] == "Following"
	assert data["author"]["id"] == "alice"

	fetched = await api_client.get(f"/api/posts/{data['id']}", headers=ALICE)
	assert fetched.status_code == 200
	assert fetched.json()["data"]["content"] == "first"


@pytest.mark.asyncio
async def test_invalid_audience_is_rejected(api_client, posts):
	response = await api_client.post("/api/posts", json={"content": "x", "audience": "Friends"}, headers=ALICE)

	assert response.status_code == 422


@pytest.mark.asyncio
async def test_empty_post_maps_to_400(api_client, posts):
	response = await api_client.post("/api/posts", json={"content": ""}, headers=ALICE)

	assert response.status_code == 400
	assert response.json()["code"] == "empty_post"


@pytest.mark.asyncio
async def test_private_post_maps_to_403(api_client, posts):
	post = posts.add_post("bob", Audience.ONLY_ME)

	response = await api_client.get(f"/api/posts/{post.id}", headers=ALICE)

	assert response.status_code == 403
	body = response.json()
	assert body == {
		"success": False,
		"error": "This post is private",
		"code": "post_private",
		"request_id": body["request_id"],
	}


@pytest.mark.asyncio
async def test_share_conflict_and_unshare(api_client, posts):
	post = posts.add_post("bob")

	first = await api_client.post(f"/api/shares/post/{post.id}", json={"shareCaption": "wow"}, headers=ALICE)
	again = await api_client.post(f"/api/shares/post/{post.id}", json={}, headers=ALICE)
	check = await api_client.get(f"/api/shares/{post.id}/check", headers=ALICE)
	removed = await api_client.delete(f"/api/shares/{post.id}", headers=ALICE)

	assert first.status_code == 201
	assert first.json()["data"]["shareCount"] == 1
	assert again.status_code == 409
	assert check.json() == {"success": True, "shared": True}
	assert removed.json()["shareCount"] == 0


@pytest.mark.asyncio
async def test_deleted_post_is_not_found(api_client, posts):
	post = posts.add_post("bob")

	deleted = await api_client.delete(f"/api/posts/{post.id}", headers=BOB)
	missing = await api_client.get(f"/api/posts/{post.id}", headers=BOB)

	assert deleted.status_code == 200
	assert missing.status_code == 404
	assert missing.json()["code"] == "post_not_found"


@pytest.mark.asyncio
async def test_user_posts_route_is_not_shadowed(api_client, posts):
	author = str(uuid.uuid4())
	posts.add_user(author)
	posts.add_post(author)

	response = await api_client.get(f"/api/posts/user/{author}", headers=ALICE)

	assert response.status_code == 200
	assert response.json()["pagination"]["total"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
	"method, path",
	[
		("GET", "/api/posts/not-a-uuid"),
		("GET", "/api/posts/user/bob"),
		("POST", "/api/follow/abc"),
		("GET", "/api/messages/conversations/abc/messages"),
		("DELETE", "/api/notifications/123"),
		("GET", "/api/reactions/abc/check"),
	],
)
async def test_malformed_ids_are_rejected(api_client, posts, method, path):
	response = await api_client.request(method, path, headers=ALICE)

	assert response.status_code == 422
	assert response.json()["error"] == "validation_error"


@pytest.mark.asyncio
async def test_uppercase_post_id_is_canonicalised(api_client, posts):
	post = posts.add_post("bob")

	response = await api_client.get(f"/api/posts/{post.id.upper()}", headers=ALICE)

	assert response.status_code == 200
	assert response.json()["data"]["id"] == post.id
