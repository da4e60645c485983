import pytest

from bubbly.domain.feed import service as feed_service
from bubbly.domain.feed.models import Audience
from bubbly.domain.feed.service import FeedService


@pytest.fixture
def feed(world, monkeypatch):
	monkeypatch.setattr(feed_service, "_SERVICE", FeedService(world))
	return world


@pytest.mark.asyncio
async def test_feed_returns_tagged_items_in_camel_case(api_client, feed):
	feed.add_follow("alice", "bob")
	post = feed.add_post("carol")
	share = feed.add_share("bob", post.id, caption="look")

	response = await api_client.get("/api/posts", headers={"X-User-Id": "alice"})

	assert response.status_code == 200
	body = response.json()
	assert body["success"] is True
	assert [(item["type"], item["id"]) for item in body["data"]] == [("share", share.id), ("post", post.id)]
	assert body["data"][0]["shareCaption"] == "look"
	assert body["data"][0]["post"]["id"] == post.id
	assert body["pagination"] == {
		"currentPage": 1,
		"totalPages": 1,
		"totalPosts": 1,
		"totalShares": 1,
		"hasMore": False,
	}


@pytest.mark.asyncio
async def test_feed_accepts_bearer_token(api_client, feed, make_token):
	feed.add_post("alice", Audience.ONLY_ME)

	response = await api_client.get("/api/posts", headers={"Authorization": f"Bearer {make_token('alice')}"})

	assert response.status_code == 200
	assert len(response.json()["data"]) == 1


@pytest.mark.asyncio
async def test_feed_requires_authentication(api_client, feed):
	response = await api_client.get("/api/posts")

	assert response.status_code == 401
	assert response.json()["success"] is False
	assert response.json()["error"] == "invalid_token"


@pytest.mark.asyncio
@pytest.mark.parametrize("query", ["limit=abc", "limit=0", "limit=51", "page=0", "page=-2"])
async def test_bad_paging_is_rejected(api_client, feed, query):
	response = await api_client.get(f"/api/posts?{query}", headers={"X-User-Id": "alice"})

	assert response.status_code == 422
	body = response.json()
	assert body["success"] is False
	assert body["error"] == "validation_error"


@pytest.mark.asyncio
async def test_second_page_of_short_feed_is_empty(api_client, feed):
	feed.add_post("carol")

	response = await api_client.get("/api/posts?page=2&limit=5", headers={"X-User-Id": "alice"})

	assert response.status_code == 200
	assert response.json()["data"] == []
	assert response.json()["pagination"]["hasMore"] is False
