import uuid

import pytest

from bubbly.domain.feed.models import Audience
from bubbly.domain.notifications.service import NotificationService
from bubbly.domain.reactions import service as reactions_service
from bubbly.domain.reactions.models import ReactionSubject, ReactionType
from bubbly.domain.reactions.service import ReactionService
from bubbly.domain.search import service as search_service
from bubbly.domain.search.service import SearchService

ALICE = {"X-User-Id": "alice"}


@pytest.fixture
def search(world, search_repo, monkeypatch):
	monkeypatch.setattr(search_service, "_SERVICE", SearchService(search_repo))
	return world


@pytest.mark.asyncio
async def test_post_search_hides_private_posts(api_client, search):
	public = search.add_post("bob", content="weekend hike")
	search.add_post("bob", Audience.ONLY_ME, content="secret hike plans")

	response = await api_client.get("/api/search/posts?q=hike", headers=ALICE)

	assert response.status_code == 200
	body = response.json()
	assert [item["id"] for item in body["data"]] == [public.id]
	assert body["pagination"] == {"currentPage": 1, "totalPages": 1, "totalResults": 1, "hasMore": False}


@pytest.mark.asyncio
async def test_search_requires_query(api_client, search):
	response = await api_client.get("/api/search/users?q=%20%20", headers=ALICE)

	assert response.status_code == 400
	assert response.json()["code"] == "empty_query"


@pytest.mark.asyncio
async def test_search_all_shape(api_client, search):
	response = await api_client.get("/api/search/all?q=carol", headers=ALICE)

	assert response.status_code == 200
	body = response.json()
	assert [user["username"] for user in body["data"]["users"]] == ["carol"]
	assert body["counts"] == {"users": 1, "posts": 0, "total": 1}


@pytest.mark.asyncio
async def test_reacted_posts_route(api_client, world, reaction_repo, notification_repo, monkeypatch):
	monkeypatch.setattr(
		reactions_service,
		"_SERVICE",
		ReactionService(reaction_repo, world, NotificationService(notification_repo)),
	)
	reactor = str(uuid.uuid4())
	world.add_user(reactor)
	visible = world.add_post("carol")
	hidden = world.add_post("carol", Audience.ONLY_ME)
	for post in (visible, hidden):
		await reaction_repo.set_reaction(ReactionSubject.POST, post.id, reactor, ReactionType.LIKE)

	response = await api_client.get(f"/api/reactions/user/{reactor}/posts", headers=ALICE)

	assert response.status_code == 200
	assert [item["id"] for item in response.json()["data"]] == [visible.id]
