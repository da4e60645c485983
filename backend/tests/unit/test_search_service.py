import pytest

from bubbly.domain.common.exceptions import RateLimited, ValidationFailed
from bubbly.domain.common.paging import PageRequest
from bubbly.domain.feed.models import Audience
from bubbly.domain.search.models import like_pattern
from bubbly.domain.search.service import SearchService, normalise_query
from bubbly.infra.auth import AuthenticatedUser
from bubbly.settings import settings

ALICE = AuthenticatedUser(id="alice")


@pytest.fixture
def service(search_repo) -> SearchService:
    return SearchService(search_repo)


def test_normalise_query_strips_mentions_and_rejects_blank():
    assert normalise_query("  @bob ", strip_mention=True) == "bob"
    assert normalise_query("@bob", strip_mention=False) == "@bob"
    for raw in (None, "", "   ", "@"):
        with pytest.raises(ValidationFailed) as exc:
            normalise_query(raw, strip_mention=True)
        assert exc.value.reason == "empty_query"


def test_like_pattern_escapes_wildcards():
    assert like_pattern("50%_off") == "%50\\%\\_off%"


@pytest.mark.asyncio
async def test_post_search_only_returns_visible_posts(service, world):
    public = world.add_post("bob", content="Sunset at the lake")
    world.add_post("bob", Audience.ONLY_ME, content="private sunset diary")
    followers_only = world.add_post("carol", Audience.FOLLOWING, content="sunset again")
    own = world.add_post("alice", Audience.ONLY_ME, content="my sunset")

    result = await service.search_posts(ALICE, "SUNSET", PageRequest())

    assert [view.id for view in result.data] == [own.id, public.id]
    assert result.pagination.total_results == 2
    assert result.pagination.has_more is False

    world.add_follow("carol", "alice")
    result = await service.search_posts(ALICE, "sunset", PageRequest())

    assert [view.id for view in result.data] == [own.id, followers_only.id, public.id]


@pytest.mark.asyncio
async def test_user_search_matches_name_and_reports_follow_state(service, world):
    world.add_user("bobby")
    world.add_user("robert", active=False)
    world.add_follow("alice", "bob")
    world.add_follow("carol", "bob")
    world.add_post("bob")

    result = await service.search_users(ALICE, "@BOB", PageRequest())

    by_id = {user.id: user for user in result.data}
    assert set(by_id) == {"bob", "bobby"}
    assert by_id["bob"].is_following is True
    assert by_id["bob"].followers_count == 2
    assert by_id["bob"].posts_count == 1
    assert by_id["bobby"].is_following is False
    assert result.pagination.total_results == 2


@pytest.mark.asyncio
async def test_search_all_combines_users_and_posts(service, world):
    world.add_post("carol", content="hello from carol")
    world.add_post("dave", Audience.ONLY_ME, content="carol cannot see this")

    result = await service.search_all(ALICE, "carol", limit=5)

    assert [user.id for user in result.data.users] == ["carol"]
    assert len(result.data.posts) == 1
    assert result.counts.model_dump() == {"users": 1, "posts": 1, "total": 2}


@pytest.mark.asyncio
async def test_search_is_rate_limited_per_user(service, world, monkeypatch):
    monkeypatch.setattr(settings, "search_per_minute", 1)

    await service.search_users(ALICE, "bob", PageRequest())
    with pytest.raises(RateLimited):
        await service.search_users(ALICE, "bob", PageRequest())
    await service.search_users(AuthenticatedUser(id="bob"), "alice", PageRequest())
