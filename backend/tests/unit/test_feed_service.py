import pytest

from bubbly.domain.common.paging import PageRequest
from bubbly.domain.feed.models import Audience
from bubbly.domain.feed.service import FeedService
from bubbly.domain.notifications.service import NotificationService
from bubbly.domain.posts.schemas import PostUpdateRequest
from bubbly.domain.posts.service import PostService
from bubbly.infra.auth import AuthenticatedUser


def _ids(response):
    return [item.id for item in response.data]


@pytest.mark.asyncio
async def test_feed_orders_followed_authors_first(world):
    world.add_follow("alice", "bob")
    stranger = world.add_post("carol")
    friend = world.add_post("bob")
    newest_stranger = world.add_post("dave")
    own = world.add_post("alice")

    response = await FeedService(world).get_feed(AuthenticatedUser(id="alice"), PageRequest(limit=10))

    assert _ids(response) == [own.id, friend.id, newest_stranger.id, stranger.id]
    assert response.pagination.total_posts == 4
    assert response.pagination.has_more is False


@pytest.mark.asyncio
async def test_following_post_visible_only_when_author_follows_viewer(world):
    post = world.add_post("bob", Audience.FOLLOWING)
    world.add_follow("alice", "bob")
    service = FeedService(world)

    # alice follows bob, bob does not follow alice: hidden.
    hidden = await service.get_feed(AuthenticatedUser(id="alice"), PageRequest())
    assert post.id not in _ids(hidden)

    world.add_follow("bob", "alice")
    shown = await service.get_feed(AuthenticatedUser(id="alice"), PageRequest())
    assert post.id in _ids(shown)


@pytest.mark.asyncio
async def test_only_me_posts_reach_only_their_author(world):
    post = world.add_post("bob", Audience.ONLY_ME)
    service = FeedService(world)

    assert post.id in _ids(await service.get_feed(AuthenticatedUser(id="bob"), PageRequest()))
    assert post.id not in _ids(await service.get_feed(AuthenticatedUser(id="alice"), PageRequest()))


@pytest.mark.asyncio
async def test_post_switched_to_only_me_leaves_other_feeds(world, notification_repo):
    post = world.add_post("alice", content="going private soon")
    feed = FeedService(world)
    posts = PostService(world, NotificationService(notification_repo))
    alice = AuthenticatedUser(id="alice")
    bob = AuthenticatedUser(id="bob")
    assert post.id in _ids(await feed.get_feed(bob, PageRequest()))

    updated = await posts.update_post(alice, post.id, PostUpdateRequest(audience=Audience.ONLY_ME))

    assert updated.audience is Audience.ONLY_ME
    assert updated.content == "going private soon"
    assert post.id not in _ids(await feed.get_feed(bob, PageRequest()))
    assert post.id in _ids(await feed.get_feed(alice, PageRequest()))


@pytest.mark.asyncio
async def test_shares_come_from_viewer_and_followed_users_only(world):
    world.add_follow("alice", "bob")
    original = world.add_post("carol")
    followed_share = world.add_share("bob", original.id)
    own_share = world.add_share("alice", original.id)
    world.add_share("dave", original.id)

    response = await FeedService(world).get_feed(AuthenticatedUser(id="alice"), PageRequest())

    share_ids = [item.id for item in response.data if item.type == "share"]
    assert share_ids == [own_share.id, followed_share.id]
    assert response.pagination.total_shares == 2
    shared = response.data[0]
    assert shared.post is not None and shared.post.id == original.id


@pytest.mark.asyncio
async def test_share_of_hidden_post_is_dropped(world):
    world.add_follow("alice", "bob")
    private = world.add_post("carol", Audience.ONLY_ME)
    world.add_share("bob", private.id)

    response = await FeedService(world).get_feed(AuthenticatedUser(id="alice"), PageRequest())

    assert [item.type for item in response.data] == []


@pytest.mark.asyncio
async def test_deleted_post_takes_its_shares_out_of_the_feed(world):
    post = world.add_post("bob")
    world.add_share("alice", post.id)
    await world.delete_post(post.id)

    response = await FeedService(world).get_feed(AuthenticatedUser(id="alice"), PageRequest())

    assert response.data == []


@pytest.mark.asyncio
async def test_working_set_is_bounded_by_page_limit(world):
    for _ in range(10):
        world.add_post("carol")

    service = FeedService(world)
    first = await service.get_feed(AuthenticatedUser(id="alice"), PageRequest(page=1, limit=2))
    beyond = await service.get_feed(AuthenticatedUser(id="alice"), PageRequest(page=4, limit=2))

    assert len(first.data) == 2
    # Only limit*3 posts are considered, so page 4 is empty even though more exist.
    assert beyond.data == []
    assert beyond.pagination.has_more is True
    assert beyond.pagination.total_pages == 5


@pytest.mark.asyncio
async def test_feed_items_carry_viewer_reaction_and_counts(world):
    from bubbly.domain.reactions.models import ReactionSubject, ReactionType

    post = world.add_post("bob")
    world.reactions[(ReactionSubject.POST, post.id, "alice")] = (ReactionType.HEART, world.now())

    response = await FeedService(world).get_feed(AuthenticatedUser(id="alice"), PageRequest())
    payload = response.model_dump(mode="json", by_alias=True)

    item = payload["data"][0]
    assert item["type"] == "post"
    assert item["userReaction"] == "Heart"
    assert item["reactionCount"] == 1
    assert item["author"]["username"] == "bob"
