import pytest

from bubbly.domain.common.exceptions import Conflict, Forbidden, NotFound, ValidationFailed
from bubbly.domain.common.paging import PageRequest
from bubbly.domain.feed.models import Audience
from bubbly.domain.notifications.models import NotificationType
from bubbly.domain.notifications.service import NotificationService
from bubbly.domain.posts.schemas import PostCreateRequest, PostUpdateRequest, ShareCreateRequest
from bubbly.domain.posts.service import PostService
from bubbly.infra.auth import AuthenticatedUser

ALICE = AuthenticatedUser(id="alice")
BOB = AuthenticatedUser(id="bob")


@pytest.fixture
def service(world, notification_repo) -> PostService:
    return PostService(world, NotificationService(notification_repo))


@pytest.mark.asyncio
async def test_create_post_requires_content_or_files(service):
    with pytest.raises(ValidationFailed) as exc:
        await service.create_post(ALICE, PostCreateRequest(content="   "))
    assert exc.value.reason == "empty_post"

    created = await service.create_post(ALICE, PostCreateRequest(files=["a.png"]))
    assert created.files == ["a.png"]
    assert created.content is None
    assert created.audience is Audience.PUBLIC


@pytest.mark.asyncio
async def test_private_post_is_forbidden_to_others(service, world):
    post = world.add_post("bob", Audience.ONLY_ME)

    with pytest.raises(Forbidden) as exc:
        await service.get_post(ALICE, post.id)
    assert exc.value.reason == "post_private"
    assert (await service.get_post(BOB, post.id)).id == post.id


@pytest.mark.asyncio
async def test_following_post_needs_author_to_follow_viewer(service, world):
    post = world.add_post("bob", Audience.FOLLOWING)
    world.add_follow("alice", "bob")

    with pytest.raises(Forbidden) as exc:
        await service.get_post(ALICE, post.id)
    assert exc.value.reason == "post_followers_only"

    world.add_follow("bob", "alice")
    assert (await service.get_post(ALICE, post.id)).id == post.id


@pytest.mark.asyncio
async def test_only_author_updates_and_deletes(service, world):
    post = world.add_post("bob")

    with pytest.raises(Forbidden):
        await service.update_post(ALICE, post.id, PostUpdateRequest(content="hijack"))
    with pytest.raises(Forbidden):
        await service.delete_post(ALICE, post.id)

    updated = await service.update_post(BOB, post.id, PostUpdateRequest(audience=Audience.ONLY_ME))
    assert updated.audience is Audience.ONLY_ME
    assert updated.content == "hello"

    await service.delete_post(BOB, post.id)
    with pytest.raises(NotFound):
        await service.get_post(BOB, post.id)


@pytest.mark.asyncio
async def test_share_notifies_and_pushes_to_owner(service, world, notification_repo, pushes):
    post = world.add_post("bob")

    result = await service.share_post(ALICE, post.id, ShareCreateRequest(share_caption=" look ", audience=Audience.PUBLIC))

    assert result.share_count == 1
    assert result.share.share_caption == "look"
    assert result.share.post.id == post.id
    [notification] = notification_repo.items.values()
    assert notification.recipient_id == "bob"
    assert notification.type is NotificationType.SHARE
    assert notification.share_id == result.share.id
    events = [(user_id, event) for user_id, event, _ in pushes]
    assert ("bob", "new-share") in events
    assert ("bob", "new-notification") in events
    share_push = next(payload for _, event, payload in pushes if event == "new-share")
    assert share_push["shareCount"] == 1
    assert share_push["share"]["shareCaption"] == "look"


@pytest.mark.asyncio
async def test_sharing_twice_conflicts(service, world):
    post = world.add_post("bob")
    await service.share_post(ALICE, post.id, ShareCreateRequest())

    with pytest.raises(Conflict) as exc:
        await service.share_post(ALICE, post.id, ShareCreateRequest())
    assert exc.value.reason == "already_shared"


@pytest.mark.asyncio
async def test_sharing_own_post_skips_push_and_notification(service, world, notification_repo, pushes):
    post = world.add_post("alice")

    await service.share_post(ALICE, post.id, ShareCreateRequest())

    assert notification_repo.items == {}
    assert pushes == []


@pytest.mark.asyncio
async def test_private_post_cannot_be_shared(service, world):
    post = world.add_post("bob", Audience.ONLY_ME)

    with pytest.raises(Forbidden) as exc:
        await service.share_post(ALICE, post.id, ShareCreateRequest())
    assert exc.value.message == "This post is private and cannot be shared"


@pytest.mark.asyncio
async def test_unshare_returns_remaining_count(service, world):
    post = world.add_post("bob")
    world.add_share("carol", post.id)
    await service.share_post(ALICE, post.id, ShareCreateRequest())

    assert await service.check_shared(ALICE, post.id) is True
    assert await service.unshare_post(ALICE, post.id) == 1
    assert await service.check_shared(ALICE, post.id) is False
    with pytest.raises(NotFound):
        await service.unshare_post(ALICE, post.id)


@pytest.mark.asyncio
async def test_user_posts_filtered_by_audience(service, world):
    public = world.add_post("bob", Audience.PUBLIC)
    followers_only = world.add_post("bob", Audience.FOLLOWING)
    world.add_post("bob", Audience.ONLY_ME)

    stranger_view = await service.list_user_posts(ALICE, "bob", PageRequest())
    assert [post.id for post in stranger_view.data] == [public.id]
    assert stranger_view.pagination.total == 1

    world.add_follow("bob", "alice")
    follower_view = await service.list_user_posts(ALICE, "bob", PageRequest())
    assert [post.id for post in follower_view.data] == [followers_only.id, public.id]

    own_view = await service.list_user_posts(BOB, "bob", PageRequest())
    assert own_view.pagination.total == 3


@pytest.mark.asyncio
async def test_user_shares_hide_shares_of_hidden_posts(service, world):
    visible = world.add_post("carol")
    hidden = world.add_post("carol", Audience.ONLY_ME)
    kept = world.add_share("bob", visible.id)
    world.add_share("bob", hidden.id)

    response = await service.list_user_shares(ALICE, "bob", PageRequest())

    assert [share.id for share in response.data] == [kept.id]


@pytest.mark.asyncio
async def test_post_sharers_mark_followed_users(service, world):
    post = world.add_post("carol")
    world.add_share("bob", post.id)
    world.add_share("dave", post.id, Audience.ONLY_ME)
    world.add_follow("alice", "bob")

    response = await service.list_post_shares(ALICE, post.id, PageRequest())

    assert [(sharer.user.id, sharer.is_following) for sharer in response.data] == [("bob", True)]
    assert response.pagination.total == 2
