import pytest

from bubbly.domain.comments.service import CommentService
from bubbly.domain.common.exceptions import Forbidden, NotFound, ValidationFailed
from bubbly.domain.common.paging import PageRequest
from bubbly.domain.feed.models import Audience
from bubbly.domain.notifications.models import NotificationType
from bubbly.domain.notifications.service import NotificationService
from bubbly.domain.reactions.models import ReactionSubject
from bubbly.infra.auth import AuthenticatedUser

ALICE = AuthenticatedUser(id="alice")
BOB = AuthenticatedUser(id="bob")
CAROL = AuthenticatedUser(id="carol")


@pytest.fixture
def service(world, comment_repo, notification_repo) -> CommentService:
    return CommentService(comment_repo, world, NotificationService(notification_repo))


@pytest.mark.asyncio
async def test_comment_validation(service, world):
    post = world.add_post("bob")

    with pytest.raises(ValidationFailed) as empty:
        await service.add_comment(ALICE, ReactionSubject.POST, post.id, "  ")
    with pytest.raises(ValidationFailed) as too_long:
        await service.add_comment(ALICE, ReactionSubject.POST, post.id, "x" * 501)

    assert empty.value.reason == "empty_comment"
    assert too_long.value.reason == "comment_too_long"


@pytest.mark.asyncio
async def test_comment_notifies_post_owner(service, world, notification_repo):
    post = world.add_post("bob")

    comment = await service.add_comment(ALICE, ReactionSubject.POST, post.id, " nice ")

    assert comment.content == "nice"
    assert comment.post == post.id
    [notification] = notification_repo.items.values()
    assert notification.type is NotificationType.COMMENT
    assert notification.content == "commented on your post"


@pytest.mark.asyncio
async def test_commenting_on_hidden_post_is_forbidden(service, world):
    post = world.add_post("bob", Audience.ONLY_ME)

    with pytest.raises(Forbidden):
        await service.add_comment(ALICE, ReactionSubject.POST, post.id, "hi")


@pytest.mark.asyncio
async def test_comments_on_share_are_listed_separately(service, world):
    post = world.add_post("carol")
    share = world.add_share("bob", post.id)
    await service.add_comment(ALICE, ReactionSubject.POST, post.id, "on post")
    await service.add_comment(ALICE, ReactionSubject.SHARE, share.id, "on share")

    listed = await service.list_comments(ALICE, ReactionSubject.SHARE, share.id, PageRequest())

    assert [comment.content for comment in listed.data] == ["on share"]
    assert listed.pagination.total == 1


@pytest.mark.asyncio
async def test_update_is_author_only(service, world):
    post = world.add_post("bob")
    comment = await service.add_comment(ALICE, ReactionSubject.POST, post.id, "first")

    with pytest.raises(Forbidden):
        await service.update_comment(BOB, comment.id, "edited")
    updated = await service.update_comment(ALICE, comment.id, "edited")
    assert updated.content == "edited"


@pytest.mark.asyncio
async def test_delete_allowed_for_author_and_post_owner(service, world):
    post = world.add_post("bob")
    first = await service.add_comment(ALICE, ReactionSubject.POST, post.id, "one")
    second = await service.add_comment(ALICE, ReactionSubject.POST, post.id, "two")

    with pytest.raises(Forbidden):
        await service.delete_comment(CAROL, first.id)

    await service.delete_comment(ALICE, first.id)
    await service.delete_comment(BOB, second.id)

    with pytest.raises(NotFound):
        await service.delete_comment(ALICE, first.id)
