from datetime import datetime, timezone

import pytest

from bubbly.domain.feed.models import Audience, Post, Share, ViewerContext
from bubbly.domain.feed.visibility import can_view, can_view_share, visible_audiences

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _post(author_id: str, audience: Audience) -> Post:
    return Post(
        id=f"post-{author_id}",
        author_id=author_id,
        content="hi",
        files=(),
        audience=audience,
        created_at=NOW,
        updated_at=NOW,
    )


def _share(sharer_id: str, audience: Audience, post: Post | None) -> Share:
    return Share(
        id=f"share-{sharer_id}",
        sharer_id=sharer_id,
        post_id=post.id if post else "gone",
        post=post,
        caption=None,
        audience=audience,
        created_at=NOW,
        updated_at=NOW,
    )


@pytest.mark.parametrize("audience", list(Audience))
def test_own_items_are_always_visible(audience):
    viewer = ViewerContext.build("me")
    assert can_view("me", audience, viewer)


def test_public_items_are_visible_to_strangers():
    assert can_view("author", Audience.PUBLIC, ViewerContext.build("stranger"))


def test_only_me_is_hidden_from_everyone_else():
    viewer = ViewerContext.build("friend", following_ids={"author"}, follower_ids={"author"})
    assert not can_view("author", Audience.ONLY_ME, viewer)


def test_following_requires_author_to_follow_viewer():
    author_follows_viewer = ViewerContext.build("viewer", follower_ids={"author"})
    assert can_view("author", Audience.FOLLOWING, author_follows_viewer)


def test_following_is_not_granted_by_viewer_following_author():
    # The viewer follows the author but the author does not follow back.
    viewer = ViewerContext.build("viewer", following_ids={"author"})
    assert not can_view("author", Audience.FOLLOWING, viewer)


def test_audience_accepts_wire_values():
    viewer = ViewerContext.build("viewer", follower_ids={"author"})
    assert can_view("author", "Following", viewer)
    with pytest.raises(ValueError):
        can_view("author", "Friends", viewer)


def test_share_requires_both_audiences_to_pass():
    viewer = ViewerContext.build("viewer")
    public_post = _post("author", Audience.PUBLIC)
    private_post = _post("author", Audience.ONLY_ME)

    assert can_view_share(_share("sharer", Audience.PUBLIC, public_post), viewer)
    assert not can_view_share(_share("sharer", Audience.PUBLIC, private_post), viewer)
    assert not can_view_share(_share("sharer", Audience.ONLY_ME, public_post), viewer)


def test_share_of_deleted_post_is_never_visible():
    viewer = ViewerContext.build("sharer")
    assert not can_view_share(_share("sharer", Audience.PUBLIC, None), viewer)


def test_own_share_of_followers_only_post_needs_post_author_edge():
    post = _post("author", Audience.FOLLOWING)
    share = _share("me", Audience.PUBLIC, post)
    assert not can_view_share(share, ViewerContext.build("me"))
    assert can_view_share(share, ViewerContext.build("me", follower_ids={"author"}))


def test_visible_audiences_for_sql_filters():
    assert visible_audiences("me", ViewerContext.build("me")) == tuple(Audience)
    assert visible_audiences("author", ViewerContext.build("viewer")) == (Audience.PUBLIC,)
    followed_by_author = ViewerContext.for_author("viewer", "author", author_follows_viewer=True)
    assert visible_audiences("author", followed_by_author) == (Audience.PUBLIC, Audience.FOLLOWING)
