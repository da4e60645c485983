from datetime import datetime, timedelta, timezone

from bubbly.domain.common.paging import PageRequest
from bubbly.domain.feed.merger import merge_feed
from bubbly.domain.feed.models import Audience, Post, Share, ViewerContext
from bubbly.domain.feed.ranker import build_feed_pagination, paginate, rank_entries

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _post(post_id: str, author_id: str, minutes: int, audience: Audience = Audience.PUBLIC) -> Post:
    stamp = BASE + timedelta(minutes=minutes)
    return Post(
        id=post_id,
        author_id=author_id,
        content=post_id,
        files=(),
        audience=audience,
        created_at=stamp,
        updated_at=stamp,
    )


def _share(share_id: str, sharer_id: str, post: Post | None, minutes: int) -> Share:
    stamp = BASE + timedelta(minutes=minutes)
    return Share(
        id=share_id,
        sharer_id=sharer_id,
        post_id=post.id if post else "deleted",
        post=post,
        caption=None,
        audience=Audience.PUBLIC,
        created_at=stamp,
        updated_at=stamp,
    )


def _ids(entries):
    return [entry.item.id for entry in entries]


def test_merge_drops_hidden_items_and_tags_survivors():
    viewer = ViewerContext.build("me")
    visible = _post("p1", "stranger", 1)
    hidden = _post("p2", "stranger", 2, Audience.ONLY_ME)
    orphan = _share("s1", "me", None, 3)
    shared = _share("s2", "me", visible, 4)

    entries = merge_feed(viewer, [visible, hidden], [orphan, shared])

    assert _ids(entries) == ["p1", "s2"]
    assert [entry.item.type for entry in entries] == ["post", "share"]
    assert entries[1].author_id == "me"


def test_rank_puts_own_and_followed_before_others():
    viewer = ViewerContext.build("me", following_ids={"friend"})
    posts = [
        _post("stranger-new", "stranger", 30),
        _post("friend-old", "friend", 5),
        _post("mine-mid", "me", 10),
        _post("stranger-old", "stranger", 1),
    ]

    ranked = rank_entries(merge_feed(viewer, posts, []), viewer)

    assert _ids(ranked) == ["mine-mid", "friend-old", "stranger-new", "stranger-old"]


def test_rank_keeps_merge_order_for_equal_timestamps():
    viewer = ViewerContext.build("me")
    post = _post("p1", "me", 5)
    share = _share("s1", "me", _post("p0", "other", 0), 5)

    ranked = rank_entries(merge_feed(viewer, [post], [share]), viewer)

    assert _ids(ranked) == ["p1", "s1"]


def test_followers_who_are_not_followed_land_in_second_bucket():
    # The author follows the viewer, so their Following post is visible, but it is not boosted.
    viewer = ViewerContext.build("me", follower_ids={"fan"})
    posts = [_post("fan-post", "fan", 50, Audience.FOLLOWING), _post("mine", "me", 1)]

    ranked = rank_entries(merge_feed(viewer, posts, []), viewer)

    assert _ids(ranked) == ["mine", "fan-post"]


def test_paginate_slices_ranked_entries():
    viewer = ViewerContext.build("me")
    entries = rank_entries(merge_feed(viewer, [_post(f"p{i}", "me", i) for i in range(5)], []), viewer)

    assert _ids(paginate(entries, PageRequest(page=2, limit=2))) == ["p2", "p1"]
    assert paginate(entries, PageRequest(page=4, limit=2)) == []


def test_pagination_uses_unfiltered_totals():
    meta = build_feed_pagination(PageRequest(page=1, limit=10), 3, total_posts=25, total_shares=4)

    assert meta.total_pages == 3
    assert meta.has_more is True
    assert meta.total_posts == 25
    assert meta.total_shares == 4


def test_pagination_for_empty_feed():
    meta = build_feed_pagination(PageRequest(page=1, limit=10), 0, total_posts=0, total_shares=0)

    assert meta.total_pages == 0
    assert meta.has_more is False
    assert meta.model_dump(by_alias=True) == {
        "currentPage": 1,
        "totalPages": 0,
        "totalPosts": 0,
        "totalShares": 0,
        "hasMore": False,
    }
