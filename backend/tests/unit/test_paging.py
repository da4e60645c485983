import pytest

from bubbly.domain.common.paging import PageRequest, build_pagination, total_pages


def test_offset_from_page_and_limit():
    assert PageRequest().offset == 0
    assert PageRequest(page=3, limit=10).offset == 20


@pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (-1, 5)])
def test_rejects_non_positive_values(page, limit):
    with pytest.raises(ValueError):
        PageRequest(page=page, limit=limit)


def test_total_pages_rounds_up():
    assert total_pages(0, 10) == 0
    assert total_pages(10, 10) == 1
    assert total_pages(11, 10) == 2


def test_build_pagination_has_more():
    meta = build_pagination(PageRequest(page=2, limit=5), 5, 12)

    assert meta.model_dump(by_alias=True) == {"currentPage": 2, "totalPages": 3, "total": 12, "hasMore": True}
    assert build_pagination(PageRequest(page=3, limit=5), 2, 12).has_more is False
