"""Unit tests for offset pagination."""
from __future__ import annotations

import pytest
from pydantic import ValidationError

from account_service.core.pagination import Page, PageParams


@pytest.mark.unit
class TestPage:
    def test_first_page(self):
        page = Page[int].build([1, 2], total_docs=5, params=PageParams(page=1, limit=2))

        assert page.total_pages == 3
        assert page.has_prev_page is False
        assert page.prev_page is None
        assert page.next_page == 2
        assert page.paging_counter == 1

    def test_last_page(self):
        page = Page[int].build([5], total_docs=5, params=PageParams(page=3, limit=2))

        assert page.has_next_page is False
        assert page.next_page is None
        assert page.prev_page == 2
        assert page.offset == 4

    def test_empty_result_still_has_one_page(self):
        page = Page[int].build([], total_docs=0, params=PageParams())

        assert page.total_pages == 1
        assert page.has_next_page is False

    def test_params_bounds(self):
        with pytest.raises(ValidationError):
            PageParams(page=0)
        with pytest.raises(ValidationError):
            PageParams(limit=101)
