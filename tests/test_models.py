import pytest

from ss12000.core.domain.models import Page


class TestPage:
    def test_from_list_payload(self):
        page = Page.from_payload({"data": [{"id": "1"}, {"id": "2"}], "pageToken": "next"})
        assert [item["id"] for item in page.data] == ["1", "2"]
        assert page.page_token == "next"
        assert page.has_more

    def test_last_page(self):
        page = Page.from_payload({"data": [{"id": "1"}]})
        assert page.page_token is None
        assert not page.has_more

    def test_unknown_keys_are_ignored(self):
        page = Page.from_payload({"data": [], "meta": {"total": 0}})
        assert page.data == []

    def test_none_is_empty_page(self):
        page = Page.from_payload(None)
        assert page.data == []
        assert not page.has_more

    def test_bare_list_is_data(self):
        page = Page.from_payload([{"id": "a"}, "noise", {"id": "b"}])
        assert page.data == [{"id": "a"}, {"id": "b"}]

    def test_alternate_token_key(self):
        assert Page.from_payload({"data": [], "nextPageToken": "t2"}).page_token == "t2"

    def test_rejects_scalar_payload(self):
        with pytest.raises(TypeError):
            Page.from_payload("oops")
