"""Unit tests for gizmify/gizmo_api/query.py."""

from __future__ import annotations

import pytest

from gizmify.gizmo_api.query import (
    Endpoint,
    QueryParam,
    build_query,
    build_url,
)


class TestBuildQuery:
    def test_emits_pairs_in_supply_order(self):
        params = [QueryParam("b", "2"), QueryParam("a", "1"), QueryParam("c", "3")]
        assert build_query(params) == "b=2&a=1&c=3"

    def test_none_value_skipped(self):
        assert build_query([QueryParam("a", None), QueryParam("b", "x")]) == "b=x"

    def test_empty_value_skipped(self):
        assert build_query([QueryParam("a", ""), QueryParam("b", "x")]) == "b=x"

    def test_required_empty_value_still_emitted(self):
        params = [QueryParam("a", "", True), QueryParam("b", None, True)]
        assert build_query(params) == "a=&b="

    def test_missing_name_skipped(self):
        params = [QueryParam(None, "x"), QueryParam("", "y"), QueryParam("z", "1")]
        assert build_query(params) == "z=1"

    def test_reserved_characters_percent_encoded(self):
        assert build_query([QueryParam("q", "a b&c=d/e?f")]) == "q=a%20b%26c%3Dd%2Fe%3Ff"

    def test_unreserved_characters_kept(self):
        assert build_query([QueryParam("q", "Az09-_.~")]) == "q=Az09-_.~"

    def test_non_ascii_encoded_as_utf8(self):
        assert build_query([QueryParam("q", "é")]) == "q=%C3%A9"

    def test_brackets_in_name_kept(self):
        assert build_query([QueryParam("from[name]", "Jo Doe")]) == "from[name]=Jo%20Doe"

    def test_brackets_in_value_encoded(self):
        assert build_query([QueryParam("custom[x]", "[y]")]) == "custom[x]=%5By%5D"

    def test_no_params(self):
        assert build_query([]) == ""


class TestBuildUrl:
    def test_question_mark_separator(self):
        assert build_url("survey", [QueryParam("page", "1")]) == "survey?page=1"

    def test_ampersand_when_path_has_query(self):
        assert build_url("survey?x=1", [QueryParam("page", "2")]) == "survey?x=1&page=2"

    def test_no_params_returns_path(self):
        assert build_url("survey", [QueryParam("a", None)]) == "survey"


class TestEndpoint:
    def test_plain_get(self):
        assert Endpoint("survey/12").url() == "survey/12"

    def test_method_emitted_first(self):
        ep = Endpoint("survey/", (QueryParam("type", "survey"),), method="PUT")
        assert ep.url() == "survey/?_method=PUT&type=survey"

    def test_trailing_params_last(self):
        ep = Endpoint("survey/1", (QueryParam("name", "x"),), method="POST")
        url = ep.url(QueryParam("api_token", "t", True))
        assert url == "survey/1?_method=POST&name=x&api_token=t"

    def test_invalid_method_rejected(self):
        with pytest.raises(ValueError, match="method"):
            Endpoint("survey", method="PATCH")

    def test_accepts_plain_tuples(self):
        ep = Endpoint("survey", [("a", "1"), ("b", "", True)])
        assert ep.params == (QueryParam("a", "1"), QueryParam("b", "", True))
        assert ep.url() == "survey?a=1&b="

    def test_endpoint_is_hashable_and_frozen(self):
        ep = Endpoint("survey", (QueryParam("a", "1"),))
        assert hash(ep) == hash(Endpoint("survey", (QueryParam("a", "1"),)))
        with pytest.raises(AttributeError):
            ep.path = "other"  # type: ignore[misc]

    def test_rendering_twice_is_stable(self):
        ep = Endpoint("survey", (QueryParam("a", "1"),), method="DELETE")
        assert ep.url() == ep.url()
