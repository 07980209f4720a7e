"""
Unit tests for the sanitizing RequestView.
"""

import pytest
from unittest.mock import MagicMock
from starlette.datastructures import FormData, Headers, ImmutableMultiDict
from starlette.requests import Request

from service_gatekeeper.app.sanitize import RequestView, Sanitizer, sanitize_request_view


def make_request(query_string: bytes = b"", headers=None) -> Request:
    """Build a bare HTTP request for the given query string and headers."""
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in (headers or [])
    ]
    return Request({
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "path": "/api/items",
        "query_string": query_string,
        "headers": raw_headers,
    })


class TestRequestView:
    """Test cases for RequestView."""

    @pytest.fixture
    def sanitizer(self):
        return Sanitizer()

    @pytest.fixture
    def view(self, sanitizer):
        params = ImmutableMultiDict([
            ("name", "O'Brien"),
            ("tag", "<b>x</b>"),
            ("tag", "<script>alert(1)</script>plain"),
        ])
        headers = Headers(headers={"Referer": "<script>x</script>http://a", "Accept": "text/html"})
        return RequestView(params, headers, sanitizer)

    def test_get_parameter(self, view):
        assert view.get_parameter("name") == "O&#x27;Brien"

    def test_get_parameter_returns_first_value(self, view):
        assert view.get_parameter("tag") == "&lt;b&gt;x&lt;&#x2F;b&gt;"

    def test_get_parameter_missing(self, view):
        assert view.get_parameter("missing") is None

    def test_each_value_sanitized_independently(self, view):
        assert view.get_parameter_values("tag") == ["&lt;b&gt;x&lt;&#x2F;b&gt;", "plain"]

    def test_get_parameter_values_missing(self, view):
        assert view.get_parameter_values("missing") is None

    def test_parameter_names_keep_order_without_duplicates(self, view):
        assert view.get_parameter_names() == ["name", "tag"]

    def test_parameter_map(self, view):
        assert view.get_parameter_map() == {
            "name": ["O&#x27;Brien"],
            "tag": ["&lt;b&gt;x&lt;&#x2F;b&gt;", "plain"],
        }

    def test_get_header_is_case_insensitive_and_sanitized(self, view):
        assert view.get_header("referer") == "http:&#x2F;&#x2F;a"
        assert view.get_header("Accept") == "text&#x2F;html"

    def test_get_header_missing(self, view):
        assert view.get_header("X-Missing") is None

    def test_header_names(self, view):
        assert view.get_header_names() == ["referer", "accept"]

    def test_values_are_sanitized_on_read(self):
        """Test nothing is sanitized until an accessor is called."""
        sanitizer = MagicMock()
        sanitizer.sanitize.side_effect = lambda value: None if value is None else value.upper()
        view = RequestView(ImmutableMultiDict([("q", "abc")]), Headers(headers={"X-A": "b"}), sanitizer)

        sanitizer.sanitize.assert_not_called()
        assert view.get_parameter("q") == "ABC"
        assert view.get_header("x-a") == "B"
        assert sanitizer.sanitize.call_count == 2

    def test_with_form_appends_text_fields(self, sanitizer):
        view = RequestView(ImmutableMultiDict([("q", "1")]), Headers(), sanitizer)
        form = FormData([("q", "2"), ("comment", "<i>hey</i>")])

        combined = view.with_form(form)

        assert combined.get_parameter_values("q") == ["1", "2"]
        assert combined.get_parameter("comment") == "&lt;i&gt;hey&lt;&#x2F;i&gt;"
        assert view.get_parameter("comment") is None


class TestSanitizeRequestView:
    """Test cases for sanitize_request_view."""

    def test_builds_view_from_request(self):
        request = make_request(
            b"name=O%27Brien&name=%3Cscript%3Ex%3C%2Fscript%3E",
            headers=[("User-Agent", "curl/8.0"), ("X-Custom", "a"), ("X-Custom", "b/c")],
        )

        view = sanitize_request_view(request, Sanitizer())

        assert view.get_parameter_values("name") == ["O&#x27;Brien", ""]
        assert view.get_header("user-agent") == "curl&#x2F;8.0"
        assert view.get_headers("x-custom") == ["a", "b&#x2F;c"]

    def test_builds_view_with_form(self):
        request = make_request(b"a=1")

        view = sanitize_request_view(request, Sanitizer(), form=FormData([("b", "2")]))

        assert view.get_parameter_map() == {"a": ["1"], "b": ["2"]}
