"""Tests for the HTTP fetcher.

Mocking strategy:
- ``respx`` patches ``httpx`` at the transport layer so no real network calls
  are made.
- Timeouts and connection failures are simulated with ``side_effect``.
"""

from __future__ import annotations

import itertools
from unittest.mock import patch

import httpx
import pytest
import respx

from linkcard.scraper.errors import (
    FetchTimeoutError,
    HttpStatusError,
    InvalidUrlError,
    NetworkError,
    PrivateNetworkError,
    UnsupportedContentTypeError,
    UnsupportedSchemeError,
)
from linkcard.scraper.fetcher import fetch_url, image_is_reachable
from linkcard.scraper.models import RawPage

_HTML = "<html><head><title>Hello</title></head><body><h1>Hi</h1></body></html>"


def _tracked_stream(chunks, served):
    """Yield *chunks*, recording each one in *served* as it is pulled."""
    for chunk in chunks:
        served.append(chunk)
        yield chunk


class TestFetchUrl:
    def test_successful_fetch_returns_raw_page(self) -> None:
        with respx.mock:
            respx.get("https://example.com/article").mock(
                return_value=httpx.Response(200, html=_HTML)
            )
            raw = fetch_url("https://example.com/article")

        assert isinstance(raw, RawPage)
        assert raw.url == "https://example.com/article"
        assert raw.final_url == "https://example.com/article"
        assert raw.status_code == 200
        assert "text/html" in raw.content_type
        assert "<title>Hello</title>" in raw.html

    def test_sends_browser_like_headers(self) -> None:
        with respx.mock:
            route = respx.get("https://example.com/").mock(
                return_value=httpx.Response(200, html=_HTML)
            )
            fetch_url("https://example.com/")

        request = route.calls.last.request
        assert request.headers["user-agent"].startswith("Mozilla/5.0")
        assert "text/html" in request.headers["accept"]
        assert request.headers["accept-language"].startswith("en-US")

    def test_scheme_less_url_fetched_over_https(self) -> None:
        with respx.mock:
            respx.get("https://example.com/x").mock(return_value=httpx.Response(200, html=_HTML))
            raw = fetch_url("example.com/x")
        assert raw.url == "https://example.com/x"

    def test_http_error_carries_status(self) -> None:
        with respx.mock:
            respx.get("https://example.com/missing").mock(
                return_value=httpx.Response(404, text="Not Found")
            )
            with pytest.raises(HttpStatusError) as excinfo:
                fetch_url("https://example.com/missing")

        assert excinfo.value.status_code == 404
        assert excinfo.value.reason == "http-error"
        assert "404" in excinfo.value.message
        assert "Not Found" in excinfo.value.message

    def test_non_html_content_type_rejected(self) -> None:
        with respx.mock:
            respx.get("https://example.com/data.json").mock(
                return_value=httpx.Response(200, json={"a": 1})
            )
            with pytest.raises(UnsupportedContentTypeError) as excinfo:
                fetch_url("https://example.com/data.json")
        assert excinfo.value.content_type == "application/json"

    def test_timeout_is_reported_not_hung(self) -> None:
        with respx.mock:
            respx.get("https://slow.example.com/").mock(side_effect=httpx.ReadTimeout)
            with pytest.raises(FetchTimeoutError) as excinfo:
                fetch_url("https://slow.example.com/")
        assert excinfo.value.reason == "timeout"

    def test_connection_failure_is_network_error(self) -> None:
        with respx.mock:
            respx.get("https://down.example.com/").mock(side_effect=httpx.ConnectError)
            with pytest.raises(NetworkError):
                fetch_url("https://down.example.com/")

    def test_single_attempt_no_retry(self) -> None:
        with respx.mock:
            route = respx.get("https://down.example.com/").mock(side_effect=httpx.ConnectError)
            with pytest.raises(NetworkError):
                fetch_url("https://down.example.com/")
        assert route.call_count == 1


class TestStreamedBody:
    def test_non_html_body_never_consumed(self) -> None:
        served: list[bytes] = []
        with respx.mock:
            respx.get("https://example.com/big.bin").mock(
                return_value=httpx.Response(
                    200,
                    headers={"content-type": "application/octet-stream"},
                    content=_tracked_stream([b"\x00" * 1024] * 8, served),
                )
            )
            with pytest.raises(UnsupportedContentTypeError):
                fetch_url("https://example.com/big.bin")
        assert served == []

    def test_error_status_body_never_consumed(self) -> None:
        served: list[bytes] = []
        with respx.mock:
            respx.get("https://example.com/broken").mock(
                return_value=httpx.Response(
                    500,
                    headers={"content-type": "text/html"},
                    content=_tracked_stream([b"<html>oops</html>"], served),
                )
            )
            with pytest.raises(HttpStatusError):
                fetch_url("https://example.com/broken")
        assert served == []

    def test_body_truncated_at_cap(self, monkeypatch) -> None:
        monkeypatch.setattr("linkcard.scraper.fetcher.settings.max_body_bytes", 10)
        served: list[bytes] = []
        with respx.mock:
            respx.get("https://example.com/huge").mock(
                return_value=httpx.Response(
                    200,
                    headers={"content-type": "text/html; charset=utf-8"},
                    content=_tracked_stream([b"abcdefgh"] * 4, served),
                )
            )
            raw = fetch_url("https://example.com/huge")
        assert raw.html == "abcdefghab"
        assert len(served) == 2

    def test_overall_deadline_covers_slow_body(self) -> None:
        clock = itertools.chain([0.0, 1.0], itertools.repeat(100.0))
        with respx.mock:
            respx.get("https://example.com/drip").mock(
                return_value=httpx.Response(
                    200,
                    headers={"content-type": "text/html"},
                    content=_tracked_stream([b"<html>"] * 3, []),
                )
            )
            with patch("linkcard.scraper.fetcher.monotonic", side_effect=clock):
                with pytest.raises(FetchTimeoutError):
                    fetch_url("https://example.com/drip")


class TestPreflightChecks:
    def test_private_host_blocked_without_network(self) -> None:
        with respx.mock(assert_all_called=False) as mock:
            with pytest.raises(PrivateNetworkError):
                fetch_url("http://192.168.0.10/")
        assert len(mock.calls) == 0

    def test_unsupported_scheme(self) -> None:
        with pytest.raises(UnsupportedSchemeError):
            fetch_url("ftp://example.com/file")

    def test_invalid_url(self) -> None:
        with pytest.raises(InvalidUrlError):
            fetch_url("http://")


class TestRedirects:
    def test_follows_relative_redirect(self) -> None:
        with respx.mock:
            respx.get("https://example.com/old").mock(
                return_value=httpx.Response(301, headers={"Location": "/new"})
            )
            respx.get("https://example.com/new").mock(return_value=httpx.Response(200, html=_HTML))
            raw = fetch_url("https://example.com/old")

        assert raw.url == "https://example.com/old"
        assert raw.final_url == "https://example.com/new"

    def test_redirect_to_private_host_blocked(self) -> None:
        with respx.mock:
            respx.get("https://example.com/").mock(
                return_value=httpx.Response(302, headers={"Location": "http://127.0.0.1/admin"})
            )
            with pytest.raises(PrivateNetworkError):
                fetch_url("https://example.com/")

    def test_redirect_loop_is_network_error(self, monkeypatch) -> None:
        monkeypatch.setattr("linkcard.scraper.fetcher.settings.max_redirects", 2)
        with respx.mock:
            respx.get("https://example.com/loop").mock(
                return_value=httpx.Response(302, headers={"Location": "/loop"})
            )
            with pytest.raises(NetworkError, match="Too many redirects"):
                fetch_url("https://example.com/loop")


class TestImageIsReachable:
    def test_ok_head(self) -> None:
        with respx.mock:
            respx.head("https://cdn.example.com/a.png").mock(return_value=httpx.Response(200))
            assert image_is_reachable("https://cdn.example.com/a.png") is True

    def test_failure_returns_false(self) -> None:
        with respx.mock:
            respx.head("https://cdn.example.com/a.png").mock(side_effect=httpx.ConnectError)
            assert image_is_reachable("https://cdn.example.com/a.png") is False

    def test_missing_image_returns_false(self) -> None:
        with respx.mock:
            respx.head("https://cdn.example.com/gone.png").mock(return_value=httpx.Response(404))
            assert image_is_reachable("https://cdn.example.com/gone.png") is False

    def test_data_uri_not_checked(self) -> None:
        assert image_is_reachable("data:image/png;base64,AAAA") is False

    def test_redirect_to_private_host_is_unreachable(self) -> None:
        with respx.mock(assert_all_called=False) as respx_mock:
            respx_mock.head("https://cdn.example.com/a.png").mock(
                return_value=httpx.Response(
                    302, headers={"Location": "http://169.254.169.254/latest/meta-data"}
                )
            )
            metadata = respx_mock.head("http://169.254.169.254/latest/meta-data").mock(
                return_value=httpx.Response(200)
            )
            assert image_is_reachable("https://cdn.example.com/a.png") is False
        assert not metadata.called

    def test_redirect_to_public_host_followed(self) -> None:
        with respx.mock:
            respx.head("https://cdn.example.com/a.png").mock(
                return_value=httpx.Response(301, headers={"Location": "https://img.example.net/a.png"})
            )
            respx.head("https://img.example.net/a.png").mock(return_value=httpx.Response(200))
            assert image_is_reachable("https://cdn.example.com/a.png") is True
