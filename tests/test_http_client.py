import httpx
import pytest

from core.http_client import Fetcher, HttpError


def _fetcher(handler, **kwargs):
    client = httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=True)
    return Fetcher(client=client, **kwargs)


def test_fetch_returns_text():
    fetcher = _fetcher(lambda request: httpx.Response(200, text="<html>ok</html>"))
    assert fetcher.fetch("https://en.wikipedia.org/wiki/Premier_League") == "<html>ok</html>"


def test_redirects_are_followed():
    def handler(request):
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://example.org/new"})
        return httpx.Response(200, text="moved")

    assert _fetcher(handler).fetch("https://example.org/old") == "moved"


def test_error_status_is_final():
    calls = []

    def handler(request):
        calls.append(request.url)
        return httpx.Response(404)

    with pytest.raises(HttpError) as exc:
        _fetcher(handler, retries=3).fetch("https://example.org/missing")
    assert exc.value.status_code == 404
    assert len(calls) == 1


def test_transport_errors_retried_with_backoff():
    attempts = []
    sleeps = []

    def handler(request):
        attempts.append(1)
        if len(attempts) < 3:
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200, text="finally")

    fetcher = _fetcher(handler, retries=2, backoff_factor=0.5, sleep=sleeps.append)
    assert fetcher.fetch("https://example.org") == "finally"
    assert sleeps == [0.5, 1.0]


def test_retries_exhausted_raises_http_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    fetcher = _fetcher(handler, retries=1, backoff_factor=0, sleep=lambda s: None)
    with pytest.raises(HttpError) as exc:
        fetcher.fetch("https://example.org")
    assert exc.value.status_code is None


def test_fetch_json_sends_params():
    def handler(request):
        assert request.url.params["league"] == "39"
        return httpx.Response(200, json={"response": []})

    assert _fetcher(handler).fetch_json("https://api.example.org/standings", params={"league": 39}) == {
        "response": []
    }


def test_fetch_json_rejects_non_json():
    fetcher = _fetcher(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(HttpError, match="Invalid JSON"):
        fetcher.fetch_json("https://api.example.org/standings")
