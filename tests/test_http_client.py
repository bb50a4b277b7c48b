from __future__ import annotations

import pytest

from boostwatch import http_client


class _ConnRequestFails:
    def __init__(self, *args, **kwargs) -> None:
        self.closed = False

    def request(self, method, path, body=None, headers=None) -> None:
        raise RuntimeError("boom")

    def close(self) -> None:
        self.closed = True


class _Resp:
    def __init__(self, status: int, body: bytes) -> None:
        self.status = status
        self._body = body

    def read(self) -> bytes:
        return self._body


class _Conn:
    def __init__(self, resp: _Resp) -> None:
        self.resp = resp
        self.closed = False
        self.requests: list[tuple[str, str, dict]] = []

    def request(self, method, path, body=None, headers=None) -> None:
        self.requests.append((method, path, headers or {}))

    def getresponse(self) -> _Resp:
        return self.resp

    def close(self) -> None:
        self.closed = True


def test_request_json_closes_connection_when_request_raises(monkeypatch) -> None:
    conn = _ConnRequestFails()
    monkeypatch.setattr(http_client, "HTTPConnection", lambda *a, **k: conn)

    with pytest.raises(RuntimeError, match="boom"):
        http_client.request_json("GET", "http://127.0.0.1:2112/api/v1/index")

    assert conn.closed is True


def test_request_json_returns_list_payload(monkeypatch) -> None:
    conn = _Conn(_Resp(200, b'[{"index": 1}]'))
    monkeypatch.setattr(http_client, "HTTPConnection", lambda *a, **k: conn)

    status, payload = http_client.request_json(
        "GET", "http://127.0.0.1:2112/api/v1/boosts?index=1&count=2"
    )

    assert status == 200
    assert payload == [{"index": 1}]
    assert conn.requests[0][1] == "/api/v1/boosts?index=1&count=2"
    assert conn.requests[0][2]["Accept"] == "application/json"
    assert conn.closed is True


def test_request_json_wraps_non_json_body(monkeypatch) -> None:
    conn = _Conn(_Resp(500, b"** Error getting boosts."))
    monkeypatch.setattr(http_client, "HTTPConnection", lambda *a, **k: conn)

    status, payload = http_client.request_json("GET", "http://127.0.0.1:2112/api/v1/boosts")

    assert status == 500
    assert payload == {"error": "non_json_response: ** Error getting boosts."}


def test_request_json_requires_hostname() -> None:
    with pytest.raises(ValueError, match="missing hostname"):
        http_client.request_json("GET", "/api/v1/index")


def test_build_url_adds_scheme_and_query() -> None:
    url = http_client.build_url("node.local:2112/", "/api/v1/boosts", {"index": 5, "count": 20})

    assert url == "http://node.local:2112/api/v1/boosts?index=5&count=20"
