from __future__ import annotations

import pytest

from ausvotes.common.http import HttpClient, HttpRequestError, RetryConfig, RetryableHttpError


class FakeResponse:
    def __init__(self, status_code: int, content: bytes = b""):
        self.status_code = status_code
        self.content = content


def test_http_get_table_reads_csv_payload(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(
        client.session,
        "request",
        lambda **_kwargs: FakeResponse(200, b"StateAb,DivisionNm\nNSW,Sydney\n"),
    )

    table = client.get_table("https://example.com/files/GeneralPPVCs.csv")

    assert table.to_dict(orient="records") == [{"StateAb": "NSW", "DivisionNm": "Sydney"}]


def test_http_get_table_honours_skiprows(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(
        client.session,
        "request",
        lambda **_kwargs: FakeResponse(200, b"Downloaded from the AEC\nStateAb,Votes\nVIC,3\n"),
    )

    table = client.get_table("https://example.com/a.csv", skiprows=1)

    assert list(table.columns) == ["StateAb", "Votes"]


def test_http_retryable_status_raises_retryable_error(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(503))

    with pytest.raises(RetryableHttpError):
        client.get_bytes("https://example.com/a.csv")


def test_http_retries_until_success(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=3, multiplier=0.0, max_wait=0.0))
    responses = iter([FakeResponse(503), FakeResponse(200, b"ok")])
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: next(responses))

    assert client.get_bytes("https://example.com/a.csv") == b"ok"


def test_http_client_error_is_not_retried(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=3))
    calls = []

    def fake_request(**kwargs):
        calls.append(kwargs["url"])
        return FakeResponse(404)

    monkeypatch.setattr(client.session, "request", fake_request)

    with pytest.raises(HttpRequestError):
        client.get_bytes("https://example.com/missing.csv")
    assert len(calls) == 1
