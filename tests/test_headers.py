import httpx

from core.headers import HeaderBuilder


def test_strips_excluded_headers_case_insensitively():
    builder = HeaderBuilder()

    headers = builder.build_relay_headers(
        {
            "Host": "relay.local",
            "ORIGIN": "https://caller.example",
            "Referer": "https://caller.example/",
            "Content-Length": "12",
            "Accept": "application/json",
            "X-Api-Key": "secret",
        }
    )

    assert list(headers.keys()) == ["accept", "x-api-key"]
    assert headers["Accept"] == "application/json"
    assert headers["x-api-key"] == "secret"


def test_keeps_repeated_headers_in_order():
    builder = HeaderBuilder()

    headers = builder.build_relay_headers(
        [("x-tag", "a"), ("host", "relay.local"), ("x-tag", "b"), ("cookie", "c=1")]
    )

    assert headers.get_list("x-tag") == ["a", "b"]
    assert headers.multi_items() == [("x-tag", "a"), ("x-tag", "b"), ("cookie", "c=1")]


def test_custom_exclusions():
    builder = HeaderBuilder(excluded=["X-Internal"])

    headers = builder.build_relay_headers({"x-internal": "1", "host": "kept.example"})

    assert "x-internal" not in headers
    assert headers["host"] == "kept.example"


def test_response_headers_drop_hop_by_hop_and_framing():
    builder = HeaderBuilder()
    target_headers = httpx.Headers(
        [
            ("Content-Type", "text/plain"),
            ("Content-Length", "10"),
            ("Content-Encoding", "gzip"),
            ("Transfer-Encoding", "chunked"),
            ("Connection", "keep-alive"),
            ("Keep-Alive", "timeout=5"),
            ("Set-Cookie", "a=1"),
            ("Set-Cookie", "b=2"),
            ("ETag", '"v1"'),
        ]
    )

    assert builder.build_response_headers(target_headers) == [
        ("content-type", "text/plain"),
        ("set-cookie", "a=1"),
        ("set-cookie", "b=2"),
        ("etag", '"v1"'),
    ]
