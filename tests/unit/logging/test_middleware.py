"""Unit tests for request logging helpers."""

import pytest
from starlette.requests import Request

from todolist.core.logging import get_client_ip
from todolist.core.logging.middleware import level_for


def make_request(headers: dict[str, str], client: tuple[str, int] | None = ("10.0.0.9", 5000)):
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
            "query_string": b"",
            "client": client,
        }
    )


@pytest.mark.parametrize(
    ("status_code", "level"),
    [(200, "info"), (204, "info"), (404, "warning"), (422, "warning"), (503, "error")],
)
def test_level_for(status_code, level):
    assert level_for(status_code) == level


class TestClientIp:
    def test_first_forwarded_address_wins(self):
        request = make_request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})

        assert get_client_ip(request) == "203.0.113.7"

    def test_real_ip_header(self):
        assert get_client_ip(make_request({"X-Real-IP": "198.51.100.2"})) == "198.51.100.2"

    def test_falls_back_to_socket_peer(self):
        assert get_client_ip(make_request({})) == "10.0.0.9"

    def test_unknown_client(self):
        assert get_client_ip(make_request({}, client=None)) is None
