"""
Тесты для определения IPv6 адреса хоста.
"""

from unittest.mock import MagicMock

import pytest
import requests

from porkbun_ddns.core.exceptions import AddressSourceError
from porkbun_ddns.wanip.host import get_host_ipv6

ECHO_URL = "https://api6.ipify.org?format=json"


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


def test_json_response(session, make_response):
    session.get.return_value = make_response(200, {"ip": "2a01:4f8:1:2::10"})

    assert get_host_ipv6(ECHO_URL, timeout=3, session=session) == "2a01:4f8:1:2::10"
    session.get.assert_called_once_with(ECHO_URL, timeout=3)


def test_plain_text_response(session, make_response):
    session.get.return_value = make_response(200, text="2A01:4F8:1:2:0:0:0:10\n")

    assert get_host_ipv6("https://api6.ipify.org", session=session) == "2a01:4f8:1:2::10"


@pytest.mark.parametrize("value", ["203.0.113.7", "garbage", ""])
def test_not_ipv6(session, make_response, value):
    session.get.return_value = make_response(200, {"ip": value})

    with pytest.raises(AddressSourceError):
        get_host_ipv6(ECHO_URL, session=session)


@pytest.mark.parametrize("value", ["fe80::1", "fd00::1", "::1"])
def test_not_global(session, make_response, value):
    session.get.return_value = make_response(200, {"ip": value})

    with pytest.raises(AddressSourceError, match="не глобальный"):
        get_host_ipv6(ECHO_URL, session=session)


def test_service_unavailable(session):
    session.get.side_effect = requests.ConnectionError("Network is unreachable")

    with pytest.raises(AddressSourceError) as exc_info:
        get_host_ipv6(ECHO_URL, session=session)

    assert exc_info.value.source == ECHO_URL


def test_http_error(session, make_response):
    session.get.return_value = make_response(502, text="Bad Gateway")

    with pytest.raises(AddressSourceError):
        get_host_ipv6(ECHO_URL, session=session)
