"""
Pytest configuration и общие fixtures для тестов.

Предоставляет переиспользуемые fixtures:
- mock_porkbun_client: Mock Porkbun клиента
- mock_address_source: Mock источника адресов
- make_response: Фабрика ответов requests
- base_env: Минимальное окружение для load_config
"""

import pytest
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import requests

from porkbun_ddns.core.context import set_current_context
from porkbun_ddns.porkbun.client import PorkbunClient
from porkbun_ddns.wanip.source import AddressSource


@pytest.fixture(autouse=True)
def reset_context():
    """Глобальный контекст не переживает тест."""
    set_current_context(None)
    yield
    set_current_context(None)


@pytest.fixture
def mock_porkbun_client():
    """
    Mock Porkbun клиента для тестирования синхронизации.

    По умолчанию записей нет, create/edit успешны.
    """
    client = MagicMock(spec=PorkbunClient)
    client.retrieve_records.return_value = []
    client.create_record.return_value = "1001"
    client.edit_record.return_value = None
    client.ping.return_value = "203.0.113.7"
    return client


@pytest.fixture
def mock_address_source():
    """Mock источника адресов: IPv4 203.0.113.7, IPv6 2a01:4f8:1:2::10, префикс 2a01:4f8:1:3::."""
    source = MagicMock(spec=AddressSource)

    def current_address(record_type, mode):
        return "203.0.113.7" if record_type.value == "A" else "2a01:4f8:1:2::10"

    source.current_address.side_effect = current_address
    source.current_prefix.return_value = "2a01:4f8:1:3::"
    return source


@pytest.fixture
def make_response():
    """
    Фабрика requests.Response.

    Usage:
        resp = make_response(200, {"status": "SUCCESS"})
        resp = make_response(200, text="<xml/>")
    """
    def _make(
        status_code: int = 200,
        json_data: Optional[Dict[str, Any]] = None,
        text: Optional[str] = None,
    ) -> requests.Response:
        import json

        resp = requests.Response()
        resp.status_code = status_code
        if json_data is not None:
            resp._content = json.dumps(json_data).encode("utf-8")
        else:
            resp._content = (text or "").encode("utf-8")
        resp.encoding = "utf-8"
        return resp
    return _make


@pytest.fixture
def base_env() -> Dict[str, str]:
    """Минимальное валидное окружение."""
    return {
        "APIKEY": "pk1_testkey",
        "SECRETKEY": "sk1_testsecret",
        "DOMAINS": "home.example.com,example.com",
    }
