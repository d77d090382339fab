"""
Тесты для выбора источника адреса.
"""

from unittest.mock import MagicMock

import pytest

from porkbun_ddns.config import load_config
from porkbun_ddns.core.config_schema import AddressMode
from porkbun_ddns.core.domain.records import RecordType
from porkbun_ddns.wanip.fritzbox import FritzBoxClient
from porkbun_ddns.wanip.source import AddressSource


@pytest.fixture
def fritzbox():
    box = MagicMock(spec=FritzBoxClient)
    box.get_external_ipv4.return_value = "203.0.113.7"
    box.get_external_ipv6.return_value = "2a01:4f8:1:2::1"
    box.get_ipv6_prefix.return_value = "2a01:4f8:1:3::"
    return box


@pytest.fixture
def host_ipv6():
    return MagicMock(return_value="2a01:4f8:1:2::10")


@pytest.fixture
def source(fritzbox, host_ipv6):
    return AddressSource(fritzbox=fritzbox, host_ipv6=host_ipv6)


def test_fritzbox_ipv4(source, fritzbox):
    assert source.current_address(RecordType.A, AddressMode.FRITZBOX_IP) == "203.0.113.7"
    fritzbox.get_external_ipv4.assert_called_once()


def test_fritzbox_ipv6(source, host_ipv6):
    assert source.current_address(RecordType.AAAA, AddressMode.FRITZBOX_IP) == "2a01:4f8:1:2::1"
    host_ipv6.assert_not_called()


def test_host_ipv6(source, fritzbox):
    assert source.current_address(RecordType.AAAA, AddressMode.HOST_IP) == "2a01:4f8:1:2::10"
    fritzbox.get_external_ipv6.assert_not_called()


def test_prefix(source):
    assert source.current_prefix() == "2a01:4f8:1:3::"


@pytest.mark.parametrize("record_type, mode", [
    (RecordType.A, AddressMode.HOST_IP),
    (RecordType.AAAA, AddressMode.PREFIX_ONLY),
    (RecordType.A, AddressMode.DISABLED),
])
def test_unsupported_mode(source, record_type, mode):
    with pytest.raises(ValueError):
        source.current_address(record_type, mode)


def test_from_config(base_env, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = load_config(environ=dict(base_env, FRITZBOX_URL="http://192.168.178.1:49000"))

    source = AddressSource.from_config(config)

    assert source.fritzbox.control_url == "http://192.168.178.1:49000/igdupnp/control/WANIPConn1"
