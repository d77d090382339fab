"""
Определение глобального IPv6 адреса хоста через echo-сервис.

Сервис по умолчанию (api6.ipify.org) доступен только по IPv6,
поэтому ответ — адрес, с которого хост выходит в интернет по IPv6.
"""

import ipaddress
from typing import Optional

import requests

from ..core.exceptions import AddressSourceError
from ..core.logging import get_logger

logger = get_logger(__name__)


def get_host_ipv6(
    echo_url: str = "https://api6.ipify.org?format=json",
    timeout: int = 5,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Возвращает глобальный unicast IPv6 адрес хоста.

    Ответ сервиса: {"ip": "2001:db8::1"} или просто адрес текстом.

    Raises:
        AddressSourceError: Сервис недоступен или вернул не IPv6
    """
    http = session or requests
    try:
        resp = http.get(echo_url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise AddressSourceError(
            f"Echo-сервис недоступен: {e}. Есть ли у хоста (Docker сети) IPv6?",
            source=echo_url,
        ) from e

    try:
        value = resp.json().get("ip", "")
    except (ValueError, AttributeError):
        value = resp.text.strip()

    try:
        address = ipaddress.IPv6Address(value)
    except ipaddress.AddressValueError as e:
        raise AddressSourceError(f"Echo-сервис вернул не IPv6 адрес: {value!r}", source=echo_url) from e

    if not address.is_global:
        raise AddressSourceError(f"Адрес {address} не глобальный", source=echo_url)

    logger.debug(f"IPv6 хоста: {address.compressed}")
    return address.compressed
