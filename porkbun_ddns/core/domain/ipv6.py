"""
Сборка IPv6 адреса из префикса сети и идентификатора интерфейса.

Провайдер меняет префикс, суффикс (нижние 64 бита) остаётся тем,
который был у существующей записи.

Пример:
    combine_prefix_and_interface_id("2001:db8::", "fe80:efef:db8:1234:5678:90ab:cdef:123")
    # "2001:db8::5678:90ab:cdef:123"
"""

import ipaddress

from ..exceptions import InvalidAddressError

INTERFACE_ID_BITS = 64
INTERFACE_ID_MASK = (1 << INTERFACE_ID_BITS) - 1
PREFIX_MASK = ((1 << 128) - 1) ^ INTERFACE_ID_MASK


def parse_ipv6(value: str) -> ipaddress.IPv6Address:
    """
    Парсит IPv6 адрес.

    Raises:
        InvalidAddressError: Строка не является IPv6 адресом
    """
    try:
        return ipaddress.IPv6Address(value.strip())
    except (ipaddress.AddressValueError, AttributeError) as e:
        raise InvalidAddressError(f"Не IPv6 адрес: {e}", value=value) from e


def combine_prefix_and_interface_id(prefix: str, reference: str) -> str:
    """
    Объединяет верхние 64 бита prefix с нижними 64 битами reference.

    Args:
        prefix: Адрес, чьи первые четыре группы берутся как префикс
                ("2001:db8:1234:5678::" или любой адрес из сети)
        reference: Адрес, чьи последние четыре группы сохраняются

    Returns:
        str: Адрес в каноничной сжатой форме (RFC 5952)

    Raises:
        InvalidAddressError: prefix или reference не IPv6 адрес
    """
    prefix_addr = parse_ipv6(prefix)
    reference_addr = parse_ipv6(reference)

    combined = (int(prefix_addr) & PREFIX_MASK) | (int(reference_addr) & INTERFACE_ID_MASK)
    return ipaddress.IPv6Address(combined).compressed
