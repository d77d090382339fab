"""
Источники текущего адреса: FRITZ!Box (TR-064) и echo-сервис для хоста.
"""

from .fritzbox import FritzBoxClient, find_soap_value
from .host import get_host_ipv6
from .source import AddressSource

__all__ = [
    "FritzBoxClient",
    "find_soap_value",
    "get_host_ipv6",
    "AddressSource",
]
