"""
Получение WAN адреса и IPv6 префикса с FRITZ!Box через TR-064 / UPnP (SOAP).

Действия сервиса WANIPConnection:1:
- GetExternalIPAddress → NewExternalIPAddress (IPv4)
- X_AVM_DE_GetExternalIPv6Address → NewExternalIPv6Address (IPv6)
- X_AVM_DE_GetIPv6Prefix → NewIPv6Prefix ("2001:db8:1234:5678::")

Пример использования:
    fritzbox = FritzBoxClient(url="http://fritz.box:49000")
    fritzbox.get_external_ipv4()   # "203.0.113.7"
    fritzbox.get_ipv6_prefix()     # "2001:db8:1234:5678::"
"""

import ipaddress
import xml.etree.ElementTree as ET
from typing import Optional

import requests

from ..core.exceptions import AddressSourceError
from ..core.logging import get_logger

logger = get_logger(__name__)

SERVICE_TYPE = "urn:schemas-upnp-org:service:WANIPConnection:1"

SOAP_ENVELOPE = """<?xml version="1.0" encoding="utf-8"?>
<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">
  <s:Body>
    <u:{action} xmlns:u="{service}"/>
  </s:Body>
</s:Envelope>"""


def find_soap_value(xml_text: str, element: str) -> Optional[str]:
    """
    Ищет значение элемента в SOAP ответе без учёта namespace.

    Returns:
        str или None если элемента нет
    """
    root = ET.fromstring(xml_text)
    for node in root.iter():
        tag = node.tag.rsplit("}", 1)[-1]
        if tag == element:
            return (node.text or "").strip()
    return None


class FritzBoxClient:
    """
    Клиент TR-064 для FRITZ!Box.

    Attributes:
        url: Базовый URL (http://fritz.box:49000)
        control_path: Путь control URL сервиса WANIPConnection
        timeout: Таймаут запроса (секунды)
    """

    def __init__(
        self,
        url: str = "http://fritz.box:49000",
        control_path: str = "/igdupnp/control/WANIPConn1",
        timeout: int = 10,
        session: Optional[requests.Session] = None,
    ):
        self.url = url.rstrip("/")
        self.control_path = control_path
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def control_url(self) -> str:
        return f"{self.url}{self.control_path}"

    def _call(self, action: str, result_element: str) -> str:
        """
        Выполняет SOAP действие и возвращает значение элемента ответа.

        Raises:
            AddressSourceError: Ошибка сети, HTTP или разбора XML
        """
        headers = {
            "Content-Type": 'text/xml; charset="utf-8"',
            "SOAPACTION": f"{SERVICE_TYPE}#{action}",
        }
        body = SOAP_ENVELOPE.format(action=action, service=SERVICE_TYPE)

        logger.debug(f"TR-064 {action}")
        try:
            resp = self._session.post(
                self.control_url,
                data=body.encode("utf-8"),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AddressSourceError(f"{action}: запрос не выполнен: {e}", source=self.control_url) from e

        if resp.status_code != 200:
            raise AddressSourceError(f"{action}: HTTP {resp.status_code}", source=self.control_url)

        try:
            value = find_soap_value(resp.text, result_element)
        except ET.ParseError as e:
            raise AddressSourceError(f"{action}: невалидный XML: {e}", source=self.control_url) from e

        if not value:
            raise AddressSourceError(f"{action}: в ответе нет {result_element}", source=self.control_url)
        return value

    def _validated(self, value: str, version: int, action: str) -> str:
        try:
            address = ipaddress.ip_address(value)
        except ValueError as e:
            raise AddressSourceError(f"{action}: {e}", source=self.control_url) from e
        if address.version != version:
            raise AddressSourceError(
                f"{action}: ожидался IPv{version}, получено {value}",
                source=self.control_url,
            )
        return address.compressed

    def get_external_ipv4(self) -> str:
        """Текущий WAN IPv4 адрес."""
        action = "GetExternalIPAddress"
        return self._validated(self._call(action, "NewExternalIPAddress"), 4, action)

    def get_external_ipv6(self) -> str:
        """Текущий WAN IPv6 адрес самого роутера."""
        action = "X_AVM_DE_GetExternalIPv6Address"
        return self._validated(self._call(action, "NewExternalIPv6Address"), 6, action)

    def get_ipv6_prefix(self) -> str:
        """Текущий IPv6 префикс локальной сети ("2001:db8:1234:5678::")."""
        action = "X_AVM_DE_GetIPv6Prefix"
        return self._validated(self._call(action, "NewIPv6Prefix"), 6, action)
