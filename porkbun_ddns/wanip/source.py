"""
Выбор источника адреса по режиму семейства.

    AddressMode.FRITZBOX_IP  → FRITZ!Box (IPv4 или IPv6 WAN адрес)
    AddressMode.HOST_IP      → echo-сервис (только IPv6)
    AddressMode.PREFIX_ONLY  → FRITZ!Box IPv6 префикс (current_prefix)
"""

from typing import Callable

from ..core.config_schema import AddressMode, AppConfig
from ..core.domain.records import RecordType
from .fritzbox import FritzBoxClient
from .host import get_host_ipv6


class AddressSource:
    """
    Текущие адреса для цикла обновления.

    Example:
        source = AddressSource.from_config(config)
        source.current_address(RecordType.A, AddressMode.FRITZBOX_IP)
        source.current_prefix()
    """

    def __init__(
        self,
        fritzbox: FritzBoxClient,
        host_ipv6: Callable[[], str],
    ):
        self.fritzbox = fritzbox
        self._host_ipv6 = host_ipv6

    @classmethod
    def from_config(cls, config: AppConfig) -> "AddressSource":
        fritzbox = FritzBoxClient(
            url=config.fritzbox.url,
            control_path=config.fritzbox.control_path,
            timeout=config.fritzbox.timeout,
        )
        host = config.host
        return cls(
            fritzbox=fritzbox,
            host_ipv6=lambda: get_host_ipv6(host.ipv6_echo_url, timeout=host.timeout),
        )

    def current_address(self, record_type: RecordType, mode: AddressMode) -> str:
        """
        Полный адрес для режимов fritzbox-ip и host-ip.

        Raises:
            AddressSourceError: Источник недоступен
            ValueError: Режим не поддерживает постоянный адрес
        """
        record_type = RecordType(record_type)
        if mode == AddressMode.FRITZBOX_IP:
            if record_type == RecordType.A:
                return self.fritzbox.get_external_ipv4()
            return self.fritzbox.get_external_ipv6()
        if mode == AddressMode.HOST_IP and record_type == RecordType.AAAA:
            return self._host_ipv6()
        raise ValueError(f"Режим {mode.value} не даёт адрес для {record_type.value}")

    def current_prefix(self) -> str:
        """IPv6 префикс для режима prefix-only."""
        return self.fritzbox.get_ipv6_prefix()
