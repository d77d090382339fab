"""
Porkbun DDNS - обновление DNS записей Porkbun при смене WAN адреса.

Каждый цикл:
- запрашивает текущий IPv4/IPv6 адрес (или IPv6 префикс) у FRITZ!Box или хоста
- сравнивает его с активными A/AAAA записями в Porkbun
- создаёт или изменяет записи, если адрес поменялся

Примеры использования:
    # CLI
    python -m porkbun_ddns run
    python -m porkbun_ddns once --dry-run

    # Python API
    from porkbun_ddns import load_config, build_sync

    config = load_config("config.yaml")
    report = build_sync(config).run_cycle()
"""

__version__ = "1.0.0"

from .config import load_config
from .porkbun.client import PorkbunClient
from .wanip.source import AddressSource
from .sync.records import RecordSync, SyncSettings


def build_sync(config) -> RecordSync:
    """Собирает RecordSync из AppConfig."""
    return RecordSync(
        client=PorkbunClient.from_config(config.porkbun),
        source=AddressSource.from_config(config),
        settings=SyncSettings.from_config(config.update),
    )


__all__ = [
    "__version__",
    "load_config",
    "build_sync",
    "PorkbunClient",
    "AddressSource",
    "RecordSync",
    "SyncSettings",
]
