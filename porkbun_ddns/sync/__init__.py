"""
Синхронизация записей Porkbun.

- RecordSync: цикл обновления (домены × семейства адресов)
- SyncSettings: явные настройки цикла
"""

from .records import RecordSync, SyncSettings, FamilyTarget

__all__ = ["RecordSync", "SyncSettings", "FamilyTarget"]
