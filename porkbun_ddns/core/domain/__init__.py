"""
Domain Layer: чистые функции без сетевых вызовов.

- names: проверка и разбор FQDN
- ipv6: сборка адреса из префикса и идентификатора интерфейса
- records: решения create/edit/up_to_date/ambiguous
"""

from .names import DomainName, is_fqdn_valid, split_fqdn
from .ipv6 import combine_prefix_and_interface_id, parse_ipv6
from .records import (
    RecordType,
    ActiveRecord,
    DecisionType,
    Decision,
    ReportItem,
    CycleReport,
    decide_for_address,
    decide_for_prefix,
)

__all__ = [
    "DomainName",
    "is_fqdn_valid",
    "split_fqdn",
    "combine_prefix_and_interface_id",
    "parse_ipv6",
    "RecordType",
    "ActiveRecord",
    "DecisionType",
    "Decision",
    "ReportItem",
    "CycleReport",
    "decide_for_address",
    "decide_for_prefix",
]
