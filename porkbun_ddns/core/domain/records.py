"""
Domain Layer для синхронизации DNS записей.

Чистые функции принятия решения: что сделать с записями одного домена
(создать, изменить, ничего, предупредить). Не зависят от Porkbun API.

Пример использования:
    from porkbun_ddns.core.domain.records import decide_for_address, ActiveRecord

    decision = decide_for_address("1.2.3.4", [ActiveRecord(id="42", address="1.2.3.3")])
    decision.action         # DecisionType.EDIT
    decision.record_id      # "42"
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from .ipv6 import combine_prefix_and_interface_id


class RecordType(str, Enum):
    """Тип адресной записи."""
    A = "A"
    AAAA = "AAAA"

    @property
    def family(self) -> str:
        return "ipv4" if self is RecordType.A else "ipv6"


@dataclass(frozen=True)
class ActiveRecord:
    """
    Запись, которая сейчас есть у регистратора.

    Attributes:
        id: Идентификатор записи в Porkbun
        address: Текущее значение (content)
    """
    id: str
    address: str


class DecisionType(str, Enum):
    """Итог сравнения желаемого адреса с активными записями."""
    CREATE = "create"
    EDIT = "edit"
    UP_TO_DATE = "up_to_date"
    AMBIGUOUS = "ambiguous"
    NO_RECORD = "no_record"
    RETRIEVAL_FAILED = "retrieval_failed"


@dataclass
class Decision:
    """
    Решение для пары (домен, тип записи).

    Attributes:
        action: Тип решения
        new_address: Адрес, который должен быть в записи (create/edit/up_to_date)
        record_id: ID изменяемой записи (edit/up_to_date)
        old_address: Текущий адрес записи (edit/up_to_date)
        count: Количество активных записей
        reason: Причина (retrieval_failed)
    """
    action: DecisionType
    new_address: Optional[str] = None
    record_id: Optional[str] = None
    old_address: Optional[str] = None
    count: int = 0
    reason: str = ""

    @property
    def mutates(self) -> bool:
        """Требует ли решение вызова create/edit."""
        return self.action in (DecisionType.CREATE, DecisionType.EDIT)

    def __str__(self) -> str:
        if self.action == DecisionType.CREATE:
            return f"+ {self.new_address}"
        elif self.action == DecisionType.EDIT:
            return f"~ {self.old_address} → {self.new_address}"
        elif self.action == DecisionType.UP_TO_DATE:
            return f"= {self.new_address}"
        elif self.action == DecisionType.AMBIGUOUS:
            return f"! {self.count} records"
        elif self.action == DecisionType.NO_RECORD:
            return "! no record"
        return f"! {self.reason}"

    @classmethod
    def retrieval_failed(cls, reason: str) -> "Decision":
        return cls(action=DecisionType.RETRIEVAL_FAILED, reason=reason)


def decide_for_address(desired: str, records: Sequence[ActiveRecord]) -> Decision:
    """
    Решение для постоянного адреса (fritzbox-ip, host-ip).

    0 записей → create, 1 запись → edit или up_to_date,
    больше одной → ambiguous (ничего не трогаем).

    Args:
        desired: Текущий адрес, который должен быть в записи
        records: Активные записи

    Returns:
        Decision: Решение
    """
    if not records:
        return Decision(action=DecisionType.CREATE, new_address=desired)

    if len(records) > 1:
        return Decision(action=DecisionType.AMBIGUOUS, count=len(records))

    record = records[0]
    action = DecisionType.UP_TO_DATE if record.address == desired else DecisionType.EDIT
    return Decision(
        action=action,
        new_address=desired,
        record_id=record.id,
        old_address=record.address,
        count=1,
    )


def decide_for_prefix(prefix: str, records: Sequence[ActiveRecord]) -> Decision:
    """
    Решение для режима prefix-only.

    Адрес считается для каждой записи отдельно: префикс сети +
    идентификатор интерфейса из существующей записи. Без записи
    адрес вычислить не из чего, поэтому создание не выполняется.

    Args:
        prefix: Текущий IPv6 префикс ("2001:db8:1234:5678::")
        records: Активные AAAA записи

    Returns:
        Decision: Решение

    Raises:
        InvalidAddressError: prefix или адрес записи не IPv6
    """
    if not records:
        return Decision(action=DecisionType.NO_RECORD)

    if len(records) > 1:
        return Decision(action=DecisionType.AMBIGUOUS, count=len(records))

    record = records[0]
    desired = combine_prefix_and_interface_id(prefix, record.address)
    action = DecisionType.UP_TO_DATE if record.address == desired else DecisionType.EDIT
    return Decision(
        action=action,
        new_address=desired,
        record_id=record.id,
        old_address=record.address,
        count=1,
    )


@dataclass
class ReportItem:
    """Итог обработки одной пары (домен, тип записи)."""
    domain: str
    record_type: RecordType
    decision: Optional[Decision] = None
    status: str = ""
    error: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "domain": self.domain,
            "record_type": self.record_type.value,
            "action": self.decision.action.value if self.decision else None,
            "status": self.status,
            "error": self.error,
        }


@dataclass
class CycleReport:
    """
    Сводка одного цикла.

    Attributes:
        items: Результаты по парам (домен, тип записи)
        aborted_at: Домен, на котором цикл был прерван (невалидное имя)
        skipped_families: Семейства, для которых не удалось получить адрес
    """
    items: List[ReportItem] = field(default_factory=list)
    aborted_at: Optional[str] = None
    skipped_families: List[str] = field(default_factory=list)

    STATUSES = ("created", "updated", "up_to_date", "skipped", "failed", "dry_run")

    def add(self, item: ReportItem) -> ReportItem:
        self.items.append(item)
        return item

    @property
    def stats(self) -> Dict[str, int]:
        """Счётчики по статусам."""
        result = {status: 0 for status in self.STATUSES}
        for item in self.items:
            result[item.status] = result.get(item.status, 0) + 1
        return result

    @property
    def has_failures(self) -> bool:
        return bool(self.stats["failed"] or self.aborted_at or self.skipped_families)

    def summary(self) -> str:
        """Краткая сводка: "+1 created, ~1 updated, =2 up_to_date"."""
        stats = self.stats
        parts = []
        if stats["created"]:
            parts.append(f"+{stats['created']} created")
        if stats["updated"]:
            parts.append(f"~{stats['updated']} updated")
        if stats["up_to_date"]:
            parts.append(f"={stats['up_to_date']} up_to_date")
        if stats["dry_run"]:
            parts.append(f"?{stats['dry_run']} dry_run")
        if stats["skipped"]:
            parts.append(f"-{stats['skipped']} skipped")
        if stats["failed"]:
            parts.append(f"!{stats['failed']} failed")
        if self.skipped_families:
            parts.append(f"no address: {', '.join(self.skipped_families)}")
        if self.aborted_at:
            parts.append(f"aborted at {self.aborted_at}")

        if not parts:
            return "no records processed"
        return ", ".join(parts)
