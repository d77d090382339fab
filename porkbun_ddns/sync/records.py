"""
Синхронизация адресных записей Porkbun с текущим WAN адресом.

Один цикл:
    1. Текущий адрес (или префикс) каждого включённого семейства
       запрашивается один раз и используется для всех доменов.
    2. Для каждого домена по порядку: проверка имени. Невалидное имя
       прерывает обработку всех оставшихся доменов цикла.
    3. Для каждого семейства: активные записи → решение → create/edit.
       Ошибка получения записей пропускает только эту пару.

Пример использования:
    sync = RecordSync(client, source, SyncSettings.from_config(config.update))
    report = sync.run_cycle(RunContext.create())
    print(report.summary())
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..core.config_schema import AddressMode, UpdateConfig
from ..core.context import RunContext
from ..core.domain.names import DomainName
from ..core.domain.records import (
    ActiveRecord,
    CycleReport,
    Decision,
    DecisionType,
    RecordType,
    ReportItem,
    decide_for_address,
    decide_for_prefix,
)
from ..core.exceptions import (
    AddressComputeError,
    AddressSourceError,
    DomainValidationError,
    MutationError,
    PorkbunError,
    RetrievalError,
    format_error_for_log,
    is_retryable,
)
from ..core.logging import StructuredLogger, get_logger
from ..core.retry import RetryError, call_with_retries
from ..porkbun.client import PorkbunClient
from ..wanip.source import AddressSource

logger = get_logger(__name__)


@dataclass
class SyncSettings:
    """
    Явные настройки синхронизации.

    Attributes:
        domains: FQDN в порядке обработки
        ipv4_mode: DISABLED или FRITZBOX_IP
        ipv6_mode: Любой AddressMode
        edit_attempts: Попыток изменения записи
    """
    domains: List[str] = field(default_factory=list)
    ipv4_mode: AddressMode = AddressMode.FRITZBOX_IP
    ipv6_mode: AddressMode = AddressMode.DISABLED
    edit_attempts: int = 3

    @classmethod
    def from_config(cls, update: UpdateConfig) -> "SyncSettings":
        return cls(
            domains=list(update.domains),
            ipv4_mode=update.ipv4_mode,
            ipv6_mode=update.ipv6,
            edit_attempts=update.edit_attempts,
        )


@dataclass(frozen=True)
class FamilyTarget:
    """
    Желаемое состояние семейства на этот цикл.

    Attributes:
        record_type: A или AAAA
        mode: Источник адреса
        value: Адрес (fritzbox-ip, host-ip) или префикс (prefix-only)
    """
    record_type: RecordType
    mode: AddressMode
    value: str


class RecordSync:
    """
    Синхронизатор адресных записей.

    Состояние между циклами не хранится: каждый run_cycle заново
    получает адреса и активные записи.
    """

    def __init__(
        self,
        client: PorkbunClient,
        source: AddressSource,
        settings: SyncSettings,
    ):
        self.client = client
        self.source = source
        self.settings = settings

    # ==================== ЦИКЛ ====================

    def run_cycle(self, context: Optional[RunContext] = None) -> CycleReport:
        """
        Выполняет один цикл синхронизации.

        Args:
            context: Контекст цикла (если None, создаётся новый без dry_run)

        Returns:
            CycleReport: Сводка цикла
        """
        ctx = context or RunContext.create()
        report = CycleReport()

        targets = self.resolve_targets(report)
        if not targets:
            logger.warning("Нет ни одного текущего адреса, цикл пропущен")
            return report

        for fqdn in self.settings.domains:
            try:
                domain = DomainName.parse(fqdn)
            except DomainValidationError:
                logger.warning(
                    f"{fqdn} не является валидным доменом, "
                    f"оставшиеся домены в этом цикле не обрабатываются",
                    domain=fqdn,
                )
                report.aborted_at = fqdn
                break

            for target in targets:
                report.add(self.sync_record(domain, target, dry_run=ctx.dry_run))

        logger.info(f"Цикл завершён за {ctx.elapsed_human}: {report.summary()}")
        return report

    def resolve_targets(self, report: CycleReport) -> List[FamilyTarget]:
        """
        Запрашивает текущие адреса включённых семейств (по одному разу).

        Семейство, для которого адрес получить не удалось, пропускается
        до следующего цикла.
        """
        wanted = [
            (RecordType.A, self.settings.ipv4_mode),
            (RecordType.AAAA, self.settings.ipv6_mode),
        ]

        targets = []
        for record_type, mode in wanted:
            if mode == AddressMode.DISABLED:
                continue
            try:
                if mode == AddressMode.PREFIX_ONLY:
                    value = self.source.current_prefix()
                else:
                    value = self.source.current_address(record_type, mode)
            except AddressSourceError as e:
                logger.warning(
                    f"Не удалось получить текущий {record_type.family} ({mode.value}): "
                    f"{format_error_for_log(e)}",
                    record_type=record_type.value,
                )
                report.skipped_families.append(record_type.value)
                continue

            logger.debug(f"Текущий {record_type.family} ({mode.value}): {value}")
            targets.append(FamilyTarget(record_type=record_type, mode=mode, value=value))
        return targets

    # ==================== ОДНА ЗАПИСЬ ====================

    def sync_record(
        self,
        domain: DomainName,
        target: FamilyTarget,
        dry_run: bool = False,
    ) -> ReportItem:
        """
        Приводит записи одного домена и типа к желаемому состоянию.

        Returns:
            ReportItem: status одно из created, updated, up_to_date,
                        skipped, failed, dry_run
        """
        record_type = target.record_type
        log = logger.bind(domain=domain.fqdn, record_type=record_type.value)
        item = ReportItem(domain=domain.fqdn, record_type=record_type)

        try:
            records = self.retrieve(domain, record_type)
        except RetrievalError as e:
            log.warning(f"Обновление пропущено: не удалось получить активные записи. {e.message}")
            item.decision = Decision.retrieval_failed(e.message)
            item.status = "failed"
            item.error = str(e)
            return item

        try:
            decision = self.decide(target, records)
        except AddressComputeError as e:
            log.warning(f"Не удалось вычислить адрес из префикса {target.value}: {e.message}")
            item.status = "failed"
            item.error = str(e)
            return item

        item.decision = decision

        if decision.action == DecisionType.UP_TO_DATE:
            log.info("Запись актуальна", address=decision.new_address)
            item.status = "up_to_date"
        elif decision.action == DecisionType.AMBIGUOUS:
            log.warning(
                f"Найдено {decision.count} активных записей. "
                f"Удалите лишние записи в веб-интерфейсе Porkbun"
            )
            item.status = "skipped"
        elif decision.action == DecisionType.NO_RECORD:
            log.warning(
                f"Запись не найдена. В режиме {AddressMode.PREFIX_ONLY.value} "
                f"можно только изменять существующие записи"
            )
            item.status = "skipped"
        elif dry_run:
            log.info(f"[DRY-RUN] {decision.action.value}: {decision}")
            item.status = "dry_run"
        else:
            try:
                self.apply(domain, record_type, decision, log)
            except MutationError as e:
                log.warning(f"Запись не изменена: {format_error_for_log(e)}")
                item.status = "failed"
                item.error = str(e)
            else:
                item.status = "created" if decision.action == DecisionType.CREATE else "updated"

        return item

    def retrieve(self, domain: DomainName, record_type: RecordType) -> List[ActiveRecord]:
        """
        Активные записи домена.

        Raises:
            RetrievalError: Porkbun недоступен или ответил ошибкой
        """
        try:
            return self.client.retrieve_records(domain.subdomain, domain.root_domain, record_type)
        except PorkbunError as e:
            raise RetrievalError(
                format_error_for_log(e),
                domain=domain.fqdn,
                record_type=record_type.value,
            ) from e

    @staticmethod
    def decide(target: FamilyTarget, records: Sequence[ActiveRecord]) -> Decision:
        """Решение по режиму семейства."""
        if target.mode == AddressMode.PREFIX_ONLY:
            return decide_for_prefix(target.value, records)
        return decide_for_address(target.value, records)

    def apply(
        self,
        domain: DomainName,
        record_type: RecordType,
        decision: Decision,
        log: StructuredLogger = logger,
    ) -> None:
        """
        Выполняет create (одна попытка) или edit (до edit_attempts попыток).

        Raises:
            MutationError: Операция не удалась
        """
        if decision.action == DecisionType.CREATE:
            try:
                self.client.create_record(
                    domain.subdomain, domain.root_domain, record_type, decision.new_address,
                )
            except PorkbunError as e:
                raise MutationError(
                    format_error_for_log(e),
                    domain=domain.fqdn,
                    record_type=record_type.value,
                    operation="create",
                    attempts=1,
                ) from e
            log.info(f"Запись создана: {decision.new_address}", operation="create")
            return

        if decision.action != DecisionType.EDIT:
            raise ValueError(f"Решение {decision.action.value} не требует изменений")

        def on_failure(attempt: int, attempts: int, error: Exception) -> None:
            log.warning(f"Попытка изменения {attempt}/{attempts} не удалась: {error}", operation="edit")

        try:
            call_with_retries(
                lambda: self.client.edit_record(
                    decision.record_id,
                    domain.subdomain,
                    domain.root_domain,
                    record_type,
                    decision.new_address,
                ),
                attempts=self.settings.edit_attempts,
                catch=(PorkbunError,),
                retry_if=is_retryable,
                on_failure=on_failure,
            )
        except RetryError as e:
            raise MutationError(
                format_error_for_log(e.last_error),
                domain=domain.fqdn,
                record_type=record_type.value,
                operation="edit",
                attempts=e.attempts,
            ) from e

        log.info(
            f"Запись обновлена: {decision.old_address} → {decision.new_address}",
            operation="edit",
        )
