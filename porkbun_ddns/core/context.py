"""
Контекст выполнения одного цикла обновления.

RunContext создаётся CLI на каждый цикл и передаётся в RecordSync явно.
Глобальная копия (set_current_context) нужна только логгеру, чтобы
добавлять run_id в каждую запись. Движок её не читает.

Пример использования:
    ctx = RunContext.create(dry_run=True, triggered_by="once")
    set_current_context(ctx)
    report = sync.run_cycle(context=ctx)
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Literal

logger = logging.getLogger(__name__)

TriggerSource = Literal["loop", "once", "test"]


@dataclass
class RunContext:
    """
    Контекст выполнения цикла.

    Attributes:
        run_id: Идентификатор цикла (время начала, 2025-03-14T12-30-22)
        started_at: Время начала цикла
        dry_run: Режим симуляции (без create/edit)
        triggered_by: Источник запуска
    """

    run_id: str
    started_at: datetime
    dry_run: bool = False
    triggered_by: TriggerSource = "loop"

    @classmethod
    def create(
        cls,
        dry_run: bool = False,
        triggered_by: TriggerSource = "loop",
    ) -> "RunContext":
        """Создаёт контекст нового цикла."""
        started_at = datetime.now()
        ctx = cls(
            run_id=started_at.strftime("%Y-%m-%dT%H-%M-%S"),
            started_at=started_at,
            dry_run=dry_run,
            triggered_by=triggered_by,
        )
        logger.debug(f"Создан {ctx} ({triggered_by})")
        return ctx

    @property
    def elapsed_human(self) -> str:
        """Время выполнения: "4.2s" или "1m 5s"."""
        elapsed = (datetime.now() - self.started_at).total_seconds()
        if elapsed < 60:
            return f"{elapsed:.1f}s"
        return f"{int(elapsed // 60)}m {int(elapsed % 60)}s"

    def __str__(self) -> str:
        dry = " [DRY-RUN]" if self.dry_run else ""
        return f"RunContext({self.run_id}{dry})"


# Глобальный контекст для логгера
_current_context: Optional[RunContext] = None


def get_current_context() -> Optional[RunContext]:
    """Возвращает текущий глобальный контекст."""
    return _current_context


def set_current_context(ctx: Optional[RunContext]) -> None:
    """Устанавливает текущий глобальный контекст."""
    global _current_context
    _current_context = ctx
