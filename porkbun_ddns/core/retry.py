"""
Повтор операции до N раз поверх tenacity.

Возвращает результат первой успешной попытки или выбрасывает
RetryError с ошибкой последней. Между попытками нет общего
изменяемого состояния.

Пример:
    result = call_with_retries(
        lambda: client.edit_record(record_id, sub, root, "A", "1.2.3.4"),
        attempts=3,
        catch=(PorkbunError,),
        retry_if=is_retryable,
    )
    result.value      # ответ API
    result.attempts   # 2, если первая попытка упала по таймауту
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, Tuple, Type, TypeVar

from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_fixed, wait_none

T = TypeVar("T")


@dataclass
class RetryResult(Generic[T]):
    """Результат успешного вызова."""
    value: T
    attempts: int


class RetryError(Exception):
    """
    Все попытки исчерпаны (или ошибка не подлежит повтору).

    Attributes:
        last_error: Исключение последней попытки
        attempts: Сколько попыток было сделано
    """

    def __init__(self, last_error: Exception, attempts: int):
        self.last_error = last_error
        self.attempts = attempts
        super().__init__(f"{attempts} attempt(s) failed: {last_error}")


def call_with_retries(
    func: Callable[[], T],
    attempts: int = 3,
    catch: Tuple[Type[Exception], ...] = (Exception,),
    retry_if: Callable[[Exception], bool] = lambda e: True,
    delay: float = 0.0,
    on_failure: Optional[Callable[[int, int, Exception], Any]] = None,
) -> RetryResult[T]:
    """
    Вызывает func до attempts раз.

    Исключения не из catch пробрасываются сразу, без повтора.

    Args:
        func: Функция без аргументов
        attempts: Максимум попыток (>= 1)
        catch: Типы исключений, которые считаются неудачной попыткой
        retry_if: Повторять ли после данной ошибки
        delay: Пауза между попытками в секундах
        on_failure: Callback(attempt, attempts, error) после каждой неудачи

    Returns:
        RetryResult: Значение и номер успешной попытки

    Raises:
        RetryError: Последняя ошибка и количество попыток
    """
    if attempts < 1:
        raise ValueError("attempts must be >= 1")

    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        retry=retry_if_exception(lambda e: isinstance(e, catch) and retry_if(e)),
        wait=wait_fixed(delay) if delay else wait_none(),
        sleep=time.sleep,
        reraise=True,
    )

    attempt_number = 0
    try:
        for attempt in retrying:
            with attempt:
                attempt_number = attempt.retry_state.attempt_number
                try:
                    value = func()
                except catch as e:
                    if on_failure is not None:
                        on_failure(attempt_number, attempts, e)
                    raise
    except catch as e:
        raise RetryError(e, attempt_number) from e

    return RetryResult(value=value, attempts=attempt_number)
