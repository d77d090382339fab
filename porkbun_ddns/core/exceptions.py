"""
Типизированные исключения для Porkbun DDNS.

Иерархия:
    DDNSError (базовый)
    ├── DomainValidationError (невалидное имя домена)
    ├── RetrievalError (не удалось получить активные записи)
    ├── MutationError (не удалось создать/изменить запись)
    ├── AddressComputeError (не удалось вычислить адрес)
    │   └── InvalidAddressError (адрес не парсится)
    ├── AddressSourceError (FRITZ!Box / echo-сервис)
    ├── PorkbunError (Porkbun API)
    │   ├── PorkbunConnectionError (сеть, таймаут)
    │   └── PorkbunAPIError (HTTP статус, формат ответа)
    └── ConfigError (конфигурация)

Пример использования:
    from porkbun_ddns.core.exceptions import RetrievalError

    try:
        records = engine.retrieve(domain, RecordType.A)
    except RetrievalError as e:
        logger.warning(f"Пропуск {e.domain}: {e.message}")
"""

from typing import Optional, Any


class DDNSError(Exception):
    """
    Базовое исключение для всех ошибок Porkbun DDNS.

    Attributes:
        message: Описание ошибки
        details: Дополнительные детали (dict)
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def to_dict(self) -> dict:
        """Сериализация для логов."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# === Reconciliation Errors ===

class DomainValidationError(DDNSError):
    """
    Имя домена не похоже на FQDN.

    Пример:
        raise DomainValidationError("Невалидный домен", fqdn="example..com")
    """

    def __init__(
        self,
        message: str,
        fqdn: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.fqdn = fqdn
        details = details or {}
        if fqdn is not None:
            details["fqdn"] = fqdn
        super().__init__(message, details)


class RecordOperationError(DDNSError):
    """
    Ошибка операции над записью конкретного домена.

    Attributes:
        domain: FQDN
        record_type: A или AAAA
        operation: retrieve, create, edit
    """

    def __init__(
        self,
        message: str,
        domain: Optional[str] = None,
        record_type: Optional[str] = None,
        operation: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.domain = domain
        self.record_type = record_type
        self.operation = operation
        details = details or {}
        if domain:
            details["domain"] = domain
        if record_type:
            details["record_type"] = record_type
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class RetrievalError(RecordOperationError):
    """
    Не удалось получить активные записи у регистратора.

    Пример:
        raise RetrievalError("503", domain="sub.example.com", record_type="A")
    """

    def __init__(
        self,
        message: str,
        domain: Optional[str] = None,
        record_type: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, domain, record_type, "retrieve", details)


class MutationError(RecordOperationError):
    """
    Создание или изменение записи не удалось после всех попыток.

    Attributes:
        attempts: Количество сделанных попыток

    Пример:
        raise MutationError("Timeout", domain="example.com", record_type="AAAA",
                            operation="edit", attempts=3)
    """

    def __init__(
        self,
        message: str,
        domain: Optional[str] = None,
        record_type: Optional[str] = None,
        operation: Optional[str] = None,
        attempts: int = 1,
        details: Optional[dict] = None,
    ):
        self.attempts = attempts
        details = details or {}
        details["attempts"] = attempts
        super().__init__(message, domain, record_type, operation, details)


class AddressComputeError(DDNSError):
    """Не удалось вычислить итоговый адрес записи."""
    pass


class InvalidAddressError(AddressComputeError):
    """
    Значение не является адресом нужного семейства.

    Attributes:
        value: Исходная строка

    Пример:
        raise InvalidAddressError("Не IPv6 адрес", value="10.0.0.1")
    """

    def __init__(
        self,
        message: str,
        value: Optional[Any] = None,
        details: Optional[dict] = None,
    ):
        self.value = value
        details = details or {}
        if value is not None:
            details["value"] = str(value)[:100]
        super().__init__(message, details)


class AddressSourceError(DDNSError):
    """
    Ошибка получения текущего адреса (FRITZ!Box или echo-сервис).

    Attributes:
        source: URL источника
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.source = source
        details = details or {}
        if source:
            details["source"] = source
        super().__init__(message, details)


# === Porkbun Errors ===

class PorkbunError(DDNSError):
    """
    Базовая ошибка Porkbun API.

    Attributes:
        endpoint: API endpoint
    """

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.endpoint = endpoint
        details = details or {}
        if endpoint:
            details["endpoint"] = endpoint
        super().__init__(message, details)


class PorkbunConnectionError(PorkbunError):
    """
    Сетевая ошибка при обращении к Porkbun (connection refused, timeout).

    Пример:
        raise PorkbunConnectionError("Connection refused", endpoint="/dns/edit/example.com/1")
    """
    pass


class PorkbunAPIError(PorkbunError):
    """
    Porkbun ответил ошибкой или невалидным JSON.

    Attributes:
        status_code: HTTP код ответа

    Пример:
        raise PorkbunAPIError("Invalid API key", status_code=400, endpoint="/ping")
    """

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[dict] = None,
    ):
        self.status_code = status_code
        details = details or {}
        if status_code:
            details["status_code"] = status_code
        super().__init__(message, endpoint, details)


# === Config Errors ===

class ConfigError(DDNSError):
    """
    Ошибка конфигурации.

    Attributes:
        config_file: Путь к файлу конфигурации
        key: Ключ конфигурации с ошибкой

    Пример:
        raise ConfigError("Missing required field", key="porkbun.api_key")
    """

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        key: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        self.config_file = config_file
        self.key = key
        details = details or {}
        if config_file:
            details["config_file"] = config_file
        if key:
            details["key"] = key
        super().__init__(message, details)


# === Utility Functions ===

def format_error_for_log(error: Exception) -> str:
    """
    Форматирует ошибку для вывода в лог.

    Args:
        error: Исключение

    Returns:
        str: Отформатированная строка ошибки
    """
    if isinstance(error, DDNSError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"


def is_retryable(error: Exception) -> bool:
    """
    Проверяет, можно ли повторить операцию после ошибки.

    Повторяются только сетевые сбои: ответ API с ошибкой
    при повторе не изменится.

    Args:
        error: Исключение

    Returns:
        bool: True если можно retry
    """
    return isinstance(error, PorkbunConnectionError)
