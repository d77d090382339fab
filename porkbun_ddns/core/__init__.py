"""
Core модули Porkbun DDNS.

- RunContext: контекст цикла (run_id, dry_run)
- Structured Logging: JSON/Human-readable логирование
- Exceptions: типизированные ошибки
- Config schema: pydantic-валидация конфигурации
- Retry: повтор операции до N раз
- domain: чистая логика (FQDN, IPv6, решения)
"""

from .context import RunContext, get_current_context, set_current_context
from .logging import (
    get_logger,
    setup_logging_from_config,
    StructuredLogger,
    JSONFormatter,
    HumanFormatter,
)
from .exceptions import (
    DDNSError,
    DomainValidationError,
    RecordOperationError,
    RetrievalError,
    MutationError,
    AddressComputeError,
    InvalidAddressError,
    AddressSourceError,
    PorkbunError,
    PorkbunConnectionError,
    PorkbunAPIError,
    ConfigError,
    format_error_for_log,
    is_retryable,
)
from .retry import call_with_retries, RetryError, RetryResult

__all__ = [
    # Context
    "RunContext",
    "get_current_context",
    "set_current_context",
    # Structured Logging
    "get_logger",
    "setup_logging_from_config",
    "StructuredLogger",
    "JSONFormatter",
    "HumanFormatter",
    # Exceptions
    "DDNSError",
    "DomainValidationError",
    "RecordOperationError",
    "RetrievalError",
    "MutationError",
    "AddressComputeError",
    "InvalidAddressError",
    "AddressSourceError",
    "PorkbunError",
    "PorkbunConnectionError",
    "PorkbunAPIError",
    "ConfigError",
    "format_error_for_log",
    "is_retryable",
    # Retry
    "call_with_retries",
    "RetryError",
    "RetryResult",
]
