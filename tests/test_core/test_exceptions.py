"""
Тесты для иерархии исключений.
"""

import pytest

from porkbun_ddns.core.exceptions import (
    AddressComputeError,
    AddressSourceError,
    ConfigError,
    DDNSError,
    DomainValidationError,
    InvalidAddressError,
    MutationError,
    PorkbunAPIError,
    PorkbunConnectionError,
    PorkbunError,
    RetrievalError,
    format_error_for_log,
    is_retryable,
)


class TestDDNSError:

    def test_message_only(self):
        error = DDNSError("Что-то пошло не так")
        assert str(error) == "Что-то пошло не так"
        assert error.details == {}

    def test_details_in_str(self):
        error = DDNSError("Ошибка", details={"key": "value"})
        assert str(error) == "Ошибка (key='value')"

    def test_to_dict(self):
        error = PorkbunAPIError("Invalid API key", endpoint="/ping", status_code=400)

        assert error.to_dict() == {
            "error_type": "PorkbunAPIError",
            "message": "Invalid API key",
            "details": {"endpoint": "/ping", "status_code": 400},
        }


class TestHierarchy:

    @pytest.mark.parametrize("error_class, parent", [
        (DomainValidationError, DDNSError),
        (RetrievalError, DDNSError),
        (MutationError, DDNSError),
        (InvalidAddressError, AddressComputeError),
        (AddressSourceError, DDNSError),
        (PorkbunConnectionError, PorkbunError),
        (PorkbunAPIError, PorkbunError),
        (ConfigError, DDNSError),
    ])
    def test_subclass(self, error_class, parent):
        assert issubclass(error_class, parent)


class TestRecordErrors:

    def test_retrieval_error_operation(self):
        error = RetrievalError("HTTP 503", domain="home.example.com", record_type="A")

        assert error.operation == "retrieve"
        assert error.details == {
            "domain": "home.example.com",
            "record_type": "A",
            "operation": "retrieve",
        }

    def test_mutation_error_attempts(self):
        error = MutationError(
            "Timeout", domain="example.com", record_type="AAAA", operation="edit", attempts=3,
        )

        assert error.attempts == 3
        assert error.details["attempts"] == 3
        assert error.details["operation"] == "edit"

    def test_invalid_address_value_truncated(self):
        error = InvalidAddressError("Не IPv6", value="x" * 500)
        assert len(error.details["value"]) == 100


class TestHelpers:

    def test_format_ddns_error(self):
        error = ConfigError("Нет ключа", key="APIKEY")
        assert format_error_for_log(error) == "Нет ключа (key='APIKEY')"

    def test_format_builtin_error(self):
        assert format_error_for_log(ValueError("bad")) == "ValueError: bad"

    @pytest.mark.parametrize("error, expected", [
        (PorkbunConnectionError("timeout"), True),
        (PorkbunAPIError("Invalid API key", status_code=400), False),
        (RetrievalError("HTTP 503"), False),
        (ValueError("bad"), False),
    ])
    def test_is_retryable(self, error, expected):
        assert is_retryable(error) is expected
