"""
Тесты для PorkbunClient.

HTTP уровень подменяется через patch.object(requests.Session, "post").
"""

from unittest.mock import patch

import pytest
import requests

from porkbun_ddns.core.domain.records import ActiveRecord, RecordType
from porkbun_ddns.core.exceptions import PorkbunAPIError, PorkbunConnectionError
from porkbun_ddns.porkbun.client import DEFAULT_BASE_URL, PorkbunClient


@pytest.fixture
def client():
    return PorkbunClient(api_key="pk1_key", secret_key="sk1_secret")


class TestRequests:

    def test_credentials_in_every_body(self, client, make_response):
        with patch.object(requests.Session, "post") as mock_post:
            mock_post.return_value = make_response(200, {"status": "SUCCESS", "yourIp": "203.0.113.7"})

            assert client.ping() == "203.0.113.7"

        args, kwargs = mock_post.call_args
        assert args[0] == f"{DEFAULT_BASE_URL}/ping"
        assert kwargs["json"] == {"apikey": "pk1_key", "secretapikey": "sk1_secret"}
        assert kwargs["timeout"] == 30

    def test_retrieve_records(self, client, make_response):
        with patch.object(requests.Session, "post") as mock_post:
            mock_post.return_value = make_response(200, {
                "status": "SUCCESS",
                "records": [
                    {"id": "106926659", "name": "home.example.com", "type": "A", "content": "203.0.113.7"},
                ],
            })

            records = client.retrieve_records("home", "example.com", RecordType.A)

        assert records == [ActiveRecord(id="106926659", address="203.0.113.7")]
        assert mock_post.call_args.args[0] == (
            f"{DEFAULT_BASE_URL}/dns/retrieveByNameType/example.com/A/home"
        )

    def test_retrieve_root_domain(self, client, make_response):
        with patch.object(requests.Session, "post") as mock_post:
            mock_post.return_value = make_response(200, {"status": "SUCCESS", "records": []})

            assert client.retrieve_records("", "example.com", "AAAA") == []

        assert mock_post.call_args.args[0].endswith("/dns/retrieveByNameType/example.com/AAAA/")

    def test_retrieve_records_null(self, client, make_response):
        with patch.object(requests.Session, "post") as mock_post:
            mock_post.return_value = make_response(200, {"status": "SUCCESS", "records": None})
            assert client.retrieve_records("home", "example.com", RecordType.A) == []

    def test_retrieve_multiple(self, client, make_response):
        with patch.object(requests.Session, "post") as mock_post:
            mock_post.return_value = make_response(200, {
                "status": "SUCCESS",
                "records": [{"id": 1, "content": "203.0.113.7"}, {"id": 2, "content": "203.0.113.8"}],
            })
            records = client.retrieve_records("home", "example.com", RecordType.A)

        assert [r.id for r in records] == ["1", "2"]

    def test_create_record(self, client, make_response):
        with patch.object(requests.Session, "post") as mock_post:
            mock_post.return_value = make_response(200, {"status": "SUCCESS", "id": 106926652})

            record_id = client.create_record("home", "example.com", RecordType.AAAA, "2a01:4f8::1")

        assert record_id == "106926652"
        args, kwargs = mock_post.call_args
        assert args[0] == f"{DEFAULT_BASE_URL}/dns/create/example.com"
        assert kwargs["json"]["name"] == "home"
        assert kwargs["json"]["type"] == "AAAA"
        assert kwargs["json"]["content"] == "2a01:4f8::1"

    def test_edit_record(self, client, make_response):
        with patch.object(requests.Session, "post") as mock_post:
            mock_post.return_value = make_response(200, {"status": "SUCCESS"})

            client.edit_record("42", "", "example.com", RecordType.A, "203.0.113.8")

        args, kwargs = mock_post.call_args
        assert args[0] == f"{DEFAULT_BASE_URL}/dns/edit/example.com/42"
        assert kwargs["json"]["name"] == ""
        assert kwargs["json"]["content"] == "203.0.113.8"
        assert kwargs["json"]["apikey"] == "pk1_key"

    def test_custom_base_url(self, make_response):
        client = PorkbunClient("pk", "sk", base_url="http://localhost:8080/v3/", timeout=5)

        with patch.object(requests.Session, "post") as mock_post:
            mock_post.return_value = make_response(200, {"status": "SUCCESS"})
            client.ping()

        assert mock_post.call_args.args[0] == "http://localhost:8080/v3/ping"
        assert mock_post.call_args.kwargs["timeout"] == 5


class TestErrors:

    def test_connection_error(self, client):
        with patch.object(requests.Session, "post") as mock_post:
            mock_post.side_effect = requests.ConnectionError("Connection refused")

            with pytest.raises(PorkbunConnectionError) as exc_info:
                client.ping()

        assert exc_info.value.endpoint == "/ping"

    def test_timeout(self, client):
        with patch.object(requests.Session, "post") as mock_post:
            mock_post.side_effect = requests.Timeout("read timed out")

            with pytest.raises(PorkbunConnectionError):
                client.edit_record("1", "home", "example.com", RecordType.A, "203.0.113.8")

    def test_http_error_with_message(self, client, make_response):
        with patch.object(requests.Session, "post") as mock_post:
            mock_post.return_value = make_response(400, {"status": "ERROR", "message": "Invalid API key."})

            with pytest.raises(PorkbunAPIError) as exc_info:
                client.ping()

        assert exc_info.value.message == "Invalid API key."
        assert exc_info.value.status_code == 400

    def test_http_error_without_json(self, client, make_response):
        with patch.object(requests.Session, "post") as mock_post:
            mock_post.return_value = make_response(503, text="<html>Service Unavailable</html>")

            with pytest.raises(PorkbunAPIError) as exc_info:
                client.retrieve_records("home", "example.com", RecordType.A)

        assert exc_info.value.message == "HTTP 503"

    def test_status_not_success(self, client, make_response):
        with patch.object(requests.Session, "post") as mock_post:
            mock_post.return_value = make_response(200, {"status": "ERROR", "message": "Edit error"})

            with pytest.raises(PorkbunAPIError) as exc_info:
                client.edit_record("1", "home", "example.com", RecordType.A, "203.0.113.8")

        assert exc_info.value.message == "Edit error"

    def test_invalid_json(self, client, make_response):
        with patch.object(requests.Session, "post") as mock_post:
            mock_post.return_value = make_response(200, text="not json")

            with pytest.raises(PorkbunAPIError):
                client.ping()

    def test_malformed_record(self, client, make_response):
        with patch.object(requests.Session, "post") as mock_post:
            mock_post.return_value = make_response(200, {"status": "SUCCESS", "records": [{"id": "1"}]})

            with pytest.raises(PorkbunAPIError):
                client.retrieve_records("home", "example.com", RecordType.A)


def test_from_config():
    from porkbun_ddns.core.config_schema import PorkbunConfig

    client = PorkbunClient.from_config(
        PorkbunConfig(api_key="pk", secret_key="sk", base_url="https://porkbun.test/api", timeout=7)
    )

    assert client.base_url == "https://porkbun.test/api"
    assert client.timeout == 7
