"""
Клиент Porkbun DNS API v3.

Все запросы — POST с JSON телом, в котором лежат ключи API.

Операции:
- ping: проверка ключей
- retrieve_records: активные записи по (поддомен, домен, тип)
- create_record: создание записи
- edit_record: изменение записи по ID

Пример использования:
    client = PorkbunClient(api_key="pk1_...", secret_key="sk1_...")
    records = client.retrieve_records("home", "example.com", RecordType.A)
    client.edit_record(records[0].id, "home", "example.com", RecordType.A, "1.2.3.4")
"""

from typing import Any, Dict, List, Optional

import requests

from ..core.domain.records import ActiveRecord, RecordType
from ..core.exceptions import PorkbunAPIError, PorkbunConnectionError
from ..core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.porkbun.com/api/json/v3"


class PorkbunClient:
    """
    Клиент Porkbun API.

    Сетевые сбои превращаются в PorkbunConnectionError (можно повторить),
    ответы с ошибкой и невалидный JSON — в PorkbunAPIError.

    Attributes:
        base_url: URL API без завершающего /
        timeout: Таймаут одного запроса (секунды)
    """

    def __init__(
        self,
        api_key: str,
        secret_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._credentials = {"apikey": api_key, "secretapikey": secret_key}

        self._session = session or requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    @classmethod
    def from_config(cls, config) -> "PorkbunClient":
        """Создаёт клиент из PorkbunConfig."""
        return cls(
            api_key=config.api_key,
            secret_key=config.secret_key,
            base_url=config.base_url,
            timeout=config.timeout,
        )

    def _post(self, endpoint: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Выполняет POST запрос и возвращает JSON ответа.

        Raises:
            PorkbunConnectionError: Сеть недоступна, таймаут
            PorkbunAPIError: HTTP статус не 200, status != SUCCESS, невалидный JSON
        """
        body = dict(self._credentials)
        if payload:
            body.update(payload)

        url = f"{self.base_url}{endpoint}"
        logger.debug(f"POST {endpoint}")
        try:
            resp = self._session.post(url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise PorkbunConnectionError(f"Запрос не выполнен: {e}", endpoint=endpoint) from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.status_code != 200:
            message = data.get("message") if isinstance(data, dict) else None
            raise PorkbunAPIError(
                message or f"HTTP {resp.status_code}",
                endpoint=endpoint,
                status_code=resp.status_code,
            )

        if not isinstance(data, dict):
            raise PorkbunAPIError("Невалидный JSON в ответе", endpoint=endpoint, status_code=200)

        if data.get("status") != "SUCCESS":
            raise PorkbunAPIError(
                data.get("message") or f"status={data.get('status')!r}",
                endpoint=endpoint,
                status_code=resp.status_code,
            )

        return data

    def ping(self) -> str:
        """
        Проверяет ключи API.

        Returns:
            str: IP, с которого пришёл запрос (yourIp)
        """
        data = self._post("/ping")
        return data.get("yourIp", "")

    def retrieve_records(
        self,
        subdomain: str,
        root_domain: str,
        record_type: RecordType,
    ) -> List[ActiveRecord]:
        """
        Получает активные записи для (поддомен, домен, тип).

        Записей может быть 0, 1 или несколько.

        Returns:
            List[ActiveRecord]: Активные записи
        """
        record_type = RecordType(record_type)
        endpoint = f"/dns/retrieveByNameType/{root_domain}/{record_type.value}/{subdomain}"
        data = self._post(endpoint)

        records = data.get("records") or []
        if not isinstance(records, list):
            raise PorkbunAPIError("Поле records не является списком", endpoint=endpoint)

        try:
            return [
                ActiveRecord(id=str(item["id"]), address=str(item["content"]))
                for item in records
            ]
        except (KeyError, TypeError) as e:
            raise PorkbunAPIError(f"Неожиданный формат записи: {e}", endpoint=endpoint) from e

    def create_record(
        self,
        subdomain: str,
        root_domain: str,
        record_type: RecordType,
        address: str,
    ) -> str:
        """
        Создаёт запись.

        Returns:
            str: ID новой записи
        """
        record_type = RecordType(record_type)
        data = self._post(
            f"/dns/create/{root_domain}",
            {"name": subdomain, "type": record_type.value, "content": address},
        )
        return str(data.get("id", ""))

    def edit_record(
        self,
        record_id: str,
        subdomain: str,
        root_domain: str,
        record_type: RecordType,
        address: str,
    ) -> None:
        """Изменяет запись по ID."""
        record_type = RecordType(record_type)
        self._post(
            f"/dns/edit/{root_domain}/{record_id}",
            {"name": subdomain, "type": record_type.value, "content": address},
        )

    def close(self) -> None:
        self._session.close()
