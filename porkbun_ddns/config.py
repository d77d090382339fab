"""
Загрузчик конфигурации.

Порядок (каждый следующий источник перекрывает предыдущий):
    1. Значения по умолчанию
    2. YAML файл (config.yaml, config.yml, .porkbun_ddns.yaml или --config)
    3. Переменные окружения (APIKEY, SECRETKEY, DOMAINS, IPV4, IPV6, TIMEOUT, ...)

Результат валидируется через pydantic (core/config_schema.py) и дальше
прокидывается явно. Движок синхронизации окружение не читает.

Пример:
    config = load_config()
    config.update.domains       # ["home.example.com", "example.com"]
    config.update.ipv6          # AddressMode.PREFIX_ONLY
    config.porkbun.timeout      # 30
"""

import os
import logging
from typing import Any, Mapping, Optional

import yaml

from .core.config_schema import AppConfig, validate_config
from .core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Файлы конфигурации, которые ищутся по умолчанию
SEARCH_PATHS = [
    "config.yaml",
    "config.yml",
    ".porkbun_ddns.yaml",
]

# Переменная окружения → путь в конфигурации
ENV_MAPPING = {
    "APIKEY": ("porkbun", "api_key"),
    "SECRETKEY": ("porkbun", "secret_key"),
    "DOMAINS": ("update", "domains"),
    "IPV4": ("update", "ipv4"),
    "IPV6": ("update", "ipv6"),
    "TIMEOUT": ("update", "interval"),
    "FRITZBOX_URL": ("fritzbox", "url"),
    "LOG_LEVEL": ("logging", "level"),
}


class Config:
    """
    Сборщик конфигурации из defaults, YAML и окружения.

    Пример:
        loader = Config(config_file="config.yaml", environ={"APIKEY": "pk1_..."})
        app_config = loader.build()
    """

    def __init__(
        self,
        config_file: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.config_file = config_file
        self.environ = os.environ if environ is None else environ
        self._data = self._get_defaults()

    def _get_defaults(self) -> dict:
        """Значения по умолчанию."""
        return {
            "porkbun": {},
            "fritzbox": {},
            "host": {},
            "update": {},
            "logging": {},
        }

    def _find_config_file(self) -> Optional[str]:
        if self.config_file:
            if not os.path.exists(self.config_file):
                raise ConfigError("Файл конфигурации не найден", config_file=self.config_file)
            return self.config_file

        for path in SEARCH_PATHS:
            if os.path.exists(path):
                return path
        return None

    def _load_yaml(self) -> None:
        """Загружает настройки из YAML файла."""
        config_file = self._find_config_file()
        if not config_file:
            return

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                yaml_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Ошибка чтения: {e}", config_file=config_file) from e

        if not isinstance(yaml_data, dict):
            raise ConfigError("Корень YAML должен быть словарём", config_file=config_file)

        self._merge_dict(self._data, yaml_data)
        self.config_file = config_file
        logger.debug(f"Конфигурация загружена из {config_file}")

    def _load_env(self) -> None:
        """Загружает настройки из переменных окружения."""
        for env_key, (section, key) in ENV_MAPPING.items():
            if env_key not in self.environ:
                continue
            value = self.environ[env_key]

            if env_key == "IPV4":
                value = self._parse_ipv4(value)
            elif env_key == "TIMEOUT":
                value = self._parse_int(env_key, value)

            self._data.setdefault(section, {})[key] = value

    @staticmethod
    def _parse_ipv4(value: str) -> bool:
        """IPV4: "true" или пусто → включено, "false" → выключено."""
        normalized = value.strip().lower()
        if normalized in ("", "true"):
            return True
        if normalized == "false":
            return False
        raise ConfigError(
            f"IPV4 должен быть true или false, получено {value!r}",
            key="IPV4",
        )

    @staticmethod
    def _parse_int(env_key: str, value: str) -> int:
        try:
            return int(value)
        except ValueError:
            raise ConfigError(
                f"{env_key} должен быть числом, получено {value!r}",
                key=env_key,
            ) from None

    def _merge_dict(self, base: dict, override: dict) -> None:
        """Рекурсивно мержит словари."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_dict(base[key], value)
            else:
                base[key] = value

    def build(self) -> AppConfig:
        """
        Собирает и валидирует конфигурацию.

        Returns:
            AppConfig: Валидированная конфигурация

        Raises:
            ConfigError: Ошибка чтения или валидации
        """
        self._data = self._get_defaults()
        self._load_yaml()
        self._load_env()
        return validate_config(self._data, config_file=self.config_file)


def load_config(
    config_file: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """
    Загружает конфигурацию.

    Args:
        config_file: Путь к YAML файлу (опционально)
        environ: Переменные окружения (по умолчанию os.environ)

    Returns:
        AppConfig: Объект конфигурации
    """
    return Config(config_file=config_file, environ=environ).build()


def mask_secret(value: Any) -> str:
    """Маскирует секрет для вывода: pk1_abcd... → pk1_****."""
    if not value:
        return ""
    value = str(value)
    return value[:4] + "****" if len(value) > 4 else "****"
