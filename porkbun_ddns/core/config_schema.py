"""
Pydantic схемы для валидации конфигурации.

Валидация происходит один раз при старте.
Ошибки валидации выбрасывают ConfigError.

Пример использования:
    from porkbun_ddns.core.config_schema import validate_config

    config_dict = yaml.safe_load(open("config.yaml"))
    validated = validate_config(config_dict)  # raises ConfigError on failure
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from .exceptions import ConfigError


class AddressMode(str, Enum):
    """
    Источник адреса для семейства.

    IPv4 поддерживает только DISABLED и FRITZBOX_IP.
    """
    DISABLED = "disabled"
    FRITZBOX_IP = "fritzbox-ip"
    HOST_IP = "host-ip"
    PREFIX_ONLY = "prefix-only"


class RotationType(str, Enum):
    """Ротация файла логов."""
    SIZE = "size"
    TIME = "time"
    NONE = "none"


class PorkbunConfig(BaseModel):
    """Настройки Porkbun API."""
    api_key: str = ""
    secret_key: str = ""
    base_url: str = "https://api.porkbun.com/api/json/v3"
    timeout: int = Field(default=30, ge=1, le=300)

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Проверяет что URL валидный."""
        if not v.startswith(("http://", "https://")):
            raise PydanticCustomError(
                "invalid_url",
                "Porkbun URL должен начинаться с http:// или https://",
            )
        return v.rstrip("/")


class FritzBoxConfig(BaseModel):
    """Настройки FRITZ!Box (TR-064 / UPnP)."""
    url: str = "http://fritz.box:49000"
    control_path: str = "/igdupnp/control/WANIPConn1"
    timeout: int = Field(default=10, ge=1, le=120)


class HostConfig(BaseModel):
    """Настройки определения адреса хоста."""
    ipv6_echo_url: str = "https://api6.ipify.org?format=json"
    timeout: int = Field(default=5, ge=1, le=120)


class UpdateConfig(BaseModel):
    """Что и как часто обновлять."""
    domains: List[str] = Field(default_factory=list)
    ipv4: bool = True
    ipv6: AddressMode = AddressMode.DISABLED
    interval: int = Field(default=600, gt=0)
    edit_attempts: int = Field(default=3, ge=1, le=10)

    @field_validator("domains", mode="before")
    @classmethod
    def split_domains(cls, v):
        """Принимает и список, и строку через запятую (как в DOMAINS)."""
        if isinstance(v, str):
            v = v.split(",")
        return [d.strip() for d in v if d and d.strip()]

    @field_validator("ipv6", mode="before")
    @classmethod
    def normalize_ipv6(cls, v):
        """Пустая строка и false означают выключенный IPv6."""
        if v is None or v is False:
            return AddressMode.DISABLED
        if isinstance(v, str) and v.strip().lower() in ("", "false"):
            return AddressMode.DISABLED
        return v

    @property
    def ipv4_mode(self) -> AddressMode:
        """IPv4 всегда берётся с FRITZ!Box."""
        return AddressMode.FRITZBOX_IP if self.ipv4 else AddressMode.DISABLED


class LoggingConfig(BaseModel):
    """Настройки логирования."""
    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    json_format: bool = False
    console: bool = True
    file_path: Optional[str] = None
    rotation: RotationType = RotationType.SIZE
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=1024)  # min 1KB
    backup_count: int = Field(default=5, ge=1, le=100)
    when: str = "midnight"
    interval: int = Field(default=1, ge=1)

    @field_validator("level", mode="before")
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


class AppConfig(BaseModel):
    """Полная конфигурация приложения."""
    porkbun: PorkbunConfig = Field(default_factory=PorkbunConfig)
    fritzbox: FritzBoxConfig = Field(default_factory=FritzBoxConfig)
    host: HostConfig = Field(default_factory=HostConfig)
    update: UpdateConfig = Field(default_factory=UpdateConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def check_required(self) -> "AppConfig":
        """Ключи API, домены и хотя бы одно семейство адресов обязательны."""
        if not self.porkbun.api_key:
            raise PydanticCustomError("missing", "porkbun.api_key: APIKEY не задан")
        if not self.porkbun.secret_key:
            raise PydanticCustomError("missing", "porkbun.secret_key: SECRETKEY не задан")
        if not self.update.domains:
            raise PydanticCustomError("missing", "update.domains: DOMAINS не задан")
        if not self.update.ipv4 and self.update.ipv6 == AddressMode.DISABLED:
            raise PydanticCustomError(
                "nothing_to_do",
                "update: IPv4 и IPv6 выключены, обновлять нечего",
            )
        return self


def validate_config(config_dict: dict, config_file: Optional[str] = None) -> AppConfig:
    """
    Валидирует словарь конфигурации.

    Args:
        config_dict: Словарь (defaults + YAML + env)
        config_file: Файл конфигурации (для сообщения об ошибке)

    Returns:
        AppConfig: Валидированная конфигурация

    Raises:
        ConfigError: При ошибке валидации
    """
    try:
        return AppConfig(**config_dict)
    except Exception as e:
        # Форматируем ошибку Pydantic в читаемый вид
        error_msg = str(e)
        if hasattr(e, "errors"):
            errors = e.errors()
            if errors:
                first_error = errors[0]
                loc = ".".join(str(x) for x in first_error.get("loc", []))
                msg = first_error.get("msg", "Unknown error")
                error_msg = f"{loc}: {msg}" if loc else msg

        raise ConfigError(
            message=f"Ошибка валидации конфигурации: {error_msg}",
            config_file=config_file,
        ) from e
