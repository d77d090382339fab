"""
Разбор имён доменов.

Чистые функции, не зависят от внешних систем.

Пример:
    is_fqdn_valid("sub.example.com")    # True
    split_fqdn("sub.sub.example.com")   # ("sub.sub", "example.com")
    DomainName.parse("example.de")      # DomainName(fqdn="example.de", subdomain="", root_domain="example.de")
"""

import re
from dataclasses import dataclass
from typing import Tuple

from ..exceptions import DomainValidationError

# Последняя метка из букв длиной >= 2, перед точкой буква или цифра.
# Проверяется вся строка целиком, перевод строки в имени не допускается
FQDN_PATTERN = re.compile(r".*[a-zA-Z0-9]\.[a-zA-Z]{2,}")


def is_fqdn_valid(fqdn: str) -> bool:
    """
    Проверяет, похоже ли имя на FQDN.

    Проверка нестрогая: "*.example.com" валиден, "example..com",
    "example.c" и "example" нет.
    """
    return FQDN_PATTERN.fullmatch(fqdn) is not None


def split_fqdn(fqdn: str) -> Tuple[str, str]:
    """
    Делит FQDN на поддомен и корневой домен.

    Корневой домен всегда последние две метки. Вызывать только для
    имён, прошедших is_fqdn_valid: у одной метки ("example") корневого
    домена нет, вернётся ("", "").

    Args:
        fqdn: Имя домена

    Returns:
        Tuple[str, str]: (subdomain, root_domain)
    """
    labels = fqdn.split(".")
    if len(labels) < 2:
        return "", ""
    root_domain = ".".join(labels[-2:])
    subdomain = ".".join(labels[:-2])
    return subdomain, root_domain


@dataclass(frozen=True)
class DomainName:
    """
    Проверенное имя домена.

    Attributes:
        fqdn: Полное имя (sub.example.com)
        subdomain: Поддомен (sub), пустой для example.com
        root_domain: Корневой домен (example.com)
    """
    fqdn: str
    subdomain: str
    root_domain: str

    @classmethod
    def parse(cls, fqdn: str) -> "DomainName":
        """
        Проверяет и разбирает FQDN.

        Raises:
            DomainValidationError: Имя не похоже на FQDN
        """
        if not is_fqdn_valid(fqdn):
            raise DomainValidationError(f"{fqdn!r} не является валидным доменом", fqdn=fqdn)
        subdomain, root_domain = split_fqdn(fqdn)
        return cls(fqdn=fqdn, subdomain=subdomain, root_domain=root_domain)

    def __str__(self) -> str:
        return self.fqdn
