"""Разбор данных OpenVPN, которые присылает агент.

Содержит:
- декодирование CCD-файла (client-config-dir) из base64 и извлечение
  статического адреса и маршрутов;
- перевод маски подсети в длину префикса CIDR;
- разбор временных меток из index.txt и ISO-8601.
"""

import base64
import binascii
import ipaddress
import re
from dataclasses import dataclass
from datetime import datetime, timezone

_IFCONFIG_PUSH_RE = re.compile(
    r"^\s*ifconfig-push\s+(\S+)\s+(\S+)",
    re.MULTILINE,
)
_PUSH_ROUTE_RE = re.compile(
    r'^\s*push\s+"route\s+(\S+)\s+(\S+)[^"]*"',
    re.MULTILINE,
)

# Форматы дат сертификатов в index.txt: UTCTime и GeneralizedTime
_INDEX_TIME_FORMATS = {
    13: "%y%m%d%H%M%SZ",
    15: "%Y%m%d%H%M%SZ",
}


class CcdParseError(ValueError):
    """CCD-файл не удалось декодировать или в нём нет известных директив."""


@dataclass
class CcdInfo:
    """Результат разбора CCD-файла."""

    static_ip: str | None
    routes: list[str]

    @property
    def routes_value(self) -> str | None:
        """Маршруты в формате хранения: `net/prefix,net/prefix`."""
        return ",".join(self.routes) if self.routes else None


def netmask_to_prefix(netmask: str) -> int:
    """Перевести маску вида 255.255.255.0 в длину префикса (24).

    Raises:
        ValueError: Маска некорректна или не непрерывна.
    """
    return ipaddress.IPv4Network(f"0.0.0.0/{netmask}").prefixlen


def decode_ccd(content_b64: str) -> str:
    """Декодировать CCD-файл из base64 в текст.

    Raises:
        CcdParseError: Невалидный base64 или не UTF-8.
    """
    try:
        raw = base64.b64decode(content_b64, validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise CcdParseError(f"не удалось декодировать CCD: {exc}") from exc


def parse_ccd(text: str) -> CcdInfo:
    """Извлечь статический адрес и маршруты из текста CCD-файла.

    Берётся первая директива `ifconfig-push <ip> <mask>` и все
    директивы `push "route <net> <mask>"`. Маршрут с некорректной
    маской пропускается.

    Raises:
        CcdParseError: В файле нет ни одной подходящей директивы.
    """
    static_ip = None
    match = _IFCONFIG_PUSH_RE.search(text)
    if match is not None:
        try:
            static_ip = str(ipaddress.IPv4Address(match.group(1)))
        except ValueError:
            static_ip = None

    routes: list[str] = []
    for network, netmask in _PUSH_ROUTE_RE.findall(text):
        try:
            ipaddress.IPv4Address(network)
            routes.append(f"{network}/{netmask_to_prefix(netmask)}")
        except ValueError:
            continue

    if static_ip is None and not routes:
        raise CcdParseError("в CCD нет директив ifconfig-push и push route")

    return CcdInfo(static_ip=static_ip, routes=routes)


def parse_ccd_b64(content_b64: str) -> CcdInfo:
    """Декодировать и разобрать CCD-файл за один вызов."""
    return parse_ccd(decode_ccd(content_b64))


def parse_timestamp(value: str | None) -> datetime | None:
    """Разобрать ISO-8601 строку в datetime с часовым поясом.

    Время без пояса считается UTC. Пустое или неразборчивое значение → None.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_index_timestamp(value: str | None) -> datetime | None:
    """Разобрать дату из index.txt (`YYMMDDHHmmssZ`) или ISO-8601.

    Returns:
        datetime в UTC или None, если значение пустое или неразборчивое.
    """
    if not value:
        return None
    value = value.strip()
    fmt = _INDEX_TIME_FORMATS.get(len(value))
    if fmt is not None and value.endswith("Z") and value[:-1].isdigit():
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            return None
    return parse_timestamp(value)
