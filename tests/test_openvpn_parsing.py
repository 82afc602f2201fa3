"""Unit-тесты разбора CCD и временных меток OpenVPN."""

import base64
from datetime import datetime, timezone

import pytest

from app.services.openvpn import (
    CcdParseError,
    netmask_to_prefix,
    parse_ccd,
    parse_ccd_b64,
    parse_index_timestamp,
    parse_timestamp,
)


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


# ── CCD ──────────────────────────────────────────────────


def test_ccd_static_ip_and_route() -> None:
    """ifconfig-push + push route → адрес и маршрут в CIDR."""
    ccd = parse_ccd_b64(
        _b64('ifconfig-push 10.8.0.5 255.255.255.0\npush "route 192.168.1.0 255.255.255.0"')
    )

    assert ccd.static_ip == "10.8.0.5"
    assert ccd.routes_value == "192.168.1.0/24"


def test_ccd_multiple_routes_keep_order() -> None:
    """Несколько маршрутов собираются через запятую в порядке файла."""
    ccd = parse_ccd(
        "# static config\n"
        'push "route 10.10.0.0 255.255.0.0"\n'
        '  push "route 172.16.5.0 255.255.255.128"\n'
        'push "route 192.168.0.1 255.255.255.255"\n'
    )

    assert ccd.static_ip is None
    assert ccd.routes_value == "10.10.0.0/16,172.16.5.0/25,192.168.0.1/32"


def test_ccd_first_ifconfig_push_wins() -> None:
    """Из нескольких ifconfig-push берётся первый."""
    ccd = parse_ccd(
        "ifconfig-push 10.8.0.9 255.255.255.0\nifconfig-push 10.8.0.10 255.255.255.0\n"
    )

    assert ccd.static_ip == "10.8.0.9"
    assert ccd.routes == []
    assert ccd.routes_value is None


def test_ccd_commented_directives_ignored() -> None:
    """Закомментированные директивы не учитываются."""
    with pytest.raises(CcdParseError):
        parse_ccd('# ifconfig-push 10.8.0.5 255.255.255.0\n;push "route 1.2.3.0 255.255.255.0"')


def test_ccd_route_with_invalid_mask_skipped() -> None:
    """Маршрут с непрерывной маской пропускается, остальные сохраняются."""
    ccd = parse_ccd(
        'push "route 10.0.0.0 255.0.255.0"\npush "route 10.1.0.0 255.255.0.0"'
    )

    assert ccd.routes == ["10.1.0.0/16"]


def test_ccd_invalid_base64_raises() -> None:
    """Невалидный base64 → CcdParseError."""
    with pytest.raises(CcdParseError):
        parse_ccd_b64("not base64 !!!")


def test_ccd_without_directives_raises() -> None:
    """Файл без известных директив → CcdParseError."""
    with pytest.raises(CcdParseError):
        parse_ccd_b64(_b64("comp-lzo\nverb 3\n"))


@pytest.mark.parametrize(
    ("netmask", "prefix"),
    [
        ("255.255.255.0", 24),
        ("255.255.0.0", 16),
        ("255.255.255.252", 30),
        ("0.0.0.0", 0),
    ],
)
def test_netmask_to_prefix(netmask: str, prefix: int) -> None:
    assert netmask_to_prefix(netmask) == prefix


# ── Временные метки ──────────────────────────────────────


def test_index_timestamp_utctime() -> None:
    """Формат index.txt YYMMDDHHmmssZ."""
    assert parse_index_timestamp("270315093000Z") == datetime(
        2027, 3, 15, 9, 30, 0, tzinfo=timezone.utc
    )


def test_index_timestamp_generalized_time() -> None:
    """Формат YYYYMMDDHHmmssZ."""
    assert parse_index_timestamp("20510101000000Z") == datetime(
        2051, 1, 1, tzinfo=timezone.utc
    )


def test_index_timestamp_iso_fallback() -> None:
    """ISO-8601 тоже принимается."""
    assert parse_index_timestamp("2026-05-01T12:00:00Z") == datetime(
        2026, 5, 1, 12, tzinfo=timezone.utc
    )


def test_index_timestamp_garbage_returns_none() -> None:
    assert parse_index_timestamp("yesterday") is None
    assert parse_index_timestamp("") is None
    assert parse_index_timestamp(None) is None


def test_naive_iso_timestamp_is_utc() -> None:
    """Время без часового пояса считается UTC."""
    parsed = parse_timestamp("2026-10-19T08:15:00")

    assert parsed == datetime(2026, 10, 19, 8, 15, tzinfo=timezone.utc)
