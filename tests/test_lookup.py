"""Tests for balance resolution and image URL cleanup."""

import pytest

from blingproxy.services.lookup import clean_image_url, resolve_balance


@pytest.mark.parametrize(
    ("record", "expected"),
    [
        ({"saldoVirtualTotal": 7, "saldoVirtual": 5, "saldo": 3}, 7),
        ({"saldoVirtualTotal": None, "saldoVirtual": 5, "saldo": 3}, 5),
        ({"saldo": 3}, 3),
        ({"saldoVirtualTotal": 0, "saldo": 9}, 0),
        ({"saldoVirtualTotal": 2.5}, 2.5),
        ({"saldoVirtualTotal": None, "saldoVirtual": None, "saldo": None}, 0),
        ({"produto": {"id": 42}}, 0),
        ({}, 0),
        (None, 0),
    ],
)
def test_resolve_balance(record, expected) -> None:
    assert resolve_balance(record) == expected


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://x/miniatura/42.png", "https://x/42.png"),
        ("https://cdn.bling.com.br/img/miniatura_42.jpeg", "https://cdn.bling.com.br/img/_42.jpeg"),
        ("https://x/42miniatura.png?miniatura=1", "https://x/42.png?miniatura=1"),
        ("https://x/miniatura_a/miniatura/1.png", "https://x/_a/miniatura/1.png"),
        ("https://x/42.png", "https://x/42.png"),
        ("", ""),
        (None, ""),
    ],
)
def test_clean_image_url(url, expected) -> None:
    assert clean_image_url(url) == expected
