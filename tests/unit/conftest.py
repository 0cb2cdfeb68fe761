"""Общие fixtures для тестов группировки транзакций."""

import pytest

from src.core.encoding import encode_canonical


def _payment(seq: int, **overrides) -> bytes:
    fields = {
        "amt": 1000 + seq,
        "fee": 1000,
        "fv": 100 + seq,
        "gen": "testnet-v1.0",
        "gh": b"\x48" * 32,
        "lv": 1100 + seq,
        "note": f"txn-{seq}".encode("ascii"),
        "rcv": b"\x2b" * 32,
        "snd": b"\xb4" * 32,
        "type": "pay",
    }
    fields.update(overrides)
    return encode_canonical(fields)


@pytest.fixture
def make_txn():
    """Фабрика канонически закодированных платежей: make_txn(seq, **overrides)."""
    return _payment


@pytest.fixture
def txns():
    """Пять различных транзакций без group id."""
    return [_payment(i) for i in range(5)]
