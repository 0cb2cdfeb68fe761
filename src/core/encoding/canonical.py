"""
Canonical MessagePack codec

Каноническое бинарное представление записей (field map):
- map ключи отсортированы (bytewise по UTF-8; целые ключи численно и перед
  строковыми), рекурсивно
- float отклоняются (ширина float32/float64 не сохраняется при декодировании)
- целые числа кодируются минимальной шириной (поведение msgpack)
- строки байтов кодируются как bin, текст — как str
- одна и та же логическая запись всегда даёт одну и ту же последовательность байтов

Модуль не интерпретирует поля записи: он только декодирует/кодирует
generic map и гарантирует детерминизм.
"""

from typing import Any, Dict, Mapping, Optional, Tuple

import msgpack


# =============================================================================
# EXCEPTIONS
# =============================================================================


class DecodeError(ValueError):
    """
    Последовательность байтов не является корректной записью транзакции.

    Attributes:
        reason: Описание причины
        index: Позиция элемента в batch (None если декодировалась одна запись)
    """

    def __init__(self, reason: str, index: Optional[int] = None):
        self.reason = reason
        self.index = index
        if index is None:
            message = f"Malformed transaction record: {reason}"
        else:
            message = f"Malformed transaction record at index {index}: {reason}"
        super().__init__(message)

    def at_index(self, index: int) -> "DecodeError":
        """Копия ошибки с привязкой к позиции в batch."""
        return DecodeError(self.reason, index=index)


_MSGPACK_ERRORS = (ValueError, TypeError, msgpack.exceptions.UnpackException)


# =============================================================================
# CANONICAL FORM
# =============================================================================


def _sort_key(key: Any) -> Tuple[int, Any]:
    # Целые ключи идут первыми, в числовом порядке
    if isinstance(key, int) and not isinstance(key, bool):
        return (0, key)
    if isinstance(key, str):
        return (1, key.encode("utf-8"))
    if isinstance(key, (bytes, bytearray)):
        return (1, bytes(key))
    raise TypeError(f"Unsupported map key type: {type(key).__name__}")


def canonicalize(value: Any) -> Any:
    """
    Приведение значения к канонической форме перед кодированием.

    - dict → dict с отсортированными ключами (рекурсивно)
    - list/tuple → list (рекурсивно)
    - bytearray/memoryview → bytes
    - float → TypeError
    - остальное без изменений

    Float не имеет канонической формы: после декодирования ширина
    (float32 / float64) теряется, и повторное кодирование изменило бы байты.
    """
    if isinstance(value, float):
        raise TypeError("Floating point values have no canonical encoding")
    if isinstance(value, Mapping):
        return {
            key: canonicalize(value[key]) for key in sorted(value, key=_sort_key)
        }
    if isinstance(value, (list, tuple)):
        return [canonicalize(item) for item in value]
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return value


# =============================================================================
# ENCODE / DECODE
# =============================================================================


def encode_canonical(value: Any) -> bytes:
    """
    Каноническое кодирование значения в MessagePack.

    Args:
        value: Значение (обычно field map записи)

    Returns:
        Канонические байты

    Raises:
        TypeError: Если значение содержит неподдерживаемые типы
    """
    return msgpack.packb(canonicalize(value), use_bin_type=True)


def decode_map(data: bytes) -> Dict[Any, Any]:
    """
    Декодирование MessagePack map (запись транзакции).

    Args:
        data: Закодированная запись

    Returns:
        Field map (dict)

    Raises:
        DecodeError: Если байты не являются ровно одним MessagePack map,
            или map содержит значения без канонической формы (float,
            ключи не str/bytes/int)
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise DecodeError(f"expected bytes, got {type(data).__name__}")

    raw = bytes(data)
    if not raw:
        raise DecodeError("empty input")

    try:
        decoded = msgpack.unpackb(raw, raw=False, strict_map_key=False)
    except _MSGPACK_ERRORS as e:
        raise DecodeError(str(e) or type(e).__name__) from e

    if not isinstance(decoded, dict):
        raise DecodeError(f"top-level value is {type(decoded).__name__}, expected map")

    try:
        canonicalize(decoded)
    except TypeError as e:
        raise DecodeError(str(e)) from e

    return decoded
