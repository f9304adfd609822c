"""Валидаторы и нормализаторы входных данных."""

import re
from enum import Enum
from typing import NamedTuple

# Достаточно строгий вариант проверки адреса: local@domain.tld без пробелов
_EMAIL_RE = re.compile(
    r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*"
    r"\.[A-Za-z]{2,}$"
)


class IdentifierKind(str, Enum):
    ID = "id"
    EMAIL = "email"


class Identifier(NamedTuple):
    """Разобранный идентификатор записи: либо ``id``, либо ``email``."""

    kind: IdentifierKind
    value: int | str | None


def is_email(value: str | None) -> bool:
    """Проверить, что строка синтаксически является email-адресом."""
    if not value or not isinstance(value, str):
        return False
    return bool(_EMAIL_RE.match(value.strip()))


def normalize_email(email: str) -> str:
    """Приводит email к нижнему регистру и убирает пробелы по краям."""
    return (email or "").strip().lower()


def parse_identifier(identifier: int | str) -> Identifier:
    """Определить тип идентификатора один раз на границе сервиса.

    Email ищется по адресу (без учёта регистра), всё остальное трактуется
    как числовой ``id``. Нечисловой не-email даёт ``Identifier(ID, None)``:
    такой записи заведомо нет.
    """
    if isinstance(identifier, int):
        return Identifier(IdentifierKind.ID, identifier)
    text = str(identifier).strip()
    if is_email(text):
        return Identifier(IdentifierKind.EMAIL, normalize_email(text))
    if text.isdigit():
        return Identifier(IdentifierKind.ID, int(text))
    return Identifier(IdentifierKind.ID, None)


def parse_int(value) -> int:
    """Разобрать целое число из строки или числа.

    Raises:
        ValueError: если значение не является целым числом.
    """
    if isinstance(value, bool):
        raise ValueError(f"Некорректное целое: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not re.fullmatch(r"[+-]?\d+", text):
        raise ValueError(f"Некорректное целое: {value!r}")
    return int(text)
