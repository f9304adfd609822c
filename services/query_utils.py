"""Utility helpers for building filtered Peewee queries over orders.

Фильтры описаны таблицей :data:`ORDER_FILTERS`: ключ параметра ``filter.*``
соответствует паре (разбор значения, построение условия). Неизвестные ключи
игнорируются.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from peewee import SQL, Field, Node, NodeList, fn

from database.models import Order, OrderStatus, User
from services.errors import BadRequestError
from services.pagination import FilterValue
from services.validators import parse_int
from utils.time_utils import parse_timestamp

logger = logging.getLogger(__name__)

DEFAULT_SORT: list[tuple[str, str]] = [("id", "desc")]


@dataclass(frozen=True)
class OrderFilter:
    parse: Callable[[FilterValue], Any]
    build: Callable[[Any], Node]


def _first(value: FilterValue) -> str:
    if isinstance(value, (list, tuple)):
        return value[0] if value else ""
    return value


def _as_list(value: FilterValue) -> list[str]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _parse_date(value: FilterValue):
    text = _first(value)
    try:
        return parse_timestamp(text)
    except (ValueError, OverflowError):
        raise BadRequestError("Invalid date value") from None


def _parse_age(value: FilterValue) -> int | list[int]:
    try:
        if isinstance(value, (list, tuple)):
            return [parse_int(item) for item in value]
        return parse_int(value)
    except ValueError:
        raise BadRequestError("Invalid age value") from None


LIKE_ESCAPE = "!"


def escape_like(value: str) -> str:
    """Экранировать ``%`` и ``_``, чтобы они искались как обычные символы."""
    for char in (LIKE_ESCAPE, "%", "_"):
        value = value.replace(char, LIKE_ESCAPE + char)
    return value


def _contains(field: Field) -> Callable[[str], Node]:
    # LOWER с обеих сторон: LIKE в PostgreSQL чувствителен к регистру
    def build(value):
        pattern = f"%{escape_like(str(value).lower())}%"
        return NodeList(
            (fn.LOWER(field), SQL("LIKE"), pattern, SQL(f"ESCAPE '{LIKE_ESCAPE}'")),
            parens=True,
        )

    return build


def _equals(field: Field) -> Callable[[Any], Node]:
    def build(value):
        if isinstance(value, list):
            return field.in_(value)
        return field == value

    return build


def _status_condition(values: list[str]) -> Node:
    condition: Node | None = None
    for value in values:
        if value == OrderStatus.NEW.value:
            expr = Order.status.is_null(True)
        else:
            expr = Order.status == value
        condition = expr if condition is None else (condition | expr)
    return condition


def _identity(value: FilterValue) -> FilterValue:
    return value


ORDER_FILTERS: dict[str, OrderFilter] = {
    "start_date": OrderFilter(_parse_date, lambda ts: Order.created_at >= ts),
    "end_date": OrderFilter(_parse_date, lambda ts: Order.created_at <= ts),
    "name": OrderFilter(_first, _contains(Order.name)),
    "surname": OrderFilter(_first, _contains(Order.surname)),
    "email": OrderFilter(_first, _contains(Order.email)),
    "phone": OrderFilter(_first, _contains(Order.phone)),
    "course": OrderFilter(_identity, _equals(Order.course)),
    "course_type": OrderFilter(_identity, _equals(Order.course_type)),
    "course_format": OrderFilter(_identity, _equals(Order.course_format)),
    "group": OrderFilter(_identity, _equals(Order.group)),
    "status": OrderFilter(_as_list, _status_condition),
    "manager": OrderFilter(_first, lambda name: User.name == name),
    "age": OrderFilter(_parse_age, _equals(Order.age)),
}


def build_order_conditions(filters: Mapping[str, FilterValue] | None) -> list[Node]:
    """Перевести словарь ``filter.*`` в список условий WHERE.

    Raises:
        BadRequestError: значение фильтра не удалось разобрать.
    """
    conditions: list[Node] = []
    if not filters:
        return conditions
    for key, value in filters.items():
        order_filter = ORDER_FILTERS.get(key)
        if order_filter is None:
            logger.debug("Пропускаем неизвестный фильтр %s=%r", key, value)
            continue
        if value is None or value == "" or value == []:
            continue
        conditions.append(order_filter.build(order_filter.parse(value)))
    return conditions


def build_criteria_conditions(criteria: Mapping[str, Any] | None) -> list[Node]:
    """Условия точного совпадения по полям заявки.

    ``None`` в значении означает ``IS NULL`` (так хранятся новые заявки),
    ``OrderStatus`` приводится к хранимому значению.
    """
    conditions: list[Node] = []
    for name, value in (criteria or {}).items():
        if name in ("manager", "manager_id", "managerId"):
            field = Order.manager
        else:
            field = Order._meta.fields.get(name)
            if field is None:
                raise ValueError(f"Неизвестное поле заявки: {name}")
        if isinstance(value, OrderStatus):
            value = value.stored
        conditions.append(field.is_null(True) if value is None else field == value)
    return conditions


def build_order_by(sort_by: Iterable[tuple[str, str]] | None) -> list[Node]:
    """Перевести пары (колонка, направление) в ORDER BY.

    Направление сравнивается без учёта регистра; всё, что не ``asc``,
    считается ``desc``. По умолчанию ``id DESC``.
    """
    pairs = list(sort_by or []) or DEFAULT_SORT
    ordering: list[Node] = []
    for column, direction in pairs:
        field = Order._meta.fields.get(column)
        if field is None:
            raise BadRequestError(f"Invalid sort column: {column}")
        is_asc = str(direction or "").lower() == "asc"
        ordering.append(field.asc() if is_asc else field.desc())
    return ordering
