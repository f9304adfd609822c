"""Сервисный модуль для работы с заявками, группами и комментариями."""

import logging
from datetime import datetime
from typing import Any, Mapping

from peewee import JOIN, ModelSelect, fn

from config import get_settings
from database.models import Comment, Group, Order, OrderStatus, User, db
from services.errors import ForbiddenError, NotFoundError
from services.export_service import export_orders_to_xlsx
from services.pagination import ListQuery, Page, paginate, resolve_paging
from services.query_utils import (
    build_criteria_conditions,
    build_order_by,
    build_order_conditions,
)
from services.validators import IdentifierKind, parse_identifier

logger = logging.getLogger(__name__)

ORDER_UPDATE_FIELDS = (
    "name",
    "surname",
    "phone",
    "email",
    "age",
    "course",
    "course_type",
    "course_format",
    "status",
    "sum",
    "already_paid",
)


# ──────────────────────────── Получение ─────────────────────────────


def _base_query() -> ModelSelect:
    """Заявки вместе с назначенным менеджером (LEFT JOIN)."""
    return Order.select(Order, User).join(
        User, JOIN.LEFT_OUTER, on=(Order.manager == User.id)
    )


def build_order_query(
    query: ListQuery | None = None, manager_id: int | None = None
) -> ModelSelect:
    """Собрать выборку заявок с фильтрами ``filter.*`` и сортировкой."""
    query = query or ListQuery()
    conditions = build_order_conditions(query.filter)
    if manager_id is not None:
        conditions.append(Order.manager == manager_id)

    select = _base_query()
    if conditions:
        select = select.where(*conditions)
    return select.order_by(*build_order_by(query.sort_by))


def get_orders_page(
    query: ListQuery | None = None, manager_id: int | None = None
) -> Page[Order]:
    """Вернуть страницу заявок.

    Параметры по умолчанию: страница 1, 25 записей, сортировка ``id DESC``.
    Если передан ``manager_id``, выдаются только заявки этого менеджера.

    Raises:
        BadRequestError: некорректный фильтр или колонка сортировки.
    """
    query = query or ListQuery()
    page, limit = resolve_paging(
        query.page, query.limit, get_settings().default_orders_limit
    )
    select = build_order_query(query, manager_id)
    total_count = select.order_by().count()
    return paginate(select, page, limit, total_count)


def get_my_orders(manager_id: int, query: ListQuery | None = None) -> Page[Order]:
    return get_orders_page(query, manager_id=manager_id)


def get_order_by_id(order_id: int | str) -> Order | None:
    ident = parse_identifier(order_id)
    if ident.kind is not IdentifierKind.ID or ident.value is None:
        return None
    return _base_query().where(Order.id == ident.value).first()


def get_order_by_identifier(identifier: int | str) -> Order | None:
    """Найти заявку по ``id`` или email клиента; ``None``, если её нет."""
    ident = parse_identifier(identifier)
    if ident.value is None:
        return None
    if ident.kind is IdentifierKind.EMAIL:
        condition = fn.LOWER(Order.email) == ident.value
    else:
        condition = Order.id == ident.value
    return _base_query().where(condition).order_by(Order.id).first()


def check_order(identifier: int | str) -> Order:
    """Raises :class:`NotFoundError`, если заявки нет."""
    order = get_order_by_identifier(identifier)
    if order is None:
        logger.warning("❗ Заявка %s не найдена", identifier)
        raise NotFoundError("Order not found")
    return order


def count_orders(
    criteria: Mapping[str, Any] | None = None, manager_id: int | None = None
) -> int:
    """Количество заявок, совпадающих с ``criteria`` поле-в-поле."""
    conditions = build_criteria_conditions(criteria)
    if manager_id is not None:
        conditions.append(Order.manager == manager_id)
    query = Order.select()
    if conditions:
        query = query.where(*conditions)
    return query.count()


def get_orders_statistic() -> dict[str, int]:
    """Общая статистика заявок по статусам, включая новые (``NULL``)."""
    return {
        "total": count_orders(),
        "inWork": count_orders({"status": OrderStatus.IN_WORK}),
        "agree": count_orders({"status": OrderStatus.AGREE}),
        "disagree": count_orders({"status": OrderStatus.DISAGREE}),
        "dubbing": count_orders({"status": OrderStatus.DUBBING}),
        "new": count_orders({"status": OrderStatus.NEW}),
    }


# ──────────────────────────── Выгрузка ─────────────────────────────


def get_orders_excel(
    use_my_orders: bool, query: ListQuery | None = None, manager_id: int | None = None
) -> bytes:
    """Выгрузить в Excel все заявки (или только свои) с учётом фильтров."""
    query = query or ListQuery()
    scope = manager_id if use_my_orders else None
    amount = count_orders(manager_id=scope)
    logger.info(
        "📊 Выгрузка заявок в Excel: %s, всего %d",
        "мои" if use_my_orders else "все",
        amount,
    )
    full_query = query.with_limit(max(amount, 1))
    full_query.page = 1
    result = get_orders_page(full_query, manager_id=scope)
    return export_orders_to_xlsx(result.data)


# ──────────────────────────── Группы ─────────────────────────────


def check_group(name: str) -> Group | None:
    return Group.get_or_none(Group.name == name)


def create_group(name: str) -> Group:
    """Вернуть группу с таким именем, создав её при необходимости."""
    with db.atomic():
        group, created = Group.get_or_create(name=name)
    if created:
        logger.info("➕ Создана группа %s", name)
    return group


def get_groups() -> list[Group]:
    return list(Group.select().order_by(Group.name))


# ──────────────────────────── Редактирование ─────────────────────────────


def _can_act_on(order: Order, user: User) -> bool:
    return order.manager_id is None or order.manager_id == user.id


def edit_order(identifier: int | str, patch: Mapping[str, Any], user: User) -> Order:
    """Изменить заявку от имени ``user`` и закрепить её за ним.

    Править можно свободную заявку или уже свою. Назначение менеджера
    выполняется одним условным ``UPDATE``: если между чтением и записью
    заявку забрал другой менеджер, строка не обновится и вернётся ошибка
    доступа.

    Raises:
        NotFoundError: заявка или группа не найдены.
        ForbiddenError: заявка закреплена за другим менеджером.
    """
    group = None
    if patch.get("group"):
        group = check_group(patch["group"])
        if group is None:
            logger.warning("❗ Группа %s не найдена", patch["group"])
            raise NotFoundError("Group not found")

    order = check_order(identifier)
    if not _can_act_on(order, user):
        logger.warning(
            "⛔ Менеджер #%s пытается изменить чужую заявку #%s", user.id, order.id
        )
        raise ForbiddenError("You do not have permission to edit this order")

    updates = {key: patch[key] for key in ORDER_UPDATE_FIELDS if key in patch}
    status = updates.get("status")
    if isinstance(status, OrderStatus):
        updates["status"] = status.stored
    elif status == OrderStatus.NEW.value:
        updates["status"] = None
    if group is not None:
        updates["group"] = group.name
    updates["manager"] = user.id

    with db.atomic():
        changed = (
            Order.update(**updates)
            .where(
                (Order.id == order.id)
                & (Order.manager.is_null(True) | (Order.manager == user.id))
            )
            .execute()
        )
    if not changed:
        logger.warning("⛔ Заявку #%s уже забрал другой менеджер", order.id)
        raise ForbiddenError("You do not have permission to edit this order")

    logger.info("✏️ Менеджер #%s изменил заявку #%s", user.id, order.id)
    return get_order_by_id(order.id)


# ──────────────────────────── Комментарии ─────────────────────────────


def add_comment(identifier: int | str, text: str, user: User) -> Comment:
    """Добавить комментарий к заявке.

    Комментарий к новой заявке переводит её в ``In work`` (и закрепляет за
    автором через :func:`edit_order`).

    Raises:
        NotFoundError: заявка не найдена.
        ForbiddenError: заявка закреплена за другим менеджером.
    """
    order = check_order(identifier)
    if not _can_act_on(order, user):
        raise ForbiddenError("You can not add comment")

    if order.status in (None, OrderStatus.NEW.value):
        edit_order(order.id, {"status": OrderStatus.IN_WORK}, user)

    comment = Comment.create(
        order=order.id,
        text=text,
        author=f"{user.name} {user.surname}",
        created_at=datetime.now(),
    )
    logger.info("💬 Комментарий к заявке #%s от %s", order.id, comment.author)
    return comment


def get_order_comments(order_id: int | str) -> list[Comment]:
    ident = parse_identifier(order_id)
    if ident.kind is not IdentifierKind.ID or ident.value is None:
        return []
    return list(
        Comment.select()
        .where(Comment.order == ident.value)
        .order_by(Comment.created_at, Comment.id)
    )
