"""Сервисный модуль для управления менеджерами."""

import logging
from typing import Any

from peewee import fn

from config import get_settings
from database.models import OrderStatus, User, UserRole, db
from services import order_service
from services.errors import BadRequestError, NotFoundError
from services.pagination import Page, paginate, resolve_paging
from services.password_service import hash_password
from services.validators import IdentifierKind, is_email, normalize_email, parse_identifier

logger = logging.getLogger(__name__)

MANAGER_CREATE_FIELDS = ("name", "surname", "email")
MANAGER_UPDATE_FIELDS = ("name", "surname", "email", "status", "is_active", "last_login")


# ──────────────────────────── Получение ─────────────────────────────


def _managers():
    return User.select().where(User.role == UserRole.MANAGER.value)


def get_managers_page(page: int | None = None, limit: int | None = None) -> Page[User]:
    """Вернуть страницу менеджеров (только роль ``manager``)."""
    page, limit = resolve_paging(page, limit, get_settings().default_managers_limit)
    total_count = _managers().count()
    query = _managers().order_by(User.id.asc())
    return paginate(query, page, limit, total_count)


def get_manager_by_id(manager_id: int | str) -> User:
    """Получить пользователя по ``id``.

    Raises:
        NotFoundError: пользователь не найден.
    """
    ident = parse_identifier(manager_id)
    user = None
    if ident.kind is IdentifierKind.ID and ident.value is not None:
        user = User.get_or_none(User.id == ident.value)
    if user is None:
        logger.warning("❗ Пользователь id=%s не найден", manager_id)
        raise NotFoundError("User not found")
    return user


def get_manager_by_identifier(identifier: int | str) -> User | None:
    """Найти пользователя по email или ``id``; ``None``, если его нет."""
    ident = parse_identifier(identifier)
    if ident.value is None:
        return None
    if ident.kind is IdentifierKind.EMAIL:
        return User.get_or_none(fn.LOWER(User.email) == ident.value)
    return User.get_or_none(User.id == ident.value)


# ──────────────────────────── Добавление ─────────────────────────────


def create_manager(**kwargs) -> User:
    """Создать менеджера без пароля; email сохраняется в нижнем регистре.

    Raises:
        BadRequestError: email некорректен или уже занят любой учётной записью.
    """
    data = {key: kwargs.get(key) for key in MANAGER_CREATE_FIELDS}
    email = data.get("email")
    if not email:
        raise BadRequestError("Email is required")

    email = normalize_email(email)
    if not is_email(email):
        logger.warning("❌ Некорректный email: %r", email)
        raise BadRequestError("Email must be an email")
    if User.get_or_none(fn.LOWER(User.email) == email):
        logger.warning("❌ Email %s уже используется", email)
        raise BadRequestError("Email is already in use.")

    data["email"] = email
    with db.atomic():
        user = User.create(role=UserRole.MANAGER.value, **data)
    logger.info("✅ Создан менеджер #%s (%s)", user.id, user.email)
    return user


# ──────────────────────────── Обновление ─────────────────────────────


def update_manager(manager_id: int | str, **patch: Any) -> User:
    """Обновить менеджера.

    Поля из :data:`MANAGER_UPDATE_FIELDS`, присутствующие в ``patch``,
    записываются как есть (включая ``None``); пароль хешируется только если
    передан.
    """
    user = get_manager_by_id(manager_id)

    updates = {key: patch[key] for key in MANAGER_UPDATE_FIELDS if key in patch}
    if patch.get("password"):
        updates["password"] = hash_password(patch["password"])

    if not updates:
        return user

    logger.info(
        "✏️ Обновление менеджера #%s: %s",
        user.id,
        sorted(updates),
    )
    for key, value in updates.items():
        setattr(user, key, value)
    user.save()
    return user


# ──────────────────────────── Статистика ─────────────────────────────


def count_orders_for_manager(manager_id: int, status: OrderStatus | None = None) -> int:
    criteria = {"status": status} if status is not None else None
    return order_service.count_orders(criteria, manager_id=manager_id)


def get_manager_statistic(identifier: int | str) -> dict[str, int]:
    """Количество заявок менеджера по статусам.

    Raises:
        NotFoundError: менеджер не найден.
    """
    manager = get_manager_by_identifier(identifier)
    if manager is None:
        logger.warning("❗ Менеджер %s не найден", identifier)
        raise NotFoundError("Manager not found")

    return {
        "total": count_orders_for_manager(manager.id),
        "inWork": count_orders_for_manager(manager.id, OrderStatus.IN_WORK),
        "agree": count_orders_for_manager(manager.id, OrderStatus.AGREE),
        "disagree": count_orders_for_manager(manager.id, OrderStatus.DISAGREE),
        "dubbing": count_orders_for_manager(manager.id, OrderStatus.DUBBING),
    }
