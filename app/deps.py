"""Зависимости FastAPI: текущий пользователь и параметры списков."""

from fastapi import Depends, Header, HTTPException, Request

from database.models import User, UserRole
from services import manager_service
from services.errors import BadRequestError
from services.pagination import ListQuery
from services.validators import parse_int

from .db import get_db

FILTER_PREFIX = "filter."


def get_current_user(
    x_user_id: str | None = Header(default=None),
    _db=Depends(get_db),
) -> User:
    """Пользователь, от имени которого выполняется запрос.

    Проверка токена выполняется шлюзом перед API; сюда приходит уже
    установленная личность в заголовке ``X-User-Id`` (id или email).
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    user = manager_service.get_manager_by_identifier(x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.ADMIN.value:
        raise HTTPException(status_code=403, detail="Forbidden resource")
    return user


def _optional_int(value: str | None, name: str) -> int | None:
    if value is None or value == "":
        return None
    try:
        return parse_int(value)
    except ValueError:
        raise BadRequestError(f"Invalid {name} value") from None


def get_list_query(request: Request) -> ListQuery:
    """Разобрать ``page``, ``limit``, ``sortBy=col:DIR`` и ``filter.<ключ>``."""
    params = request.query_params
    sort_by: list[tuple[str, str]] = []
    for item in params.getlist("sortBy"):
        column, _, direction = item.partition(":")
        if column:
            sort_by.append((column.strip(), direction.strip()))

    filters: dict[str, str | list[str]] = {}
    for key, value in params.multi_items():
        if not key.startswith(FILTER_PREFIX):
            continue
        name = key[len(FILTER_PREFIX):]
        if name in filters:
            current = filters[name]
            filters[name] = (current if isinstance(current, list) else [current]) + [value]
        else:
            filters[name] = value

    page = _optional_int(params.get("page"), "page")
    return ListQuery(
        page=1 if page is None else page,
        limit=_optional_int(params.get("limit"), "limit"),
        sort_by=sort_by,
        filter=filters,
    )
