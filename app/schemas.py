from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from database.models import OrderStatus

T = TypeVar("T")


class ErrorResponse(BaseModel):
    statusCode: int
    message: str


class PageResponse(BaseModel, Generic[T]):
    data: list[T]
    page: int
    limit: int
    totalCount: int
    totalPages: int


# ──────────────────────────── Менеджеры ─────────────────────────────


class ManagerCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    surname: str = Field(min_length=1)
    email: EmailStr


class ManagerUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = None
    surname: str | None = None
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=5)
    status: str | None = None
    is_active: bool | None = None
    last_login: datetime | None = None


class ManagerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None = None
    surname: str | None = None
    email: str
    status: str | None = None
    is_active: bool
    last_login: datetime | None = None
    role: str


class ManagerBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None = None
    surname: str | None = None


class ManagerStatistic(BaseModel):
    total: int
    inWork: int
    agree: int
    disagree: int
    dubbing: int


# ──────────────────────────── Заявки ─────────────────────────────


class OrderUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = None
    surname: str | None = None
    email: str | None = None
    phone: str | None = None
    age: int | None = Field(default=None, ge=0)
    course: str | None = None
    course_type: str | None = None
    course_format: str | None = None
    status: OrderStatus | None = None
    sum: int | None = None
    already_paid: int | None = None
    group: str | None = None


class OrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None = None
    surname: str | None = None
    email: str | None = None
    phone: str | None = None
    age: int | None = None
    course: str | None = None
    course_format: str | None = None
    course_type: str | None = None
    sum: int | None = None
    already_paid: int | None = None
    created_at: datetime | None = None
    utm: str | None = None
    msg: str | None = None
    status: str | None = None
    group: str | None = None
    manager: ManagerBrief | None = None


class OrdersStatistic(ManagerStatistic):
    new: int


class CommentCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    comment: str = Field(min_length=1)


class CommentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    author: str
    text: str
    created_at: datetime
    order_id: int


class GroupCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)


class GroupRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
