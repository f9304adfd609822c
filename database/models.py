from datetime import datetime
from enum import Enum
from peewee import (
    Model,
    BooleanField,
    CharField,
    DateTimeField,
    ForeignKeyField,
    IntegerField,
    TextField,
)

from database.db import db


class BaseModel(Model):
    class Meta:
        database = db


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"


class User(BaseModel):
    name = CharField(null=True)
    surname = CharField(null=True)
    email = CharField(unique=True)
    password = CharField(null=True)
    status = CharField(null=True)
    is_active = BooleanField(default=False)
    last_login = DateTimeField(null=True)
    role = CharField(default=UserRole.MANAGER.value, index=True)
    created_at = DateTimeField(default=datetime.now)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.name, self.surname) if part)

    def __str__(self) -> str:
        return self.full_name or self.email


class OrderStatus(str, Enum):
    """Статусы заявки.

    ``NEW`` в базе хранится как ``NULL``: новые заявки приходят без статуса,
    поэтому фильтр и статистика по ``New`` ищут пустое значение.
    """

    NEW = "New"
    IN_WORK = "In work"
    AGREE = "Agree"
    DISAGREE = "Disagree"
    DUBBING = "Dubbing"

    @property
    def stored(self) -> str | None:
        """Значение, которое реально лежит в колонке ``status``."""
        return None if self is OrderStatus.NEW else self.value


class Group(BaseModel):
    name = CharField(unique=True)

    def __str__(self) -> str:
        return self.name


class Order(BaseModel):
    name = CharField(null=True)
    surname = CharField(null=True)
    email = CharField(null=True, index=True)
    phone = CharField(null=True)
    age = IntegerField(null=True)
    course = CharField(null=True)
    course_format = CharField(null=True)
    course_type = CharField(null=True)
    sum = IntegerField(null=True)
    already_paid = IntegerField(null=True)
    created_at = DateTimeField(default=datetime.now, index=True)
    utm = CharField(null=True)
    msg = TextField(null=True)
    status = CharField(null=True)
    group = CharField(null=True)
    manager = ForeignKeyField(User, null=True, backref="orders", on_delete="SET NULL")

    class Meta:
        table_name = "orders"

    def __str__(self) -> str:
        return f"#{self.id} {self.name or ''} {self.surname or ''}".strip()


class Comment(BaseModel):
    order = ForeignKeyField(Order, backref="comments", on_delete="CASCADE")
    author = CharField()
    text = TextField()
    created_at = DateTimeField(default=datetime.now)
