import datetime
import itertools

import pytest
from fastapi.testclient import TestClient

from database.models import Order, User, UserRole

_counter = itertools.count(1)


@pytest.fixture
def make_manager(in_memory_db):
    def factory(**kwargs) -> User:
        n = next(_counter)
        data = {
            "name": f"Manager{n}",
            "surname": f"Surname{n}",
            "email": f"manager{n}@example.com",
            "role": UserRole.MANAGER.value,
            "is_active": True,
        }
        data.update(kwargs)
        return User.create(**data)

    return factory


@pytest.fixture
def admin(make_manager) -> User:
    return make_manager(name="Admin", surname="Root", email="admin@example.com", role=UserRole.ADMIN.value)


@pytest.fixture
def make_order(in_memory_db):
    def factory(**kwargs) -> Order:
        n = next(_counter)
        data = {
            "name": f"Client{n}",
            "surname": f"Lastname{n}",
            "email": f"client{n}@mail.com",
            "phone": f"38050000{n:04d}",
            "age": 25,
            "course": "QACX",
            "course_format": "online",
            "course_type": "pro",
            "sum": 1000,
            "already_paid": 0,
            "created_at": datetime.datetime(2024, 1, 1, 12, 0),
        }
        data.update(kwargs)
        return Order.create(**data)

    return factory


@pytest.fixture
def api_client(in_memory_db):
    from app.main import app

    # без контекст-менеджера: lifespan с настройкой логов и БД не запускается
    return TestClient(app)