#!/usr/bin/env python3
"""Миграция базы данных: создание таблиц и, при необходимости, администратора."""

import argparse
import getpass
import logging

from database.init import create_tables, init_from_env
from database.models import User, UserRole
from database.db import db
from services.password_service import hash_password
from services.validators import normalize_email
from utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def ensure_admin(email: str, password: str, name: str = "admin", surname: str = "admin") -> User:
    """Создать администратора или выдать роль ``admin`` существующему пользователю."""
    email = normalize_email(email)
    user, created = User.get_or_create(
        email=email,
        defaults={
            "name": name,
            "surname": surname,
            "role": UserRole.ADMIN.value,
            "is_active": True,
            "password": hash_password(password),
        },
    )
    if not created and user.role != UserRole.ADMIN.value:
        user.role = UserRole.ADMIN.value
        user.save()
    logger.info("👤 Администратор %s %s", email, "создан" if created else "уже есть")
    return user


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--admin-email", help="email администратора")
    args = parser.parse_args(argv)

    setup_logging()
    init_from_env()
    create_tables()
    if args.admin_email:
        ensure_admin(args.admin_email, getpass.getpass("Пароль администратора: "))
    db.close()


if __name__ == "__main__":
    main()
