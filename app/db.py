from database.db import db


def get_db():
    """Открыть соединение peewee на время запроса.

    Уже открытое соединение (например, in-memory SQLite в тестах) не
    закрывается.
    """
    opened = db.connect(reuse_if_open=True)
    try:
        yield db
    finally:
        if opened and not db.is_closed():
            db.close()
