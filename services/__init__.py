"""Пакет прикладных сервисов бэк-офиса.

Подмодули не импортируются на уровне пакета: выгрузка в Excel тянет pandas,
а он не нужен для простого ``from services import manager_service``.

Импортируйте нужные подмодули напрямую, например:
    from services import order_service
    from services.errors import NotFoundError
"""

__all__: list[str] = []
