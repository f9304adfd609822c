"""Выгрузка заявок в Excel.

Формирование документа не зависит от запросов к базе: на вход подаются уже
готовые строки, на выходе байты ``.xlsx``.
"""

import io
import logging
from typing import Any, Iterable, Sequence

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from database.models import Order
from utils.time_utils import format_timestamp

logger = logging.getLogger(__name__)

SHEET_NAME = "Orders"

ORDER_COLUMNS = [
    "id",
    "name",
    "surname",
    "email",
    "phone",
    "age",
    "course",
    "course_format",
    "course_type",
    "sum",
    "already_paid",
    "created_at",
    "status",
    "group",
    "manager",
]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

ROW_HEIGHT = 25
WIDTH_PADDING = 10

_THIN = Side(style="thin", color="000000")
_BORDER = Border(top=_THIN, right=_THIN, bottom=_THIN, left=_THIN)
_CENTER = Alignment(horizontal="center", vertical="center")
_HEADER_FONT = Font(name="Arial", size=14, bold=True, color="FFFFFF")
_HEADER_FILL = PatternFill(fill_type="solid", fgColor="696969")
_CELL_FONT = Font(name="Arial", size=14)


def order_to_row(order: Order) -> list[Any]:
    """Строка выгрузки для одной заявки; пустые значения становятся ``""``."""
    manager = order.manager if order.manager_id else None
    values = [
        order.id,
        order.name,
        order.surname,
        order.email,
        order.phone,
        order.age,
        order.course,
        order.course_format,
        order.course_type,
        order.sum,
        order.already_paid,
        format_timestamp(order.created_at),
        order.status,
        order.group,
        manager.name if manager else None,
    ]
    return ["" if value is None else value for value in values]


def _style_sheet(sheet: Worksheet) -> None:
    for row_idx, row in enumerate(sheet.iter_rows(), start=1):
        sheet.row_dimensions[row_idx].height = ROW_HEIGHT
        for cell in row:
            cell.border = _BORDER
            cell.alignment = _CENTER
            if row_idx == 1:
                cell.font = _HEADER_FONT
                cell.fill = _HEADER_FILL
            else:
                cell.font = _CELL_FONT

    for col_idx, column in enumerate(sheet.iter_cols(), start=1):
        max_length = max(
            (len(str(cell.value)) for cell in column if cell.value not in (None, "")),
            default=0,
        )
        sheet.column_dimensions[get_column_letter(col_idx)].width = (
            max_length + WIDTH_PADDING
        )


def render_orders_xlsx(rows: Iterable[Sequence[Any]]) -> bytes:
    """Собрать книгу Excel с листом ``Orders`` и вернуть её содержимое."""
    frame = pd.DataFrame(list(rows), columns=ORDER_COLUMNS, dtype=object)
    logger.debug("Строк для выгрузки: %d", len(frame))

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        frame.to_excel(writer, index=False, sheet_name=SHEET_NAME)
        _style_sheet(writer.sheets[SHEET_NAME])
    return buffer.getvalue()


def export_orders_to_xlsx(orders: Iterable[Order]) -> bytes:
    """Выгрузить заявки в Excel в каноническом порядке колонок."""
    return render_orders_xlsx(order_to_row(order) for order in orders)
