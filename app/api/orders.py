from fastapi import APIRouter, Depends, Response

from database.models import User
from services import order_service
from services.export_service import XLSX_MEDIA_TYPE
from services.pagination import ListQuery
from ..db import get_db
from ..deps import get_current_user, get_list_query
from ..schemas import (
    CommentCreate,
    CommentRead,
    GroupCreate,
    GroupRead,
    OrderRead,
    OrdersStatistic,
    OrderUpdate,
    PageResponse,
)

router = APIRouter(
    prefix="/orders",
    tags=["orders"],
    dependencies=[Depends(get_db)],
)


def _excel_response(payload: bytes, filename: str) -> Response:
    return Response(
        content=payload,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("", response_model=PageResponse[OrderRead])
def read_orders(
    query: ListQuery = Depends(get_list_query),
    user: User = Depends(get_current_user),
):
    return order_service.get_orders_page(query).to_dict()


@router.get("/my", response_model=PageResponse[OrderRead])
def read_my_orders(
    query: ListQuery = Depends(get_list_query),
    user: User = Depends(get_current_user),
):
    return order_service.get_my_orders(user.id, query).to_dict()


@router.get("/excel")
def export_orders(
    query: ListQuery = Depends(get_list_query),
    user: User = Depends(get_current_user),
):
    payload = order_service.get_orders_excel(False, query)
    return _excel_response(payload, "orders.xlsx")


@router.get("/my/excel")
def export_my_orders(
    query: ListQuery = Depends(get_list_query),
    user: User = Depends(get_current_user),
):
    payload = order_service.get_orders_excel(True, query, manager_id=user.id)
    return _excel_response(payload, "my_orders.xlsx")


@router.get("/statistic", response_model=OrdersStatistic)
def read_statistic(user: User = Depends(get_current_user)):
    return order_service.get_orders_statistic()


@router.get("/groups", response_model=list[GroupRead])
def read_groups(user: User = Depends(get_current_user)):
    return order_service.get_groups()


@router.post("/groups", response_model=GroupRead, status_code=201)
def add_group(group_in: GroupCreate, user: User = Depends(get_current_user)):
    return order_service.create_group(group_in.name)


@router.get("/{order_id}", response_model=OrderRead)
def read_order(order_id: str, user: User = Depends(get_current_user)):
    return order_service.check_order(order_id)


@router.patch("/{order_id}", response_model=OrderRead)
def edit_order(
    order_id: str,
    order_in: OrderUpdate,
    user: User = Depends(get_current_user),
):
    return order_service.edit_order(
        order_id, order_in.model_dump(exclude_unset=True), user
    )


@router.get("/{order_id}/comments", response_model=list[CommentRead])
def read_comments(order_id: str, user: User = Depends(get_current_user)):
    return order_service.get_order_comments(order_id)


@router.post("/{order_id}/comments", response_model=CommentRead, status_code=201)
def add_comment(
    order_id: str,
    comment_in: CommentCreate,
    user: User = Depends(get_current_user),
):
    return order_service.add_comment(order_id, comment_in.comment, user)
