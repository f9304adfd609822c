from fastapi import APIRouter, Depends, Query

from services import manager_service
from ..db import get_db
from ..deps import require_admin
from ..schemas import (
    ManagerCreate,
    ManagerRead,
    ManagerStatistic,
    ManagerUpdate,
    PageResponse,
)

router = APIRouter(
    prefix="/managers",
    tags=["managers"],
    dependencies=[Depends(get_db), Depends(require_admin)],
)


@router.get("", response_model=PageResponse[ManagerRead])
def read_managers(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
):
    return manager_service.get_managers_page(page, limit).to_dict()


@router.post("/create", response_model=ManagerRead, status_code=201)
def add_manager(manager_in: ManagerCreate):
    return manager_service.create_manager(**manager_in.model_dump())


@router.get("/{manager_id}", response_model=ManagerRead)
def read_manager(manager_id: str):
    return manager_service.get_manager_by_id(manager_id)


@router.get("/{manager_id}/statistic", response_model=ManagerStatistic)
def read_manager_statistic(manager_id: str):
    return manager_service.get_manager_statistic(manager_id)


@router.patch("/{manager_id}", response_model=ManagerRead)
def edit_manager(manager_id: str, manager_in: ManagerUpdate):
    return manager_service.update_manager(
        manager_id, **manager_in.model_dump(exclude_unset=True)
    )
