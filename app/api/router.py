from fastapi import APIRouter

from .managers import router as managers_router
from .orders import router as orders_router

router = APIRouter()
router.include_router(managers_router)
router.include_router(orders_router)
