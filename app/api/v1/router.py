from fastapi import APIRouter

from app.api.v1.routes.user import router as user_router
from app.api.v1.routes.dish import router as dish_router
from app.api.v1.routes.group import router as group_router
from app.api.v1.routes.gacha import router as gacha_router

api_router = APIRouter()
api_router.include_router(user_router)
api_router.include_router(dish_router)
api_router.include_router(group_router)
api_router.include_router(gacha_router)
