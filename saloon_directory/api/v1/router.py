from fastapi import APIRouter

from saloon_directory.api.routers import saloons

api_router = APIRouter()

api_router.include_router(saloons.router)
