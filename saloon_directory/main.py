import logging

from fastapi import FastAPI

from saloon_directory.api.exception_handlers import register_exception_handlers
from saloon_directory.api.v1.router import api_router
from saloon_directory.core.config import settings

logging.getLogger("saloon_directory").setLevel(settings.log_level)

app = FastAPI()

register_exception_handlers(app)
app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
def health():
    return {"status": "ok"}
