from functools import lru_cache

from fastapi import Header

from saloon_directory.core.config import settings
from saloon_directory.db.base import build_engine
from saloon_directory.errors import UnauthorizedError
from saloon_directory.services.saloon import SaloonService, build_saloon_service


@lru_cache(maxsize=1)
def get_saloon_service() -> SaloonService:
    """Process-wide saloon service; engine and tables are set up on first use."""
    engine = build_engine(settings.database_url)
    return build_saloon_service(engine, max_value_size=settings.max_value_size)


def get_caller(x_caller_principal: str | None = Header(default=None)) -> str:
    """
    Get the caller principal set by the upstream gateway.

    The value is opaque: it is verified upstream and only compared for
    equality against saloon owners here.
    """
    if x_caller_principal is None or not x_caller_principal.strip():
        raise UnauthorizedError("Missing caller principal")
    return x_caller_principal
