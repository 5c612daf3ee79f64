from fastapi import APIRouter, Depends, Query, status

from saloon_directory.api.deps import get_caller, get_saloon_service
from saloon_directory.schemas.saloon import Saloon, SaloonPayload, ServicePayload
from saloon_directory.services.saloon import SaloonService

router = APIRouter(prefix="/saloons", tags=["saloons"])


@router.get("", response_model=list[Saloon])
def list_saloons(
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=0),
    service: SaloonService = Depends(get_saloon_service),
):
    """
    List saloons in ascending id order.

    An offset past the last saloon yields an empty list.
    """
    return service.list_saloons(offset=offset, limit=limit)


@router.get("/search/by-name", response_model=list[Saloon])
def search_saloons_by_name(
    name: str,
    service: SaloonService = Depends(get_saloon_service),
):
    """Saloons whose name matches exactly (case-sensitive)."""
    return service.search_by_name(name)


@router.get("/search/by-location", response_model=list[Saloon])
def search_saloons_by_location(
    location: str,
    service: SaloonService = Depends(get_saloon_service),
):
    """Saloons whose location matches exactly (case-sensitive)."""
    return service.search_by_location(location)


@router.get("/{saloon_id}", response_model=Saloon)
def get_saloon_by_id(
    saloon_id: int,
    service: SaloonService = Depends(get_saloon_service),
):
    return service.get_saloon(saloon_id)


@router.post("", response_model=Saloon, status_code=status.HTTP_201_CREATED)
def create_new_saloon(
    saloon_data: SaloonPayload,
    caller: str = Depends(get_caller),
    service: SaloonService = Depends(get_saloon_service),
):
    """
    Create a new saloon. The caller becomes its owner.
    """
    return service.create_saloon(caller, saloon_data)


@router.put("/{saloon_id}", response_model=Saloon)
def update_saloon_by_id(
    saloon_id: int,
    saloon_data: SaloonPayload,
    caller: str = Depends(get_caller),
    service: SaloonService = Depends(get_saloon_service),
):
    """
    Update a saloon. Only its owner can update it.
    """
    return service.update_saloon(caller, saloon_id, saloon_data)


@router.delete("/{saloon_id}", response_model=Saloon)
def delete_saloon_by_id(
    saloon_id: int,
    caller: str = Depends(get_caller),
    service: SaloonService = Depends(get_saloon_service),
):
    """
    Delete a saloon and return it. Only its owner can delete it.
    """
    return service.delete_saloon(caller, saloon_id)


@router.post("/{saloon_id}/services", response_model=Saloon)
def add_saloon_service(
    saloon_id: int,
    service_data: ServicePayload,
    caller: str = Depends(get_caller),
    service: SaloonService = Depends(get_saloon_service),
):
    """
    Add a service to a saloon. Only the saloon owner can add services.
    """
    return service.add_service(caller, saloon_id, service_data)


@router.delete("/{saloon_id}/services/{service_name}", response_model=Saloon)
def delete_saloon_service(
    saloon_id: int,
    service_name: str,
    caller: str = Depends(get_caller),
    service: SaloonService = Depends(get_saloon_service),
):
    """
    Remove every service with the given name from a saloon.
    """
    return service.delete_service(caller, saloon_id, service_name)
