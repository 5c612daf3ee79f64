from pydantic import BaseModel, ConfigDict, Field


class SaloonService(BaseModel):
    model_config = ConfigDict(extra="ignore")

    service_name: str
    service_description: str
    created_at: int
    updated_at: int | None = None


class Saloon(BaseModel):
    # Field order is the stored layout; new fields must be optional.
    model_config = ConfigDict(extra="ignore")

    id: int = Field(..., ge=0)
    owner: str
    name: str
    location: str
    saloon_url: str
    services: list[SaloonService] = Field(default_factory=list)
    created_at: int
    updated_at: int | None = None


class SaloonPayload(BaseModel):
    name: str
    location: str
    saloon_url: str


class ServicePayload(BaseModel):
    service_name: str
    service_description: str
