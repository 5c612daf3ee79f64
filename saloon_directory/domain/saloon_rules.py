from __future__ import annotations

from dataclasses import dataclass

from saloon_directory.errors import DomainValidationError
from saloon_directory.schemas.saloon import Saloon, SaloonPayload, ServicePayload

# Maximum lengths, in characters, of client-supplied text fields
MAX_NAME_LENGTH = 200
MAX_LOCATION_LENGTH = 200
MAX_URL_LENGTH = 2048
MAX_SERVICE_NAME_LENGTH = 200
MAX_SERVICE_DESCRIPTION_LENGTH = 2000


def require_text(field_name: str, value: str, max_length: int) -> None:
    """Reject blank, overlong and non-UTF-8-encodable values for a required text field."""
    if not value or not value.strip():
        raise DomainValidationError(f"{field_name} must not be empty")
    if len(value) > max_length:
        raise DomainValidationError(
            f"{field_name} must be at most {max_length} characters long"
        )
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise DomainValidationError(f"{field_name} must be valid UTF-8 text") from None


def validate_saloon_payload(payload: SaloonPayload) -> None:
    """Fields are checked in order; the first failing one is reported."""
    require_text("name", payload.name, MAX_NAME_LENGTH)
    require_text("location", payload.location, MAX_LOCATION_LENGTH)
    require_text("saloon_url", payload.saloon_url, MAX_URL_LENGTH)


def validate_service_payload(payload: ServicePayload) -> None:
    require_text("service_name", payload.service_name, MAX_SERVICE_NAME_LENGTH)
    require_text(
        "service_description",
        payload.service_description,
        MAX_SERVICE_DESCRIPTION_LENGTH,
    )


@dataclass(frozen=True, slots=True)
class OwnershipPolicy:
    """Who may modify a saloon.

    Only the principal that created a saloon may change or delete it. The
    principal is opaque here; equality is the only operation applied to it.
    """

    caller: str

    def may_modify(self, saloon: Saloon) -> bool:
        return saloon.owner == self.caller
