import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from saloon_directory.core.clock import Clock, SystemClock
from saloon_directory.db.base import init_db
from saloon_directory.domain.saloon_rules import (
    OwnershipPolicy,
    validate_saloon_payload,
    validate_service_payload,
)
from saloon_directory.errors import (
    DomainValidationError,
    NotAuthorizedError,
    NotFoundError,
    UnauthorizedError,
)
from saloon_directory.repositories.id_counter import IdCounter
from saloon_directory.repositories.stable_map import DurableMap
from saloon_directory.schemas.saloon import (
    Saloon,
    SaloonPayload,
    SaloonService as SaloonServiceEntry,
    ServicePayload,
)

logger = logging.getLogger(__name__)

# Memory ids of the durable regions
ID_COUNTER_MEMORY_ID = 0
SALOON_MEMORY_ID = 1


class SaloonService:
    """
    Business operations on saloons and their embedded services.

    The service owns the saloon map and the id counter. Every operation runs
    under one lock and inside one database transaction, so operations never
    interleave and a failing operation leaves the store as it found it.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        saloons: DurableMap[Saloon],
        id_counter: IdCounter,
        clock: Clock,
    ):
        self._session_factory = session_factory
        self._saloons = saloons
        self._id_counter = id_counter
        self._clock = clock
        self._lock = threading.Lock()

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        with self._lock:
            with self._session_factory.begin() as db:
                yield db

    def _get_owned(self, db: Session, caller: str, saloon_id: int, action: str) -> Saloon:
        saloon = self._saloons.get(db, saloon_id)
        if saloon is None:
            raise NotFoundError(
                f"couldn't {action} a saloon with id={saloon_id}. saloon not found"
            )
        if not OwnershipPolicy(caller).may_modify(saloon):
            logger.warning(
                "Rejected %s on saloon %s: caller is not the owner", action, saloon_id
            )
            raise NotAuthorizedError(f"you are not the owner of saloon with id={saloon_id}")
        return saloon

    def _ensure_fits(self, saloon: Saloon, message: str) -> None:
        if not self._saloons.fits(saloon.id, saloon):
            raise DomainValidationError(message)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_saloons(self, offset: int = 0, limit: int = 50) -> list[Saloon]:
        """Saloons in ascending id order, skipping `offset` and returning at most `limit`."""
        with self._transaction() as db:
            return [saloon for _, saloon in self._saloons.iterate(db, offset=offset, limit=limit)]

    def get_saloon(self, saloon_id: int) -> Saloon:
        with self._transaction() as db:
            saloon = self._saloons.get(db, saloon_id)
        if saloon is None:
            raise NotFoundError(f"a saloon with id={saloon_id} not found")
        return saloon

    def search_by_name(self, name: str) -> list[Saloon]:
        with self._transaction() as db:
            return [saloon for _, saloon in self._saloons.iterate(db) if saloon.name == name]

    def search_by_location(self, location: str) -> list[Saloon]:
        with self._transaction() as db:
            return [
                saloon
                for _, saloon in self._saloons.iterate(db)
                if saloon.location == location
            ]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create_saloon(self, caller: str, payload: SaloonPayload) -> Saloon:
        """
        Create a saloon owned by the caller.

        Raises:
            DomainValidationError: If name, location or saloon_url is blank or too long
            UnauthorizedError: If the caller principal is empty
        """
        validate_saloon_payload(payload)
        if not caller:
            raise UnauthorizedError("a caller principal is required to create a saloon")

        with self._transaction() as db:
            saloon = Saloon(
                id=self._id_counter.next_id(db),
                owner=caller,
                name=payload.name,
                location=payload.location,
                saloon_url=payload.saloon_url,
                services=[],
                created_at=self._clock.now(),
                updated_at=None,
            )
            self._saloons.insert(db, saloon.id, saloon)

        logger.info("Created saloon %s", saloon.id)
        return saloon

    def update_saloon(self, caller: str, saloon_id: int, payload: SaloonPayload) -> Saloon:
        """
        Overwrite name, location and url of a saloon.

        Validation runs before the lookup, so an invalid payload is reported
        even when the saloon does not exist.

        Raises:
            DomainValidationError: If the payload is invalid
            NotFoundError: If the saloon doesn't exist
            NotAuthorizedError: If the caller is not the owner
        """
        validate_saloon_payload(payload)

        with self._transaction() as db:
            saloon = self._get_owned(db, caller, saloon_id, "update")
            saloon.name = payload.name
            saloon.location = payload.location
            saloon.saloon_url = payload.saloon_url
            saloon.updated_at = self._clock.now()
            self._ensure_fits(saloon, "the updated saloon is too large to store")
            self._saloons.insert(db, saloon.id, saloon)
        return saloon

    def add_service(self, caller: str, saloon_id: int, payload: ServicePayload) -> Saloon:
        """
        Append a service to a saloon.

        Raises:
            DomainValidationError: If the payload is invalid
                or the saloon would outgrow the storage bound
            NotFoundError: If the saloon doesn't exist
            NotAuthorizedError: If the caller is not the owner
        """
        validate_service_payload(payload)

        with self._transaction() as db:
            saloon = self._get_owned(db, caller, saloon_id, "add a service to")
            now = self._clock.now()
            saloon.services.append(
                SaloonServiceEntry(
                    service_name=payload.service_name,
                    service_description=payload.service_description,
                    created_at=now,
                    updated_at=None,
                )
            )
            saloon.updated_at = now
            self._ensure_fits(
                saloon, f"saloon with id={saloon_id} cannot hold any more services"
            )
            self._saloons.insert(db, saloon.id, saloon)
        return saloon

    def delete_service(self, caller: str, saloon_id: int, service_name: str) -> Saloon:
        """
        Remove every service of a saloon whose name equals `service_name`.

        Raises:
            NotFoundError: If the saloon doesn't exist, or no service has that name
            NotAuthorizedError: If the caller is not the owner
        """
        with self._transaction() as db:
            saloon = self._get_owned(db, caller, saloon_id, "delete a service from")
            remaining = [s for s in saloon.services if s.service_name != service_name]
            if len(remaining) == len(saloon.services):
                raise NotFoundError(
                    f"service '{service_name}' not found in saloon with id={saloon_id}"
                )
            saloon.services = remaining
            saloon.updated_at = self._clock.now()
            self._saloons.insert(db, saloon.id, saloon)
        return saloon

    def delete_saloon(self, caller: str, saloon_id: int) -> Saloon:
        """
        Delete a saloon and return it.

        The entry is removed before ownership is checked; a caller who is not
        the owner gets the entry re-inserted unchanged.

        Raises:
            NotFoundError: If the saloon doesn't exist
            NotAuthorizedError: If the caller is not the owner
        """
        with self._transaction() as db:
            saloon = self._saloons.remove(db, saloon_id)
            if saloon is None:
                raise NotFoundError(
                    f"couldn't delete a saloon with id={saloon_id}. saloon not found"
                )
            if not OwnershipPolicy(caller).may_modify(saloon):
                self._saloons.insert(db, saloon.id, saloon)
                logger.warning(
                    "Rejected delete on saloon %s: caller is not the owner", saloon_id
                )
                raise NotAuthorizedError(
                    f"you are not the owner of saloon with id={saloon_id}"
                )

        logger.info("Deleted saloon %s", saloon_id)
        return saloon


def build_saloon_service(
    engine: Engine, max_value_size: int, clock: Clock | None = None
) -> SaloonService:
    """Create the storage tables on `engine` and wire a service over them."""
    init_db(engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return SaloonService(
        session_factory=session_factory,
        saloons=DurableMap(SALOON_MEMORY_ID, Saloon, max_value_size),
        id_counter=IdCounter(ID_COUNTER_MEMORY_ID),
        clock=clock or SystemClock(),
    )
