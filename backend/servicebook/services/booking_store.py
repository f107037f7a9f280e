import logging
import os
import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Iterable, List, Set
from uuid import uuid4

from servicebook.models import Booking, Client, Review, ServiceProvider
from servicebook.services.record_collection import RecordCollection

logger = logging.getLogger(__name__)

MAX_TIMESTAMP = 2**64 - 1

BOOKING_STATUSES = {"Pending", "Confirmed", "Canceled", "Completed"}

BOOKING_RESCHEDULABLE_STATUSES = {"Pending", "Confirmed"}

BOOKING_TRANSITIONS: Dict[str, Set[str]] = {
    "Pending": {"Confirmed", "Canceled"},
    "Confirmed": {"Completed", "Canceled"},
}


class BookingStoreError(ValueError):
    """Base class for user-visible booking-store errors."""


class BookingStoreValidationError(BookingStoreError):
    pass


class BookingStoreNotFoundError(BookingStoreError):
    pass


class BookingStoreDuplicateError(BookingStoreError):
    pass


class BookingStoreStateError(BookingStoreError):
    pass


class BookingStoreAvailabilityError(BookingStoreError):
    pass


def now_ns() -> int:
    return time.time_ns()


def is_timestamp(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= MAX_TIMESTAMP


def compute_average_rating(reviews: Iterable[Review]) -> int:
    ratings = [review.rating for review in reviews]
    if not ratings:
        return 0
    return sum(ratings) // len(ratings)


@dataclass
class BookingStore:
    db_path: str

    def __post_init__(self) -> None:
        self._lock = Lock()
        path = Path(self.db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.db_path = str(path)
        self.providers: RecordCollection[ServiceProvider] = RecordCollection("providers", ServiceProvider)
        self.clients: RecordCollection[Client] = RecordCollection("clients", Client)
        self.bookings: RecordCollection[Booking] = RecordCollection("bookings", Booking)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        with self._lock:
            with self._connect() as conn:
                for collection in (self.providers, self.clients, self.bookings):
                    collection.ensure_table(conn)
                conn.commit()

    def _put_provider(self, conn: sqlite3.Connection, provider: ServiceProvider) -> ServiceProvider:
        # average_rating is derived from reviews on every write.
        provider = provider.model_copy(update={"average_rating": compute_average_rating(provider.reviews)})
        self.providers.insert(conn, provider.id, provider)
        return provider

    def _require_provider(self, conn: sqlite3.Connection, provider_id: str) -> ServiceProvider:
        provider = self.providers.get(conn, provider_id)
        if not provider:
            raise BookingStoreNotFoundError("Service provider not found")
        return provider

    def _require_booking(self, conn: sqlite3.Connection, booking_id: str) -> Booking:
        booking = self.bookings.get(conn, booking_id)
        if not booking:
            raise BookingStoreNotFoundError("Booking not found")
        return booking

    def _assert_available(self, provider: ServiceProvider, service_date: int) -> None:
        if not provider.availability:
            raise BookingStoreStateError("Service provider has no availability")
        if service_date not in provider.availability:
            raise BookingStoreAvailabilityError("Service provider is not available on the selected date")

    def _validate_timestamp(self, value: Any, *, field: str) -> int:
        if not is_timestamp(value):
            raise BookingStoreValidationError(f"{field} must be an unsigned 64-bit timestamp")
        return value

    def create_provider(
        self,
        *,
        name: str,
        service_type: str,
        contact_info: str,
        availability: List[Any],
    ) -> ServiceProvider:
        if not name.strip() or not service_type.strip() or not contact_info.strip():
            raise BookingStoreValidationError("name, service_type and contact_info are required")
        if not all(is_timestamp(slot) for slot in availability):
            raise BookingStoreValidationError("availability must contain unsigned 64-bit timestamps")

        provider = ServiceProvider(
            id=f"svc_{uuid4().hex}",
            name=name.strip(),
            service_type=service_type.strip(),
            contact_info=contact_info.strip(),
            created_at=now_ns(),
            average_rating=0,
            reviews=[],
            availability=list(dict.fromkeys(availability)),
        )
        with self._lock:
            with self._connect() as conn:
                provider = self._put_provider(conn, provider)
                conn.commit()
        logger.info("provider_created id=%s slots=%d", provider.id, len(provider.availability))
        return provider

    def get_provider(self, provider_id: str) -> ServiceProvider:
        with self._lock:
            with self._connect() as conn:
                return self._require_provider(conn, provider_id)

    def list_providers(self) -> List[ServiceProvider]:
        with self._lock:
            with self._connect() as conn:
                return self.providers.values(conn)

    def create_client(self, *, name: str, contact_info: str) -> Client:
        if not name.strip() or not contact_info.strip():
            raise BookingStoreValidationError("name and contact_info are required")
        normalized_contact = contact_info.strip()

        with self._lock:
            with self._connect() as conn:
                existing = self.clients.filter(conn, lambda c: c.contact_info == normalized_contact)
                if existing:
                    raise BookingStoreDuplicateError("A client with this contact info already exists")

                client = Client(id=f"cli_{uuid4().hex}", name=name.strip(), contact_info=normalized_contact)
                self.clients.insert(conn, client.id, client)
                conn.commit()
        logger.info("client_created id=%s", client.id)
        return client

    def get_client(self, client_id: str) -> Client:
        with self._lock:
            with self._connect() as conn:
                client = self.clients.get(conn, client_id)
        if not client:
            raise BookingStoreNotFoundError("Client not found")
        return client

    def create_booking(
        self,
        *,
        service_provider_id: str,
        client_id: str,
        service_date: int,
        service_type: str,
    ) -> Booking:
        self._validate_timestamp(service_date, field="service_date")

        with self._lock:
            with self._connect() as conn:
                provider = self._require_provider(conn, service_provider_id)
                if not self.clients.get(conn, client_id):
                    raise BookingStoreNotFoundError("Client not found")
                # Slots are not consumed; the same date can be booked twice.
                self._assert_available(provider, service_date)

                booking = Booking(
                    id=f"bk_{uuid4().hex}",
                    service_provider_id=service_provider_id,
                    client_id=client_id,
                    service_date=service_date,
                    service_type=service_type,
                    status="Pending",
                    created_at=now_ns(),
                )
                self.bookings.insert(conn, booking.id, booking)
                conn.commit()
        logger.info(
            "booking_created id=%s provider=%s client=%s date=%d",
            booking.id,
            service_provider_id,
            client_id,
            service_date,
        )
        return booking

    def get_booking(self, booking_id: str) -> Booking:
        with self._lock:
            with self._connect() as conn:
                return self._require_booking(conn, booking_id)

    def reschedule_booking(self, *, booking_id: str, new_date: int) -> None:
        self._validate_timestamp(new_date, field="new_date")

        with self._lock:
            with self._connect() as conn:
                booking = self._require_booking(conn, booking_id)
                if booking.status not in BOOKING_RESCHEDULABLE_STATUSES:
                    raise BookingStoreStateError("Only pending or confirmed bookings can be rescheduled")

                provider = self._require_provider(conn, booking.service_provider_id)
                self._assert_available(provider, new_date)

                updated = booking.model_copy(update={"service_date": new_date})
                self.bookings.insert(conn, updated.id, updated)
                conn.commit()
        logger.info("booking_rescheduled id=%s from=%d to=%d", booking_id, booking.service_date, new_date)

    def update_booking_status(self, *, booking_id: str, status: str) -> Booking:
        if status not in BOOKING_STATUSES:
            allowed = ", ".join(sorted(BOOKING_STATUSES))
            raise BookingStoreValidationError(f"Invalid status. Allowed: {allowed}")

        with self._lock:
            with self._connect() as conn:
                booking = self._require_booking(conn, booking_id)
                current_status = booking.status
                if status not in BOOKING_TRANSITIONS.get(current_status, set()):
                    raise BookingStoreStateError(f"Invalid status transition: {current_status} -> {status}")

                updated = booking.model_copy(update={"status": status})
                self.bookings.insert(conn, updated.id, updated)
                conn.commit()
        logger.info("booking_status id=%s %s -> %s", booking_id, current_status, status)
        return updated

    def add_review(self, *, booking_id: str, rating: int, comment: str) -> None:
        with self._lock:
            with self._connect() as conn:
                booking = self._require_booking(conn, booking_id)
                if booking.status != "Completed":
                    raise BookingStoreStateError("Only completed bookings can be reviewed")

                provider = self._require_provider(conn, booking.service_provider_id)
                # One review per client per provider, whatever the booking.
                if any(review.client_id == booking.client_id for review in provider.reviews):
                    raise BookingStoreDuplicateError("Client has already reviewed this service provider")
                if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
                    raise BookingStoreValidationError("Rating must be between 1 and 5")

                review = Review(
                    client_id=booking.client_id,
                    rating=rating,
                    comment=comment,
                    created_at=now_ns(),
                )
                provider = self._put_provider(
                    conn,
                    provider.model_copy(update={"reviews": [*provider.reviews, review]}),
                )
                conn.commit()
        logger.info(
            "review_added provider=%s client=%s rating=%d average=%d",
            provider.id,
            booking.client_id,
            rating,
            provider.average_rating,
        )

    def get_provider_history(self, provider_id: str) -> List[Booking]:
        with self._lock:
            with self._connect() as conn:
                bookings = self.bookings.filter(conn, lambda b: b.service_provider_id == provider_id)
        if not bookings:
            raise BookingStoreNotFoundError("No bookings found for this service provider")
        return bookings


default_db = str(Path(__file__).resolve().parents[2] / "data" / "servicebook.sqlite3")
booking_store = BookingStore(db_path=os.getenv("SERVICEBOOK_DB_PATH", default_db))
