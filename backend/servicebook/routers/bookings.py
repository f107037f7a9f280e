from fastapi import APIRouter

from servicebook.models import (
    Booking,
    BookingPayload,
    BookingStatusUpdateRequest,
    RescheduleRequest,
    ReviewPayload,
)
from servicebook.routers.store_errors import raise_store_http_error
from servicebook.services.booking_store import BookingStoreError, booking_store

router = APIRouter(tags=["bookings"])


@router.post("/bookings", response_model=Booking)
def create_booking(payload: BookingPayload):
    try:
        return booking_store.create_booking(
            service_provider_id=payload.service_provider_id,
            client_id=payload.client_id,
            service_date=payload.service_date,
            service_type=payload.service_type,
        )
    except BookingStoreError as exc:
        raise_store_http_error(exc)


@router.get("/bookings/{booking_id}", response_model=Booking)
def get_booking(booking_id: str):
    try:
        return booking_store.get_booking(booking_id)
    except BookingStoreError as exc:
        raise_store_http_error(exc)


@router.post("/bookings/{booking_id}/reschedule", response_model=dict)
def reschedule_booking(booking_id: str, request: RescheduleRequest):
    try:
        booking_store.reschedule_booking(booking_id=booking_id, new_date=request.new_date)
    except BookingStoreError as exc:
        raise_store_http_error(exc)
    return {"status": "ok"}


@router.post("/bookings/{booking_id}/status", response_model=Booking)
def update_booking_status(booking_id: str, request: BookingStatusUpdateRequest):
    try:
        return booking_store.update_booking_status(booking_id=booking_id, status=request.status)
    except BookingStoreError as exc:
        raise_store_http_error(exc)


@router.post("/reviews", response_model=dict)
def add_review(payload: ReviewPayload):
    try:
        booking_store.add_review(booking_id=payload.booking_id, rating=payload.rating, comment=payload.comment)
    except BookingStoreError as exc:
        raise_store_http_error(exc)
    return {"status": "ok"}
