from fastapi import HTTPException

from servicebook.services.booking_store import (
    BookingStoreAvailabilityError,
    BookingStoreDuplicateError,
    BookingStoreError,
    BookingStoreNotFoundError,
    BookingStoreStateError,
)


def raise_store_http_error(exc: BookingStoreError) -> None:
    if isinstance(exc, BookingStoreNotFoundError):
        raise HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (BookingStoreDuplicateError, BookingStoreStateError, BookingStoreAvailabilityError)):
        raise HTTPException(status_code=409, detail=str(exc))
    raise HTTPException(status_code=400, detail=str(exc))
