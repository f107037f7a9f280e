from fastapi import APIRouter

from servicebook.models import Client, ClientPayload
from servicebook.routers.store_errors import raise_store_http_error
from servicebook.services.booking_store import BookingStoreError, booking_store

router = APIRouter(prefix="/clients", tags=["clients"])


@router.post("", response_model=Client)
def create_client(payload: ClientPayload):
    try:
        return booking_store.create_client(name=payload.name, contact_info=payload.contact_info)
    except BookingStoreError as exc:
        raise_store_http_error(exc)


@router.get("/{client_id}", response_model=Client)
def get_client(client_id: str):
    try:
        return booking_store.get_client(client_id)
    except BookingStoreError as exc:
        raise_store_http_error(exc)
